import logging
from typing import Any, Protocol

from config import config

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


def extract_text(content: Any) -> str:
    """
    Flatten a LangChain message content into plain text.

    Newer providers return a list of parts (dicts with "text" or bare
    strings) instead of a single string.
    """
    if isinstance(content, list):
        text_parts = []
        for part in content:
            if isinstance(part, dict) and "text" in part:
                text_parts.append(part["text"])
            elif isinstance(part, str):
                text_parts.append(part)
        result = "".join(text_parts)
        if not result:
            logger.warning(f"LLM returned empty content from list format: {content}")
        return result

    if not content:
        logger.warning("LLM returned empty string content")
    return str(content) if content else ""


def get_llm_client() -> TextGenerator:
    """
    Build the configured chat client.

    Azure OpenAI is the default provider; "gemini" selects Google Gemini.

    Raises:
        ValueError: If the selected provider is missing credentials.
    """
    if config.llm.provider == "gemini":
        from llm.langchain_gemini import LangChainGeminiClient
        return LangChainGeminiClient()

    from llm.langchain_azure import LangChainAzureClient
    return LangChainAzureClient()
