"""
LangChain Azure OpenAI client for growth analysis prompts.
"""

import logging
from langchain_openai import AzureChatOpenAI
from langchain_core.messages import HumanMessage

from config import config
from llm.base import extract_text

logger = logging.getLogger(__name__)

SAFETY_FILTER_MESSAGE = (
    "The analysis was blocked by a content safety filter. "
    "Please try again later."
)


class LangChainAzureClient:
    """
    Client for Azure-hosted OpenAI chat models via LangChain.
    """

    def __init__(self) -> None:
        """
        Raises ValueError if required Azure configuration is missing.
        """
        if not config.llm.azure_openai_api_key:
            logger.error("AZURE_OPENAI_API_KEY not found in configuration")
            raise ValueError("AZURE_OPENAI_API_KEY is required")

        if not config.llm.azure_openai_endpoint:
            logger.error("AZURE_OPENAI_ENDPOINT not found in configuration")
            raise ValueError("AZURE_OPENAI_ENDPOINT is required")

        if not config.llm.azure_openai_deployment_name:
            logger.error("AZURE_OPENAI_DEPLOYMENT not found in configuration")
            raise ValueError("AZURE_OPENAI_DEPLOYMENT is required")

        self.deployment_name = config.llm.azure_openai_deployment_name
        self.llm = AzureChatOpenAI(
            azure_endpoint=config.llm.azure_openai_endpoint,
            api_key=config.llm.azure_openai_api_key,
            api_version=config.llm.azure_openai_api_version,
            deployment_name=self.deployment_name,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
        )

        logger.info(f"Azure OpenAI client initialized with deployment: {self.deployment_name}")

    def generate(self, prompt: str) -> str:
        """
        Generate a response, retrying on Gemini when Azure's content
        filter blocks the prompt.

        Returns:
            Generated text, or an error message string on failure.
        """
        try:
            response = self.llm.invoke([HumanMessage(content=prompt)])
            logger.debug(f"Azure LLM response type: {type(response)}")
            return extract_text(response.content)

        except Exception as e:
            error_msg = str(e).lower()
            if "content filter" in error_msg or "content_filter" in error_msg:
                logger.warning(f"Azure content filter triggered, attempting Gemini fallback: {e}")
                return self._gemini_fallback(prompt)

            logger.error(f"LangChain Azure OpenAI generation failed: {e}")
            return f"Error generating response: {str(e)}"

    def _gemini_fallback(self, prompt: str) -> str:
        try:
            from llm.langchain_gemini import LangChainGeminiClient

            if not config.llm.gemini_api_key:
                logger.error("Gemini fallback unavailable: GEMINI_API_KEY not set")
                return SAFETY_FILTER_MESSAGE

            result = LangChainGeminiClient().generate(prompt)
            logger.info("Gemini fallback succeeded after Azure content filter block")
            return result

        except Exception as fallback_err:
            logger.error(f"Gemini fallback also failed: {fallback_err}")
            return SAFETY_FILTER_MESSAGE
