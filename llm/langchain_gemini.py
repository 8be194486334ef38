import logging
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.messages import HumanMessage

from config import config
from llm.base import extract_text

logger = logging.getLogger(__name__)


class LangChainGeminiClient:
    """
    Client for Google's Gemini models via LangChain.
    """

    def __init__(self) -> None:
        """
        Raises ValueError if the API key is missing.
        """
        self.api_key = config.llm.gemini_api_key
        if not self.api_key:
            logger.error("GEMINI_API_KEY not found in configuration")
            raise ValueError("GEMINI_API_KEY is required")

        self.model_name = config.llm.gemini_model
        self.llm = ChatGoogleGenerativeAI(
            model=self.model_name,
            google_api_key=self.api_key,
            temperature=config.llm.temperature,
            max_output_tokens=config.llm.max_tokens,
        )

        logger.info(f"Initialized LangChain Gemini client with model: {self.model_name}")

    def generate(self, prompt: str) -> str:
        try:
            response = self.llm.invoke([HumanMessage(content=prompt)])
            logger.debug(f"Gemini response content type: {type(response.content)}")
            return extract_text(response.content)
        except Exception as e:
            logger.error(f"LangChain Gemini generation failed: {e}")
            return f"Error generating response: {str(e)}"
