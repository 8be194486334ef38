"""
LangChain chat clients used for AI growth analysis.
"""

from llm.base import get_llm_client

__all__ = ["get_llm_client"]
