"""Language model access."""

from backend.app.llm.client import LLMClient, as_tool, get_llm

__all__ = ["LLMClient", "as_tool", "get_llm"]
