from llm.factory import create_providers
from llm.provider import LLMError, LLMProvider, LLMResponse

__all__ = ["LLMError", "LLMProvider", "LLMResponse", "create_providers"]
