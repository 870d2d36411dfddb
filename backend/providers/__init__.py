from providers.base import BaseProvider
from providers.openai_provider import OpenAIProvider, get_provider


__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "get_provider",
]
