from .base_backend import BaseGenerationBackend, Completion
from .catalog import PROVIDER_CATALOG, build_backends
from .chat_backend import ChatCompletionBackend, GroqBackend, OpenAIBackend
from .ollama_backend import OllamaBackend

__all__ = [
    "BaseGenerationBackend",
    "Completion",
    "PROVIDER_CATALOG",
    "build_backends",
    "ChatCompletionBackend",
    "GroqBackend",
    "OpenAIBackend",
    "OllamaBackend",
]
