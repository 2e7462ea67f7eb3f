"""Chat-completion providers."""

from .client import (
    AnthropicClient,
    ChatClient,
    LLMConfig,
    LLMResponse,
    OpenAIClient,
    OpenRouterClient,
    create_client,
)

__all__ = [
    "AnthropicClient",
    "ChatClient",
    "LLMConfig",
    "LLMResponse",
    "OpenAIClient",
    "OpenRouterClient",
    "create_client",
]
