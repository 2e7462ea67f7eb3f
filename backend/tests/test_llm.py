"""Tests for chat-completion clients."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from codeask.errors import ConfigurationError
from codeask.llm import AnthropicClient, LLMConfig, OpenAIClient, OpenRouterClient, create_client


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.mark.parametrize(
    "provider,cls",
    [("anthropic", AnthropicClient), ("openai", OpenAIClient), ("openrouter", OpenRouterClient)],
)
def test_create_client(provider, cls):
    client = create_client(LLMConfig(provider=provider, api_key="key", model="m"))
    assert type(client) is cls


def test_unsupported_provider():
    with pytest.raises(ConfigurationError):
        create_client(LLMConfig(provider="cohere", api_key="key"))


def test_missing_key():
    with pytest.raises(ConfigurationError, match="No API key configured"):
        create_client(LLMConfig(provider="openai", api_key=None))


def test_config_from_dict_defaults_model():
    config = LLMConfig.from_dict({"provider": "OpenAI", "api_key": "k", "model": None})
    assert config.provider == "openai"
    assert config.model == "gpt-4o"


async def test_anthropic_completion():
    client = AnthropicClient(LLMConfig(provider="anthropic", api_key="key", model="claude"))
    payload = {
        "content": [{"type": "text", "text": "  It logs users in. "}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 10, "output_tokens": 5},
    }
    with patch("codeask.llm.client.requests.post", return_value=_response(payload)) as post:
        result = await client.complete("What does auth.py do?")

    assert result.error is None
    assert result.content == "It logs users in."
    assert result.finish_reason == "end_turn"
    assert result.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
    _, kwargs = post.call_args
    assert kwargs["headers"]["x-api-key"] == "key"
    assert kwargs["json"]["messages"] == [{"role": "user", "content": "What does auth.py do?"}]


async def test_openrouter_completion():
    client = OpenRouterClient(LLMConfig(provider="openrouter", api_key="key", model="x/y"))
    payload = {
        "choices": [{"message": {"content": "Answer"}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
    }
    with patch("codeask.llm.client.requests.post", return_value=_response(payload)) as post:
        result = await client.complete("q")

    assert result.content == "Answer"
    args, kwargs = post.call_args
    assert args[0] == OpenRouterClient.url
    assert kwargs["headers"]["Authorization"] == "Bearer key"
    assert kwargs["headers"]["X-Title"] == "codeask"


async def test_transport_error_is_reported_not_raised():
    client = OpenAIClient(LLMConfig(provider="openai", api_key="key", model="gpt-4o"))
    with patch("codeask.llm.client.requests.post", side_effect=requests.ConnectionError("refused")):
        result = await client.complete("q")
    assert result.content is None
    assert result.finish_reason == "error"
    assert "refused" in result.error
