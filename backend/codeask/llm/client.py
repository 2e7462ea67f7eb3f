from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, Optional

import requests
from pydantic import BaseModel

from ..config import DEFAULT_MODELS
from ..errors import ConfigurationError


class LLMResponse(BaseModel):
    content: Optional[str] = None
    finish_reason: str
    usage: Optional[Dict[str, int]] = None
    time_taken: float
    error: str | None = None


@dataclass
class LLMConfig:
    provider: str = "anthropic"
    api_key: Optional[str] = None
    model: str = DEFAULT_MODELS["anthropic"]
    max_tokens: int = 4096
    temperature: float = 0.7
    timeout: int = 120

    @classmethod
    def from_dict(cls, cfg: Dict) -> "LLMConfig":
        provider = str(cfg.get("provider") or "anthropic").strip().lower()
        return cls(
            provider=provider,
            api_key=cfg.get("api_key"),
            model=cfg.get("model") or DEFAULT_MODELS.get(provider, DEFAULT_MODELS["anthropic"]),
            max_tokens=int(cfg.get("max_tokens", 4096)),
            temperature=float(cfg.get("temperature", 0.7)),
        )


class ChatClient:
    """Send one user prompt, get one completion back.

    Transport and provider errors come back in ``LLMResponse.error``.
    """

    url: str = ""

    def __init__(self, config: LLMConfig):
        self.config = config
        if not config.api_key:
            raise ConfigurationError("No API key configured. Please run setup first.")

    def _headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def _payload(self, prompt: str) -> Dict:
        raise NotImplementedError

    def _parse(self, data: Dict) -> tuple[str, str, Dict[str, int]]:
        raise NotImplementedError

    def _complete(self, prompt: str) -> LLMResponse:
        start_time = time.time()
        try:
            response = requests.post(
                self.url,
                headers=self._headers(),
                json=self._payload(prompt),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            content, finish_reason, usage = self._parse(response.json())
            return LLMResponse(
                content=content.strip(),
                finish_reason=finish_reason,
                usage=usage,
                time_taken=time.time() - start_time,
            )
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            return LLMResponse(
                finish_reason="error",
                time_taken=time.time() - start_time,
                error=str(e),
            )

    async def complete(self, prompt: str) -> LLMResponse:
        return await asyncio.to_thread(self._complete, prompt)


class AnthropicClient(ChatClient):
    url = "https://api.anthropic.com/v1/messages"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": "2023-06-01",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: str) -> Dict:
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _parse(self, data: Dict) -> tuple[str, str, Dict[str, int]]:
        text = "".join(block.get("text", "") for block in data["content"] if block.get("type") == "text")
        usage = data.get("usage", {})
        prompt_tokens = usage.get("input_tokens", 0)
        completion_tokens = usage.get("output_tokens", 0)
        return text, data.get("stop_reason") or "stop", {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        }


class OpenAIClient(ChatClient):
    url = "https://api.openai.com/v1/chat/completions"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: str) -> Dict:
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _parse(self, data: Dict) -> tuple[str, str, Dict[str, int]]:
        choice = data["choices"][0]
        usage = data.get("usage", {})
        return choice.get("message", {}).get("content") or "", choice.get("finish_reason", "stop"), {
            "prompt_tokens": usage.get("prompt_tokens", 0),
            "completion_tokens": usage.get("completion_tokens", 0),
            "total_tokens": usage.get("total_tokens", 0),
        }


class OpenRouterClient(OpenAIClient):
    url = "https://openrouter.ai/api/v1/chat/completions"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["HTTP-Referer"] = "https://github.com/codeask/codeask"
        headers["X-Title"] = "codeask"
        return headers


_CLIENTS = {
    "anthropic": AnthropicClient,
    "openai": OpenAIClient,
    "openrouter": OpenRouterClient,
}


def create_client(config: LLMConfig) -> ChatClient:
    try:
        client_cls = _CLIENTS[config.provider]
    except KeyError:
        raise ConfigurationError(f"Unsupported provider: {config.provider}") from None
    return client_cls(config)
