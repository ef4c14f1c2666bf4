"""Chat-completion backends used to answer assembled prompts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generator

from openai import OpenAI

from pastechat.core.config import ConfigManager
from pastechat.core.errors import BackendConfigurationError
from pastechat.core.logging import get_logger

DEFAULT_MODEL = "gpt-4o-mini"


@dataclass
class AIResponse:
    text: str


class DummyBackend:
    """Offline backend that echoes the prompt back."""

    def __init__(self, _config: ConfigManager | None = None) -> None:
        pass

    def send(self, prompt: str) -> AIResponse:
        return AIResponse(text=f"Echo: {prompt}")

    def stream(self, prompt: str) -> Generator[str, None, None]:
        yield self.send(prompt).text


class OpenAICompatibleBackend:
    """Backend for any server speaking the OpenAI chat-completions API."""

    def __init__(self, config: ConfigManager) -> None:
        self.logger = get_logger(__name__)
        ai_cfg = config.section("ai")
        self.endpoint = (ai_cfg.get("endpoint") or "https://api.openai.com").rstrip("/")
        self.model = ai_cfg.get("model") or DEFAULT_MODEL
        self.temperature = ai_cfg.get("temperature", 0.2)
        self.timeout = ai_cfg.get("timeout_seconds")
        self.api_key = config.api_key()

        base_url = self.endpoint
        if not base_url.endswith("/v1"):
            base_url = f"{base_url}/v1"
        self.client: OpenAI | None = None
        if self.api_key:
            client_config: dict[str, object] = {"base_url": base_url, "api_key": self.api_key}
            if self.timeout:
                client_config["timeout"] = float(self.timeout)
            self.client = OpenAI(**client_config)
        self.logger.info("[OpenAI] Initialized with model=%s, endpoint=%s, has_api_key=%s",
                         self.model, base_url, bool(self.api_key))

    def _messages(self, prompt: str) -> list[dict[str, str]]:
        return [{"role": "user", "content": prompt}]

    def _require_client(self) -> OpenAI:
        if self.client is None:
            message = "API key not configured. Set ai.api_key in settings.yaml or OPENAI_API_KEY."
            self.logger.error("[OpenAI] %s", message)
            raise BackendConfigurationError(message)
        return self.client

    def send(self, prompt: str) -> AIResponse:
        completion = self._require_client().chat.completions.create(
            model=self.model,
            messages=self._messages(prompt),
            temperature=self.temperature,
        )
        if not completion.choices:
            return AIResponse(text="No choices in response")
        return AIResponse(text=completion.choices[0].message.content or "")

    def stream(self, prompt: str) -> Generator[str, None, None]:
        stream = self._require_client().chat.completions.create(
            model=self.model,
            messages=self._messages(prompt),
            temperature=self.temperature,
            stream=True,
        )
        for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content


BACKENDS = {
    "dummy": DummyBackend,
    "openai": OpenAICompatibleBackend,
}


class AIClient:
    """Selects a backend from configuration and forwards requests to it."""

    def __init__(self, config: ConfigManager) -> None:
        self.config = config
        self.logger = get_logger(__name__)
        name = str(config.section("ai").get("backend") or "openai").lower()
        backend_cls = BACKENDS.get(name)
        if backend_cls is None:
            self.logger.warning("Unknown AI backend %r; using the echo backend", name)
            backend_cls = DummyBackend
        self.backend_name = name if name in BACKENDS else "dummy"
        self.backend = backend_cls(config)

    def send(self, prompt: str) -> AIResponse:
        self.logger.info("Sending prompt (%d chars) to %s backend", len(prompt), self.backend_name)
        return self.backend.send(prompt)

    def stream(self, prompt: str) -> Generator[str, None, None]:
        self.logger.info("Streaming prompt (%d chars) from %s backend", len(prompt), self.backend_name)
        yield from self.backend.stream(prompt)


__all__ = ["AIClient", "AIResponse", "DummyBackend", "OpenAICompatibleBackend"]
