from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import Settings, settings as default_settings


class ProviderError(RuntimeError):
    """Raised by an ``LLMClient`` when no summary text could be produced."""


class LLMClient:
    name: str = "base"
    model: str = ""

    def generate_summary(self, prompt: str) -> str:
        raise NotImplementedError


class MockLLMClient(LLMClient):
    name = "mock"
    model = "mock"

    def generate_summary(self, prompt: str) -> str:
        lines = [line.strip() for line in prompt.splitlines() if line.strip()]
        title = ""
        for line in lines:
            if line.startswith("Lecture title:"):
                title = line.split(":", 1)[1].strip()
                break
        subject = title or "this lecture"
        return (
            f"Summary of {subject}: an overview of the main teachings discussed, "
            "generated with MockLLMClient."
        )


class GeminiClient(LLMClient):
    name = "gemini"

    def __init__(self, config: Settings, transport: Optional[httpx.BaseTransport] = None) -> None:
        if not config.gemini_api_key:
            raise ProviderError("GEMINI_API_KEY is required for GeminiClient")
        self._logger = logging.getLogger("lectures.llm.gemini")
        self._api_key = config.gemini_api_key
        self.model = config.gemini_model
        self._base_url = config.gemini_base_url.rstrip("/")
        self._timeout = httpx.Timeout(config.llm_timeout_seconds, connect=10.0)
        self._transport = transport

    def _endpoint(self) -> str:
        model_name = self.model
        if not model_name.startswith("models/"):
            model_name = f"models/{model_name}"
        return f"{self._base_url}/v1beta/{model_name}:generateContent"

    def generate_summary(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    self._endpoint(),
                    headers={"x-goog-api-key": self._api_key},
                    json=body,
                )
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Gemini API: {type(exc).__name__}: {exc}") from exc

        if response.status_code != 200:
            self._logger.error("Gemini error: %s - %s", response.status_code, response.text[:500])
            raise ProviderError(f"Gemini error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("Gemini response is not JSON") from exc

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise ProviderError("Gemini response missing candidates")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()
        if not text:
            raise ProviderError("Gemini response missing text")
        return text


class OpenAIClient(LLMClient):
    name = "openai"

    def __init__(self, config: Settings) -> None:
        if not config.openai_api_key:
            raise ProviderError("OPENAI_API_KEY is required for OpenAIClient")
        from openai import OpenAI
        import certifi

        self.model = config.openai_model
        self._timeout = config.llm_timeout_seconds
        timeout = httpx.Timeout(config.llm_timeout_seconds, connect=10.0)
        self.client = OpenAI(
            api_key=config.openai_api_key,
            base_url="https://api.openai.com/v1",
            max_retries=0,
            http_client=httpx.Client(
                timeout=timeout,
                http2=False,
                trust_env=False,
                verify=certifi.where(),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            ),
        )

    def generate_summary(self, prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                timeout=self._timeout,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
            )
        except Exception as exc:  # noqa: BLE001
            cause = getattr(exc, "__cause__", None) or getattr(exc, "__context__", None)
            detail = f"OpenAI request failed: {type(exc).__name__}: {exc}"
            if cause:
                detail += f" | cause: {type(cause).__name__}: {cause}"
            raise ProviderError(detail) from exc
        if not response.choices:
            raise ProviderError("OpenAI response missing choices")
        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise ProviderError("OpenAI response missing text")
        return text


def _is_production(config: Settings) -> bool:
    return config.environment.lower().strip() in {"production", "prod"}


def get_llm_client(config: Optional[Settings] = None) -> LLMClient:
    config = config or default_settings
    provider = config.llm_provider.lower().strip()
    if _is_production(config) and provider == "mock" and not config.gemini_api_key:
        raise ProviderError("A real LLM provider is required in production")
    if provider == "gemini" or (provider == "mock" and config.gemini_api_key):
        return GeminiClient(config)
    if provider == "openai":
        return OpenAIClient(config)
    if provider != "mock":
        raise ProviderError(f"Unknown LLM provider: {config.llm_provider}")
    return MockLLMClient()
