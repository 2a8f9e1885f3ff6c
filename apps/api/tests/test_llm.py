from __future__ import annotations

import httpx
import pytest

from app.config import Settings
from app.llm import GeminiClient, MockLLMClient, ProviderError, get_llm_client


def _gemini(handler) -> GeminiClient:
    config = Settings(gemini_api_key="test-key", gemini_model="gemini-1.5-flash")
    return GeminiClient(config, transport=httpx.MockTransport(handler))


def test_mock_client_mentions_title() -> None:
    summary = MockLLMClient().generate_summary("Summarize this:\n\nLecture title: Karma Yoga\nChapter: 3")
    assert "Karma Yoga" in summary


def test_gemini_returns_candidate_text() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = request.read()
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "  The soul is eternal. "}]}}]},
        )

    assert _gemini(handler).generate_summary("prompt text") == "The soul is eternal."
    assert seen["path"] == "/v1beta/models/gemini-1.5-flash:generateContent"
    assert seen["key"] == "test-key"
    assert b"prompt text" in seen["body"]


def test_gemini_http_error_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "quota"}})

    with pytest.raises(ProviderError):
        _gemini(handler).generate_summary("prompt")


def test_gemini_malformed_response_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"promptFeedback": {}})

    with pytest.raises(ProviderError):
        _gemini(handler).generate_summary("prompt")


def test_gemini_network_error_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError):
        _gemini(handler).generate_summary("prompt")


def test_gemini_requires_key() -> None:
    with pytest.raises(ProviderError):
        GeminiClient(Settings(gemini_api_key=None))


def test_get_llm_client_selection() -> None:
    assert isinstance(get_llm_client(Settings(llm_provider="mock", gemini_api_key=None)), MockLLMClient)
    assert isinstance(get_llm_client(Settings(llm_provider="gemini", gemini_api_key="k")), GeminiClient)
    assert isinstance(get_llm_client(Settings(llm_provider="mock", gemini_api_key="k")), GeminiClient)
    with pytest.raises(ProviderError):
        get_llm_client(Settings(llm_provider="bard", gemini_api_key=None))
    with pytest.raises(ProviderError):
        get_llm_client(Settings(llm_provider="mock", environment="production", gemini_api_key=None))
