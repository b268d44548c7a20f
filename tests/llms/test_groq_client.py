"""Unit tests for the Groq HTTP client."""

import json
import pytest

import httpx

from reminder_engine.core.config import Settings
from reminder_engine.features.errors import (
    ProviderNotConfiguredError,
    ProviderRateLimitError,
    classify_provider_error,
)
from reminder_engine.interfaces.llm_interface import ChatMessage, LLMInterface
from reminder_engine.llms.groq_client import GroqClient

@pytest.fixture
def groq_settings():
    return Settings(
        _env_file=None,
        groq_api_key="gsk_test",
        groq_model="llama-test",
        groq_base_url="https://groq.test/openai/v1/",
        llm_temperature=0.2,
        llm_max_tokens=300,
    )

def _client_with(handler, settings):
    return GroqClient(settings, http_client=httpx.Client(transport=httpx.MockTransport(handler)))

def test_missing_api_key_raises_not_configured():
    with pytest.raises(ProviderNotConfiguredError) as exc_info:
        GroqClient(Settings(_env_file=None, groq_api_key=None))
    assert "GROQ_API_KEY" in exc_info.value.message

def test_chat_posts_openai_compatible_request(groq_settings):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "choices": [{"message": {"role": "assistant", "content": '  {"tasks": []}  '}}]
        })

    client = _client_with(handler, groq_settings)
    reply = client.chat([ChatMessage(role="user", content="hello")], json_mode=True, max_tokens=50)

    assert isinstance(client, LLMInterface)
    assert reply == ChatMessage(role="assistant", content='{"tasks": []}')
    assert captured["url"] == "https://groq.test/openai/v1/chat/completions"
    assert captured["auth"] == "Bearer gsk_test"
    assert captured["body"] == {
        "model": "llama-test",
        "messages": [{"role": "user", "content": "hello"}],
        "temperature": 0.2,
        "max_tokens": 50,
        "response_format": {"type": "json_object"},
    }

def test_generate_returns_content(groq_settings):
    def handler(request):
        return httpx.Response(200, json={"choices": [{"message": {"content": "hi there"}}]})

    client = _client_with(handler, groq_settings)
    assert client.generate("say hi", model="other-model") == "hi there"

def test_empty_choices_give_empty_content(groq_settings):
    client = _client_with(lambda request: httpx.Response(200, json={"choices": []}), groq_settings)
    assert client.chat([ChatMessage(role="user", content="x")]).content == ""

def test_error_response_carries_provider_message(groq_settings):
    def handler(request):
        return httpx.Response(429, json={"error": {"message": "Rate limit reached for model llama-test"}})

    client = _client_with(handler, groq_settings)
    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        client.chat([ChatMessage(role="user", content="x")])

    assert str(exc_info.value) == "Rate limit reached for model llama-test"
    error = classify_provider_error(exc_info.value, provider=client.provider_name, api_key_env=client.api_key_env)
    assert isinstance(error, ProviderRateLimitError)
    assert error.status_code == 429

def test_error_response_without_json_body(groq_settings):
    client = _client_with(lambda request: httpx.Response(502, text="Bad Gateway"), groq_settings)
    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        client.chat([ChatMessage(role="user", content="x")])
    assert str(exc_info.value) == "Bad Gateway"
