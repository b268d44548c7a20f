"""Unit tests for the OpenAI and Ollama clients and the provider factory."""

import pytest
from unittest.mock import MagicMock, patch

from reminder_engine.core import dependencies as core_deps
from reminder_engine.core.config import Settings
from reminder_engine.features.errors import ProviderNotConfiguredError
from reminder_engine.interfaces.llm_interface import ChatMessage
from reminder_engine.llms.groq_client import GroqClient
from reminder_engine.llms.ollama_client import OllamaClient
from reminder_engine.llms.openai_client import OpenAIClient

def _openai_completion(content):
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = content
    return completion

# --- OpenAI ---

def test_openai_missing_key_raises_not_configured():
    with pytest.raises(ProviderNotConfiguredError) as exc_info:
        OpenAIClient(Settings(_env_file=None, openai_api_key=None))
    assert "OPENAI_API_KEY" in exc_info.value.message

def test_openai_chat_json_mode():
    sdk_client = MagicMock()
    sdk_client.chat.completions.create.return_value = _openai_completion('  {"tasks": []}\n')
    settings = Settings(_env_file=None, openai_model="gpt-test", llm_temperature=0.3, llm_max_tokens=200)

    client = OpenAIClient(settings, client=sdk_client)
    reply = client.chat([ChatMessage(role="system", content="sys"), ChatMessage(role="user", content="hi")], json_mode=True)

    assert reply.content == '{"tasks": []}'
    sdk_client.chat.completions.create.assert_called_once_with(
        model="gpt-test",
        messages=[{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}],
        temperature=0.3,
        max_tokens=200,
        response_format={"type": "json_object"},
    )

def test_openai_chat_without_json_mode_and_null_content():
    sdk_client = MagicMock()
    sdk_client.chat.completions.create.return_value = _openai_completion(None)
    client = OpenAIClient(Settings(_env_file=None), client=sdk_client)

    assert client.generate("hello") == ""
    assert "response_format" not in sdk_client.chat.completions.create.call_args.kwargs

def test_openai_errors_propagate():
    sdk_client = MagicMock()
    sdk_client.chat.completions.create.side_effect = RuntimeError("network down")
    client = OpenAIClient(Settings(_env_file=None), client=sdk_client)

    with pytest.raises(RuntimeError):
        client.chat([ChatMessage(role="user", content="hi")])

# --- Ollama ---

def test_ollama_chat_maps_options_and_json_format():
    with patch("reminder_engine.llms.ollama_client.ollama.Client") as mock_client_constructor:
        mock_instance = mock_client_constructor.return_value
        mock_instance.chat.return_value = {"message": {"role": "assistant", "content": ' {"tasks": []} '}}
        settings = Settings(_env_file=None, ollama_base_url="http://ollama.test:11434", default_model="llama-test")

        client = OllamaClient(settings)
        reply = client.chat([ChatMessage(role="user", content="hi")], json_mode=True, temperature=0.0)

    mock_client_constructor.assert_called_once_with(host="http://ollama.test:11434")
    assert reply == ChatMessage(role="assistant", content='{"tasks": []}')
    mock_instance.chat.assert_called_once_with(
        model="llama-test",
        messages=[{"role": "user", "content": "hi"}],
        options={"temperature": 0.0, "num_predict": settings.llm_max_tokens},
        stream=False,
        format="json",
    )

# --- Provider factory and singletons ---

@pytest.mark.parametrize("provider, expected_cls", [
    ("openai", OpenAIClient),
    ("Groq", GroqClient),
    ("ollama", OllamaClient),
])
def test_create_llm_client(provider, expected_cls):
    settings = Settings(_env_file=None, llm_provider=provider, openai_api_key="sk-test", groq_api_key="gsk-test")
    with patch("reminder_engine.llms.ollama_client.ollama.Client"), \
         patch("reminder_engine.llms.openai_client.OpenAI"):
        client = core_deps.create_llm_client(settings)
    assert isinstance(client, expected_cls)

def test_create_llm_client_unknown_provider():
    with pytest.raises(ValueError):
        core_deps.create_llm_client(Settings(_env_file=None, llm_provider="anthropic"))

def test_create_llm_client_missing_key():
    with pytest.raises(ProviderNotConfiguredError):
        core_deps.create_llm_client(Settings(_env_file=None, llm_provider="groq", groq_api_key=None))

def test_get_llm_service_is_a_singleton_until_reset():
    settings = Settings(_env_file=None, llm_provider="ollama")
    core_deps.reset_singletons()
    try:
        with patch("reminder_engine.llms.ollama_client.ollama.Client"):
            first = core_deps.get_llm_service(settings)
            second = core_deps.get_llm_service(settings)
            assert first is second
            core_deps.reset_singletons()
            assert core_deps.get_llm_service(settings) is not first
    finally:
        core_deps.reset_singletons()
