"""Tests for the configuration loading.
"""

import os
from unittest.mock import patch

from reminder_engine.core.config import Settings, get_settings

def test_settings_loading_directly():
    """Test that Settings can be initialized directly with values.

    Bypasses environment variables and .env files.
    """
    test_values = {
        "environment": "testing",
        "debug": True,
        "llm_provider": "groq",
        "groq_api_key": "gsk_test",
        "groq_model": "test-model",
        "ollama_base_url": "http://localhost:11435",
        "min_source_chars": 5,
        "currency_symbol": "€",
    }
    # Explicitly disable .env file reading when passing direct values
    settings = Settings(**test_values, _env_file=None)

    assert isinstance(settings, Settings)
    assert settings.environment == "testing"
    assert settings.debug is True
    assert settings.llm_provider == "groq"
    assert settings.groq_api_key == "gsk_test"
    assert settings.groq_model == "test-model"
    assert settings.ollama_base_url == "http://localhost:11435"
    assert settings.min_source_chars == 5
    assert settings.currency_symbol == "€"

def test_settings_defaults():
    """Test that Settings use default values when environment variables are not set.

    Also prevents reading any actual .env file.
    """
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.environment == "development"
    assert settings.debug is False
    assert settings.llm_provider == "openai"
    assert settings.openai_api_key is None
    assert settings.groq_api_key is None
    assert settings.groq_base_url == "https://api.groq.com/openai/v1"
    assert settings.llm_temperature == 0.2
    assert settings.llm_max_tokens == 1000
    assert settings.min_source_chars == 20
    assert settings.currency_symbol == "$"
    assert settings.api_port == 8000

def test_settings_read_from_environment():
    env = {
        "LLM_PROVIDER": "ollama",
        "OPENAI_API_KEY": "sk-from-env",
        "MIN_SOURCE_CHARS": "42",
        "API_RELOAD": "true",
    }
    with patch.dict(os.environ, env, clear=True):
        settings = get_settings()

    assert settings.llm_provider == "ollama"
    assert settings.openai_api_key == "sk-from-env"
    assert settings.min_source_chars == 42
    assert settings.api_reload is True
