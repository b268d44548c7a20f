"""Dependencies module for the Reminder Engine.

This module defines FastAPI dependencies used throughout the application.
"""

import logging
from datetime import date

from fastapi import Depends

from reminder_engine.core.config import Settings, get_settings
from reminder_engine.interfaces.llm_interface import LLMInterface
from reminder_engine.llms.groq_client import GroqClient
from reminder_engine.llms.ollama_client import OllamaClient
from reminder_engine.llms.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

# --- Singleton instances for services (cached per application lifecycle) ---
_llm_service: LLMInterface | None = None
# ---------------------------------------------------------------------------

LLM_PROVIDERS = {
    "openai": OpenAIClient,
    "groq": GroqClient,
    "ollama": OllamaClient,
}

def create_llm_client(settings: Settings) -> LLMInterface:
    """Builds the LLM client selected by `settings.llm_provider`.

    Raises:
        ValueError: If the provider name is not one of LLM_PROVIDERS.
        ProviderNotConfiguredError: If the selected provider has no API key.
    """
    provider = settings.llm_provider.strip().lower()
    client_cls = LLM_PROVIDERS.get(provider)
    if client_cls is None:
        raise ValueError(
            f"Unknown LLM provider '{settings.llm_provider}'. Expected one of: {', '.join(LLM_PROVIDERS)}"
        )
    return client_cls(settings=settings)

# --- Service Dependencies (Manual Singleton Pattern with Injected Settings) ---

def get_llm_service(settings: Settings = Depends(get_settings)) -> LLMInterface:
    """Provides the singleton LLMInterface instance, using injected settings."""
    global _llm_service
    if _llm_service is None:
        logger.info(f"Creating LLM client singleton for provider: {settings.llm_provider}")
        _llm_service = create_llm_client(settings)
    return _llm_service

def get_today() -> date:
    """Provides the current date; overridden in tests for determinism."""
    return date.today()

def reset_singletons():
    """Resets service singletons that depend on configurable settings."""
    global _llm_service
    if _llm_service is None:
        logger.info("reset_singletons called, but no relevant services needed resetting.")
        return

    close = getattr(_llm_service, "close", None)
    if callable(close):
        close()
    logger.info("Resetting LLM service singleton due to potential settings change.")
    _llm_service = None
