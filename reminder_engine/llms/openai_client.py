"""Implementation of the LLMInterface using the OpenAI SDK.
"""

import logging
from typing import List, Any

from openai import OpenAI, APIError

from reminder_engine.interfaces.llm_interface import LLMInterface, ChatMessage
from reminder_engine.core.config import Settings
from reminder_engine.features.errors import not_configured_error

logger = logging.getLogger(__name__)

class OpenAIClient(LLMInterface):
    """Calls OpenAI chat completions. Implements the LLMInterface protocol."""

    provider_name = "OpenAI"
    api_key_env = "OPENAI_API_KEY"

    def __init__(self, settings: Settings, client: OpenAI | None = None):
        """Initializes the OpenAI client.

        Args:
            settings: The application settings containing OpenAI configuration.
            client: Optional preconfigured SDK client (used in tests).

        Raises:
            ProviderNotConfiguredError: If no API key is configured.
        """
        if client is None and not settings.openai_api_key:
            raise not_configured_error(self.provider_name, self.api_key_env)
        self.client = client or OpenAI(api_key=settings.openai_api_key, timeout=settings.request_timeout)
        self.default_model = settings.openai_model
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        logger.info(f"OpenAI client initialized with model: {self.default_model}")

    def generate(self, prompt: str, model: str | None = None, **kwargs: Any) -> str:
        return self.chat([ChatMessage(role="user", content=prompt)], model=model, **kwargs).content

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Generates a chat response using the chat completions endpoint.

        `json_mode=True` asks the API for a JSON object response.

        Raises:
            openai.APIError: If the OpenAI API returns an error.
        """
        target_model = model or self.default_model
        request: dict[str, Any] = {
            "model": target_model,
            "messages": [msg.model_dump() for msg in messages],
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if kwargs.get("json_mode"):
            request["response_format"] = {"type": "json_object"}

        try:
            logger.debug(f"Sending chat completion request to OpenAI. Model: {target_model}")
            response = self.client.chat.completions.create(**request)
            content = (response.choices[0].message.content or "").strip() if response.choices else ""
            logger.debug(f"OpenAI response (first 50 chars): '{content[:50]}...'")
            return ChatMessage(role="assistant", content=content)
        except APIError as e:
            logger.error(f"OpenAI API error during chat: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error during OpenAI chat: {e}", exc_info=True)
            raise
