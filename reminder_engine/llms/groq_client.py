"""Implementation of the LLMInterface for Groq's OpenAI-compatible HTTP API.
"""

import logging
from typing import List, Any, Optional

import httpx

from reminder_engine.interfaces.llm_interface import LLMInterface, ChatMessage
from reminder_engine.core.config import Settings
from reminder_engine.features.errors import not_configured_error

logger = logging.getLogger(__name__)

class GroqClient(LLMInterface):
    """Posts chat completion requests to Groq with httpx."""

    provider_name = "Groq"
    api_key_env = "GROQ_API_KEY"
    CHAT_COMPLETIONS_ENDPOINT = "/chat/completions"

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        """Initializes the Groq client.

        Args:
            settings: The application settings containing Groq configuration.
            http_client: Optional httpx client (tests pass one with a mock transport).

        Raises:
            ProviderNotConfiguredError: If no API key is configured.
        """
        if not settings.groq_api_key:
            raise not_configured_error(self.provider_name, self.api_key_env)
        self.api_key = settings.groq_api_key
        self.base_url = settings.groq_base_url.rstrip("/")
        self.default_model = settings.groq_model
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        self.http_client = http_client or httpx.Client(timeout=settings.request_timeout)
        logger.info(f"Groq client initialized for {self.base_url} with model: {self.default_model}")

    def close(self):
        """Close the underlying HTTP client."""
        self.http_client.close()
        logger.info("Groq HTTP client closed.")

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] or "Groq request failed."
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return "Groq request failed."

    def generate(self, prompt: str, model: str | None = None, **kwargs: Any) -> str:
        return self.chat([ChatMessage(role="user", content=prompt)], model=model, **kwargs).content

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Generates a chat response from Groq.

        Raises:
            httpx.HTTPStatusError: For non-2xx responses; the message carries
                the provider's error text.
            httpx.TransportError: For network failures.
        """
        target_model = model or self.default_model
        body: dict[str, Any] = {
            "model": target_model,
            "messages": [msg.model_dump() for msg in messages],
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if kwargs.get("json_mode"):
            body["response_format"] = {"type": "json_object"}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}{self.CHAT_COMPLETIONS_ENDPOINT}"

        logger.debug(f"Posting Groq chat completion. Model: {target_model}")
        response = self.http_client.post(url, headers=headers, json=body)
        if response.is_error:
            message = self._error_message(response)
            logger.error(f"Groq API error: {response.status_code} - {message}")
            raise httpx.HTTPStatusError(message, request=response.request, response=response)

        data = response.json()
        choices = data.get("choices") or []
        content = ""
        if choices:
            content = ((choices[0].get("message") or {}).get("content") or "").strip()
        logger.debug(f"Groq response (first 50 chars): '{content[:50]}...'")
        return ChatMessage(role="assistant", content=content)
