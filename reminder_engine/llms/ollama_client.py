"""Implementation of the LLMInterface using the Ollama API.
"""

import logging
import ollama
from typing import List, Any

from reminder_engine.interfaces.llm_interface import LLMInterface, ChatMessage
from reminder_engine.core.config import Settings

logger = logging.getLogger(__name__)

class OllamaClient(LLMInterface):
    """Connects to a local Ollama instance to provide LLM capabilities.

    Implements the LLMInterface protocol.
    """

    provider_name = "Ollama"
    api_key_env = "OLLAMA_BASE_URL"

    def __init__(self, settings: Settings):
        """Initializes the Ollama client.

        Args:
            settings: The application settings containing Ollama configuration.
        """
        self.client = ollama.Client(host=settings.ollama_base_url)
        self.default_model = settings.default_model
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        logger.info(f"Ollama client initialized for host: {settings.ollama_base_url}")

    def generate(self, prompt: str, model: str | None = None, **kwargs: Any) -> str:
        """Generates text for a single user prompt via the chat endpoint."""
        return self.chat([ChatMessage(role="user", content=prompt)], model=model, **kwargs).content

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Generates a chat response using the Ollama /api/chat endpoint.

        Args:
            messages: A list of ChatMessage Pydantic models.
            model: The model to use (defaults to settings.default_model).
            **kwargs: `temperature`, `max_tokens` and `json_mode` are mapped
                onto Ollama options and the `format` parameter.

        Returns:
            A ChatMessage Pydantic model representing the assistant's response.

        Raises:
            ollama.ResponseError: If the Ollama API returns an error.
        """
        target_model = model or self.default_model
        request: dict[str, Any] = {
            "model": target_model,
            "messages": [msg.model_dump() for msg in messages],
            "options": {
                "temperature": kwargs.get("temperature", self.temperature),
                "num_predict": kwargs.get("max_tokens", self.max_tokens),
            },
            "stream": False,
        }
        if kwargs.get("json_mode"):
            request["format"] = "json"

        try:
            logger.debug(f"Generating chat response with model '{target_model}'. History length: {len(messages)}")
            response = self.client.chat(**request)
            assistant_message = response.get('message', {})
            role = assistant_message.get('role', 'assistant')
            content = (assistant_message.get('content') or '').strip()
            logger.debug(f"Generated chat response (first 50 chars): '{content[:50]}...'")
            return ChatMessage(role=role, content=content)
        except ollama.ResponseError as e:
            logger.error(f"Ollama API error during chat: {e.status_code} - {e.error}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error during Ollama chat: {e}", exc_info=True)
            raise
