"""Interface definition for Large Language Model (LLM) services.
"""

from typing import Protocol, List, Any, runtime_checkable

from pydantic import BaseModel, Field

class ChatMessage(BaseModel):
    """Model representing a single message in a chat conversation."""
    role: str = Field(..., description="The role of the message sender (e.g., 'user', 'assistant', 'system').")
    content: str = Field(..., description="The content of the message.")

@runtime_checkable
class LLMInterface(Protocol):
    """A protocol defining the standard interface for LLM interactions.

    This ensures that different LLM backends (OpenAI, Groq, Ollama)
    can be used interchangeably by the extraction service. Only request
    construction differs between providers; the returned text always goes
    through the same normalization pipeline.
    """

    provider_name: str
    api_key_env: str

    def generate(self, prompt: str, model: str | None = None, **kwargs: Any) -> str:
        """Generates a text completion based on a single prompt.

        Args:
            prompt: The input text prompt.
            model: The specific model to use (optional, uses default if None).
            **kwargs: Additional keyword arguments for the LLM backend.

        Returns:
            The generated text completion.
        """
        ...

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Generates a response based on a conversation history (list of messages).

        Args:
            messages: A list of ChatMessage objects representing the conversation history.
            model: The specific model to use (optional, uses default if None).
            **kwargs: Additional keyword arguments for the LLM backend. All
                backends understand `temperature`, `max_tokens` and `json_mode`.

        Returns:
            A ChatMessage object representing the assistant's response.
        """
        ...
