"""Error taxonomy for reminder extraction.

Parse problems (`UnparsableResponseError`) are recovered inside the pipeline
and never reach callers. Transport and authorization problems are raised as
`ProviderError` subclasses whose message tells the user what to do next.
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

class ReminderEngineError(Exception):
    """Base class for all reminder engine errors."""

class UnparsableResponseError(ReminderEngineError, ValueError):
    """Raised when no JSON payload can be decoded from a model response."""

class UnreadableInputError(ReminderEngineError, ValueError):
    """Raised when the source text is empty or too short to extract from."""

class ProviderError(ReminderEngineError):
    """A failure talking to the language model provider."""

    def __init__(self, message: str, provider: str = "LLM", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code

class ProviderNotConfiguredError(ProviderError):
    """Credentials for the provider are missing."""

class ProviderAuthError(ProviderError):
    """The provider rejected the configured credentials."""

class ProviderRateLimitError(ProviderError):
    """Quota or rate limit exhausted on the provider side."""

class ProviderOverloadedError(ProviderError):
    """The provider is temporarily unavailable."""

_AUTH_RE = re.compile(r"invalid_api_key|invalid api key|unauthorized", re.IGNORECASE)
_RATE_RE = re.compile(r"quota|resource_exhausted|\brate\b|rate[ _-]?limit", re.IGNORECASE)
_OVERLOAD_RE = re.compile(r"overloaded", re.IGNORECASE)

def _status_code_of(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None

def not_configured_error(provider: str, api_key_env: str) -> ProviderNotConfiguredError:
    return ProviderNotConfiguredError(
        f"{provider} API key not configured. Set {api_key_env} in .env and restart the server.",
        provider=provider,
    )

def classify_provider_error(
    exc: BaseException,
    provider: str = "LLM",
    api_key_env: str = "the API key",
    fallback_message: str = "Failed to process text",
) -> ProviderError:
    """Maps a transport exception to a typed ProviderError with an actionable message.

    Args:
        exc: The exception raised by the provider client.
        provider: Human readable provider name used in messages.
        api_key_env: Name of the environment variable holding the key.
        fallback_message: Message used when the exception carries none.

    Returns:
        A ProviderError subclass instance. Already-classified errors are
        returned unchanged.
    """
    if isinstance(exc, ProviderError):
        return exc

    status = _status_code_of(exc)
    message = str(exc) or ""

    if status == 401 or _AUTH_RE.search(message):
        return ProviderAuthError(
            f"{provider} API key is invalid. Update {api_key_env} and restart the server.",
            provider=provider,
            status_code=status,
        )
    if status == 429 or _RATE_RE.search(message):
        return ProviderRateLimitError(
            f"{provider} quota exceeded. Check your plan and billing, or try again later.",
            provider=provider,
            status_code=status,
        )
    if status == 503 or _OVERLOAD_RE.search(message):
        return ProviderOverloadedError(
            f"{provider} is temporarily overloaded. Please try again in a moment.",
            provider=provider,
            status_code=status,
        )
    logger.debug(f"Unclassified {provider} error (status={status}): {message}")
    return ProviderError(message or fallback_message, provider=provider, status_code=status)
