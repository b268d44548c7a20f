"""Extracts a JSON payload from raw model output.

Models often wrap JSON in markdown fences or add commentary before and after
it. The parser takes the inside of the first fenced block (if any), slices
from the first opening brace to the last closing brace and decodes that.
Anything that does not decode cleanly raises `UnparsableResponseError`.
"""

import json
import logging
import re
from typing import Any, Dict, List, Union

from reminder_engine.features.errors import UnparsableResponseError

logger = logging.getLogger(__name__)

FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

def _strip_fence(content: str) -> str:
    match = FENCED_BLOCK_RE.search(content)
    return match.group(1) if match else content

def _slice_payload(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("["):
        start, end = stripped.find("["), stripped.rfind("]")
    else:
        start, end = stripped.find("{"), stripped.rfind("}")
    if start < 0 or end < start:
        raise UnparsableResponseError("No JSON object found in model response.")
    return stripped[start:end + 1]

def parse_structured_response(content: Any) -> Union[Dict[str, Any], List[Any]]:
    """Decodes the JSON payload contained in a model response.

    Args:
        content: Raw completion text, or an already decoded dict/list when the
            provider returned structured output natively.

    Returns:
        The decoded JSON object or array.

    Raises:
        UnparsableResponseError: If the content is empty or no valid JSON
            object/array can be decoded from it.
    """
    if isinstance(content, (dict, list)):
        return content
    if not isinstance(content, str) or not content.strip():
        raise UnparsableResponseError("Model response was empty.")

    json_string = _slice_payload(_strip_fence(content))
    try:
        payload = json.loads(json_string)
    except json.JSONDecodeError as e:
        logger.debug(f"JSON decode failed at position {e.pos}: {json_string[:200]}")
        raise UnparsableResponseError(f"Model response was not valid JSON: {e.msg}") from e

    if not isinstance(payload, (dict, list)):
        raise UnparsableResponseError("Model response JSON is not an object or array.")
    return payload
