"""Helpers for reading schema-constrained JSON out of model text responses."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r'```(?:json)?\s*\n?(.*?)\n?```', re.DOTALL)


def clean_json_fence(text: str) -> str:
    """Remove markdown JSON fence from text.

    Args:
        text: Text that may contain ```json ... ```

    Returns:
        Cleaned text
    """
    match = _FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Parse a JSON object from model output.

    Anything that is not a JSON object (empty text, invalid JSON, a list, a
    bare string) yields an empty dict so callers can apply field defaults.

    Args:
        text: Raw response text

    Returns:
        Parsed dict, or {} when the payload is unusable
    """
    if not text:
        return {}

    try:
        data = json.loads(clean_json_fence(text))
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        logger.debug(f"Raw text: {text[:500]}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"JSON response is not an object: {type(data).__name__}")
        return {}

    return data


def get_str(data: Dict[str, Any], key: str, default: str = "") -> str:
    """Read a string field, falling back to default when missing, empty or mistyped."""
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def get_bool(data: Dict[str, Any], key: str, default: bool = False) -> bool:
    """Read a boolean field; only a real JSON true/false is accepted."""
    value = data.get(key)
    if isinstance(value, bool):
        return value
    return default


def get_score(data: Dict[str, Any], key: str, default: int) -> int:
    """Read a 0-100 score, rounding floats and clamping to range.

    Booleans, strings and missing values fall back to default.
    """
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value != value:  # NaN
        return default
    return max(0, min(100, int(round(value))))


def get_str_list(data: Dict[str, Any], key: str) -> List[str]:
    """Read a list of strings, dropping non-string items."""
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
