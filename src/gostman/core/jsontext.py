"""
Helpers for the JSON-within-JSON text fields (environment, headers, params).
"""

import json
from typing import Dict, Optional

from .exceptions import ConfigurationError


def load_string_map(text: str) -> Dict[str, str]:
    """
    Parse text as a JSON object whose values are all strings.

    Raises:
        ValueError: If text is not valid JSON or not an object of strings
    """
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    for key, item in value.items():
        if not isinstance(item, str):
            raise ValueError(f"value of {key!r} is not a string")
    return value


def parse_string_map(text: str, what: str) -> Dict[str, str]:
    """
    Parse a request field that must be an object of string values.

    Args:
        text: JSON text
        what: Field name used in the error message

    Raises:
        ConfigurationError: If text is not a JSON object of strings
    """
    try:
        return load_string_map(text)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Error parsing {what}. Check JSON format.", {"error": str(e)}
        )


def parse_environment(text: Optional[str]) -> Dict[str, str]:
    """
    Parse environment text into variable bindings.

    Empty text means no variables have been defined yet.

    Raises:
        ConfigurationError: If the environment is not a JSON object of strings
    """
    if text is None or not text.strip():
        return {}
    return parse_string_map(text, "Env Variables")


def format_json(text: str, indent: int = 2) -> str:
    """
    Pretty-print JSON text for display.

    Returns the input unchanged when it is not valid JSON.
    """
    try:
        value = json.loads(text)
    except (TypeError, ValueError):
        return text
    return json.dumps(value, indent=indent, ensure_ascii=False)
