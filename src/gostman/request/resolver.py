"""
Placeholder resolution for request fields.

Placeholders have the form ``{{ name }}``; whitespace around the name is
ignored. Unknown names and unterminated placeholders are left untouched.
"""

import re
from typing import List, Mapping, Optional

PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}")


def resolve(text: str, env: Optional[Mapping[str, str]] = None) -> str:
    """
    Substitute ``{{name}}`` placeholders in text.

    Args:
        text: Text that may contain placeholders
        env: Variable bindings (None or empty leaves text unchanged)

    Returns:
        Text with every bound placeholder replaced by its value
    """
    if not text or not env:
        return text

    def _substitute(match: "re.Match[str]") -> str:
        name = match.group(1).strip()
        if name in env:
            return env[name]
        return match.group(0)

    # A callable replacement inserts values literally (no backslash expansion)
    return PLACEHOLDER_PATTERN.sub(_substitute, text)


def find_placeholders(text: str) -> List[str]:
    """Names referenced by placeholders in text, in first-seen order."""
    names: List[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text or ""):
        name = match.group(1).strip()
        if name not in names:
            names.append(name)
    return names


def unresolved_placeholders(text: str, env: Optional[Mapping[str, str]]) -> List[str]:
    """Names referenced in text that have no binding in env."""
    bound = env or {}
    return [name for name in find_placeholders(text) if name not in bound]

