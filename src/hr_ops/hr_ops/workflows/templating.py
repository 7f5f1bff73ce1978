from __future__ import annotations

import re
from typing import Any, Mapping

_PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][\w.]*)\s*\}\}")


def lookup(context: Mapping[str, Any], path: str) -> Any:
    """``candidate.firstName`` -> ``context["candidate"]["firstName"]``; missing keys give None."""
    current: Any = context
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def render(text: str, context: Mapping[str, Any]) -> str:
    """Fill ``{{ path }}`` placeholders from the workflow context."""

    def _sub(match: "re.Match[str]") -> str:
        value = lookup(context, match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_sub, text)
