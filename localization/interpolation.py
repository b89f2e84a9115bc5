"""Placeholder substitution and option merging."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from .errors import MissingTemplateError

# Matches {{name}} and %{name}; the name is the shortest run up to the
# first closing brace(s).
PLACEHOLDER = re.compile(r"(?:\{\{|%\{)(.*?)(?:\}\}?)")


def prepare_options(*sources: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge option mappings left to right; the first set value wins.

    A key holding None counts as unset, so later sources may fill it.
    """
    merged: Dict[str, Any] = {}
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            if merged.get(key) is None:
                merged[key] = value
    return merged


def stringify(value: Any) -> str:
    """Render an option value the way the templates expect to see it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def interpolate(template: Any, options: Optional[Mapping[str, Any]] = None) -> str:
    """Substitute ``{{name}}``/``%{name}`` placeholders in `template`.

    Raises:
        MissingTemplateError: `template` is not a string.
    """
    if not isinstance(template, str):
        raise MissingTemplateError(template)

    values = options or {}

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        value = values.get(name)
        if value is None:
            return f"[missing {match.group(0)} value]"
        return stringify(value)

    return PLACEHOLDER.sub(_replace, template)
