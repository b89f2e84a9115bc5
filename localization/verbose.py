"""Verbose localization: tag every translated string with a lookup number.

Used while reviewing translations in a running UI: each distinct scope
gets a number the first time it is translated, the first sighting is
logged, and every returned string ends in ``" (#N)"``.
"""

from __future__ import annotations

import functools
import itertools
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

Scope = Union[str, Sequence[str]]
TranslateFn = Callable[[Scope, Optional[Mapping[str, Any]]], str]


def _scope_key(scope: Scope) -> str:
    return scope if isinstance(scope, str) else ".".join(str(part) for part in scope)


def verbose_localization(translate: TranslateFn) -> TranslateFn:
    """Wrap `translate` so every result carries its lookup number."""
    counter = itertools.count(1)
    numbers: Dict[str, int] = {}

    @functools.wraps(translate)
    def wrapper(scope: Scope, options: Optional[Mapping[str, Any]] = None) -> str:
        key = _scope_key(scope)
        current = numbers.get(key)
        if current is None:
            current = numbers[key] = next(counter)
            message = f"Translation #{current}: {key}"
            if options:
                message += f", parameters: {json.dumps(dict(options), default=str)}"
            logger.info(message)
        return f"{translate(scope, options)} (#{current})"

    wrapper.lookup_numbers = numbers  # type: ignore[attr-defined]
    return wrapper
