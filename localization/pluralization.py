"""Pluralization rules per locale.

A rule maps a (non-negative) count to either a single plural category or
an ordered list of candidate categories. Locales with no registered rule
use the English one.

Babel's CLDR data can supply rules for locales that were not registered
by hand (see `PluralizationRules.register_cldr`).
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Union

from babel.core import Locale, UnknownLocaleError

logger = logging.getLogger(__name__)

Category = Union[str, Sequence[str]]
PluralizationRule = Callable[[float], Category]


def english_rule(n: float) -> Category:
    if n == 0:
        return ["zero", "none", "other"]
    if n == 1:
        return "one"
    return "other"


def galician_rule(n: float) -> Category:
    return "one" if n == 1 else "other"


def cldr_rule(locale_code: str) -> Optional[PluralizationRule]:
    """Return Babel's CLDR plural rule for `locale_code`, or None."""
    try:
        locale_obj = Locale.parse(locale_code.replace("-", "_"))
    except (UnknownLocaleError, ValueError) as exc:
        logger.warning("No CLDR plural rule for %s: %s", locale_code, exc)
        return None
    return locale_obj.plural_form


def as_candidates(category: Category) -> List[str]:
    if isinstance(category, str):
        return [category]
    return list(category)


class PluralizationRules:
    """Registry of pluralization rules keyed by locale code."""

    DEFAULT_LOCALE = "en"

    def __init__(self, rules: Optional[Dict[str, PluralizationRule]] = None):
        self._rules: Dict[str, PluralizationRule] = {
            "en": english_rule,
            "gl": galician_rule,
        }
        if rules:
            self._rules.update(rules)

    def register(self, locale_code: str, rule: PluralizationRule) -> None:
        self._rules[locale_code] = rule

    def register_cldr(self, locale_code: str) -> bool:
        """Register Babel's rule for `locale_code`; False if Babel has none."""
        rule = cldr_rule(locale_code)
        if rule is None:
            return False
        self._rules[locale_code] = rule
        return True

    def has_rule(self, locale_code: str) -> bool:
        return locale_code in self._rules

    def for_locale(self, locale_code: Optional[str]) -> PluralizationRule:
        if locale_code and locale_code in self._rules:
            return self._rules[locale_code]
        return self._rules[self.DEFAULT_LOCALE]

    def categories(self, locale_code: Optional[str], count: float) -> List[str]:
        """Candidate categories for `count`, in lookup order."""
        return as_candidates(self.for_locale(locale_code)(abs(count)))
