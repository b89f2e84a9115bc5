"""
Locale detection and normalisation.

Locale codes are kept in the ``ll`` / ``ll_RR`` form used as translation
table keys (``"gl"``, ``"pt_BR"``). Anything the system or a caller hands
us (``"gl-ES"``, ``"gl_ES.UTF-8"``, ``"C"``) is normalised to that form
and then reduced to a locale the table actually has.
"""

import locale
import logging
import os
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class LocaleDetector:
    """
    Detects and normalises locale codes against a set of supported locales.
    """

    DEFAULT_LOCALE = "en"

    ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG", "LANGUAGE")

    def __init__(self, supported: Optional[Iterable[str]] = None):
        self.supported = set(supported or ())
        self._system_locale: Optional[str] = None

    def normalize(self, locale_str: Optional[str]) -> Optional[str]:
        """
        Normalize a locale string to ``ll`` or ``ll_RR``.

        Args:
            locale_str: Raw locale string

        Returns:
            Normalized locale code, or None for empty/POSIX locales
        """
        if not locale_str:
            return None

        # Remove encoding and modifiers
        locale_str = locale_str.split(".")[0].split("@")[0].strip()
        if not locale_str or locale_str.upper() in ("C", "POSIX"):
            return None

        parts = locale_str.replace("-", "_").split("_")
        lang = parts[0].lower()
        if len(parts) >= 2 and parts[1]:
            return f"{lang}_{parts[1].upper()}"
        return lang

    def candidates(self, locale_str: Optional[str]) -> List[str]:
        """Return ``[ll_RR, ll]`` (or just ``[ll]``) for a raw locale string."""
        normalized = self.normalize(locale_str)
        if not normalized:
            return []
        out = [normalized]
        if "_" in normalized:
            out.append(normalized.split("_")[0])
        return out

    def best_match(self, locale_str: Optional[str]) -> Optional[str]:
        """First candidate of `locale_str` that is supported, else None."""
        for candidate in self.candidates(locale_str):
            if not self.supported or candidate in self.supported:
                return candidate
        return None

    def find_best_match(self, preferred_locales: Iterable[str]) -> str:
        """Find the best supported locale from a list of preferences."""
        for preferred in preferred_locales:
            match = self.best_match(preferred)
            if match:
                return match
        return self.DEFAULT_LOCALE

    def detect_system_locale(self) -> str:
        """
        Detect the system's current locale.

        Returns:
            str: Detected locale code or the default locale as fallback
        """
        if self._system_locale:
            return self._system_locale

        preferences: List[str] = []

        # Method 1: Environment variables
        for env_var in self.ENV_VARS:
            value = os.environ.get(env_var)
            if value:
                preferences.extend(value.split(":"))

        # Method 2: Python locale module
        try:
            system_locale = locale.getlocale()[0]
            if system_locale:
                preferences.append(system_locale)
        except ValueError as e:
            logger.warning(f"Failed to read system locale: {e}")

        self._system_locale = self.find_best_match(preferences)
        return self._system_locale
