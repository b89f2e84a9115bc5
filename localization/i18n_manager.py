import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import settings_store

from .interpolation import interpolate, prepare_options
from .locale_detector import LocaleDetector
from .message_format import MessageFormatRegistry
from .nodes import Leaf, SubTree, TranslationNode, build_node, build_table, walk
from .number_formatter import NumberFormatter
from .pluralization import PluralizationRules
from .verbose import verbose_localization


logger = logging.getLogger(__name__)

Scope = Union[str, Sequence[str]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_count(value: Any) -> Union[int, float]:
    if isinstance(value, str):
        number = float(value)
        return int(number) if number.is_integer() else number
    return value


class TranslationContext:
    """Translation tables plus the locale state used to resolve keys.

    Everything the resolver needs (current, fallback and default locale,
    the tables, the optional extras table, plural rules, compiled
    messages) lives on the instance; nothing is module-global.
    """

    SEPARATOR = "."
    ROOT_SEGMENT = "js"
    LAST_RESORT_LOCALE = "en"

    def __init__(
        self,
        translations: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
        default_locale: str = "en",
        fallback_locale: Optional[str] = None,
        extras: Optional[Mapping[str, Any]] = None,
        pluralization_rules: Optional[PluralizationRules] = None,
    ):
        self.translations: Dict[str, SubTree] = build_table(translations)
        self.extras: Optional[Dict[str, SubTree]] = build_table(extras) if extras else None
        self.default_locale = default_locale
        self.fallback_locale = fallback_locale
        self.locale = locale
        self.no_fallbacks = False

        self.pluralization_rules = pluralization_rules or PluralizationRules()
        self.numbers = NumberFormatter(lookup=self._lookup_plain, translate=self.translate)

        self._translator = self._translate
        self._verbose = False
        self.load_message_formats()

    @property
    def current_locale(self) -> str:
        return self.locale or self.default_locale

    @property
    def locale_detector(self) -> LocaleDetector:
        return LocaleDetector(self.translations.keys())

    def locales(self) -> List[str]:
        return sorted(self.translations)

    # ----------------------------------------------------------------------
    # Construction from settings / files
    # ----------------------------------------------------------------------
    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]] = None) -> "TranslationContext":
        """Build a context from settings_store values (or a given mapping)."""
        values = dict(settings_store.DEFAULTS)
        values.update(settings if settings is not None else settings_store.load_settings())

        context = cls(
            default_locale=values.get("default_locale") or "en",
            fallback_locale=values.get("fallback_locale"),
        )
        if values.get("translations_dir"):
            context.load_translations_dir(values["translations_dir"])

        requested = values.get("locale") or context.locale_detector.detect_system_locale()
        context.set_locale(requested)

        if values.get("verbose_localization"):
            context.enable_verbose_localization()
        return context

    def _load_locale_file(self, path: Path) -> bool:
        locale_code = path.stem
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load locale {locale_code}: {e}")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: top level is not an object")
            return False

        # Bundles are often shaped {"gl": {"js": {...}}}
        if list(data) == [locale_code] and isinstance(data[locale_code], dict):
            data = data[locale_code]

        self.add_translations(locale_code, data)
        return True

    def load_translations_dir(self, translations_dir: Union[str, Path]) -> List[str]:
        """Load every ``<locale>.json`` in `translations_dir`."""
        directory = Path(translations_dir)
        if not directory.is_dir():
            logger.warning(f"Translations directory {directory} does not exist")
            return []

        loaded = []
        for path in sorted(directory.glob("*.json")):
            if self._load_locale_file(path):
                loaded.append(path.stem)
        return loaded

    def add_translations(self, locale_code: str, tree: Mapping[str, Any]) -> None:
        node = build_node(tree)
        self.translations[locale_code] = node if isinstance(node, SubTree) else SubTree({})
        if locale_code == self.current_locale:
            self.load_message_formats()

    # ----------------------------------------------------------------------
    # Public: Set locale
    # ----------------------------------------------------------------------
    def set_locale(self, locale_code: Optional[str]) -> bool:
        if not locale_code:
            return False

        # Normalise so "gl-ES" / "gl_ES.UTF-8" find the "gl" table
        match = self.locale_detector.best_match(locale_code)
        if match is None:
            logger.warning(f"No translations for locale {locale_code}")
            return False

        self.locale = match
        if self.message_formats.locale != match:
            self.load_message_formats()
        return True

    def load_message_formats(self, locale_code: Optional[str] = None) -> int:
        """Compile the ``*_MF`` messages of `locale_code` (default: current)."""
        code = locale_code or self.current_locale
        registry = MessageFormatRegistry(code)
        loaded = registry.load_from_table(self.translations.get(code))
        self.message_formats = registry
        return loaded

    # ----------------------------------------------------------------------
    # Lookup value in the tables
    # ----------------------------------------------------------------------
    def _join(self, scope: Scope) -> str:
        if isinstance(scope, str):
            return scope
        return self.SEPARATOR.join(str(part) for part in scope)

    def lookup(self, scope: Scope, options: Optional[Mapping[str, Any]] = None) -> Optional[TranslationNode]:
        """Resolve `scope` to a node; None (or the default value) if missing."""
        options = prepare_options(options)
        locale_code = options.get("locale") or self.current_locale

        path = self._join(scope)
        if options.get("scope"):
            path = f"{options['scope']}{self.SEPARATOR}{path}"

        segments = path.split(self.SEPARATOR)
        if segments[0] != self.ROOT_SEGMENT:
            segments.insert(0, self.ROOT_SEGMENT)

        node = walk(self.translations.get(locale_code), segments)

        if node is None and self.extras and locale_code in self.extras:
            node = walk(self.extras[locale_code], path.split(self.SEPARATOR))

        if node is None and options.get("defaultValue") is not None:
            node = build_node(options["defaultValue"])

        return node

    def _lookup_plain(self, scope: str) -> Any:
        node = self.lookup(scope)
        return node.to_plain() if node is not None else None

    def missing_translation(self, scope: Scope, key: Optional[str] = None, locale: Optional[str] = None) -> str:
        message = f"[{locale or self.current_locale}{self.SEPARATOR}{self._join(scope)}"
        if key:
            message += f"{self.SEPARATOR}{key}"
        return message + "]"

    # ----------------------------------------------------------------------
    # Pluralization
    # ----------------------------------------------------------------------
    def pluralize(
        self,
        translation: Any,
        scope: Scope,
        options: Optional[Mapping[str, Any]] = None,
        ignore_missing: bool = False,
    ) -> Any:
        """Pick the plural form of `translation` for ``options["count"]``.

        Plain values are returned unchanged. When no form matches, returns
        None if `ignore_missing`, otherwise a missing-translation marker.
        """
        node = build_node(translation)
        if isinstance(node, Leaf):
            return node.value

        options = prepare_options(options)
        locale_code = options.get("locale") or self.current_locale
        count = _as_count(options.get("count", 0))

        categories = self.pluralization_rules.categories(locale_code, count)
        if "other" not in categories:
            categories.append("other")

        _, template = node.first_form(categories)
        if template is not None or ignore_missing:
            return template
        return self.missing_translation(scope, categories[0], locale=locale_code)

    def find_translation(
        self,
        scope: Scope,
        options: Optional[Mapping[str, Any]] = None,
        ignore_missing: bool = False,
    ) -> Any:
        options = prepare_options(options)
        node = self.lookup(scope, options)
        if node is None:
            return None
        if _is_number(options.get("count")):
            return self.pluralize(node, scope, options, ignore_missing=ignore_missing)
        if isinstance(node, Leaf):
            return node.value
        return node

    # ----------------------------------------------------------------------
    # Translate
    # ----------------------------------------------------------------------
    def _fallback_locales(self, requested: str) -> List[str]:
        chain: List[str] = []
        if self.fallback_locale:
            chain.append(self.fallback_locale)
        if requested != self.default_locale:
            chain.append(self.default_locale)
        if requested != self.LAST_RESORT_LOCALE:
            chain.append(self.LAST_RESORT_LOCALE)
        return [code for i, code in enumerate(chain) if code not in chain[:i]]

    def _translate(self, scope: Scope, options: Optional[Mapping[str, Any]] = None) -> str:
        options = prepare_options(options)
        requested = options.get("locale") or self.current_locale

        translation = self.find_translation(scope, options, ignore_missing=not self.no_fallbacks)

        if not self.no_fallbacks:
            for locale_code in self._fallback_locales(requested):
                if translation:
                    break
                logger.debug("Trying %s for %s", locale_code, self._join(scope))
                options["locale"] = locale_code
                translation = self.find_translation(scope, options)

        if not isinstance(translation, str):
            return self.missing_translation(scope, locale=requested)
        return interpolate(translation, options)

    def translate(self, scope: Scope, options: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> str:
        """Translate `scope`, interpolating `options` (and keyword options)."""
        if kwargs:
            options = prepare_options(kwargs, options)
        return self._translator(scope, options)

    t = translate

    def message_format(self, key: str, data: Optional[Mapping[str, Any]] = None) -> str:
        return self.message_formats.format(key, data)

    # ----------------------------------------------------------------------
    # Verbose mode
    # ----------------------------------------------------------------------
    def enable_verbose_localization(self) -> None:
        self.no_fallbacks = True
        self._verbose = True
        self._translator = verbose_localization(self._translate)

    def disable_verbose_localization(self) -> None:
        self.no_fallbacks = False
        self._verbose = False
        self._translator = self._translate

    @property
    def verbose(self) -> bool:
        return self._verbose

    # ----------------------------------------------------------------------
    # Numbers
    # ----------------------------------------------------------------------
    def to_number(self, number: float, options: Optional[Mapping[str, Any]] = None) -> str:
        return self.numbers.format_number(number, options)

    def to_percentage(self, number: float, options: Optional[Mapping[str, Any]] = None) -> str:
        return self.numbers.format_percentage(number, options)

    def to_human_size(self, number: float, options: Optional[Mapping[str, Any]] = None) -> str:
        return self.numbers.format_human_size(number, options)
