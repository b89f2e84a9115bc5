# settings_store.py
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

APP_NAME = "locale-runtime"
SETTINGS_FILE_NAME = "settings.json"
CONFIG_DIR_ENV = "LOCALE_RUNTIME_CONFIG_DIR"

# Keys understood by TranslationContext.from_settings / ZoneRegistry.from_settings
DEFAULTS: Dict[str, Any] = {
    "locale": None,
    "fallback_locale": None,
    "default_locale": "en",
    "verbose_localization": False,
    "translations_dir": None,
    "move_ambiguous_forward": False,
    "move_invalid_forward": True,
    "zone_data_path": None,
}

logger = logging.getLogger(__name__)


def app_config_dir() -> Path:
    """
    Return the per-user configuration directory, creating it if needed.

    ``$LOCALE_RUNTIME_CONFIG_DIR`` wins; otherwise
    ``$XDG_CONFIG_HOME/locale-runtime`` (``~/.config/locale-runtime``).
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        cfg = Path(override)
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
        cfg = base / APP_NAME
    cfg.mkdir(parents=True, exist_ok=True)
    return cfg


def settings_path() -> Path:
    return app_config_dir() / SETTINGS_FILE_NAME


def load_settings() -> Dict[str, Any]:
    """Load settings.json, returning {} if missing or invalid."""
    path = settings_path()
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError) as e:
        # Broken JSON? Just ignore and start fresh.
        logger.error(f"Failed to read settings from {path}: {e}")
        return {}


def save_settings(data: Dict[str, Any]) -> None:
    """Write JSON with a simple temp-file swap for safety."""
    path = settings_path()
    tmp = path.with_suffix(".tmp")

    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)

    tmp.replace(path)


def get_setting(key: str, default: Any = None) -> Any:
    if default is None:
        default = DEFAULTS.get(key)
    return load_settings().get(key, default)


def set_setting(key: str, value: Any | None) -> None:
    data = load_settings()
    if value is None:
        data.pop(key, None)
    else:
        data[key] = value
    save_settings(data)


def effective_settings() -> Dict[str, Any]:
    """Stored settings layered over DEFAULTS."""
    merged = dict(DEFAULTS)
    merged.update(load_settings())
    return merged
