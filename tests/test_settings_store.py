from __future__ import annotations

import json

import settings_store


def test_set_setting_writes_json_atomic(tmp_path, monkeypatch):
    settings_file = tmp_path / "settings.json"

    monkeypatch.setattr(settings_store, "settings_path", lambda: settings_file)

    settings_store.set_setting("locale", "gl")

    data = json.loads(settings_file.read_text(encoding="utf-8"))
    assert data["locale"] == "gl"
    assert not settings_file.with_suffix(".tmp").exists()


def test_set_setting_none_removes_key(tmp_path, monkeypatch):
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps({"locale": "gl", "fallback_locale": "pt"}), encoding="utf-8")

    monkeypatch.setattr(settings_store, "settings_path", lambda: settings_file)

    settings_store.set_setting("locale", None)
    data = json.loads(settings_file.read_text(encoding="utf-8"))
    assert "locale" not in data
    assert data["fallback_locale"] == "pt"


def test_config_dir_override(tmp_path, monkeypatch):
    target = tmp_path / "config"
    monkeypatch.setenv(settings_store.CONFIG_DIR_ENV, str(target))

    assert settings_store.app_config_dir() == target
    assert target.is_dir()
    assert settings_store.settings_path() == target / "settings.json"


def test_xdg_config_home(tmp_path, monkeypatch):
    monkeypatch.delenv(settings_store.CONFIG_DIR_ENV, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert settings_store.app_config_dir() == tmp_path / settings_store.APP_NAME


def test_broken_settings_file_reads_as_empty(tmp_path, monkeypatch):
    settings_file = tmp_path / "settings.json"
    settings_file.write_text("{broken", encoding="utf-8")
    monkeypatch.setattr(settings_store, "settings_path", lambda: settings_file)

    assert settings_store.load_settings() == {}


def test_defaults_and_effective_settings(tmp_path, monkeypatch):
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps({"move_invalid_forward": False}), encoding="utf-8")
    monkeypatch.setattr(settings_store, "settings_path", lambda: settings_file)

    assert settings_store.get_setting("default_locale") == "en"
    assert settings_store.get_setting("move_invalid_forward") is False

    merged = settings_store.effective_settings()
    assert merged["move_invalid_forward"] is False
    assert merged["move_ambiguous_forward"] is False
    assert merged["zone_data_path"] is None
