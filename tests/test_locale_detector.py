from __future__ import annotations

from localization.locale_detector import LocaleDetector


def test_normalize():
    detector = LocaleDetector()
    assert detector.normalize("gl_ES.UTF-8") == "gl_ES"
    assert detector.normalize("pt-br") == "pt_BR"
    assert detector.normalize("sr_RS@latin") == "sr_RS"
    assert detector.normalize("EN") == "en"
    assert detector.normalize("C") is None
    assert detector.normalize("POSIX.UTF-8") is None
    assert detector.normalize("") is None


def test_best_match_reduces_to_supported_locale():
    detector = LocaleDetector({"en", "gl", "pt_BR"})
    assert detector.best_match("gl-ES") == "gl"
    assert detector.best_match("pt_BR.UTF-8") == "pt_BR"
    assert detector.best_match("fr_FR") is None


def test_best_match_without_supported_set_accepts_anything():
    assert LocaleDetector().best_match("fr_FR") == "fr_FR"


def test_find_best_match_defaults_to_english():
    detector = LocaleDetector({"gl"})
    assert detector.find_best_match(["fr", "de"]) == "en"
    assert detector.find_best_match(["fr", "gl_ES"]) == "gl"


def test_detect_system_locale_from_environment(monkeypatch):
    for name in LocaleDetector.ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LANG", "gl_ES.UTF-8")

    assert LocaleDetector({"en", "gl"}).detect_system_locale() == "gl"


def test_detect_system_locale_language_list(monkeypatch):
    for name in LocaleDetector.ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LANGUAGE", "fr:gl:en")

    assert LocaleDetector({"en", "gl"}).detect_system_locale() == "gl"
