from __future__ import annotations

from localization import PluralizationRules
from localization.pluralization import english_rule, galician_rule


def test_english_rule():
    assert english_rule(0) == ["zero", "none", "other"]
    assert english_rule(1) == "one"
    assert english_rule(2) == "other"


def test_galician_rule():
    assert galician_rule(1) == "one"
    assert galician_rule(0) == "other"
    assert galician_rule(2) == "other"


def test_unknown_locale_uses_english_rule():
    rules = PluralizationRules()
    assert not rules.has_rule("fr")
    assert rules.for_locale("fr") is english_rule
    assert rules.categories("fr", 0) == ["zero", "none", "other"]


def test_categories_use_absolute_count():
    assert PluralizationRules().categories("en", -1) == ["one"]


def test_register_custom_rule():
    rules = PluralizationRules()
    rules.register("xx", lambda n: ["few", "other"] if n < 5 else "many")
    assert rules.categories("xx", 3) == ["few", "other"]
    assert rules.categories("xx", 7) == ["many"]


def test_register_cldr_rule():
    rules = PluralizationRules()
    assert rules.register_cldr("ru") is True
    assert rules.categories("ru", 3) == ["few"]
    assert rules.categories("ru", 5) == ["many"]
    assert rules.categories("ru", 21) == ["one"]


def test_register_cldr_unknown_locale():
    rules = PluralizationRules()
    assert rules.register_cldr("zz") is False
    assert not rules.has_rule("zz")


def test_context_uses_registered_rule(translations):
    from localization import TranslationContext

    tables = dict(translations)
    tables["ru"] = {"js": {"files": {"one": "%{count} файл", "few": "%{count} файла", "many": "%{count} файлов", "other": "%{count} файла"}}}
    rules = PluralizationRules()
    rules.register_cldr("ru")
    context = TranslationContext(tables, locale="ru", pluralization_rules=rules)

    assert context.t("files", count=1) == "1 файл"
    assert context.t("files", count=3) == "3 файла"
    assert context.t("files", count=5) == "5 файлов"
