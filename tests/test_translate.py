from __future__ import annotations

import json
import logging

from localization import TranslationContext


def test_translates_current_locale(context):
    assert context.t("topic.title") == "Tema"
    assert context.translate("topic.title") == "Tema"


def test_falls_back_to_english_when_key_only_in_english(context):
    assert context.t("only_en") == "English only"


def test_missing_key_marker(context):
    assert context.t("bogus.key", {"locale": "gl"}) == "[gl.bogus.key]"
    assert context.t("bogus.key") == "[gl.bogus.key]"


def test_missing_key_marker_uses_requested_locale(english_context):
    assert english_context.t("bogus.key", locale="gl") == "[gl.bogus.key]"


def test_scope_as_sequence_and_scope_option(context):
    assert context.t(["topic", "title"]) == "Tema"
    assert context.t("title", scope="topic") == "Tema"
    assert context.t("js.topic.title") == "Tema"


def test_default_value_is_interpolated(context):
    assert context.t("missing.thing", defaultValue="Fallback {{x}}", x=1) == "Fallback 1"


def test_pluralizes_with_count(context):
    assert context.t("topic.count", count=1) == "1 tema"
    assert context.t("topic.count", count=5) == "5 temas"
    assert context.t("topic.count", count=0) == "0 temas"


def test_english_zero_uses_other(english_context):
    assert english_context.t("topic.count", count=0) == "0 topics"
    assert english_context.t("topic.count", count=1) == "1 topic"


def test_interpolates_with_fallback_locale(context):
    assert context.t("topic.greeting", name="Ana") == "Hello Ana"
    assert context.t("topic.greeting") == "Hello [missing {{name}} value]"


def test_configured_fallback_locale_is_tried_before_default():
    tables = {
        "en": {"js": {"word": "word"}},
        "pt": {"js": {"word": "palavra"}},
        "gl": {"js": {}},
    }
    context = TranslationContext(tables, locale="gl", fallback_locale="pt")
    assert context.t("word") == "palavra"


def test_translate_is_idempotent(context):
    first = context.t("topic.count", count=3)
    assert context.t("topic.count", count=3) == first
    assert context.translations["gl"].to_plain()["js"]["topic"]["count"]["other"] == "%{count} temas"


def test_extras_table_is_searched_with_original_scope(translations):
    context = TranslationContext(
        translations,
        locale="gl",
        extras={"gl": {"extra": {"key": "Extra"}}},
    )
    assert context.t("extra.key") == "Extra"


def test_lookup_returns_none_when_missing(context):
    assert context.lookup("nope.nothing") is None
    assert context.lookup("topic.title").value == "Tema"


def test_pluralize_galician_rule(context):
    node = {"one": "%{count} día", "other": "%{count} días"}
    assert context.pluralize(node, "days", {"count": 1, "locale": "gl"}) == "%{count} día"
    assert context.pluralize(node, "days", {"count": 2, "locale": "gl"}) == "%{count} días"
    assert context.pluralize(node, "days", {"count": 0, "locale": "gl"}) == "%{count} días"


def test_pluralize_plain_string_is_unchanged(context):
    assert context.pluralize("plain", "scope", {"count": 4}) == "plain"


def test_pluralize_missing_category(context):
    assert context.pluralize({"one": "a"}, "partial", {"count": 5}) == "[gl.partial.other]"
    assert context.pluralize({"one": "a"}, "partial", {"count": 5}, ignore_missing=True) is None


def test_find_translation_ignores_boolean_count(context):
    node = context.find_translation("topic.count", {"count": True})
    assert node.to_plain() == {"one": "%{count} tema", "other": "%{count} temas"}


def test_set_locale_normalises(context):
    assert context.set_locale("en_US.UTF-8") is True
    assert context.current_locale == "en"
    assert context.set_locale("fr") is False
    assert context.current_locale == "en"


def test_verbose_localization(context, caplog):
    caplog.set_level(logging.INFO, logger="localization.verbose")
    context.enable_verbose_localization()
    assert context.verbose

    assert context.t("topic.title") == "Tema (#1)"
    assert context.t("only_en") == "[gl.only_en] (#2)"
    assert context.t("topic.title") == "Tema (#1)"

    messages = [record.getMessage() for record in caplog.records]
    assert messages.count("Translation #1: topic.title") == 1

    context.disable_verbose_localization()
    assert not context.verbose
    assert context.t("topic.title") == "Tema"
    assert context.t("only_en") == "English only"


def test_verbose_logs_parameters(context, caplog):
    caplog.set_level(logging.INFO, logger="localization.verbose")
    context.enable_verbose_localization()
    context.t("topic.count", count=2)
    assert 'Translation #1: topic.count, parameters: {"count": 2}' in caplog.text


def test_load_translations_dir(tmp_path):
    (tmp_path / "en.json").write_text(json.dumps({"en": {"js": {"hi": "Hi"}}}), encoding="utf-8")
    (tmp_path / "gl.json").write_text(json.dumps({"js": {"hi": "Ola"}}), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    context = TranslationContext()
    assert context.load_translations_dir(tmp_path) == ["en", "gl"]
    assert context.locales() == ["en", "gl"]
    assert context.t("hi", locale="gl") == "Ola"


def test_from_settings(tmp_path):
    (tmp_path / "en.json").write_text(json.dumps({"js": {"hi": "Hi"}}), encoding="utf-8")
    (tmp_path / "gl.json").write_text(
        json.dumps({"js": {"hi": "Ola", "n_MF": "{N, plural, one {# cousa} other {# cousas}}"}}),
        encoding="utf-8",
    )

    context = TranslationContext.from_settings(
        {"translations_dir": str(tmp_path), "locale": "gl_ES", "verbose_localization": True}
    )
    assert context.current_locale == "gl"
    assert context.verbose
    assert context.t("hi") == "Ola (#1)"
    assert context.message_format("n_MF", {"N": 3}) == "3 cousas"


def test_scope_keyword_is_an_option_not_the_key(context):
    assert context.translate("count", scope="topic", count=2) == "2 temas"
    assert context.t("title", {"locale": "en"}, scope="topic") == "Topic"


def test_message_formats_follow_the_locale(translations):
    context = TranslationContext(translations, locale="gl")
    assert context.message_format("unread_MF", {"UNREAD": 2}) == "Hai 2 temas sen ler"

    assert context.set_locale("en")
    assert context.message_format("unread_MF", {"UNREAD": 2}) == "There are 2 unread topics"


def test_added_translations_for_the_current_locale_are_compiled():
    context = TranslationContext(locale="en")
    context.add_translations("en", {"js": {"n_MF": "{N, plural, one {# thing} other {# things}}"}})
    assert context.message_format("n_MF", {"N": 1}) == "1 thing"
