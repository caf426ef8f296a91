"""Tests for the i18n module."""

import pytest

import i18n as i18n_mod
from i18n import get_available_locales, get_locale, outcome_name, set_locale, stone_name, t
from i18n.en_US import STRINGS as EN
from i18n.zh_CN import STRINGS as ZH


@pytest.fixture(autouse=True)
def _reset_locale():
    """Reset locale to zh_CN after each test."""
    original = get_locale()
    yield
    set_locale(original)


class TestSetLocale:
    def test_default_locale(self):
        assert get_locale() == "zh_CN"

    def test_switch_to_en(self):
        set_locale("en_US")
        assert get_locale() == "en_US"

    def test_invalid_locale(self):
        with pytest.raises(ValueError, match="Unsupported locale"):
            set_locale("ja_JP")

    def test_available_locales(self):
        locales = get_available_locales()
        assert "zh_CN" in locales
        assert "en_US" in locales


class TestTranslation:
    def test_basic_key_zh(self):
        set_locale("zh_CN")
        assert t("notify.register_ok") == "注册成功，请登录"

    def test_basic_key_en(self):
        set_locale("en_US")
        assert t("outcome.win") != t("outcome.lose")
        assert t("outcome.win") != ZH["outcome.win"]

    def test_format(self):
        set_locale("zh_CN")
        assert t("room.default_name", user="alice") == "alice的房间"

    def test_missing_key(self):
        assert t("no.such.key") == "[no.such.key]"

    def test_missing_format_arg_returns_template(self):
        assert t("room.default_name") == ZH["room.default_name"]

    def test_fallback_to_zh(self, monkeypatch):
        set_locale("en_US")
        monkeypatch.setitem(i18n_mod._tables, "en_US", {})
        assert t("outcome.lose") == ZH["outcome.lose"]

    def test_alias(self):
        assert i18n_mod._("outcome.win") == t("outcome.win")


class TestTables:
    def test_same_keys(self):
        assert set(ZH) == set(EN)

    def test_move_reasons_present(self):
        for reason in ("no_game", "not_your_turn", "out_of_bounds", "occupied"):
            assert f"exc.move.{reason}" in ZH


class TestHelpers:
    def test_stone_name(self):
        assert stone_name("black") == "黑"
        assert stone_name("purple") == "purple"

    def test_outcome_name(self):
        assert outcome_name("win") == "你赢了！"
        assert outcome_name("draw") == "draw"
