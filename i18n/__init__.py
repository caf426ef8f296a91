"""轻量级 i18n 框架，零外部依赖。

用法::

    from i18n import t, set_locale

    set_locale("en_US")
    print(t("game.turn.mine"))

    # 便捷别名
    from i18n import _
    print(_("outcome.win"))  # → "You win!" (en_US) / "你赢了！" (zh_CN)

    # 领域助手
    from i18n import stone_name, outcome_name
    print(stone_name("black"))     # → "黑" / "Black"

翻译表是 ``i18n/<locale>.py`` 中的 ``STRINGS`` 字典，首次使用时导入。
"""

from __future__ import annotations

import importlib
import logging

logger = logging.getLogger(__name__)

_LOCALES = ("zh_CN", "en_US")
_FALLBACK = "zh_CN"

_current: str = _FALLBACK
_tables: dict[str, dict[str, str]] = {}


def _table(locale: str) -> dict[str, str]:
    """取翻译表，首次访问时导入对应模块。"""
    table = _tables.get(locale)
    if table is None:
        if locale not in _LOCALES:
            raise ValueError(f"Unsupported locale: {locale}")
        table = importlib.import_module(f".{locale}", __name__).STRINGS
        _tables[locale] = table
    return table


def set_locale(locale: str) -> None:
    """切换当前语言；未知 locale 抛出 ValueError。"""
    global _current
    _table(locale)
    _current = locale


def get_locale() -> str:
    return _current


def get_available_locales() -> list[str]:
    return list(_LOCALES)


def _lookup(key: str) -> str | None:
    template = _table(_current).get(key)
    if template is None and _current != _FALLBACK:
        template = _table(_FALLBACK).get(key)
        if template is not None:
            logger.debug("i18n fallback: '%s' not in %s", key, _current)
    return template


def has_key(key: str) -> bool:
    """当前语言 (含回退) 是否有该键。"""
    return _lookup(key) is not None


def t(key: str, **kwargs: object) -> str:
    """翻译函数。

    缺失的键先回退到 zh_CN，仍缺失返回 ``[key]``；
    格式化参数不全时返回未格式化的模板。

    Args:
        key: 翻译键，如 ``"notify.register_ok"``。
        **kwargs: 格式化参数，如 ``user="alice"``。
    """
    template = _lookup(key)
    if template is None:
        logger.warning("i18n missing key: '%s' (lang=%s)", key, _current)
        return f"[{key}]"
    if not kwargs:
        return template
    try:
        return template.format_map(kwargs)
    except KeyError as e:
        logger.warning("i18n format error: key='%s', missing=%s", key, e)
        return template


_ = t


# ── 领域助手 ──


def _display(prefix: str, value: str) -> str:
    key = f"{prefix}.{value}"
    return t(key) if has_key(key) else value


def stone_name(value: str) -> str:
    """棋子颜色显示名，如 ``"black"`` → 黑 / Black；未知值原样返回。"""
    return _display("stone", value)


def outcome_name(value: str) -> str:
    """对局结果显示名，如 ``"win"`` → 你赢了！"""
    return _display("outcome", value)
