"""
ridewear/i18n/translator.py
────────────────────────────
Label lookup using JSON locale files.

Usage:
    from ridewear.i18n.translator import t, set_lang

    t("factors.hours.label")       # → "Time in saddle" (en)
    t("components.BRAKE_PAD")      # → "Brake Pads"
    set_lang("es")
    t("status.OVERDUE")            # → "Vencido"
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from config.settings import settings

SUPPORTED_LANGS = ("en", "es")

_LOCALES_DIR = Path(__file__).parent / "locales"
_current_lang: str = settings.DEFAULT_LANG if settings.DEFAULT_LANG in SUPPORTED_LANGS else "en"


@lru_cache(maxsize=4)
def _load_locale(lang: str) -> dict:
    path = _LOCALES_DIR / f"{lang}.json"
    if not path.exists():
        path = _LOCALES_DIR / "en.json"  # fallback
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def set_lang(lang: str) -> None:
    """Set the active language (module-level default)."""
    global _current_lang
    _current_lang = lang if lang in SUPPORTED_LANGS else "en"


def get_lang() -> str:
    return _current_lang


def has_key(key: str, lang: str | None = None) -> bool:
    node: dict | str = _load_locale(lang or _current_lang)
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return isinstance(node, str)


def t(key: str, lang: str | None = None, default: str | None = None) -> str:
    """
    Translate a dot-separated key.

    Args:
        key: Dot-separated path, e.g. "factors.hours.label"
        lang: Language override; uses module default if None
        default: Returned when the key is missing (the key itself if None)
    """
    if not has_key(key, lang):
        return key if default is None else default
    node: dict | str = _load_locale(lang or _current_lang)
    for part in key.split("."):
        node = node[part]  # type: ignore[index]
    return str(node)
