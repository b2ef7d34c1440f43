"""Localized name lookup over the hazard/commodity/category translation tables.

Each table maps a domain code to `{language: name}`.
"""

from __future__ import annotations

from typing import Any, Mapping

LANGUAGES: tuple[str, ...] = ("fr", "en")
DEFAULT_LANGUAGE = "fr"

LANGUAGE_NAMES = {"fr": "Français", "en": "English"}


def check_language(lang: str) -> str:
    lang = (lang or "").strip().lower()
    if lang not in LANGUAGES:
        raise ValueError(f"unsupported language {lang!r}; expected one of {list(LANGUAGES)}")
    return lang


def localized(table: Mapping[str, Any] | None, code: str, lang: str, fallback: str | None = None) -> str:
    """Return table[code][lang], else `fallback`, else the code itself."""
    entry = (table or {}).get(code)
    if isinstance(entry, Mapping):
        name = entry.get(lang)
        if isinstance(name, str) and name:
            return name
    return fallback or code

