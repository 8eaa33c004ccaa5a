"""
Internationalization (i18n) for command-line output.

Translations live in resources/i18n/{locale}/*.json. English is always
loaded as the fallback; the target locale is deep-merged on top so a
partially translated locale still shows every message.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from gamecatalog.utils.json_utils import load_json
from gamecatalog.utils.paths import get_resources_dir

__all__ = ["I18n", "available_languages", "init_i18n", "t"]

logger = logging.getLogger("gamecatalog.i18n")

FALLBACK_LOCALE = "en"


def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Recursive merge of dictionaries, values from update win."""
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def available_languages() -> list[str]:
    """Lists the locale codes that ship a translation directory."""
    root = get_resources_dir() / "i18n"
    return sorted(entry.name for entry in root.iterdir() if entry.is_dir())


class I18n:
    """Translation lookup for one locale with English fallback."""

    def __init__(self, locale: str = FALLBACK_LOCALE, i18n_root: Path | None = None) -> None:
        """Initialize I18n with a specific locale code.

        Args:
            locale: Locale code, the name of a directory under resources/i18n/.
            i18n_root: Override for the translations root (tests).
        """
        self.locale = locale
        self.i18n_root = i18n_root or get_resources_dir() / "i18n"

        fallback = self._load_locale(FALLBACK_LOCALE)
        if locale == FALLBACK_LOCALE:
            self.translations = fallback
        else:
            target = self._load_locale(locale)
            if not target:
                logger.warning("No translations for locale '%s', using English", locale)
            self.translations = _deep_merge(fallback, target)

    def _load_locale(self, locale_code: str) -> dict[str, Any]:
        """Loads and deep-merges every JSON file of one locale directory."""
        merged: dict[str, Any] = {}
        directory = self.i18n_root / locale_code
        if not directory.is_dir():
            return merged
        for file_path in sorted(directory.glob("*.json")):
            data = load_json(file_path)
            if isinstance(data, dict):
                merged = _deep_merge(merged, data)
        return merged

    def t(self, key: str, **kwargs: Any) -> str:
        """Retrieve a translated string by dot-notation key.

        Args:
            key: Dot-separated key path (e.g. 'cli.summary.processed').
            **kwargs: Format arguments for string interpolation.

        Returns:
            Translated string, or '[key]' if not found.
        """
        value: Any = self.translations
        for part in key.split("."):
            if not isinstance(value, dict):
                value = None
                break
            value = value.get(part)

        if not isinstance(value, str):
            return f"[{key}]"

        if kwargs:
            try:
                return value.format(**kwargs)
            except (ValueError, KeyError, IndexError):
                return value

        return value


_i18n_instance: I18n | None = None


def init_i18n(locale: str = FALLBACK_LOCALE) -> I18n:
    """Initialize the global i18n instance.

    Args:
        locale: The locale code to use.

    Returns:
        The initialized I18n instance.
    """
    global _i18n_instance
    _i18n_instance = I18n(locale)
    return _i18n_instance


def t(key: str, **kwargs: Any) -> str:
    """Retrieve a translated string using the global i18n instance.

    Args:
        key: Dot-separated key path.
        **kwargs: Format arguments for string interpolation.

    Returns:
        Translated string, or '[key]' if not found.
    """
    if _i18n_instance is None:
        init_i18n()
    return _i18n_instance.t(key, **kwargs)
