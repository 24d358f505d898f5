"""Locale selection and message lookup.

Two locales ship by default; ``SUPPORTED_LOCALES`` is cycled in order by the
locale toggle. Missing dictionary entries fall back to the key itself.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

ZH_CN = "zh-CN"
EN_US = "en-US"

SUPPORTED_LOCALES = (ZH_CN, EN_US)
DEFAULT_LOCALE = ZH_CN


def detect_locale(saved: Optional[str], system: Optional[str]) -> str:
    if saved in SUPPORTED_LOCALES:
        return saved  # type: ignore[return-value]
    tag = (saved or system or DEFAULT_LOCALE).strip().lower()
    return ZH_CN if tag.startswith("zh") else EN_US


def next_locale(current: str) -> str:
    try:
        idx = SUPPORTED_LOCALES.index(current)
    except ValueError:
        return SUPPORTED_LOCALES[0]
    return SUPPORTED_LOCALES[(idx + 1) % len(SUPPORTED_LOCALES)]


def pick_locale(primary: Optional[str], secondary: Optional[str], locale: str) -> str:
    """Preferred text for ``locale``, falling back to the other slot, else ""."""
    primary = primary or ""
    secondary = secondary or ""
    if locale == ZH_CN:
        return primary or secondary
    return secondary or primary


class Translator:
    def __init__(self, locale: str, messages: Optional[Mapping[str, str]] = None) -> None:
        self.locale = locale
        self.messages: Dict[str, str] = dict(messages or {})

    def t(self, key: str) -> str:
        return self.messages.get(key) or key

    def pick(self, primary: Optional[str], secondary: Optional[str]) -> str:
        return pick_locale(primary, secondary, self.locale)

    def loaded_message(self, environment: str) -> str:
        return f"{self.t('loaded')}（{self.t('environment')}：{environment}）"

    def error_message(self, error: object) -> str:
        return f"{self.t('errorLoading')}：{error}"
