from __future__ import annotations

import logging
from typing import Optional

from .environment.types import EnvMode
from .i18n import SUPPORTED_LOCALES, detect_locale, next_locale
from .storage import DENSITY_KEY, ENV_OVERRIDE_KEY, LANG_KEY, THEME_KEY, LocalStateStore

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DENSITIES = ("standard", "compact")


def get_theme(store: LocalStateStore) -> str:
    value = store.get(THEME_KEY)
    return value if value in THEMES else THEMES[0]


def toggle_theme(store: LocalStateStore) -> str:
    nxt = "light" if get_theme(store) == "dark" else "dark"
    store.set(THEME_KEY, nxt)
    return nxt


def get_density(store: LocalStateStore) -> str:
    value = store.get(DENSITY_KEY)
    return value if value in DENSITIES else DENSITIES[0]


def toggle_density(store: LocalStateStore) -> str:
    nxt = "standard" if get_density(store) == "compact" else "compact"
    store.set(DENSITY_KEY, nxt)
    return nxt


def get_override(store: LocalStateStore) -> Optional[str]:
    """Persisted environment override; unknown values count as absent."""
    value = store.get(ENV_OVERRIDE_KEY)
    if value is None:
        return None
    if value not in {m.value for m in EnvMode}:
        logger.warning("preferences.override_invalid value=%s", value)
        return None
    return value


def set_override(store: LocalStateStore, value: str) -> str:
    normalized = (value or "").strip().lower()
    try:
        mode = EnvMode(normalized)
    except ValueError as exc:
        raise ValueError(f"unsupported environment override: {value!r}") from exc
    store.set(ENV_OVERRIDE_KEY, mode.value)
    logger.info("preferences.override_set value=%s", mode.value)
    return mode.value


def get_locale(store: LocalStateStore, system_language: Optional[str] = None) -> str:
    return detect_locale(store.get(LANG_KEY), system_language)


def set_locale(store: LocalStateStore, value: str) -> str:
    if value not in SUPPORTED_LOCALES:
        raise ValueError(f"unsupported locale: {value!r}")
    store.set(LANG_KEY, value)
    return value


def cycle_locale(store: LocalStateStore, system_language: Optional[str] = None) -> str:
    return set_locale(store, next_locale(get_locale(store, system_language)))
