from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_MS = 1500


class Environment(str, Enum):
    INTRANET = "intranet"
    INTERNET = "internet"


class EnvMode(str, Enum):
    AUTO = "auto"
    INTRANET = "intranet"
    INTERNET = "internet"


class EnvironmentConfig(BaseModel):
    """Parsed ``config/env.json``; immutable for the session."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mode: EnvMode = EnvMode.AUTO
    probe_urls: tuple[str, ...] = Field(default=(), alias="probeUrls")
    probe_timeout_ms: int = Field(default=DEFAULT_PROBE_TIMEOUT_MS, alias="probeTimeoutMs")

    @model_validator(mode="before")
    @classmethod
    def _singular_probe_url(cls, data: Any) -> Any:
        # Older descriptors carry a single "probeUrl".
        if isinstance(data, dict) and data.get("probeUrls") is None and "probe_urls" not in data:
            single = data.get("probeUrl")
            data = {**data, "probeUrls": [single] if single else []}
        return data

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> EnvMode:
        if isinstance(value, EnvMode):
            return value
        raw = str(value or "auto").strip().lower()
        try:
            return EnvMode(raw)
        except ValueError:
            logger.warning("env.mode_unknown value=%s fallback=auto", value)
            return EnvMode.AUTO

    @field_validator("probe_urls", mode="before")
    @classmethod
    def _clean_urls(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(str(u).strip() for u in value if u and str(u).strip())

    @field_validator("probe_timeout_ms", mode="before")
    @classmethod
    def _positive_timeout(cls, value: Any) -> int:
        try:
            timeout = int(value)
        except (TypeError, ValueError):
            return DEFAULT_PROBE_TIMEOUT_MS
        return timeout if timeout > 0 else DEFAULT_PROBE_TIMEOUT_MS
