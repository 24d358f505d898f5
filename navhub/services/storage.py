"""Client-local persisted state: a string key/value store kept in one JSON file."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
LANG_KEY = "nav_lang"
DENSITY_KEY = "nav_density"
ENV_OVERRIDE_KEY = "nav_env_override"
FAVORITES_KEY = "nav_favorites"


class LocalStateStore:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("storage.read_failed path=%s err=%s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("storage.malformed path=%s type=%s", self.path, type(data).__name__)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._read_all().get(key, default)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def get_json(self, key: str, default: Any = None) -> Any:
        """Decode a JSON-encoded value; malformed content counts as absent."""
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("storage.malformed_value key=%s", key)
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))
