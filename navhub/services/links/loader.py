from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict

import httpx
from pydantic import ValidationError

from ...contracts.errors import ConfigFetchError
from ..environment.types import DEFAULT_PROBE_TIMEOUT_MS, EnvironmentConfig
from ..http.client import HttpClient
from .types import LinkDocument

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "config/env.json"
COMMON_CONTEXT = "common"


def link_document_path(context: str) -> str:
    return f"config/links.{context}.json"


def i18n_document_path(locale: str) -> str:
    return f"i18n/{locale}.json"


def _is_remote(root: str) -> bool:
    return root.lower().startswith(("http://", "https://"))


def _read_local_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


class ConfigLoader:
    """Fetches the raw JSON documents under a site root (URL or directory)."""

    def __init__(
        self,
        site_root: str,
        http_client: HttpClient,
        *,
        default_probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS,
    ) -> None:
        self.site_root = site_root
        self.http_client = http_client
        self.default_probe_timeout_ms = default_probe_timeout_ms

    def location(self, relative: str) -> str:
        if _is_remote(self.site_root):
            return f"{self.site_root.rstrip('/')}/{relative}"
        return str(Path(self.site_root) / relative)

    async def fetch_document(self, relative: str) -> Any:
        """Fetch and parse one document; raise ConfigFetchError on any failure."""
        if not _is_remote(self.site_root):
            path = Path(self.site_root) / relative
            try:
                return await asyncio.to_thread(_read_local_json, path)
            except FileNotFoundError as exc:
                raise ConfigFetchError(relative, status=404, detail="not found") from exc
            except (OSError, ValueError) as exc:
                raise ConfigFetchError(relative, detail=f"unreadable: {exc}") from exc

        url = self.location(relative)
        try:
            resp = await self.http_client.get(url)
        except httpx.HTTPError as exc:
            raise ConfigFetchError(relative, detail=f"transport: {exc}") from exc
        if not resp.is_success:
            raise ConfigFetchError(relative, status=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise ConfigFetchError(relative, detail="invalid JSON") from exc

    async def load_environment_config(self) -> EnvironmentConfig:
        data = await self.fetch_document(ENV_CONFIG_PATH)
        if not isinstance(data, dict):
            raise ConfigFetchError(ENV_CONFIG_PATH, detail="expected a JSON object")
        payload = {"probeTimeoutMs": self.default_probe_timeout_ms, **data}
        try:
            config = EnvironmentConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigFetchError(ENV_CONFIG_PATH, detail=f"invalid structure: {exc}") from exc
        logger.info(
            "env.config_loaded mode=%s probe_urls=%d timeout_ms=%d",
            config.mode.value,
            len(config.probe_urls),
            config.probe_timeout_ms,
        )
        return config

    async def load_link_document(self, context: str) -> LinkDocument:
        relative = link_document_path(context)
        data = await self.fetch_document(relative)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigFetchError(relative, detail="expected a JSON object")
        try:
            document = LinkDocument.model_validate(data)
        except ValidationError as exc:
            raise ConfigFetchError(relative, detail=f"invalid structure: {exc}") from exc
        logger.info("links.document_loaded context=%s groups=%d", context, len(document.groups))
        return document

    async def load_link_documents(self, context: str) -> tuple[LinkDocument, LinkDocument]:
        """Fetch the common and context documents concurrently; both must succeed."""
        results = await asyncio.gather(
            self.load_link_document(COMMON_CONTEXT),
            self.load_link_document(context),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        common, specific = results
        return common, specific  # type: ignore[return-value]

    async def load_dictionary(self, locale: str) -> Dict[str, str]:
        """Locale dictionary; any failure yields an empty mapping."""
        relative = i18n_document_path(locale)
        try:
            data = await self.fetch_document(relative)
        except ConfigFetchError as exc:
            logger.info("i18n.dictionary_missing locale=%s err=%s", locale, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("i18n.dictionary_invalid locale=%s", locale)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}
