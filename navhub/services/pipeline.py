"""Session pipeline: Loader -> Resolver -> Aggregator -> Favorites overlay.

Each stage takes the previous stage's context object and returns a new one.
Changing the environment override restarts the pipeline from the first stage.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

import httpx

from ..contracts.errors import ConfigFetchError
from ..settings.config import Settings
from .environment.prober import ReachabilityProber
from .environment.resolver import Prober, resolve_environment
from .environment.types import Environment, EnvironmentConfig
from .favorites import FavoritesStore, build_favorites_group
from .http.client import HttpClient
from .i18n import Translator
from .links.aggregator import merge_groups
from .links.loader import ConfigLoader
from .links.types import LinkGroup
from .preferences import get_locale, get_override, set_locale, cycle_locale, set_override
from .storage import LocalStateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    env_config: EnvironmentConfig


@dataclass(frozen=True, slots=True)
class ResolvedContext:
    env_config: EnvironmentConfig
    environment: Environment


@dataclass(frozen=True, slots=True)
class AggregatedContext:
    environment: Environment
    groups: Tuple[LinkGroup, ...]


@dataclass(frozen=True, slots=True)
class NavigationView:
    environment: Optional[Environment]
    locale: str
    groups: Tuple[LinkGroup, ...]
    favorites_group: Optional[LinkGroup]
    favorite_keys: FrozenSet[str]
    status: str
    error: Optional[ConfigFetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def load_config(loader: ConfigLoader) -> LoadedConfig:
    return LoadedConfig(env_config=await loader.load_environment_config())


async def resolve(loaded: LoadedConfig, override: Optional[str], prober: Prober) -> ResolvedContext:
    environment = await resolve_environment(override, loaded.env_config, prober)
    return ResolvedContext(env_config=loaded.env_config, environment=environment)


async def aggregate(resolved: ResolvedContext, loader: ConfigLoader) -> AggregatedContext:
    common, specific = await loader.load_link_documents(resolved.environment.value)
    groups = merge_groups(common.groups, specific.groups)
    logger.info(
        "links.aggregated env=%s groups=%d links=%d",
        resolved.environment.value,
        len(groups),
        sum(len(g.links) for g in groups),
    )
    return AggregatedContext(environment=resolved.environment, groups=tuple(groups))


async def run_pipeline(
    loader: ConfigLoader,
    prober: Prober,
    override: Optional[str],
) -> AggregatedContext:
    loaded = await load_config(loader)
    resolved = await resolve(loaded, override, prober)
    return await aggregate(resolved, loader)


def build_view(
    aggregated: AggregatedContext,
    favorite_keys: FrozenSet[str],
    translator: Translator,
) -> NavigationView:
    favorites_group = build_favorites_group(aggregated.groups, favorite_keys)
    groups = aggregated.groups if favorites_group is None else (favorites_group, *aggregated.groups)
    return NavigationView(
        environment=aggregated.environment,
        locale=translator.locale,
        groups=groups,
        favorites_group=favorites_group,
        favorite_keys=favorite_keys,
        status=translator.loaded_message(aggregated.environment.value),
    )


def failed_view(error: ConfigFetchError, translator: Translator) -> NavigationView:
    return NavigationView(
        environment=None,
        locale=translator.locale,
        groups=(),
        favorites_group=None,
        favorite_keys=frozenset(),
        status=translator.error_message(error),
        error=error,
    )


class NavigationSession:
    """In-memory state of one client session.

    The environment is resolved once per load; favorite and locale changes
    rebuild the view from the cached aggregation without refetching.
    """

    def __init__(
        self,
        loader: ConfigLoader,
        prober: Prober,
        store: LocalStateStore,
        *,
        system_language: Optional[str] = None,
    ) -> None:
        self.loader = loader
        self.prober = prober
        self.store = store
        self.favorites = FavoritesStore(store)
        self.system_language = system_language
        self._aggregated: Optional[AggregatedContext] = None
        self._error: Optional[ConfigFetchError] = None
        self._translator: Optional[Translator] = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._aggregated is not None or self._error is not None

    async def _translator_for_current_locale(self) -> Translator:
        locale = await asyncio.to_thread(get_locale, self.store, self.system_language)
        if self._translator is None or self._translator.locale != locale:
            self._translator = Translator(locale, await self.loader.load_dictionary(locale))
        return self._translator

    async def _render(self) -> NavigationView:
        translator = await self._translator_for_current_locale()
        if self._aggregated is not None:
            favorite_keys = await asyncio.to_thread(self.favorites.keys)
            return build_view(self._aggregated, frozenset(favorite_keys), translator)
        if self._error is not None:
            return failed_view(self._error, translator)
        raise RuntimeError("navigation session rendered before loading")

    async def _run_pipeline_locked(self) -> None:
        self._aggregated = None
        self._error = None
        override = await asyncio.to_thread(get_override, self.store)
        try:
            self._aggregated = await run_pipeline(self.loader, self.prober, override)
        except ConfigFetchError as exc:
            logger.error("pipeline.load_failed resource=%s err=%s", exc.resource, exc)
            self._error = exc

    async def _load_once(self) -> None:
        async with self._lock:
            if not self.loaded:
                await self._run_pipeline_locked()

    async def reload(self) -> NavigationView:
        """Discard the current resolution and run the whole pipeline again."""
        async with self._lock:
            await self._run_pipeline_locked()
        return await self._render()

    async def view(self) -> NavigationView:
        if not self.loaded:
            await self._load_once()
        return await self._render()

    async def toggle_favorite(self, key: str) -> NavigationView:
        await asyncio.to_thread(self.favorites.toggle_key, key)
        return await self.view()

    async def change_override(self, value: str) -> NavigationView:
        await asyncio.to_thread(set_override, self.store, value)
        return await self.reload()

    async def change_locale(self, value: Optional[str] = None) -> NavigationView:
        """Switch to ``value``, or to the next supported locale when omitted."""
        if value is None:
            await asyncio.to_thread(cycle_locale, self.store, self.system_language)
        else:
            await asyncio.to_thread(set_locale, self.store, value)
        return await self.view()


def build_session(
    settings: Settings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[NavigationSession, HttpClient]:
    http_client = HttpClient(
        timeout=settings.http_timeout,
        transport=transport,
    )
    loader = ConfigLoader(
        settings.site_root,
        http_client,
        default_probe_timeout_ms=settings.default_probe_timeout_ms,
    )
    prober = ReachabilityProber(http_client, secure_context=settings.is_secure_context())
    session = NavigationSession(
        loader,
        prober,
        LocalStateStore(settings.state_path),
        system_language=settings.system_language(),
    )
    return session, http_client
