from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, Union

from .types import EnvMode, Environment, EnvironmentConfig

logger = logging.getLogger(__name__)


class Prober(Protocol):
    async def probe(self, urls: Sequence[str], timeout_ms: int) -> bool: ...


async def resolve_environment(
    override: Optional[Union[Environment, str]],
    config: EnvironmentConfig,
    prober: Prober,
) -> Environment:
    """Decide the effective environment: user override, then env.json mode, then probe."""
    if override and override != EnvMode.AUTO.value:
        env = Environment(override)
        logger.info("env.resolved env=%s source=override", env.value)
        return env

    if config.mode is not EnvMode.AUTO:
        env = Environment(config.mode.value)
        logger.info("env.resolved env=%s source=config", env.value)
        return env

    reachable = await prober.probe(config.probe_urls, config.probe_timeout_ms)
    env = Environment.INTRANET if reachable else Environment.INTERNET
    logger.info("env.resolved env=%s source=probe", env.value)
    return env
