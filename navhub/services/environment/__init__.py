from .prober import ReachabilityProber, cache_busted, expand_candidates
from .resolver import resolve_environment
from .settle import SettleOnce
from .types import EnvMode, Environment, EnvironmentConfig

__all__ = [
    "EnvMode",
    "Environment",
    "EnvironmentConfig",
    "ReachabilityProber",
    "SettleOnce",
    "cache_busted",
    "expand_candidates",
    "resolve_environment",
]
