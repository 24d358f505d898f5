from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from navhub.services.environment.resolver import resolve_environment  # noqa: E402
from navhub.services.environment.types import (  # noqa: E402
    DEFAULT_PROBE_TIMEOUT_MS,
    EnvMode,
    Environment,
    EnvironmentConfig,
)
from tests.site_fixture import FakeProber  # noqa: E402


class EnvironmentConfigTestCase(unittest.TestCase):
    def test_defaults(self):
        cfg = EnvironmentConfig.model_validate({})
        self.assertIs(cfg.mode, EnvMode.AUTO)
        self.assertEqual(cfg.probe_urls, ())
        self.assertEqual(cfg.probe_timeout_ms, DEFAULT_PROBE_TIMEOUT_MS)

    def test_singular_probe_url_is_accepted(self):
        cfg = EnvironmentConfig.model_validate({"probeUrl": "http://a/p.gif"})
        self.assertEqual(cfg.probe_urls, ("http://a/p.gif",))

    def test_plural_probe_urls_win_over_singular(self):
        cfg = EnvironmentConfig.model_validate({"probeUrl": "http://old", "probeUrls": ["http://a", "", "http://b"]})
        self.assertEqual(cfg.probe_urls, ("http://a", "http://b"))

    def test_mode_is_normalized(self):
        self.assertIs(EnvironmentConfig.model_validate({"mode": " INTRANET "}).mode, EnvMode.INTRANET)
        with self.assertLogs("navhub.services.environment.types", level="WARNING"):
            self.assertIs(EnvironmentConfig.model_validate({"mode": "vpn"}).mode, EnvMode.AUTO)

    def test_non_positive_timeout_falls_back(self):
        self.assertEqual(EnvironmentConfig.model_validate({"probeTimeoutMs": 0}).probe_timeout_ms, DEFAULT_PROBE_TIMEOUT_MS)
        self.assertEqual(EnvironmentConfig.model_validate({"probeTimeoutMs": "abc"}).probe_timeout_ms, DEFAULT_PROBE_TIMEOUT_MS)
        self.assertEqual(EnvironmentConfig.model_validate({"probeTimeoutMs": 300}).probe_timeout_ms, 300)


class ResolveEnvironmentTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_override_always_wins(self):
        for override in ("intranet", "internet"):
            for mode in ("auto", "intranet", "internet"):
                for reachable in (True, False):
                    prober = FakeProber(reachable)
                    cfg = EnvironmentConfig.model_validate({"mode": mode, "probeUrls": ["http://p"]})
                    env = await resolve_environment(override, cfg, prober)
                    self.assertEqual(env.value, override)
                    self.assertEqual(prober.calls, [])

    async def test_config_mode_used_without_probing(self):
        for override in (None, "", "auto"):
            for mode in ("intranet", "internet"):
                prober = FakeProber(True)
                cfg = EnvironmentConfig.model_validate({"mode": mode, "probeUrls": ["http://p"]})
                env = await resolve_environment(override, cfg, prober)
                self.assertEqual(env.value, mode)
                self.assertEqual(prober.calls, [])

    async def test_auto_mode_probes_with_config_values(self):
        cfg = EnvironmentConfig.model_validate({"probeUrls": ["http://a", "http://b"], "probeTimeoutMs": 250})
        prober = FakeProber(True)
        self.assertIs(await resolve_environment("auto", cfg, prober), Environment.INTRANET)
        self.assertEqual(prober.calls, [(("http://a", "http://b"), 250)])

        prober = FakeProber(False)
        self.assertIs(await resolve_environment(None, cfg, prober), Environment.INTERNET)
        self.assertEqual(len(prober.calls), 1)


if __name__ == "__main__":
    unittest.main()
