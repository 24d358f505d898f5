from __future__ import annotations

import json
import sys
import tempfile
import unittest
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from navhub.contracts.errors import ConfigFetchError  # noqa: E402
from navhub.services.environment.types import EnvMode  # noqa: E402
from navhub.services.http.client import HttpClient  # noqa: E402
from navhub.services.links.loader import ConfigLoader  # noqa: E402
from tests.site_fixture import COMMON, INTRANET, ZH_MESSAGES, write_site  # noqa: E402

BASE = "https://nav.example.com/site"


def _routes_handler(routes: dict):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/site/")
        if path not in routes:
            return httpx.Response(404)
        body = routes[path]
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, content=json.dumps(body, ensure_ascii=False).encode("utf-8"))

    return handler


class RemoteLoaderTestCase(unittest.IsolatedAsyncioTestCase):
    def _loader(self, routes: dict, **kwargs) -> ConfigLoader:
        self.client = HttpClient(transport=httpx.MockTransport(_routes_handler(routes)))
        return ConfigLoader(BASE, self.client, **kwargs)

    async def asyncTearDown(self):
        await self.client.aclose()

    async def test_environment_config_defaults_applied(self):
        loader = self._loader({"config/env.json": {"probeUrl": "http://intra/p.gif"}}, default_probe_timeout_ms=900)
        cfg = await loader.load_environment_config()
        self.assertIs(cfg.mode, EnvMode.AUTO)
        self.assertEqual(cfg.probe_urls, ("http://intra/p.gif",))
        self.assertEqual(cfg.probe_timeout_ms, 900)

    async def test_non_success_status_raises_with_resource(self):
        loader = self._loader({})
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_environment_config()
        self.assertEqual(ctx.exception.resource, "config/env.json")
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(str(ctx.exception), "config/env.json (404)")

    async def test_server_error_is_fetched_once_without_cache(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(503)

        self.client = HttpClient(transport=httpx.MockTransport(handler))
        loader = ConfigLoader(BASE, self.client)
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_environment_config()
        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].headers["Cache-Control"], "no-cache")

    async def test_unparseable_body_raises(self):
        loader = self._loader({"config/env.json": httpx.Response(200, content=b"<html>")})
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_environment_config()
        self.assertIn("invalid JSON", str(ctx.exception))

    async def test_wrong_structure_raises(self):
        loader = self._loader({"config/links.common.json": {"groups": "nope"}})
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_link_document("common")
        self.assertIn("invalid structure", ctx.exception.detail)

    async def test_link_documents_fetched_together(self):
        loader = self._loader({"config/links.common.json": COMMON, "config/links.intranet.json": INTRANET})
        common, specific = await loader.load_link_documents("intranet")
        self.assertEqual(len(common.groups), 2)
        self.assertEqual(specific.groups[1].title, "内部系统")

    async def test_either_link_document_failing_aborts(self):
        loader = self._loader({"config/links.common.json": COMMON})
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_link_documents("internet")
        self.assertEqual(ctx.exception.resource, "config/links.internet.json")
        await self.client.aclose()

        loader = self._loader({"config/links.internet.json": INTRANET})
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_link_documents("internet")
        self.assertEqual(ctx.exception.resource, "config/links.common.json")

    async def test_dictionary_missing_is_empty(self):
        loader = self._loader({"i18n/zh-CN.json": ZH_MESSAGES})
        self.assertEqual(await loader.load_dictionary("zh-CN"), ZH_MESSAGES)
        self.assertEqual(await loader.load_dictionary("en-US"), {})

    async def test_transport_error_raises_config_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        self.client = HttpClient(transport=httpx.MockTransport(handler))
        loader = ConfigLoader(BASE, self.client)
        with self.assertRaises(ConfigFetchError) as ctx:
            await loader.load_environment_config()
        self.assertIsNone(ctx.exception.status)
        self.assertIn("transport", ctx.exception.detail)


class LocalLoaderTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = write_site(Path(self._tmp.name), internet=None)
        self.client = HttpClient()
        self.loader = ConfigLoader(str(self.root), self.client)

    async def asyncTearDown(self):
        await self.client.aclose()
        self._tmp.cleanup()

    async def test_reads_documents_from_directory(self):
        cfg = await self.loader.load_environment_config()
        self.assertEqual(cfg.probe_urls, ("http://probe.local/p.gif",))
        common, specific = await self.loader.load_link_documents("intranet")
        self.assertEqual(common.groups[0].title, "常用工具")
        self.assertEqual(specific.groups[0].links[0].name, "工单")

    async def test_missing_file_is_404(self):
        with self.assertRaises(ConfigFetchError) as ctx:
            await self.loader.load_link_document("internet")
        self.assertEqual(str(ctx.exception), "config/links.internet.json (404)")

    async def test_broken_file_raises(self):
        (self.root / "config" / "env.json").write_text("{oops", encoding="utf-8")
        with self.assertRaises(ConfigFetchError):
            await self.loader.load_environment_config()

    def test_location(self):
        self.assertTrue(self.loader.location("config/env.json").endswith(str(Path("config") / "env.json")))
        self.assertEqual(
            ConfigLoader(BASE + "/", self.client).location("config/env.json"),
            BASE + "/config/env.json",
        )


if __name__ == "__main__":
    unittest.main()
