# File: tests/conftest.py
from __future__ import annotations

import ssl
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Optional

import pytest
import pytest_asyncio
import trustme
from aiohttp import web

from mixed_scout.config import CrawlConfig

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


def _html_page(body: str, status: int = 200) -> Handler:
    async def handler(_):
        return web.Response(text=body, status=status, content_type="text/html")

    return handler


@pytest.fixture()
def html_page() -> Callable[..., Handler]:
    """Return a factory of aiohttp handlers serving a fixed text/html body."""
    return _html_page


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[..., Awaitable[str]]]:
    """
    Factory fixture: start an aiohttp app with the given GET routes and
    return its base URL. With *ssl_context* the app is served over TLS.
    All apps are cleaned up after the test.
    """
    runners: list[web.AppRunner] = []

    async def _serve(routes: Mapping[str, Handler], ssl_context: Optional[ssl.SSLContext] = None) -> str:
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port, ssl_context=ssl_context)
        await site.start()
        runners.append(runner)
        scheme = "https" if ssl_context is not None else "http"
        return f"{scheme}://127.0.0.1:{port}"

    yield _serve

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def make_config() -> Callable[..., CrawlConfig]:
    """Build a CrawlConfig with short timeouts suitable for local servers."""

    def _make(start_url: str, **overrides) -> CrawlConfig:
        values = {"timeout": 2.0, "poll_interval": 0.2, "user_agent": "TestAgent/1.0"}
        values.update(overrides)
        return CrawlConfig(start_url=start_url, **values)

    return _make


@pytest.fixture()
def tls_context() -> ssl.SSLContext:
    """Server TLS context whose certificate is signed by a throwaway CA no client trusts."""
    ca = trustme.CA()
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ca.issue_cert("127.0.0.1").configure_cert(context)
    return context
