# File: tests/test_fetcher.py
from __future__ import annotations

import pytest
from aiohttp import ClientSession, ClientSSLError, TCPConnector, web

from mixed_scout.crawler.fetcher import FetchError, Fetcher


@pytest.mark.asyncio()
async def test_fetch_returns_open_response(serve, html_page):
    base = await serve({"/": html_page('<img src="http://x.test/a.png">')})
    async with ClientSession(connector=TCPConnector(ssl=False)) as session:
        response = await Fetcher(session).fetch(base + "/")
        try:
            assert response.status == 200
            assert not response.closed
            body = await response.content.read()
            assert b"http://x.test/a.png" in body
        finally:
            response.release()


@pytest.mark.asyncio()
async def test_http_error_status_is_not_a_fetch_error(serve, html_page):
    base = await serve({"/": html_page("missing", status=404)})
    async with ClientSession() as session:
        response = await Fetcher(session).fetch(base + "/nowhere")
        try:
            assert response.status == 404
        finally:
            response.release()


@pytest.mark.asyncio()
async def test_connection_refused_raises_fetch_error(unused_tcp_port):
    url = f"http://127.0.0.1:{unused_tcp_port}/"
    async with ClientSession() as session:
        with pytest.raises(FetchError) as info:
            await Fetcher(session).fetch(url)
    assert info.value.url == url
    assert info.value.message


@pytest.mark.asyncio()
async def test_invalid_url_raises_fetch_error():
    async with ClientSession() as session:
        with pytest.raises(FetchError):
            await Fetcher(session).fetch("not a url")


@pytest.mark.asyncio()
async def test_request_uses_session_headers(serve):
    seen = {}

    async def echo(request):
        seen["ua"] = request.headers.get("User-Agent")
        return web.Response(text="ok", content_type="text/html")

    base = await serve({"/": echo})
    async with ClientSession(headers={"User-Agent": "TestAgent/1.0"}) as session:
        response = await Fetcher(session).fetch(base + "/")
        response.release()
    assert seen["ua"] == "TestAgent/1.0"


@pytest.mark.asyncio()
async def test_untrusted_certificate_is_accepted(serve, html_page, tls_context):
    base = await serve({"/": html_page('<img src="http://x.test/a.png">')}, ssl_context=tls_context)
    async with ClientSession() as session:
        with pytest.raises(ClientSSLError):
            await session.get(base + "/")

        response = await Fetcher(session).fetch(base + "/")
        try:
            assert response.status == 200
            assert b"http://x.test/a.png" in await response.content.read()
        finally:
            response.release()
