# mixed_scout/crawler/fetcher.py
"""
Fetcher module: one HTTP(S) request per page, certificate validation disabled.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientResponse, ClientSession


class FetchError(Exception):
    """Transport-level failure while fetching a single URL."""

    def __init__(self, url: str, reason: BaseException | str) -> None:
        self.url = url
        self.reason = reason
        self.message = str(reason) or type(reason).__name__
        super().__init__(f"{url}: {self.message}")


class Fetcher:
    """Issues GET requests and hands the open response to the caller.

    The response body is *not* read and the response is *not* released here:
    the caller scans ``response.content`` and then calls ``response.release()``.
    """

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> ClientResponse:
        """
        GET *url*, accepting any server certificate.

        Any HTTP status counts as success; only transport errors raise
        :class:`FetchError`.
        """
        try:
            return await self.session.get(url, ssl=False, raise_for_status=False)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise FetchError(url, exc) from exc
