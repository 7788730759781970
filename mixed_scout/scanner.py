# File: mixed_scout/scanner.py
"""mixed_scout.scanner: извлечение небезопасных ресурсов и внутренних ссылок со страницы."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator, Sequence
from typing import Union

from aiohttp import ClientError, StreamReader

from mixed_scout.classifier import InScopeLink, InsecureResource, classify_link, classify_resource
from mixed_scout.crawler.models import PageScan
from mixed_scout.logger import logger
from mixed_scout.parser.tokenizer import Token, TokenType, tokenize

__all__: Sequence[str] = (
    "RESOURCE_TAGS",
    "is_resource_token",
    "is_link_token",
    "resource_attribute_values",
    "scan_tokens",
    "scan_markup",
    "scan_stream",
)

#: Tags that embed a resource into the page.
RESOURCE_TAGS: frozenset[str] = frozenset(
    {"img", "iframe", "frame", "embed", "object", "video", "audio", "source", "track"}
)
_OPENING = (TokenType.START, TokenType.SELF_CLOSING)
_CHUNK_SIZE = 64 * 1024


def is_resource_token(token: Token) -> bool:
    return token.type in _OPENING and token.name in RESOURCE_TAGS


def is_link_token(token: Token) -> bool:
    return token.type is TokenType.START and token.name == "a"


def resource_attribute_values(token: Token) -> Iterator[str]:
    """Values of the attributes that reference a resource on this tag."""
    for name, value in token.attrs:
        if (token.name == "object" and name == "data") or name in ("src", "poster"):
            yield value


def scan_tokens(base_url: str, tokens: Iterable[Token]) -> PageScan:
    """Walk *tokens* of the page at *base_url* and collect resources and links.

    An ``ERROR`` token ends the walk; whatever was collected up to that point
    is returned.
    """
    resources: set[str] = set()
    links: set[str] = set()

    for token in tokens:
        if token.type is TokenType.ERROR:
            logger.debug("Tokenizer stopped on %s: %s", base_url, token.name)
            break

        if is_resource_token(token):
            for value in resource_attribute_values(token):
                result = classify_resource(base_url, value)
                if isinstance(result, InsecureResource):
                    resources.add(result.url)
        elif is_link_token(token):
            href = token.get("href")
            if href is None:
                continue
            result = classify_link(base_url, href)
            if isinstance(result, InScopeLink):
                links.add(result.url)
            else:
                logger.debug("Skipped link %r on %s: %s", href, base_url, result.reason.value)

    return PageScan(resources=frozenset(resources), links=frozenset(links))


def scan_markup(base_url: str, markup: Union[str, bytes]) -> PageScan:
    """Tokenize and scan a whole document."""
    return scan_tokens(base_url, tokenize(markup))


async def scan_stream(base_url: str, stream: StreamReader) -> PageScan:
    """Read the response body *stream* and scan it.

    A body cut short by the transport is scanned as far as it was received.
    The stream is not closed here.
    """
    chunks: list[bytes] = []
    try:
        async for chunk in stream.iter_chunked(_CHUNK_SIZE):
            chunks.append(chunk)
    except (ClientError, asyncio.TimeoutError) as exc:
        logger.debug("Body of %s truncated after %d bytes: %r", base_url, sum(map(len, chunks)), exc)
    return scan_markup(base_url, b"".join(chunks))
