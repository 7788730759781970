# File: mixed_scout/classifier.py
"""URL classification for page attributes.

Every raw attribute value found on a page ends up as exactly one of:

* :class:`InsecureResource`: an embedded resource loaded over plain ``http``;
* :class:`InScopeLink`: a navigational link to the same site, made absolute;
* :class:`Rejected`: anything else, with a :class:`RejectReason`.

The functions here are pure: the same ``(base, candidate)`` pair always gives
the same answer, which the crawler relies on for deduplication.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union
from urllib.parse import SplitResult, urljoin, urlsplit

__all__: Sequence[str] = (
    "RejectReason",
    "InsecureResource",
    "InScopeLink",
    "Rejected",
    "Classification",
    "classify_resource",
    "classify_link",
    "normalize_url",
    "site_host",
)

_INSECURE_SCHEME = "http"
_SECURE_SCHEME = "https"

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WHITESPACE = " \t\n\r\f"


class RejectReason(str, Enum):
    """Why a candidate URL was not kept."""

    EMPTY = "empty"
    ANCHOR = "anchor"
    MALFORMED = "malformed"
    OFF_HOST = "off-host"
    SECURE = "secure"
    INHERITS_SCHEME = "inherits-scheme"
    UNSUPPORTED_SCHEME = "unsupported-scheme"


@dataclass(frozen=True, slots=True)
class InsecureResource:
    url: str


@dataclass(frozen=True, slots=True)
class InScopeLink:
    url: str


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectReason


Classification = Union[InsecureResource, InScopeLink, Rejected]


def normalize_url(url: str) -> str:
    """Strip exactly one trailing slash."""
    return url[:-1] if url.endswith("/") else url


def site_host(parts: SplitResult) -> str:
    """Host used for scope decisions: lower-case, no userinfo, one ``www.`` dropped."""
    host = parts.netloc.rpartition("@")[2].lower()
    return host.removeprefix("www.")


def _parse(raw: str) -> Optional[SplitResult]:
    """Split *raw* into components or return None if it is not a valid URL."""
    if raw.startswith(":") or _CONTROL_CHARS_RE.search(raw) or _BAD_ESCAPE_RE.search(raw):
        return None
    try:
        parts = urlsplit(raw)
        parts.port  # non-numeric or out-of-range ports raise here
    except ValueError:
        return None
    if any(ch in parts.netloc for ch in _WHITESPACE):
        return None
    return parts


def classify_resource(base_url: str, raw: str) -> Classification:
    """Classify the value of a resource attribute (``src``, ``poster``, ``data``).

    Only absolute ``http://`` references are insecure. Relative and
    scheme-relative references are loaded with the page's own scheme.
    *base_url* is accepted for symmetry with :func:`classify_link`.
    """
    candidate = raw.strip(_WHITESPACE)
    if not candidate:
        return Rejected(RejectReason.EMPTY)

    parts = _parse(candidate)
    if parts is None:
        return Rejected(RejectReason.MALFORMED)

    scheme = parts.scheme.lower()
    if not scheme:
        return Rejected(RejectReason.INHERITS_SCHEME)
    if scheme == _SECURE_SCHEME:
        return Rejected(RejectReason.SECURE)
    if scheme != _INSECURE_SCHEME:
        return Rejected(RejectReason.UNSUPPORTED_SCHEME)
    if not parts.netloc:
        return Rejected(RejectReason.MALFORMED)

    return InsecureResource(normalize_url(parts.geturl()))


def classify_link(base_url: str, raw: str) -> Classification:
    """Classify an anchor ``href`` relative to the page at *base_url*.

    Relative references are resolved against the base (RFC 3986); the result
    is kept only when its host matches the base host, ignoring ``www.``.
    """
    candidate = raw.strip(_WHITESPACE)
    if not candidate:
        return Rejected(RejectReason.EMPTY)
    if candidate.startswith("#"):
        return Rejected(RejectReason.ANCHOR)

    base_parts = _parse(base_url)
    if _parse(candidate) is None or base_parts is None:
        return Rejected(RejectReason.MALFORMED)

    absolute = urljoin(base_url, candidate)
    parts = _parse(absolute)
    if parts is None:
        return Rejected(RejectReason.MALFORMED)

    if site_host(parts) != site_host(base_parts):
        return Rejected(RejectReason.OFF_HOST)

    return InScopeLink(normalize_url(absolute))
