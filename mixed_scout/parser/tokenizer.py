# === FILE: mixed_scout/parser/tokenizer.py ===
"""Pull-based markup token stream.

The page scanner only needs a flat sequence of tags in document order, with
their attributes in source order.  BeautifulSoup does the lexical work; this
module flattens the resulting tree back into tokens:

* ``START`` / ``END`` for elements that can hold content (``<a>``, ``<video>``…);
* ``SELF_CLOSING`` for void elements (``<img>``, ``<source>``, ``<track>``…);
* ``TEXT`` for character data (comments, doctypes and CDATA are skipped);
* ``ERROR`` once, as the last token, when the parser rejects the markup.

The stream ends after the last token; an ``ERROR`` token is always terminal.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PreformattedString, Tag

__all__: Sequence[str] = ("TokenType", "Token", "tokenize")


class TokenType(Enum):
    START = "start"
    END = "end"
    SELF_CLOSING = "self-closing"
    TEXT = "text"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical unit of the page.

    ``name`` is the lower-case tag name for tag tokens, the character data for
    ``TEXT`` and the error message for ``ERROR``.
    """

    type: TokenType
    name: str = ""
    attrs: tuple[tuple[str, str], ...] = ()

    def get(self, key: str) -> str | None:
        """Return the first value of attribute *key*, if present."""
        for name, value in self.attrs:
            if name == key:
                return value
        return None


def _tag_attrs(tag: Tag) -> tuple[tuple[str, str], ...]:
    return tuple((str(name).lower(), str(value)) for name, value in tag.attrs.items())


def _walk(root: Tag) -> Iterator[Token]:
    # Explicit stack: deeply nested pages must not hit the recursion limit.
    stack: list[tuple[Tag, Iterator]] = [(root, iter(root.contents))]
    while stack:
        parent, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            if parent is not root:
                yield Token(TokenType.END, parent.name)
            continue
        if isinstance(child, Tag):
            if child.is_empty_element:
                yield Token(TokenType.SELF_CLOSING, child.name, _tag_attrs(child))
                continue
            yield Token(TokenType.START, child.name, _tag_attrs(child))
            stack.append((child, iter(child.contents)))
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            yield Token(TokenType.TEXT, str(child))


def tokenize(markup: Union[str, bytes]) -> Iterator[Token]:
    """Yield tokens for *markup*; bytes are decoded with BeautifulSoup's detection."""
    try:
        soup = BeautifulSoup(
            markup,
            "html.parser",
            multi_valued_attributes=None,
            on_duplicate_attribute="ignore",
        )
    except ParserRejectedMarkup as exc:
        yield Token(TokenType.ERROR, str(exc))
        return
    yield from _walk(soup)
