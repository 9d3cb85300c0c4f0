"""Read-only node views over parsed markup.

The extraction engine only needs a handful of capabilities from a DOM node:
its tag name, its text content, its children in document order and
attribute lookup.  :class:`NodeView` spells that out as a Protocol and
:class:`SoupNode` implements it on top of BeautifulSoup elements.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
)

# String subclasses that are markup, not text
_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

# Elements whose string content never counts as article text
OPAQUE_TAGS: frozenset[str] = frozenset({"script", "style", "noscript", "template"})


@runtime_checkable
class NodeView(Protocol):
    """What the engine reads from a node.  It never mutates the tree."""

    @property
    def tag(self) -> str | None:
        """Lower-case element name, or ``None`` for text and other leaves."""
        ...

    @property
    def is_text(self) -> bool:
        ...

    @property
    def text(self) -> str:
        """Concatenated text content of the node (DOM ``textContent``)."""
        ...

    def text_without(self, tags: frozenset[str]) -> str:
        """Text content, leaving out whatever sits inside elements named in *tags*."""
        ...

    def children(self) -> Iterator[NodeView]:
        ...

    def attr(self, name: str) -> str | None:
        ...


def _inside_any(string: PageElement, stop: PageElement, tags: frozenset[str]) -> bool:
    for parent in string.parents:
        if parent is stop:
            return False
        if parent.name in tags:
            return True
    return False


class SoupNode:
    """:class:`NodeView` over a BeautifulSoup element."""

    __slots__ = ("_el",)

    def __init__(self, element: PageElement) -> None:
        self._el = element

    def __repr__(self) -> str:
        return f"SoupNode({self.tag or type(self._el).__name__!s})"

    @property
    def element(self) -> PageElement:
        return self._el

    @property
    def tag(self) -> str | None:
        if isinstance(self._el, Tag):
            return (self._el.name or "").lower() or None
        return None

    @property
    def is_text(self) -> bool:
        return isinstance(self._el, NavigableString) and not isinstance(
            self._el, _NON_TEXT_STRINGS,
        )

    @property
    def text(self) -> str:
        return self.text_without(OPAQUE_TAGS)

    def text_without(self, tags: frozenset[str]) -> str:
        el = self._el
        if isinstance(el, NavigableString):
            return "" if isinstance(el, _NON_TEXT_STRINGS) else str(el)
        if not isinstance(el, Tag) or el.name in tags:
            return ""
        parts: list[str] = []
        for desc in el.descendants:
            if isinstance(desc, Tag):
                if desc.name == "br":
                    parts.append("\n")
                continue
            if isinstance(desc, _NON_TEXT_STRINGS) or not isinstance(desc, NavigableString):
                continue
            if _inside_any(desc, el, tags):
                continue
            parts.append(str(desc))
        return "".join(parts)

    def children(self) -> Iterator[SoupNode]:
        if isinstance(self._el, Tag):
            for child in self._el.children:
                yield SoupNode(child)

    def attr(self, name: str) -> str | None:
        if not isinstance(self._el, Tag):
            return None
        value = self._el.get(name)
        if value is None:
            return None
        # multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return " ".join(str(v) for v in value)
        return str(value)


def wrap(element: PageElement | NodeView | None) -> NodeView | None:
    """Return a :class:`NodeView` for *element* (``None`` passes through)."""
    if element is None:
        return None
    if isinstance(element, PageElement):
        return SoupNode(element)
    return element


def document_root(soup: BeautifulSoup) -> NodeView:
    """Return the ``<body>`` of *soup*, or the document itself when absent."""
    body = soup.find("body")
    return SoupNode(body if isinstance(body, Tag) else soup)
