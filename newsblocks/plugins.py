"""newsblocks.plugins - Site adapter protocol and registry.

A site adapter knows how one news site lays out its article pages: how to
clean the raw markup, where the article body lives, where the description
is and which engine configuration suits the site.

Usage::

    from newsblocks import EngineConfig, register_adapter

    class ExampleNews:
        name = "example"
        base_url = "https://news.example.com"
        config = EngineConfig()

        def prepare(self, html: str) -> BeautifulSoup:
            return prepare_document(html, remove=[".share"])

        def locate_root(self, soup: BeautifulSoup) -> Tag | None:
            return soup.select_one("div.article-text")

        def description(self, soup: BeautifulSoup) -> str:
            return ""

    register_adapter(ExampleNews())

The contract is a ``runtime_checkable`` ``Protocol``, so ``isinstance()``
works in tests without inheriting from a base class.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag

from newsblocks.config import EngineConfig
from newsblocks.extractors.urlnorm import extract_domain

# ---------------------------------------------------------------------------
# Protocol definition
# ---------------------------------------------------------------------------

@runtime_checkable
class SiteAdapter(Protocol):
    """Per-site article layout knowledge used by :class:`~newsblocks.parser.PostParser`."""

    name: str
    base_url: str
    config: EngineConfig

    def prepare(self, html: str) -> BeautifulSoup:
        """Parse *html* and strip the site's noise (ads, share widgets, bylines)."""
        ...

    def locate_root(self, soup: BeautifulSoup) -> Tag | None:
        """Return the article body element, or None when it is missing."""
        ...

    def description(self, soup: BeautifulSoup) -> str:
        """Return the article description found in the page ("" if none)."""
        ...


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_registry: dict[str, SiteAdapter] = {}


def register_adapter(adapter: SiteAdapter) -> None:
    """Register *adapter* under its name, replacing any adapter of that name."""
    if not isinstance(adapter, SiteAdapter):
        raise TypeError(f"{adapter!r} does not implement the SiteAdapter protocol")
    _registry[adapter.name] = adapter


def get_adapter(name: str) -> SiteAdapter | None:
    """Return the adapter registered as *name*, or None."""
    return _registry.get(name)


def get_adapters() -> list[SiteAdapter]:
    """Return all registered adapters in registration order."""
    return list(_registry.values())


def adapter_for_url(url: str) -> SiteAdapter | None:
    """Return the registered adapter whose ``base_url`` host serves *url*.

    A host matches itself and its subdomains; the longest match wins.
    """
    host = extract_domain(url)
    if not host:
        return None
    best: SiteAdapter | None = None
    best_len = 0
    for adapter in _registry.values():
        domain = extract_domain(adapter.base_url)
        if not domain:
            continue
        if (host == domain or host.endswith("." + domain)) and len(domain) > best_len:
            best = adapter
            best_len = len(domain)
    return best


def clear_adapters() -> None:
    """Remove all registered adapters.  Primarily for use in tests."""
    _registry.clear()
