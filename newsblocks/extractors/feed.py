"""RSS 2.0 / Atom 1.0 feed reader.

Turns feed XML into :class:`FeedEntry` records; fetching the feed is the
caller's business.  Parsing goes through defusedxml, so entity expansion and
external references are refused.

News feeds often ship more than a teaser:

  - ``<yandex:full-text>`` carries the article as plain text
  - ``<turbo:content>`` / ``<content:encoded>`` carry the article markup
  - ``<enclosure type="image/...">`` carries the lead image

Extension elements are matched by local name whatever their namespace URI,
since publishers disagree on the exact URIs.  Publish dates are kept as the
raw strings found in the feed.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET  # for ET.ParseError only
from typing import NamedTuple

import defusedxml.ElementTree as defused_ET
from defusedxml import DefusedXmlException

from newsblocks.extractors.urlnorm import clean_url, resolve_url

logger = logging.getLogger(__name__)

_ATOM_NS = "http://www.w3.org/2005/Atom"
_DC_NS = "http://purl.org/dc/elements/1.1/"


class FeedEntry(NamedTuple):
    """One article announced by a feed."""

    url: str
    title: str
    author: str | None
    published_at: str | None
    summary: str | None
    image: str | None = None
    # Plain article text shipped in the feed (yandex:full-text)
    full_text: str | None = None
    # Article markup shipped in the feed (turbo:content, content:encoded)
    content_html: str | None = None


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------

def _text(el: ET.Element | None) -> str | None:
    if el is None:
        return None
    value = (el.text or "").strip()
    return value or None


def _first_text(parent: ET.Element, *paths: str) -> str | None:
    """Return the first non-empty text among the children at *paths*."""
    for path in paths:
        value = _text(parent.find(path))
        if value:
            return value
    return None


def _extension_text(parent: ET.Element, *local_names: str) -> str | None:
    """Return the text of the first namespaced child with one of *local_names*."""
    for name in local_names:
        for child in parent:
            tag = child.tag
            if isinstance(tag, str) and tag.startswith("{") and tag.rsplit("}", 1)[1] == name:
                value = _text(child)
                if value:
                    return value
    return None


def _absolute(url: str | None, base_url: str) -> str | None:
    url = clean_url(url)
    return resolve_url(url, base_url) if url else None


# ---------------------------------------------------------------------------
# RSS 2.0
# ---------------------------------------------------------------------------

def _rss_link(item: ET.Element) -> str | None:
    link = _text(item.find("link"))
    if link:
        return link
    # <guid> doubles as the permalink unless isPermaLink="false"
    guid = item.find("guid")
    if guid is not None and guid.get("isPermaLink", "true").lower() != "false":
        return _text(guid)
    return None


def _rss_image(item: ET.Element, base_url: str) -> str | None:
    for enclosure in item.findall("enclosure"):
        mime = (enclosure.get("type") or "image/").lower()
        if mime.startswith("image/"):
            url = _absolute(enclosure.get("url"), base_url)
            if url:
                return url
    return None


def _rss_entry(item: ET.Element, base_url: str) -> FeedEntry | None:
    url = _absolute(_rss_link(item), base_url)
    if not url:
        return None
    return FeedEntry(
        url=url,
        title=_text(item.find("title")) or "",
        author=_first_text(item, f"{{{_DC_NS}}}creator", "author"),
        published_at=_first_text(item, "pubDate", f"{{{_DC_NS}}}date"),
        summary=_text(item.find("description")),
        image=_rss_image(item, base_url),
        full_text=_extension_text(item, "full-text"),
        content_html=_extension_text(item, "content", "encoded"),
    )


def _parse_rss(root: ET.Element, base_url: str) -> list[FeedEntry]:
    channel = root.find("channel")
    items = (channel if channel is not None else root).findall("item")
    entries = [_rss_entry(item, base_url) for item in items]
    return [e for e in entries if e is not None]


# ---------------------------------------------------------------------------
# Atom 1.0
# ---------------------------------------------------------------------------

def _atom_entry(entry: ET.Element, pfx: str, base_url: str) -> FeedEntry | None:
    href = None
    for link in entry.findall(f"{pfx}link"):
        if link.get("rel", "alternate") in ("alternate", "") and link.get("href", "").strip():
            href = link.get("href")
            break
    url = _absolute(href, base_url)
    if not url:
        return None

    author = None
    author_el = entry.find(f"{pfx}author")
    if author_el is not None:
        author = _text(author_el.find(f"{pfx}name"))

    return FeedEntry(
        url=url,
        title=_text(entry.find(f"{pfx}title")) or "",
        author=author,
        published_at=_first_text(entry, f"{pfx}published", f"{pfx}updated"),
        summary=_text(entry.find(f"{pfx}summary")),
        content_html=_text(entry.find(f"{pfx}content")),
    )


def _parse_atom(root: ET.Element, base_url: str) -> list[FeedEntry]:
    # <feed> may or may not carry the Atom namespace
    pfx = f"{{{_ATOM_NS}}}" if root.tag.startswith("{") else ""
    entries = [_atom_entry(e, pfx, base_url) for e in root.findall(f"{pfx}entry")]
    return [e for e in entries if e is not None]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_feed(xml_text: str, base_url: str = "") -> list[FeedEntry]:
    """Parse RSS 2.0 or Atom 1.0 XML into entries, in feed order.

    The format is detected from the root element.  Relative entry links and
    images are resolved against *base_url*.  Unparsable or unrecognised XML
    gives an empty list (logged at WARNING) rather than an exception.
    """
    try:
        root = defused_ET.fromstring(xml_text)
    except (ET.ParseError, DefusedXmlException) as exc:
        logger.warning("Feed XML parse error: %s", exc)
        return []

    local = root.tag.rsplit("}", 1)[-1].lower()
    if local == "feed":
        return _parse_atom(root, base_url)
    if local == "rss" or root.find("channel") is not None:
        return _parse_rss(root, base_url)

    entries = _parse_rss(root, base_url) or _parse_atom(root, base_url)
    if not entries:
        logger.warning("Could not detect feed format for root tag: %s", root.tag)
    return entries
