"""Document preparation done by callers before the block walk.

The walker never mutates the tree it reads.  Removing share widgets, ads,
bylines and other per-site noise is the caller's job, and these helpers are
how site adapters do it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment

logger = logging.getLogger(__name__)

# Tags dropped from every prepared document
DEFAULT_DROP_TAGS: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "link",
    "template",
    "hr",
)

# <template> children are re-parented by lxml, so strip them before parsing
_TEMPLATE_RE = re.compile(r"<template\b[^>]*>.*?</template>", re.DOTALL | re.IGNORECASE)


def parse_html(html: str) -> BeautifulSoup:
    """Parse *html* with lxml; empty or unparsable input gives an empty soup."""
    try:
        return BeautifulSoup(html or "", "lxml")
    except Exception as exc:
        logger.debug("HTML parsing failed: %s", exc)
        return BeautifulSoup("", "lxml")


def strip_comments(soup: BeautifulSoup | Tag) -> int:
    """Remove HTML comments in-place; return how many were removed."""
    comments = soup.find_all(string=lambda s: isinstance(s, Comment))
    for comment in comments:
        comment.extract()
    return len(comments)


def remove_nodes(
    soup: BeautifulSoup | Tag,
    selector: str,
    keep_index: int | None = None,
) -> int:
    """Remove every element matching the CSS *selector* from *soup*.

    With *keep_index*, the match at that position (0-based, document order)
    is left in place, e.g. to drop all but the first gallery image.

    Returns the number of removed elements.  An invalid selector is logged
    and removes nothing.
    """
    try:
        matches = soup.select(selector)
    except Exception as exc:
        logger.debug("CSS selector %r failed: %s", selector, exc)
        return 0
    removed = 0
    for index, el in enumerate(matches):
        if keep_index is not None and index == keep_index:
            continue
        if isinstance(el, Tag) and not el.decomposed:
            el.decompose()
            removed += 1
    return removed


def unwrap_tags(soup: BeautifulSoup | Tag, names: Iterable[str]) -> int:
    """Replace each ``<name>`` element with its children (``<nobr>``, ``<font>``)."""
    count = 0
    for name in names:
        for el in soup.find_all(name):
            el.unwrap()
            count += 1
    return count


def locate_root(soup: BeautifulSoup | Tag, selector: str) -> Tag | None:
    """Return the first element matching *selector*, or ``None``."""
    try:
        found = soup.select_one(selector)
    except Exception as exc:
        logger.debug("Root selector %r failed: %s", selector, exc)
        return None
    return found if isinstance(found, Tag) else None


def prepare_document(
    html: str,
    *,
    remove: Iterable[str] = (),
    unwrap: Iterable[str] = (),
    drop_tags: Iterable[str] = DEFAULT_DROP_TAGS,
) -> BeautifulSoup:
    """Parse *html* and strip noise before locating the article root.

    Steps:
    1. Drop ``<template>`` blocks (regex pass, before parsing).
    2. Parse with lxml; remove comments and *drop_tags* elements.
    3. Unwrap *unwrap* tags so their text joins the surrounding paragraph.
    4. Remove everything matching the *remove* CSS selectors.
    """
    html = _TEMPLATE_RE.sub("", html or "")
    soup = parse_html(html)
    strip_comments(soup)
    for name in drop_tags:
        for el in soup.find_all(name):
            el.decompose()
    unwrap_tags(soup, unwrap)
    for selector in remove:
        removed = remove_nodes(soup, selector)
        logger.debug("Removed %d node(s) matching %r", removed, selector)
    return soup
