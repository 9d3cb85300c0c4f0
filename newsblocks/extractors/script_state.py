"""Media hidden in an embedded ``window.__INITIAL_STATE__`` blob.

Some CMS front-ends render article images lazily: the ``<img>`` in the
markup has an empty ``src`` and the real URL only exists in the JSON state
the page ships for its JavaScript app.  Embedded players may be missing from
the markup altogether.  :class:`ScriptState` reads that blob once per page
and hands the entries out in document order.

Usage::

    state = ScriptState.from_html(page_html)
    result = extract_blocks(root, base_url=url, image_fallback=state.next_image_url)
    blocks = result.blocks + state.video_blocks(config, base_url=url)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from newsblocks.config import DEFAULT_CONFIG, EngineConfig
from newsblocks.extractors.blocks import media_block_for_url
from newsblocks.extractors.prune import parse_html
from newsblocks.extractors.urlnorm import clean_url
from newsblocks.items import ContentBlock

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "window.__INITIAL_STATE__"
DEFAULT_PATH: tuple[str, ...] = ("data", "data", "article", "data", "text")
DEFAULT_ITEM_TYPES: tuple[str, ...] = ("images", "iframe")
# Image URLs carry a "##" placeholder for the rendition size
DEFAULT_IMAGE_SIZE = "_710."


def _dig(data: Any, path: Sequence[str]) -> Any:
    for key in path:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def _find_state_json(html: str, marker: str) -> Any:
    soup = parse_html(html)
    for script in soup.find_all("script"):
        source = script.string or script.get_text()
        if not source or marker not in source:
            continue
        start = source.find("{", source.index(marker) + len(marker))
        if start < 0:
            continue
        try:
            state, _ = json.JSONDecoder().raw_decode(source[start:])
        except ValueError as exc:
            logger.debug("Could not decode %s blob: %s", marker, exc)
            return None
        return state
    return None


class ScriptState:
    """Ordered queue of media entries taken from a page's state blob.

    Entries are consumed as they are handed out, so an instance belongs to
    exactly one page extraction.
    """

    def __init__(
        self,
        items: Iterable[Mapping[str, Any]] = (),
        *,
        image_size: str = DEFAULT_IMAGE_SIZE,
    ) -> None:
        self._items: list[Mapping[str, Any]] = [i for i in items if isinstance(i, Mapping)]
        self.image_size = image_size

    @classmethod
    def from_html(
        cls,
        html: str,
        *,
        marker: str = DEFAULT_MARKER,
        path: Sequence[str] = DEFAULT_PATH,
        item_types: Iterable[str] = DEFAULT_ITEM_TYPES,
        skip_first: bool = True,
        image_size: str = DEFAULT_IMAGE_SIZE,
    ) -> ScriptState:
        """Build the queue from *html*; a missing or broken blob gives an empty queue.

        With *skip_first*, the first media entry is dropped: it is the lead
        image, which callers take from the feed and remove from the body.
        """
        entries = _dig(_find_state_json(html, marker), path)
        if not isinstance(entries, list):
            logger.debug("No %s media entries found", marker)
            return cls(image_size=image_size)
        wanted = frozenset(item_types)
        items = [e for e in entries if isinstance(e, Mapping) and e.get("type") in wanted]
        if skip_first and items:
            items = items[1:]
        return cls(items, image_size=image_size)

    def __len__(self) -> int:
        return len(self._items)

    def _pop(self, item_type: str) -> Mapping[str, Any] | None:
        for index, item in enumerate(self._items):
            if item.get("type") == item_type:
                return self._items.pop(index)
        return None

    def next_image_url(self) -> str | None:
        """Pop the next image entry and return its URL (``None`` when exhausted).

        Suitable as the ``image_fallback`` callback of the block walker.
        """
        item = self._pop("images")
        if item is None:
            return None
        url = _dig(item, ("value", "url"))
        if not isinstance(url, str) or not url:
            return None
        return url.replace("##", self.image_size)

    def video_blocks(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        base_url: str = "",
    ) -> list[ContentBlock]:
        """Consume every player entry and return video / link blocks for them."""
        blocks: list[ContentBlock] = []
        players = [i for i in self._items if i.get("type") == "iframe"]
        self._items = [i for i in self._items if i.get("type") != "iframe"]
        for item in players:
            src = _dig(item, ("media", "src"))
            if not isinstance(src, str):
                continue
            block = media_block_for_url(clean_url(src), config, base_url)
            if block is not None:
                blocks.append(block)
        return blocks
