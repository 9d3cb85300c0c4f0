"""Convert an article body subtree into typed content blocks.

Block kinds: text | header | image | link | quote | video

The walker visits the body node by node.  Each node is classified once
(:func:`~newsblocks.extractors.classify.classify`) and handled by the entry
for its kind in a single dispatch table.  A generic container is either
absorbed as one text block, when nothing inside it needs its own block, or
decomposed by recursing into its children.

Malformed input never raises: a node missing an attribute, a URL that does
not validate or text that normalizes to nothing simply produces no block.

Usage::

    from bs4 import BeautifulSoup
    from newsblocks.extractors.blocks import extract_blocks

    soup = BeautifulSoup(html, "lxml")
    result = extract_blocks(
        soup.select_one(".article-body"),
        base_url="https://example.com",
        summary=description,
    )
    for block in result.blocks:
        print(block.kind, block.text)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import NamedTuple

from bs4.element import PageElement
from pydantic import ValidationError

from newsblocks.config import DEFAULT_CONFIG, DedupMode, EngineConfig
from newsblocks.extractors.classify import (
    NodeKind,
    classify,
    contains_any,
    heading_level,
)
from newsblocks.extractors.nodes import OPAQUE_TAGS, NodeView, wrap
from newsblocks.extractors.prune import locate_root, parse_html
from newsblocks.extractors.text import has_actual_text, has_text, normalize
from newsblocks.extractors.urlnorm import (
    clean_url,
    extract_video_id,
    is_valid_url,
    matches_any,
    resolve_url,
    social_video_url,
)
from newsblocks.items import BlockKind, ContentBlock

logger = logging.getLogger(__name__)

ImageFallback = Callable[[], str | None]


@dataclass
class ExtractionContext:
    """Per-call state threaded through one walk.  Never shared between calls."""

    base_url: str = ""
    summary: str = ""
    emitted: list[ContentBlock] = field(default_factory=list)
    image_fallback: ImageFallback | None = None


class ExtractionResult(NamedTuple):
    blocks: list[ContentBlock]
    summary: str
    root_found: bool

    @property
    def is_empty(self) -> bool:
        """True when the root was missing or nothing was extracted from it."""
        return not self.root_found or not self.blocks


# ---------------------------------------------------------------------------
# Summary de-duplication
# ---------------------------------------------------------------------------

def similarity_percent(a: str, b: str) -> float:
    """Return the 0-100 similarity of *a* and *b* (``2*M/T`` matching ratio)."""
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b, autojunk=False).ratio() * 100


def is_summary_duplicate(text: str, summary: str, config: EngineConfig) -> bool:
    """Return True if *text* is already covered by *summary*.

    An empty summary covers nothing.  ``capture`` mode never reports
    duplicates; it is handled by the walker.
    """
    if not summary:
        return False
    if config.dedup_mode is DedupMode.SIMILARITY:
        return similarity_percent(text, summary) >= config.similarity_threshold
    if config.dedup_mode is DedupMode.SUBSTRING:
        return len(text) <= len(summary) and text in summary
    return False


# ---------------------------------------------------------------------------
# Media URLs
# ---------------------------------------------------------------------------

def _first_srcset_url(srcset: str | None) -> str:
    if not srcset or not srcset.strip():
        return ""
    return srcset.split(",")[0].strip().split(" ")[0]


def media_block_for_url(
    url: str,
    config: EngineConfig,
    base_url: str = "",
    text: str | None = None,
) -> ContentBlock | None:
    """Return a block for a URL on a known video host, else ``None``.

    Embeddable hosts yield a ``video`` block carrying the platform ID; social
    video hosts yield a ``link`` block to the (absolutized) player URL.
    """
    if not url:
        return None
    video_id = extract_video_id(url, config.video_host_patterns)
    if video_id:
        return ContentBlock(kind=BlockKind.VIDEO, video_id=video_id)
    if matches_any(url, config.social_video_patterns):
        link = social_video_url(url, base_url)
        if is_valid_url(link):
            return ContentBlock(kind=BlockKind.LINK, link_url=link, text=text or None)
        logger.debug("Dropping social video with invalid URL %r", link)
    return None


# ---------------------------------------------------------------------------
# Walker
# ---------------------------------------------------------------------------

class BlockWalker:
    """Recursive-descent walker emitting :class:`ContentBlock` objects.

    The walker only holds read-only configuration, so one instance can serve
    any number of concurrent extractions.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._hidden_tags = OPAQUE_TAGS | config.ignored_tags
        self._handlers: dict[NodeKind, Callable[[NodeView, ExtractionContext, bool], bool]] = {
            NodeKind.IGNORED: self._ignored,
            NodeKind.PASSTHROUGH: self._passthrough,
            NodeKind.HEADING: self._heading,
            NodeKind.QUOTE: self._quote,
            NodeKind.IMAGE: self._image,
            NodeKind.VIDEO: self._video,
            NodeKind.LINK: self._link,
            NodeKind.TEXT: self._text,
            NodeKind.CONTAINER: self._container,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def walk(self, node: NodeView, ctx: ExtractionContext, skip_text: bool = False) -> None:
        """Emit blocks for *node* into ``ctx.emitted``.

        With *skip_text*, text leaves and flat containers are skipped and
        only media, links, quotes and headings are collected.  Caption
        wrappers (``passthrough_tags``) are still walked with text.
        """
        kind = classify(node, self.config)
        try:
            if not self._handlers[kind](node, ctx, skip_text):
                # quotes and links without text are walked like containers
                self._container(node, ctx, skip_text)
        except ValidationError as exc:
            # e.g. lone surrogates left by a badly decoded page
            logger.debug("Dropping %s block that failed validation: %s", kind.value, exc)

    def extract(
        self,
        root: NodeView | PageElement | None,
        *,
        base_url: str = "",
        summary: str = "",
        image_fallback: ImageFallback | None = None,
        skip_text: bool = False,
    ) -> ExtractionResult:
        """Walk the article body *root* and return the emitted blocks.

        The root's children are walked in document order; a root that is a
        content element itself (heading, quote, image, ...) is walked as a
        single node.  A ``None`` root yields ``root_found=False``.
        """
        node = wrap(root)
        if node is None:
            logger.debug("No root subtree to extract from (%s)", base_url or "no base URL")
            return ExtractionResult(blocks=[], summary=summary, root_found=False)

        ctx = ExtractionContext(
            base_url=base_url,
            summary=summary or "",
            image_fallback=image_fallback,
        )
        if classify(node, self.config) is NodeKind.CONTAINER:
            for child in node.children():
                self.walk(child, ctx, skip_text)
        else:
            self.walk(node, ctx, skip_text)

        logger.debug("Extracted %d block(s) from %s", len(ctx.emitted), base_url or "<root>")
        return ExtractionResult(blocks=ctx.emitted, summary=ctx.summary, root_found=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _node_text(self, node: NodeView) -> str:
        return node.text_without(self._hidden_tags)

    def _actual(self, text: str | None) -> bool:
        return has_actual_text(text, strip_punctuation=self.config.punctuation_is_empty)

    def _label(self, raw: str | None) -> str | None:
        text = normalize(raw)
        return text if self._actual(text) else None

    def _emit_text(self, raw: str, ctx: ExtractionContext) -> None:
        text = normalize(raw)
        if not self._actual(text):
            return
        if self.config.dedup_mode is DedupMode.CAPTURE:
            if not ctx.summary:
                ctx.summary = text
                return
        elif is_summary_duplicate(text, ctx.summary, self.config):
            logger.debug("Skipping text already covered by summary: %.40r", text)
            return
        ctx.emitted.append(ContentBlock(kind=BlockKind.TEXT, text=text))

    # ------------------------------------------------------------------
    # Handlers: return False to fall through to container handling
    # ------------------------------------------------------------------

    def _ignored(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        return True

    def _passthrough(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        # captions keep their text even in media-only walks
        for child in node.children():
            self.walk(child, ctx)
        return True

    def _heading(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        text = self._label(self._node_text(node))
        level = heading_level(node)
        if text and level:
            ctx.emitted.append(ContentBlock(kind=BlockKind.HEADER, text=text, level=level))
        return True

    def _quote(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        raw = self._node_text(node)
        if not has_text(raw):
            return False
        text = self._label(raw)
        if text:
            ctx.emitted.append(ContentBlock(kind=BlockKind.QUOTE, text=text))
        return True

    def _image(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        src = clean_url(node.attr("src")) or clean_url(_first_srcset_url(node.attr("srcset")))
        if not src and ctx.image_fallback is not None:
            src = clean_url(ctx.image_fallback())
        if not src:
            logger.debug("Dropping image without a source")
            return True

        url = resolve_url(src, ctx.base_url)
        if not is_valid_url(url):
            logger.debug("Dropping image with unresolvable URL %r", url)
            return True
        ctx.emitted.append(
            ContentBlock(kind=BlockKind.IMAGE, media_url=url, text=self._label(node.attr("alt"))),
        )
        return True

    def _video(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        src = node.attr("src")
        if not src and node.tag == "video":
            for child in node.children():
                if child.tag == "source" and child.attr("src"):
                    src = child.attr("src")
                    break
        url = clean_url(src)
        if not url:
            logger.debug("Dropping %s without a source", node.tag)
            return True
        block = media_block_for_url(url, self.config, ctx.base_url)
        if block is None:
            logger.debug("Dropping %s from unknown host %r", node.tag, url)
            return True
        ctx.emitted.append(block)
        return True

    def _link(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        raw = self._node_text(node)
        if not has_text(raw):
            return False
        href = clean_url(node.attr("href"))
        if not href:
            logger.debug("Dropping link without href")
            return True

        label = self._label(raw)
        block = media_block_for_url(href, self.config, ctx.base_url, text=label)
        if block is not None:
            ctx.emitted.append(block)
            return True

        url = resolve_url(href, ctx.base_url)
        if is_valid_url(url):
            ctx.emitted.append(ContentBlock(kind=BlockKind.LINK, text=label, link_url=url))
        else:
            logger.debug("Dropping link with unresolvable URL %r", url)
        return True

    def _text(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        raw = node.text
        if not skip_text and has_text(raw):
            self._emit_text(raw, ctx)
        return True

    def _container(self, node: NodeView, ctx: ExtractionContext, skip_text: bool) -> bool:
        if not skip_text and not contains_any(node, self.config.parsed_entity_tags):
            self._emit_text(self._node_text(node), ctx)
            return True
        for child in node.children():
            self.walk(child, ctx, skip_text)
        return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_blocks(
    root: NodeView | PageElement | None,
    *,
    base_url: str = "",
    summary: str = "",
    config: EngineConfig = DEFAULT_CONFIG,
    image_fallback: ImageFallback | None = None,
    skip_text: bool = False,
) -> ExtractionResult:
    """Extract ordered content blocks from the article body *root*.

    Args:
        root:           Article body (a :class:`NodeView` or BeautifulSoup
                        element), already located and pruned by the caller.
        base_url:       Base for resolving relative image and link URLs.
        summary:        Article description to avoid repeating as body text.
        config:         Engine configuration (dedup policy, tag sets, hosts).
        image_fallback: Called when an ``<img>`` has no source; returns a URL
                        or ``None``.
        skip_text:      Collect only non-text blocks.

    Returns:
        :class:`ExtractionResult` with the blocks, the (possibly captured)
        summary and whether a root was given at all.
    """
    return BlockWalker(config).extract(
        root,
        base_url=base_url,
        summary=summary,
        image_fallback=image_fallback,
        skip_text=skip_text,
    )


def html_to_blocks(
    html: str,
    base_url: str = "",
    *,
    root_selector: str | None = None,
    summary: str = "",
    config: EngineConfig = DEFAULT_CONFIG,
    image_fallback: ImageFallback | None = None,
) -> ExtractionResult:
    """Parse *html* and extract blocks from *root_selector* (or ``<body>``)."""
    soup = parse_html(html)
    if root_selector:
        root = locate_root(soup, root_selector)
    else:
        body = soup.find("body")
        root = body if body is not None else soup
    return extract_blocks(
        root,
        base_url=base_url,
        summary=summary,
        config=config,
        image_fallback=image_fallback,
    )
