"""Node classification for the block walker.

:func:`classify` maps a node to exactly one :class:`NodeKind`.  The walker
dispatches on that value, so the precedence between kinds (a heading wins
over a quote, a quote over a generic container, ...) lives in one place.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from newsblocks.config import EngineConfig
from newsblocks.extractors.nodes import NodeView

# Heading tags -> level number
_HEADING_LEVELS: dict[str, int] = {f"h{i}": i for i in range(1, 7)}


class NodeKind(Enum):
    TEXT = "text"
    IGNORED = "ignored"
    PASSTHROUGH = "passthrough"
    HEADING = "heading"
    QUOTE = "quote"
    IMAGE = "image"
    VIDEO = "video"
    LINK = "link"
    CONTAINER = "container"


def heading_level(node: NodeView) -> int | None:
    """Return 1-6 for ``<h1>``..``<h6>``, else ``None``."""
    tag = node.tag
    return _HEADING_LEVELS.get(tag) if tag else None


def is_image(node: NodeView) -> bool:
    return node.tag == "img"


def is_link(node: NodeView) -> bool:
    return node.tag == "a"


def is_quote(node: NodeView, config: EngineConfig) -> bool:
    return node.tag in config.quote_tags


def is_video(node: NodeView, config: EngineConfig) -> bool:
    return node.tag in config.video_tags


def contains_any(node: NodeView, tags: Iterable[str]) -> bool:
    """Return True if any descendant of *node* (at any depth) has a tag in *tags*."""
    wanted = tags if isinstance(tags, (set, frozenset)) else frozenset(tags)
    if not wanted:
        return False
    stack = list(node.children())
    while stack:
        child = stack.pop()
        tag = child.tag
        if tag is None:
            continue
        if tag in wanted:
            return True
        stack.extend(child.children())
    return False


def classify(node: NodeView, config: EngineConfig) -> NodeKind:
    """Return the single :class:`NodeKind` the walker should dispatch on."""
    if node.is_text:
        return NodeKind.TEXT
    tag = node.tag
    if tag is None or tag in config.ignored_tags:
        # comments, doctypes, processing instructions, scripts
        return NodeKind.IGNORED
    if tag in config.passthrough_tags:
        return NodeKind.PASSTHROUGH
    if tag in _HEADING_LEVELS:
        return NodeKind.HEADING
    if is_quote(node, config):
        return NodeKind.QUOTE
    if is_image(node):
        return NodeKind.IMAGE
    if is_video(node, config):
        return NodeKind.VIDEO
    if is_link(node):
        return NodeKind.LINK
    return NodeKind.CONTAINER
