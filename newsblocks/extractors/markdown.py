"""Render content blocks and posts as Markdown."""

from __future__ import annotations

import re
from collections.abc import Iterable

from newsblocks.items import BlockKind, ContentBlock, NewsPost

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={id}"


def _escape_label(text: str) -> str:
    return text.replace("[", r"\[").replace("]", r"\]")


def block_to_markdown(block: ContentBlock) -> str:
    """Return the Markdown for a single block."""
    kind = block.kind
    if kind is BlockKind.HEADER:
        return f"{'#' * (block.level or 2)} {block.text}"
    if kind is BlockKind.QUOTE:
        return "\n".join(f"> {line}" for line in (block.text or "").splitlines())
    if kind is BlockKind.IMAGE:
        return f"![{_escape_label(block.text or '')}]({block.media_url})"
    if kind is BlockKind.LINK:
        label = _escape_label(block.text or block.link_url or "")
        return f"[{label}]({block.link_url})"
    if kind is BlockKind.VIDEO:
        url = YOUTUBE_WATCH_URL.format(id=block.video_id)
        return f"[Video {block.video_id}]({url})"
    return block.text or ""


def blocks_to_markdown(blocks: Iterable[ContentBlock]) -> str:
    """Render *blocks* as Markdown paragraphs separated by blank lines."""
    md = "\n\n".join(part for part in map(block_to_markdown, blocks) if part)
    md = _TRAILING_WHITESPACE_RE.sub("", md)
    md = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", md)
    return md.strip()


def format_post_markdown(post: NewsPost) -> str:
    """Render a complete post Markdown document with a metadata header."""
    lines: list[str] = []

    lines.append(f"# {post.title}" if post.title else "# (untitled)")
    lines.append("")

    meta_parts: list[str] = []
    if post.published_at:
        meta_parts.append(f"**Published:** {post.published_at}")
    if post.link:
        meta_parts.append(f"**Source:** {post.link}")
    if post.image:
        meta_parts.append(f"![]({post.image})")

    if meta_parts:
        lines.extend(meta_parts)
        lines.append("")

    if post.description:
        lines.append(f"> {post.description}")
        lines.append("")

    lines.append("---")
    lines.append("")
    lines.append(blocks_to_markdown(post.items))

    return "\n".join(lines)
