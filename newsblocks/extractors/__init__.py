"""Extraction sub-package: deterministic article body to content block conversion."""

from .blocks import BlockWalker, ExtractionResult, extract_blocks, html_to_blocks
from .feed import FeedEntry, parse_feed
from .markdown import blocks_to_markdown, format_post_markdown
from .prune import prepare_document, remove_nodes
from .script_state import ScriptState
from .text import has_actual_text, normalize
from .urlnorm import clean_url, is_valid_url

__all__ = [
    "BlockWalker",
    "ExtractionResult",
    "FeedEntry",
    "ScriptState",
    "blocks_to_markdown",
    "clean_url",
    "extract_blocks",
    "format_post_markdown",
    "has_actual_text",
    "html_to_blocks",
    "is_valid_url",
    "normalize",
    "parse_feed",
    "prepare_document",
    "remove_nodes",
]
