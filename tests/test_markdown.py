"""Tests for newsblocks.extractors.markdown."""

from __future__ import annotations

from newsblocks.extractors.markdown import (
    block_to_markdown,
    blocks_to_markdown,
    format_post_markdown,
)
from newsblocks.items import BlockKind, ContentBlock, NewsPost


class TestBlockToMarkdown:
    def test_header(self):
        assert block_to_markdown(ContentBlock(kind=BlockKind.HEADER, text="Title", level=3)) == "### Title"

    def test_quote_multiline(self):
        block = ContentBlock(kind=BlockKind.QUOTE, text="one\ntwo")
        assert block_to_markdown(block) == "> one\n> two"

    def test_image(self):
        block = ContentBlock(kind=BlockKind.IMAGE, media_url="https://ex.com/a.jpg", text="Park [plan]")
        assert block_to_markdown(block) == r"![Park \[plan\]](https://ex.com/a.jpg)"

    def test_link_without_text(self):
        block = ContentBlock(kind=BlockKind.LINK, link_url="https://vk.com/video-1_2")
        assert block_to_markdown(block) == "[https://vk.com/video-1_2](https://vk.com/video-1_2)"

    def test_video(self):
        block = ContentBlock(kind=BlockKind.VIDEO, video_id="dQw4w9WgXcQ")
        assert block_to_markdown(block) == (
            "[Video dQw4w9WgXcQ](https://www.youtube.com/watch?v=dQw4w9WgXcQ)"
        )

    def test_text(self):
        assert block_to_markdown(ContentBlock(kind=BlockKind.TEXT, text="Body")) == "Body"


class TestDocuments:
    def test_blocks_joined_by_blank_lines(self):
        md = blocks_to_markdown([
            ContentBlock(kind=BlockKind.HEADER, text="H", level=2),
            ContentBlock(kind=BlockKind.TEXT, text="Body   "),
        ])
        assert md == "## H\n\nBody"

    def test_empty(self):
        assert blocks_to_markdown([]) == ""

    def test_post(self):
        post = NewsPost(
            title="Bridge reopens",
            description="Traffic is back.",
            link="https://ex.com/bridge",
            published_at="2024-01-15",
            items=[ContentBlock(kind=BlockKind.TEXT, text="Repairs took eight months.")],
        )
        md = format_post_markdown(post)
        assert md.startswith("# Bridge reopens\n")
        assert "**Published:** 2024-01-15" in md
        assert "**Source:** https://ex.com/bridge" in md
        assert "> Traffic is back." in md
        assert md.endswith("Repairs took eight months.")

    def test_untitled_post(self):
        assert format_post_markdown(NewsPost()).startswith("# (untitled)")
