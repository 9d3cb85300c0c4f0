"""Tests for newsblocks.extractors.script_state."""

from __future__ import annotations

from bs4 import BeautifulSoup

from newsblocks.config import DEFAULT_CONFIG
from newsblocks.extractors.blocks import extract_blocks
from newsblocks.extractors.script_state import ScriptState
from newsblocks.items import BlockKind, ContentBlock


class TestFromHtml:
    def test_reads_media_entries(self, state_article_html):
        state = ScriptState.from_html(state_article_html)
        # lead image dropped, text entry filtered out
        assert len(state) == 2

    def test_keep_first(self, state_article_html):
        state = ScriptState.from_html(state_article_html, skip_first=False)
        assert state.next_image_url() == "https://cdn.example.com/lead_710.jpg"

    def test_custom_image_size(self, state_article_html):
        state = ScriptState.from_html(state_article_html, image_size="_1200.")
        assert state.next_image_url() == "https://cdn.example.com/photo_1200.jpg"

    def test_no_blob(self):
        assert len(ScriptState.from_html("<html><body><p>x</p></body></html>")) == 0

    def test_broken_json(self):
        html = "<script>window.__INITIAL_STATE__ = {broken: ;</script>"
        assert len(ScriptState.from_html(html)) == 0

    def test_wrong_shape(self):
        html = '<script>window.__INITIAL_STATE__ = {"data": {"data": []}};</script>'
        assert len(ScriptState.from_html(html)) == 0

    def test_custom_marker_and_path(self):
        html = (
            '<script>window.__APP__ = {"post": {"media": ['
            '{"type": "images", "value": {"url": "https://cdn.example.com/a##png"}}'
            "]}};</script>"
        )
        state = ScriptState.from_html(
            html,
            marker="window.__APP__",
            path=("post", "media"),
            skip_first=False,
        )
        assert state.next_image_url() == "https://cdn.example.com/a_710.png"


class TestQueue:
    def test_images_in_order_then_exhausted(self):
        state = ScriptState([
            {"type": "images", "value": {"url": "https://cdn.example.com/1##jpg"}},
            {"type": "iframe", "media": {"src": "https://youtu.be/dQw4w9WgXcQ"}},
            {"type": "images", "value": {"url": "https://cdn.example.com/2##jpg"}},
        ])
        assert state.next_image_url() == "https://cdn.example.com/1_710.jpg"
        assert state.next_image_url() == "https://cdn.example.com/2_710.jpg"
        assert state.next_image_url() is None
        assert len(state) == 1

    def test_image_without_url(self):
        state = ScriptState([{"type": "images", "value": {}}])
        assert state.next_image_url() is None
        assert len(state) == 0

    def test_video_blocks(self, state_article_html):
        state = ScriptState.from_html(state_article_html)
        blocks = state.video_blocks(DEFAULT_CONFIG)
        assert blocks == [
            ContentBlock(kind=BlockKind.LINK, link_url="https://vk.com/video_ext.php?oid=-1&id=2"),
        ]
        # players are consumed
        assert state.video_blocks(DEFAULT_CONFIG) == []
        assert len(state) == 1

    def test_youtube_player(self):
        state = ScriptState([{"type": "iframe", "media": {"src": "https://www.youtube.com/embed/dQw4w9WgXcQ"}}])
        assert state.video_blocks() == [ContentBlock(kind=BlockKind.VIDEO, video_id="dQw4w9WgXcQ")]

    def test_unknown_player_and_missing_src(self):
        state = ScriptState([
            {"type": "iframe", "media": {"src": "https://ads.example/player"}},
            {"type": "iframe", "media": {}},
        ])
        assert state.video_blocks() == []

    def test_non_mapping_items_ignored(self):
        assert len(ScriptState(["images", None, {"type": "images"}])) == 1


class TestAsImageFallback:
    def test_lazy_image_filled(self, state_article_html):
        state = ScriptState.from_html(state_article_html)
        soup = BeautifulSoup(state_article_html, "lxml")
        result = extract_blocks(
            soup.select_one(".article-text"),
            base_url="https://news.example.com/a",
            image_fallback=state.next_image_url,
        )
        assert [b.kind for b in result.blocks] == [BlockKind.TEXT, BlockKind.IMAGE, BlockKind.TEXT]
        assert result.blocks[1].media_url == "https://cdn.example.com/photo_710.jpg"
        assert result.blocks[1].text == "Photo"
