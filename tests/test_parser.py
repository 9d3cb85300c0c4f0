"""Tests for newsblocks.parser."""

from __future__ import annotations

import pytest

from newsblocks.config import preset
from newsblocks.errors import NewsblocksError, RootNotFoundError
from newsblocks.extractors.feed import FeedEntry, parse_feed
from newsblocks.items import BlockKind
from newsblocks.parser import PostParser, parse_post
from newsblocks.plugins import register_adapter
from newsblocks.profiles import SiteProfile

ARTICLE_URL = "https://news.example.com/2024/park"


@pytest.fixture
def city_profile() -> SiteProfile:
    return SiteProfile(
        name="city",
        base_url="https://news.example.com",
        root_selector="div.article-text",
        remove=(".share",),
        unwrap=("nobr",),
    )


class TestParse:
    def test_article(self, article_html, city_profile):
        post = PostParser(city_profile).parse(article_html, ARTICLE_URL, title="City council approves new park")
        assert post.source == "city"
        assert post.title == "City council approves new park"
        assert post.link == ARTICLE_URL
        assert post.description == "The city council approved a new riverside park on Tuesday."
        assert [b.kind.value for b in post.items] == [
            "header", "text", "image", "text", "quote", "text", "link", "text", "video",
        ]

    def test_lead_paragraph_deduplicated(self, article_html, city_profile):
        post = PostParser(city_profile).parse(article_html, ARTICLE_URL)
        texts = [b.text for b in post.blocks_of(BlockKind.TEXT)]
        assert post.description not in texts
        assert "Work will begin in early spring and finish by autumn." in texts

    def test_relative_urls_resolved_against_article(self, article_html, city_profile):
        post = PostParser(city_profile).parse(article_html, ARTICLE_URL)
        assert post.blocks_of(BlockKind.IMAGE)[0].media_url == "https://news.example.com/images/park.jpg"
        assert post.blocks_of(BlockKind.LINK)[0].link_url == "https://news.example.com/docs/plan.pdf"

    def test_share_widget_removed(self, article_html, city_profile):
        post = PostParser(city_profile).parse(article_html, ARTICLE_URL)
        assert all(b.text != "Share" for b in post.items)

    def test_explicit_description(self, article_html, city_profile):
        post = PostParser(city_profile).parse(article_html, ARTICLE_URL, description="Other summary")
        assert post.description == "Other summary"
        assert "The city council approved a new riverside park on Tuesday." in [b.text for b in post.items]

    def test_metadata_passed_through(self, article_html, city_profile):
        post = PostParser(city_profile).parse(
            article_html,
            ARTICLE_URL,
            image="https://news.example.com/lead.jpg",
            published_at="2024-01-15T09:00:00+03:00",
        )
        assert post.image == "https://news.example.com/lead.jpg"
        assert post.published_at == "2024-01-15T09:00:00+03:00"


class TestMissingRoot:
    def test_strict_raises(self, article_html):
        profile = SiteProfile(name="x", root_selector="div.missing")
        with pytest.raises(RootNotFoundError) as excinfo:
            PostParser(profile, strict=True).parse(article_html, ARTICLE_URL)
        assert excinfo.value.url == ARTICLE_URL
        assert excinfo.value.selector == "div.missing"
        assert isinstance(excinfo.value, NewsblocksError)

    def test_lenient_returns_empty_post(self, article_html):
        profile = SiteProfile(name="x", root_selector="div.missing")
        post = PostParser(profile).parse(article_html, ARTICLE_URL, title="T")
        assert post.items == []
        assert post.title == "T"
        assert post.description


class TestParserOptions:
    def test_capture_fills_description(self):
        profile = SiteProfile(name="c", config=preset("capture"), description_selector=None)
        post = PostParser(profile).parse("<html><body><p>Lead.</p><p>Body.</p></body></html>")
        assert post.description == "Lead."
        assert [b.text for b in post.items] == ["Body."]

    def test_capture_keeps_given_description(self):
        profile = SiteProfile(name="c", config=preset("capture"))
        post = PostParser(profile).parse("<p>Lead.</p><p>Body.</p>", description="Feed text")
        assert post.description == "Feed text"
        assert [b.text for b in post.items] == ["Lead.", "Body."]

    def test_promote_first_image(self, article_html, city_profile):
        post = PostParser(city_profile, promote_first_image=True).parse(article_html, ARTICLE_URL)
        assert post.image == "https://news.example.com/images/park.jpg"

    def test_promote_keeps_given_image(self, article_html, city_profile):
        post = PostParser(city_profile, promote_first_image=True).parse(
            article_html, ARTICLE_URL, image="https://news.example.com/lead.jpg",
        )
        assert post.image == "https://news.example.com/lead.jpg"

    def test_options_default_to_profile(self):
        profile = SiteProfile(name="p", script_state=True, promote_first_image=True)
        parser = PostParser(profile)
        assert parser.script_state is True
        assert parser.promote_first_image is True

    def test_script_state_media(self, state_article_html):
        profile = SiteProfile(
            name="state",
            root_selector="div.article-text",
            script_state=True,
            promote_first_image=True,
        )
        post = PostParser(profile).parse(state_article_html, "https://news.example.com/a")
        assert [b.kind.value for b in post.items] == ["text", "image", "text", "link"]
        assert post.items[1].media_url == "https://cdn.example.com/photo_710.jpg"
        assert post.items[3].link_url == "https://vk.com/video_ext.php?oid=-1&id=2"
        assert post.image == "https://cdn.example.com/photo_710.jpg"

    def test_script_state_off_drops_lazy_image(self, state_article_html):
        profile = SiteProfile(name="state", root_selector="div.article-text")
        post = PostParser(profile).parse(state_article_html, "https://news.example.com/a")
        assert [b.kind.value for b in post.items] == ["text", "text"]


class TestParseEntry:
    def test_turbo_content(self, feed_xml):
        entry = parse_feed(feed_xml, base_url="https://news.example.com")[0]
        post = PostParser(SiteProfile(name="feed")).parse_entry(entry)
        assert post.source == "feed"
        assert post.link == "https://news.example.com/2024/bridge"
        assert post.description == "The old bridge reopened to traffic on Monday."
        assert post.image == "https://news.example.com/images/bridge.jpg"
        assert post.published_at == "Mon, 15 Jan 2024 09:00:00 +0300"
        assert [b.kind.value for b in post.items] == ["header", "text", "image"]
        assert post.items[1].text == "Repairs took eight months."
        assert post.items[2].media_url == "https://news.example.com/images/bridge-2.jpg"

    def test_full_text(self, feed_xml):
        entry = parse_feed(feed_xml, base_url="https://news.example.com")[1]
        post = PostParser(SiteProfile(name="feed")).parse_entry(entry)
        assert post.description == "Strong wind expected."
        assert [b.text for b in post.items] == [
            "Strong wind expected. Residents are asked to stay indoors.",
        ]

    def test_html_summary_flattened(self):
        entry = FeedEntry(
            url="https://ex.com/a",
            title="T",
            author=None,
            published_at=None,
            summary="<p>Short &amp; sweet</p>",
        )
        post = PostParser(SiteProfile(name="f")).parse_entry(entry)
        assert post.description == "Short & sweet"
        assert post.items == []


class TestParsePost:
    def test_registered_adapter_used(self, article_html, city_profile):
        register_adapter(city_profile)
        post = parse_post(article_html, ARTICLE_URL, title="T")
        assert post.source == "city"
        assert post.items

    def test_default_walks_body(self):
        post = parse_post("<html><body><p>Only paragraph.</p></body></html>", "https://ex.com/a")
        assert post.source == "default"
        assert [b.text for b in post.items] == ["Only paragraph."]

    def test_strict_on_empty_document(self):
        with pytest.raises(RootNotFoundError):
            parse_post("", "https://ex.com/a", strict=True)
