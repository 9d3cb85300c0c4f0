"""Tests for newsblocks.extractors.urlnorm."""

from __future__ import annotations

import re
from urllib.parse import unquote

import pytest

from newsblocks.config import VK_PATTERN, YOUTUBE_PATTERN
from newsblocks.extractors.urlnorm import (
    absolutize_protocol_relative,
    clean_url,
    extract_domain,
    extract_video_id,
    is_valid_url,
    matches_any,
    resolve_url,
    social_video_url,
)

CYRILLIC_PATH = "https://example.com/новости"
CYRILLIC_ENCODED = "https://example.com/%D0%BD%D0%BE%D0%B2%D0%BE%D1%81%D1%82%D0%B8"


class TestCleanUrl:
    def test_ascii_url_unchanged(self):
        url = "https://example.com/a/b?x=1&y=2#frag"
        assert clean_url(url) == url

    def test_encodes_non_ascii(self):
        assert clean_url(CYRILLIC_PATH) == CYRILLIC_ENCODED

    def test_encodes_inner_space(self):
        assert clean_url("https://example.com/a b") == "https://example.com/a%20b"

    def test_trims_surrounding_whitespace(self):
        assert clean_url("  https://example.com/x \n") == "https://example.com/x"

    def test_empty(self):
        assert clean_url("") == ""
        assert clean_url(None) == ""

    def test_lone_surrogate_gives_empty(self):
        assert clean_url("https://example.com/n/" + chr(0xD800)) == ""

    def test_structural_characters_survive(self):
        cleaned = clean_url("https://пример.рф/путь?q=значение")
        assert cleaned.startswith("https://")
        assert "?q=" in cleaned
        assert unquote(cleaned) == "https://пример.рф/путь?q=значение"


class TestResolveUrl:
    def test_relative(self):
        assert resolve_url("/img/a.jpg", "https://example.com/news/1") == "https://example.com/img/a.jpg"

    def test_absolute_unchanged(self):
        assert resolve_url("https://cdn.example.net/a.jpg", "https://example.com") == "https://cdn.example.net/a.jpg"

    def test_no_base(self):
        assert resolve_url("/a.jpg", "") == "/a.jpg"

    def test_protocol_relative(self):
        assert resolve_url("//cdn.example.net/a.jpg", "https://example.com") == "https://cdn.example.net/a.jpg"


class TestIsValidUrl:
    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://example.com/path?q=1",
        "https://sub.example.co.uk:8080/x",
        CYRILLIC_ENCODED,
    ])
    def test_valid(self, url):
        assert is_valid_url(url) is True

    @pytest.mark.parametrize("url", [
        "",
        None,
        "/relative/path",
        "ftp://example.com/file",
        "javascript:void(0)",
        "https://",
        "https://example.com:port/",
        "https://exa mple.com/",
        CYRILLIC_PATH,
    ])
    def test_invalid(self, url):
        assert is_valid_url(url) is False


class TestVideoIds:
    @pytest.mark.parametrize("url", [
        "https://youtu.be/dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ?rel=0",
        "//www.youtube.com/v/dQw4w9WgXcQ",
        "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
    ])
    def test_youtube_forms(self, url):
        assert extract_video_id(url, [YOUTUBE_PATTERN]) == "dQw4w9WgXcQ"

    def test_unknown_host(self):
        assert extract_video_id("https://vimeo.com/123456", [YOUTUBE_PATTERN]) is None

    def test_last_group_without_named_id(self):
        pattern = re.compile(r"vimeo\.com/(?:video/)?(\d+)")
        assert extract_video_id("https://vimeo.com/video/123456", [pattern]) == "123456"

    def test_empty(self):
        assert extract_video_id("", [YOUTUBE_PATTERN]) is None


class TestSocialVideo:
    def test_matches_vk(self):
        assert matches_any("https://vk.com/video_ext.php?oid=1", [VK_PATTERN]) is True
        assert matches_any("https://example.com/video", [VK_PATTERN]) is False

    def test_protocol_relative_player(self):
        url = social_video_url("//vk.com/video_ext.php?oid=-1&amp;id=2")
        assert url == "https://vk.com/video_ext.php?oid=-1&id=2"

    def test_absolutize_leaves_absolute(self):
        assert absolutize_protocol_relative("http://vk.com/x") == "http://vk.com/x"


class TestExtractDomain:
    def test_basic(self):
        assert extract_domain("https://News.Example.com/path") == "news.example.com"

    def test_empty(self):
        assert extract_domain("not a url") == ""
