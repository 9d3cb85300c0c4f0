"""URL cleaning, resolution and video-host helpers."""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from urllib.parse import quote, urljoin, urlparse

# Anything outside printable ASCII gets percent-encoded
_UNSAFE_URL_CHAR_RE = re.compile(r"[^\x21-\x7e]")
_PROTOCOL_RELATIVE_RE = re.compile(r"^//(?=[^/])")
_HOST_RE = re.compile(r"^[A-Za-z0-9.\-_~%\[\]:]+$")

_WEB_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def clean_url(url: str | None) -> str:
    """Percent-encode every character of *url* outside ``0x21-0x7E``.

    Non-ASCII paths and hosts (common in Cyrillic CMS output) become
    ``%XX`` UTF-8 escapes while ``:``, ``/``, ``?`` and friends stay literal.
    Surrounding ASCII whitespace is trimmed first.  A URL that cannot be
    encoded as UTF-8 (lone surrogates from a badly decoded page) gives ``""``.
    """
    if not url:
        return ""
    url = url.strip(" \t\n\r\f\v")
    try:
        return _UNSAFE_URL_CHAR_RE.sub(lambda m: quote(m.group(0), safe=""), url)
    except UnicodeEncodeError:
        return ""


def resolve_url(url: str, base_url: str = "") -> str:
    """Resolve *url* against *base_url*; absolute URLs pass through unchanged."""
    if not url or not base_url:
        return url
    try:
        return urljoin(base_url, url)
    except ValueError:
        return url


def absolutize_protocol_relative(url: str, scheme: str = "https") -> str:
    """Turn ``//host/path`` into ``scheme://host/path``."""
    return _PROTOCOL_RELATIVE_RE.sub(f"{scheme}://", url, count=1)


def is_valid_url(url: str | None) -> bool:
    """Return True for a well-formed absolute http(s) URL.

    The URL must have a web scheme, a host made of URL-safe characters and
    no characters outside printable ASCII (run it through :func:`clean_url`
    first).
    """
    if not url or _UNSAFE_URL_CHAR_RE.search(url):
        return False
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        _ = parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parsed.scheme.lower() not in _WEB_SCHEMES or not hostname:
        return False
    return bool(_HOST_RE.match(hostname))


def matches_any(url: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Return True if any of *patterns* is found in *url*."""
    return any(p.search(url) for p in patterns)


def extract_video_id(url: str, patterns: Iterable[re.Pattern[str]]) -> str | None:
    """Return the platform video ID from the first matching pattern.

    The ID is the ``id`` named group when the pattern defines one, otherwise
    its last group, otherwise the whole match.
    """
    if not url:
        return None
    for pattern in patterns:
        m = pattern.search(url)
        if not m:
            continue
        if "id" in pattern.groupindex:
            return m.group("id")
        if pattern.groups:
            return m.group(pattern.groups)
        return m.group(0)
    return None


def social_video_url(url: str, base_url: str = "") -> str:
    """Normalize a social-video player URL into an absolute link target."""
    url = absolutize_protocol_relative(html.unescape(url))
    return resolve_url(url, base_url)


def extract_domain(url: str) -> str:
    """Return the netloc (host) component of a URL, lowercased."""
    try:
        return urlparse(url).netloc.lower()
    except ValueError:
        return ""
