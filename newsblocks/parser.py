"""newsblocks.parser - Turn article pages and feed entries into posts.

:class:`PostParser` ties a site adapter to the block walker: the adapter
cleans the page and finds the article body, the walker turns that body into
content blocks, and the result is wrapped in a :class:`~newsblocks.items.NewsPost`.

Usage::

    from newsblocks import PostParser, load_profile

    profile = load_profile("sites.yaml", url)
    parser = PostParser(profile)
    post = parser.parse(html, url, title="Headline", description=rss_description)

    # Feeds shipping the article body inline
    for entry in parse_feed(xml, base_url=profile.base_url):
        post = parser.parse_entry(entry)
"""

from __future__ import annotations

import logging

from newsblocks.config import DedupMode, EngineConfig
from newsblocks.errors import RootNotFoundError
from newsblocks.extractors.blocks import ExtractionResult, extract_blocks
from newsblocks.extractors.feed import FeedEntry
from newsblocks.extractors.prune import parse_html
from newsblocks.extractors.script_state import ScriptState
from newsblocks.extractors.text import has_actual_text, normalize
from newsblocks.items import BlockKind, ContentBlock, NewsPost
from newsblocks.plugins import SiteAdapter, adapter_for_url
from newsblocks.profiles import SiteProfile

logger = logging.getLogger(__name__)


def _plain_text(markup: str | None) -> str:
    """Normalize feed text that may carry inline HTML."""
    if not markup:
        return ""
    if "<" in markup:
        markup = parse_html(markup).get_text()
    return normalize(markup)


class PostParser:
    """Build :class:`NewsPost` records for one site.

    Args:
        adapter:             Site adapter (or :class:`SiteProfile`) describing
                             the page layout and engine configuration.
        strict:              Raise :class:`RootNotFoundError` when the article
                             body cannot be located instead of returning a
                             post without items.
        promote_first_image: Use the first image block as the post image when
                             none is given.  Defaults to the adapter's
                             ``promote_first_image`` attribute, if any.
        script_state:        Take lazy-loaded images and players from the
                             page's ``__INITIAL_STATE__`` blob.  Defaults to
                             the adapter's ``script_state`` attribute, if any.
    """

    def __init__(
        self,
        adapter: SiteAdapter,
        strict: bool = False,
        promote_first_image: bool | None = None,
        script_state: bool | None = None,
    ) -> None:
        self.adapter = adapter
        self.strict = strict
        if promote_first_image is None:
            promote_first_image = bool(getattr(adapter, "promote_first_image", False))
        if script_state is None:
            script_state = bool(getattr(adapter, "script_state", False))
        self.promote_first_image = promote_first_image
        self.script_state = script_state

    @property
    def config(self) -> EngineConfig:
        return self.adapter.config

    def parse(
        self,
        html: str,
        url: str = "",
        *,
        title: str = "",
        description: str | None = None,
        image: str | None = None,
        published_at: str | None = None,
    ) -> NewsPost:
        """Parse a fetched article page.

        *description* is the summary body text is de-duplicated against; when
        ``None`` the adapter reads it from the page.

        Raises:
            RootNotFoundError: in strict mode, when the adapter finds no
                article body.
        """
        soup = self.adapter.prepare(html)
        if description is None:
            description = self.adapter.description(soup)
        post = NewsPost(
            source=self.adapter.name,
            title=title,
            description=description,
            link=url,
            image=image,
            published_at=published_at,
        )

        root = self.adapter.locate_root(soup)
        if root is None:
            selector = getattr(self.adapter, "root_selector", "")
            if self.strict:
                raise RootNotFoundError(
                    f"Article root {selector!r} not found in {url or 'document'}",
                    url=url,
                    selector=selector,
                )
            logger.warning("Article root %r not found in %s", selector, url or "document")
            return post

        state = ScriptState.from_html(html) if self.script_state else None
        base_url = url or self.adapter.base_url
        result = extract_blocks(
            root,
            base_url=base_url,
            summary=post.description,
            config=self.config,
            image_fallback=state.next_image_url if state is not None else None,
        )
        blocks = list(result.blocks)
        if state is not None:
            blocks.extend(state.video_blocks(self.config, base_url=base_url))
        return self._finish(post, result, blocks)

    def parse_entry(self, entry: FeedEntry) -> NewsPost:
        """Build a post from a feed entry that ships its own body.

        Inline article markup (``turbo:content``, ``content:encoded``) is
        walked like a page body; otherwise the plain ``yandex:full-text`` is
        kept as a single text block.
        """
        post = NewsPost(
            source=self.adapter.name,
            title=entry.title,
            description=_plain_text(entry.summary),
            link=entry.url,
            image=entry.image,
            published_at=entry.published_at,
        )

        if entry.content_html:
            soup = self.adapter.prepare(entry.content_html)
            body = soup.find("body")
            result = extract_blocks(
                body if body is not None else soup,
                base_url=entry.url or self.adapter.base_url,
                summary=post.description,
                config=self.config,
            )
            return self._finish(post, result, list(result.blocks))

        text = normalize(entry.full_text)
        if has_actual_text(text):
            post.add_item(ContentBlock(kind=BlockKind.TEXT, text=text))
        else:
            logger.debug("Feed entry %s has no body", entry.url)
        return post

    def _finish(self, post: NewsPost, result: ExtractionResult, blocks: list[ContentBlock]) -> NewsPost:
        if self.config.dedup_mode is DedupMode.CAPTURE and not post.description:
            post.description = result.summary
        if post.image is None and self.promote_first_image:
            for block in blocks:
                if block.kind is BlockKind.IMAGE:
                    post.image = block.media_url
                    break
        post.items.extend(blocks)
        return post


def parse_post(
    html: str,
    url: str = "",
    *,
    adapter: SiteAdapter | None = None,
    strict: bool = False,
    **fields,
) -> NewsPost:
    """Parse one article page with *adapter*.

    Without an adapter, the registered adapter for *url* is used, falling
    back to a default profile that walks ``<body>``.  Extra keyword arguments
    (``title``, ``description``, ``image``, ``published_at``) are passed to
    :meth:`PostParser.parse`.
    """
    if adapter is None:
        adapter = adapter_for_url(url) or SiteProfile(name="default", base_url=url)
    return PostParser(adapter, strict=strict).parse(html, url, **fields)
