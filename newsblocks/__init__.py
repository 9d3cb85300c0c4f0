"""newsblocks - turn news article markup into ordered, typed content blocks.

Engine usage::

    from newsblocks import EngineConfig, extract_blocks

    result = extract_blocks(
        soup.select_one(".article-text"),
        base_url="https://news.example.com",
        summary=rss_description,
        config=EngineConfig(dedup_mode="similarity"),
    )
    for block in result.blocks:
        print(block.kind, block.text or block.media_url or block.link_url)

Site profiles::

    from newsblocks import PostParser, load_profile

    parser = PostParser(load_profile("sites.yaml", url))
    post = parser.parse(html, url, title=title, description=description)
    print(post.model_dump_json(indent=2))

Custom adapters::

    from newsblocks import register_adapter

    register_adapter(MySiteAdapter())
"""

from newsblocks.config import DedupMode, EngineConfig, preset
from newsblocks.errors import NewsblocksError, ProfileError, RootNotFoundError
from newsblocks.extractors import (
    ExtractionResult,
    FeedEntry,
    ScriptState,
    blocks_to_markdown,
    extract_blocks,
    html_to_blocks,
    parse_feed,
)
from newsblocks.items import BlockKind, ContentBlock, NewsPost
from newsblocks.parser import PostParser, parse_post
from newsblocks.plugins import (
    SiteAdapter,
    adapter_for_url,
    clear_adapters,
    get_adapter,
    get_adapters,
    register_adapter,
)
from newsblocks.profiles import SiteProfile, load_profile, load_profiles

__version__ = "0.1.0"
__all__ = [
    "BlockKind",
    "ContentBlock",
    "DedupMode",
    "EngineConfig",
    "ExtractionResult",
    "FeedEntry",
    "NewsPost",
    "NewsblocksError",
    "PostParser",
    "ProfileError",
    "RootNotFoundError",
    "ScriptState",
    "SiteAdapter",
    "SiteProfile",
    "adapter_for_url",
    "blocks_to_markdown",
    "clear_adapters",
    "extract_blocks",
    "get_adapter",
    "get_adapters",
    "html_to_blocks",
    "load_profile",
    "load_profiles",
    "parse_feed",
    "parse_post",
    "preset",
    "register_adapter",
]
