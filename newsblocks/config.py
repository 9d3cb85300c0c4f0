"""Engine configuration and named presets.

An :class:`EngineConfig` is read-only once built and safe to share between
threads; every per-article mutable value lives in the extraction context.

Usage::

    from newsblocks.config import DedupMode, EngineConfig, preset

    config = EngineConfig(dedup_mode=DedupMode.SIMILARITY, similarity_threshold=95)
    capture = preset("capture")
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


HEADING_TAGS: frozenset[str] = frozenset({f"h{i}" for i in range(1, 7)})

# youtu.be/ID, youtube.com/watch?v=ID, youtube.com/embed/ID, youtube.com/v/ID
YOUTUBE_PATTERN: re.Pattern[str] = re.compile(
    r"(?:youtu\.be/|youtube(?:-nocookie)?\.com/(?:watch\?(?:.*&)?v=|(?:embed|v)/))"
    r"(?P<id>[\w-]{11})",
    re.IGNORECASE,
)

# Social video hosts whose players are kept as plain links
VK_PATTERN: re.Pattern[str] = re.compile(r"vk\.com|vkvideo\.ru", re.IGNORECASE)


class DedupMode(str, Enum):
    """How body text is checked against the article summary."""

    SIMILARITY = "similarity"  # fuzzy ratio against the summary
    SUBSTRING = "substring"    # literal containment in the summary
    CAPTURE = "capture"        # first text becomes the summary


def _tags(value: Iterable[str] | str) -> frozenset[str]:
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(t.strip().lower() for t in value if t and t.strip())


def _patterns(value: Iterable[re.Pattern[str] | str] | str) -> tuple[re.Pattern[str], ...]:
    if isinstance(value, (str, re.Pattern)):
        value = [value]
    compiled: list[re.Pattern[str]] = []
    for p in value:
        compiled.append(p if isinstance(p, re.Pattern) else re.compile(p, re.IGNORECASE))
    return tuple(compiled)


@dataclass(frozen=True)
class EngineConfig:
    """Configuration bag for the block walker.

    Attributes:
        dedup_mode:            Summary de-duplication policy.
        similarity_threshold:  Percent (0-100) at or above which a text is
                               considered a repeat of the summary
                               (``similarity`` mode only).
        parsed_entity_tags:    Tags whose presence anywhere inside a
                               container forces recursion instead of
                               absorbing the container as one text block.
        video_host_patterns:   Regexes recognising embeddable video URLs; the
                               ``id`` group (or the last group) is the video ID.
        social_video_patterns: Hosts whose players are kept as plain links.
        quote_tags:            Tags emitted as quotes.
        passthrough_tags:      Caption-like wrappers walked without a block.
        video_tags:            Tags treated as embedded players.
        ignored_tags:          Tags skipped entirely.
        punctuation_is_empty:  Treat punctuation-only text as empty.
    """

    dedup_mode: DedupMode = DedupMode.SUBSTRING
    similarity_threshold: float = 98.0
    parsed_entity_tags: frozenset[str] = frozenset({"a", "img", "blockquote", "iframe", "video"})
    video_host_patterns: tuple[re.Pattern[str], ...] = (YOUTUBE_PATTERN,)
    social_video_patterns: tuple[re.Pattern[str], ...] = (VK_PATTERN,)
    quote_tags: frozenset[str] = frozenset({"blockquote"})
    passthrough_tags: frozenset[str] = frozenset({"figcaption"})
    video_tags: frozenset[str] = frozenset({"iframe", "video"})
    ignored_tags: frozenset[str] = frozenset({"script", "style", "noscript", "template"})
    punctuation_is_empty: bool = False

    def __post_init__(self) -> None:
        try:
            mode = DedupMode(self.dedup_mode)
        except ValueError:
            raise ValueError(
                f"dedup_mode must be one of {[m.value for m in DedupMode]}; "
                f"got {self.dedup_mode!r}",
            ) from None
        threshold = float(self.similarity_threshold)
        if not 0 <= threshold <= 100:
            raise ValueError(f"similarity_threshold must be within 0-100; got {threshold}")

        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "dedup_mode", mode)
        object.__setattr__(self, "similarity_threshold", threshold)
        for name in ("parsed_entity_tags", "quote_tags", "passthrough_tags",
                     "video_tags", "ignored_tags"):
            object.__setattr__(self, name, _tags(getattr(self, name)))
        for name in ("video_host_patterns", "social_video_patterns"):
            object.__setattr__(self, name, _patterns(getattr(self, name)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EngineConfig:
        """Build a config from a plain mapping (YAML profile, CLI flags).

        Unknown keys raise :class:`ValueError`.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown engine option(s): {', '.join(unknown)}")
        return cls(**dict(data))

    def with_options(self, **changes: Any) -> EngineConfig:
        """Return a copy with *changes* applied (``None`` values are ignored).

        Unknown keys raise :class:`ValueError`.
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown engine option(s): {', '.join(unknown)}")
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# Presets matching the site families the engine was generalized from
# ---------------------------------------------------------------------------

PRESETS: dict[str, EngineConfig] = {
    # Fuzzy de-dup against a meta description; headings must never be flattened
    "similarity": EngineConfig(
        dedup_mode=DedupMode.SIMILARITY,
        similarity_threshold=98.0,
        parsed_entity_tags=frozenset({"a", "img"}) | HEADING_TAGS,
    ),
    # Literal de-dup against an RSS description; captions and players kept
    "substring": EngineConfig(
        dedup_mode=DedupMode.SUBSTRING,
        parsed_entity_tags=frozenset({"a", "img", "blockquote", "figcaption", "iframe"}),
    ),
    # Feeds without a description: the lead paragraph becomes the summary
    "capture": EngineConfig(
        dedup_mode=DedupMode.CAPTURE,
        parsed_entity_tags=frozenset({"br", "a", "img", "blockquote", "iframe", "video"}),
    ),
}

DEFAULT_CONFIG = EngineConfig()


def preset(name: str) -> EngineConfig:
    """Return the named preset config."""
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown preset {name!r}; choose from {', '.join(sorted(PRESETS))}",
        ) from None
