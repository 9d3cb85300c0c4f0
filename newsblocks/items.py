"""Pydantic models for extracted content blocks and news posts."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class BlockKind(str, Enum):
    TEXT = "text"
    HEADER = "header"
    IMAGE = "image"
    LINK = "link"
    QUOTE = "quote"
    VIDEO = "video"


# kind -> field carrying the block's primary payload
_PRIMARY_FIELD: dict[BlockKind, str] = {
    BlockKind.TEXT: "text",
    BlockKind.HEADER: "text",
    BlockKind.QUOTE: "text",
    BlockKind.IMAGE: "media_url",
    BlockKind.LINK: "link_url",
    BlockKind.VIDEO: "video_id",
}


class ContentBlock(BaseModel):
    """One typed unit of article content."""

    model_config = {"frozen": True}

    kind: BlockKind
    text: str | None = None
    media_url: str | None = None
    link_url: str | None = None
    level: int | None = Field(default=None, ge=1, le=6)
    video_id: str | None = None

    @model_validator(mode="after")
    def check_payload(self) -> ContentBlock:
        primary = _PRIMARY_FIELD[self.kind]
        if not getattr(self, primary):
            raise ValueError(f"{self.kind.value} block requires {primary}")
        if self.kind is BlockKind.HEADER and self.level is None:
            raise ValueError("header block requires level")
        if self.kind is not BlockKind.HEADER and self.level is not None:
            raise ValueError("level is only allowed on header blocks")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain dict without unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class NewsPost(BaseModel):
    """Normalized post record produced by a site adapter."""

    source: str = ""
    title: str = ""
    description: str = ""
    link: str = ""
    image: str | None = None
    # Raw publish string as found in the feed/page; never parsed here
    published_at: str | None = None
    items: list[ContentBlock] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @field_validator("link", mode="before")
    @classmethod
    def strip_link(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @field_validator("image", mode="before")
    @classmethod
    def strip_image(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    def add_item(self, block: ContentBlock) -> None:
        self.items.append(block)

    def blocks_of(self, kind: BlockKind) -> list[ContentBlock]:
        return [b for b in self.items if b.kind is kind]
