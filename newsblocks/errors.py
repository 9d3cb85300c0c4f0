"""Exceptions raised outside the extraction engine.

The engine itself never raises for malformed markup; these cover the
caller-level decisions built on top of it.
"""

from __future__ import annotations


class NewsblocksError(RuntimeError):
    """Base class for newsblocks errors."""


class RootNotFoundError(NewsblocksError):
    """Raised when an article's root subtree cannot be located.

    Attributes:
        url      -- the article URL (empty if unknown)
        selector -- the CSS selector that matched nothing
    """

    def __init__(self, message: str, url: str = "", selector: str = "") -> None:
        super().__init__(message)
        self.url = url
        self.selector = selector


class ProfileError(NewsblocksError, ValueError):
    """Raised for an unreadable or invalid site profile."""
