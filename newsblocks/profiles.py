"""YAML-based site profiles.

A profile file has an optional ``default`` section and a ``domains`` mapping.
The settings for a URL are the ``default`` section overlaid with the longest
``domains`` key matching the URL's host (the key itself or any subdomain).
Engine options under ``engine`` are merged key by key.

Example::

    default:
      root: article
      description: 'meta[name="description"]'
    domains:
      ngs55.ru:
        name: ngs55
        preset: similarity
        root: div.article-text
        remove: [".share", "figure.banner"]
        unwrap: [nobr]
        script_state: true
        engine:
          similarity_threshold: 95
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from bs4 import BeautifulSoup, Tag

from newsblocks.config import DEFAULT_CONFIG, EngineConfig, preset
from newsblocks.errors import ProfileError
from newsblocks.extractors.prune import DEFAULT_DROP_TAGS, locate_root, prepare_document
from newsblocks.extractors.text import normalize

logger = logging.getLogger(__name__)

_DEFAULT_DESCRIPTION = 'meta[name="description"]'

_PROFILE_KEYS = frozenset({
    "name",
    "base_url",
    "root",
    "remove",
    "unwrap",
    "drop_tags",
    "description",
    "preset",
    "engine",
    "script_state",
    "promote_first_image",
})


@dataclass
class SiteProfile:
    """A :class:`~newsblocks.plugins.SiteAdapter` driven by CSS selectors."""

    name: str
    base_url: str = ""
    root_selector: str = "body"
    remove: tuple[str, ...] = ()
    unwrap: tuple[str, ...] = ()
    drop_tags: tuple[str, ...] = DEFAULT_DROP_TAGS
    description_selector: str | None = _DEFAULT_DESCRIPTION
    script_state: bool = False
    promote_first_image: bool = False
    config: EngineConfig = DEFAULT_CONFIG

    def prepare(self, html: str) -> BeautifulSoup:
        return prepare_document(
            html,
            remove=self.remove,
            unwrap=self.unwrap,
            drop_tags=self.drop_tags,
        )

    def locate_root(self, soup: BeautifulSoup) -> Tag | None:
        return locate_root(soup, self.root_selector)

    def description(self, soup: BeautifulSoup) -> str:
        """Return the normalized description, from a ``<meta>`` content or element text."""
        if not self.description_selector:
            return ""
        el = locate_root(soup, self.description_selector)
        if el is None:
            return ""
        if el.name == "meta":
            content = el.get("content")
            return normalize(content if isinstance(content, str) else "")
        return normalize(el.get_text())


# ---------------------------------------------------------------------------
# Building profiles from mappings
# ---------------------------------------------------------------------------

def _str_list(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ProfileError(f"{key!r} must be a string or a list of strings; got {value!r}")


def _merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if key == "engine" and isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _engine_config(data: Mapping[str, Any]) -> EngineConfig:
    engine = data.get("engine") or {}
    if not isinstance(engine, Mapping):
        raise ProfileError(f"'engine' must be a mapping; got {engine!r}")
    try:
        config = preset(str(data["preset"])) if data.get("preset") else DEFAULT_CONFIG
        return config.with_options(**engine)
    except (TypeError, ValueError) as exc:
        raise ProfileError(f"Invalid engine configuration: {exc}") from exc


def profile_from_mapping(data: Mapping[str, Any], *, name: str = "default", base_url: str = "") -> SiteProfile:
    """Build a :class:`SiteProfile` from one merged profile mapping.

    *name* and *base_url* are used when the mapping does not set them.
    Raises :class:`ProfileError` on unknown keys or invalid values.
    """
    unknown = sorted(set(data) - _PROFILE_KEYS)
    if unknown:
        raise ProfileError(f"Unknown profile key(s): {', '.join(unknown)}")

    drop_tags = data.get("drop_tags")
    return SiteProfile(
        name=str(data.get("name") or name),
        base_url=str(data.get("base_url") or base_url),
        root_selector=str(data.get("root") or "body"),
        remove=_str_list(data.get("remove"), "remove"),
        unwrap=_str_list(data.get("unwrap"), "unwrap"),
        drop_tags=DEFAULT_DROP_TAGS if drop_tags is None else _str_list(drop_tags, "drop_tags"),
        description_selector=data.get("description", _DEFAULT_DESCRIPTION) or None,
        script_state=bool(data.get("script_state", False)),
        promote_first_image=bool(data.get("promote_first_image", False)),
        config=_engine_config(data),
    )


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

def _read(path: str | Path) -> tuple[dict[str, Any], dict[str, Any]]:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ProfileError(f"Cannot read profile file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ProfileError(f"Invalid YAML in profile file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ProfileError(f"Profile file {path} must contain a mapping")

    default = data.get("default") or {}
    domains = data.get("domains") or {}
    if not isinstance(default, dict):
        raise ProfileError("'default' must be a mapping")
    if not isinstance(domains, dict):
        raise ProfileError("'domains' must be a mapping")

    valid: dict[str, Any] = {}
    for key, cfg in domains.items():
        if not isinstance(key, str) or not isinstance(cfg, dict):
            logger.warning("Ignoring unusable profile entry for %r", key)
            continue
        valid[key.lower()] = cfg
    return default, valid


def load_profiles(path: str | Path) -> list[SiteProfile]:
    """Load every domain profile in the YAML file at *path*."""
    default, domains = _read(path)
    return [
        profile_from_mapping(
            _merge(default, cfg),
            name=key,
            base_url=f"https://{key}",
        )
        for key, cfg in domains.items()
    ]


def load_profile(path: str | Path, url: str) -> SiteProfile:
    """Load the YAML file at *path* and return the profile that serves *url*."""
    default, domains = _read(path)

    parsed = urlparse(url)
    netloc = parsed.netloc.lower()
    best_key = ""
    best_cfg: dict[str, Any] = {}
    for key, cfg in domains.items():
        if (netloc == key or netloc.endswith("." + key)) and len(key) > len(best_key):
            best_key = key
            best_cfg = cfg

    if not best_key:
        logger.debug("No domain profile for %r; using defaults", netloc)
    base_url = f"{parsed.scheme or 'https'}://{netloc}" if netloc else ""
    return profile_from_mapping(
        _merge(default, best_cfg),
        name=best_key or "default",
        base_url=base_url,
    )
