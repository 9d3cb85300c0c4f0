"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from newsblocks.plugins import clear_adapters

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def feed_xml() -> str:
    return _read_fixture("feed.xml")


@pytest.fixture
def state_article_html() -> str:
    return _read_fixture("state_article.html")


@pytest.fixture
def profiles_path() -> Path:
    return FIXTURES_DIR / "profiles.yaml"


@pytest.fixture(autouse=True)
def _clean_adapter_registry():
    clear_adapters()
    yield
    clear_adapters()
