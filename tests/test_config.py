"""Tests for newsblocks.config."""

from __future__ import annotations

import dataclasses
import re

import pytest

from newsblocks.config import (
    DEFAULT_CONFIG,
    HEADING_TAGS,
    PRESETS,
    DedupMode,
    EngineConfig,
    preset,
)


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.dedup_mode is DedupMode.SUBSTRING
        assert config.similarity_threshold == 98.0
        assert {"a", "img", "blockquote"} <= config.parsed_entity_tags

    def test_dedup_mode_from_string(self):
        assert EngineConfig(dedup_mode="capture").dedup_mode is DedupMode.CAPTURE

    def test_unknown_dedup_mode(self):
        with pytest.raises(ValueError, match="dedup_mode"):
            EngineConfig(dedup_mode="fuzzy")

    @pytest.mark.parametrize("threshold", [-1, 100.5, 250])
    def test_threshold_out_of_range(self, threshold):
        with pytest.raises(ValueError, match="similarity_threshold"):
            EngineConfig(similarity_threshold=threshold)

    def test_threshold_bounds_accepted(self):
        assert EngineConfig(similarity_threshold=0).similarity_threshold == 0.0
        assert EngineConfig(similarity_threshold="100").similarity_threshold == 100.0

    def test_tag_sets_coerced(self):
        config = EngineConfig(parsed_entity_tags="A, img ,,blockquote")
        assert config.parsed_entity_tags == frozenset({"a", "img", "blockquote"})

    def test_pattern_strings_compiled(self):
        config = EngineConfig(video_host_patterns=[r"vimeo\.com/(\d+)"])
        assert isinstance(config.video_host_patterns[0], re.Pattern)
        assert config.video_host_patterns[0].search("https://VIMEO.com/42")

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.dedup_mode = DedupMode.CAPTURE

    def test_from_mapping(self):
        config = EngineConfig.from_mapping({"dedup_mode": "similarity", "similarity_threshold": 90})
        assert config.dedup_mode is DedupMode.SIMILARITY
        assert config.similarity_threshold == 90.0

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ValueError, match="bogus"):
            EngineConfig.from_mapping({"bogus": 1})

    def test_with_options_ignores_none(self):
        config = DEFAULT_CONFIG.with_options(dedup_mode=None, similarity_threshold=50)
        assert config.dedup_mode is DEFAULT_CONFIG.dedup_mode
        assert config.similarity_threshold == 50.0
        assert DEFAULT_CONFIG.similarity_threshold == 98.0

    def test_with_options_unknown_key(self):
        with pytest.raises(ValueError, match="colour"):
            DEFAULT_CONFIG.with_options(colour="red")


class TestPresets:
    def test_all_modes_covered(self):
        assert {p.dedup_mode for p in PRESETS.values()} == set(DedupMode)

    def test_similarity_never_flattens_headings(self):
        assert HEADING_TAGS <= preset("similarity").parsed_entity_tags

    def test_capture_recurses_on_breaks(self):
        assert "br" in preset("capture").parsed_entity_tags

    def test_case_insensitive(self):
        assert preset("SUBSTRING") is PRESETS["substring"]

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            preset("nope")
