"""Tests for keyword configuration loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from sweeper.moderation.keywords import (
    JsonKeywordSource,
    KeywordConfig,
    StaticKeywordSource,
)


class TestKeywordConfig:
    """KeywordConfig normalisation."""

    def test_entries_are_lowercased(self):
        config = KeywordConfig(blacklist=["Slot GACOR"], whitelist=["Not Judol"])
        assert config.blacklist == ("slot gacor",)
        assert config.whitelist == ("not judol",)

    def test_blank_entries_are_dropped(self):
        config = KeywordConfig(blacklist=["judol", "  ", ""])
        assert config.blacklist == ("judol",)

    def test_order_is_preserved(self):
        config = KeywordConfig(blacklist=["b", "a", "c"])
        assert config.blacklist == ("b", "a", "c")

    def test_is_read_only(self):
        config = KeywordConfig(blacklist=["judol"])
        with pytest.raises(ValidationError):
            config.blacklist = ("other",)


class TestJsonKeywordSource:
    """Loading keywords from a JSON file."""

    def test_load(self, tmp_path: Path):
        path = tmp_path / "keywords.json"
        path.write_text(
            json.dumps({"blacklist": ["JUDOL"], "whitelist": ["not judol"]}),
            encoding="utf-8",
        )

        config = JsonKeywordSource(path).load()

        assert config.blacklist == ("judol",)
        assert config.whitelist == ("not judol",)

    def test_reload_picks_up_edits(self, tmp_path: Path):
        path = tmp_path / "keywords.json"
        path.write_text(json.dumps({"blacklist": ["a"]}), encoding="utf-8")
        source = JsonKeywordSource(path)
        assert source.load().blacklist == ("a",)

        path.write_text(json.dumps({"blacklist": ["b"]}), encoding="utf-8")
        assert source.load().blacklist == ("b",)

    def test_missing_lists_default_to_empty(self, tmp_path: Path):
        path = tmp_path / "keywords.json"
        path.write_text("{}", encoding="utf-8")
        config = JsonKeywordSource(path).load()
        assert config.blacklist == ()
        assert config.whitelist == ()

    def test_bundled_keyword_file_loads(self):
        path = Path(__file__).parents[2] / "config" / "spam_keywords.json"
        config = JsonKeywordSource(path).load()
        assert "judol" in config.blacklist
        assert "not judol" in config.whitelist


def test_static_source_returns_config():
    config = KeywordConfig(blacklist=["x"])
    assert StaticKeywordSource(config).load() is config
