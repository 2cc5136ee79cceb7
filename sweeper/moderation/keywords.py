"""Spam keyword configuration.

The keyword file is JSON with two lists::

    {"blacklist": ["slot gacor", ...], "whitelist": ["not judol", ...]}

It is re-read on every classification call so edits take effect without a
restart.
"""

from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class KeywordConfig(BaseModel):
    """Blacklist (spam signals) and whitelist (override signals)."""

    model_config = ConfigDict(frozen=True)

    blacklist: tuple[str, ...] = Field(default=())
    whitelist: tuple[str, ...] = Field(default=())

    @field_validator("blacklist", "whitelist")
    @classmethod
    def lowercase_entries(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Store entries lower-cased, dropping blanks."""
        return tuple(entry.lower() for entry in v if entry.strip())


class KeywordSource(Protocol):
    """Anything that can supply the current keyword configuration."""

    def load(self) -> KeywordConfig: ...


class JsonKeywordSource:
    """Reads the keyword configuration from a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> KeywordConfig:
        return KeywordConfig.model_validate_json(self.path.read_text(encoding="utf-8"))


class StaticKeywordSource:
    """Serves a fixed keyword configuration."""

    def __init__(self, config: KeywordConfig) -> None:
        self.config = config

    def load(self) -> KeywordConfig:
        return self.config
