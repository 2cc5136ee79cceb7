"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from sweeper.config.settings import Settings


def test_youtube_configured_follows_api_key() -> None:
    assert Settings(youtube_api_key=None).youtube_configured is False
    assert Settings(youtube_api_key="").youtube_configured is False
    assert Settings(youtube_api_key="AIza-test").youtube_configured is True


def test_defaults() -> None:
    settings = Settings(environment="testing")
    assert settings.youtube_page_size == 100
    assert settings.youtube_request_timeout == 10.0
    assert settings.spam_keywords_path == "config/spam_keywords.json"
    assert settings.is_development is False


@pytest.mark.parametrize("page_size", [0, 101])
def test_page_size_bounds(page_size: int) -> None:
    with pytest.raises(ValidationError):
        Settings(youtube_page_size=page_size)


def test_only_used_server_fields_remain() -> None:
    fields = Settings.model_fields
    assert "api_host" not in fields
    assert "api_port" not in fields
    assert not hasattr(Settings, "is_production")
    assert not hasattr(Settings, "is_testing")
