"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from shorts_factory.core.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "OPENAI_API_KEY",
        "ELEVENLABS_API_KEY",
        "DEFAULT_VOICE_ID",
        "ELEVENLABS_VOICE_ID",
        "PEXELS_API_KEY",
        "YT_CLIENT_ID",
        "YT_CLIENT_SECRET",
        "YT_REFRESH_TOKEN",
        "YOUTUBE_CLIENT_ID",
        "YOUTUBE_CLIENT_SECRET",
        "YOUTUBE_REFRESH_TOKEN",
        "YOUTUBE_TOKEN_FILE",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings(_env_file=None)

    assert s.video_width == 1080
    assert s.video_height == 1920
    assert s.video_duration_seconds == 35.0
    assert s.max_assets == 5
    assert s.elevenlabs_model_id == "eleven_multilingual_v2"
    assert s.youtube_category_id == "28"


def test_missing_required_lists_env_names(clean_env):
    missing = Settings(_env_file=None).missing_required()

    assert missing[:4] == ["OPENAI_API_KEY", "ELEVENLABS_API_KEY", "DEFAULT_VOICE_ID", "PEXELS_API_KEY"]
    assert "YT_REFRESH_TOKEN" in missing[4]


def test_complete_configuration_has_nothing_missing(settings):
    assert settings.missing_required() == []


def test_env_aliases(clean_env):
    clean_env.setenv("DEFAULT_VOICE_ID", "voice-from-env")
    clean_env.setenv("YT_CLIENT_ID", "cid")
    clean_env.setenv("YT_CLIENT_SECRET", "secret")
    clean_env.setenv("YT_REFRESH_TOKEN", "refresh")

    s = Settings(_env_file=None)

    assert s.elevenlabs_voice_id == "voice-from-env"
    assert s.has_publish_credentials()


def test_token_file_counts_only_when_present(clean_env, tmp_path):
    s = Settings(_env_file=None, youtube_token_file=str(tmp_path / "token.json"))
    assert not s.has_publish_credentials()

    (tmp_path / "token.json").write_text("{}")
    assert s.has_publish_credentials()


@pytest.mark.parametrize("max_assets", [0, -1, 6])
def test_max_assets_out_of_range_is_rejected(clean_env, max_assets):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_assets=max_assets)


@pytest.mark.parametrize("duration", [0, -5.0, float("inf")])
def test_non_positive_duration_is_rejected(clean_env, duration):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, video_duration_seconds=duration)


def test_max_assets_from_env_is_bounded(clean_env):
    clean_env.setenv("MAX_ASSETS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_assignment_is_validated(settings):
    with pytest.raises(ValidationError):
        settings.max_assets = 0
    assert settings.max_assets == 5
