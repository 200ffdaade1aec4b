"""Shared pytest fixtures and configuration."""

from pathlib import Path

import pytest
from PIL import Image

from shorts_factory.core.config import Settings
from shorts_factory.core.logging_config import get_logger


@pytest.fixture
def settings(tmp_path):
    """Create test settings with fake credentials, ignoring any local .env."""
    return Settings(
        _env_file=None,
        openai_api_key="test-openai-key",
        elevenlabs_api_key="test-elevenlabs-key",
        elevenlabs_voice_id="test-voice-id",
        pexels_api_key="test-pexels-key",
        youtube_client_id="test-client-id",
        youtube_client_secret="test-client-secret",
        youtube_refresh_token="test-refresh-token",
        output_dir=str(tmp_path / "output"),
        run_records_path=str(tmp_path / "runs"),
        placeholder_image_path=str(tmp_path / "no-such-placeholder.jpg"),
        log_dir=None,
        random_seed=1234,
    )


@pytest.fixture
def logger():
    """Create test logger instance."""
    return get_logger(__name__)


@pytest.fixture
def make_jpeg():
    """Factory writing a small valid JPEG and returning its bytes."""

    def _make(path: Path, size: tuple[int, int] = (16, 16), color: str = "navy") -> bytes:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=color).save(path, "JPEG")
        return path.read_bytes()

    return _make
