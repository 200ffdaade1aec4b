"""Tests for the run record repository."""

from pathlib import Path

import pytest

from shorts_factory.models.schemas import PipelineResult, PipelineStage
from shorts_factory.storage.repository import RunRepository


@pytest.fixture
def repository(settings, logger):
    """Create repository with temp storage."""
    return RunRepository(settings, logger)


@pytest.fixture
def failed_result(tmp_path):
    return PipelineResult(
        run_id="run_abc123",
        success=False,
        final_stage=PipelineStage.FAILED,
        failed_stage=PipelineStage.COMPOSED,
        work_dir=tmp_path,
        title="عنوان",
        failure_reason="Stage 'composed' failed: CompositionError: ffmpeg exited 1",
        partial_artifacts={"audio": tmp_path / "audio.mp3"},
        asset_fallback_used=True,
    )


def test_save_creates_json_file(repository, failed_result, settings):
    path = repository.save_result(failed_result)

    assert path == Path(settings.run_records_path) / "run_abc123.json"
    assert path.exists()
    assert "عنوان" in path.read_text(encoding="utf-8")


def test_load_round_trips(repository, failed_result):
    repository.save_result(failed_result)

    loaded = repository.load_result("run_abc123")

    assert loaded == failed_result


def test_load_missing_returns_none(repository):
    assert repository.load_result("run_missing") is None


def test_list_runs(repository, failed_result):
    repository.save_result(failed_result)
    repository.save_result(failed_result.model_copy(update={"run_id": "run_000"}))

    assert repository.list_runs() == ["run_000", "run_abc123"]
