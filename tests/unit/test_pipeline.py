"""Tests for the pipeline state machine."""

from unittest.mock import MagicMock, patch

import pytest

from shorts_factory.core.exceptions import (
    CompositionError,
    ConfigurationError,
    GenerationError,
    PublishError,
    SynthesisError,
    ThumbnailError,
)
from shorts_factory.models.schemas import (
    AssetBatch,
    AssetOrigin,
    AssetRef,
    ContentPackage,
    PipelineStage,
    PublishResult,
)
from shorts_factory.pipelines.run_pipeline import ShortsPipeline
from shorts_factory.services.subtitle_builder import read_srt


@pytest.fixture
def content():
    return ContentPackage(
        title="Three site safety tips",
        script="Wear a helmet. Check your ladder. Keep the site clean.",
        key_points=["helmet", "ladder", "clean site"],
    )


@pytest.fixture
def collaborators(content, tmp_path):
    """Fake collaborators that write their files like the real ones."""
    script_generator = MagicMock()
    script_generator.generate_titles_and_script.return_value = content

    def _synthesize(text, output_path):
        output_path.write_bytes(b"ID3")
        return output_path

    narrator = MagicMock()
    narrator.synthesize.side_effect = _synthesize

    def _fetch(topics, max_count, destination_dir):
        assets = []
        for i in range(max_count):
            path = destination_dir / f"broll_{i}.jpg"
            path.write_bytes(b"jpeg")
            assets.append(AssetRef(path=path, origin=AssetOrigin.REMOTE, source_url=f"https://p/{i}.jpg"))
        return AssetBatch(kind="remote", assets=assets)

    asset_fetcher = MagicMock()
    asset_fetcher.fetch_batch.side_effect = _fetch

    def _compose(assets, audio_path, total_duration, output_path):
        output_path.write_bytes(b"mp4")
        return output_path

    composer = MagicMock()
    composer.compose.side_effect = _compose

    def _thumbnail(content, output_path):
        output_path.write_bytes(b"jpeg")
        return output_path

    thumbnail_generator = MagicMock()
    thumbnail_generator.generate.side_effect = _thumbnail

    uploader = MagicMock()
    uploader.upload.return_value = PublishResult(
        video_id="vid123",
        video_url="https://www.youtube.com/watch?v=vid123",
        short_url="https://youtube.com/shorts/vid123",
    )

    return {
        "script_generator": script_generator,
        "narrator": narrator,
        "asset_fetcher": asset_fetcher,
        "composer": composer,
        "thumbnail_generator": thumbnail_generator,
        "uploader": uploader,
    }


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path / "work"


@pytest.fixture
def pipeline(settings, logger, work_dir, collaborators):
    return ShortsPipeline(settings, logger, work_dir=work_dir, **collaborators)


def test_successful_run_reaches_published(pipeline, collaborators, work_dir):
    result = pipeline.generate()

    assert result.success
    assert result.final_stage == PipelineStage.PUBLISHED
    assert result.failure_reason is None
    assert result.title == "Three site safety tips"
    assert result.publish.short_url == "https://youtube.com/shorts/vid123"
    assert result.artifacts.video == work_dir / "output.mp4"
    assert result.artifacts.thumbnail == work_dir / "thumbnail.jpg"
    assert result.artifacts.audio == work_dir / "audio.mp3"
    assert result.artifacts.subtitles == work_dir / "subtitles.srt"
    assert not result.asset_fallback_used


def test_stage_table_order(pipeline):
    assert [stage for stage, _ in pipeline.stages()] == [
        PipelineStage.CONTENT_GENERATED,
        PipelineStage.NARRATION_SYNTHESIZED,
        PipelineStage.ASSETS_ACQUIRED,
        PipelineStage.COMPOSED,
        PipelineStage.THUMBNAIL_READY,
        PipelineStage.SUBTITLES_READY,
        PipelineStage.PUBLISHED,
    ]


def test_work_dir_is_created(pipeline, work_dir):
    assert not work_dir.exists()
    pipeline.generate()
    assert work_dir.is_dir()


def test_collaborators_receive_run_data(pipeline, collaborators, content, work_dir):
    pipeline.generate()

    collaborators["narrator"].synthesize.assert_called_once_with(content.script, work_dir / "audio.mp3")
    collaborators["asset_fetcher"].fetch_batch.assert_called_once_with(content.key_points, 3, work_dir)

    assets, audio, total, output = collaborators["composer"].compose.call_args.args
    assert len(assets) == 3
    assert audio == work_dir / "audio.mp3"
    assert total == 35.0
    assert output == work_dir / "output.mp4"

    video, thumbnail, metadata = collaborators["uploader"].upload.call_args.args
    assert (video, thumbnail) == (work_dir / "output.mp4", work_dir / "thumbnail.jpg")
    assert metadata.title == content.title
    assert metadata.description.startswith(content.script)


def test_subtitles_are_written_over_total_duration(pipeline, work_dir):
    pipeline.generate()

    cues = read_srt(work_dir / "subtitles.srt")
    assert [c.text for c in cues] == ["Wear a helmet", "Check your ladder", "Keep the site clean"]
    assert cues[-1].end == 35.0


def test_asset_count_is_capped_by_max_assets(pipeline, collaborators):
    collaborators["script_generator"].generate_titles_and_script.return_value = ContentPackage(
        title="T", script="One.", key_points=[f"k{i}" for i in range(8)]
    )

    pipeline.generate()

    topics, max_count, _ = collaborators["asset_fetcher"].fetch_batch.call_args.args
    assert max_count == 5


def test_title_is_used_when_there_are_no_key_points(pipeline, collaborators):
    collaborators["script_generator"].generate_titles_and_script.return_value = ContentPackage(
        title="Only a title", script="One."
    )

    pipeline.generate()

    topics, max_count, _ = collaborators["asset_fetcher"].fetch_batch.call_args.args
    assert (topics, max_count) == (["Only a title"], 1)


def test_asset_fallback_is_reported(pipeline, collaborators, work_dir):
    def _fallback(topics, max_count, destination_dir):
        path = destination_dir / "broll_0.jpg"
        path.write_bytes(b"jpeg")
        return AssetBatch(kind="fallback", assets=[AssetRef(path=path, origin=AssetOrigin.PLACEHOLDER)])

    collaborators["asset_fetcher"].fetch_batch.side_effect = _fallback

    result = pipeline.generate()

    assert result.success
    assert result.asset_fallback_used


_FAILURES = [
    ("script_generator", "generate_titles_and_script", GenerationError("bad json"), PipelineStage.CONTENT_GENERATED),
    ("narrator", "synthesize", SynthesisError("status 401"), PipelineStage.NARRATION_SYNTHESIZED),
    ("composer", "compose", CompositionError("ffmpeg exited 1"), PipelineStage.COMPOSED),
    ("thumbnail_generator", "generate", ThumbnailError("no font"), PipelineStage.THUMBNAIL_READY),
    ("uploader", "upload", PublishError("quota exceeded"), PipelineStage.PUBLISHED),
]
_ORDER = ["script_generator", "narrator", "asset_fetcher", "composer", "thumbnail_generator", "uploader"]
_METHOD = {
    "script_generator": "generate_titles_and_script",
    "narrator": "synthesize",
    "asset_fetcher": "fetch_batch",
    "composer": "compose",
    "thumbnail_generator": "generate",
    "uploader": "upload",
}


@pytest.mark.parametrize("name,method,error,stage", _FAILURES)
def test_first_failure_stops_the_run(name, method, error, stage, pipeline, collaborators):
    getattr(collaborators[name], method).side_effect = error

    result = pipeline.generate()

    assert not result.success
    assert result.final_stage == PipelineStage.FAILED
    assert result.failed_stage == stage
    assert result.artifacts is None
    assert stage.value in result.failure_reason
    assert type(error).__name__ in result.failure_reason
    assert str(error) in result.failure_reason

    for later in _ORDER[_ORDER.index(name) + 1:]:
        getattr(collaborators[later], _METHOD[later]).assert_not_called()


def test_unexpected_exceptions_are_captured(pipeline, collaborators):
    collaborators["asset_fetcher"].fetch_batch.side_effect = RuntimeError("boom")

    result = pipeline.generate()

    assert not result.success
    assert result.failed_stage == PipelineStage.ASSETS_ACQUIRED
    collaborators["composer"].compose.assert_not_called()


def test_failure_keeps_partial_artifacts(pipeline, collaborators, work_dir):
    collaborators["composer"].compose.side_effect = CompositionError("ffmpeg exited 1")

    result = pipeline.generate()

    assert result.partial_artifacts["audio"] == work_dir / "audio.mp3"
    assert result.partial_artifacts["broll_0"] == work_dir / "broll_0.jpg"
    assert "video" not in result.partial_artifacts
    assert (work_dir / "audio.mp3").exists()


def test_script_without_sentences_fails_at_subtitles(pipeline, collaborators):
    collaborators["script_generator"].generate_titles_and_script.return_value = ContentPackage(
        title="T", script="...!?", key_points=["a"]
    )

    result = pipeline.generate()

    assert result.failed_stage == PipelineStage.SUBTITLES_READY
    assert "EmptyScript" in result.failure_reason
    collaborators["uploader"].upload.assert_not_called()


def test_narration_length_can_drive_duration(settings, logger, work_dir, collaborators):
    settings.match_narration_duration = True
    pipeline = ShortsPipeline(settings, logger, work_dir=work_dir, **collaborators)
    clip = MagicMock()
    clip.duration = 42.5

    with patch("shorts_factory.pipelines.run_pipeline.AudioFileClip", return_value=clip):
        result = pipeline.generate()

    assert result.success
    assert collaborators["composer"].compose.call_args.args[2] == 42.5
    clip.close.assert_called_once()


def test_unreadable_narration_fails_synthesis_stage(settings, logger, work_dir, collaborators):
    settings.match_narration_duration = True
    pipeline = ShortsPipeline(settings, logger, work_dir=work_dir, **collaborators)

    with patch("shorts_factory.pipelines.run_pipeline.AudioFileClip", side_effect=OSError("bad mp3")):
        result = pipeline.generate()

    assert result.failed_stage == PipelineStage.NARRATION_SYNTHESIZED
    assert "SynthesisError" in result.failure_reason


def test_missing_voice_id_fails_at_construction(settings, logger, collaborators):
    settings.elevenlabs_voice_id = None

    with pytest.raises(ConfigurationError, match="DEFAULT_VOICE_ID"):
        ShortsPipeline(settings, logger, **collaborators)


def test_placeholder_warning_is_logged_with_run_id(settings, work_dir, collaborators):
    def _fallback(topics, max_count, destination_dir):
        path = destination_dir / "broll_0.jpg"
        path.write_bytes(b"jpeg")
        return AssetBatch(kind="fallback", assets=[AssetRef(path=path, origin=AssetOrigin.PLACEHOLDER)])

    collaborators["asset_fetcher"].fetch_batch.side_effect = _fallback
    base_logger = MagicMock()
    pipeline = ShortsPipeline(settings, base_logger, work_dir=work_dir, **collaborators)

    result = pipeline.generate()

    base_logger.bind.assert_called_once_with(run_id=result.run_id)
    run_logger = base_logger.bind.return_value
    assert any("placeholder" in call.args[0] for call in run_logger.warning.call_args_list)
    base_logger.warning.assert_not_called()
