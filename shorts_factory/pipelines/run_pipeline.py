"""Shorts pipeline orchestrator - script → narration → images → video → thumbnail → subtitles → YouTube."""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

from moviepy import AudioFileClip
from pydantic import ValidationError

from shorts_factory.core.config import Settings, settings
from shorts_factory.core.exceptions import ConfigurationError, SynthesisError
from shorts_factory.core.logging_config import get_logger, setup_logging_from_settings
from shorts_factory.models.schemas import (
    AssetBatch,
    ContentPackage,
    PipelineArtifacts,
    PipelineResult,
    PipelineStage,
    PublishResult,
)
from shorts_factory.services.asset_fetcher import AssetFetcher
from shorts_factory.services.llm_client import ScriptGenerator
from shorts_factory.services.metadata_generator import build_upload_metadata
from shorts_factory.services.subtitle_builder import build_cues, write_srt
from shorts_factory.services.thumbnail_generator import ThumbnailGenerator
from shorts_factory.services.tts_client import NarrationSynthesizer
from shorts_factory.services.video_composer import VideoComposer
from shorts_factory.services.youtube_uploader import YouTubeUploader
from shorts_factory.storage.repository import RunRepository
from shorts_factory.utils.error_handler import format_error_message, get_fallback_suggestion
from shorts_factory.utils.io_utils import create_run_output_dir, new_run_id

AUDIO_FILE = "audio.mp3"
VIDEO_FILE = "output.mp4"
THUMBNAIL_FILE = "thumbnail.jpg"
SUBTITLES_FILE = "subtitles.srt"

# Service name used for fallback suggestions, per stage
_SUGGESTION_SERVICE = {
    PipelineStage.CONTENT_GENERATED: "Script Generation",
    PipelineStage.NARRATION_SYNTHESIZED: "TTS",
    PipelineStage.ASSETS_ACQUIRED: "Stock Images",
    PipelineStage.COMPOSED: "Video Composition",
    PipelineStage.THUMBNAIL_READY: "Thumbnail",
    PipelineStage.SUBTITLES_READY: "Subtitles",
    PipelineStage.PUBLISHED: "YouTube Upload",
}


class RunContext:
    """Mutable state of one run, filled in stage by stage."""

    def __init__(self, run_id: str, work_dir: Path, logger: Any):
        self.run_id = run_id
        self.work_dir = work_dir
        self.logger = logger
        self.stage = PipelineStage.PENDING
        self.content: Optional[ContentPackage] = None
        self.audio_path: Optional[Path] = None
        self.total_duration: Optional[float] = None
        self.asset_batch: Optional[AssetBatch] = None
        self.video_path: Optional[Path] = None
        self.thumbnail_path: Optional[Path] = None
        self.subtitles_path: Optional[Path] = None
        self.publish: Optional[PublishResult] = None

    def produced_files(self) -> dict[str, Path]:
        """Artifacts written so far, by name."""
        files = {
            "audio": self.audio_path,
            "video": self.video_path,
            "thumbnail": self.thumbnail_path,
            "subtitles": self.subtitles_path,
        }
        produced = {name: path for name, path in files.items() if path is not None}
        if self.asset_batch:
            for i, asset in enumerate(self.asset_batch.assets):
                produced[f"broll_{i}"] = asset.path
        return produced


class ShortsPipeline:
    """
    Runs one short from script generation to upload as a linear state machine.

    Each stage moves the run to its target state; the first exception moves it
    to FAILED and no later stage runs. ``generate`` never raises.
    """

    def __init__(
        self,
        settings: Settings,
        logger: Any,
        work_dir: Optional[Path] = None,
        script_generator: Optional[ScriptGenerator] = None,
        narrator: Optional[NarrationSynthesizer] = None,
        asset_fetcher: Optional[AssetFetcher] = None,
        composer: Optional[VideoComposer] = None,
        thumbnail_generator: Optional[ThumbnailGenerator] = None,
        uploader: Optional[YouTubeUploader] = None,
    ):
        """
        Initialize the pipeline and its collaborators.

        Args:
            settings: Application settings
            logger: Logger instance
            work_dir: Directory for the run's files (default: settings.output_dir)
            script_generator, narrator, asset_fetcher, composer, thumbnail_generator, uploader:
                Optional collaborator overrides; built from settings when omitted

        Raises:
            ConfigurationError: If required options are missing
        """
        missing = settings.missing_required()
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        self.settings = settings
        self.logger = logger
        self.work_dir = Path(work_dir or settings.output_dir)

        self.script_generator = script_generator or ScriptGenerator(settings, logger)
        self.narrator = narrator or NarrationSynthesizer(settings, logger)
        self.asset_fetcher = asset_fetcher or AssetFetcher(settings, logger)
        self.composer = composer or VideoComposer(settings, logger)
        self.thumbnail_generator = thumbnail_generator or ThumbnailGenerator(settings, logger)
        self.uploader = uploader or YouTubeUploader(settings, logger)

    def stages(self) -> list[tuple[PipelineStage, Callable[[RunContext], None]]]:
        """Ordered stage table: (state reached on success, stage function)."""
        return [
            (PipelineStage.CONTENT_GENERATED, self._generate_content),
            (PipelineStage.NARRATION_SYNTHESIZED, self._synthesize_narration),
            (PipelineStage.ASSETS_ACQUIRED, self._acquire_assets),
            (PipelineStage.COMPOSED, self._compose_video),
            (PipelineStage.THUMBNAIL_READY, self._render_thumbnail),
            (PipelineStage.SUBTITLES_READY, self._write_subtitles),
            (PipelineStage.PUBLISHED, self._publish),
        ]

    def generate(self) -> PipelineResult:
        """
        Run every stage in order.

        Returns:
            PipelineResult; ``success`` is False if any stage failed
        """
        run_id = new_run_id()
        logger = self.logger.bind(run_id=run_id)
        ctx = RunContext(run_id, self.work_dir, logger)

        logger.info("=" * 60)
        logger.info(f"Starting run {run_id}")
        logger.info(f"Working directory: {self.work_dir}")
        logger.info("=" * 60)

        current = PipelineStage.PENDING
        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
            for target, stage_fn in self.stages():
                current = target
                logger.info(f"Stage: {target.value}")
                stage_fn(ctx)
                ctx.stage = target
        except Exception as e:
            return self._failed(ctx, current, e, logger)

        logger.info("=" * 60)
        logger.info("Pipeline complete!")
        logger.info(f"Title: {ctx.content.title}")
        logger.info(f"Video URL: {ctx.publish.video_url}")
        logger.info(f"Shorts URL: {ctx.publish.short_url}")
        logger.info("=" * 60)

        return PipelineResult(
            run_id=run_id,
            success=True,
            final_stage=ctx.stage,
            work_dir=self.work_dir,
            title=ctx.content.title,
            artifacts=PipelineArtifacts(
                video=ctx.video_path,
                thumbnail=ctx.thumbnail_path,
                audio=ctx.audio_path,
                subtitles=ctx.subtitles_path,
            ),
            publish=ctx.publish,
            asset_fallback_used=ctx.asset_batch.fell_back,
        )

    def _failed(self, ctx: RunContext, stage: PipelineStage, error: Exception, logger: Any) -> PipelineResult:
        reason = format_error_message(
            f"Stage '{stage.value}'",
            error,
            context={"run_id": ctx.run_id},
        )
        logger.opt(exception=error).error(reason)
        suggestion = get_fallback_suggestion(_SUGGESTION_SERVICE.get(stage, ""), error)
        if suggestion:
            logger.info(f"Suggestion: {suggestion}")

        return PipelineResult(
            run_id=ctx.run_id,
            success=False,
            final_stage=PipelineStage.FAILED,
            failed_stage=stage,
            work_dir=self.work_dir,
            title=ctx.content.title if ctx.content else None,
            failure_reason=reason,
            partial_artifacts=ctx.produced_files(),
            asset_fallback_used=bool(ctx.asset_batch and ctx.asset_batch.fell_back),
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _generate_content(self, ctx: RunContext) -> None:
        ctx.content = self.script_generator.generate_titles_and_script()

    def _synthesize_narration(self, ctx: RunContext) -> None:
        ctx.audio_path = self.narrator.synthesize(ctx.content.script, ctx.work_dir / AUDIO_FILE)
        ctx.total_duration = self._resolve_duration(ctx)

    def _acquire_assets(self, ctx: RunContext) -> None:
        topics = ctx.content.key_points or [ctx.content.title]
        max_count = min(max(len(ctx.content.key_points), 1), self.settings.max_assets)
        ctx.asset_batch = self.asset_fetcher.fetch_batch(topics, max_count, ctx.work_dir)
        if ctx.asset_batch.fell_back:
            ctx.logger.warning(f"Using {len(ctx.asset_batch.assets)} placeholder images")

    def _compose_video(self, ctx: RunContext) -> None:
        ctx.video_path = self.composer.compose(
            ctx.asset_batch.assets,
            ctx.audio_path,
            ctx.total_duration,
            ctx.work_dir / VIDEO_FILE,
        )

    def _render_thumbnail(self, ctx: RunContext) -> None:
        ctx.thumbnail_path = self.thumbnail_generator.generate(ctx.content, ctx.work_dir / THUMBNAIL_FILE)

    def _write_subtitles(self, ctx: RunContext) -> None:
        cues = build_cues(ctx.content.script, ctx.total_duration)
        ctx.subtitles_path = write_srt(cues, ctx.work_dir / SUBTITLES_FILE, ctx.logger)

    def _publish(self, ctx: RunContext) -> None:
        metadata = build_upload_metadata(ctx.content, self.settings)
        ctx.publish = self.uploader.upload(ctx.video_path, ctx.thumbnail_path, metadata)

    def _resolve_duration(self, ctx: RunContext) -> float:
        """Total video duration: the configured length, or the narration's length when enabled."""
        audio_path = ctx.audio_path
        if not self.settings.match_narration_duration:
            return self.settings.video_duration_seconds

        try:
            clip = AudioFileClip(str(audio_path))
        except (OSError, ValueError, KeyError) as e:
            raise SynthesisError(f"Could not read narration duration from {audio_path}: {e}") from e
        try:
            duration = clip.duration
        finally:
            clip.close()

        if not duration or duration <= 0:
            raise SynthesisError(f"Narration file {audio_path} has no duration")
        ctx.logger.info(f"Narration duration: {duration:.2f}s")
        return float(duration)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entrypoint: run one short end to end."""
    parser = argparse.ArgumentParser(
        description="Shorts Factory - generate and publish one vertical short",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help=f"Working directory for run artifacts (default: {settings.output_dir})",
    )
    parser.add_argument(
        "--run-subdir",
        action="store_true",
        help="Write into a new timestamped subdirectory of the output directory",
    )
    parser.add_argument(
        "--duration-seconds",
        type=float,
        default=None,
        help=f"Total video duration in seconds (default: {settings.video_duration_seconds})",
    )
    parser.add_argument(
        "--max-assets",
        type=int,
        default=None,
        help=f"Maximum number of stock images (default: {settings.max_assets})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.log_level})",
    )

    args = parser.parse_args(argv)

    if args.duration_seconds is not None and args.duration_seconds <= 0:
        parser.error("--duration-seconds must be positive")
    if args.max_assets is not None and args.max_assets < 1:
        parser.error("--max-assets must be at least 1")

    overrides = {
        "output_dir": args.output_dir,
        "video_duration_seconds": args.duration_seconds,
        "max_assets": args.max_assets,
        "log_level": args.log_level,
    }
    run_settings = settings.model_copy()
    try:
        for name, value in overrides.items():
            if value is not None:
                setattr(run_settings, name, value)
    except ValidationError as e:
        parser.error(str(e))

    setup_logging_from_settings(run_settings)
    logger = get_logger(__name__)

    work_dir = Path(run_settings.output_dir)
    if args.run_subdir:
        work_dir = create_run_output_dir(run_settings.output_dir, "short")

    try:
        pipeline = ShortsPipeline(run_settings, logger, work_dir=work_dir)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    result = pipeline.generate()

    try:
        RunRepository(run_settings, logger).save_result(result)
    except OSError as e:
        logger.warning(f"Could not save run record: {e}")

    if result.success:
        print(f"Title: {result.title}")
        print(f"Video URL: {result.publish.video_url}")
        print(f"Shorts URL: {result.publish.short_url}")
        return 0

    print(f"Pipeline failed: {result.failure_reason}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
