"""Video Composer - turns still images and narration into the final vertical .mp4."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from shorts_factory.core.config import Settings
from shorts_factory.core.exceptions import CompositionError, InvalidInput
from shorts_factory.models.schemas import AssetRef, TimeSlice
from shorts_factory.services.timing_allocator import allocate
from shorts_factory.utils.ffmpeg_runner import FFmpegError, FFmpegNotFound, FFmpegTimeout, run_ffmpeg

MANIFEST_NAME = "input_list.txt"


def escape_concat_path(path: Path) -> str:
    """Quote a path for the concat demuxer (single quotes, embedded quotes escaped)."""
    return "'" + str(path).replace("'", "'\\''") + "'"


def build_concat_manifest(assets: Sequence[AssetRef], slices: Sequence[TimeSlice]) -> str:
    """
    Build the concat demuxer manifest text.

    Each image gets a ``file``/``duration`` pair. The last image is listed a
    second time without a duration, otherwise ffmpeg ignores the final
    ``duration`` directive.

    Args:
        assets: Images in display order
        slices: One time slice per image

    Returns:
        Manifest text
    """
    lines = []
    for asset, time_slice in zip(assets, slices):
        lines.append(f"file {escape_concat_path(Path(asset.path).resolve())}")
        lines.append(f"duration {time_slice.duration:.6f}")
    lines.append(f"file {escape_concat_path(Path(assets[-1].path).resolve())}")
    return "\n".join(lines) + "\n"


class VideoComposer:
    """Composes a slideshow video from images with a narration soundtrack."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize video composer.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.ffmpeg_binary = settings.ffmpeg_binary
        self.timeout = settings.ffmpeg_timeout_seconds

    def compose(
        self,
        assets: Sequence[AssetRef],
        audio_path: Path,
        total_duration: float,
        output_path: Path,
    ) -> Path:
        """
        Render the video.

        Args:
            assets: Non-empty list of images, shown in order
            audio_path: Narration audio file
            total_duration: Length the images are spread over, in seconds
            output_path: Destination .mp4 (the manifest is written next to it)

        Returns:
            output_path

        Raises:
            InvalidInput: If assets is empty or the duration is not positive
            CompositionError: If an input is missing or ffmpeg fails
        """
        if not assets:
            raise InvalidInput("at least one asset is required to compose a video")

        slices = allocate(total_duration, len(assets))

        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise CompositionError(f"Audio file not found: {audio_path}")
        for asset in assets:
            if not Path(asset.path).exists():
                raise CompositionError(f"Image not found: {asset.path}")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        manifest_path = output_path.parent / MANIFEST_NAME
        manifest_path.write_text(build_concat_manifest(assets, slices), encoding="utf-8")

        cmd = self._build_command(manifest_path, audio_path, output_path)
        self.logger.info(
            f"Composing video from {len(assets)} images over {total_duration:.2f}s "
            f"({slices[0].duration:.2f}s each)..."
        )

        try:
            run_ffmpeg(cmd, timeout=self.timeout)
        except FFmpegNotFound as e:
            raise CompositionError(str(e)) from e
        except FFmpegTimeout as e:
            raise CompositionError(str(e)) from e
        except FFmpegError as e:
            self.logger.error(f"ffmpeg stderr (tail):\n{e.stderr}")
            raise CompositionError(f"Video composition failed: {e}", diagnostics=e.stderr) from e

        if not output_path.exists():
            raise CompositionError(f"ffmpeg reported success but {output_path} was not created")

        self.logger.info(f"Successfully created video: {output_path}")
        return output_path

    def _build_command(self, manifest_path: Path, audio_path: Path, output_path: Path) -> list[str]:
        width = self.settings.video_width
        height = self.settings.video_height
        return [
            self.ffmpeg_binary,
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(manifest_path),
            "-i", str(audio_path),
            "-map", "0:v",
            "-map", "1:a",
            "-vf", f"scale={width}:{height},setsar=1:1",
            "-r", str(self.settings.video_fps),
            "-c:v", "libx264",
            "-c:a", "aac",
            "-b:v", "5000k",
            "-b:a", "192k",
            "-pix_fmt", "yuv420p",
            "-shortest",
            str(output_path),
        ]
