"""Pydantic models and schemas for the shorts pipeline."""

from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# Enums
# ============================================================================


class AssetOrigin(str, Enum):
    """Where a visual asset came from."""

    REMOTE = "remote"
    PLACEHOLDER = "placeholder"


class PipelineStage(str, Enum):
    """States of the pipeline run, in the order they are reached."""

    PENDING = "pending"
    CONTENT_GENERATED = "content_generated"
    NARRATION_SYNTHESIZED = "narration_synthesized"
    ASSETS_ACQUIRED = "assets_acquired"
    COMPOSED = "composed"
    THUMBNAIL_READY = "thumbnail_ready"
    SUBTITLES_READY = "subtitles_ready"
    PUBLISHED = "published"
    FAILED = "failed"


# ============================================================================
# Content Models
# ============================================================================


class ContentPackage(BaseModel):
    """Title, narration script and key points produced once per run."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Video title")
    script: str = Field(..., description="Narration script")
    key_points: list[str] = Field(default_factory=list, description="Topical terms used for stock photo search")

    @field_validator("script")
    @classmethod
    def script_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("script must not be empty")
        return value

    @field_validator("key_points")
    @classmethod
    def drop_blank_key_points(cls, value: list[str]) -> list[str]:
        return [point.strip() for point in value if point and point.strip()]


# ============================================================================
# Asset Models
# ============================================================================


class AssetRef(BaseModel):
    """A visual asset written to the working directory."""

    path: Path = Field(..., description="Image file location")
    origin: AssetOrigin = Field(..., description="Remote download or local placeholder")
    source_url: Optional[str] = Field(default=None, description="Download URL for remote assets")


class AssetBatch(BaseModel):
    """Result of one asset acquisition: either remote downloads or the placeholder fallback."""

    kind: Literal["remote", "fallback"] = Field(..., description="Which branch produced the assets")
    assets: list[AssetRef] = Field(default_factory=list, description="Assets in display order")

    @property
    def fell_back(self) -> bool:
        return self.kind == "fallback"


# ============================================================================
# Timing Models
# ============================================================================


class TimeSlice(BaseModel):
    """A contiguous interval [start, end) assigned to one asset or cue."""

    index: int = Field(..., ge=0, description="Zero-based slice position")
    start: float = Field(..., ge=0.0, description="Start time in seconds")
    end: float = Field(..., description="End time in seconds")

    @model_validator(mode="after")
    def end_after_start(self) -> "TimeSlice":
        if self.end <= self.start:
            raise ValueError(f"slice {self.index} ends at {self.end} before it starts at {self.start}")
        return self

    @property
    def duration(self) -> float:
        return self.end - self.start


class SubtitleCue(BaseModel):
    """A single subtitle entry."""

    index: int = Field(..., ge=1, description="One-based cue number")
    start: float = Field(..., ge=0.0, description="Start time in seconds")
    end: float = Field(..., description="End time in seconds")
    text: str = Field(..., description="Trimmed cue text")

    @field_validator("text")
    @classmethod
    def text_trimmed(cls, value: str) -> str:
        if not value or value != value.strip():
            raise ValueError("cue text must be non-empty and trimmed")
        return value

    @model_validator(mode="after")
    def end_after_start(self) -> "SubtitleCue":
        if self.end <= self.start:
            raise ValueError(f"cue {self.index} ends at {self.end} before it starts at {self.start}")
        return self


# ============================================================================
# Publishing Models
# ============================================================================


class UploadMetadata(BaseModel):
    """Metadata sent with the video upload."""

    title: str = Field(..., max_length=100, description="Video title (YouTube limit: 100 chars)")
    description: str = Field(default="", description="Video description")
    tags: list[str] = Field(default_factory=list, description="Video tags")
    category_id: str = Field(default="28", description="YouTube category ID")
    privacy_status: str = Field(default="public", description="public, unlisted or private")
    made_for_kids: bool = Field(default=False, description="COPPA made-for-kids flag")


class PublishResult(BaseModel):
    """Identifiers returned by the publishing service."""

    video_id: str = Field(..., description="Platform video ID")
    video_url: str = Field(..., description="Watch URL")
    short_url: str = Field(..., description="Shorts URL")


# ============================================================================
# Pipeline Result Models
# ============================================================================


class PipelineArtifacts(BaseModel):
    """Complete artifact set of a successful run."""

    video: Path
    thumbnail: Path
    audio: Path
    subtitles: Path


class PipelineResult(BaseModel):
    """Terminal outcome of one pipeline run."""

    run_id: str = Field(..., description="Run identifier")
    success: bool = Field(..., description="True when the run reached PUBLISHED")
    final_stage: PipelineStage = Field(..., description="Last state of the run")
    work_dir: Path = Field(..., description="Working directory holding the run's files")
    title: Optional[str] = Field(default=None, description="Generated title, if content was generated")
    artifacts: Optional[PipelineArtifacts] = Field(default=None, description="All artifact paths (success only)")
    publish: Optional[PublishResult] = Field(default=None, description="Upload identifiers (success only)")
    failure_reason: Optional[str] = Field(default=None, description="Human-readable failure reason")
    failed_stage: Optional[PipelineStage] = Field(default=None, description="Stage that was running when the run failed")
    partial_artifacts: dict[str, Path] = Field(
        default_factory=dict, description="Files produced before a failure, kept for inspection"
    )
    asset_fallback_used: bool = Field(default=False, description="True when placeholder images were used")

    @model_validator(mode="after")
    def check_terminal_shape(self) -> "PipelineResult":
        if self.success:
            if self.artifacts is None or self.publish is None:
                raise ValueError("a successful result needs the full artifact set and publish result")
            if self.failure_reason is not None:
                raise ValueError("a successful result cannot carry a failure reason")
        else:
            if not self.failure_reason:
                raise ValueError("a failed result needs a failure reason")
            if self.artifacts is not None:
                raise ValueError("a failed result cannot carry the full artifact set")
        return self
