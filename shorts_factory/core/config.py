"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via environment variables or a .env file.
    Credentials are optional at load time; the pipeline checks them with
    ``missing_required()`` when it is constructed.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    app_name: str = Field(default="Shorts Factory", description="Application name")
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_dir: Optional[str] = Field(
        default="logs",
        description="Directory for combined.log and error.log (unset to log to the console only)",
    )
    output_dir: str = Field(default="output", description="Working directory for run artifacts")
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for title and stock photo selection (unset for a fresh choice every run)",
    )

    # ========================================================================
    # Script Generation (LLM)
    # ========================================================================
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI model name")
    content_topic: str = Field(
        default="construction and building maintenance tips",
        description="Subject area the generated titles and scripts cover",
    )
    content_language: str = Field(default="Persian", description="Language of titles and script")
    title_candidates: int = Field(default=20, description="Number of candidate titles to request")
    script_length_seconds: str = Field(default="30-45", description="Spoken length hint given to the LLM")

    # ========================================================================
    # TTS (Text-to-Speech) Settings
    # ========================================================================
    elevenlabs_api_key: Optional[str] = Field(default=None, description="ElevenLabs API key")
    elevenlabs_voice_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEFAULT_VOICE_ID", "ELEVENLABS_VOICE_ID"),
        description="ElevenLabs voice ID used for narration",
    )
    elevenlabs_model_id: str = Field(default="eleven_multilingual_v2", description="ElevenLabs model ID")
    elevenlabs_stability: float = Field(default=0.5, description="ElevenLabs voice stability")
    elevenlabs_similarity_boost: float = Field(default=0.5, description="ElevenLabs similarity boost")
    tts_timeout_seconds: int = Field(default=60, description="Timeout for one TTS request")

    # ========================================================================
    # Stock Photo Settings
    # ========================================================================
    pexels_api_key: Optional[str] = Field(default=None, description="Pexels API key")
    asset_query_prefix: str = Field(
        default="construction",
        description="Word prepended to every key point when searching for stock photos",
    )
    max_assets: int = Field(default=5, ge=1, le=5, description="Upper bound on images per video, 1 to 5 (default: 5)")
    pexels_per_page: int = Field(default=5, description="Search results requested per key point")
    asset_timeout_seconds: int = Field(default=30, description="Timeout for one search or download")
    placeholder_image_path: Optional[str] = Field(
        default="placeholder.jpg",
        description="Image copied in place of missing stock photos, if the file exists",
    )
    placeholder_color: str = Field(default="#333333", description="Fill colour of generated placeholders")

    # ========================================================================
    # Video Composition
    # ========================================================================
    video_width: int = Field(default=1080, description="Video output width in pixels (vertical format)")
    video_height: int = Field(default=1920, description="Video output height in pixels (vertical format)")
    video_fps: int = Field(default=30, description="Output frame rate")
    video_duration_seconds: float = Field(default=35.0, gt=0, allow_inf_nan=False, description="Total video duration in seconds")
    match_narration_duration: bool = Field(
        default=False,
        description="Use the narration file's length as the total duration instead of video_duration_seconds",
    )
    ffmpeg_binary: str = Field(default="ffmpeg", description="ffmpeg executable name or path")
    ffmpeg_timeout_seconds: int = Field(default=600, description="Maximum seconds one ffmpeg run may take")

    # ========================================================================
    # Thumbnail Settings
    # ========================================================================
    thumbnail_tagline: str = Field(default="ترفندهای عمرانی", description="Accent line under the title")
    thumbnail_background: str = Field(default="#FF6B35", description="Thumbnail background colour")
    thumbnail_accent: str = Field(default="#FFD700", description="Tagline colour")
    text_direction: str = Field(default="rtl", description="Script direction for overlay text: 'ltr' or 'rtl'")
    font_path: Optional[str] = Field(
        default=None,
        description="TrueType font for thumbnails and placeholders (falls back to common system fonts)",
    )

    # ========================================================================
    # YouTube Upload Settings
    # ========================================================================
    youtube_client_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("YT_CLIENT_ID", "YOUTUBE_CLIENT_ID"), description="OAuth client ID"
    )
    youtube_client_secret: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("YT_CLIENT_SECRET", "YOUTUBE_CLIENT_SECRET"), description="OAuth client secret"
    )
    youtube_refresh_token: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("YT_REFRESH_TOKEN", "YOUTUBE_REFRESH_TOKEN"), description="OAuth refresh token"
    )
    youtube_token_file: Optional[str] = Field(
        default=None,
        description="Authorized-user token JSON, used when no refresh token is configured",
    )
    youtube_api_scopes: list[str] = Field(
        default=["https://www.googleapis.com/auth/youtube.upload"],
        description="YouTube API scopes",
    )
    youtube_category_id: str = Field(default="28", description="YouTube category ID (28: Science & Technology)")
    youtube_privacy_status: str = Field(default="public", description="public, unlisted or private")
    youtube_tags: list[str] = Field(
        default=["ترفندهای عمرانی", "ساختمان", "آموزش", "construction", "tips"],
        description="Tags attached to every upload",
    )
    youtube_hashtags: list[str] = Field(
        default=["#ترفندهای_عمرانی", "#ساختمان", "#آموزش"],
        description="Hashtags appended to the description",
    )
    upload_max_retries: int = Field(default=3, description="Upload attempts before giving up")

    # ========================================================================
    # Run Records
    # ========================================================================
    run_records_path: str = Field(default="storage/runs", description="Directory for run result JSON files")

    def has_publish_credentials(self) -> bool:
        """Return True when either OAuth refresh credentials or a token file are usable."""
        if self.youtube_client_id and self.youtube_client_secret and self.youtube_refresh_token:
            return True
        return bool(self.youtube_token_file) and Path(self.youtube_token_file).exists()

    def missing_required(self) -> list[str]:
        """
        List the environment variable names of required options that are not set.

        Returns:
            Names in a stable order; empty when the configuration is complete
        """
        missing = []
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.elevenlabs_api_key:
            missing.append("ELEVENLABS_API_KEY")
        if not self.elevenlabs_voice_id:
            missing.append("DEFAULT_VOICE_ID")
        if not self.pexels_api_key:
            missing.append("PEXELS_API_KEY")
        if not self.has_publish_credentials():
            missing.append("YT_CLIENT_ID/YT_CLIENT_SECRET/YT_REFRESH_TOKEN (or YOUTUBE_TOKEN_FILE)")
        return missing


# Global settings instance
settings = Settings()
