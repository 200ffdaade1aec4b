"""YouTube Uploader - uploads videos and thumbnails via Data API v3."""

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload

from shorts_factory.core.config import Settings
from shorts_factory.core.exceptions import ConfigurationError, PublishError
from shorts_factory.models.schemas import PublishResult, UploadMetadata

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

T = TypeVar("T")


class YouTubeUploader:
    """Publishes a finished short to YouTube."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize YouTube uploader.

        Args:
            settings: Application settings
            logger: Logger instance

        Raises:
            ConfigurationError: If neither refresh credentials nor a token file are configured
        """
        self.settings = settings
        self.logger = logger
        self.max_retries = max(1, settings.upload_max_retries)
        self.retry_delays = [2, 5, 10]  # seconds
        self._youtube_service = None

        if not settings.has_publish_credentials():
            raise ConfigurationError(
                "YouTube credentials not configured. Set YT_CLIENT_ID, YT_CLIENT_SECRET and "
                "YT_REFRESH_TOKEN (or YOUTUBE_TOKEN_FILE) in .env file."
            )

    def upload(self, video_path: Path, thumbnail_path: Path, metadata: UploadMetadata) -> PublishResult:
        """
        Upload the video, then attach its thumbnail.

        Args:
            video_path: Path to video file
            thumbnail_path: Path to thumbnail image
            metadata: Title, description, tags and status fields

        Returns:
            PublishResult with the video ID, watch URL and Shorts URL

        Raises:
            PublishError: If the video or thumbnail upload fails after all retries
        """
        video_path = Path(video_path)
        thumbnail_path = Path(thumbnail_path)
        if not video_path.exists():
            raise PublishError(f"Video file not found: {video_path}")
        if not thumbnail_path.exists():
            raise PublishError(f"Thumbnail file not found: {thumbnail_path}")

        self.logger.info("=" * 60)
        self.logger.info("Starting YouTube upload")
        self.logger.info(f"Video: {video_path}")
        self.logger.info(f"Title: {metadata.title}")
        self.logger.info(f"Privacy: {metadata.privacy_status}")
        self.logger.info("=" * 60)

        body = {
            "snippet": {
                "title": metadata.title,
                "description": metadata.description,
                "tags": metadata.tags,
                "categoryId": metadata.category_id,
            },
            "status": {
                "privacyStatus": metadata.privacy_status,
                "selfDeclaredMadeForKids": metadata.made_for_kids,
            },
        }

        response = self._with_retries("Video upload", lambda: self._insert_video(video_path, body))
        video_id = response["id"]

        self._with_retries("Thumbnail upload", lambda: self._set_thumbnail(video_id, thumbnail_path))

        result = PublishResult(
            video_id=video_id,
            video_url=f"https://www.youtube.com/watch?v={video_id}",
            short_url=f"https://youtube.com/shorts/{video_id}",
        )

        self.logger.info("=" * 60)
        self.logger.info("YouTube upload complete!")
        self.logger.info(f"Video ID: {result.video_id}")
        self.logger.info(f"Video URL: {result.video_url}")
        self.logger.info(f"Shorts URL: {result.short_url}")
        self.logger.info("=" * 60)
        return result

    def _with_retries(self, label: str, action: Callable[[], T]) -> T:
        """Run *action*, retrying with back-off; raise PublishError after the last attempt."""
        for attempt in range(1, self.max_retries + 1):
            if attempt > 1:
                delay = self.retry_delays[min(attempt - 2, len(self.retry_delays) - 1)]
                self.logger.info(f"Waiting {delay}s before retry attempt {attempt}/{self.max_retries}...")
                time.sleep(delay)
            try:
                return action()
            except Exception as e:
                self.logger.warning(f"{label} attempt {attempt}/{self.max_retries} failed: {e}")
                if attempt == self.max_retries:
                    raise PublishError(f"{label} failed after {self.max_retries} attempts: {e}") from e
        raise PublishError(f"{label} was not attempted")

    def _insert_video(self, video_path: Path, body: dict) -> dict:
        youtube = self._get_youtube_service()
        insert_request = youtube.videos().insert(
            part=",".join(body.keys()),
            body=body,
            media_body=MediaFileUpload(str(video_path), chunksize=-1, resumable=True),
        )
        return self._resumable_upload(insert_request)

    def _set_thumbnail(self, video_id: str, thumbnail_path: Path) -> dict:
        youtube = self._get_youtube_service()
        self.logger.info(f"Setting thumbnail for video {video_id}...")
        return youtube.thumbnails().set(
            videoId=video_id,
            media_body=MediaFileUpload(str(thumbnail_path), mimetype="image/jpeg"),
        ).execute()

    def _get_youtube_service(self):
        """Get authenticated YouTube service."""
        if self._youtube_service:
            return self._youtube_service

        creds = self._load_credentials()
        if not creds.valid:
            self.logger.info("Refreshing YouTube token...")
            creds.refresh(Request())

        self._youtube_service = build("youtube", "v3", credentials=creds, cache_discovery=False)
        return self._youtube_service

    def _load_credentials(self) -> Credentials:
        """Build credentials from the refresh token, or from the authorized-user token file."""
        s = self.settings
        if s.youtube_client_id and s.youtube_client_secret and s.youtube_refresh_token:
            return Credentials(
                token=None,
                refresh_token=s.youtube_refresh_token,
                client_id=s.youtube_client_id,
                client_secret=s.youtube_client_secret,
                token_uri=GOOGLE_TOKEN_URI,
                scopes=s.youtube_api_scopes,
            )

        token_file = Path(s.youtube_token_file)
        self.logger.info(f"Loading YouTube token from: {token_file}")
        return Credentials.from_authorized_user_file(str(token_file), s.youtube_api_scopes)

    def _resumable_upload(self, insert_request) -> dict:
        """
        Execute resumable upload with progress logging.

        Args:
            insert_request: YouTube API insert request

        Returns:
            API response
        """
        response = None
        while response is None:
            status, response = insert_request.next_chunk()
            if response is not None:
                if "id" not in response:
                    raise PublishError(f"Upload failed: {response}")
                self.logger.info(f"Upload successful! Video ID: {response['id']}")
            elif status:
                self.logger.info(f"Upload progress: {int(status.progress() * 100)}%")
        return response
