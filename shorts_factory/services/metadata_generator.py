"""Metadata Generator - builds the upload title, description and tags."""

from shorts_factory.core.config import Settings
from shorts_factory.models.schemas import ContentPackage, UploadMetadata

YOUTUBE_TITLE_LIMIT = 100


def build_upload_metadata(content: ContentPackage, settings: Settings) -> UploadMetadata:
    """
    Build upload metadata for a run.

    The description is the narration script followed by a blank line and the
    configured hashtags. Titles longer than YouTube's limit are cut at a word
    boundary where possible.

    Args:
        content: Generated content
        settings: Application settings

    Returns:
        UploadMetadata ready for the uploader
    """
    description = content.script.strip()
    hashtags = " ".join(settings.youtube_hashtags)
    if hashtags:
        description = f"{description}\n\n{hashtags}"

    return UploadMetadata(
        title=truncate_title(content.title),
        description=description,
        tags=list(settings.youtube_tags),
        category_id=settings.youtube_category_id,
        privacy_status=settings.youtube_privacy_status,
        made_for_kids=False,
    )


def truncate_title(title: str, limit: int = YOUTUBE_TITLE_LIMIT) -> str:
    """Trim a title to *limit* characters, preferring to cut at a space."""
    title = title.strip()
    if len(title) <= limit:
        return title
    cut = title[:limit]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip()
