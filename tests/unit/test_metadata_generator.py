"""Tests for upload metadata construction."""

from shorts_factory.models.schemas import ContentPackage
from shorts_factory.services.metadata_generator import build_upload_metadata, truncate_title


def test_description_is_script_plus_hashtags(settings):
    content = ContentPackage(title="Title", script="Line one. Line two.")

    metadata = build_upload_metadata(content, settings)

    assert metadata.description == "Line one. Line two.\n\n#ترفندهای_عمرانی #ساختمان #آموزش"
    assert metadata.tags == ["ترفندهای عمرانی", "ساختمان", "آموزش", "construction", "tips"]
    assert metadata.category_id == "28"
    assert metadata.privacy_status == "public"
    assert metadata.made_for_kids is False


def test_no_hashtags_leaves_script_only(settings):
    settings.youtube_hashtags = []
    metadata = build_upload_metadata(ContentPackage(title="T", script="Only script."), settings)
    assert metadata.description == "Only script."


def test_long_title_is_truncated(settings):
    title = "word " * 30
    metadata = build_upload_metadata(ContentPackage(title=title, script="s."), settings)

    assert len(metadata.title) <= 100
    assert not metadata.title.endswith(" ")


def test_truncate_title_without_spaces():
    assert truncate_title("x" * 150) == "x" * 100
    assert truncate_title("  short  ") == "short"
