"""Pillow helpers shared by the thumbnail and placeholder renderers."""

from pathlib import Path
from typing import Optional, Union

from PIL import ImageColor, ImageFont, features

from shorts_factory.core.logging_config import get_logger

logger = get_logger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Tried in order when no font is configured (macOS, Linux, Windows).
_SYSTEM_FONT_PATHS = [
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansArabic-Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]


def load_font(font_path: Optional[str], size: int) -> FontType:
    """
    Load a TrueType font, falling back to system fonts and then Pillow's built-in.

    Args:
        font_path: Preferred .ttf/.ttc file (optional)
        size: Point size

    Returns:
        A font usable with ImageDraw
    """
    candidates = ([font_path] if font_path else []) + _SYSTEM_FONT_PATHS
    for path in candidates:
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError as exc:
                logger.debug(f"Could not load font {path!r}: {exc}")

    # Pillow >= 10.1 supports load_default(size=N)
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        return ImageFont.load_default()


def parse_color(value: str, default: tuple[int, int, int]) -> tuple[int, int, int]:
    """Parse a colour string ("#333333", "orange") to RGB, using *default* when invalid."""
    try:
        return ImageColor.getrgb(value)[:3]
    except ValueError:
        logger.warning(f"Invalid colour {value!r}, using default {default}")
        return default


def text_direction_kwargs(direction: str) -> dict[str, str]:
    """
    Keyword arguments for ``ImageDraw.text`` that select the script direction.

    Right-to-left layout needs Pillow built with libraqm; without it the text
    is drawn in logical order.
    """
    if direction != "rtl":
        return {}
    if features.check_feature("raqm"):
        return {"direction": "rtl"}
    logger.warning("Pillow was built without libraqm; right-to-left text is drawn in logical order")
    return {}
