"""Thumbnail Generator - renders the vertical title card uploaded with the video."""

from pathlib import Path
from typing import Any

from PIL import Image, ImageDraw

from shorts_factory.core.config import Settings
from shorts_factory.core.exceptions import ThumbnailError
from shorts_factory.models.schemas import ContentPackage
from shorts_factory.utils.image_utils import load_font, parse_color, text_direction_kwargs
from shorts_factory.utils.text_utils import wrap_words

# Panel geometry on the 1080x1920 canvas
PANEL_BOX = (50, 600, 1030, 1400)
PANEL_RADIUS = 20
PANEL_FILL = (0, 0, 0, 178)  # 70% black
TITLE_FONT_SIZE = 80
TAGLINE_FONT_SIZE = 40
TITLE_LINE_CHARS = 18
TITLE_MAX_LINES = 6


class ThumbnailGenerator:
    """Generates a 1080x1920 thumbnail: coloured background, dark panel, title and tagline."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize thumbnail generator.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.size = (settings.video_width, settings.video_height)

    def generate(self, content: ContentPackage, output_path: Path) -> Path:
        """
        Render the thumbnail for a run.

        Args:
            content: Generated content (the title is drawn)
            output_path: Destination JPEG path

        Returns:
            output_path

        Raises:
            ThumbnailError: If rendering or saving fails
        """
        self.logger.info("Generating thumbnail...")
        output_path = Path(output_path)

        try:
            img = self._render(content.title)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            img.save(output_path, "JPEG", quality=90)
        except (OSError, ValueError) as e:
            raise ThumbnailError(f"Could not render thumbnail: {e}") from e

        self.logger.info(f"Thumbnail generated: {output_path}")
        return output_path

    def _render(self, title: str) -> Image.Image:
        width, height = self.size
        sx, sy = width / 1080, height / 1920

        background = parse_color(self.settings.thumbnail_background, (255, 107, 53))
        accent = parse_color(self.settings.thumbnail_accent, (255, 215, 0))
        direction = text_direction_kwargs(self.settings.text_direction)

        base = Image.new("RGBA", self.size, background + (255,))

        # Translucent panel is drawn on its own layer and alpha-composited
        overlay = Image.new("RGBA", self.size, (0, 0, 0, 0))
        panel = tuple(int(v * s) for v, s in zip(PANEL_BOX, (sx, sy, sx, sy)))
        ImageDraw.Draw(overlay).rounded_rectangle(panel, radius=PANEL_RADIUS, fill=PANEL_FILL)
        img = Image.alpha_composite(base, overlay).convert("RGB")

        draw = ImageDraw.Draw(img)
        center_x = width // 2

        lines = wrap_words(title, TITLE_LINE_CHARS)[:TITLE_MAX_LINES]
        title_font = load_font(self.settings.font_path, int(TITLE_FONT_SIZE * sx))
        self._draw_centered(draw, "\n".join(lines), (center_x, int(1000 * sy)), title_font, (255, 255, 255), direction)

        tagline = self.settings.thumbnail_tagline
        if tagline:
            tagline_font = load_font(self.settings.font_path, int(TAGLINE_FONT_SIZE * sx))
            self._draw_centered(draw, tagline, (center_x, int(1320 * sy)), tagline_font, accent, direction)

        return img

    @staticmethod
    def _draw_centered(draw: ImageDraw.ImageDraw, text: str, center: tuple[int, int], font, fill, direction: dict) -> None:
        """Draw (possibly multi-line) text centred on a point."""
        left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font, align="center", spacing=20, **direction)
        x = center[0] - (right - left) // 2 - left
        y = center[1] - (bottom - top) // 2 - top
        draw.multiline_text((x, y), text, fill=fill, font=font, align="center", spacing=20, **direction)
