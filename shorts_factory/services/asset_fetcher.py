"""Asset Fetcher - stock photos per key point, with a local placeholder fallback.

A missing decorative image must never stop a run: individual failed topics
are skipped, and if nothing at all could be downloaded the batch is replaced
by generated placeholder images of the video's frame size.
"""

import random
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional

from PIL import Image, ImageDraw, ImageOps

from shorts_factory.core.config import Settings
from shorts_factory.models.schemas import AssetBatch, AssetOrigin, AssetRef
from shorts_factory.services.pexels_client import PexelsClient
from shorts_factory.utils.error_handler import get_fallback_suggestion
from shorts_factory.utils.image_utils import load_font, parse_color, text_direction_kwargs
from shorts_factory.utils.text_utils import wrap_words


class AssetFetcher:
    """Acquires a bounded number of b-roll images for a run."""

    def __init__(
        self,
        settings: Settings,
        logger: Any,
        provider: Optional[PexelsClient] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the asset fetcher.

        Args:
            settings: Application settings
            logger: Logger instance
            provider: Stock photo client (created from settings when omitted)
            rng: Random source used to pick among search results
        """
        self.settings = settings
        self.logger = logger
        self.provider = provider or PexelsClient(settings, logger)
        self.rng = rng or random.Random(settings.random_seed)
        self.width = settings.video_width
        self.height = settings.video_height

    def fetch_assets(self, topics: Sequence[str], max_count: int, destination_dir: Path) -> list[AssetRef]:
        """
        Fetch up to ``max_count`` images, one per topic in order.

        Never raises for a failed topic and never returns an empty list
        unless ``max_count`` is 0.

        Args:
            topics: Topical search terms (key points)
            max_count: Maximum number of assets
            destination_dir: Directory the image files are written to

        Returns:
            Assets in display order
        """
        return self.fetch_batch(topics, max_count, destination_dir).assets

    def fetch_batch(self, topics: Sequence[str], max_count: int, destination_dir: Path) -> AssetBatch:
        """
        Same as ``fetch_assets`` but reports which branch produced the assets.

        Returns:
            ``AssetBatch(kind="remote")`` with the downloaded images, or
            ``AssetBatch(kind="fallback")`` with ``max_count`` placeholders
        """
        if max_count <= 0:
            return AssetBatch(kind="remote", assets=[])

        destination_dir = Path(destination_dir)
        destination_dir.mkdir(parents=True, exist_ok=True)

        self.logger.info(f"Downloading b-roll images for {min(len(topics), max_count)} key points...")
        assets: list[AssetRef] = []
        for i, topic in enumerate(list(topics)[:max_count]):
            asset = self._fetch_one(topic, destination_dir / f"broll_{i}.jpg")
            if asset:
                assets.append(asset)
                self.logger.info(f"Downloaded image {i + 1}: {asset.source_url}")

        if assets:
            return AssetBatch(kind="remote", assets=assets)

        self.logger.warning("Using placeholder images due to download failure")
        labels = list(topics)[:max_count]
        placeholders = [
            self._create_placeholder(destination_dir / f"broll_{i}.jpg", labels[i] if i < len(labels) else "")
            for i in range(max_count)
        ]
        return AssetBatch(kind="fallback", assets=placeholders)

    def _fetch_one(self, topic: str, output_path: Path) -> Optional[AssetRef]:
        """Search and download one image; return None when the topic yields nothing usable."""
        query = f"{self.settings.asset_query_prefix} {topic}".strip()
        try:
            urls = self.provider.search(query)
            if not urls:
                self.logger.warning(f"No stock photos found for '{query}'")
                return None

            url = self.rng.choice(urls)
            self.provider.download(url, output_path)
            self._verify_image(output_path)
            return AssetRef(path=output_path, origin=AssetOrigin.REMOTE, source_url=url)

        except Exception as e:
            # One topic's failure only drops that topic
            self.logger.warning(f"Skipping stock photo for '{query}': {type(e).__name__}: {e}")
            suggestion = get_fallback_suggestion("Stock Images", e)
            if suggestion:
                self.logger.debug(suggestion)
            output_path.unlink(missing_ok=True)
            return None

    def _verify_image(self, path: Path) -> None:
        """Raise if the downloaded file is not a readable image."""
        with Image.open(path) as img:
            img.verify()

    def _create_placeholder(self, output_path: Path, label: str = "") -> AssetRef:
        """
        Create a placeholder image at the video frame size.

        Uses the configured placeholder image, cropped and scaled to the frame,
        when it exists and is readable; otherwise draws a flat-colour canvas
        with the topic as a caption.
        """
        configured = self.settings.placeholder_image_path
        if configured and Path(configured).is_file():
            try:
                with Image.open(configured) as source:
                    fitted = ImageOps.fit(source.convert("RGB"), (self.width, self.height))
                fitted.save(output_path, "JPEG", quality=90)
                return AssetRef(path=output_path, origin=AssetOrigin.PLACEHOLDER)
            except (OSError, ValueError, SyntaxError) as e:
                self.logger.warning(f"Configured placeholder {configured} is unusable, drawing one instead: {e}")

        background = parse_color(self.settings.placeholder_color, (51, 51, 51))
        img = Image.new("RGB", (self.width, self.height), color=background)

        if label:
            draw = ImageDraw.Draw(img)
            font = load_font(self.settings.font_path, 56)
            direction = text_direction_kwargs(self.settings.text_direction)
            text = "\n".join(wrap_words(label, 24))
            bbox = draw.multiline_textbbox((0, 0), text, font=font, align="center", **direction)
            x = (self.width - (bbox[2] - bbox[0])) // 2
            y = (self.height - (bbox[3] - bbox[1])) // 2
            draw.multiline_text((x, y), text, fill=(220, 220, 220), font=font, align="center", **direction)

        img.save(output_path, "JPEG", quality=80)
        self.logger.debug(f"Generated placeholder: {output_path} ({self.width}x{self.height})")
        return AssetRef(path=output_path, origin=AssetOrigin.PLACEHOLDER)
