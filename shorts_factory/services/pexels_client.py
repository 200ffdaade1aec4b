"""Pexels Client - stock photo search and download."""

from pathlib import Path
from typing import Any

import requests

from shorts_factory.core.config import Settings
from shorts_factory.core.exceptions import ConfigurationError, ProviderUnavailable

PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"


class PexelsClient:
    """Searches Pexels for portrait photos and downloads them."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the Pexels client.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.api_key = settings.pexels_api_key
        self.timeout = settings.asset_timeout_seconds

        if not self.api_key:
            raise ConfigurationError("PEXELS_API_KEY not configured. Set PEXELS_API_KEY in .env file.")

    def search(self, term: str) -> list[str]:
        """
        Search for portrait photos matching a term.

        Args:
            term: Search query

        Returns:
            Candidate image URLs (the ``medium`` rendition), possibly empty

        Raises:
            ProviderUnavailable: On network errors, non-200 responses or unreadable payloads
        """
        params = {
            "query": term,
            "per_page": self.settings.pexels_per_page,
            "orientation": "portrait",
        }
        headers = {"Authorization": self.api_key}

        try:
            response = requests.get(PEXELS_SEARCH_URL, headers=headers, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ProviderUnavailable(f"Network error calling Pexels API: {e}") from e

        if response.status_code == 429:
            raise ProviderUnavailable("Pexels rate limit exceeded (429)")
        if response.status_code != 200:
            raise ProviderUnavailable(f"Pexels API returned status {response.status_code}: {response.text[:200]}")

        try:
            photos = response.json().get("photos", [])
            urls = [photo["src"]["medium"] for photo in photos]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ProviderUnavailable(f"Unexpected Pexels response: {e}") from e

        self.logger.debug(f"Pexels returned {len(urls)} photos for '{term}'")
        return urls

    def download(self, url: str, output_path: Path) -> Path:
        """
        Stream an image to disk.

        Args:
            url: Image URL
            output_path: Destination file

        Returns:
            output_path

        Raises:
            ProviderUnavailable: If the download fails
        """
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as response:
                if response.status_code != 200:
                    raise ProviderUnavailable(f"Image download returned status {response.status_code}: {url}")
                output_path.parent.mkdir(parents=True, exist_ok=True)
                with open(output_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=65_536):
                        if chunk:
                            f.write(chunk)
        except requests.exceptions.RequestException as e:
            raise ProviderUnavailable(f"Network error downloading {url}: {e}") from e

        return output_path
