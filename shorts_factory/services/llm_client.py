"""LLM Client - generates the title, narration script and key points with OpenAI."""

import json
import random
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from shorts_factory.core.config import Settings
from shorts_factory.core.exceptions import ConfigurationError, GenerationError
from shorts_factory.models.schemas import ContentPackage


class ScriptGenerator:
    """Produces one ContentPackage per run from two JSON-mode chat completions."""

    def __init__(self, settings: Settings, logger: Any, rng: Optional[random.Random] = None):
        """
        Initialize script generator.

        Args:
            settings: Application settings
            logger: Logger instance
            rng: Random source used to pick one of the candidate titles
        """
        self.settings = settings
        self.logger = logger
        self.rng = rng or random.Random(settings.random_seed)
        self._client = None

        if not settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY not configured. Set OPENAI_API_KEY in .env file.")

    def _get_client(self) -> OpenAI:
        """Get or create OpenAI client."""
        if self._client is None:
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        return self._client

    def generate_titles_and_script(self) -> ContentPackage:
        """
        Generate candidate titles, pick one at random, then write its script.

        Returns:
            ContentPackage with title, script and key points

        Raises:
            GenerationError: If the API call fails or the response is unusable
        """
        self.logger.info("Generating titles and script...")

        titles = self.generate_titles()
        title = self.rng.choice(titles)
        self.logger.info(f"Selected title: {title}")

        data = self._complete_json(self._script_prompt(title))
        script = data.get("script") if isinstance(data, dict) else None
        key_points = data.get("key_points", []) if isinstance(data, dict) else []

        if not isinstance(script, str) or not script.strip():
            raise GenerationError("Script response has no 'script' text")
        if not isinstance(key_points, list):
            raise GenerationError("Script response field 'key_points' is not a list")

        content = ContentPackage(
            title=title,
            script=script.strip(),
            key_points=[str(point) for point in key_points],
        )
        self.logger.info(f"Generated script ({len(content.script)} chars, {len(content.key_points)} key points)")
        return content

    def generate_titles(self) -> list[str]:
        """
        Request the candidate titles.

        Returns:
            Non-empty list of titles

        Raises:
            GenerationError: If no usable title is returned
        """
        data = self._complete_json(self._titles_prompt())

        # JSON mode returns an object; accept a bare array too
        if isinstance(data, dict):
            data = data.get("titles", [])
        if not isinstance(data, list):
            raise GenerationError("Titles response is not a list")

        titles = [str(t).strip() for t in data if isinstance(t, str) and t.strip()]
        if not titles:
            raise GenerationError("Titles response contained no titles")

        self.logger.debug(f"Received {len(titles)} candidate titles")
        return titles

    def _titles_prompt(self) -> str:
        s = self.settings
        return (
            f"Generate {s.title_candidates} {s.content_language} titles for {s.content_topic} YouTube Shorts. "
            "Each title should be catchy, informative, and under 60 characters. "
            "Focus on practical tips, maintenance advice, and safety awareness (not dangerous procedures). "
            'Return as JSON: {"titles": ["...", "..."]}'
        )

    def _script_prompt(self, title: str) -> str:
        s = self.settings
        return (
            f"Write a {s.script_length_seconds} second YouTube Shorts script in {s.content_language} "
            f'for the title: "{title}". The script should be informative, engaging, and focus on '
            f"practical {s.content_topic} or safety awareness. "
            "Avoid dangerous instructions or structural procedures. "
            'Return as JSON with "script" and "key_points" fields, where "key_points" is a list of '
            "short English search terms describing what is shown on screen."
        )

    def _complete_json(self, prompt: str) -> Any:
        """Run one JSON-mode completion and parse the reply."""
        try:
            response = self._get_client().chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {
                        "role": "system",
                        "content": "You write short, accurate scripts for vertical educational videos. Reply with JSON only.",
                    },
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=0.8,
            )
            content = response.choices[0].message.content
        except OpenAIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e

        if not content:
            raise GenerationError("OpenAI returned an empty response")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            self.logger.debug(f"Unparsable model output: {content[:500]}")
            raise GenerationError(f"Model returned invalid JSON: {e}") from e
