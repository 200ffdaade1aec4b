"""TTS (Text-to-Speech) client - ElevenLabs narration synthesis."""

from pathlib import Path
from typing import Any

import requests

from shorts_factory.core.config import Settings
from shorts_factory.core.exceptions import ConfigurationError, SynthesisError

ELEVENLABS_TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"


class NarrationSynthesizer:
    """Converts the script to an MP3 narration track."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize narration synthesizer.

        Args:
            settings: Application settings
            logger: Logger instance

        Raises:
            ConfigurationError: If the API key or voice ID is missing
        """
        self.settings = settings
        self.logger = logger

        if not settings.elevenlabs_api_key:
            raise ConfigurationError("ElevenLabs API key not configured. Set ELEVENLABS_API_KEY in .env file.")
        if not settings.elevenlabs_voice_id:
            raise ConfigurationError("ElevenLabs voice ID not configured. Set DEFAULT_VOICE_ID in .env file.")

        self.voice_id = settings.elevenlabs_voice_id

    def synthesize(self, text: str, output_path: Path) -> Path:
        """
        Generate speech from text and save it to a file.

        Args:
            text: Text to convert to speech
            output_path: Path to save the MP3 file

        Returns:
            output_path

        Raises:
            SynthesisError: On empty text, network errors, non-200 responses or an empty body
        """
        if not text or not text.strip():
            raise SynthesisError("Text cannot be empty")

        self.logger.info(f"Generating speech for {len(text)} characters...")

        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.settings.elevenlabs_api_key,
        }
        data = {
            "text": text,
            "model_id": self.settings.elevenlabs_model_id,
            "voice_settings": {
                "stability": self.settings.elevenlabs_stability,
                "similarity_boost": self.settings.elevenlabs_similarity_boost,
            },
        }

        try:
            response = requests.post(
                ELEVENLABS_TTS_URL.format(voice_id=self.voice_id),
                json=data,
                headers=headers,
                timeout=self.settings.tts_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise SynthesisError(f"Network error calling ElevenLabs API: {e}") from e

        if response.status_code != 200:
            raise SynthesisError(f"ElevenLabs API returned status {response.status_code}: {response.text[:200]}")
        if not response.content:
            raise SynthesisError("ElevenLabs API returned an empty audio body")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(response.content)

        self.logger.info(f"Speech generated: {output_path}")
        return output_path
