"""Gemini text-to-speech client."""

import base64
import logging
import wave
from pathlib import Path
from typing import Optional

from google import genai
from google.genai import types

from ..config import config
from ..errors import GatewayError

logger = logging.getLogger(__name__)

SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # 16-bit PCM


class SpeechClient:
    """Narrates scene text with a prebuilt Gemini voice."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        voice_name: Optional[str] = None,
    ) -> None:
        self._api_key = api_key or config.gemini_api_key
        if not self._api_key:
            raise ValueError("GEMINI_API_KEY not set")

        self._client = genai.Client(api_key=self._api_key)
        self._model = model or config.tts_model
        self._voice_name = voice_name or config.voice_name

    @property
    def model(self) -> str:
        return self._model

    def synthesize(self, text: str, voice_description: str = "") -> bytes:
        """Return raw 16-bit mono PCM at 24 kHz for ``text``.

        The prebuilt voice is fixed; ``voice_description`` only steers delivery.
        """
        contents = text
        if voice_description:
            contents = f"Read aloud in this voice ({voice_description}):\n{text}"

        logger.info(f"Synthesizing speech with {self._model} ({len(text)} chars)")
        response = self._client.models.generate_content(
            model=self._model,
            contents=contents,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(
                            voice_name=self._voice_name
                        )
                    )
                ),
            ),
        )

        data = None
        if response.candidates:
            content = response.candidates[0].content
            parts = content.parts if content and content.parts else []
            if parts and parts[0].inline_data:
                data = parts[0].inline_data.data

        if not data:
            raise GatewayError("No audio data returned")
        if isinstance(data, str):
            data = base64.b64decode(data)
        return data


def write_wav(pcm: bytes, output_path: Path, sample_rate: int = SAMPLE_RATE) -> Path:
    """Wrap raw PCM in a WAV container."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(output_path), "wb") as wf:
        wf.setnchannels(CHANNELS)
        wf.setsampwidth(SAMPLE_WIDTH)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return output_path
