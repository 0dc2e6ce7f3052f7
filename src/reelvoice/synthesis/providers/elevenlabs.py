"""ElevenLabs text-to-speech provider."""

from __future__ import annotations

import os
from pathlib import Path

import httpx

from reelvoice.models.config import SynthesisConfig
from reelvoice.synthesis.errors import ProviderError
from reelvoice.synthesis.providers.base import stream_audio
from reelvoice.utils.progress import log_step

DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"  # "Rachel"


class ElevenLabsSpeechProvider:
    """Speech via ``POST /text-to-speech/{voice_id}``."""

    name = "elevenlabs"

    def __init__(
        self,
        config: SynthesisConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or SynthesisConfig()
        self._client = client

    @property
    def max_chars(self) -> int | None:
        return self.config.elevenlabs_max_chars

    async def synthesize(self, text: str, voice_id: str, output_path: Path) -> Path:
        api_key = os.environ.get("ELEVENLABS_API_KEY")
        if not api_key:
            raise ProviderError(self.name, None, "ELEVENLABS_API_KEY not set")

        voice = voice_id or DEFAULT_VOICE_ID
        log_step("TTS", f"Generating speech with ElevenLabs (voice {voice}, {len(text)} chars)")
        return await stream_audio(
            self.name,
            f"{self.config.elevenlabs_base_url.rstrip('/')}/text-to-speech/{voice}",
            headers={
                "xi-api-key": api_key,
                "Content-Type": "application/json",
                "Accept": "audio/mpeg",
            },
            payload={
                "text": text,
                "model_id": self.config.elevenlabs_model,
                "voice_settings": {
                    "stability": self.config.elevenlabs_stability,
                    "similarity_boost": self.config.elevenlabs_similarity_boost,
                },
            },
            output_path=output_path,
            timeout=self.config.timeout_seconds,
            client=self._client,
        )
