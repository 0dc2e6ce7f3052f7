"""OpenAI text-to-speech provider."""

from __future__ import annotations

import os
from pathlib import Path

import httpx

from reelvoice.models.config import SynthesisConfig
from reelvoice.synthesis.errors import ProviderError
from reelvoice.synthesis.providers.base import stream_audio
from reelvoice.utils.progress import log_step, log_warning

VALID_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")


class OpenAISpeechProvider:
    """Speech via ``POST /audio/speech``."""

    name = "openai"

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
        return self.config.openai_max_chars

    async def synthesize(self, text: str, voice_id: str, output_path: Path) -> Path:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ProviderError(self.name, None, "OPENAI_API_KEY not set")

        voice = voice_id
        if voice not in VALID_VOICES:
            log_warning(f"Unknown OpenAI voice {voice_id!r}, using 'alloy'")
            voice = "alloy"

        log_step("TTS", f"Generating speech with OpenAI ({voice}, {len(text)} chars)")
        return await stream_audio(
            self.name,
            f"{self.config.openai_base_url.rstrip('/')}/audio/speech",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            payload={
                "model": self.config.openai_model,
                "input": text,
                "voice": voice,
                "response_format": self.config.output_format,
            },
            output_path=output_path,
            timeout=self.config.timeout_seconds,
            client=self._client,
        )
