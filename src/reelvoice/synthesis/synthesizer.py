"""Speech synthesizer adapter: word budget, provider limits, ordered fallback."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from reelvoice.models.audio import AudioAsset, VoiceSpec
from reelvoice.models.config import NarrationConfig, SynthesisConfig
from reelvoice.narration.distill import truncate_at_sentence_boundary, word_count
from reelvoice.synthesis.budget import word_budget
from reelvoice.synthesis.errors import ProviderError, SynthesisFailedError
from reelvoice.synthesis.providers.base import SpeechProvider
from reelvoice.utils.progress import log_fallback, log_step, log_success, log_warning


def default_providers(config: SynthesisConfig) -> dict[str, SpeechProvider]:
    from reelvoice.synthesis.providers.elevenlabs import ElevenLabsSpeechProvider
    from reelvoice.synthesis.providers.openai import OpenAISpeechProvider

    return {
        "openai": OpenAISpeechProvider(config),
        "elevenlabs": ElevenLabsSpeechProvider(config),
    }


def enforce_char_limit(text: str, max_chars: int | None) -> str:
    """Cut to the provider's hard character ceiling."""
    if max_chars is None or len(text) <= max_chars:
        return text
    return text[:max_chars]


class SpeechSynthesizer:
    """Converts a script to an audio asset on one provider, or on the first that works."""

    def __init__(
        self,
        config: SynthesisConfig | None = None,
        narration: NarrationConfig | None = None,
        *,
        providers: dict[str, SpeechProvider] | None = None,
    ) -> None:
        self.config = config or SynthesisConfig()
        self.narration = narration or NarrationConfig()
        self.providers = providers if providers is not None else default_providers(self.config)

    def provider_for(self, voice: VoiceSpec) -> SpeechProvider:
        try:
            return self.providers[voice.provider]
        except KeyError:
            raise ProviderError(voice.provider, None, "provider not registered") from None

    def prepare_text(
        self,
        script: str,
        voice: VoiceSpec,
        target_duration: float,
        max_chars: int | None = None,
    ) -> str:
        """Fit the script to the word budget, then to the provider's character ceiling."""
        budget = word_budget(target_duration, voice, self.narration)
        words = word_count(script)
        text = script
        if words > budget:
            log_step(
                "TTS",
                f"Script has {words} words, truncating to {budget} for {target_duration:.1f}s",
            )
            text = truncate_at_sentence_boundary(script, budget)

        if max_chars is None:
            max_chars = self.provider_for(voice).max_chars
        limited = enforce_char_limit(text, max_chars)
        if len(limited) < len(text):
            log_warning(
                f"Text exceeds {voice.provider} limit of {max_chars} chars "
                f"({len(text)}); truncated."
            )
        return limited

    async def synthesize(
        self,
        script: str,
        voice: VoiceSpec,
        target_duration: float,
        output_path: Path,
        *,
        max_chars: int | None = None,
    ) -> AudioAsset:
        """Synthesize on ``voice``'s provider. Raises ProviderError; never retries."""
        provider = self.provider_for(voice)
        text = self.prepare_text(script, voice, target_duration, max_chars)
        if not text.strip():
            raise ProviderError(provider.name, None, "nothing to synthesize (empty script)")

        path = await provider.synthesize(text, voice.voice_id, Path(output_path))
        log_success(f"Speech saved: {path.name}")
        return AudioAsset(path=path)

    async def synthesize_first_available(
        self,
        script: str,
        target_duration: float,
        output_path: Path,
        voices: Sequence[VoiceSpec] | None = None,
    ) -> tuple[AudioAsset, VoiceSpec]:
        """Try each voice in order; return the first asset produced."""
        errors: list[ProviderError] = []
        for voice in voices or self.config.voices:
            try:
                asset = await self.synthesize(script, voice, target_duration, output_path)
            except ProviderError as e:
                log_fallback("TTS", f"{voice.provider}/{voice.voice_id} failed: {e}", "next voice")
                errors.append(e)
                continue
            return asset, voice
        raise SynthesisFailedError(errors)
