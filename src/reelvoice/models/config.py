"""Configuration models for each engine component.

All sections are frozen: a run reads them, never mutates them.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from reelvoice.models.audio import VoiceSpec


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class NarrationConfig(_Frozen):
    """Word-budget calibration for the narration script."""

    video_duration_seconds: float = Field(default=15.0, gt=0)
    narration_ratio: float = Field(default=0.93, gt=0.0, le=1.0)
    speaking_rates: Mapping[str, float] = Field(
        default_factory=lambda: {"openai_alloy": 2.9}, validate_default=True
    )
    default_speaking_rate: float = Field(default=2.8, gt=0)
    buffer_factor: float = Field(default=0.98, gt=0.0, le=1.0)
    short_buffer_factor: float = Field(default=0.95, gt=0.0, le=1.0)
    long_buffer_factor: float = Field(default=0.99, gt=0.0, le=1.0)
    short_duration_seconds: float = Field(default=10.0, ge=0)
    long_duration_seconds: float = Field(default=30.0, ge=0)
    micro_word_limit: int = Field(default=20, ge=0)
    zone_fraction: float = Field(default=0.25, gt=0.0, le=1.0)

    @field_validator("speaking_rates", mode="after")
    @classmethod
    def _read_only_rates(cls, rates: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType(dict(rates))

    @field_serializer("speaking_rates")
    def _dump_rates(self, rates: Mapping[str, float]) -> dict[str, float]:
        return dict(rates)

    def speaking_rate(self, voice_key: str, provider: str | None = None) -> float:
        """Words per second for a voice key, falling back to the provider, then the default."""
        if voice_key in self.speaking_rates:
            return self.speaking_rates[voice_key]
        if provider and provider in self.speaking_rates:
            return self.speaking_rates[provider]
        return self.default_speaking_rate

    def buffer_for(self, duration_seconds: float) -> float:
        if duration_seconds <= self.short_duration_seconds:
            return self.short_buffer_factor
        if duration_seconds > self.long_duration_seconds:
            return self.long_buffer_factor
        return self.buffer_factor


class SummarizerConfig(_Frozen):
    """Optional language-model summarization ahead of rule-based distillation."""

    enabled: bool = True
    model: str = "claude-sonnet-4-6"
    temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    max_input_chars: int = Field(default=4000, ge=100)
    max_tokens: int = Field(default=1024, ge=64)
    timeout_seconds: float = Field(default=60.0, gt=0)


class SynthesisConfig(_Frozen):
    """Speech provider settings. ``voices`` is tried in order."""

    voices: tuple[VoiceSpec, ...] = Field(
        default_factory=lambda: (VoiceSpec(provider="openai", voice_id="alloy"),)
    )
    output_format: str = "mp3"
    openai_model: str = "tts-1"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_max_chars: int | None = Field(default=4000, ge=1)
    elevenlabs_model: str = "eleven_monolingual_v1"
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_max_chars: int | None = Field(default=None, ge=1)
    elevenlabs_stability: float = Field(default=0.5, ge=0.0, le=1.0)
    elevenlabs_similarity_boost: float = Field(default=0.75, ge=0.0, le=1.0)
    timeout_seconds: float = Field(default=180.0, gt=0)
    continue_without_narration: bool = False

    @model_validator(mode="after")
    def _needs_a_voice(self) -> SynthesisConfig:
        if not self.voices:
            raise ValueError("at least one voice must be configured")
        return self


class TimingConfig(_Frozen):
    """Duration matching parameters."""

    adjustment_threshold_seconds: float = Field(default=0.1, ge=0)
    min_tempo: float = Field(default=0.5, gt=0)
    max_tempo: float = Field(default=2.0, gt=0)
    pad_ratio: float = Field(default=0.5, gt=0.0, lt=1.0)
    tolerance_ratio: float = Field(default=0.05, gt=0.0, le=0.5)
    codec: str = "libmp3lame"
    quality: int | None = Field(default=4, ge=0, le=9)
    silence_source: str = "anullsrc=r=44100:cl=stereo"
    clamped_fallback: bool = True
    max_correction_passes: int = Field(default=0, ge=0, le=5)
    timeout_seconds: float = Field(default=120.0, gt=0)

    @model_validator(mode="after")
    def _ordered_range(self) -> TimingConfig:
        if not self.min_tempo < 1.0 < self.max_tempo:
            raise ValueError("tempo range must satisfy min_tempo < 1.0 < max_tempo")
        return self


class MixConfig(_Frozen):
    """Final assembly toggles and volumes."""

    keep_original_audio: bool = False
    narration_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    soundtrack_volume: float = Field(default=0.3, ge=0.0, le=1.0)
    soundtrack_path: Path | None = None
    audio_codec: str = "aac"
    save_command: bool = True
    timeout_seconds: float = Field(default=120.0, gt=0)


class Settings(_Frozen):
    """All component configurations."""

    narration: NarrationConfig = Field(default_factory=NarrationConfig)
    summarizer: SummarizerConfig = Field(default_factory=SummarizerConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    mixing: MixConfig = Field(default_factory=MixConfig)


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from a YAML file; None or a missing file gives defaults."""
    if path is None:
        return Settings()
    path = Path(path)
    if not path.exists():
        return Settings()

    from reelvoice.utils.io import read_yaml

    return Settings(**read_yaml(path))
