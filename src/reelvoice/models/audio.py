"""Voice, audio asset and duration target models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Provider = Literal["openai", "elevenlabs"]


class VoiceSpec(BaseModel):
    """A narration voice on a given provider."""

    model_config = ConfigDict(frozen=True)

    provider: Provider = "openai"
    voice_id: str = "alloy"
    speaking_rate: float | None = Field(default=None, gt=0)  # overrides the rate table

    @property
    def key(self) -> str:
        """Speaking-rate lookup key: ``openai_<voice>`` or ``elevenlabs``."""
        if self.provider == "openai":
            return f"openai_{self.voice_id}"
        return self.provider


class AudioAsset(BaseModel):
    """An audio file whose duration is probed lazily, never assumed."""

    path: Path
    duration_seconds: float | None = None
    fallback_reason: str | None = None

    @property
    def duration_known(self) -> bool:
        return self.duration_seconds is not None

    def with_duration(self, duration: float | None) -> AudioAsset:
        return self.model_copy(update={"duration_seconds": duration})


class DurationTarget(BaseModel):
    """The fraction of the video the narration should occupy."""

    model_config = ConfigDict(frozen=True)

    video_duration_seconds: float = Field(gt=0)
    narration_ratio: float = Field(default=0.93, gt=0.0, le=1.0)

    @property
    def narration_seconds(self) -> float:
        return self.video_duration_seconds * self.narration_ratio
