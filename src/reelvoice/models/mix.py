"""Mix plan models for final audio assembly."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MixTopology(str, Enum):
    NARRATION_AND_SOUNDTRACK = "narration_and_soundtrack"
    NARRATION_ONLY = "narration_only"
    SOUNDTRACK_ONLY = "soundtrack_only"
    ORIGINAL_AUDIO = "original_audio"
    SILENT = "silent"


class MixPlan(BaseModel):
    """Which audio sources reach the output, and how loud.

    Original audio is never layered under narration or soundtrack: it only
    survives when neither is present.
    """

    model_config = ConfigDict(frozen=True)

    topology: MixTopology
    has_narration: bool
    has_soundtrack: bool
    keep_original_audio: bool
    narration_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    soundtrack_volume: float = Field(default=0.3, ge=0.0, le=1.0)

    @property
    def uses_filter_graph(self) -> bool:
        return self.topology in (
            MixTopology.NARRATION_AND_SOUNDTRACK,
            MixTopology.NARRATION_ONLY,
            MixTopology.SOUNDTRACK_ONLY,
        )

    def mixed_duration(
        self,
        narration_duration: float | None = None,
        soundtrack_duration: float | None = None,
    ) -> float | None:
        """Length of the mixed audio before the final clamp.

        ``amix`` runs with ``duration=longest``, so the two-source mix lasts
        as long as its longest input.
        """
        if self.topology is MixTopology.NARRATION_AND_SOUNDTRACK:
            known = [d for d in (narration_duration, soundtrack_duration) if d is not None]
            return max(known) if known else None
        if self.topology is MixTopology.NARRATION_ONLY:
            return narration_duration
        if self.topology is MixTopology.SOUNDTRACK_ONLY:
            return soundtrack_duration
        if self.topology is MixTopology.SILENT:
            return 0.0
        return None

    @staticmethod
    def output_duration(target_duration: float) -> float:
        """Final video length; every topology is clamped to the target."""
        return target_duration
