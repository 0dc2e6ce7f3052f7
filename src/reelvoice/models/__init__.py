"""Pydantic data models for reelvoice."""

from reelvoice.models.audio import AudioAsset, DurationTarget, VoiceSpec
from reelvoice.models.config import (
    MixConfig,
    NarrationConfig,
    Settings,
    SummarizerConfig,
    SynthesisConfig,
    TimingConfig,
    load_settings,
)
from reelvoice.models.mix import MixPlan, MixTopology
from reelvoice.models.transcript import Transcript, TranscriptSegment, load_transcript

__all__ = [
    "AudioAsset",
    "DurationTarget",
    "VoiceSpec",
    "MixConfig",
    "NarrationConfig",
    "Settings",
    "SummarizerConfig",
    "SynthesisConfig",
    "TimingConfig",
    "load_settings",
    "MixPlan",
    "MixTopology",
    "Transcript",
    "TranscriptSegment",
    "load_transcript",
]
