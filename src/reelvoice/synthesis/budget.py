"""Word budget from target duration and speaking rate, plus rate calibration."""

from __future__ import annotations

import math

from reelvoice.models.audio import VoiceSpec
from reelvoice.models.config import NarrationConfig
from reelvoice.utils.progress import log_step, log_warning

_FLOOR_EPSILON = 1e-9  # keeps exact products like 20 * 0.95 from flooring to 18


def target_word_count(duration_seconds: float, speaking_rate: float, buffer_factor: float) -> int:
    """floor(duration × words-per-second × buffer)."""
    if duration_seconds <= 0:
        return 0
    return max(0, math.floor(duration_seconds * speaking_rate * buffer_factor + _FLOOR_EPSILON))


def speaking_rate_for(voice: VoiceSpec, config: NarrationConfig) -> float:
    if voice.speaking_rate is not None:
        return voice.speaking_rate
    return config.speaking_rate(voice.key, voice.provider)


def word_budget(duration_seconds: float, voice: VoiceSpec, config: NarrationConfig) -> int:
    """Words a voice can speak in ``duration_seconds`` with the duration-dependent buffer."""
    return target_word_count(
        duration_seconds,
        speaking_rate_for(voice, config),
        config.buffer_for(duration_seconds),
    )


def calibrate(
    voice: VoiceSpec,
    words: int,
    actual_seconds: float,
    target_seconds: float | None = None,
    *,
    short_warning_ratio: float = 0.15,
) -> float | None:
    """Log the observed speaking rate and how the take compares to the target.

    Returns the observed words per second (None for a zero-length take).
    """
    if actual_seconds <= 0:
        return None
    observed = words / actual_seconds
    log_step(
        "Calibrate",
        f"{voice.key}: {words} words in {actual_seconds:.2f}s → {observed:.3f} words/s",
    )

    if target_seconds:
        if actual_seconds > target_seconds:
            log_warning(
                f"Synthesized audio exceeds target by {actual_seconds - target_seconds:.2f}s"
            )
        elif target_seconds - actual_seconds > target_seconds * short_warning_ratio:
            short = target_seconds - actual_seconds
            log_warning(
                f"Synthesized audio is {short:.2f}s shorter than target "
                f"({short / target_seconds * 100:.1f}% of target duration)"
            )
    return observed
