"""Tempo planning: choose how to stretch audio from one duration to another.

FFmpeg's ``atempo`` filter is only stable for factors in [0.5, 2.0] per
application, so the plan is computed up front as an explicit list of
stages:

- within range: one stage with the exact factor
- extreme speed-up: stages of the maximum factor and one remainder stage,
  whose product is the required factor
- extreme slow-down: append silence worth ``pad_ratio`` of the target,
  which pulls the residual factor back into range, then stretch once

Factors are never rounded before decomposition.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from reelvoice.models.config import TimingConfig


class TempoStrategy(str, Enum):
    COPY = "copy"
    DIRECT = "direct"
    CHAINED = "chained"
    PAD_THEN_STRETCH = "pad_then_stretch"


@dataclass(frozen=True)
class TempoPlan:
    """A precomputed duration adjustment."""

    strategy: TempoStrategy
    current: float
    target: float
    factor: float
    stages: tuple[float, ...] = field(default_factory=tuple)
    pad_seconds: float = 0.0

    @property
    def product(self) -> float:
        return math.prod(self.stages) if self.stages else 1.0

    @property
    def filter(self) -> str:
        return ",".join(f"atempo={stage!r}" for stage in self.stages)

    @property
    def expected_duration(self) -> float:
        if self.strategy is TempoStrategy.COPY:
            return self.current
        return (self.current + self.pad_seconds) / self.product

    def as_dict(self) -> dict:
        return {
            "strategy": self.strategy.value,
            "current_seconds": self.current,
            "target_seconds": self.target,
            "tempo_factor": self.factor,
            "stages": list(self.stages),
            "pad_seconds": self.pad_seconds,
        }


def tempo_factor(current: float, target: float) -> float:
    """current / target: above 1 speeds up, below 1 slows down."""
    if current <= 0 or target <= 0:
        raise ValueError(f"durations must be positive (current={current}, target={target})")
    return current / target


def decompose(factor: float, *, min_tempo: float = 0.5, max_tempo: float = 2.0) -> tuple[float, ...]:
    """Split ``factor`` into stages within [min_tempo, max_tempo] whose product is ``factor``."""
    if factor <= 0:
        raise ValueError(f"tempo factor must be positive, got {factor}")
    stages: list[float] = []
    remaining = factor
    while remaining > max_tempo:
        stages.append(max_tempo)
        remaining /= max_tempo
    while remaining < min_tempo:
        stages.append(min_tempo)
        remaining /= min_tempo
    stages.append(remaining)
    return tuple(stages)


def plan_tempo(current: float, target: float, config: TimingConfig | None = None) -> TempoPlan:
    config = config or TimingConfig()
    if abs(current - target) < config.adjustment_threshold_seconds:
        return TempoPlan(TempoStrategy.COPY, current, target, current / target if target else 1.0)

    factor = tempo_factor(current, target)

    if config.min_tempo <= factor <= config.max_tempo:
        return TempoPlan(TempoStrategy.DIRECT, current, target, factor, (factor,))

    if factor > config.max_tempo:
        stages = decompose(factor, min_tempo=config.min_tempo, max_tempo=config.max_tempo)
        return TempoPlan(TempoStrategy.CHAINED, current, target, factor, stages)

    pad = target * config.pad_ratio
    residual = (current + pad) / target
    stages = decompose(residual, min_tempo=config.min_tempo, max_tempo=config.max_tempo)
    return TempoPlan(TempoStrategy.PAD_THEN_STRETCH, current, target, factor, stages, pad)


def clamp_factor(factor: float, config: TimingConfig | None = None) -> float:
    config = config or TimingConfig()
    return max(config.min_tempo, min(factor, config.max_tempo))
