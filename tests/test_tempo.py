"""Tests for tempo planning: strategy selection and atempo decomposition."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from reelvoice.models.config import TimingConfig
from reelvoice.timing.tempo import (
    TempoStrategy,
    clamp_factor,
    decompose,
    plan_tempo,
    tempo_factor,
)


@pytest.mark.parametrize(
    ("current", "target", "strategy"),
    [
        (3.0, 10.0, TempoStrategy.PAD_THEN_STRETCH),
        (7.0, 10.0, TempoStrategy.DIRECT),
        (10.0, 10.0, TempoStrategy.COPY),
        (15.0, 10.0, TempoStrategy.DIRECT),
        (30.0, 10.0, TempoStrategy.CHAINED),
    ],
)
def test_strategy_per_factor_bucket(current, target, strategy):
    assert plan_tempo(current, target).strategy is strategy


class TestPlanTempo:
    def test_below_threshold_is_copied(self):
        plan = plan_tempo(10.0, 10.05)
        assert plan.strategy is TempoStrategy.COPY
        assert plan.stages == ()
        assert plan.filter == ""

    def test_direct_uses_exact_factor(self):
        plan = plan_tempo(15.0, 10.0)
        assert plan.stages == (1.5,)
        assert plan.filter == "atempo=1.5"
        assert plan.expected_duration == pytest.approx(10.0)

    def test_range_edges_are_direct(self):
        assert plan_tempo(20.0, 10.0).strategy is TempoStrategy.DIRECT
        assert plan_tempo(5.0, 10.0).strategy is TempoStrategy.DIRECT

    def test_chained_speed_up(self):
        plan = plan_tempo(30.0, 10.0)
        assert plan.stages == pytest.approx((2.0, 1.5))
        assert plan.filter.startswith("atempo=2.0,atempo=1.5")
        assert plan.product == pytest.approx(3.0)
        assert plan.expected_duration == pytest.approx(10.0)

    def test_pad_then_stretch(self):
        plan = plan_tempo(3.0, 10.0)
        assert plan.pad_seconds == pytest.approx(5.0)
        assert plan.stages == pytest.approx((0.8,))
        assert plan.expected_duration == pytest.approx(10.0)

    def test_every_stage_in_range(self):
        config = TimingConfig()
        for current in (0.4, 1.0, 3.0, 7.0, 25.0, 90.0, 400.0):
            plan = plan_tempo(current, 10.0, config)
            for stage in plan.stages:
                assert config.min_tempo <= stage <= config.max_tempo
            assert plan.expected_duration == pytest.approx(10.0)

    def test_as_dict(self):
        data = plan_tempo(30.0, 10.0).as_dict()
        assert data["strategy"] == "chained"
        assert data["tempo_factor"] == pytest.approx(3.0)


class TestDecompose:
    def test_large_factor(self):
        stages = decompose(10.0)
        assert stages[:3] == (2.0, 2.0, 2.0)
        assert math.prod(stages) == pytest.approx(10.0)

    def test_small_factor(self):
        stages = decompose(0.2)
        assert stages[:2] == (0.5, 0.5)
        assert math.prod(stages) == pytest.approx(0.2)

    def test_in_range_factor_is_single_stage(self):
        assert decompose(1.3) == (1.3,)

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError):
            decompose(0.0)


class TestHelpers:
    def test_tempo_factor_requires_positive_durations(self):
        assert tempo_factor(15.0, 10.0) == 1.5
        with pytest.raises(ValueError):
            tempo_factor(0.0, 10.0)

    def test_clamp_factor(self):
        assert clamp_factor(3.0) == 2.0
        assert clamp_factor(0.3) == 0.5
        assert clamp_factor(1.2) == 1.2

    def test_tempo_range_must_bracket_one(self):
        with pytest.raises(ValidationError):
            TimingConfig(min_tempo=1.2)


class TestScenarios:
    def test_ten_seconds_stretched_to_twenty_five(self):
        plan = plan_tempo(10.0, 25.0)
        assert plan.factor == pytest.approx(0.4)
        assert plan.strategy is TempoStrategy.PAD_THEN_STRETCH
        assert plan.pad_seconds == pytest.approx(12.5)
        assert plan.stages == pytest.approx((0.9,))
        assert plan.expected_duration == pytest.approx(25.0)

    def test_twelve_seconds_squeezed_to_four(self):
        plan = plan_tempo(12.0, 4.0)
        assert plan.strategy is TempoStrategy.CHAINED
        assert len(plan.stages) >= 2
        assert all(stage <= 2.0 for stage in plan.stages)
        assert plan.product == pytest.approx(3.0)
