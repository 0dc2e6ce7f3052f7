"""Duration matching: stretch an audio asset to a target duration."""

from __future__ import annotations

import shutil
from pathlib import Path

from reelvoice.models.audio import AudioAsset, DurationTarget
from reelvoice.models.config import TimingConfig
from reelvoice.timing.prober import ensure_duration
from reelvoice.timing.tempo import TempoPlan, TempoStrategy, clamp_factor, plan_tempo
from reelvoice.utils.ffmpeg import (
    FFmpegError,
    FFmpegTimeoutError,
    apply_filter,
    concatenate,
    generate_silence,
)
from reelvoice.utils.ffprobe import probe_duration
from reelvoice.utils.progress import log_fallback, log_step, log_success, log_warning, seconds


class DurationMatcher:
    """Applies a TempoPlan with FFmpeg, degrading to an unmodified copy on failure.

    Transform failures are recovered here; timeouts are not. A timed-out
    transform removes its partial output and propagates FFmpegTimeoutError.
    """

    def __init__(self, config: TimingConfig | None = None) -> None:
        self.config = config or TimingConfig()

    def plan(self, current: float, target: float) -> TempoPlan:
        return plan_tempo(current, target, self.config)

    def within_tolerance(self, duration: float | None, target: float) -> bool:
        if duration is None:
            return False
        return abs(duration - target) <= target * self.config.tolerance_ratio

    async def match(
        self,
        asset: AudioAsset,
        current: float,
        target: float,
        output_path: Path,
    ) -> AudioAsset:
        """Write a new asset at ``output_path`` lasting ``target`` seconds (within tolerance)."""
        output_path = Path(output_path)
        if output_path.resolve() == Path(asset.path).resolve():
            raise ValueError("output_path must differ from the source asset")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        plan = self.plan(current, target)
        if plan.strategy is TempoStrategy.COPY:
            log_step(
                "Match",
                f"Duration {current:.2f}s already within "
                f"{self.config.adjustment_threshold_seconds}s of {target:.2f}s, copying",
            )
            shutil.copy2(asset.path, output_path)
            return AudioAsset(path=output_path, duration_seconds=current)

        log_step(
            "Match",
            f"Adjusting {current:.2f}s → {target:.2f}s "
            f"(tempo {plan.factor:.3f}, {plan.strategy.value}, "
            f"{len(plan.stages)} stage(s))",
        )
        if plan.strategy in (TempoStrategy.CHAINED, TempoStrategy.PAD_THEN_STRETCH):
            log_warning(f"Extreme tempo adjustment ({plan.factor:.3f}); quality may suffer.")

        fallback_reason = None
        known_duration = None
        try:
            await self._apply(plan, Path(asset.path), output_path)
        except FFmpegTimeoutError:
            output_path.unlink(missing_ok=True)
            raise
        except FFmpegError as e:
            fallback_reason, known_duration = await self._recover(
                plan, Path(asset.path), output_path, e, current
            )

        measured = await probe_duration(output_path, timeout=self.config.timeout_seconds)
        if measured is None:
            measured = known_duration
        self._report_residual(measured, target)
        return AudioAsset(
            path=output_path,
            duration_seconds=measured,
            fallback_reason=fallback_reason,
        )

    async def extend_to_fill(
        self,
        asset: AudioAsset,
        target: DurationTarget,
        output_path: Path,
    ) -> AudioAsset:
        """Match ``asset`` to ``video duration × narration ratio``.

        When the asset's duration cannot be measured the adjustment is
        skipped and the asset is returned unchanged.
        """
        measured = await ensure_duration(asset, timeout=self.config.timeout_seconds)
        goal = target.narration_seconds
        log_step(
            "Match",
            f"Target narration: {goal:.2f}s "
            f"({target.narration_ratio * 100:.0f}% of {target.video_duration_seconds:.2f}s video)",
        )
        if measured.duration_seconds is None:
            log_fallback("Match", f"unknown duration for {Path(asset.path).name}", "skipping adjustment")
            return measured.model_copy(update={"fallback_reason": "unknown duration"})
        return await self.match(measured, measured.duration_seconds, goal, output_path)

    async def _apply(self, plan: TempoPlan, source: Path, output_path: Path) -> None:
        cfg = self.config
        encode = dict(codec=cfg.codec, quality=cfg.quality, timeout=cfg.timeout_seconds)

        if plan.strategy is not TempoStrategy.PAD_THEN_STRETCH:
            await apply_filter(source, output_path, plan.filter, **encode)
            return

        silence = output_path.with_name(f"{output_path.stem}_silence{output_path.suffix}")
        padded = output_path.with_name(f"{output_path.stem}_padded{output_path.suffix}")
        try:
            await generate_silence(silence, plan.pad_seconds, source=cfg.silence_source, **encode)
            await concatenate(source, silence, padded, **encode)
            await apply_filter(padded, output_path, plan.filter, **encode)
        finally:
            silence.unlink(missing_ok=True)
            padded.unlink(missing_ok=True)

    async def _recover(
        self,
        plan: TempoPlan,
        source: Path,
        output_path: Path,
        error: FFmpegError,
        current: float,
    ) -> tuple[str, float | None]:
        """Fall back after a failed transform.

        Returns the reason for the record and, for a plain copy, the
        duration the output is known to have.
        """
        cfg = self.config
        clamp = cfg.clamped_fallback and plan.strategy is not TempoStrategy.DIRECT
        log_fallback(
            "Match",
            f"{plan.strategy.value} tempo {plan.factor:.3f} failed: {error}",
            "clamped tempo" if clamp else "unmodified copy",
        )

        if clamp:
            clamped = clamp_factor(plan.factor, cfg)
            try:
                await apply_filter(
                    source,
                    output_path,
                    f"atempo={clamped!r}",
                    codec=cfg.codec,
                    quality=cfg.quality,
                    timeout=cfg.timeout_seconds,
                )
            except FFmpegTimeoutError:
                output_path.unlink(missing_ok=True)
                raise
            except FFmpegError as e:
                log_fallback("Match", f"clamped tempo {clamped:.3f} failed: {e}", "unmodified copy")
            else:
                log_success(f"Applied clamped tempo {clamped:.3f} instead of {plan.factor:.3f}")
                return f"clamped tempo {clamped:.3f}: {error}", None

        shutil.copy2(source, output_path)
        return f"copy of original: {error}", current

    def _report_residual(self, measured: float | None, target: float) -> None:
        if measured is None:
            log_warning("Could not verify adjusted duration (probe failed)")
            return
        message = (
            f"Adjusted duration {seconds(measured)} (target {seconds(target)}, "
            f"residual {measured - target:+.2f}s)"
        )
        if self.within_tolerance(measured, target):
            log_success(message)
        else:
            log_warning(f"{message}, outside {self.config.tolerance_ratio:.0%} tolerance")
