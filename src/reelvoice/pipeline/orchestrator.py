"""Narration run: distill → synthesize → probe → match → verify.

Each stage consumes the previous stage's output, so stages run one after
another. A run owns its temporary directory; it is removed after a
successful run and left behind on failure for debugging.
"""

from __future__ import annotations

import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path

from reelvoice.models.audio import AudioAsset, DurationTarget, VoiceSpec
from reelvoice.models.config import Settings
from reelvoice.models.transcript import Transcript
from reelvoice.narration.distill import word_count
from reelvoice.narration.script import Summarizer, create_narration_script
from reelvoice.synthesis.budget import calibrate, word_budget
from reelvoice.synthesis.errors import SynthesisFailedError
from reelvoice.synthesis.synthesizer import SpeechSynthesizer
from reelvoice.timing.matcher import DurationMatcher
from reelvoice.timing.prober import ensure_duration
from reelvoice.utils.io import write_json
from reelvoice.utils.progress import (
    log,
    log_error,
    log_fallback,
    log_step,
    log_warning,
    seconds,
    show_stage_summary,
)


@dataclass
class NarrationResult:
    """Outcome of a narration run; ``asset`` is None when narration was skipped."""

    script: str
    target: DurationTarget
    asset: AudioAsset | None = None
    voice: VoiceSpec | None = None
    report: dict = field(default_factory=dict)

    @property
    def residual_seconds(self) -> float | None:
        if self.asset is None or self.asset.duration_seconds is None:
            return None
        return self.asset.duration_seconds - self.target.narration_seconds


class NarrationPipeline:
    """Produces one narration asset fitted to a fraction of the video length."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        synthesizer: SpeechSynthesizer | None = None,
        matcher: DurationMatcher | None = None,
        summarizer: Summarizer | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.synthesizer = synthesizer or SpeechSynthesizer(
            self.settings.synthesis, self.settings.narration
        )
        self.matcher = matcher or DurationMatcher(self.settings.timing)
        self.summarizer = summarizer

    def duration_target(self, video_duration: float | None = None) -> DurationTarget:
        narration = self.settings.narration
        return DurationTarget(
            video_duration_seconds=(
                narration.video_duration_seconds if video_duration is None else video_duration
            ),
            narration_ratio=narration.narration_ratio,
        )

    async def run(
        self,
        transcript: Transcript | str,
        output_dir: Path,
        *,
        video_duration: float | None = None,
        name: str = "narration",
    ) -> NarrationResult:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        tmp_dir = Path(tempfile.mkdtemp(dir=output_dir, prefix=f"{name}-tmp-"))
        start_time = time.time()

        text = transcript.text if isinstance(transcript, Transcript) else transcript
        target = self.duration_target(video_duration)
        goal = target.narration_seconds
        primary = self.settings.synthesis.voices[0]

        steps: list[str] = []
        log(f"[bold]reelvoice[/bold] — narration for {target.video_duration_seconds:.2f}s video")

        try:
            result = await self._run_steps(
                text, target, primary, output_dir, tmp_dir, name, steps
            )
        except Exception as e:
            failed_at = steps[-1] if steps else "start"
            log_error(f"Narration failed at step {failed_at}: {e}")
            log_warning(f"Intermediate files kept in {tmp_dir}")
            raise

        elapsed = time.time() - start_time
        result.report["processing_time_seconds"] = round(elapsed, 2)
        write_json(output_dir / f"{name}-log.json", result.report)
        shutil.rmtree(tmp_dir, ignore_errors=True)

        show_stage_summary(
            "Narration",
            elapsed,
            {
                "Words": word_count(result.script),
                "Voice": f"{result.voice.provider}/{result.voice.voice_id}" if result.voice else "none",
                "Target": seconds(goal),
                "Delivered": seconds(result.asset.duration_seconds if result.asset else None),
            },
        )
        return result

    async def _run_steps(
        self,
        text: str,
        target: DurationTarget,
        primary: VoiceSpec,
        output_dir: Path,
        tmp_dir: Path,
        name: str,
        steps: list[str],
    ) -> NarrationResult:
        settings = self.settings
        goal = target.narration_seconds
        fallbacks: list[str] = []

        # Step 1: script
        steps.append("script")
        budget = word_budget(goal, primary, settings.narration)
        log_step("Script", f"Budget {budget} words for {goal:.2f}s ({primary.key})")
        script = await create_narration_script(
            text,
            budget,
            summarizer=self.summarizer,
            config=settings.narration,
        )
        result = NarrationResult(script=script, target=target)
        result.report = {
            "version": "1.0",
            "video_duration_seconds": target.video_duration_seconds,
            "narration_ratio": target.narration_ratio,
            "target_narration_seconds": goal,
            "word_budget": budget,
            "script_words": word_count(script),
            "fallbacks": fallbacks,
        }

        # Step 2: synthesis
        steps.append("synthesis")
        raw_path = tmp_dir / f"{name}_raw.{settings.synthesis.output_format}"
        try:
            raw, voice = await self.synthesizer.synthesize_first_available(script, goal, raw_path)
        except SynthesisFailedError as e:
            if not settings.synthesis.continue_without_narration:
                raise
            log_fallback("Synthesis", str(e), "continuing without narration")
            fallbacks.append(f"no narration: {e}")
            return result
        result.voice = voice
        result.report["voice"] = {"provider": voice.provider, "voice_id": voice.voice_id}
        if voice != primary:
            fallbacks.append(f"provider fallback: {voice.provider}/{voice.voice_id}")

        # Step 3: probe
        steps.append("probe")
        raw = await ensure_duration(raw, timeout=settings.timing.timeout_seconds)
        final_path = output_dir / f"{name}.{settings.synthesis.output_format}"
        result.report["synthesized_seconds"] = raw.duration_seconds
        if raw.duration_seconds is None:
            log_fallback("Probe", "synthesized duration unknown", "shipping unadjusted narration")
            fallbacks.append("probe failed: adjustment skipped")
            shutil.copy2(raw.path, final_path)
            result.asset = AudioAsset(path=final_path, fallback_reason="unknown duration")
            return result

        result.report["observed_words_per_second"] = calibrate(
            voice, word_count(script), raw.duration_seconds, goal
        )

        # Step 4: match
        steps.append("match")
        plan = self.matcher.plan(raw.duration_seconds, goal)
        result.report["tempo_plan"] = plan.as_dict()
        adjusted = await self.matcher.match(raw, raw.duration_seconds, goal, final_path)
        if adjusted.fallback_reason:
            fallbacks.append(f"tempo fallback: {adjusted.fallback_reason}")

        # Step 5: verify (advisory unless correction passes are configured)
        steps.append("verify")
        adjusted = await self._correct(adjusted, goal, tmp_dir, name, fallbacks)

        result.asset = adjusted
        result.report["delivered_seconds"] = adjusted.duration_seconds
        result.report["residual_seconds"] = result.residual_seconds
        result.report["within_tolerance"] = self.matcher.within_tolerance(
            adjusted.duration_seconds, goal
        )
        return result

    async def _correct(
        self,
        asset: AudioAsset,
        goal: float,
        tmp_dir: Path,
        name: str,
        fallbacks: list[str],
    ) -> AudioAsset:
        """Re-stretch while the residual is outside tolerance, up to the configured passes."""
        passes = self.settings.timing.max_correction_passes
        for attempt in range(1, passes + 1):
            if asset.duration_seconds is None or self.matcher.within_tolerance(
                asset.duration_seconds, goal
            ):
                break
            log_step(
                "Verify",
                f"Correction pass {attempt}/{passes}: {asset.duration_seconds:.2f}s → {goal:.2f}s",
            )
            staged = tmp_dir / f"{name}_pass{attempt}{asset.path.suffix}"
            shutil.move(str(asset.path), staged)
            corrected = await self.matcher.match(
                asset.model_copy(update={"path": staged}),
                asset.duration_seconds,
                goal,
                asset.path,
            )
            if corrected.fallback_reason:
                fallbacks.append(f"correction pass {attempt}: {corrected.fallback_reason}")
            asset = corrected
        return asset
