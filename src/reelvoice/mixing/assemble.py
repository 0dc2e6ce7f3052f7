"""Final video assembly: apply the audio graph and clamp to the target duration."""

from __future__ import annotations

import shlex
from pathlib import Path

from reelvoice.mixing.composer import build_audio_graph, plan_mix
from reelvoice.models.config import MixConfig
from reelvoice.models.mix import MixPlan, MixTopology
from reelvoice.utils.ffmpeg import run_ffmpeg
from reelvoice.utils.progress import log_fallback, log_step, log_success


def build_assembly_args(
    video_path: Path,
    output_path: Path,
    target_duration: float,
    plan: MixPlan,
    *,
    narration_path: Path | None = None,
    soundtrack_path: Path | None = None,
    audio_codec: str = "aac",
) -> list[str]:
    """FFmpeg arguments (without the ``ffmpeg -y`` prefix) for one assembly."""
    args = ["-i", str(video_path)]
    if plan.has_narration:
        args.extend(["-i", str(narration_path)])
    if plan.has_soundtrack:
        args.extend(["-i", str(soundtrack_path)])

    args.extend(build_audio_graph(plan).args())
    args.extend(["-c:v", "copy"])
    if plan.topology is MixTopology.SILENT:
        args.append("-an")
    else:
        args.extend(["-c:a", audio_codec])
    args.extend(["-t", repr(float(target_duration)), str(output_path)])
    return args


async def assemble_video(
    video_path: Path,
    output_path: Path,
    target_duration: float,
    *,
    narration_path: Path | None = None,
    soundtrack_path: Path | None = None,
    config: MixConfig | None = None,
) -> MixPlan:
    """Mix the configured audio sources onto ``video_path``.

    A missing soundtrack is treated as "no soundtrack"; a missing
    narration file is an error.
    """
    config = config or MixConfig()
    video_path = Path(video_path)
    output_path = Path(output_path)
    if not video_path.exists():
        raise FileNotFoundError(f"Video not found: {video_path}")
    if narration_path is not None and not Path(narration_path).exists():
        raise FileNotFoundError(f"Narration not found: {narration_path}")

    soundtrack_path = soundtrack_path or config.soundtrack_path
    if soundtrack_path is not None and not Path(soundtrack_path).exists():
        log_fallback("Assemble", f"soundtrack not found: {soundtrack_path}", "mixing without it")
        soundtrack_path = None

    plan = plan_mix(
        narration_path is not None,
        soundtrack_path is not None,
        config.keep_original_audio,
        narration_volume=config.narration_volume,
        soundtrack_volume=config.soundtrack_volume,
    )
    log_step(
        "Assemble",
        f"{plan.topology.value} (narration {plan.narration_volume:.0%}, "
        f"soundtrack {plan.soundtrack_volume:.0%}), capped at {target_duration:.2f}s",
    )

    args = build_assembly_args(
        video_path,
        output_path,
        plan.output_duration(target_duration),
        plan,
        narration_path=narration_path,
        soundtrack_path=soundtrack_path,
        audio_codec=config.audio_codec,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if config.save_command:
        command_path = output_path.with_name(f"{output_path.stem}_ffmpeg_command.txt")
        command_path.write_text(shlex.join(["ffmpeg", "-y", *args]) + "\n")

    await run_ffmpeg(args, timeout=config.timeout_seconds)
    log_success(f"Video assembled: {output_path}")
    return plan
