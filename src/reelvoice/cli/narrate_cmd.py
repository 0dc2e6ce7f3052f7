"""reelvoice narrate — produce a narration track fitted to a video duration."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from reelvoice.models.config import load_settings
from reelvoice.models.transcript import load_transcript
from reelvoice.utils.progress import log_error, log_success, log_warning


@click.command()
@click.argument("transcript", type=click.Path(exists=True, dir_okay=False))
@click.option("--video-duration", "-d", required=True, type=float, help="Video duration in seconds")
@click.option(
    "--output-dir", "-o",
    default="output",
    type=click.Path(file_okay=False),
    help="Directory for the narration and its run log",
)
@click.option("--config", "-c", "config_path", default=None, type=click.Path(), help="Path to reelvoice.yaml")
def narrate_cmd(
    transcript: str,
    video_duration: float,
    output_dir: str,
    config_path: str | None,
) -> None:
    """Distill TRANSCRIPT into a script, synthesize it and match it to the video."""
    if video_duration <= 0:
        raise click.BadParameter("must be positive", param_hint="--video-duration")

    from reelvoice.narration.summarize import TranscriptSummarizer
    from reelvoice.pipeline.orchestrator import NarrationPipeline

    try:
        settings = load_settings(config_path)
        source = load_transcript(Path(transcript))
        summarizer = (
            TranscriptSummarizer(settings.summarizer) if settings.summarizer.enabled else None
        )
        pipeline = NarrationPipeline(settings, summarizer=summarizer)
        result = asyncio.run(
            pipeline.run(source, Path(output_dir), video_duration=video_duration)
        )
    except Exception as e:
        log_error(f"Narration failed: {e}")
        raise SystemExit(1)

    if result.asset is None:
        log_warning("No narration produced; assemble without --narration")
        return
    log_success(f"Narration: {result.asset.path}")
