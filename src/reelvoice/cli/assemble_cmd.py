"""reelvoice assemble — mix narration and soundtrack onto a video."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from reelvoice.models.config import load_settings
from reelvoice.utils.ffprobe import probe_duration
from reelvoice.utils.progress import log_error


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False), help="Output video path")
@click.option("--narration", "-n", default=None, type=click.Path(), help="Narration audio file")
@click.option("--soundtrack", "-s", default=None, type=click.Path(), help="Background music file")
@click.option(
    "--keep-original-audio/--drop-original-audio",
    default=None,
    help="Pass the video's own audio through when nothing else is mixed",
)
@click.option("--duration", "-d", default=None, type=float, help="Output duration (defaults to the video's)")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(), help="Path to reelvoice.yaml")
def assemble_cmd(
    video: str,
    output: str,
    narration: str | None,
    soundtrack: str | None,
    keep_original_audio: bool | None,
    duration: float | None,
    config_path: str | None,
) -> None:
    """Assemble VIDEO with the selected audio sources."""
    from reelvoice.mixing.assemble import assemble_video

    settings = load_settings(config_path)
    mixing = settings.mixing
    if keep_original_audio is not None:
        mixing = mixing.model_copy(update={"keep_original_audio": keep_original_audio})

    async def _run() -> None:
        target = duration
        if target is None:
            target = await probe_duration(video, timeout=mixing.timeout_seconds)
            if target is None:
                raise ValueError(f"Could not measure {video}; pass --duration")
        await assemble_video(
            Path(video),
            Path(output),
            target,
            narration_path=Path(narration) if narration else None,
            soundtrack_path=Path(soundtrack) if soundtrack else None,
            config=mixing,
        )

    try:
        asyncio.run(_run())
    except Exception as e:
        log_error(f"Assembly failed: {e}")
        raise SystemExit(1)
