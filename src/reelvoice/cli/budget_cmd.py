"""reelvoice budget — show the narration target and word budget."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from reelvoice.models.audio import DurationTarget, VoiceSpec
from reelvoice.models.config import load_settings
from reelvoice.synthesis.budget import speaking_rate_for, word_budget

console = Console()


@click.command()
@click.option("--duration", "-d", required=True, type=float, help="Video duration in seconds")
@click.option(
    "--provider",
    default=None,
    type=click.Choice(["openai", "elevenlabs"]),
    help="Speech provider (defaults to the first configured voice)",
)
@click.option("--voice", default=None, help="Voice id on the provider")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(), help="Path to reelvoice.yaml")
def budget_cmd(
    duration: float,
    provider: str | None,
    voice: str | None,
    config_path: str | None,
) -> None:
    """Print how many words fit the narration for a video of DURATION seconds."""
    if duration <= 0:
        raise click.BadParameter("must be positive", param_hint="--duration")

    settings = load_settings(config_path)
    primary = settings.synthesis.voices[0]
    if provider or voice:
        selected = VoiceSpec(
            provider=provider or primary.provider,
            voice_id=voice or primary.voice_id,
        )
    else:
        selected = primary

    target = DurationTarget(
        video_duration_seconds=duration,
        narration_ratio=settings.narration.narration_ratio,
    )
    goal = target.narration_seconds

    table = Table(title="Narration Budget", show_lines=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Voice", f"{selected.provider}/{selected.voice_id} ({selected.key})")
    table.add_row("Video", f"{duration:.2f}s")
    table.add_row("Narration", f"{goal:.2f}s ({target.narration_ratio:.0%})")
    table.add_row("Speaking rate", f"{speaking_rate_for(selected, settings.narration):.2f} words/s")
    table.add_row("Buffer", f"{settings.narration.buffer_for(goal):.2f}")
    table.add_row("Word budget", str(word_budget(goal, selected, settings.narration)))
    console.print(table)
