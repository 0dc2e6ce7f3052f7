"""Narration script creation: summarizer first, rule-based distillation as fallback."""

from __future__ import annotations

from typing import Protocol

from reelvoice.models.config import NarrationConfig
from reelvoice.narration.distill import (
    distill,
    hard_cut,
    truncate_at_sentence_boundary,
    word_count,
)
from reelvoice.utils.progress import log_fallback, log_step

# Transcripts arrive double-escaped from the caption source.
_HTML_ENTITIES = (
    ("&amp;#39;", "'"),
    ("&amp;quot;", '"'),
    ("&amp;nbsp;", " "),
    ("&amp;lt;", "<"),
    ("&amp;gt;", ">"),
    ("&amp;amp;", "&"),
)


class Summarizer(Protocol):
    """Protocol for language-model summarizers."""

    name: str

    async def summarize(self, transcript: str, target_word_count: int) -> str | None: ...


def decode_html_entities(text: str) -> str:
    for entity, char in _HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


async def create_narration_script(
    transcript: str,
    target_word_count: int,
    *,
    summarizer: Summarizer | None = None,
    config: NarrationConfig | None = None,
) -> str:
    """Produce a narration script of at most ``target_word_count`` words."""
    if target_word_count < 0:
        raise ValueError(f"target_word_count must be >= 0, got {target_word_count}")
    config = config or NarrationConfig()
    text = decode_html_entities(transcript)

    if not text.strip():
        return ""
    if word_count(text) <= target_word_count:
        return text

    if summarizer is not None:
        try:
            summary = await summarizer.summarize(text, target_word_count)
            reason = f"{summarizer.name} returned no summary"
        except Exception as e:
            summary = None
            reason = f"{summarizer.name} raised {type(e).__name__}: {e}"

        if summary:
            if word_count(summary) > target_word_count:
                summary = truncate_at_sentence_boundary(summary, target_word_count)
            if word_count(summary) > target_word_count:
                summary = hard_cut(summary, target_word_count)
            log_step("Script", f"Using {summarizer.name} summary ({word_count(summary)} words)")
            return summary
        log_fallback("Script", reason, "rule-based distillation")

    script = distill(
        text,
        target_word_count,
        micro_word_limit=config.micro_word_limit,
        zone_fraction=config.zone_fraction,
    )
    log_step(
        "Script",
        f"Distilled {word_count(text)} → {word_count(script)} words "
        f"(budget {target_word_count})",
    )
    return script
