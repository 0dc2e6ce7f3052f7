"""Tests for narration script creation and the summarizer fallback."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import anthropic
import httpx
import pytest

from reelvoice.models.config import NarrationConfig, SummarizerConfig
from reelvoice.narration.distill import ends_with_terminal, word_count
from reelvoice.narration.script import create_narration_script, decode_html_entities
from reelvoice.narration.summarize import TranscriptSummarizer


class StaticSummarizer:
    name = "static"

    def __init__(self, summary: str | None):
        self.summary = summary
        self.requests: list[int] = []

    async def summarize(self, transcript: str, target_word_count: int) -> str | None:
        self.requests.append(target_word_count)
        return self.summary


class BrokenSummarizer:
    name = "broken"

    async def summarize(self, transcript: str, target_word_count: int) -> str | None:
        raise RuntimeError("model unavailable")


def _message(text: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def _client(create: AsyncMock) -> SimpleNamespace:
    return SimpleNamespace(messages=SimpleNamespace(create=create))


# ---------------------------------------------------------------------------
# create_narration_script
# ---------------------------------------------------------------------------


class TestCreateNarrationScript:
    def test_decodes_double_escaped_entities(self):
        raw = "It&amp;#39;s &amp;quot;fine&amp;quot; &amp;amp; done&amp;nbsp;now &amp;lt;3 &amp;gt;"
        assert decode_html_entities(raw) == "It's \"fine\" & done now <3 >"

    def test_short_transcript_passes_through(self):
        summarizer = StaticSummarizer("unused")
        script = asyncio.run(
            create_narration_script("Only four words here.", 10, summarizer=summarizer)
        )
        assert script == "Only four words here."
        assert summarizer.requests == []

    def test_empty_transcript(self):
        assert asyncio.run(create_narration_script("   ", 10)) == ""

    def test_uses_summary_when_available(self, transcript_500):
        summarizer = StaticSummarizer("A tidy summary of the video.")
        script = asyncio.run(create_narration_script(transcript_500, 15, summarizer=summarizer))
        assert script == "A tidy summary of the video."
        assert summarizer.requests == [15]

    def test_overlong_summary_is_cut_at_sentence_boundary(self, transcript_500):
        summary = "Three words here. " * 10
        script = asyncio.run(
            create_narration_script(transcript_500, 10, summarizer=StaticSummarizer(summary))
        )
        assert script == "Three words here. Three words here. Three words here."
        assert word_count(script) <= 10

    def test_summarizer_error_falls_back_to_distillation(self, transcript_500):
        script = asyncio.run(
            create_narration_script(transcript_500, 15, summarizer=BrokenSummarizer())
        )
        assert script.startswith("Sentence 1 ")
        assert word_count(script) <= 15
        assert ends_with_terminal(script)

    def test_empty_summary_falls_back_to_distillation(self, transcript_500):
        script = asyncio.run(
            create_narration_script(transcript_500, 15, summarizer=StaticSummarizer(None))
        )
        assert script.startswith("Sentence 1 ")

    def test_micro_limit_comes_from_config(self, transcript_500):
        config = NarrationConfig(micro_word_limit=5)
        script = asyncio.run(create_narration_script(transcript_500, 15, config=config))
        # zone accumulation instead of first + last
        assert script.startswith("Sentence 1 covers topic number 1. Sentence 2 ")


# ---------------------------------------------------------------------------
# TranscriptSummarizer
# ---------------------------------------------------------------------------


class TestTranscriptSummarizer:
    def test_request_parameters(self):
        create = AsyncMock(return_value=_message("  A short summary.  "))
        summarizer = TranscriptSummarizer(client=_client(create))

        result = asyncio.run(summarizer.summarize("x" * 5000, 25))

        assert result == "A short summary."
        kwargs = create.call_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["model"] == SummarizerConfig().model
        assert "EXACTLY 25 words" in kwargs["system"]
        content = kwargs["messages"][0]["content"]
        assert "x" * 4000 + "..." in content
        assert "x" * 4001 not in content

    def test_any_error_returns_none(self):
        create = AsyncMock(side_effect=RuntimeError("boom"))
        summarizer = TranscriptSummarizer(client=_client(create))
        assert asyncio.run(summarizer.summarize("Some transcript.", 10)) is None

    def test_connection_errors_are_retried_once(self, monkeypatch):
        monkeypatch.setattr(
            TranscriptSummarizer._request.retry, "sleep", AsyncMock(return_value=None)
        )
        error = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        )
        create = AsyncMock(side_effect=[error, _message("Recovered summary.")])
        summarizer = TranscriptSummarizer(client=_client(create))
        assert asyncio.run(summarizer.summarize("Some transcript.", 10)) == "Recovered summary."
        assert create.await_count == 2

    def test_empty_response_returns_none(self):
        create = AsyncMock(return_value=_message("   "))
        summarizer = TranscriptSummarizer(client=_client(create))
        assert asyncio.run(summarizer.summarize("Some transcript.", 10)) is None

    def test_disabled_never_calls_the_model(self):
        create = AsyncMock()
        summarizer = TranscriptSummarizer(SummarizerConfig(enabled=False), client=_client(create))
        assert asyncio.run(summarizer.summarize("Some transcript.", 10)) is None
        create.assert_not_called()

    def test_missing_api_key_returns_none(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert asyncio.run(TranscriptSummarizer().summarize("Some transcript.", 10)) is None


@pytest.mark.parametrize("budget", [12, 30])
def test_script_from_summary_respects_budget(transcript_500, budget):
    summary = " ".join(["Long summary sentence with many words."] * 20)
    script = asyncio.run(
        create_narration_script(transcript_500, budget, summarizer=StaticSummarizer(summary))
    )
    assert 0 < word_count(script) <= budget
    assert ends_with_terminal(script)
