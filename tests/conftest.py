"""Shared fixtures: synthetic transcripts, fake speech providers and a fake ffmpeg."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from reelvoice.synthesis.errors import ProviderError


def make_transcript(sentences: int, words_per_sentence: int = 6) -> str:
    """Numbered sentences so tests can tell which ones were kept."""
    filler = ["covers", "topic", "number", "again", "today", "here", "now", "too"]
    out = []
    for i in range(1, sentences + 1):
        words = ["Sentence", str(i)] + filler[: words_per_sentence - 3] + [f"{i}."]
        out.append(" ".join(words))
    return " ".join(out)


class FakeProvider:
    """In-memory speech provider that records what it was asked to say."""

    def __init__(
        self,
        name: str,
        *,
        max_chars: int | None = None,
        fail: bool = False,
        delay: float = 0.0,
    ):
        self.name = name
        self.max_chars = max_chars
        self.fail = fail
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    async def synthesize(self, text: str, voice_id: str, output_path: Path) -> Path:
        self.calls.append((text, voice_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ProviderError(self.name, 500, "server error")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"ID3fake-audio")
        return output_path


def _write_output(args, *, check=True, timeout=None):
    Path(args[-1]).write_bytes(b"ID3fake-audio")
    return subprocess.CompletedProcess(args, 0, "", "")


@pytest.fixture
def transcript_500() -> str:
    """About 500 words in six-word sentences."""
    return make_transcript(84)


@pytest.fixture
def fake_ffmpeg(monkeypatch) -> AsyncMock:
    """Replace ffmpeg execution; every call writes its output file."""
    mock = AsyncMock(side_effect=_write_output)
    monkeypatch.setattr("reelvoice.utils.ffmpeg.run_ffmpeg", mock)
    return mock


@pytest.fixture
def source_audio(tmp_path) -> Path:
    path = tmp_path / "raw.mp3"
    path.write_bytes(b"ID3raw-audio")
    return path
