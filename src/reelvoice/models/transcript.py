"""Transcript data models."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TranscriptSegment(BaseModel):
    """A timed caption segment."""

    model_config = ConfigDict(frozen=True)

    text: str
    start: float = Field(default=0.0, validation_alias=AliasChoices("start", "offset"))
    duration: float = 0.0

    @property
    def end(self) -> float:
        return self.start + self.duration


class Transcript(BaseModel):
    """Timed segments, or a single flattened string when timing is unavailable."""

    model_config = ConfigDict(frozen=True)

    segments: tuple[TranscriptSegment, ...] = ()
    flat_text: str | None = None

    @classmethod
    def from_text(cls, text: str) -> Transcript:
        return cls(flat_text=text)

    @classmethod
    def from_segments(cls, segments: list[dict] | list[TranscriptSegment]) -> Transcript:
        parsed = [
            s if isinstance(s, TranscriptSegment) else TranscriptSegment(**s)
            for s in segments
        ]
        return cls(segments=tuple(sorted(parsed, key=lambda s: s.start)))

    @property
    def text(self) -> str:
        if self.flat_text is not None:
            return self.flat_text
        return " ".join(s.text.strip() for s in self.segments if s.text.strip())

    @property
    def duration_seconds(self) -> float:
        return self.segments[-1].end if self.segments else 0.0

    @property
    def word_count(self) -> int:
        return len(self.text.split())


def load_transcript(path: Path | str) -> Transcript:
    """Load a transcript from ``.json`` (segment list) or plain text."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        from reelvoice.utils.io import read_json

        data = read_json(path)
        if isinstance(data, dict):
            data = data.get("segments", [])
        return Transcript.from_segments(data)
    return Transcript.from_text(path.read_text(encoding="utf-8"))
