"""Duration matching against the real ffmpeg/ffprobe binaries."""

from __future__ import annotations

import asyncio
import shutil

import pytest

from reelvoice.models.audio import AudioAsset
from reelvoice.timing.matcher import DurationMatcher
from reelvoice.timing.tempo import plan_tempo
from reelvoice.utils.ffmpeg import run_ffmpeg
from reelvoice.utils.ffprobe import probe_duration

pytestmark = [
    pytest.mark.ffmpeg,
    pytest.mark.skipif(
        shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
        reason="ffmpeg/ffprobe not installed",
    ),
]

TARGET_SECONDS = 4.0


async def _tone(path, seconds: float) -> float:
    await run_ffmpeg(
        [
            "-f", "lavfi",
            "-i", f"sine=frequency=440:sample_rate=44100:duration={seconds}",
            "-ac", "2",
            "-c:a", "libmp3lame", "-q:a", "4",
            str(path),
        ]
    )
    return await probe_duration(path)


@pytest.mark.parametrize("factor", [0.3, 0.7, 1.0, 1.5, 3.0])
def test_matches_target_for_each_tempo_bucket(tmp_path, factor):
    async def scenario():
        source = tmp_path / "tone.mp3"
        current = await _tone(source, TARGET_SECONDS * factor)
        assert current is not None
        matcher = DurationMatcher()
        result = await matcher.match(
            AudioAsset(path=source, duration_seconds=current),
            current,
            TARGET_SECONDS,
            tmp_path / "matched.mp3",
        )
        return matcher, current, result

    matcher, current, result = asyncio.run(scenario())

    assert result.fallback_reason is None, plan_tempo(current, TARGET_SECONDS)
    assert matcher.within_tolerance(result.duration_seconds, TARGET_SECONDS), (
        current,
        result.duration_seconds,
    )
    assert not list(tmp_path.glob("*_silence.mp3"))
    assert not list(tmp_path.glob("*_padded.mp3"))


def test_probe_reports_none_for_non_audio(tmp_path):
    path = tmp_path / "junk.mp3"
    path.write_text("not audio at all")
    assert asyncio.run(probe_duration(path)) is None
