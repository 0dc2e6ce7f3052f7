"""FFprobe wrapper for media duration measurement."""

from __future__ import annotations

from pathlib import Path

from reelvoice.utils.ffmpeg import (
    DEFAULT_TIMEOUT_SECONDS,
    FFmpegError,
    FFmpegTimeoutError,
    run_command,
)
from reelvoice.utils.progress import log_warning


def probe_command(path: Path | str) -> list[str]:
    return [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]


def parse_duration(stdout: str, stderr: str = "") -> float | None:
    """Parse ffprobe output; any stderr or non-numeric stdout is a failure."""
    if stderr.strip():
        return None
    try:
        value = float(stdout.strip())
    except ValueError:
        return None
    if value != value or value < 0:  # NaN or negative
        return None
    return value


async def probe_duration(
    path: Path | str,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> float | None:
    """Measure the playback length of an audio or video file in seconds.

    Returns None (never raises) when the file is missing, ffprobe fails,
    or its output cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        log_warning(f"Cannot probe duration, file not found: {path}")
        return None

    try:
        result = await run_command(probe_command(path), timeout=timeout)
    except (FFmpegError, FFmpegTimeoutError) as e:
        log_warning(f"Duration probe failed for {path.name}: {e}")
        return None

    if result.returncode != 0:
        log_warning(
            f"Duration probe failed for {path.name} "
            f"(rc={result.returncode}): {result.stderr.strip()[:200]}"
        )
        return None

    duration = parse_duration(result.stdout, result.stderr)
    if duration is None:
        log_warning(
            f"Invalid duration output for {path.name}: "
            f"{(result.stdout or result.stderr).strip()[:200]!r}"
        )
    return duration
