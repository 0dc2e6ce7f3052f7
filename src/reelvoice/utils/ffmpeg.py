"""FFmpeg command runner with a hard wall-clock timeout."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path

DEFAULT_TIMEOUT_SECONDS = 120.0


class FFmpegError(Exception):
    """Raised when an FFmpeg command fails."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"FFmpeg failed (rc={returncode}): {stderr[:500]}")


class FFmpegTimeoutError(Exception):
    """Raised when an FFmpeg command exceeds its timeout and is killed."""

    def __init__(self, cmd: list[str], timeout: float):
        self.cmd = cmd
        self.timeout = timeout
        super().__init__(f"FFmpeg timed out after {timeout:g}s and was killed")


async def run_command(
    cmd: list[str],
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess:
    """Run an external command without blocking the event loop.

    The process is killed when ``timeout`` elapses.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise FFmpegError(cmd, 127, str(e)) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise FFmpegTimeoutError(cmd, timeout) from None

    return subprocess.CompletedProcess(
        cmd,
        proc.returncode,
        stdout.decode(errors="replace"),
        stderr.decode(errors="replace"),
    )


async def run_ffmpeg(
    args: list[str],
    *,
    check: bool = True,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess:
    """Run an FFmpeg command with standard options (``-y`` overwrite)."""
    cmd = ["ffmpeg", "-y", "-hide_banner", "-loglevel", "error"] + args
    result = await run_command(cmd, timeout=timeout)
    if check and result.returncode != 0:
        raise FFmpegError(cmd, result.returncode, result.stderr)
    return result


def encode_args(codec: str, quality: int | None) -> list[str]:
    """Audio encoder arguments shared by every transform call site."""
    args = ["-c:a", codec]
    if quality is not None:
        args.extend(["-q:a", str(quality)])
    return args


async def apply_filter(
    input_path: Path | str,
    output_path: Path | str,
    audio_filter: str,
    *,
    codec: str = "libmp3lame",
    quality: int | None = 4,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """Apply an audio filter chain to a file."""
    await run_ffmpeg(
        [
            "-i", str(input_path),
            "-filter:a", audio_filter,
            *encode_args(codec, quality),
            str(output_path),
        ],
        timeout=timeout,
    )


async def generate_silence(
    output_path: Path | str,
    duration: float,
    *,
    source: str = "anullsrc=r=44100:cl=stereo",
    codec: str = "libmp3lame",
    quality: int | None = 4,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """Render ``duration`` seconds of silence."""
    await run_ffmpeg(
        [
            "-f", "lavfi",
            "-i", source,
            "-t", repr(duration),
            *encode_args(codec, quality),
            str(output_path),
        ],
        timeout=timeout,
    )


async def concatenate(
    first: Path | str,
    second: Path | str,
    output_path: Path | str,
    *,
    codec: str = "libmp3lame",
    quality: int | None = 4,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """Concatenate two audio files back to back."""
    await run_ffmpeg(
        [
            "-i", str(first),
            "-i", str(second),
            "-filter_complex", "[0:a][1:a]concat=n=2:v=0:a=1[out]",
            "-map", "[out]",
            *encode_args(codec, quality),
            str(output_path),
        ],
        timeout=timeout,
    )
