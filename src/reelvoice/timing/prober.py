"""Lazy duration probing for audio assets."""

from __future__ import annotations

from reelvoice.models.audio import AudioAsset
from reelvoice.utils.ffmpeg import DEFAULT_TIMEOUT_SECONDS
from reelvoice.utils.ffprobe import probe_duration


async def ensure_duration(
    asset: AudioAsset,
    *,
    refresh: bool = False,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> AudioAsset:
    """Return ``asset`` with its duration measured.

    A probe failure leaves ``duration_seconds`` as None (unknown), never 0.
    """
    if asset.duration_known and not refresh:
        return asset
    return asset.with_duration(await probe_duration(asset.path, timeout=timeout))
