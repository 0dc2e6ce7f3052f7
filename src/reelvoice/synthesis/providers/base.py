"""Base protocol for speech providers, plus the shared HTTP download."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Protocol

import httpx

from reelvoice.synthesis.errors import ProviderError


class SpeechProvider(Protocol):
    """Protocol for text-to-speech providers."""

    name: str
    max_chars: int | None

    async def synthesize(self, text: str, voice_id: str, output_path: Path) -> Path: ...


async def stream_audio(
    provider: str,
    url: str,
    *,
    headers: dict[str, str],
    payload: dict[str, Any],
    output_path: Path,
    timeout: float,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """POST ``payload`` as JSON and stream a 200 response body to ``output_path``.

    ``timeout`` bounds the whole exchange, not just each socket operation.
    Anything short of a complete 200 body raises ProviderError and leaves
    no partial file behind.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout)

    async def download() -> None:
        async with client.stream("POST", url, headers=headers, json=payload) as response:
            if response.status_code != 200:
                body = (await response.aread()).decode(errors="replace")
                raise ProviderError(provider, response.status_code, body)
            with open(output_path, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)

    try:
        await asyncio.wait_for(download(), timeout)
    except asyncio.TimeoutError:
        output_path.unlink(missing_ok=True)
        raise ProviderError(provider, None, f"timed out after {timeout:g}s") from None
    except httpx.HTTPError as e:
        output_path.unlink(missing_ok=True)
        raise ProviderError(provider, None, f"{type(e).__name__}: {e}") from e
    except BaseException:
        output_path.unlink(missing_ok=True)
        raise
    finally:
        if owns_client:
            await client.aclose()

    return output_path
