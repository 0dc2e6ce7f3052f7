"""Speech synthesis error types."""

from __future__ import annotations


class ProviderError(Exception):
    """Raised when a speech provider call fails.

    ``status_code`` is None for transport failures (connection, timeout,
    missing credentials).
    """

    def __init__(self, provider: str, status_code: int | None, message: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.message = message
        status = f" {status_code}" if status_code is not None else ""
        super().__init__(f"{provider} TTS error{status}: {message[:500]}")


class SynthesisFailedError(Exception):
    """Raised when every configured provider failed."""

    def __init__(self, errors: list[ProviderError]) -> None:
        self.errors = errors
        summary = "; ".join(str(e) for e in errors) or "no providers configured"
        super().__init__(f"All speech providers failed: {summary}")
