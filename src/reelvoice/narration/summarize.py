"""Language-model summarization of a transcript into a narration script (optional).

Summarization is never a hard failure point: every error yields None and
the caller falls back to rule-based distillation.
"""

from __future__ import annotations

import os
import time

import anthropic

from reelvoice.models.config import SummarizerConfig
from reelvoice.narration.distill import word_count
from reelvoice.utils.progress import log_step, log_warning
from reelvoice.utils.retry import retry_transient

SYSTEM_PROMPT = """You are an expert content summarizer who distills video transcripts \
into concise, engaging voiceover scripts.

Your summary must:
1. Capture the key points of the original transcript
2. Be EXACTLY {target} words long so the voiceover fills the video
3. Flow naturally when read aloud
4. Keep the tone and style of the original
5. Include the most important information from the whole transcript, not just the start
6. End with a complete sentence, never cut off mid-sentence

The summary must stand on its own without further context."""

USER_PROMPT = """Create a voiceover summary of this video transcript:

{transcript}

The summary should be EXACTLY {target} words. It is better to be slightly \
shorter than to end on an incomplete sentence. Return only the summary text."""


class TranscriptSummarizer:
    """Summarizes transcripts through the Anthropic Messages API."""

    name = "anthropic"

    def __init__(
        self,
        config: SummarizerConfig | None = None,
        *,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.config = config or SummarizerConfig()
        self._client = client

    def _get_client(self) -> anthropic.AsyncAnthropic | None:
        if self._client is not None:
            return self._client
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            log_warning(
                "ANTHROPIC_API_KEY not set — falling back to rule-based distillation."
            )
            return None
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=self.config.timeout_seconds,
        )
        return self._client

    async def summarize(self, transcript: str, target_word_count: int) -> str | None:
        """Return a summary of about ``target_word_count`` words, or None."""
        if not self.config.enabled:
            return None

        client = self._get_client()
        if client is None:
            return None

        limit = self.config.max_input_chars
        excerpt = transcript if len(transcript) <= limit else transcript[:limit] + "..."

        log_step(
            "Summarize",
            f"Requesting {target_word_count}-word summary (model: {self.config.model})",
        )
        start_time = time.time()

        try:
            text = await self._request(client, excerpt, target_word_count)
        except Exception as e:
            log_warning(f"Summarization failed: {e}. Falling back to rule-based distillation.")
            return None

        text = text.strip()
        if not text:
            log_warning("Summarizer returned empty text. Falling back to rule-based distillation.")
            return None

        log_step(
            "Summarize",
            f"Summary is {word_count(text)} words (requested {target_word_count}, "
            f"{time.time() - start_time:.1f}s)",
        )
        return text

    @retry_transient((anthropic.APIConnectionError,), max_attempts=2)
    async def _request(
        self,
        client: anthropic.AsyncAnthropic,
        transcript: str,
        target_word_count: int,
    ) -> str:
        message = await client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            system=SYSTEM_PROMPT.format(target=target_word_count),
            messages=[
                {
                    "role": "user",
                    "content": USER_PROMPT.format(
                        transcript=transcript, target=target_word_count
                    ),
                }
            ],
        )
        return "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
