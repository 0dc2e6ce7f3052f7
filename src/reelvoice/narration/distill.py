"""Rule-based transcript distillation to a word budget.

The distiller keeps whole sentences and draws them from three zones of the
transcript (leading quarter, a window around the midpoint, trailing
quarter) so a short narration still covers the whole video rather than
just its introduction.

Sentence splitting is a heuristic: a boundary is a terminal mark followed
by whitespace and a capital letter. Abbreviations such as "Dr. Smith" are
split too; that is accepted.
"""

from __future__ import annotations

import math
import re

TERMINAL_MARKS = (".", "!", "?")

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")
_ANY_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_CLOSERS = "\"')]”’"
_DANGLING = ",;:-–— "


def word_count(text: str) -> int:
    return len(text.split())


def split_sentences(text: str) -> list[str]:
    """Split on a terminal mark followed by whitespace and a capital letter."""
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text.strip()) if s.strip()]


def ends_with_terminal(text: str) -> bool:
    return text.rstrip().endswith(TERMINAL_MARKS)


def terminate(text: str) -> str:
    """Make the last character a terminal mark (word count unchanged).

    A mark tucked inside closing quotes or brackets moves outside them:
    `He said "hi."` becomes `He said "hi".`
    """
    text = text.strip()
    if not text or ends_with_terminal(text):
        return text
    body = text.rstrip(_CLOSERS)
    if body.endswith(TERMINAL_MARKS):
        return body[:-1] + text[len(body):] + body[-1]
    return text.rstrip(_DANGLING) + "."


def hard_cut(text: str, max_words: int) -> str:
    """Last-resort cut at a word boundary."""
    if max_words <= 0:
        return ""
    return terminate(" ".join(text.split()[:max_words]))


def truncate_at_sentence_boundary(text: str, max_words: int) -> str:
    """Keep whole sentences, in order, while they fit in ``max_words``.

    Any terminal mark followed by whitespace ends a sentence here. If the
    first sentence alone is too long it is hard-cut.
    """
    if max_words <= 0:
        return ""
    if word_count(text) <= max_words:
        return text.strip()

    sentences = [s.strip() for s in _ANY_BOUNDARY.split(text.strip()) if s.strip()]
    kept: list[str] = []
    total = 0
    for sentence in sentences:
        words = word_count(sentence)
        if total + words > max_words:
            break
        kept.append(sentence)
        total += words

    if not kept:
        return hard_cut(sentences[0] if sentences else text, max_words)
    return terminate(" ".join(kept))


def zone_indices(sentence_count: int, fraction: float = 0.25) -> list[int]:
    """Sentence indices from the leading, middle and trailing zones, in order."""
    n = sentence_count
    if n <= 3:
        return list(range(n))

    count = max(1, math.floor(n * fraction))
    middle = n // 2
    half = count // 2

    leading = range(0, count)
    centre = range(max(0, middle - half), min(n, middle + half + count % 2))
    trailing = range(n - count, n)

    seen: set[int] = set()
    ordered: list[int] = []
    for index in (*leading, *centre, *trailing):
        if index not in seen:
            seen.add(index)
            ordered.append(index)
    return ordered


def _accumulate(candidates: list[str], max_words: int) -> str:
    selected: list[str] = []
    total = 0
    for sentence in candidates:
        words = word_count(sentence)
        if total + words > max_words:
            if not selected:
                return hard_cut(sentence, max_words)
            break
        selected.append(sentence)
        total += words
        if total == max_words:
            break
    return " ".join(selected)


def _micro(sentences: list[str], max_words: int) -> str:
    first = sentences[0]
    first_words = word_count(first)
    if first_words > max_words:
        return hard_cut(first, max_words)
    if len(sentences) > 1:
        last = sentences[-1]
        if first_words + word_count(last) <= max_words:
            return f"{first} {last}"
    return first


def distill(
    source_text: str,
    target_word_count: int,
    *,
    micro_word_limit: int = 20,
    zone_fraction: float = 0.25,
) -> str:
    """Reduce ``source_text`` to at most ``target_word_count`` words.

    Returns the source unchanged when it already fits. Budgets of
    ``micro_word_limit`` words or fewer take only the first sentence, plus
    the last one when both fit.
    """
    if target_word_count < 0:
        raise ValueError(f"target_word_count must be >= 0, got {target_word_count}")
    if word_count(source_text) <= target_word_count:
        return source_text
    if target_word_count == 0:
        return ""

    sentences = split_sentences(source_text)
    if target_word_count <= micro_word_limit:
        script = _micro(sentences, target_word_count)
    else:
        candidates = [sentences[i] for i in zone_indices(len(sentences), zone_fraction)]
        script = _accumulate(candidates, target_word_count)

    if word_count(script) > target_word_count:
        return hard_cut(script, target_word_count)
    return terminate(script)
