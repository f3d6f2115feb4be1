"""Shared text utilities for the linking engine."""

from __future__ import annotations

import re
from typing import Iterator, Sequence, Tuple

Range = Tuple[int, int]

# Characters accepted on either side of a plain-prose match.
_BOUNDARY_RE = re.compile(r"[\s.,;:!?\-()\[\]\"'<>/]")

# Words that may stay lowercase inside a title requiring capitals ("the Emperor").
_CASE_EXEMPT_WORDS = {"the", "of"}


def compile_term(term: str, *, case_sensitive: bool = False) -> re.Pattern[str]:
    """Return a literal pattern for ``term``."""

    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(re.escape(term), flags)


def iter_matches(pattern: re.Pattern[str], text: str, start: int = 0) -> Iterator[re.Match[str]]:
    """Yield non-overlapping matches of ``pattern`` in ``text``.

    Each call returns a fresh generator, so abandoning one scan never leaks a
    cursor into the next.
    """

    position = start
    length = len(text)
    while position <= length:
        match = pattern.search(text, position)
        if match is None:
            return
        yield match
        position = match.end() if match.end() > match.start() else match.end() + 1


def is_whole_word(text: str, position: int, length: int) -> bool:
    """Return True when the span is delimited by boundaries on both sides."""

    before = text[position - 1] if position > 0 else " "
    after = text[position + length] if position + length < len(text) else " "
    return bool(_BOUNDARY_RE.match(before)) and bool(_BOUNDARY_RE.match(after))


def has_proper_capitalization(matched_text: str, term_key: str) -> bool:
    """Check that every significant word of the matched text starts upper-cased.

    ``term_key`` is the lowercase dictionary key the match came from; its words
    decide which positions are exempt.
    """

    matched_words = matched_text.split(" ")
    term_words = term_key.split(" ")
    if len(matched_words) != len(term_words):
        return False

    for matched_word, term_word in zip(matched_words, term_words):
        if term_word in _CASE_EXEMPT_WORDS:
            continue
        first = matched_word[:1]
        if first != first.upper():
            return False
    return True


def overlaps(start: int, end: int, ranges: Sequence[Range]) -> bool:
    """Return True when ``[start, end)`` intersects any of ``ranges``."""

    for range_start, range_end in ranges:
        if start < range_end and range_start < end:
            return True
    return False


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, ending with an ellipsis when shortened."""

    if limit <= 0 or len(text) <= limit:
        return text
    return f"{text[:limit].rstrip()}…"
