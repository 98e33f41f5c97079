"""Shared text utilities for the engine."""

from __future__ import annotations

import re
from typing import List, Tuple

_PUNCT_RE = re.compile(r"[^\w\s]", re.ASCII)
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s+")


def word_count(text: str) -> int:
    """Count whitespace-separated words."""

    return len(text.split())


def topic_tokens(text: str) -> List[str]:
    """Lowercase, blank out punctuation and split on whitespace.

    The word class is ASCII so accented letters break tokens the same way
    stored page topics were produced.
    """

    return _PUNCT_RE.sub(" ", text.lower()).split()


def split_sentences(text: str) -> List[Tuple[int, str]]:
    """Split on whitespace following ``.``, ``!`` or ``?``.

    Returns ``(offset, sentence)`` pairs. Abbreviations and decimals such as
    "e.g. this" or "3. 5" produce extra breaks; that is accepted.
    """

    sentences: List[Tuple[int, str]] = []
    cursor = 0
    for match in _SENTENCE_BREAK_RE.finditer(text):
        sentences.append((cursor, text[cursor:match.start()]))
        cursor = match.end()
    sentences.append((cursor, text[cursor:]))
    return sentences
