"""Placement logic for selecting where and how to insert links."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from .errors import InvalidInputError
from .text import split_sentences
from .types import IndexedPage, InsertionPoint

_ANCHOR_FILLER = {"the", "a", "an", "and", "or", "to", "for", "of", "in", "on"}
_EXTENSION_RE = re.compile(r"\.[^.]+$")


def find_best_insertion_point(content: str, link_topics: Sequence[str]) -> Optional[InsertionPoint]:
    """Return the sentence mentioning the most link topics.

    Each distinct topic counts once per sentence (case-insensitive substring
    match). The earliest sentence wins ties; ``None`` when no sentence
    mentions any topic.

    ``position`` is the sentence's exact offset in ``content``, so runs of
    whitespace between sentences are accounted for rather than assumed to
    be a single character.
    """

    if not isinstance(content, str):
        raise InvalidInputError("content must be a string")
    if isinstance(link_topics, str):
        raise InvalidInputError("link topics must be a sequence of strings, not a string")
    topics = [topic for topic in dict.fromkeys(str(topic).lower() for topic in link_topics) if topic]
    if not content or not topics:
        return None

    best: Optional[InsertionPoint] = None
    best_score = 0
    for position, sentence in split_sentences(content):
        lowered = sentence.lower()
        score = sum(1 for topic in topics if topic in lowered)
        if score > best_score:
            best_score = score
            best = InsertionPoint(sentence=sentence, position=position)
    return best


def suggest_anchor_text(page: IndexedPage) -> str:
    """Derive fallback anchor text for a page without asking a model."""

    if page.title and page.title.strip():
        title = page.title.strip()
        words = title.split()
        if 2 <= len(words) <= 5:
            return title
        if len(words) > 5:
            meaningful = [word for word in words if word.lower() not in _ANCHOR_FILLER]
            return " ".join(meaningful[:4])
        if page.key_topics:
            return f"{title} {_first_topic(page)}"[:50]
        return title

    if page.key_topics:
        topic = _first_topic(page)
        return topic[:1].upper() + topic[1:]

    parts = [part for part in page.url.split("/") if part]
    last = parts[-1] if parts else "this page"
    return _EXTENSION_RE.sub("", last.replace("-", " "))


def _first_topic(page: IndexedPage) -> str:
    # Unordered collections fall back to the alphabetically first topic.
    if isinstance(page.key_topics, (list, tuple)):
        return page.key_topics[0]
    return min(page.key_topics)
