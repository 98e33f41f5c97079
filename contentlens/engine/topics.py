"""Frequency-based topic extraction."""

from __future__ import annotations

from collections import Counter
from typing import List

from .config import EngineConfig, load_config
from .errors import InvalidInputError
from .text import topic_tokens


def extract_topics(
    text: str,
    max_topics: int | None = None,
    config: EngineConfig | None = None,
) -> List[str]:
    """Return the most frequent significant tokens of ``text``.

    Tokens shorter than ``min_token_length`` and stop words are dropped, and
    only tokens seen at least ``min_frequency`` times are kept. Ordering is
    by frequency descending, then by first appearance.
    """

    if not isinstance(text, str):
        raise InvalidInputError("content must be a string")
    engine_config = config or load_config(None)
    settings = engine_config.section("topics")
    if max_topics is None:
        max_topics = int(settings.get("max_topics", 20))
    if isinstance(max_topics, bool) or not isinstance(max_topics, int) or max_topics < 0:
        raise InvalidInputError(f"max_topics must be a non-negative integer, got {max_topics!r}")

    min_length = int(settings.get("min_token_length", 4))
    min_frequency = int(settings.get("min_frequency", 2))
    stop_words = engine_config.stop_words

    counts = Counter(token for token in topic_tokens(text) if len(token) >= min_length)

    # Counter keeps insertion order, so a stable sort breaks ties by first appearance
    ranked = sorted(
        (token for token, count in counts.items() if count >= min_frequency and token not in stop_words),
        key=lambda token: counts[token],
        reverse=True,
    )
    return ranked[:max_topics]
