"""Relevance scoring and ranking of candidate link targets."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .config import EngineConfig, load_config
from .errors import InvalidInputError
from .filters import allow_candidate, exclusion_set, validate_page
from .placement import suggest_anchor_text
from .types import IndexedPage, LinkSuggestion, RelevanceScore


def calculate_relevance_score(
    article_topics: Sequence[str],
    article_title: str | None,
    page: IndexedPage,
    config: EngineConfig | None = None,
) -> RelevanceScore:
    """Score how well ``page`` fits as a link target for the article.

    Topic overlap, title and summary points are summed and the running
    total is clamped to the sum of their caps before the length bonus is
    added on top. The final score is clamped to ``score_cap``.
    """

    validate_page(page)
    topics = _normalize_topics(article_topics)
    title = _normalize_title(article_title)
    weights = (config or load_config(None)).section("relevance")

    total = 0.0
    reasons: List[str] = []

    page_topics = {topic.lower() for topic in page.key_topics}
    matched = [topic for topic in topics if topic in page_topics]
    if matched:
        total += min(len(matched) * weights["topic_points"], weights["topic_cap"])
        reasons.append(f"{len(matched)} topic match{'es' if len(matched) > 1 else ''}")

    page_title = (page.title or "").lower()
    title_words = [word for word in title.split() if len(word) >= weights["title_min_word_length"]]
    title_hits = sum(1 for word in title_words if word in page_title)
    if title_hits:
        total += min(title_hits * weights["title_points"], weights["title_cap"])
        reasons.append("title keyword match")

    summary = (page.summary or "").lower()
    for topic in topics[: weights["summary_topics"]]:
        if topic in summary:
            total += weights["summary_points"]
    total = min(total, weights["topic_cap"] + weights["title_cap"] + weights["summary_cap"])
    if summary and any(topic in summary for topic in topics):
        reasons.append("summary relevance")

    total += _length_points(page.word_count or 0, weights["length_bands"])

    score = int(math.floor(min(total, weights["score_cap"]) + 0.5))
    return RelevanceScore(
        score=max(score, 0),
        matched_topics=tuple(matched),
        reason=", ".join(reasons) if reasons else "general relevance",
    )


def rank_pages_by_relevance(
    pages: Sequence[IndexedPage],
    article_topics: Sequence[str],
    article_title: str | None,
    min_score: int = 20,
    max_results: int = 10,
    exclude_urls: Iterable[str] = (),
    config: EngineConfig | None = None,
) -> List[LinkSuggestion]:
    """Return the best scoring pages, highest score first.

    Excluded URLs (case-insensitive) are dropped before scoring. Equal
    scores keep their input order.
    """

    if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 0:
        raise InvalidInputError(f"max_results must be a non-negative integer, got {max_results!r}")
    engine_config = config or load_config(None)
    for page in pages:
        validate_page(page)
    excluded = exclusion_set(exclude_urls)

    suggestions: List[LinkSuggestion] = []
    for page in pages:
        if not allow_candidate(page, excluded):
            continue
        result = calculate_relevance_score(article_topics, article_title, page, engine_config)
        if result.score < min_score:
            continue
        suggestions.append(
            LinkSuggestion(
                page=page,
                relevance_score=result.score,
                matched_topics=result.matched_topics,
                reason=result.reason,
                suggested_anchor=suggest_anchor_text(page),
            )
        )

    suggestions.sort(key=lambda item: item.relevance_score, reverse=True)
    return suggestions[:max_results]


def _normalize_topics(topics: Sequence[str]) -> List[str]:
    if isinstance(topics, str):
        raise InvalidInputError("article topics must be a sequence of strings, not a string")
    normalized: List[str] = []
    for topic in topics:
        if not isinstance(topic, str):
            raise InvalidInputError(f"article topic must be a string, got {type(topic).__name__}")
        normalized.append(topic.lower())
    return normalized


def _normalize_title(title: Optional[str]) -> str:
    if title is None:
        return ""
    if not isinstance(title, str):
        raise InvalidInputError("article title must be a string")
    return title.lower()


def _length_points(words: int, bands: Sequence[Sequence[Optional[int]]]) -> float:
    for low, high, points in bands:
        if words >= low and (high is None or words <= high):
            return points
    return 0
