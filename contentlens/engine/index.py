"""Coordinator for the detection and linking entry points."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from . import aggregate as aggregate_module
from . import matcher as matcher_module
from . import placement as placement_module
from . import rank as rank_module
from .config import EngineConfig, load_config
from .errors import InvalidInputError
from .text import word_count
from .topics import extract_topics
from .types import DetectionResult, DetectionRule, IndexedPage, PlacedSuggestion


def detect_patterns(
    content: str,
    rules: Sequence[DetectionRule],
    config: EngineConfig | None = None,
) -> DetectionResult:
    """Scan ``content`` with ``rules`` and return the aggregated report.

    Rules whose pattern cannot be compiled are listed in
    :attr:`DetectionResult.skipped_rules`; the rest of the scan still runs.
    """

    engine_config = config or load_config(None)
    scan = matcher_module.match_rules(content, rules, engine_config)
    return aggregate_module.aggregate_matches(
        scan.matches,
        content,
        engine_config,
        skipped_rules=scan.skipped_rules,
    )


def extract_topics_from_content(content: str, config: EngineConfig | None = None) -> List[str]:
    """Return the configured number of topics for an article or crawled page."""

    return extract_topics(content, None, config)


def build_indexed_page(
    id: str,
    url: str,
    content: str,
    *,
    title: Optional[str] = None,
    summary: Optional[str] = None,
    meta_description: Optional[str] = None,
    config: EngineConfig | None = None,
) -> IndexedPage:
    """Characterize crawled page content for the link index."""

    if not isinstance(content, str):
        raise InvalidInputError("content must be a string")
    return IndexedPage(
        id=id,
        url=url,
        title=title,
        summary=summary,
        key_topics=tuple(extract_topics_from_content(content, config)),
        meta_description=meta_description,
        word_count=word_count(content),
    )


def suggest_links(
    content: str,
    title: Optional[str],
    pages: Sequence[IndexedPage],
    *,
    article_topics: Sequence[str] | None = None,
    min_score: int | None = None,
    max_results: int | None = None,
    exclude_urls: Iterable[str] = (),
    config: EngineConfig | None = None,
) -> List[PlacedSuggestion]:
    """Rank ``pages`` for the article and locate an insertion point for each.

    Topics are extracted from ``content`` unless ``article_topics`` is
    given. The insertion point is searched with the suggestion's matched
    topics, falling back to the page's own topics when none matched.
    """

    if not isinstance(content, str):
        raise InvalidInputError("content must be a string")
    engine_config = config or load_config(None)
    ranking = engine_config.section("ranking")
    if article_topics is None:
        topics = extract_topics_from_content(content, engine_config)
    else:
        topics = list(article_topics)

    suggestions = rank_module.rank_pages_by_relevance(
        pages,
        topics,
        title,
        min_score=ranking.get("min_score", 20) if min_score is None else min_score,
        max_results=ranking.get("max_results", 10) if max_results is None else max_results,
        exclude_urls=exclude_urls,
        config=engine_config,
    )

    placed: List[PlacedSuggestion] = []
    for suggestion in suggestions:
        link_topics = suggestion.matched_topics or suggestion.page.key_topics
        point = placement_module.find_best_insertion_point(content, link_topics)
        placed.append(PlacedSuggestion(suggestion=suggestion, insertion_point=point))
    return placed
