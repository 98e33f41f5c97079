"""Guardrails and filtering for candidate pages."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Sequence

from .errors import InvalidInputError
from .types import IndexedPage


def validate_page(page: IndexedPage) -> None:
    """Reject pages that lack the fields scoring relies on."""

    if not isinstance(page, IndexedPage):
        raise InvalidInputError(f"expected IndexedPage, got {type(page).__name__}")
    if not isinstance(page.id, str) or not page.id:
        raise InvalidInputError("indexed page is missing an id")
    if not isinstance(page.url, str) or not page.url:
        raise InvalidInputError(f"indexed page {page.id!r} is missing a url")
    if page.word_count is not None and (
        isinstance(page.word_count, bool) or not isinstance(page.word_count, int) or page.word_count < 0
    ):
        raise InvalidInputError(f"indexed page {page.id!r} word count must be a non-negative integer")
    for label in ("title", "summary", "meta_description"):
        value = getattr(page, label)
        if value is not None and not isinstance(value, str):
            raise InvalidInputError(f"indexed page {page.id!r} {label} must be a string")
    if isinstance(page.key_topics, str) or not all(isinstance(topic, str) for topic in page.key_topics):
        raise InvalidInputError(f"indexed page {page.id!r} key_topics must be a collection of strings")


def exclusion_set(urls: Iterable[str]) -> AbstractSet[str]:
    return frozenset(url.lower() for url in urls)


def allow_candidate(page: IndexedPage, excluded: AbstractSet[str]) -> bool:
    """Return True when the page may be scored as a link target."""

    return page.url.lower() not in excluded


def search_pages_by_topics(
    pages: Sequence[IndexedPage],
    topics: Sequence[str],
    limit: int = 20,
) -> List[IndexedPage]:
    """Return pages sharing at least one topic, in input order."""

    wanted = {topic.lower() for topic in topics}
    if not wanted:
        return []
    found: List[IndexedPage] = []
    for page in pages:
        if len(found) >= limit:
            break
        if wanted & {topic.lower() for topic in page.key_topics}:
            found.append(page)
    return found
