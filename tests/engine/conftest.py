"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Iterable, Optional

import pytest

from contentlens.engine.config import load_config
from contentlens.engine.types import DetectionRule, IndexedPage, PatternMatch


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


def make_rule(
    rule_id: str,
    pattern: str,
    *,
    category: str = "filler-phrase",
    severity: str = "medium",
    active: bool = True,
    pattern_type: str = "exact",
    case_sensitive: bool = False,
    replacement_options: Iterable[str] = (),
) -> DetectionRule:
    return DetectionRule(
        id=rule_id,
        pattern=pattern,
        category=category,
        severity=severity,
        active=active,
        name=rule_id.replace("-", " ").title(),
        pattern_type=pattern_type,
        case_sensitive=case_sensitive,
        replacement_options=tuple(replacement_options),
    )


def make_page(
    page_id: str,
    url: str,
    *,
    title: Optional[str] = None,
    summary: Optional[str] = None,
    topics: Iterable[str] = (),
    word_count: Optional[int] = None,
) -> IndexedPage:
    return IndexedPage(
        id=page_id,
        url=url,
        title=title,
        summary=summary,
        key_topics=tuple(topics),
        word_count=word_count,
    )


def make_match(
    text: str,
    start: int,
    end: int,
    *,
    rule_id: str = "rule",
    category: str = "other",
    severity: str = "medium",
) -> PatternMatch:
    return PatternMatch(
        rule_id=rule_id,
        matched_text=text[start:end],
        category=category,
        severity=severity,
        start=start,
        end=end,
    )
