"""Service functions that adapt request payloads to the engine.

These helpers keep the views thin: they turn decoded JSON records into
engine data types, reduce editor HTML to plain text, and shape engine
results into the JSON documents returned by the API. Payload keys are
accepted in both camelCase (as sent by the dashboard) and snake_case
(as stored in the database).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from bs4 import BeautifulSoup  # type: ignore
from django.conf import settings

from .engine import (
    DetectionResult,
    DetectionRule,
    EngineConfig,
    IndexedPage,
    InvalidInputError,
    PatternMatch,
    PlacedSuggestion,
    load_config,
    score_band,
)

# Tags whose text never reaches the analysed prose
SKIP_TAGS: set[str] = {'script', 'style', 'noscript', 'template'}


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    """Load the engine configuration named by ``CONTENTLENS_ENGINE_CONFIG``."""

    return load_config(getattr(settings, 'CONTENTLENS_ENGINE_CONFIG', None))


def html_to_text(html: str) -> str:
    """Return the visible text of ``html`` with one line per block.

    Offsets reported for the returned text refer to this plain-text
    rendition, not to the original markup.
    """

    if not html:
        return html

    try:
        soup = BeautifulSoup(html, 'lxml')
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        soup = BeautifulSoup(html, 'html.parser')

    for tag in soup.find_all(sorted(SKIP_TAGS)):
        tag.decompose()

    lines = (line.strip() for line in soup.get_text('\n').splitlines())
    return '\n'.join(line for line in lines if line)


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _string_tuple(value: Any, label: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise InvalidInputError(f'{label} must be a list of strings')
    if not all(isinstance(item, str) for item in value):
        raise InvalidInputError(f'{label} must be a list of strings')
    return tuple(value)


def rules_from_payload(records: Iterable[Any]) -> List[DetectionRule]:
    """Convert decoded rule records into :class:`DetectionRule` objects."""

    rules: List[DetectionRule] = []
    for index, record in enumerate(records, start=1):
        if not isinstance(record, Mapping):
            raise InvalidInputError(f'Rule {index} must be an object.')
        rule_id = _pick(record, 'id')
        if rule_id is None or str(rule_id) == '':
            raise InvalidInputError(f'Rule {index} is missing an id.')
        pattern = _pick(record, 'pattern', default='')
        if not isinstance(pattern, str):
            raise InvalidInputError(f'Rule {rule_id} pattern must be a string.')
        rules.append(
            DetectionRule(
                id=str(rule_id),
                pattern=pattern,
                category=str(_pick(record, 'category', default='other')),
                severity=str(_pick(record, 'severity', default='medium')),
                active=bool(_pick(record, 'active', 'isActive', 'is_active', default=True)),
                name=str(_pick(record, 'name', default='')),
                description=_pick(record, 'description'),
                pattern_type=str(_pick(record, 'patternType', 'pattern_type', default='exact')),
                replacement_options=_string_tuple(
                    _pick(record, 'replacementOptions', 'replacement_options'),
                    f'Rule {rule_id} replacement options',
                ),
                case_sensitive=bool(_pick(record, 'caseSensitive', 'case_sensitive', default=False)),
            )
        )
    return rules


def pages_from_payload(records: Iterable[Any]) -> List[IndexedPage]:
    """Convert decoded page records into :class:`IndexedPage` objects."""

    pages: List[IndexedPage] = []
    for index, record in enumerate(records, start=1):
        if not isinstance(record, Mapping):
            raise InvalidInputError(f'Page {index} must be an object.')
        page_id = _pick(record, 'id')
        url = _pick(record, 'url')
        if page_id is None or str(page_id) == '' or not isinstance(url, str) or not url:
            raise InvalidInputError(f'Page {index} requires an id and a url.')
        word_count = _pick(record, 'wordCount', 'word_count')
        if word_count is not None and (isinstance(word_count, bool) or not isinstance(word_count, int)):
            raise InvalidInputError(f'Page {page_id} word count must be an integer.')
        for key in ('title', 'summary', 'metaDescription', 'meta_description'):
            if record.get(key) is not None and not isinstance(record[key], str):
                raise InvalidInputError(f'Page {page_id} {key} must be a string.')
        pages.append(
            IndexedPage(
                id=str(page_id),
                url=url,
                title=_pick(record, 'title'),
                summary=_pick(record, 'summary'),
                key_topics=_string_tuple(_pick(record, 'keyTopics', 'key_topics'), f'Page {page_id} topics'),
                meta_description=_pick(record, 'metaDescription', 'meta_description'),
                word_count=word_count,
            )
        )
    return pages


def match_to_payload(match: PatternMatch) -> Dict[str, Any]:
    return {
        'ruleId': match.rule_id,
        'ruleName': match.rule_name,
        'category': match.category,
        'severity': match.severity,
        'matchedText': match.matched_text,
        'replacementOptions': list(match.replacement_options),
        'location': {'start': match.start, 'end': match.end},
    }


def detection_to_payload(result: DetectionResult, config: EngineConfig) -> Dict[str, Any]:
    """Shape a detection report the way the humanization screen expects it."""

    return {
        'matches': [match_to_payload(match) for match in result.matches],
        'totalMatches': result.total_matches,
        'matchesByCategory': dict(result.matches_by_category),
        'matchesBySeverity': dict(result.matches_by_severity),
        'aiScore': result.ai_score,
        'band': score_band(result.ai_score, config),
        'wordCount': result.word_count,
        'skippedRules': list(result.skipped_rules),
    }


def suggestions_to_payload(placed: Sequence[PlacedSuggestion]) -> List[Dict[str, Any]]:
    """Flatten ranked suggestions and their insertion points for the API."""

    payload: List[Dict[str, Any]] = []
    for item in placed:
        suggestion = item.suggestion
        point = item.insertion_point
        payload.append(
            {
                'pageId': suggestion.page.id,
                'url': suggestion.page.url,
                'title': suggestion.page.title,
                'summary': suggestion.page.summary,
                'relevanceScore': suggestion.relevance_score,
                'matchedTopics': list(suggestion.matched_topics),
                'reason': suggestion.reason,
                'suggestedAnchor': suggestion.suggested_anchor,
                'insertionPoint': (
                    {'sentence': point.sentence, 'position': point.position} if point else None
                ),
            }
        )
    return payload
