"""Pattern detection and internal-link relevance engine."""

from .aggregate import aggregate_matches, apply_replacements, group_matches_by_rule, score_band
from .config import EngineConfig, load_config
from .errors import EngineError, InvalidInputError, RuleCompilationError
from .filters import search_pages_by_topics
from .index import build_indexed_page, detect_patterns, extract_topics_from_content, suggest_links
from .matcher import match_rules
from .placement import find_best_insertion_point, suggest_anchor_text
from .rank import calculate_relevance_score, rank_pages_by_relevance
from .topics import extract_topics
from .types import (
    DetectionResult,
    DetectionRule,
    IndexedPage,
    InsertionPoint,
    LinkSuggestion,
    PatternMatch,
    PlacedSuggestion,
    RelevanceScore,
    ScanResult,
)

__all__ = [
    "DetectionResult",
    "DetectionRule",
    "EngineConfig",
    "EngineError",
    "IndexedPage",
    "InsertionPoint",
    "InvalidInputError",
    "LinkSuggestion",
    "PatternMatch",
    "PlacedSuggestion",
    "RelevanceScore",
    "RuleCompilationError",
    "ScanResult",
    "aggregate_matches",
    "apply_replacements",
    "build_indexed_page",
    "calculate_relevance_score",
    "detect_patterns",
    "extract_topics",
    "extract_topics_from_content",
    "find_best_insertion_point",
    "group_matches_by_rule",
    "load_config",
    "match_rules",
    "rank_pages_by_relevance",
    "score_band",
    "search_pages_by_topics",
    "suggest_anchor_text",
    "suggest_links",
]
