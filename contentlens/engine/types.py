"""Typed data structures used by the detection and linking engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import RuleCompilationError

SEVERITIES = ("low", "medium", "high")
PATTERN_TYPES = ("exact", "regex", "structural", "ai_detection")


@dataclass(frozen=True)
class DetectionRule:
    """A configured text-matching criterion tagged with category and severity."""

    id: str
    pattern: str
    category: str = "other"
    severity: str = "medium"
    active: bool = True
    name: str = ""
    description: Optional[str] = None
    pattern_type: str = "exact"
    replacement_options: Tuple[str, ...] = ()
    case_sensitive: bool = False


@dataclass(frozen=True)
class PatternMatch:
    """A single occurrence of a rule in the source text (half-open span)."""

    rule_id: str
    matched_text: str
    category: str
    severity: str
    start: int
    end: int
    rule_name: str = ""
    replacement_options: Tuple[str, ...] = ()

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "PatternMatch") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ScanResult:
    """Raw matcher output together with the rules that failed to compile."""

    matches: Tuple[PatternMatch, ...] = ()
    errors: Tuple[RuleCompilationError, ...] = ()

    @property
    def skipped_rules(self) -> Tuple[str, ...]:
        return tuple(error.rule_id for error in self.errors)


@dataclass(frozen=True)
class DetectionResult:
    """Aggregated match report for one detection pass."""

    matches: Tuple[PatternMatch, ...] = ()
    total_matches: int = 0
    matches_by_category: Dict[str, int] = field(default_factory=dict)
    matches_by_severity: Dict[str, int] = field(default_factory=dict)
    ai_score: float = 0.0
    word_count: int = 0
    skipped_rules: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IndexedPage:
    """A previously crawled page available as an internal link target."""

    id: str
    url: str
    title: Optional[str] = None
    summary: Optional[str] = None
    key_topics: Tuple[str, ...] = ()
    meta_description: Optional[str] = None
    word_count: Optional[int] = None


@dataclass(frozen=True)
class RelevanceScore:
    """Score breakdown for one (article, page) pairing."""

    score: int
    matched_topics: Tuple[str, ...]
    reason: str


@dataclass(frozen=True)
class LinkSuggestion:
    """Ranked internal link candidate for an article."""

    page: IndexedPage
    relevance_score: int
    matched_topics: Tuple[str, ...]
    reason: str
    suggested_anchor: str = ""


@dataclass(frozen=True)
class InsertionPoint:
    """Sentence chosen to host a link and its offset in the source content."""

    sentence: str
    position: int


@dataclass(frozen=True)
class PlacedSuggestion:
    """A ranked suggestion paired with where it would go in the article."""

    suggestion: LinkSuggestion
    insertion_point: Optional[InsertionPoint]
