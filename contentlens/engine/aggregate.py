"""Merging, bucketing and scoring of pattern matches."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

from .config import EngineConfig, load_config
from .errors import InvalidInputError
from .text import word_count
from .types import DetectionResult, PatternMatch


def merge_overlapping(matches: Iterable[PatternMatch], config: EngineConfig) -> List[PatternMatch]:
    """Collapse overlapping matches into union spans.

    The merged match keeps the higher severity and takes category, rule id
    and rule name from whichever side carries it; equal severities keep the
    earlier match. Touching spans stay separate.
    """

    ordered = sorted(matches, key=lambda match: (match.start, -match.length))
    merged: List[PatternMatch] = []
    for match in ordered:
        if merged and merged[-1].overlaps(match):
            merged[-1] = _merge_pair(merged[-1], match, config)
        else:
            merged.append(match)
    return merged


def _merge_pair(first: PatternMatch, second: PatternMatch, config: EngineConfig) -> PatternMatch:
    winner = second if config.severity_rank(second.severity) > config.severity_rank(first.severity) else first
    end = max(first.end, second.end)
    text = first.matched_text
    if second.end > first.end:
        text += second.matched_text[first.end - second.start:]

    options = list(first.replacement_options)
    options.extend(option for option in second.replacement_options if option not in options)

    return PatternMatch(
        rule_id=winner.rule_id,
        matched_text=text,
        category=winner.category,
        severity=winner.severity,
        start=first.start,
        end=end,
        rule_name=winner.rule_name,
        replacement_options=tuple(options),
    )


def compute_ai_score(matches: Sequence[PatternMatch], words: int, config: EngineConfig) -> float:
    """Severity-weighted match density scaled into [0, score_cap]."""

    detection = config.section("detection")
    weighted = sum(config.severity_weight(match.severity) for match in matches)
    basis = max(words, int(detection.get("min_word_basis", 100)), 1)
    raw = weighted / basis * float(detection.get("score_scale", 10000.0))
    return round(min(raw, float(detection.get("score_cap", 100.0))), 2)


def aggregate_matches(
    matches: Iterable[PatternMatch],
    text: str,
    config: EngineConfig | None = None,
    skipped_rules: Sequence[str] = (),
) -> DetectionResult:
    """Build a :class:`DetectionResult` from raw matches found in ``text``."""

    if not isinstance(text, str):
        raise InvalidInputError("content must be a string")
    engine_config = config or load_config(None)

    merged = merge_overlapping(matches, engine_config)
    words = word_count(text)
    if not merged:
        return DetectionResult(word_count=words, skipped_rules=tuple(skipped_rules))

    return DetectionResult(
        matches=tuple(merged),
        total_matches=len(merged),
        matches_by_category=dict(Counter(match.category for match in merged)),
        matches_by_severity=dict(Counter(match.severity for match in merged)),
        ai_score=compute_ai_score(merged, words, engine_config),
        word_count=words,
        skipped_rules=tuple(skipped_rules),
    )


def score_band(ai_score: float, config: EngineConfig | None = None) -> str:
    """Return ``human-like``, ``mixed`` or ``ai-patterned`` for the score."""

    detection = (config or load_config(None)).section("detection")
    if ai_score <= detection.get("band_human_max", 20):
        return "human-like"
    if ai_score <= detection.get("band_mixed_max", 50):
        return "mixed"
    return "ai-patterned"


def group_matches_by_rule(matches: Iterable[PatternMatch]) -> Dict[str, List[PatternMatch]]:
    """Group matches by rule id, keeping first-seen rule order."""

    grouped: Dict[str, List[PatternMatch]] = {}
    for match in matches:
        grouped.setdefault(match.rule_id, []).append(match)
    return grouped


def apply_replacements(text: str, replacements: Sequence[Tuple[PatternMatch, str]]) -> str:
    """Substitute each match span with its replacement.

    Replacements are applied from the end of the text backwards so earlier
    offsets stay valid. Overlapping spans are rejected.
    """

    ordered = sorted(replacements, key=lambda item: item[0].start, reverse=True)
    result = text
    boundary = len(text)
    for match, replacement in ordered:
        if match.end > boundary:
            raise InvalidInputError(f"replacement for {match.rule_id!r} overlaps another replacement")
        if not 0 <= match.start < match.end <= len(text):
            raise InvalidInputError(f"match span {match.start}:{match.end} is outside the text")
        result = result[:match.start] + replacement + result[match.end:]
        boundary = match.start
    return result
