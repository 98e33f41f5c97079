"""Rule-based pattern matching over article text."""

from __future__ import annotations

import re
from typing import Callable, List, Sequence

from .config import EngineConfig, load_config
from .errors import InvalidInputError, RuleCompilationError
from .heuristics import HEURISTICS, Span
from .types import DetectionRule, PatternMatch, ScanResult, SEVERITIES

Finder = Callable[[str], List[Span]]


def compile_rule(rule: DetectionRule, config: EngineConfig) -> Finder | None:
    """Return a span finder for the rule, or None when it never matches.

    Raises :class:`RuleCompilationError` when the pattern is malformed.
    """

    if rule.severity not in SEVERITIES:
        raise RuleCompilationError(rule.id, f"unknown severity {rule.severity!r}")

    flags = 0 if rule.case_sensitive else re.IGNORECASE
    if rule.pattern_type == "exact":
        pattern = re.compile(re.escape(rule.pattern), flags)
    elif rule.pattern_type == "regex":
        try:
            pattern = re.compile(rule.pattern, flags)
        except re.error as exc:
            raise RuleCompilationError(rule.id, str(exc)) from exc
    elif rule.pattern_type == "structural":
        heuristic = HEURISTICS.get(rule.pattern.strip().lower())
        if heuristic is None:
            raise RuleCompilationError(rule.id, f"unknown structural heuristic {rule.pattern!r}")
        return lambda text: heuristic(text, config)
    elif rule.pattern_type == "ai_detection":
        # Semantic detection runs outside the engine.
        return None
    else:
        raise RuleCompilationError(rule.id, f"unknown pattern type {rule.pattern_type!r}")

    # Zero-width hits would break the non-empty span invariant.
    return lambda text: [match.span() for match in pattern.finditer(text) if match.end() > match.start()]


def match_rules(
    text: str,
    rules: Sequence[DetectionRule],
    config: EngineConfig | None = None,
) -> ScanResult:
    """Scan ``text`` with every active rule.

    Rules that fail to compile are skipped; their errors are returned in
    :attr:`ScanResult.errors` so the caller can report them. Matches are
    ordered by start offset, longer spans first.
    """

    if not isinstance(text, str):
        raise InvalidInputError("content must be a string")
    engine_config = config or load_config(None)

    matches: List[PatternMatch] = []
    errors: List[RuleCompilationError] = []
    for rule in rules:
        if not isinstance(rule, DetectionRule):
            raise InvalidInputError(f"expected DetectionRule, got {type(rule).__name__}")
        if not rule.active or not rule.pattern:
            continue
        try:
            finder = compile_rule(rule, engine_config)
        except RuleCompilationError as exc:
            errors.append(exc)
            continue
        if finder is None:
            continue

        for start, end in finder(text):
            matches.append(
                PatternMatch(
                    rule_id=rule.id,
                    matched_text=text[start:end],
                    category=rule.category,
                    severity=rule.severity,
                    start=start,
                    end=end,
                    rule_name=rule.name,
                    replacement_options=tuple(rule.replacement_options),
                )
            )

    matches.sort(key=lambda match: (match.start, -match.length))
    return ScanResult(matches=tuple(matches), errors=tuple(errors))
