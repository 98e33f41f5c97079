"""Structural heuristics usable as ``structural`` detection rules.

A structural rule names one of these heuristics in its ``pattern`` field.
Each heuristic returns the character spans it flags in the text.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Tuple

from .config import EngineConfig

Span = Tuple[int, int]
Heuristic = Callable[[str, EngineConfig], List[Span]]

_EM_DASH_RE = re.compile(r"—| -- ")
_BOLD_HEADER_RE = re.compile(r"\*\*[^*\n]+[.:]\*\*(?=\s+\S)")
_BULLET_LINE_RE = re.compile(r"^(\s*[-*•]\s|\s*\d+[.)]\s)")
_TRIADIC_RE = re.compile(r"\b\w+, \w+, and \w+\b", re.IGNORECASE)


def em_dashes(text: str, config: EngineConfig) -> List[Span]:
    return [match.span() for match in _EM_DASH_RE.finditer(text)]


def bold_headers(text: str, config: EngineConfig) -> List[Span]:
    """Bold lead-ins such as ``**Speed:** explanation``."""

    return [match.span() for match in _BOLD_HEADER_RE.finditer(text)]


def triads(text: str, config: EngineConfig) -> List[Span]:
    return [match.span() for match in _TRIADIC_RE.finditer(text)]


def bullet_runs(text: str, config: EngineConfig) -> List[Span]:
    """Runs of consecutive bullet lines at least ``bullet_run_min`` long.

    One span covers the whole run, from the first bullet to the end of the
    last bullet line (newline excluded).
    """

    minimum = int(config.section("heuristics").get("bullet_run_min", 6))
    spans: List[Span] = []
    run_start = run_end = -1
    run_length = 0
    offset = 0
    for line in text.splitlines(keepends=True):
        stripped = line.rstrip("\r\n")
        if _BULLET_LINE_RE.match(stripped):
            if run_length == 0:
                run_start = offset
            run_end = offset + len(stripped)
            run_length += 1
        else:
            if run_length >= minimum:
                spans.append((run_start, run_end))
            run_length = 0
        offset += len(line)
    if run_length >= minimum:
        spans.append((run_start, run_end))
    return spans


HEURISTICS: Dict[str, Heuristic] = {
    "em-dash": em_dashes,
    "bold-header": bold_headers,
    "triad": triads,
    "bullet-run": bullet_runs,
}
