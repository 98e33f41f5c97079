"""Error taxonomy for the engine.

Engine functions raise these and never recover from them; the calling
application decides whether to retry, degrade or surface the problem.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInputError(EngineError, ValueError):
    """The call was rejected as a whole because an argument is malformed."""


class RuleCompilationError(EngineError):
    """A single detection rule could not be compiled.

    Scans collect these per rule and keep going; the offending rule id is
    exposed so callers can report which rules were skipped.
    """

    def __init__(self, rule_id: str, reason: str) -> None:
        super().__init__(f"Rule {rule_id!r} could not be compiled: {reason}")
        self.rule_id = rule_id
        self.reason = reason
