"""Configuration helpers for the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name, {})

    def severity_weight(self, severity: str) -> float:
        weights = self.section("detection").get("severity_weights", {})
        return weights.get(severity, weights.get("low", 1))

    def severity_rank(self, severity: str) -> int:
        order = self.section("detection").get("severity_order", ["low", "medium", "high"])
        return order.index(severity) if severity in order else -1

    @property
    def stop_words(self) -> FrozenSet[str]:
        return frozenset(word.lower() for word in self.section("topics").get("stop_words", []))


DEFAULTS: Dict[str, Any] = {
    "detection": {
        "severity_order": ["low", "medium", "high"],
        "severity_weights": {"low": 1, "medium": 2, "high": 3},
        # ~5 weighted matches per 1000 words scores 50.
        "score_scale": 10000.0,
        "min_word_basis": 100,
        "score_cap": 100.0,
        "band_human_max": 20,
        "band_mixed_max": 50,
    },
    "heuristics": {
        "bullet_run_min": 6,
    },
    "topics": {
        "max_topics": 20,
        "min_token_length": 4,
        "min_frequency": 2,
        "stop_words": [
            "that", "this", "with", "from", "have", "been", "were", "will", "would",
            "could", "should", "their", "there", "which", "about", "when", "what",
            "your", "more", "some", "also", "into", "only", "other", "than",
            "just", "very", "most", "even", "such", "each", "much", "both",
            "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
            "had", "her", "was", "one", "our", "out", "has", "his", "how", "its",
            "may", "new", "now", "see", "who", "did", "get", "use",
        ],
    },
    "relevance": {
        "topic_points": 10,
        "topic_cap": 40,
        "title_min_word_length": 4,
        "title_points": 8,
        "title_cap": 25,
        "summary_topics": 5,
        "summary_points": 4,
        "summary_cap": 20,
        # (low, high, points) checked in order; first band containing the count wins.
        "length_bands": [[500, 2000, 15], [300, 3000, 10], [100, None, 5]],
        "score_cap": 100,
    },
    "ranking": {
        "min_score": 20,
        "max_results": 10,
        "search_limit": 20,
    },
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = {key: dict(value) for key, value in DEFAULTS.items()}
    data["detection"]["severity_order"] = list(DEFAULTS["detection"]["severity_order"])
    data["detection"]["severity_weights"] = dict(DEFAULTS["detection"]["severity_weights"])
    data["topics"]["stop_words"] = list(DEFAULTS["topics"]["stop_words"])
    data["relevance"]["length_bands"] = [list(band) for band in DEFAULTS["relevance"]["length_bands"]]

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
