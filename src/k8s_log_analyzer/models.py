from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class AnalyzerSettings:
    max_matching_lines: int = 3
    restart_count_threshold: int = 5


@dataclass(frozen=True)
class AppConfig:
    analyzer: AnalyzerSettings = field(default_factory=AnalyzerSettings)
    extra_rules_path: str | None = None
    log_level: str = "WARNING"


@dataclass(frozen=True)
class PatternRule:
    name: str
    pattern: str
    severity: Severity
    description: str
    suggestions: tuple[str, ...]
    docs: str
    matcher: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", re.compile(self.pattern, re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return self.matcher.search(text) is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "pattern": self.pattern,
            "severity": self.severity.value,
            "description": self.description,
            "suggestions": list(self.suggestions),
            "docs": self.docs,
        }


@dataclass(frozen=True)
class Issue:
    name: str
    severity: Severity
    description: str
    suggestions: tuple[str, ...]
    docs: str
    # None for heuristic issues, a (possibly empty) tuple for catalog matches.
    matching_lines: tuple[str, ...] | None = None

    @classmethod
    def from_rule(cls, rule: PatternRule, matching_lines: tuple[str, ...]) -> "Issue":
        return cls(
            name=rule.name,
            severity=rule.severity,
            description=rule.description,
            suggestions=rule.suggestions,
            docs=rule.docs,
            matching_lines=matching_lines,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "severity": self.severity.value,
            "description": self.description,
            "suggestions": list(self.suggestions),
            "docs": self.docs,
        }
        if self.matching_lines is not None:
            payload["matchingLines"] = list(self.matching_lines)
        return payload
