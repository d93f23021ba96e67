from __future__ import annotations

import logging
from typing import Iterable, Sequence

from k8s_log_analyzer.catalog import DEFAULT_CATALOG
from k8s_log_analyzer.heuristics import run_heuristics
from k8s_log_analyzer.models import AnalyzerSettings, Issue, PatternRule

logger = logging.getLogger(__name__)


class PatternAnalyzer:
    """Matches pod diagnostic text against the rule catalog.

    Holds no per-call state, so one instance can serve any number of callers.
    """

    def __init__(
        self,
        rules: Iterable[PatternRule] | None = None,
        settings: AnalyzerSettings | None = None,
    ):
        self.rules: tuple[PatternRule, ...] = DEFAULT_CATALOG if rules is None else tuple(rules)
        self.settings = settings or AnalyzerSettings()

    def analyze(self, text: str) -> list[Issue]:
        issues = self.scan_catalog(text)
        return self.add_heuristic_checks(text, issues)

    def scan_catalog(self, text: str) -> list[Issue]:
        lines = text.split("\n")
        logger.debug("Scanning %d lines against %d rules", len(lines), len(self.rules))

        issues: list[Issue] = []
        for rule in self.rules:
            if not rule.matches(text):
                continue
            matching = _first_matching_lines(rule, lines, self.settings.max_matching_lines)
            logger.debug("Rule %r matched (%d example lines)", rule.name, len(matching))
            issues.append(Issue.from_rule(rule, matching))
        return issues

    def add_heuristic_checks(self, text: str, issues: Sequence[Issue]) -> list[Issue]:
        """Return ``issues`` extended with restart, pending and age findings."""
        return run_heuristics(text, issues, self.settings)


def _first_matching_lines(rule: PatternRule, lines: list[str], limit: int) -> tuple[str, ...]:
    found: list[str] = []
    for line in lines:
        if len(found) >= limit:
            break
        if rule.matches(line):
            found.append(line)
    return tuple(found)


_default_analyzer = PatternAnalyzer()


def analyze(text: str) -> list[Issue]:
    return _default_analyzer.analyze(text)
