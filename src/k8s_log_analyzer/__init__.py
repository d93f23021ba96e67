from __future__ import annotations

from k8s_log_analyzer.analyzer import PatternAnalyzer, analyze
from k8s_log_analyzer.catalog import DEFAULT_CATALOG
from k8s_log_analyzer.models import Issue, PatternRule, Severity

__all__ = [
    "DEFAULT_CATALOG",
    "Issue",
    "PatternAnalyzer",
    "PatternRule",
    "Severity",
    "analyze",
]

__version__ = "0.1.0"
