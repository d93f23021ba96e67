"""Derived checks over structured fields of ``kubectl describe`` output.

Unlike catalog rules these look at values (counts, status words, durations)
rather than phrases. They run in a fixed order and each one sees the issues
produced by the checks before it.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Sequence

from k8s_log_analyzer.models import AnalyzerSettings, Issue, Severity

logger = logging.getLogger(__name__)

# ASCII digits only; Unicode digits never count.
RESTART_COUNT_RE = re.compile(r"Restart Count:\s*([0-9]+)", re.IGNORECASE)
PENDING_STATUS_RE = re.compile(r"Status:\s*Pending", re.IGNORECASE)
AGE_RE = re.compile(r"Age:\s*([0-9]+)([mhd])", re.IGNORECASE)

HeuristicCheck = Callable[[str, Sequence[Issue], AnalyzerSettings], Optional[Issue]]

COUNT_CAP = 10**9


def _to_int(digits: str) -> int:
    # Oversized values clamp to COUNT_CAP instead of hitting int() digit limits.
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(COUNT_CAP)):
        return COUNT_CAP
    return min(int(significant), COUNT_CAP)


def check_restart_count(text: str, issues: Sequence[Issue], settings: AnalyzerSettings) -> Issue | None:
    match = RESTART_COUNT_RE.search(text)
    if match is None or _to_int(match.group(1)) <= settings.restart_count_threshold:
        return None
    return Issue(
        name="High Restart Count",
        severity=Severity.WARNING,
        description=f"Pod has restarted {match.group(1)} times",
        suggestions=(
            "Investigate why the container keeps crashing",
            "Check application logs for recurring errors",
            "Review startup dependencies and timing",
        ),
        docs="https://kubernetes.io/docs/concepts/workloads/pods/pod-lifecycle/",
    )


def check_pending_status(text: str, issues: Sequence[Issue], settings: AnalyzerSettings) -> Issue | None:
    if PENDING_STATUS_RE.search(text) is None:
        return None
    return Issue(
        name="Pod Stuck in Pending",
        severity=Severity.WARNING,
        description="Pod is not being scheduled",
        suggestions=(
            "Check node resources and availability",
            "Review node selectors and affinity rules",
            "Check for taints and tolerations",
            "Verify resource requests don't exceed node capacity",
        ),
        docs="https://kubernetes.io/docs/concepts/scheduling-eviction/",
    )


def is_old_age(value: int, unit: str) -> bool:
    # Unit comparison is case-sensitive even though the pattern is not.
    if unit == "m":
        return value > 30
    if unit == "h":
        return value > 2
    return unit == "d"


def check_long_running(text: str, issues: Sequence[Issue], settings: AnalyzerSettings) -> Issue | None:
    match = AGE_RE.search(text)
    if match is None:
        return None
    if not is_old_age(_to_int(match.group(1)), match.group(2)) or not issues:
        return None
    return Issue(
        name="Long-running Issues",
        severity=Severity.INFO,
        description="Pod has been experiencing issues for an extended period",
        suggestions=(
            "Consider recreating the pod",
            "Check if the issue is intermittent",
            "Review recent changes to the deployment",
        ),
        docs="https://kubernetes.io/docs/concepts/workloads/pods/",
    )


# Order matters: the age check gates on issues added by the first two.
HEURISTIC_CHECKS: tuple[HeuristicCheck, ...] = (
    check_restart_count,
    check_pending_status,
    check_long_running,
)


def run_heuristics(
    text: str,
    issues: Sequence[Issue],
    settings: AnalyzerSettings | None = None,
) -> list[Issue]:
    active = settings or AnalyzerSettings()
    result = list(issues)
    for check in HEURISTIC_CHECKS:
        issue = check(text, result, active)
        if issue is not None:
            logger.debug("Heuristic %s added %r", check.__name__, issue.name)
            result.append(issue)
    return result
