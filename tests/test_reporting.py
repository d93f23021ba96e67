import json
from pathlib import Path

import pytest

from k8s_log_analyzer.analyzer import analyze
from k8s_log_analyzer.models import Issue, Severity
from k8s_log_analyzer.reporting import (
    NO_ISSUES_TITLE,
    render,
    render_html,
    render_json,
    render_markdown,
    render_text,
    results_heading,
    severity_icon,
    write_report,
)
from k8s_log_analyzer.samples import SAMPLE_POD_DESCRIBE


@pytest.mark.parametrize(
    ("severity", "icon"),
    [
        (Severity.ERROR, "🚨"),
        ("warning", "⚠️"),
        (Severity.INFO, "ℹ️"),
        ("critical", "🔍"),
        (None, "🔍"),
    ],
)
def test_severity_icon(severity, icon):
    assert severity_icon(severity) == icon


def test_results_heading_pluralizes():
    issues = analyze(SAMPLE_POD_DESCRIBE)
    assert results_heading(issues[:1]) == "Analysis Results (1 issue found)"
    assert results_heading(issues) == "Analysis Results (4 issues found)"


def test_html_escapes_untrusted_log_lines():
    issues = analyze('<script>alert("x")</script> open /etc/app: permission denied')
    page = render_html(issues)

    assert "<script>" not in page
    assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;" in page
    assert 'class="issue error"' in page


def test_heuristic_issue_renders_without_matching_lines_block():
    page = render_html(analyze("Restart Count: 9"))
    assert "High Restart Count" in page
    assert "matching-lines" not in page


def test_no_issues_is_rendered_as_neutral_message():
    for fmt in ("text", "markdown", "html"):
        output = render([], fmt)
        assert NO_ISSUES_TITLE in output
        assert "Analysis Results" not in output

    assert json.loads(render_json([])) == {"count": 0, "issues": []}


def test_text_report_lists_lines_suggestions_and_docs():
    report = render_text(analyze(SAMPLE_POD_DESCRIBE))

    assert "Analysis Results (4 issues found)" in report
    assert "🚨 CrashLoopBackOff [error]" in report
    assert "    | " + "      Reason:       CrashLoopBackOff" in report
    assert "    • Check application logs for startup errors" in report
    assert "Docs: https://kubernetes.io/docs/concepts/workloads/pods/pod-lifecycle/#restart-policy" in report


def test_markdown_report_numbers_suggestions():
    report = render_markdown(analyze("Reason: OOMKilled"))

    assert "### 🚨 OOMKilled" in report
    assert "1. Increase memory limits in pod spec" in report
    assert "```\nReason: OOMKilled\n```" in report


def test_json_report_uses_result_field_names():
    payload = json.loads(render_json(analyze(SAMPLE_POD_DESCRIBE)))

    assert payload["count"] == 4
    assert payload["issues"][0]["matchingLines"][0].strip() == "Reason:       CrashLoopBackOff"
    assert "matchingLines" not in payload["issues"][-1]


def test_unknown_format_raises():
    with pytest.raises(ValueError, match="Unsupported format"):
        render([], "xml")


def test_write_report_creates_parent_dirs(tmp_path: Path):
    target = tmp_path / "out" / "report.md"

    path = write_report(analyze("Reason: CrashLoopBackOff"), target, "markdown")

    assert path == target
    assert "CrashLoopBackOff" in target.read_text(encoding="utf-8")


def _issue(matching_lines):
    return Issue(
        name="Split Phrase",
        severity=Severity.WARNING,
        description="probe failure split over two lines",
        suggestions=("Check the probe",),
        docs="https://kubernetes.io/docs/tasks/configure-pod-container/",
        matching_lines=matching_lines,
    )


@pytest.mark.parametrize(
    ("fmt", "marker"),
    [
        ("text", "Matching lines:"),
        ("markdown", "```"),
        ("html", "matching-lines"),
    ],
)
def test_empty_matching_lines_render_the_same_in_every_format(fmt: str, marker: str):
    assert marker in render([_issue(())], fmt)
    assert marker not in render([_issue(None)], fmt)
