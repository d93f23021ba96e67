from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Sequence

from k8s_log_analyzer.models import Issue, Severity

SEVERITY_ICONS = {
    Severity.ERROR: "🚨",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}
DEFAULT_ICON = "🔍"

NO_ISSUES_TITLE = "No Common Issues Detected"
NO_ISSUES_MESSAGE = (
    "The analyzer didn't find any common Kubernetes issues in your logs. "
    "If you're still experiencing problems, consider:"
)
NO_ISSUES_SUGGESTIONS = (
    "Check application-specific logs for custom errors",
    "Review your application's dependencies and configuration",
    "Verify external services your app depends on",
)


def severity_icon(severity: Severity | str | None) -> str:
    try:
        return SEVERITY_ICONS.get(Severity(severity), DEFAULT_ICON)
    except ValueError:
        return DEFAULT_ICON


def results_heading(issues: Sequence[Issue]) -> str:
    count = len(issues)
    return f"Analysis Results ({count} issue{'s' if count > 1 else ''} found)"


def render_text(issues: Sequence[Issue]) -> str:
    if not issues:
        lines = [f"✅ {NO_ISSUES_TITLE}", NO_ISSUES_MESSAGE]
        lines.extend(f"  - {item}" for item in NO_ISSUES_SUGGESTIONS)
        return "\n".join(lines) + "\n"

    lines = [f"{DEFAULT_ICON} {results_heading(issues)}", ""]
    for issue in issues:
        lines.append(f"{severity_icon(issue.severity)} {issue.name} [{issue.severity.value}]")
        lines.append(f"  {issue.description}")
        if issue.matching_lines is not None:
            lines.append("  Matching lines:")
            lines.extend(f"    | {line}" for line in issue.matching_lines)
        lines.append("  Suggestions:")
        lines.extend(f"    • {suggestion}" for suggestion in issue.suggestions)
        lines.append(f"  Docs: {issue.docs}")
        lines.append("")
    return "\n".join(lines)


def render_markdown(issues: Sequence[Issue]) -> str:
    if not issues:
        lines = [f"## ✅ {NO_ISSUES_TITLE}", "", NO_ISSUES_MESSAGE, ""]
        lines.extend(f"- {item}" for item in NO_ISSUES_SUGGESTIONS)
        return "\n".join(lines) + "\n"

    lines = [f"## {DEFAULT_ICON} {results_heading(issues)}", ""]
    for issue in issues:
        lines.extend(
            [
                f"### {severity_icon(issue.severity)} {issue.name}",
                "",
                f"**Severity**: {issue.severity.value}",
                "",
                issue.description,
                "",
            ]
        )
        if issue.matching_lines is not None:
            lines.append("```")
            lines.extend(issue.matching_lines)
            lines.append("```")
            lines.append("")
        lines.append("**Suggestions**:")
        for i, suggestion in enumerate(issue.suggestions, 1):
            lines.append(f"{i}. {suggestion}")
        lines.extend(["", f"[View Documentation]({issue.docs})", ""])
    return "\n".join(lines)


def render_html(issues: Sequence[Issue]) -> str:
    """Render an HTML fragment.

    Matching lines come straight from pasted cluster output, so every field
    is escaped before it is placed in markup.
    """
    if not issues:
        suggestions = "".join(
            f'<div class="suggestion">{html.escape(item)}</div>' for item in NO_ISSUES_SUGGESTIONS
        )
        return (
            '<div class="issue info">'
            f"<h3>✅ {html.escape(NO_ISSUES_TITLE)}</h3>"
            f"<p>{html.escape(NO_ISSUES_MESSAGE)}</p>"
            f'<div class="suggestions">{suggestions}</div>'
            "</div>"
        )

    blocks = []
    for issue in issues:
        severity = html.escape(issue.severity.value)
        lines_html = ""
        if issue.matching_lines is not None:
            lines_html = (
                '<div class="matching-lines">'
                + "".join(f"<div>{html.escape(line)}</div>" for line in issue.matching_lines)
                + "</div>"
            )
        suggestions = "".join(
            f'<div class="suggestion">• {html.escape(item)}</div>' for item in issue.suggestions
        )
        blocks.append(
            f'<div class="issue {severity}">'
            f"<h3>{severity_icon(issue.severity)} {html.escape(issue.name)}</h3>"
            f"<p>{html.escape(issue.description)}</p>"
            f"{lines_html}"
            f'<div class="suggestions"><strong>Suggestions:</strong>{suggestions}</div>'
            f'<a href="{html.escape(issue.docs, quote=True)}" target="_blank" class="docs-link">'
            "View Documentation</a>"
            "</div>"
        )
    return f"<h2>{DEFAULT_ICON} {html.escape(results_heading(issues))}</h2>" + "".join(blocks)


def render_json(issues: Sequence[Issue]) -> str:
    payload = {"count": len(issues), "issues": [issue.to_dict() for issue in issues]}
    return json.dumps(payload, indent=2, ensure_ascii=True)


RENDERERS = {
    "text": render_text,
    "markdown": render_markdown,
    "html": render_html,
    "json": render_json,
}


def render(issues: Sequence[Issue], fmt: str = "text") -> str:
    try:
        renderer = RENDERERS[fmt]
    except KeyError:
        raise ValueError(f"Unsupported format: {fmt}") from None
    return renderer(issues)


def write_report(issues: Sequence[Issue], output_path: str | Path, fmt: str = "text") -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(render(issues, fmt))
    return path
