"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from typing import Any


def _score_label(score: Any) -> str:
    if not isinstance(score, (int, float)):
        return "N/A"
    return f"{score:g}/100"


def format_report(report: dict[str, Any]) -> str:
    """Format an analysis report for human-readable CLI output.

    Args:
        report: Report dictionary as returned by the analysis

    Returns:
        Formatted string for display
    """
    lines = []
    lines.append("=" * 80)
    lines.append("VIBE CHECK REPORT")
    lines.append("=" * 80)

    lines.append(f"\nSource: {report.get('source', '')}")
    lines.append(
        f"Method: {report.get('analysis_method', '')} | "
        f"Files: {report.get('filesAnalyzed', 0)}/{report.get('totalFiles', 0)} "
        f"({report.get('analysisCompleteness', '')})"
    )

    lines.append("\n" + "-" * 80)
    lines.append("SCORE")
    lines.append("-" * 80)
    lines.append(f"\nScore: {_score_label(report.get('score'))}")
    if "llm_score" in report:
        lines.append(f"LLM Score: {_score_label(report.get('llm_score'))}")
    if report.get("degraded"):
        lines.append("(degraded: AI analysis did not complete)")

    if report.get("summary"):
        lines.append(f"\nSummary:\n{report['summary']}")

    critical = report.get("critical_issues") or []
    if critical:
        lines.append("\n" + "-" * 80)
        lines.append(f"CRITICAL ISSUES ({len(critical)})")
        lines.append("-" * 80)
        for i, issue in enumerate(critical, 1):
            if not isinstance(issue, dict):
                lines.append(f"  {i}. {issue}")
                continue
            severity = str(issue.get("severity", "")).upper()
            title = issue.get("title") or issue.get("description", "")
            lines.append(f"  {i}. [{severity}] {title}")
            if issue.get("recommendation"):
                lines.append(f"     Fix: {issue['recommendation']}")

    scanner_issues = report.get("issues") or []
    if scanner_issues:
        lines.append("\n" + "-" * 80)
        lines.append(f"SCANNER FINDINGS ({len(scanner_issues)})")
        lines.append("-" * 80)
        for i, issue in enumerate(scanner_issues, 1):
            lines.append(
                f"  {i}. [{str(issue.get('severity', '')).upper()}] "
                f"{issue.get('file', '')}: {issue.get('description', '')}"
            )

    next_steps = report.get("next_steps") or []
    if next_steps:
        lines.append("\nNext Steps:")
        for step in next_steps:
            lines.append(f"  - {step}")

    lines.append("\n" + "=" * 80)
    return "\n".join(lines)
