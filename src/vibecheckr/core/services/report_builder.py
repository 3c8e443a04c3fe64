from __future__ import annotations

from typing import Any, Sequence

from ..domain.models import ReportMetadata, SampledFiles, ScannerIssue
from ..ports import ClockPort
from .agent_pipeline import PipelineResult


CONFIGURATION_DEGRADED_SCORE = 75
UNAVAILABLE_DEGRADED_SCORE = 50


class ReportBuilder:
    """Builds the final report dictionaries.

    Owns the degraded fallbacks, the scanner merge and the metadata stamp.
    """

    def __init__(self, *, clock: ClockPort) -> None:
        self._clock = clock

    def configuration_report(self) -> dict[str, Any]:
        return self._degraded(
            score=CONFIGURATION_DEGRADED_SCORE,
            summary="Analysis completed with basic checks (LLM API key not configured)",
            issue={
                "category": "configuration",
                "severity": "medium",
                "title": "API Key Not Configured",
                "description": "The LLM API key is missing or was rejected, so AI analysis was skipped",
                "files_affected": ["N/A"],
                "line_ranges": [],
                "impact": "Limited analysis capabilities",
                "recommendation": "Set VIBECHECKR_LLM__API_KEY for the configured provider and restart the service",
                "cursor_prompt": "Configure the LLM API key in the backend .env file: VIBECHECKR_LLM__API_KEY=<your key>",
            },
            next_step="Configure an LLM API key for enhanced analysis",
        )

    def unavailable_report(self) -> dict[str, Any]:
        return self._degraded(
            score=UNAVAILABLE_DEGRADED_SCORE,
            summary="AI analysis failed, manual review recommended",
            issue={
                "category": "system",
                "severity": "medium",
                "title": "Analysis Unavailable",
                "description": "AI analysis was unavailable due to technical issues",
                "files_affected": ["N/A"],
                "line_ranges": [],
                "impact": "Limited automated analysis",
                "recommendation": "Perform a manual code review",
                "cursor_prompt": "Review this codebase for security vulnerabilities and code quality issues",
            },
            next_step="Perform manual code review",
        )

    def from_pipeline(self, result: PipelineResult) -> dict[str, Any]:
        body = dict(result.final)
        body.setdefault("score", body.get("overall_score"))
        body["individualResults"] = result.stages
        return body

    @staticmethod
    def scanner_score(issues: Sequence[ScannerIssue]) -> int:
        return max(0, 100 - len(issues) * 10)

    def merge_scanner_findings(self, llm_body: dict[str, Any], issues: Sequence[ScannerIssue]) -> dict[str, Any]:
        """Combine the LLM summary with deterministic scanner findings.

        The deterministic scanner score replaces the model's score, which is
        kept as ``llm_score``.
        """
        body = dict(llm_body)
        if "score" in body and not body.get("degraded"):
            body["llm_score"] = body["score"]
        body["score"] = self.scanner_score(issues)
        body.setdefault("summary", f"Found {len(issues)} issues via security scanners")
        body["issues"] = [issue.to_dict() for issue in issues]
        return body

    def metadata(self, *, sample: SampledFiles, method: str, source: str) -> ReportMetadata:
        return ReportMetadata(
            analyzed_at=self._clock.now_iso(),
            files_analyzed=len(sample.files),
            total_files=sample.total_count,
            completeness="partial" if sample.is_partial else "complete",
            analysis_method=method,
            source=source,
        )

    def finalize(self, body: dict[str, Any], metadata: ReportMetadata) -> dict[str, Any]:
        report = dict(body)
        report.update(metadata.to_dict())
        return report

    def _degraded(self, *, score: int, summary: str, issue: dict[str, Any], next_step: str) -> dict[str, Any]:
        return {
            "score": score,
            "overall_score": score,
            "project_type": "unknown",
            "summary": summary,
            "critical_issues": [issue],
            "categories_analyzed": [],
            "positive_findings": [],
            "next_steps": [next_step],
            "degraded": True,
        }
