from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from ..domain.exceptions import ConfigurationError
from ..domain.models import CodeFile, ScannerIssue
from ..domain.prompt import MASTER_SYSTEM_PROMPT, build_scanner_summary_message, build_single_pass_message
from ..domain.schemas import AuditReport
from ..ports import LoggerPort
from .agent_pipeline import AgentPipeline
from .report_builder import ReportBuilder
from .structured_llm import StructuredLLM


class AnalysisStrategy(Protocol):
    method: str

    def analyze(self, files: Sequence[CodeFile]) -> dict[str, Any]:
        ...


class SinglePassStrategy:
    """One prompt carrying every sampled file."""

    method = "llm-single-pass"

    def __init__(self, *, structured_llm: StructuredLLM) -> None:
        self._llm = structured_llm

    def analyze(self, files: Sequence[CodeFile]) -> dict[str, Any]:
        return self._llm.request(
            stage="single-pass",
            system=MASTER_SYSTEM_PROMPT,
            user=build_single_pass_message(files),
            expect=AuditReport,
        )


class MultiAgentStrategy:
    """Context, four specialists, then aggregation."""

    method = "llm-multi-agent"

    def __init__(self, *, pipeline: AgentPipeline, report_builder: ReportBuilder) -> None:
        self._pipeline = pipeline
        self._report_builder = report_builder

    def analyze(self, files: Sequence[CodeFile]) -> dict[str, Any]:
        return self._report_builder.from_pipeline(self._pipeline.run(files))


class LLMAnalyzer:
    """LLM boundary of the pipeline.

    Never raises: a configuration problem or any other failure becomes a
    degraded report.
    """

    SCANNER_METHOD = "scanners+llm"

    def __init__(
        self,
        *,
        strategy: AnalysisStrategy,
        structured_llm: StructuredLLM,
        report_builder: ReportBuilder,
        logger: LoggerPort,
    ) -> None:
        self._strategy = strategy
        self._llm = structured_llm
        self._report_builder = report_builder
        self._logger = logger

    @property
    def method(self) -> str:
        return self._strategy.method

    def analyze(self, files: Sequence[CodeFile]) -> dict[str, Any]:
        return self._guarded(self._strategy.method, lambda: self._strategy.analyze(files))

    def summarize_findings(self, files: Sequence[CodeFile], issues: Sequence[ScannerIssue]) -> dict[str, Any]:
        """Single summarization call over scanner findings, merged with them."""
        def summarize() -> dict[str, Any]:
            return self._llm.request(
                stage="scanner-summary",
                system=MASTER_SYSTEM_PROMPT,
                user=build_scanner_summary_message(files, issues),
                expect=AuditReport,
            )

        body = self._guarded(self.SCANNER_METHOD, summarize)
        return self._report_builder.merge_scanner_findings(body, issues)

    def _guarded(self, method: str, run: Callable[[], dict[str, Any]]) -> dict[str, Any]:
        try:
            return run()
        except ConfigurationError as e:
            self._logger.warning("llm_not_configured", type="llm_not_configured", method=method, error=str(e))
            return self._report_builder.configuration_report()
        except Exception as e:
            self._logger.exception("llm_analysis_failed", type="llm_analysis_failed", method=method, error=str(e))
            return self._report_builder.unavailable_report()
