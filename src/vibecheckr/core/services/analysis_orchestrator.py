from __future__ import annotations

from typing import Any

from ..domain.exceptions import CleanupWarning
from ..domain.models import AnalysisRequest
from ..ports import (
    FileWalkerPort,
    LoggerPort,
    RepositoryPort,
    ScannerRunnerPort,
    WorkspacePort,
)
from .code_sampler import CodeSampler
from .llm_analyzer import LLMAnalyzer
from .report_builder import ReportBuilder


class AnalysisOrchestrator:
    """Orchestrates the complete analysis workflow.

    Coordinates between domain services and infrastructure adapters:
    acquire, scan, walk, sample, analyze, merge, and always clean up.
    """

    def __init__(
        self,
        *,
        workspace: WorkspacePort,
        repo: RepositoryPort,
        scanners: ScannerRunnerPort,
        file_walker: FileWalkerPort,
        code_sampler: CodeSampler,
        llm_analyzer: LLMAnalyzer,
        report_builder: ReportBuilder,
        logger: LoggerPort,
    ) -> None:
        self._workspace = workspace
        self._repo = repo
        self._scanners = scanners
        self._file_walker = file_walker
        self._code_sampler = code_sampler
        self._llm_analyzer = llm_analyzer
        self._report_builder = report_builder
        self._logger = logger

    def analyze(self, request: AnalysisRequest) -> dict[str, Any]:
        """Execute the analysis workflow for one request.

        Args:
            request: Repository URL or uploaded archive

        Returns:
            Report dictionary including metadata

        Raises:
            InvalidRequestError: Before any directory is created, for unusable input
            AcquisitionError: If the repository could not be cloned or extracted
        """
        # 1) Validate input; no directory exists yet
        self._repo.validate(request)
        if request.has_url and request.has_archive:
            self._logger.warning(
                "archive_ignored",
                type="archive_ignored",
                source=request.source,
                archive=request.archive.filename,  # type: ignore[union-attr]
            )

        workdir = self._workspace.create()
        self._logger.info(
            "analysis_started",
            type="analysis_started",
            request_id=workdir.request_id,
            source=request.source,
            workdir=str(workdir.path),
        )

        try:
            # 2) Acquire repository
            self._repo.fetch(request, workdir.path)
            self._logger.info("repo_acquired", type="repo_acquired", request_id=workdir.request_id)

            # 3) Static scanners
            scan = self._scanners.run(workdir.path)

            # 4) Walk and sample
            paths = self._file_walker.list_files(workdir.path)
            sample = self._code_sampler.sample(paths, root=workdir.path)

            # 5) LLM analysis, merged with scanner issues when there are any
            if scan.issues:
                body = self._llm_analyzer.summarize_findings(sample.files, scan.issues)
                method = LLMAnalyzer.SCANNER_METHOD
            else:
                body = self._llm_analyzer.analyze(sample.files)
                method = self._llm_analyzer.method

            # 6) Stamp metadata
            metadata = self._report_builder.metadata(sample=sample, method=method, source=request.source)
            report = self._report_builder.finalize(body, metadata)

            self._logger.info(
                "final_result",
                type="final_result",
                request_id=workdir.request_id,
                method=method,
                score=report.get("score"),
                scanner_issues=len(scan.issues),
                files_analyzed=metadata.files_analyzed,
                total_files=metadata.total_files,
                completeness=metadata.completeness,
            )
            return report

        finally:
            try:
                self._workspace.remove(workdir)
            except CleanupWarning as e:
                self._logger.warning("cleanup_failed", type="cleanup_failed", path=e.path, error=str(e))
