from __future__ import annotations

from typing import Any

from ..domain.models import AnalysisRequest
from ..services import AnalysisOrchestrator


class AnalyzeUseCase:
    """Use case for analyzing one submitted repository.

    Thin orchestration layer that delegates to AnalysisOrchestrator.
    """

    def __init__(
        self,
        *,
        orchestrator: AnalysisOrchestrator,
    ) -> None:
        self._orchestrator = orchestrator

    def execute(self, request: AnalysisRequest) -> dict[str, Any]:
        """Execute analysis workflow.

        Args:
            request: Repository URL or uploaded archive

        Returns:
            Report dictionary
        """
        return self._orchestrator.analyze(request)
