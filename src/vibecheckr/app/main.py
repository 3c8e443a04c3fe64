from __future__ import annotations

from pathlib import Path
from typing import Any

from .config import AppConfig
from .container import Container
from ..core.domain.models import AnalysisRequest, UploadedArchive


def create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    container = Container()

    if config is None:
        # Load from environment variables (BaseSettings default behavior)
        config = AppConfig()

    container.config.from_pydantic(config)
    container.init_resources()

    return container


def analyze(
    github_url: str | None = None,
    *,
    zip_path: Path | None = None,
    config: AppConfig | None = None,
) -> dict[str, Any]:
    """Analyze a repository given by URL or by a local ZIP archive.

    Args:
        github_url: Git URL to shallow-clone (wins when both inputs are given)
        zip_path: Path to a ZIP archive of the repository
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        Report dictionary

    Raises:
        InvalidRequestError: If neither input is usable
        AcquisitionError: If the repository could not be cloned or extracted
    """
    container = create_container(config)
    try:
        uc = container.analyze_uc()
        if zip_path is None:
            return uc.execute(AnalysisRequest(github_url=github_url))
        with open(zip_path, "rb") as stream:
            archive = UploadedArchive(filename=Path(zip_path).name, stream=stream)
            return uc.execute(AnalysisRequest(github_url=github_url, archive=archive))
    finally:
        container.shutdown_resources()
