from __future__ import annotations

from pathlib import Path

from ..core.domain.exceptions import CleanupWarning
from ..core.domain.models import WorkingDirectory
from ..core.ports import LoggerPort, TokenGeneratorPort
from ..shared.rmtree_force import rmtree_force


class Workspace:
    """Allocates one private directory per request under ``base_dir``."""

    def __init__(self, *, base_dir: Path, token_gen: TokenGeneratorPort, logger: LoggerPort) -> None:
        self._base_dir = base_dir
        self._token_gen = token_gen
        self._logger = logger

    def create(self) -> WorkingDirectory:
        request_id = self._token_gen.generate()
        path = self._base_dir / request_id
        self._base_dir.mkdir(parents=True, exist_ok=True)
        # exist_ok=False: two requests must never share a directory
        path.mkdir(exist_ok=False)
        return WorkingDirectory(path=path, request_id=request_id)

    def remove(self, workdir: WorkingDirectory) -> None:
        try:
            rmtree_force(workdir.path)
        except OSError as e:
            raise CleanupWarning(str(workdir.path), str(e)) from e
        if workdir.path.exists():
            raise CleanupWarning(str(workdir.path), "directory still exists after removal")
        self._logger.info("workspace_removed", type="workspace_removed", request_id=workdir.request_id)
