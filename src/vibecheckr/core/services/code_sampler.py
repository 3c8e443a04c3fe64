from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..domain.models import CodeFile, SampledFiles
from ..domain.prompt import TRUNCATION_MARKER
from ..ports import LoggerPort


class CodeSampler:
    """Selects and reads the bounded file sample sent to the LLM.

    Takes the first ``max_files`` paths in walk order and keeps at most
    ``max_chars`` characters of each. Unreadable files are skipped.
    """

    def __init__(self, *, max_files: int, max_chars: int, logger: LoggerPort) -> None:
        self._max_files = max_files
        self._max_chars = max_chars
        self._logger = logger

    def sample(self, paths: Sequence[Path], *, root: Path) -> SampledFiles:
        selected = list(paths[: self._max_files])
        files: list[CodeFile] = []

        for path in selected:
            rel = path.relative_to(root).as_posix()
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                self._logger.warning("file_read_failed", type="file_read_failed", path=rel, error=str(e))
                continue
            files.append(self._truncate(rel, content))

        self._logger.info(
            "files_sampled",
            type="files_sampled",
            total=len(paths),
            selected=len(selected),
            read=len(files),
        )
        return SampledFiles(files=files, selected_count=len(selected), total_count=len(paths))

    def _truncate(self, rel: str, content: str) -> CodeFile:
        if len(content) <= self._max_chars:
            return CodeFile(path=rel, content=content)
        return CodeFile(path=rel, content=content[: self._max_chars] + TRUNCATION_MARKER, truncated=True)
