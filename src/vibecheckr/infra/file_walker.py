from __future__ import annotations

import os
from pathlib import Path


SOURCE_EXTENSIONS = frozenset({
    ".js", ".ts", ".py", ".java", ".php", ".rb", ".go",
    ".jsx", ".tsx", ".vue", ".svelte",
})

SKIPPED_DIRS = frozenset({"node_modules", "bower_components", "vendor", "__pycache__"})


class FileWalker:
    """Depth-first listing of source files, in sorted order."""

    def __init__(
        self,
        *,
        extensions: frozenset[str] = SOURCE_EXTENSIONS,
        skipped_dirs: frozenset[str] = SKIPPED_DIRS,
    ) -> None:
        self._extensions = extensions
        self._skipped_dirs = skipped_dirs

    def list_files(self, root: Path) -> list[Path]:
        found: list[Path] = []
        self._walk(root, found)
        return found

    def _walk(self, directory: Path, found: list[Path]) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            return
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                if entry.name.startswith(".") or entry.name in self._skipped_dirs:
                    continue
                self._walk(Path(entry.path), found)
            elif entry.is_file(follow_symlinks=False):
                if Path(entry.name).suffix.lower() in self._extensions:
                    found.append(Path(entry.path))
