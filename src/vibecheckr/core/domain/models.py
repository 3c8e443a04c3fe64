from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO


@dataclass(frozen=True)
class UploadedArchive:
    """An uploaded repository archive as received from the caller."""
    filename: str
    stream: BinaryIO
    content_type: str | None = None


@dataclass(frozen=True)
class AnalysisRequest:
    """What to analyze: a remote Git URL or an uploaded archive.

    When both are supplied the URL wins and the archive is ignored.
    """
    github_url: str | None = None
    archive: UploadedArchive | None = None

    @property
    def has_url(self) -> bool:
        return bool(self.github_url and self.github_url.strip())

    @property
    def has_archive(self) -> bool:
        return self.archive is not None and bool(self.archive.filename)

    @property
    def source(self) -> str:
        """Identifier reported back to the caller (URL or archive filename)."""
        if self.has_url:
            return self.github_url.strip()  # type: ignore[union-attr]
        if self.has_archive:
            return self.archive.filename  # type: ignore[union-attr]
        return ""


@dataclass(frozen=True)
class CodeFile:
    path: str  # repository-relative, POSIX separators
    content: str
    truncated: bool = False


@dataclass(frozen=True)
class ScannerIssue:
    tool: str
    category: str
    severity: str
    file: str
    description: str
    recommendation: str
    cursor_prompt: str

    def to_dict(self) -> dict[str, str]:
        return {
            "tool": self.tool,
            "category": self.category,
            "severity": self.severity,
            "file": self.file,
            "description": self.description,
            "recommendation": self.recommendation,
            "cursor_prompt": self.cursor_prompt,
        }


@dataclass
class ScanResult:
    issues: list[ScannerIssue] = field(default_factory=list)
    tools_run: list[str] = field(default_factory=list)
    tools_unavailable: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"issues": [issue.to_dict() for issue in self.issues]}


@dataclass(frozen=True)
class ReportMetadata:
    analyzed_at: str
    files_analyzed: int
    total_files: int
    completeness: str
    analysis_method: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "analyzedAt": self.analyzed_at,
            "filesAnalyzed": self.files_analyzed,
            "totalFiles": self.total_files,
            "analysisCompleteness": self.completeness,
            "analysis_method": self.analysis_method,
            "source": self.source,
        }


@dataclass
class SampledFiles:
    """Files selected for the LLM, plus how many were discovered in total."""
    files: list[CodeFile]
    selected_count: int
    total_count: int

    @property
    def is_partial(self) -> bool:
        return self.total_count > self.selected_count


@dataclass
class WorkingDirectory:
    path: Path
    request_id: str
