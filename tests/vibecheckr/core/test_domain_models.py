"""Tests for domain models."""
import io

from vibecheckr.core.domain.models import (
    AnalysisRequest,
    CodeFile,
    ReportMetadata,
    SampledFiles,
    ScannerIssue,
    ScanResult,
    UploadedArchive,
)


def _archive(name="repo.zip"):
    return UploadedArchive(filename=name, stream=io.BytesIO(b""), content_type="application/zip")


def test_request_source_prefers_url():
    req = AnalysisRequest(github_url="  https://github.com/a/b  ", archive=_archive())

    assert req.has_url
    assert req.has_archive
    assert req.source == "https://github.com/a/b"


def test_request_source_falls_back_to_archive_name():
    req = AnalysisRequest(archive=_archive("project.zip"))

    assert not req.has_url
    assert req.source == "project.zip"


def test_request_blank_url_is_not_a_url():
    req = AnalysisRequest(github_url="   ")

    assert not req.has_url
    assert not req.has_archive
    assert req.source == ""


def test_archive_without_filename_is_not_an_archive():
    req = AnalysisRequest(archive=_archive(""))

    assert not req.has_archive


def test_sampled_files_partial_when_more_files_found():
    sample = SampledFiles(files=[CodeFile(path="a.py", content="")], selected_count=1, total_count=5)
    assert sample.is_partial

    complete = SampledFiles(files=[], selected_count=2, total_count=2)
    assert not complete.is_partial


def test_report_metadata_keys():
    meta = ReportMetadata(
        analyzed_at="2024-01-01T00:00:00Z",
        files_analyzed=3,
        total_files=10,
        completeness="partial",
        analysis_method="llm-single-pass",
        source="https://github.com/a/b",
    )

    assert meta.to_dict() == {
        "analyzedAt": "2024-01-01T00:00:00Z",
        "filesAnalyzed": 3,
        "totalFiles": 10,
        "analysisCompleteness": "partial",
        "analysis_method": "llm-single-pass",
        "source": "https://github.com/a/b",
    }


def test_scan_result_serializes_issues_only():
    issue = ScannerIssue(
        tool="gitleaks",
        category="secrets",
        severity="critical",
        file="config.js",
        description="Potential secret detected: AWS key",
        recommendation="Remove or encrypt sensitive data",
        cursor_prompt="Remove the exposed secret in config.js at line 3",
    )
    result = ScanResult(issues=[issue], tools_run=["gitleaks"], tools_unavailable=["semgrep"])

    payload = result.to_dict()

    assert list(payload) == ["issues"]
    assert payload["issues"][0]["category"] == "secrets"
    assert payload["issues"][0]["cursor_prompt"].startswith("Remove the exposed secret")
