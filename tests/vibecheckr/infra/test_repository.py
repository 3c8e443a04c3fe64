"""Tests for RepositoryAcquirer (ZIP extraction and git clone)."""
import io

import pytest
from git import Git, Repo
from git.exc import GitCommandError

from helpers import FakeLogger, make_zip_bytes
from vibecheckr.core.domain.exceptions import AcquisitionError, InvalidRequestError
from vibecheckr.core.domain.models import AnalysisRequest, UploadedArchive
from vibecheckr.infra import repository as repository_module
from vibecheckr.infra.repository import ALLOWED_URL_SCHEMES, RepositoryAcquirer


def _acquirer(logger=None, **kwargs):
    return RepositoryAcquirer(clone_timeout=60, logger=logger or FakeLogger(), **kwargs)


def _local_acquirer(logger=None):
    # throwaway repositories under tmp_path are reached through file://
    return _acquirer(logger, allowed_schemes=ALLOWED_URL_SCHEMES | {"file"})


def _zip_request(data, filename="repo.zip", content_type="application/zip"):
    return AnalysisRequest(
        archive=UploadedArchive(filename=filename, stream=io.BytesIO(data), content_type=content_type)
    )


def test_validate_rejects_missing_input():
    with pytest.raises(InvalidRequestError):
        _acquirer().validate(AnalysisRequest())


def test_validate_rejects_non_zip_upload():
    request = _zip_request(b"just some text", filename="notes.txt", content_type="text/plain")

    with pytest.raises(InvalidRequestError) as exc_info:
        _acquirer().validate(request)

    assert "ZIP" in exc_info.value.details


def test_validate_rejects_zip_name_with_wrong_bytes():
    request = _zip_request(b"not really a zip", filename="fake.zip")

    with pytest.raises(InvalidRequestError):
        _acquirer().validate(request)


def test_validate_accepts_zip_by_content_type():
    data = make_zip_bytes({"a.py": "x = 1"})
    request = _zip_request(data, filename="upload", content_type="application/x-zip-compressed")

    _acquirer().validate(request)


def test_validate_accepts_url():
    _acquirer().validate(AnalysisRequest(github_url="https://github.com/a/b"))


def test_extract_zip_creates_nested_files(tmp_path):
    data = make_zip_bytes({
        "project/src/app.py": "print('hi')",
        "project/README.md": "# readme",
    })
    request = _zip_request(data)
    acquirer = _acquirer()
    acquirer.validate(request)

    acquirer.fetch(request, tmp_path)

    assert (tmp_path / "project" / "src" / "app.py").read_text(encoding="utf-8") == "print('hi')"
    assert (tmp_path / "project" / "README.md").exists()


def test_extract_skips_path_traversal(tmp_path):
    target = tmp_path / "work"
    target.mkdir()
    data = make_zip_bytes({
        "../evil.py": "pwned",
        "/abs/evil.py": "pwned",
        "ok/good.py": "fine",
    })
    logger = FakeLogger()

    _acquirer(logger).fetch(_zip_request(data), target)

    assert (target / "ok" / "good.py").exists()
    assert not (tmp_path / "evil.py").exists()
    assert logger.messages("warning").count("zip_entry_skipped") == 2


def test_extract_corrupt_zip_is_invalid_request(tmp_path):
    data = make_zip_bytes({"a.py": "x"})
    corrupt = data[:-10]

    with pytest.raises((InvalidRequestError, AcquisitionError)):
        _acquirer().fetch(_zip_request(corrupt), tmp_path)


def _make_origin(tmp_path):
    origin = tmp_path / "origin"
    repo = Repo.init(origin)
    (origin / "main.py").write_text("print('v1')", encoding="utf-8")
    (origin / "lib").mkdir()
    (origin / "lib" / "util.js").write_text("module.exports = 1", encoding="utf-8")
    repo.index.add(["main.py", "lib/util.js"])
    repo.index.commit("first commit")
    repo.close()
    return origin


def test_clone_local_repository(tmp_path):
    origin = _make_origin(tmp_path)
    target = tmp_path / "work"
    target.mkdir()

    _local_acquirer().fetch(AnalysisRequest(github_url=origin.as_uri()), target)

    assert (target / "main.py").read_text(encoding="utf-8") == "print('v1')"
    assert (target / "lib" / "util.js").exists()


def test_clone_failure_raises_acquisition_error(tmp_path):
    target = tmp_path / "work"
    target.mkdir()
    logger = FakeLogger()

    with pytest.raises(AcquisitionError) as exc_info:
        _local_acquirer(logger).fetch(AnalysisRequest(github_url=(tmp_path / "missing").as_uri()), target)

    assert not isinstance(exc_info.value, InvalidRequestError)
    assert "clone_failed" in logger.messages("error")


@pytest.mark.parametrize("url", [
    "https://github.com/octo/demo",
    "http://git.example.com/octo/demo.git",
    "ssh://git@github.com/octo/demo.git",
    "git://example.com/demo.git",
    "git@github.com:octo/demo.git",
])
def test_validate_accepts_remote_urls(url):
    _acquirer().validate(AnalysisRequest(github_url=url))


@pytest.mark.parametrize("url", [
    "--upload-pack=touch /tmp/pwned;git-upload-pack",
    "-c core.sshCommand=sh",
])
def test_validate_rejects_option_like_url(url):
    with pytest.raises(InvalidRequestError) as exc_info:
        _acquirer().validate(AnalysisRequest(github_url=url))

    assert exc_info.value.message == "Invalid repository URL"


@pytest.mark.parametrize("url", [
    "/srv/secrets/repo",
    "../other-project",
    "file:///srv/secrets/repo",
    "ext::sh -c touch% /tmp/pwned",
    "ftp://example.com/repo.git",
    "https:///no-host",
])
def test_validate_rejects_local_and_unsupported_urls(url):
    with pytest.raises(InvalidRequestError):
        _acquirer().validate(AnalysisRequest(github_url=url))


def test_fetch_refuses_local_repository_without_cloning(tmp_path):
    origin = _make_origin(tmp_path)
    target = tmp_path / "work"
    target.mkdir()

    with pytest.raises(InvalidRequestError):
        _acquirer().fetch(AnalysisRequest(github_url=str(origin)), target)

    assert list(target.iterdir()) == []


class RecordingGit:
    """Stands in for git.Git; records clone arguments and optionally fails."""

    calls = []
    error = None
    check_unsafe_protocols = staticmethod(Git.check_unsafe_protocols)

    def clone(self, *args, **kwargs):
        RecordingGit.calls.append((args, kwargs))
        if RecordingGit.error is not None:
            raise RecordingGit.error


@pytest.fixture
def recording_git(monkeypatch):
    RecordingGit.calls = []
    RecordingGit.error = None
    monkeypatch.setattr(repository_module, "Git", RecordingGit)
    return RecordingGit


def test_clone_ends_options_before_url(recording_git, tmp_path):
    acquirer = RepositoryAcquirer(clone_timeout=7, logger=FakeLogger())

    acquirer.fetch(AnalysisRequest(github_url="https://github.com/octo/demo"), tmp_path)

    args, kwargs = recording_git.calls[0]
    assert args == ("--", "https://github.com/octo/demo", str(tmp_path))
    assert kwargs == {"depth": 1, "single_branch": True, "kill_after_timeout": 7}


def test_clone_timeout_raises_acquisition_error(recording_git, tmp_path):
    recording_git.error = GitCommandError(
        ["git", "clone"],
        -9,
        stderr="error: process killed because it timed out. kill_after_timeout=7 seconds",
    )
    logger = FakeLogger()
    acquirer = RepositoryAcquirer(clone_timeout=7, logger=logger)

    with pytest.raises(AcquisitionError) as exc_info:
        acquirer.fetch(AnalysisRequest(github_url="https://github.com/octo/slow"), tmp_path)

    assert not isinstance(exc_info.value, InvalidRequestError)
    assert "timed out" in exc_info.value.details
    assert "clone_failed" in logger.messages("error")


def test_validate_rejects_archive_without_filename():
    request = AnalysisRequest(archive=UploadedArchive(filename="", stream=io.BytesIO(b"")))

    with pytest.raises(InvalidRequestError) as exc_info:
        _acquirer().validate(request)

    assert exc_info.value.message == "No repository provided"
