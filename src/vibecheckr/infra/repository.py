from __future__ import annotations

import mimetypes
import re
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from git import Git
from git.exc import GitCommandError, UnsafeProtocolError

from ..core.domain.exceptions import AcquisitionError, InvalidRequestError
from ..core.domain.models import AnalysisRequest, UploadedArchive
from ..core.ports import LoggerPort


ZIP_CONTENT_TYPES = frozenset({
    "application/zip",
    "application/x-zip-compressed",
})

# Remote transports a submitted URL may use; local paths and file:// are refused.
ALLOWED_URL_SCHEMES = frozenset({"https", "http", "ssh", "git"})

# scp-like ssh remotes: git@github.com:owner/repo.git
SCP_LIKE_URL = re.compile(r"^[\w.-]+@[\w.-]+:(?!//)\S+$")


class RepositoryAcquirer:
    """Materializes a submitted repository into a working directory.

    A GitHub URL is shallow-cloned with git; an uploaded archive must be a ZIP
    and is extracted entry by entry.
    """

    def __init__(
        self,
        *,
        clone_timeout: int,
        logger: LoggerPort,
        allowed_schemes: frozenset[str] = ALLOWED_URL_SCHEMES,
    ) -> None:
        self._clone_timeout = clone_timeout
        self._logger = logger
        self._allowed_schemes = allowed_schemes

    def validate(self, request: AnalysisRequest) -> None:
        """Reject unusable input before any directory is allocated."""
        if request.has_url:
            self._check_url(request.source)
            return
        archive = request.archive
        if archive is None or not request.has_archive:
            raise InvalidRequestError(
                "No repository provided",
                "Provide either a githubUrl or a ZIP file upload",
            )
        if not self._is_zip(archive):
            raise InvalidRequestError(
                "Invalid upload",
                f"Only ZIP archives are supported, got {archive.filename!r}",
            )

    def fetch(self, request: AnalysisRequest, target: Path) -> None:
        if request.has_url:
            self._clone(request.source, target)
        elif request.archive is not None:
            self._extract(request.archive, target)
        else:
            raise InvalidRequestError(
                "No repository provided",
                "Provide either a githubUrl or a ZIP file upload",
            )

    # ---- git ----

    def _check_url(self, url: str) -> None:
        """Accept only remote Git URLs; never an option or a server-local path."""
        if url.startswith("-"):
            raise InvalidRequestError("Invalid repository URL", f"URL must not start with '-': {url!r}")
        try:
            Git.check_unsafe_protocols(url)
        except UnsafeProtocolError as e:
            raise InvalidRequestError("Invalid repository URL", str(e)) from e
        if SCP_LIKE_URL.match(url) and "ssh" in self._allowed_schemes:
            return
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        if scheme not in self._allowed_schemes or (scheme != "file" and not parts.netloc):
            allowed = ", ".join(sorted(self._allowed_schemes))
            raise InvalidRequestError(
                "Invalid repository URL",
                f"Expected a remote Git URL ({allowed}), got {url!r}",
            )

    def _clone(self, url: str, target: Path) -> None:
        self._check_url(url)
        self._logger.info("clone_started", type="clone_started", url=url)
        try:
            # options are rendered before the positionals, so "--" ends them
            Git().clone(
                "--",
                url,
                str(target),
                depth=1,
                single_branch=True,
                kill_after_timeout=self._clone_timeout,
            )
        except GitCommandError as e:
            stderr = (e.stderr or "").strip()
            self._logger.error("clone_failed", type="clone_failed", url=url, status=e.status, stderr=stderr)
            raise AcquisitionError(f"Failed to clone {url}", stderr or str(e)) from e

    # ---- zip ----

    @staticmethod
    def _is_zip(archive: UploadedArchive) -> bool:
        name = archive.filename.lower()
        content_type = (archive.content_type or "").split(";")[0].strip().lower()
        if not content_type:
            content_type = mimetypes.guess_type(name)[0] or ""
        if not (name.endswith(".zip") or content_type in ZIP_CONTENT_TYPES):
            return False
        stream = archive.stream
        try:
            stream.seek(0)
            return zipfile.is_zipfile(stream)
        finally:
            stream.seek(0)

    def _extract(self, archive: UploadedArchive, target: Path) -> None:
        root = target.resolve()
        extracted = 0
        skipped = 0
        archive.stream.seek(0)
        try:
            with zipfile.ZipFile(archive.stream) as zf:
                for info in zf.infolist():
                    dest = self._safe_destination(root, info.filename)
                    if dest is None:
                        skipped += 1
                        self._logger.warning("zip_entry_skipped", type="zip_entry_skipped", entry=info.filename)
                        continue
                    if info.is_dir():
                        dest.mkdir(parents=True, exist_ok=True)
                        continue
                    dest.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as src, open(dest, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    extracted += 1
        except zipfile.BadZipFile as e:
            raise InvalidRequestError("Invalid upload", f"Corrupt ZIP archive: {e}") from e
        except OSError as e:
            raise AcquisitionError(f"Failed to extract {archive.filename}", str(e)) from e

        self._logger.info(
            "zip_extracted",
            type="zip_extracted",
            archive=archive.filename,
            extracted=extracted,
            skipped=skipped,
        )

    @staticmethod
    def _safe_destination(root: Path, entry_name: str) -> Path | None:
        """Resolve an archive entry under root, or None when it would escape."""
        pure = PurePosixPath(entry_name.replace("\\", "/"))
        if pure.is_absolute() or ".." in pure.parts:
            return None
        parts = [p for p in pure.parts if p not in ("", ".")]
        if not parts or ":" in parts[0]:
            return None
        dest = root.joinpath(*parts).resolve()
        if dest != root and root not in dest.parents:
            return None
        return dest
