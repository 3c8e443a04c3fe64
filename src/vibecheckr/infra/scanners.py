from __future__ import annotations

import json
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Protocol, Sequence

from ..core.domain.exceptions import ScannerUnavailable
from ..core.domain.models import ScannerIssue, ScanResult
from ..core.ports import LoggerPort


class Scanner(Protocol):
    name: str

    def scan(self, root: Path) -> list[ScannerIssue]:
        """Run the tool against root.

        Raises:
            ScannerUnavailable: If the tool is missing, times out or produces unusable output
        """
        ...


def _relative(root: Path, path: str) -> str:
    p = Path(path)
    if p.is_absolute():
        try:
            p = p.relative_to(root)
        except ValueError:
            return path
    text = p.as_posix()
    return text[2:] if text.startswith("./") else text


def run_tool(
    name: str,
    argv: Sequence[str],
    *,
    cwd: Path,
    timeout: int,
    ok_codes: tuple[int, ...] = (0,),
) -> str:
    """Run one analyzer subprocess and return its stdout."""
    if shutil.which(argv[0]) is None:
        raise ScannerUnavailable(name, f"{argv[0]} not found on PATH")
    try:
        proc = subprocess.run(
            list(argv),
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ScannerUnavailable(name, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ScannerUnavailable(name, str(e)) from e
    if proc.returncode not in ok_codes:
        stderr = (proc.stderr or "").strip()[:500]
        raise ScannerUnavailable(name, f"exit status {proc.returncode}: {stderr}")
    return proc.stdout or ""


def _load_json(name: str, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ScannerUnavailable(name, f"malformed JSON output: {e}") from e


class SemgrepScanner:
    name = "semgrep"

    def __init__(self, *, timeout: int) -> None:
        self._timeout = timeout

    def scan(self, root: Path) -> list[ScannerIssue]:
        stdout = run_tool(
            self.name,
            ["semgrep", "scan", "--config=auto", "--json", "--quiet", "."],
            cwd=root,
            timeout=self._timeout,
        )
        data = _load_json(self.name, stdout)
        issues: list[ScannerIssue] = []
        for result in data.get("results") or []:
            extra = result.get("extra") or {}
            check_id = result.get("check_id", "unknown-rule")
            message = extra.get("message", "")
            file = _relative(root, result.get("path", ""))
            issues.append(ScannerIssue(
                tool=self.name,
                category="security",
                severity=str(extra.get("severity") or "medium").lower(),
                file=file,
                description=message,
                recommendation=f"Fix {check_id} violation",
                cursor_prompt=f"Fix the {check_id} security issue in {Path(file).name}: {message}",
            ))
        return issues


class GitleaksScanner:
    name = "gitleaks"

    def __init__(self, *, timeout: int) -> None:
        self._timeout = timeout

    def scan(self, root: Path) -> list[ScannerIssue]:
        with tempfile.TemporaryDirectory(prefix="vibecheckr-gitleaks-") as tmp:
            report = Path(tmp) / "report.json"
            run_tool(
                self.name,
                [
                    "gitleaks", "detect",
                    "--source", ".",
                    "--no-git",
                    "--exit-code", "0",
                    "--report-format", "json",
                    "--report-path", str(report),
                ],
                cwd=root,
                timeout=self._timeout,
            )
            if not report.exists():
                raise ScannerUnavailable(self.name, "no report written")
            data = _load_json(self.name, report.read_text(encoding="utf-8") or "[]")

        if not isinstance(data, list):
            raise ScannerUnavailable(self.name, "unexpected report shape")
        issues: list[ScannerIssue] = []
        for leak in data:
            file = _relative(root, leak.get("File", ""))
            issues.append(ScannerIssue(
                tool=self.name,
                category="secrets",
                severity="critical",
                file=file,
                description=f"Potential secret detected: {leak.get('Description', '')}",
                recommendation="Remove or encrypt sensitive data",
                cursor_prompt=f"Remove the exposed secret in {file} at line {leak.get('StartLine')}",
            ))
        return issues


class EslintScanner:
    """Runs the project's own ESLint, only when package.json declares it."""

    name = "eslint"

    def __init__(self, *, timeout: int) -> None:
        self._timeout = timeout

    @staticmethod
    def is_configured(root: Path) -> bool:
        package_json = root / "package.json"
        try:
            manifest = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return False
        if not isinstance(manifest, dict):
            return False
        return any(
            "eslint" in (manifest.get(section) or {})
            for section in ("dependencies", "devDependencies")
        )

    def scan(self, root: Path) -> list[ScannerIssue]:
        if not self.is_configured(root):
            raise ScannerUnavailable(self.name, "eslint not declared in package.json")
        # exit status 1 means lint errors were found
        stdout = run_tool(
            self.name,
            ["npx", "--no-install", "eslint", ".", "--format", "json"],
            cwd=root,
            timeout=self._timeout,
            ok_codes=(0, 1),
        )
        data = _load_json(self.name, stdout)
        issues: list[ScannerIssue] = []
        for file_result in data:
            file_path = file_result.get("filePath", "")
            file = _relative(root, file_path)
            for message in file_result.get("messages") or []:
                if message.get("severity") != 2:
                    continue
                text = message.get("message", "")
                issues.append(ScannerIssue(
                    tool=self.name,
                    category="code-quality",
                    severity="high",
                    file=file,
                    description=text,
                    recommendation=f"Fix ESLint rule: {message.get('ruleId')}",
                    cursor_prompt=(
                        f"Fix ESLint error in {os.path.basename(file_path)} "
                        f"line {message.get('line')}: {text}"
                    ),
                ))
        return issues


class ScannerRunner:
    """Runs each configured scanner in turn. Never raises."""

    def __init__(self, *, scanners: Sequence[Scanner], logger: LoggerPort) -> None:
        self._scanners = list(scanners)
        self._logger = logger

    def run(self, root: Path) -> ScanResult:
        result = ScanResult()
        for scanner in self._scanners:
            try:
                found = scanner.scan(root)
            except ScannerUnavailable as e:
                result.tools_unavailable.append(scanner.name)
                self._logger.warning("scanner_unavailable", type="scanner_unavailable", tool=e.tool, reason=e.reason)
                continue
            except Exception as e:
                result.tools_unavailable.append(scanner.name)
                self._logger.warning("scanner_unavailable", type="scanner_unavailable", tool=scanner.name, reason=str(e))
                continue
            result.tools_run.append(scanner.name)
            result.issues.extend(found)
            self._logger.info("scanner_finished", type="scanner_finished", tool=scanner.name, issues=len(found))

        self._logger.info(
            "scan_completed",
            type="scan_completed",
            issues=len(result.issues),
            tools_run=result.tools_run,
            tools_unavailable=result.tools_unavailable,
        )
        return result


SCANNER_TYPES: dict[str, type] = {
    SemgrepScanner.name: SemgrepScanner,
    GitleaksScanner.name: GitleaksScanner,
    EslintScanner.name: EslintScanner,
}


def build_scanners(names: Sequence[str], *, timeout: int) -> list[Scanner]:
    """Instantiate the named scanners in the given order. Unknown names are rejected."""
    unknown = [n for n in names if n not in SCANNER_TYPES]
    if unknown:
        raise ValueError(f"unknown scanner(s): {', '.join(unknown)}")
    return [SCANNER_TYPES[n](timeout=timeout) for n in names]
