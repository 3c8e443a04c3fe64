import io
import zipfile
from pathlib import Path


def mark_by_dir(items, base_dir, marker):
    base = Path(base_dir).resolve()
    for item in items:
        # pytest 7/8: item.path (Path) on new versions, item.fspath on old ones
        p = getattr(item, "path", None)
        p = Path(p) if p is not None else Path(str(getattr(item, "fspath")))
        try:
            p.resolve().relative_to(base)
        except ValueError:
            continue
        item.add_marker(marker)


class FakeLogger:
    """Records structured log calls as (level, message, fields)."""

    def __init__(self):
        self.records = []

    def _log(self, level, message, **kwargs):
        self.records.append((level, message, kwargs))

    def debug(self, message, **kwargs):
        self._log("debug", message, **kwargs)

    def info(self, message, **kwargs):
        self._log("info", message, **kwargs)

    def warning(self, message, **kwargs):
        self._log("warning", message, **kwargs)

    def error(self, message, exc_info=False, **kwargs):
        self._log("error", message, **kwargs)

    def exception(self, message, **kwargs):
        self._log("exception", message, **kwargs)

    def messages(self, level=None):
        return [m for lvl, m, _ in self.records if level is None or lvl == level]


class FixedClock:
    def __init__(self, value="2024-01-01T00:00:00Z"):
        self.value = value

    def now_iso(self):
        return self.value


def make_zip_bytes(entries):
    """Build an in-memory ZIP from {name: text} (ZipInfo names are written verbatim)."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()
