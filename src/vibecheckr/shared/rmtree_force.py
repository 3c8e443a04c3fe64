from typing import Callable
import os
import stat
from pathlib import Path
import shutil


def _remove_readonly(func: Callable[[str], None], path: str, excinfo) -> None:
    """shutil.rmtree onexc hook: clear the read-only bit and retry.

    Git pack files and some extracted archives are read-only on Windows.
    Unlinking needs write permission on the parent, so both are cleared.
    """
    for target in (os.path.dirname(path), path):
        try:
            os.chmod(target, stat.S_IWUSR | stat.S_IRUSR | stat.S_IXUSR)
        except OSError:
            pass
    func(path)


def rmtree_force(path: Path) -> None:
    """Remove a directory tree, tolerating read-only entries.

    A missing path is not an error. Other failures propagate as OSError.
    """
    if not path.exists() and not path.is_symlink():
        return
    if path.is_symlink() or path.is_file():
        path.unlink()
        return
    try:
        shutil.rmtree(path)
    except PermissionError:
        shutil.rmtree(path, onexc=_remove_readonly)
