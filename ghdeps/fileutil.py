"""
File Utilities — Atomic writes for cache files, build files and state.

Write to a temp file in the destination directory, then rename over the
target, so readers never observe a half-written file. The target keeps
its permission bits; new files get the usual umask-derived mode instead
of mkstemp's 0600.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path


def _new_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Write `content` to `path` via a temp file and `os.replace`."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        mode = stat.S_IMODE(path.stat().st_mode)
    else:
        mode = _new_file_mode()

    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except Exception:
        Path(tmp).unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Encode and write `content` as-is; line endings are not translated."""
    atomic_write_bytes(path, content.encode(encoding))
