from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List

from .errors import UserCancelled


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _raise_walk_error(error: OSError) -> None:
    raise error


def walk_files(root: Path, cancel_check: Callable[[], bool] | None = None) -> List[Path]:
    """Return every file below ``root``.

    Walk errors are re-raised instead of being skipped so callers can tell a
    missing directory apart from an empty one. ``cancel_check`` is polled once
    per directory and aborts the walk with ``UserCancelled`` when it returns
    true.
    """

    if not root.is_dir():
        raise FileNotFoundError(2, "No such file or directory", str(root))

    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        if cancel_check is not None and cancel_check():
            raise UserCancelled(f"Walk of {root} cancelled")
        dirnames.sort()
        base = Path(dirpath)
        for filename in sorted(filenames):
            files.append(base / filename)
    return files
