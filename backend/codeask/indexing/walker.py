"""Directory walking for indexing and context assembly."""

from __future__ import annotations

import logging
import os
import stat
from typing import Iterable, List, Optional, Set, Tuple

from ..config import CODE_EXTENSIONS

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = {"node_modules", ".git"}


def is_excluded(name: str) -> bool:
    return name.startswith(".") or name in EXCLUDED_DIRS


def walk(root: str) -> List[str]:
    """Recursively list regular files under ``root``, depth-first.

    Hidden entries, ``node_modules`` and ``.git`` are skipped. Entries are
    visited in sorted order. Anything that cannot be listed or stat'ed is
    left out without raising.
    """
    files: List[str] = []
    _walk_dir(root, files, set())
    return files


def _walk_dir(dir_path: str, files: List[str], seen: Set[Tuple[int, int]]) -> None:
    try:
        dir_stat = os.stat(dir_path)
        names = sorted(os.listdir(dir_path))
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {dir_path}: {e}")
        return

    # symlinked directories can form cycles
    key = (dir_stat.st_dev, dir_stat.st_ino)
    if key in seen:
        return
    seen.add(key)

    for name in names:
        if is_excluded(name):
            continue
        full_path = os.path.join(dir_path, name)
        try:
            st = os.stat(full_path)
        except OSError:
            continue
        if stat.S_ISDIR(st.st_mode):
            _walk_dir(full_path, files, seen)
        elif stat.S_ISREG(st.st_mode):
            files.append(full_path)


def iter_code_files(root: str, extensions: Optional[Iterable[str]] = None) -> List[str]:
    """Files under ``root`` whose extension is in the allow-list."""
    allowed = set(extensions if extensions is not None else CODE_EXTENSIONS)
    return [p for p in walk(root) if os.path.splitext(p)[1] in allowed]
