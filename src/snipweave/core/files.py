"""Filesystem primitives shared across snipweave modules."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Collection, Iterator, List

__all__ = [
    "find_files",
    "read_bytes",
    "write_bytes",
]

DEFAULT_SKIP_DIRS = frozenset({".git", ".hg", ".svn"})


def read_bytes(path: Path) -> bytes:
    """Return the raw contents of ``path``."""
    with Path(path).open("rb") as fh:
        return fh.read()


def write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path``, creating parent directories as needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("wb") as fh:
        fh.write(data)


def find_files(
    root: Path,
    match: Callable[[Path], bool],
    *,
    skip_dirs: Collection[str] = DEFAULT_SKIP_DIRS,
) -> Iterator[Path]:
    """Yield files under ``root`` accepted by ``match`` in a stable order.

    Parameters
    ----------
    root:
        Directory to walk recursively. A missing root raises
        ``FileNotFoundError``.
    match:
        Predicate receiving each candidate file path.
    skip_dirs:
        Directory names that are never descended into.
    """
    base = Path(root)
    if not base.exists():
        raise FileNotFoundError(f"Directory not found: {base}")
    if not base.is_dir():
        raise NotADirectoryError(f"Not a directory: {base}")

    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(d for d in dirnames if d not in skip_dirs)
        for candidate in _sorted_children(Path(dirpath), filenames):
            if match(candidate):
                yield candidate


def _sorted_children(directory: Path, filenames: List[str]) -> List[Path]:
    return [directory / name for name in sorted(filenames)]
