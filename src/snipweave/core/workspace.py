"""Per-user data home that receives snipweave log files."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

WORKSPACE_ENV = "SNIPWEAVE_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".snipweave-data"

_SUBDIRS = ("logs",)


class WorkspaceError(RuntimeError):
    """The data home cannot be used."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """The data home and its named subdirectories.

    ``created`` records which entries did not exist before the call.
    """

    home: Path
    directories: Mapping[str, Path]
    created: Mapping[str, bool]

    def path_for(self, key: str) -> Path:
        if key not in self.directories:
            raise KeyError(f"Unknown workspace directory '{key}'.")
        return self.directories[key]


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Return the data home layout, creating directories when ``create``.

    An explicit ``path`` or ``SNIPWEAVE_DATA_HOME`` is used as given. The
    default home falls back to a temp-directory home when it is not
    writable.
    """

    requested = _requested_home(os.environ if env is None else env, path)
    candidates = [requested or DEFAULT_WORKSPACE]
    if create and requested is None:
        candidates.append(_fallback_base())

    denied: PermissionError | None = None
    for home in _unique(candidates):
        try:
            return _materialize_layout(base=home, create=create)
        except PermissionError as exc:
            denied = exc
    raise WorkspaceError(f"Unable to prepare workspace at {candidates[0]}") from denied


def _requested_home(env: Mapping[str, str], override: Path | None) -> Path | None:
    if override is not None:
        return override.expanduser().absolute()
    configured = (env.get(WORKSPACE_ENV) or "").strip()
    if not configured:
        return None
    return Path(configured).expanduser().absolute()


def _unique(paths: list[Path]) -> Iterator[Path]:
    seen: set[Path] = set()
    for item in paths:
        if item not in seen:
            seen.add(item)
            yield item


def _fallback_base() -> Path:
    return Path(tempfile.gettempdir()) / "snipweave-data"


def _materialize_layout(*, base: Path, create: bool) -> WorkspaceLayout:
    entries = {"home": base}
    entries.update({name: base / name for name in _SUBDIRS})

    created = {}
    for key, directory in entries.items():
        if directory.exists() and not directory.is_dir():
            raise WorkspaceError(f"Workspace entry is not a directory: {directory}")
        created[key] = create and not directory.exists()
        if create:
            directory.mkdir(parents=True, exist_ok=True)

    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType({name: entries[name] for name in _SUBDIRS}),
        created=MappingProxyType(created),
    )
