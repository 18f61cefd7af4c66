"""TOML reading, validation and template writing."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "parse_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """A TOML document could not be read, parsed or validated."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the TOML file at ``path``.

    Callers translate :class:`TomlConfigError` into their own error types.
    """

    try:
        text = path.read_bytes().decode("utf-8")
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise TomlConfigError(f"Config file is not UTF-8: {path}") from exc
    return parse_toml(text, source=str(path))


def parse_toml(text: str, *, source: str) -> Mapping[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Invalid TOML in {source}: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Copy ``override`` into ``base`` in place, table by table.

    Every key of ``override`` must already exist in ``base``; nested tables
    are merged rather than replaced.
    """

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = base[key]
        if not isinstance(current, MutableMapping):
            base[key] = value
        elif isinstance(value, Mapping):
            merge_defaults(current, value, path=f"{dotted}.")
        else:
            raise TomlConfigError(
                f"Expected table for '{dotted}', found {type(value).__name__}."
            )


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
) -> Path:
    """Write ``template`` to ``path``; an existing file is kept unless ``overwrite``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("w" if overwrite else "x", encoding="utf-8") as handle:
            handle.write(template)
    except FileExistsError as exc:
        raise TomlConfigError(f"Config already exists: {path}") from exc
    return path
