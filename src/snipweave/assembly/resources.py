"""Collaborator seams and the per-run resource cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import httpx

from .errors import HttpError, IoError
from .snippets import extract_snippets

__all__ = [
    "AssemblyDependencies",
    "ResourceCache",
    "is_remote",
]

_REMOTE_PREFIXES = ("http://", "https://")

CacheKey = Tuple[str, str]


def is_remote(locator: str) -> bool:
    return locator.startswith(_REMOTE_PREFIXES)


@dataclass(frozen=True)
class AssemblyDependencies:
    """Callable seams for filesystem and network access."""

    read: Callable[[Path], bytes]
    write: Callable[[Path, bytes], None]
    fetch: Callable[[str], bytes]


@dataclass
class ResourceCache:
    """Text and snippet maps loaded during one generation run.

    Keys are ``("url", url)`` for remote documents and ``("path", path)`` for
    local files resolved against the configuration's base directory, so each
    document is read or fetched at most once per run.
    """

    dependencies: AssemblyDependencies
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("snipweave.assembly")
    )
    _texts: Dict[CacheKey, str] = field(
        default_factory=dict, init=False, repr=False
    )
    _snippets: Dict[CacheKey, Dict[str, List[str]]] = field(
        default_factory=dict, init=False, repr=False
    )

    def key_for(self, locator: str, base_dir: Path) -> CacheKey:
        if is_remote(locator):
            return ("url", locator)
        return ("path", str((base_dir / locator).resolve()))

    def text(self, locator: str, base_dir: Path) -> str:
        """Return the decoded contents of ``locator``."""
        key = self.key_for(locator, base_dir)
        cached = self._texts.get(key)
        if cached is None:
            cached = self._load(key)
            self._texts[key] = cached
        return cached

    def snippets(self, locator: str, base_dir: Path) -> Dict[str, List[str]]:
        """Return the snippets defined in ``locator``."""
        key = self.key_for(locator, base_dir)
        cached = self._snippets.get(key)
        if cached is None:
            cached = extract_snippets(self.text(locator, base_dir))
            self._snippets[key] = cached
        return cached

    def _load(self, key: CacheKey) -> str:
        kind, target = key
        if kind == "url":
            self.logger.info("Requesting remote document", extra={"url": target})
            try:
                data = self.dependencies.fetch(target)
            except httpx.HTTPError as exc:
                raise HttpError(target, exc) from exc
        else:
            self.logger.debug("Reading local document", extra={"path": target})
            try:
                data = self.dependencies.read(Path(target))
            except OSError as exc:
                raise IoError(target, exc) from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise IoError(target, exc) from exc
