"""``$...$`` reference tokens and their substitution.

``$src/lib.rs:example$`` inserts snippet ``example`` from a local file,
``$https://host/lib.rs:example$`` does the same for a remote file and
``$term$`` inserts a glossary term. ``$$`` is a literal dollar sign.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .errors import MalformedSnippetReference
from .glossary import GenerationContext, Glossary
from .resources import ResourceCache, is_remote
from .snippets import lookup_snippet, normalize_indentation

__all__ = [
    "DELIMITER",
    "Reference",
    "ReferenceKind",
    "ReferenceResolver",
    "parse_reference",
]

DELIMITER = "$"


class ReferenceKind(Enum):
    TERM = "term"
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Reference:
    """A parsed ``locator:name`` or ``term`` token."""

    kind: ReferenceKind
    name: str
    locator: Optional[str] = None


def parse_reference(token: str) -> Reference:
    """Parse the text between two ``$`` delimiters."""
    if not token or "\n" in token or "\r" in token:
        raise MalformedSnippetReference(repr(token))
    locator, separator, name = token.rpartition(":")
    if not separator:
        return Reference(ReferenceKind.TERM, token)
    if not name or not locator or locator in ("http", "https"):
        raise MalformedSnippetReference(
            f"{token!r} needs the form 'locator:name'"
        )
    remote = is_remote(locator)
    if remote and "/" not in locator.split("://", 1)[1]:
        # ``https://host:8080`` is a bare URL whose port parsed as a name.
        raise MalformedSnippetReference(
            f"{token!r} names a host without a document path"
        )
    kind = ReferenceKind.REMOTE if remote else ReferenceKind.LOCAL
    return Reference(kind, name, locator)


class ReferenceResolver:
    """Resolves reference tokens relative to one configuration."""

    def __init__(
        self,
        *,
        base_dir: Path,
        cache: ResourceCache,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.base_dir = base_dir
        self.cache = cache
        self.logger = logger or logging.getLogger("snipweave.assembly")

    def resolve(
        self, token: str, glossary: Glossary, context: GenerationContext
    ) -> str:
        reference = parse_reference(token)
        if reference.kind is ReferenceKind.TERM:
            return glossary.resolve(reference.name, context)
        locator = reference.locator or ""
        snippets = self.cache.snippets(locator, self.base_dir)
        body = lookup_snippet(snippets, reference.name, locator=locator)
        return "\n".join(normalize_indentation(body))

    def expand(
        self, text: str, glossary: Glossary, context: GenerationContext
    ) -> str:
        """Replace every reference in ``text`` in a single pass.

        Inserted fragments are not scanned again, so a snippet that itself
        contains ``$...$`` is copied as-is.
        """
        pieces: List[str] = []
        position = 0
        while True:
            start = text.find(DELIMITER, position)
            if start < 0:
                pieces.append(text[position:])
                break
            end = text.find(DELIMITER, start + 1)
            if end < 0:
                line = text.count("\n", 0, start) + 1
                raise MalformedSnippetReference(
                    f"'$' on line {line} has no closing '$'"
                )
            pieces.append(text[position:start])
            token = text[start + 1:end]
            if token:
                self.logger.debug("Resolving reference", extra={"token": token})
                pieces.append(self.resolve(token, glossary, context))
            else:
                pieces.append(DELIMITER)
            position = end + 1
        return "".join(pieces)
