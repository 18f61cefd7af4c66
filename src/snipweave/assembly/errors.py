"""Failure kinds raised while assembling documents.

Every engine operation either returns a value or raises one of these. Nothing
is retried or recovered locally; the first error aborts the run.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "SnipweaveError",
    "SnippetAlreadyDefined",
    "SnippetEndNotFound",
    "SnippetNotFound",
    "MalformedSnippetReference",
    "MalformedCodeBlock",
    "GlossaryTermNotFound",
    "IoError",
    "HttpError",
    "ConfigFormatError",
    "NoConfigurationError",
]


class SnipweaveError(RuntimeError):
    """Base class for every document assembly failure."""


class SnippetAlreadyDefined(SnipweaveError):
    """A source document opens the same snippet name twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"snippet already defined: {name}")
        self.name = name


class SnippetEndNotFound(SnipweaveError):
    """A snippet was opened but never closed."""

    def __init__(self, name: str) -> None:
        super().__init__(f"snippet end not found: {name}")
        self.name = name


class SnippetNotFound(SnipweaveError):
    """A reference names a snippet the source document does not define."""

    def __init__(self, name: str) -> None:
        super().__init__(f"snippet not found: {name}")
        self.name = name


class MalformedSnippetReference(SnipweaveError):
    """A reference token or snippet marker is syntactically invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"malformed snippet reference: {detail}")
        self.detail = detail


class MalformedCodeBlock(SnipweaveError):
    """A fenced code block could not be interpreted."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"malformed code block: {detail}")
        self.detail = detail


class GlossaryTermNotFound(SnipweaveError):
    """No glossary value exists for the term in the active context."""

    def __init__(self, name: str) -> None:
        super().__init__(f"glossary term not found: {name}")
        self.name = name


class IoError(SnipweaveError):
    """Reading or writing a local file failed."""

    def __init__(self, path: Path | str, cause: BaseException) -> None:
        super().__init__(f"io error for {path}: {cause}")
        self.path = path
        self.cause = cause


class HttpError(SnipweaveError):
    """Fetching a remote document failed."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"http error for {url}: {cause}")
        self.url = url
        self.cause = cause


class ConfigFormatError(SnipweaveError):
    """A configuration or glossary document has an invalid shape."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"config format error: {detail}")
        self.detail = detail


class NoConfigurationError(SnipweaveError):
    """No configuration file was found under the searched directory."""

    def __init__(self, directory: Path | str) -> None:
        super().__init__(f"no configuration found under {directory}")
        self.directory = directory
