"""Snippet extraction from annotated source files and indentation cleanup.

A snippet is delimited by two marker lines, usually inside comments::

    // begin snipweave snippet: example
    fn main() {}
    // end snipweave snippet

The marker lines are not part of the snippet body.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from .errors import (
    MalformedSnippetReference,
    SnippetAlreadyDefined,
    SnippetEndNotFound,
    SnippetNotFound,
)

__all__ = [
    "BEGIN_MARKER",
    "END_MARKER",
    "common_indent_width",
    "extract_snippets",
    "lookup_snippet",
    "normalize_indentation",
]

BEGIN_MARKER = "begin snipweave snippet:"
END_MARKER = "end snipweave snippet"


def extract_snippets(text: str) -> Dict[str, List[str]]:
    """Return every snippet defined in ``text`` keyed by name."""
    snippets: Dict[str, List[str]] = {}
    open_name: Optional[str] = None
    body: List[str] = []

    for line in _split_lines(text):
        begin = line.find(BEGIN_MARKER)
        if begin >= 0:
            name = _marker_name(line[begin + len(BEGIN_MARKER):])
            if open_name is not None:
                raise SnippetEndNotFound(open_name)
            if name in snippets:
                raise SnippetAlreadyDefined(name)
            open_name, body = name, []
        elif END_MARKER in line:
            if open_name is None:
                raise MalformedSnippetReference(
                    "end marker without a matching begin marker"
                )
            snippets[open_name] = body
            open_name = None
        elif open_name is not None:
            body.append(line)

    if open_name is not None:
        raise SnippetEndNotFound(open_name)
    return snippets


def lookup_snippet(
    snippets: Mapping[str, Sequence[str]], name: str, *, locator: str = ""
) -> List[str]:
    """Return the body of snippet ``name`` or raise :class:`SnippetNotFound`."""
    try:
        return list(snippets[name])
    except KeyError:
        qualified = f"{locator}:{name}" if locator else name
        raise SnippetNotFound(qualified) from None


def common_indent_width(lines: Sequence[str]) -> int:
    """Length of the whitespace-only prefix shared by all non-blank lines."""
    shared: Optional[str] = None
    for line in lines:
        stripped = line.lstrip()
        if not stripped:
            continue
        indent = line[: len(line) - len(stripped)]
        shared = indent if shared is None else _shared_prefix(shared, indent)
        if not shared:
            return 0
    return len(shared) if shared else 0


def normalize_indentation(lines: Sequence[str]) -> List[str]:
    """Strip the common leading whitespace from ``lines``.

    Whitespace-only lines do not take part in the width computation and may
    come out empty.
    """
    width = common_indent_width(lines)
    if not width:
        return list(lines)
    return [line[width:] for line in lines]


def _split_lines(text: str) -> List[str]:
    # Only "\n" and "\r\n" end a line; form feeds and U+2028 stay in the body.
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _marker_name(rest: str) -> str:
    words = rest.split()
    if not words:
        raise MalformedSnippetReference("begin marker without a snippet name")
    return words[0]


def _shared_prefix(left: str, right: str) -> str:
    size = 0
    for a, b in zip(left, right):
        if a != b:
            break
        size += 1
    return left[:size]
