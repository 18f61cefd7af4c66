"""Hidden-line handling for fenced code blocks.

Rust documentation hides example lines that start with ``# `` while still
compiling them. A README rendered on a forge shows every line, so those lines
are dropped from rendered output and kept verbatim when the output is itself
fed to a documentation tool.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Collection, List, Sequence

from markdown_it import MarkdownIt

from .errors import MalformedCodeBlock

__all__ = [
    "DEFAULT_LANGUAGES",
    "HIDDEN_LINE_MARKER",
    "RenderMode",
    "filter_code_blocks",
    "is_hidden_line",
    "visible_lines",
]

HIDDEN_LINE_MARKER = "# "
DEFAULT_LANGUAGES: tuple[str, ...] = ("rust",)

_INFO_SPLIT = re.compile(r"[\s,{]")


class RenderMode(Enum):
    """Which audience a document is generated for."""

    RENDER = "render"
    DOC_SOURCE = "doc-source"

    @classmethod
    def for_target(cls, for_docs: bool) -> "RenderMode":
        return cls.DOC_SOURCE if for_docs else cls.RENDER


def is_hidden_line(line: str) -> bool:
    return line.lstrip().startswith(HIDDEN_LINE_MARKER)


def visible_lines(lines: Sequence[str], mode: RenderMode) -> List[str]:
    """Return the lines of one code block that are shown in ``mode``."""
    if mode is RenderMode.DOC_SOURCE:
        return list(lines)
    return [line for line in lines if not is_hidden_line(line)]


def filter_code_blocks(
    markdown: str,
    *,
    languages: Collection[str] = DEFAULT_LANGUAGES,
    mode: RenderMode = RenderMode.RENDER,
) -> str:
    """Apply :func:`visible_lines` to fenced blocks tagged with ``languages``.

    Text outside those blocks, including the fence lines, is returned
    unchanged. An unterminated matching block raises
    :class:`MalformedCodeBlock` whatever the mode.
    """
    wanted = {language.lower() for language in languages}
    if not wanted or "```" not in markdown and "~~~" not in markdown:
        return markdown

    lines = markdown.split("\n")
    output: List[str] = []
    cursor = 0
    for token in _parser().parse(markdown):
        if token.type != "fence" or token.map is None:
            continue
        if _fence_language(token.info) not in wanted:
            continue
        start, end = token.map
        if end - 1 <= start or not _is_closing_fence(lines[end - 1], token.markup):
            raise MalformedCodeBlock(
                f"```{token.info.strip()} block opened on line {start + 1} "
                "is never closed"
            )
        output.extend(lines[cursor:start + 1])
        output.extend(visible_lines(lines[start + 1:end - 1], mode))
        cursor = end - 1
    output.extend(lines[cursor:])
    return "\n".join(output)


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    # Raw HTML blocks would swallow a fence that follows a line like <details>.
    return MarkdownIt("commonmark", {"html": False})


def _fence_language(info: str) -> str:
    return _INFO_SPLIT.split(info.strip(), maxsplit=1)[0].lower()


def _is_closing_fence(line: str, markup: str) -> bool:
    # Fences nested in block quotes keep their ``>`` prefix in the source.
    stripped = line.strip().lstrip("> \t")
    return len(stripped) >= len(markup) and set(stripped) == {markup[0]}
