"""Glossary terms and their context-dependent values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence, Union

from .errors import ConfigFormatError, GlossaryTermNotFound

__all__ = [
    "CONTEXT_KEYS",
    "ContextualTerm",
    "ExternalGlossary",
    "GenerationContext",
    "Glossary",
    "GlossarySource",
    "InlineGlossary",
    "ScalarTerm",
    "Term",
    "parse_glossary",
    "parse_term",
    "resolve_term",
]

CONTEXT_KEYS = ("default", "release", "docs")


@dataclass(frozen=True)
class GenerationContext:
    """Selects which :class:`ContextualTerm` value applies."""

    release: bool = False
    for_docs: bool = False


@dataclass(frozen=True)
class ScalarTerm:
    """A term with the same value in every context."""

    value: str


@dataclass(frozen=True)
class ContextualTerm:
    """A term whose value depends on the :class:`GenerationContext`."""

    default: Optional[str] = None
    release: Optional[str] = None
    docs: Optional[str] = None


Term = Union[ScalarTerm, ContextualTerm]


@dataclass(frozen=True)
class InlineGlossary:
    """Terms written directly in the configuration."""

    terms: Mapping[str, Term]


@dataclass(frozen=True)
class ExternalGlossary:
    """A TOML glossary document at a path or URL."""

    locator: str


GlossarySource = Union[InlineGlossary, ExternalGlossary]
GlossaryLoader = Callable[[str], Mapping[str, Term]]


def resolve_term(name: str, term: Term, context: GenerationContext) -> str:
    """Pick the value of ``term`` for ``context``.

    Documentation values win over release values, and both fall back to the
    default value.
    """
    if isinstance(term, ScalarTerm):
        return term.value
    if context.for_docs and term.docs is not None:
        return term.docs
    if context.release and term.release is not None:
        return term.release
    if term.default is not None:
        return term.default
    raise GlossaryTermNotFound(name)


@dataclass
class Glossary:
    """A composed mapping of term names to :data:`Term` values."""

    terms: Dict[str, Term] = field(default_factory=dict)

    @classmethod
    def compose(
        cls,
        sources: Sequence[GlossarySource],
        load: GlossaryLoader,
        *,
        base: Optional["Glossary"] = None,
    ) -> "Glossary":
        """Layer ``sources`` in order on top of a copy of ``base``.

        A later definition replaces an earlier one with the same name.
        """
        terms: Dict[str, Term] = dict(base.terms) if base is not None else {}
        for source in sources:
            if isinstance(source, ExternalGlossary):
                terms.update(load(source.locator))
            else:
                terms.update(source.terms)
        return cls(terms)

    def resolve(self, name: str, context: GenerationContext) -> str:
        try:
            term = self.terms[name]
        except KeyError:
            raise GlossaryTermNotFound(name) from None
        return resolve_term(name, term, context)

    def __contains__(self, name: object) -> bool:
        return name in self.terms

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)


def parse_term(name: str, raw: Any, *, source: str) -> Term:
    """Build a :data:`Term` from a TOML value."""
    if isinstance(raw, str):
        return ScalarTerm(raw)
    if not isinstance(raw, Mapping):
        raise ConfigFormatError(
            f"term '{name}' in {source} must be a string or a table, "
            f"found {type(raw).__name__}"
        )
    unknown = sorted(set(raw) - set(CONTEXT_KEYS))
    if unknown:
        raise ConfigFormatError(
            f"term '{name}' in {source} has unknown keys: {', '.join(unknown)}"
        )
    for key, value in raw.items():
        if not isinstance(value, str):
            raise ConfigFormatError(
                f"term '{name}.{key}' in {source} must be a string"
            )
    return ContextualTerm(
        default=raw.get("default"),
        release=raw.get("release"),
        docs=raw.get("docs"),
    )


def parse_glossary(raw: Any, *, source: str) -> Dict[str, Term]:
    """Validate a raw term table such as a parsed glossary document."""
    if not isinstance(raw, Mapping):
        raise ConfigFormatError(f"glossary {source} must be a table of terms")
    return {
        str(name): parse_term(str(name), value, source=source)
        for name, value in raw.items()
    }
