"""Public APIs for assembling documents from snippets and glossaries."""

from __future__ import annotations

from .assembler import (
    GenerationSummary,
    TargetOutcome,
    assemble_target,
    generate,
    generate_all,
)
from .codeblocks import (
    RenderMode,
    filter_code_blocks,
    is_hidden_line,
    visible_lines,
)
from .config import (
    Configuration,
    DocumentSection,
    FileTarget,
    InlineSection,
    discover_configurations,
    load_configuration,
    parse_configuration,
)
from .errors import (
    ConfigFormatError,
    GlossaryTermNotFound,
    HttpError,
    IoError,
    MalformedCodeBlock,
    MalformedSnippetReference,
    NoConfigurationError,
    SnipweaveError,
    SnippetAlreadyDefined,
    SnippetEndNotFound,
    SnippetNotFound,
)
from .glossary import (
    ContextualTerm,
    ExternalGlossary,
    GenerationContext,
    Glossary,
    InlineGlossary,
    ScalarTerm,
    resolve_term,
)
from .references import Reference, ReferenceKind, ReferenceResolver, parse_reference
from .resources import AssemblyDependencies, ResourceCache
from .snippets import extract_snippets, lookup_snippet, normalize_indentation

__all__ = [
    "GenerationSummary",
    "TargetOutcome",
    "assemble_target",
    "generate",
    "generate_all",
    "RenderMode",
    "filter_code_blocks",
    "is_hidden_line",
    "visible_lines",
    "Configuration",
    "DocumentSection",
    "FileTarget",
    "InlineSection",
    "discover_configurations",
    "load_configuration",
    "parse_configuration",
    "ConfigFormatError",
    "GlossaryTermNotFound",
    "HttpError",
    "IoError",
    "MalformedCodeBlock",
    "MalformedSnippetReference",
    "NoConfigurationError",
    "SnipweaveError",
    "SnippetAlreadyDefined",
    "SnippetEndNotFound",
    "SnippetNotFound",
    "ContextualTerm",
    "ExternalGlossary",
    "GenerationContext",
    "Glossary",
    "InlineGlossary",
    "ScalarTerm",
    "resolve_term",
    "Reference",
    "ReferenceKind",
    "ReferenceResolver",
    "parse_reference",
    "AssemblyDependencies",
    "ResourceCache",
    "extract_snippets",
    "lookup_snippet",
    "normalize_indentation",
]
