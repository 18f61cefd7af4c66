"""Sequential document generation for one or more configurations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from snipweave.core.config import TomlConfigError, parse_toml

from .codeblocks import RenderMode, filter_code_blocks
from .config import (
    Configuration,
    DocumentSection,
    FileTarget,
    load_configuration,
)
from .errors import ConfigFormatError, IoError
from .glossary import GenerationContext, Glossary, Term, parse_glossary
from .references import ReferenceResolver
from .resources import AssemblyDependencies, ResourceCache


@dataclass(frozen=True)
class TargetOutcome:
    """A document written by a generation run."""

    output_path: Path
    section_count: int
    byte_count: int


@dataclass(frozen=True)
class GenerationSummary:
    """Aggregated results for a generation run."""

    configurations: tuple[Path, ...]
    outcomes: tuple[TargetOutcome, ...]

    @property
    def file_count(self) -> int:
        return len(self.outcomes)


def assemble_target(
    target: FileTarget,
    *,
    glossary: Glossary,
    resolver: ReferenceResolver,
    languages: Sequence[str],
    release: bool = False,
) -> bytes:
    """Build the complete contents of ``target``.

    Sections are joined exactly as configured; no separator is added.
    """

    context = GenerationContext(release=release, for_docs=target.for_docs)
    mode = RenderMode.for_target(target.for_docs)
    fragments: List[str] = []
    for section in target.sections:
        if isinstance(section, DocumentSection):
            text = resolver.cache.text(section.locator, resolver.base_dir)
        else:
            text = section.text
        expanded = resolver.expand(text, glossary, context)
        fragments.append(
            filter_code_blocks(expanded, languages=languages, mode=mode)
        )
    return "".join(fragments).encode("utf-8")


def generate(
    configuration: Configuration,
    *,
    release: bool,
    dependencies: AssemblyDependencies,
    logger: logging.Logger,
    cache: Optional[ResourceCache] = None,
) -> tuple[TargetOutcome, ...]:
    """Generate every target of ``configuration`` in declaration order.

    The first failure propagates; targets after it are not written.
    """

    if cache is None:
        cache = ResourceCache(dependencies=dependencies, logger=logger)
    resolver = ReferenceResolver(
        base_dir=configuration.base_dir, cache=cache, logger=logger
    )

    def load_glossary(locator: str) -> Mapping[str, Term]:
        return _load_glossary(cache, locator, configuration.base_dir)

    global_glossary = Glossary.compose(configuration.glossaries, load_glossary)
    logger.info(
        "Starting generation",
        extra={
            "config": str(configuration.source or configuration.base_dir),
            "target_count": len(configuration.targets),
            "term_count": len(global_glossary),
            "release": release,
        },
    )

    outcomes: List[TargetOutcome] = []
    for target in configuration.targets:
        glossary = global_glossary
        if target.glossaries:
            glossary = Glossary.compose(
                target.glossaries, load_glossary, base=global_glossary
            )
        content = assemble_target(
            target,
            glossary=glossary,
            resolver=resolver,
            languages=configuration.hidden_line_languages,
            release=release,
        )
        output_path = configuration.output_path(target)
        try:
            dependencies.write(output_path, content)
        except OSError as exc:
            raise IoError(output_path, exc) from exc
        logger.info(
            "Wrote document",
            extra={
                "output_path": str(output_path),
                "section_count": len(target.sections),
                "byte_count": len(content),
            },
        )
        outcomes.append(
            TargetOutcome(
                output_path=output_path,
                section_count=len(target.sections),
                byte_count=len(content),
            )
        )
    return tuple(outcomes)


def generate_all(
    config_paths: Sequence[Path],
    *,
    release: bool,
    dependencies: AssemblyDependencies,
    logger: logging.Logger,
    on_configuration: Optional[Callable[[Path], None]] = None,
) -> GenerationSummary:
    """Run several configurations sharing one per-run resource cache.

    ``on_configuration`` is called with each path just before it is loaded.
    """

    cache = ResourceCache(dependencies=dependencies, logger=logger)
    outcomes: List[TargetOutcome] = []
    for path in config_paths:
        if on_configuration is not None:
            on_configuration(path)
        logger.info("Processing configuration", extra={"config": str(path)})
        configuration = load_configuration(path)
        outcomes.extend(
            generate(
                configuration,
                release=release,
                dependencies=dependencies,
                logger=logger,
                cache=cache,
            )
        )
    summary = GenerationSummary(
        configurations=tuple(config_paths),
        outcomes=tuple(outcomes),
    )
    logger.info(
        "Completed generation",
        extra={
            "config_count": len(summary.configurations),
            "file_count": summary.file_count,
        },
    )
    return summary


def _load_glossary(
    cache: ResourceCache, locator: str, base_dir: Path
) -> Dict[str, Term]:
    text = cache.text(locator, base_dir)
    try:
        raw = parse_toml(text, source=locator)
    except TomlConfigError as exc:
        raise ConfigFormatError(str(exc)) from exc
    return parse_glossary(raw, source=locator)


__all__ = [
    "GenerationSummary",
    "TargetOutcome",
    "assemble_target",
    "generate",
    "generate_all",
]
