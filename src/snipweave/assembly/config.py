"""Configuration model and TOML loader for document assembly."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Optional, Sequence, Tuple, Union

from snipweave.core import config as core_config
from snipweave.core.files import find_files

from .codeblocks import DEFAULT_LANGUAGES
from .errors import ConfigFormatError, IoError, NoConfigurationError
from .glossary import (
    ExternalGlossary,
    GlossarySource,
    InlineGlossary,
    parse_glossary,
)
from .resources import is_remote

CONFIG_FILENAME = ".snipweave.toml"
CONFIG_DIRNAME = ".snipweave"
CONFIG_DIR_FILENAME = "config.toml"
ENV_PREFIX = "SNIPWEAVE_"

_DEFAULT_LOG_LEVEL = "INFO"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_TOP_LEVEL_KEYS = {"files", "glossaries", "glossary", "render"}
_TARGET_KEYS = {"sections", "for_docs", "glossaries", "glossary"}


@dataclass(frozen=True)
class InlineSection:
    """Section text written in the configuration."""

    text: str


@dataclass(frozen=True)
class DocumentSection:
    """Section text read from a local file or fetched from a URL."""

    locator: str


Section = Union[InlineSection, DocumentSection]


@dataclass(frozen=True)
class FileTarget:
    """One output document and the sections that compose it."""

    output: str
    sections: Tuple[Section, ...]
    glossaries: Tuple[GlossarySource, ...] = ()
    for_docs: bool = False


@dataclass(frozen=True)
class Configuration:
    """A parsed configuration file."""

    base_dir: Path
    targets: Tuple[FileTarget, ...]
    glossaries: Tuple[GlossarySource, ...] = ()
    hidden_line_languages: Tuple[str, ...] = DEFAULT_LANGUAGES
    source: Optional[Path] = None

    def output_path(self, target: FileTarget) -> Path:
        return self.base_dir / target.output


def load_configuration(path: Path) -> Configuration:
    """Read ``path`` and build a :class:`Configuration` relative to its folder."""

    try:
        raw = core_config.load_toml(path)
    except core_config.TomlConfigError as exc:
        raise ConfigFormatError(str(exc)) from exc
    return parse_configuration(
        raw,
        base_dir=path.parent.resolve(),
        source=path,
    )


def parse_configuration(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source: Optional[Path] = None,
) -> Configuration:
    where = str(source) if source is not None else "configuration"

    unknown = sorted(set(raw) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigFormatError(
            f"unknown keys in {where}: {', '.join(unknown)}"
        )

    files = raw.get("files")
    if not isinstance(files, Mapping):
        raise ConfigFormatError(f"{where} must define a [files] table")

    render = _default_render_table()
    try:
        core_config.merge_defaults(render, _expect_table(raw, "render", where))
    except core_config.TomlConfigError as exc:
        raise ConfigFormatError(f"[render] in {where}: {exc}") from exc

    return Configuration(
        base_dir=base_dir,
        targets=tuple(
            _parse_target(str(name), value, where=where)
            for name, value in files.items()
        ),
        glossaries=_parse_glossary_sources(raw, where=where),
        hidden_line_languages=_normalize_languages(
            render["hidden_line_languages"], where=where
        ),
        source=source,
    )


def discover_configurations(directory: Path) -> List[Path]:
    """Find every configuration file below ``directory``.

    Both ``.snipweave.toml`` files and ``.snipweave/config.toml`` files are
    recognised.
    """

    try:
        found = list(find_files(directory, _is_config_file))
    except OSError as exc:
        raise IoError(directory, exc) from exc
    if not found:
        raise NoConfigurationError(directory)
    return found


def resolve_release(flag: bool, env: Optional[Mapping[str, str]] = None) -> bool:
    """CLI flag first, then ``SNIPWEAVE_RELEASE``."""

    if flag:
        return True
    raw = _env_string(env, "RELEASE")
    return raw is not None and raw.lower() in _TRUE_VALUES


def resolve_log_level(
    override: Optional[str], env: Optional[Mapping[str, str]] = None
) -> str:
    for candidate in (override, _env_string(env, "LOG_LEVEL")):
        if candidate and candidate.strip():
            return candidate.strip().upper()
    return _DEFAULT_LOG_LEVEL


def _is_config_file(path: Path) -> bool:
    if path.name == CONFIG_FILENAME:
        return True
    return path.name == CONFIG_DIR_FILENAME and path.parent.name == CONFIG_DIRNAME


def _default_render_table() -> MutableMapping[str, object]:
    return {"hidden_line_languages": list(DEFAULT_LANGUAGES)}


def _normalize_languages(value: object, *, where: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in value
    ):
        raise ConfigFormatError(
            f"render.hidden_line_languages in {where} must be a list of strings"
        )
    seen: List[str] = []
    for item in value:
        language = item.strip().lower()
        if language and language not in seen:
            seen.append(language)
    return tuple(seen)


def _parse_target(output: str, value: Any, *, where: str) -> FileTarget:
    if not output.strip():
        raise ConfigFormatError(f"empty output file name in {where}")
    label = f"files.{output!r} in {where}"

    if isinstance(value, list):
        return FileTarget(
            output=output,
            sections=_parse_sections(value, where=label),
        )
    if not isinstance(value, Mapping):
        raise ConfigFormatError(
            f"{label} must be a list of sections or a table"
        )

    unknown = sorted(set(value) - _TARGET_KEYS)
    if unknown:
        raise ConfigFormatError(f"unknown keys in {label}: {', '.join(unknown)}")

    sections = value.get("sections")
    if not isinstance(sections, list):
        raise ConfigFormatError(f"{label} needs a 'sections' list")
    for_docs = value.get("for_docs", False)
    if not isinstance(for_docs, bool):
        raise ConfigFormatError(f"{label}: for_docs must be true or false")

    return FileTarget(
        output=output,
        sections=_parse_sections(sections, where=label),
        glossaries=_parse_glossary_sources(value, where=label),
        for_docs=for_docs,
    )


def _parse_sections(values: Sequence[Any], *, where: str) -> Tuple[Section, ...]:
    sections: List[Section] = []
    for index, value in enumerate(values):
        if isinstance(value, str):
            sections.append(InlineSection(value))
            continue
        if not isinstance(value, Mapping):
            raise ConfigFormatError(
                f"section {index} of {where} must be a string or a table"
            )
        sections.append(_parse_document_section(value, index=index, where=where))
    return tuple(sections)


def _parse_document_section(
    value: Mapping[str, Any], *, index: int, where: str
) -> DocumentSection:
    keys = set(value)
    if len(keys) != 1 or not keys <= {"file", "url"}:
        raise ConfigFormatError(
            f"section {index} of {where} needs exactly one of 'file' or 'url'"
        )
    (key,) = keys
    locator = value[key]
    if not isinstance(locator, str) or not locator.strip():
        raise ConfigFormatError(
            f"section {index} of {where}: '{key}' must be a non-empty string"
        )
    if key == "url" and not is_remote(locator):
        raise ConfigFormatError(
            f"section {index} of {where}: url must start with http:// or https://"
        )
    return DocumentSection(locator.strip())


def _parse_glossary_sources(
    table: Mapping[str, Any], *, where: str
) -> Tuple[GlossarySource, ...]:
    items = table.get("glossaries", [])
    if not isinstance(items, list):
        raise ConfigFormatError(f"'glossaries' in {where} must be a list")

    sources: List[GlossarySource] = []
    for index, item in enumerate(items):
        if isinstance(item, str) and item.strip():
            sources.append(ExternalGlossary(item.strip()))
        elif isinstance(item, Mapping):
            sources.append(
                InlineGlossary(
                    parse_glossary(item, source=f"{where} glossaries[{index}]")
                )
            )
        else:
            raise ConfigFormatError(
                f"glossaries[{index}] in {where} must be a locator or a table"
            )

    inline = table.get("glossary")
    if inline is not None:
        sources.append(
            InlineGlossary(parse_glossary(inline, source=f"{where} [glossary]"))
        )
    return tuple(sources)


def _expect_table(
    raw: Mapping[str, Any], key: str, where: str
) -> Mapping[str, Any]:
    value = raw.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigFormatError(f"'{key}' in {where} must be a table")
    return value


def _env_string(env: Optional[Mapping[str, str]], key: str) -> Optional[str]:
    env_map = os.environ if env is None else env
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None
