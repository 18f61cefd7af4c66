"""Core shared helpers for snipweave commands."""

from __future__ import annotations

from .config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
    parse_toml,
    write_toml_template,
)
from .config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
    get_template,
    iter_templates,
)
from .files import find_files, read_bytes, write_bytes
from .http import fetch_url, token_from_env
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "parse_toml",
    "write_toml_template",
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
    "iter_templates",
    "find_files",
    "read_bytes",
    "write_bytes",
    "fetch_url",
    "token_from_env",
    "configure_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WorkspaceError",
    "WORKSPACE_ENV",
]
