"""Starter configuration files shipped inside the package."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Iterable

from .config import TomlConfigError, write_toml_template

__all__ = [
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
    "iter_templates",
]


class ConfigTemplateError(RuntimeError):
    """A template is unknown, missing from the package or cannot be written."""


@dataclass(frozen=True)
class ConfigTemplate:
    """A TOML file bundled as package data."""

    name: str
    package: str
    filename: str
    description: str

    def read_text(self) -> str:
        resource = resources.files(self.package) / self.filename
        try:
            return resource.read_text(encoding="utf-8")
        except (FileNotFoundError, ModuleNotFoundError) as exc:  # pragma: no cover
            raise ConfigTemplateError(
                f"Template '{self.name}' is missing from {self.package}."
            ) from exc

    def write(self, path: Path, *, overwrite: bool = False) -> Path:
        """Copy the template to ``path`` and return it."""

        text = self.read_text()
        try:
            return write_toml_template(path, template=text, overwrite=overwrite)
        except TomlConfigError as exc:
            raise ConfigTemplateError(str(exc)) from exc


_REGISTERED = (
    ConfigTemplate(
        name="assembly",
        package="snipweave.assembly",
        filename="template.toml",
        description="Starter .snipweave.toml describing one README target.",
    ),
)
_BY_NAME = {template.name: template for template in _REGISTERED}


def get_template(name: str) -> ConfigTemplate:
    template = _BY_NAME.get(name)
    if template is None:
        raise ConfigTemplateError(f"Unknown config template '{name}'.")
    return template


def iter_templates() -> Iterable[ConfigTemplate]:
    return _REGISTERED
