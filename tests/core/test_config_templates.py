from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from snipweave.assembly.config import parse_configuration
from snipweave.core import config_templates
from snipweave.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)


def test_get_template_returns_assembly_template(tmp_path: Path) -> None:
    template = config_templates.get_template("assembly")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    assert "[files." in contents
    assert "hidden_line_languages" in contents

    target = tmp_path / "nested" / ".snipweave.toml"
    written = template.write(target)
    assert written == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(ConfigTemplateError):
        template.write(target)

    updated = template.write(target, overwrite=True)
    assert updated == target


def test_assembly_template_is_a_valid_configuration(tmp_path: Path) -> None:
    raw = tomllib.loads(config_templates.get_template("assembly").read_text())

    configuration = parse_configuration(raw, base_dir=tmp_path)

    assert [target.output for target in configuration.targets] == ["README.md"]
    assert configuration.hidden_line_languages == ("rust",)


def test_iter_templates_returns_registered_templates() -> None:
    names = {template.name for template in config_templates.iter_templates()}
    assert names == {"assembly"}


@pytest.mark.parametrize("unknown", ["missing", "", "convert_markdown"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)
