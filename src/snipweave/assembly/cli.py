"""CLI entry points for ``snipweave generate`` and ``snipweave init``."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from snipweave.core import config_templates
from snipweave.core import workspace as workspace_mod
from snipweave.core.config_templates import ConfigTemplateError
from snipweave.core.files import read_bytes, write_bytes
from snipweave.core.http import DEFAULT_TIMEOUT, fetch_url, token_from_env
from snipweave.core.logging import configure_logger
from snipweave.core.workspace import WorkspaceError

from .assembler import GenerationSummary, generate_all
from .config import (
    CONFIG_FILENAME,
    discover_configurations,
    resolve_log_level,
    resolve_release,
)
from .errors import SnipweaveError
from .resources import AssemblyDependencies

CONFIG_TEMPLATE_NAME = "assembly"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snipweave generate",
        description=(
            "Assemble README-style documents from inline text, annotated "
            "source snippets, remote documents and glossary terms."
        ),
        epilog="Run `snipweave init` to scaffold a .snipweave.toml file.",
    )
    parser.add_argument(
        "--release",
        action="store_true",
        help="Use release values for glossary terms that define one.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Generate from this configuration file only (defaults to every "
            ".snipweave.toml and .snipweave/config.toml under --directory)."
        ),
    )
    parser.add_argument(
        "--directory",
        type=Path,
        help="Directory searched for configuration files (defaults to cwd).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the data directory that receives log files.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Seconds to wait for each remote document.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parser = build_arg_parser()
    args = parser.parse_args(args_list)

    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive.")

    load_dotenv(Path.cwd() / ".env")
    env = os.environ

    try:
        layout = workspace_mod.ensure_workspace(path=args.workspace)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    logger, log_path = configure_logger(
        "snipweave.assembly",
        log_dir=layout.path_for("logs"),
        level=resolve_log_level(args.log_level, env),
        verbose=args.verbose,
    )
    logger.debug("generate CLI invoked")

    dependencies = _build_dependencies(
        timeout=args.timeout,
        token=token_from_env(env),
    )

    try:
        summary = generate_all(
            _config_paths(args),
            release=resolve_release(args.release, env),
            dependencies=dependencies,
            logger=logger,
            on_configuration=_announce,
        )
    except SnipweaveError as exc:
        logger.error("Generation failed", exc_info=True)
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    _print_summary(summary, log_path)
    return 0


def init_main(argv: Optional[Sequence[str]] = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parser = _build_init_parser()
    args = parser.parse_args(args_list)

    target = _resolve_init_target(args.path)
    try:
        template = config_templates.get_template(CONFIG_TEMPLATE_NAME)
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote snipweave config to {written}\n")
    return 0


def _build_dependencies(
    *, timeout: Optional[float], token: Optional[str]
) -> AssemblyDependencies:
    """Return the default filesystem and network seams."""

    def fetch(url: str) -> bytes:
        return fetch_url(url, timeout=timeout, token=token)

    return AssemblyDependencies(read=read_bytes, write=write_bytes, fetch=fetch)


def _config_paths(args: argparse.Namespace) -> List[Path]:
    if args.config is not None:
        return [args.config.expanduser().resolve()]
    directory = args.directory if args.directory is not None else Path.cwd()
    return discover_configurations(directory.expanduser().resolve())


def _announce(path: Path) -> None:
    sys.stdout.write(f"Processing {path}\n")


def _print_summary(summary: GenerationSummary, log_path: Path) -> None:
    lines = [f"Wrote {outcome.output_path}" for outcome in summary.outcomes]
    lines.append(
        "Generated {0} file(s) from {1} configuration(s); log file: {2}".format(
            summary.file_count,
            len(summary.configurations),
            log_path,
        )
    )
    sys.stdout.write("\n".join(lines) + "\n")


def _build_init_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snipweave init",
        description="Write a starter .snipweave.toml configuration.",
    )
    parser.add_argument(
        "--path",
        type=Path,
        help="Destination for the config TOML (defaults to ./.snipweave.toml).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _resolve_init_target(path: Optional[Path]) -> Path:
    if path is None:
        return Path.cwd() / CONFIG_FILENAME
    candidate = path.expanduser()
    if not candidate.is_absolute():
        candidate = (Path.cwd() / candidate).resolve()
    return candidate


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
