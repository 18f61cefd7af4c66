"""Console entry point that dispatches to snipweave subcommands."""

from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence

DEFAULT_COMMAND = "generate"


@dataclass(frozen=True)
class CommandSpec:
    """A subcommand implemented by ``module:function``."""

    name: str
    summary: str
    target: str

    def run(self, argv: Sequence[str]) -> int:
        module_name, func_name = self.target.split(":")
        func = getattr(import_module(module_name), func_name)
        return _invoke_main(func, f"snipweave {self.name}", argv)


COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec(
            "generate",
            "Assemble every configured document (default command).",
            "snipweave.assembly.cli:main",
        ),
        CommandSpec(
            "init",
            "Write a starter .snipweave.toml configuration.",
            "snipweave.assembly.cli:init_main",
        ),
    )
}


def format_command_table() -> str:
    width = max(map(len, COMMANDS))
    rows = [f"  {spec.name:<{width}}  {spec.summary}" for spec in COMMANDS.values()]
    return "\n".join(["Available commands:", *rows])


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: snipweave [command] [args...]",
            "Without a command, `snipweave` runs `generate`.",
            "Run `snipweave list` for commands or `snipweave help <name>` for "
            "details.",
            "",
            format_command_table(),
        ]
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0].startswith("-") and args[0] not in _BUILTINS:
        # Bare options belong to the default command.
        return COMMANDS[DEFAULT_COMMAND].run(args)

    head, tail = args[0], args[1:]
    builtin = _BUILTINS.get(head)
    if builtin is not None:
        return builtin(tail)
    spec = COMMANDS.get(head)
    if spec is None:
        return _unknown_command(head)
    return spec.run(tail)


def _show_usage(_: Sequence[str]) -> int:
    _out(format_usage())
    return 0


def _show_commands(_: Sequence[str]) -> int:
    _out(format_command_table())
    return 0


def _show_version(_: Sequence[str]) -> int:
    try:
        _out(metadata.version("snipweave"))
    except metadata.PackageNotFoundError:
        _out("unknown")
    return 0


def _show_help(argv: Sequence[str]) -> int:
    if not argv:
        return _show_usage(argv)
    spec = COMMANDS.get(argv[0])
    if spec is None:
        return _unknown_command(argv[0])
    _out(f"{spec.name}: {spec.summary}")
    _out(f"Run `snipweave {spec.name} --help` for command options.")
    return 0


_BUILTINS: Mapping[str, Callable[[Sequence[str]], int]] = {
    "-h": _show_usage,
    "--help": _show_usage,
    "-V": _show_version,
    "--version": _show_version,
    "version": _show_version,
    "list": _show_commands,
    "help": _show_help,
}


def _unknown_command(name: str) -> int:
    _err(f"Unknown command '{name}'.")
    _err(format_command_table())
    return 2


def _out(text: str) -> None:
    sys.stdout.write(text + "\n")


def _err(text: str) -> None:
    sys.stderr.write(text + "\n")


def _invoke_main(
    func: Callable[..., object], prog_name: str, argv: Sequence[str]
) -> int:
    """Call ``func`` like a script: ``sys.argv`` set and ``SystemExit`` caught."""

    args = list(argv)
    saved = sys.argv
    sys.argv = [prog_name, *args]
    try:
        result = func(args) if _takes_argv(func) else func()
    except SystemExit as exc:
        if exc.code is None or isinstance(exc.code, int):
            return exc.code or 0
        _err(str(exc.code))
        return 1
    finally:
        sys.argv = saved
    return result if isinstance(result, int) else 0


def _takes_argv(func: Callable[..., object]) -> bool:
    try:
        parameters = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
        inspect.Parameter.VAR_POSITIONAL,
    )
    return any(param.kind in positional for param in parameters)


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
