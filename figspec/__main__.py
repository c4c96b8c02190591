# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The `figspec` command line tool, itself declared as a figspec spec.

Commands:
- `figspec check <file> [--strict]`: load a spec file and lint it.
- `figspec parse <file> [--json] -- <argv>...`: parse argv against a spec file
  and show the result.
- `figspec help [command]`: print help.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich import box
from rich.markup import escape
from rich.table import Table

from figspec.config import load_spec
from figspec.console import console, error_console
from figspec.exceptions import ConfigError, ParseError
from figspec.help import help_command, help_option
from figspec.parse import ParseResult, parse
from figspec.run import ActionInit, format_parse_error, run
from figspec.spec import Arg, Command, Option
from figspec.utils import setup_logging
from figspec.validation import iter_problems
from figspec.version import __version__


def _init_logging(init: ActionInit) -> None:
    level = logging.DEBUG if init.options.has("--verbose") else logging.WARNING
    setup_logging(console_log_level=level)


def bootstrap(file_path: str) -> None:
    """Make modules next to the spec file importable for its dotted action paths."""
    spec_dir = str(Path(file_path).resolve().parent)
    if spec_dir not in sys.path:
        sys.path.insert(0, spec_dir)


def _load(init: ActionInit, file_path: str) -> Command | None:
    bootstrap(file_path)
    try:
        return load_spec(file_path)
    except ConfigError as error:
        init.error(str(error))
        return None


def check(init: ActionInit) -> int:
    _init_logging(init)
    file_path = init.args[0]
    spec = _load(init, file_path)
    if spec is None:
        return 1

    strict = init.options.has("--strict")
    problems = list(
        iter_problems(
            spec,
            allow_no_description=not strict,
            allow_long_description_lines=not strict,
        )
    )
    if problems:
        error_console.print(
            f"[figspec.error]{len(problems)} problem(s) found in {escape(file_path)}:[/]"
        )
        for problem in problems:
            error_console.print(f" * {escape(problem)}", soft_wrap=True, highlight=False)
        return 1

    console.print(f"[figspec.ok]OK[/] {escape(file_path)}")
    return 0


def result_to_dict(result: ParseResult) -> dict[str, Any]:
    return {
        "path": [command.names[0] for command in result.path],
        "args": list(result.args),
        "options": {name: list(values) for name, values in result.options.items()},
        "arg_separator_index": result.arg_separator_index,
    }


def _result_table(result: ParseResult) -> Table:
    table = Table(title=" ".join(command.names[0] for command in result.path), box=box.SIMPLE)
    table.add_column("Kind", style="figspec.muted")
    table.add_column("Name", style="figspec.heading")
    table.add_column("Values", overflow="fold")

    for index, arg in enumerate(result.args):
        table.add_row("arg", str(index), escape(arg))
    for name, values in result.options.items():
        table.add_row("option", escape(name), escape(", ".join(repr(value) for value in values)))
    if result.arg_separator_index is not None:
        table.add_row("separator", "--", str(result.arg_separator_index))
    return table


def parse_command(init: ActionInit) -> int:
    _init_logging(init)
    spec = _load(init, init.args[0])
    if spec is None:
        return 1

    argv = list(init.args[1:])
    try:
        result = parse(argv, spec)
    except ParseError as error:
        init.error(format_parse_error(error))
        return 1

    if init.options.has("--json"):
        console.print(json.dumps(result_to_dict(result)), markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(_result_table(result))
    return 0


def print_version(init: ActionInit) -> int:
    console.print(f"figspec v{__version__}", markup=False, highlight=False)
    return 0


FIGSPEC_SPEC = Command(
    name="figspec",
    description="Lint declarative CLI specs and try them out",
    requires_subcommand=True,
    options=[
        help_option,
        Option(
            name=["-v", "--verbose"],
            description="Show debug logging",
            is_persistent=True,
        ),
        Option(name="--version", description="Print the version", action=print_version),
    ],
    subcommands=[
        Command(
            name="check",
            description="Load a spec file and report problems",
            args=Arg(name="file"),
            options=[
                Option(
                    name="--strict",
                    description="Also require descriptions and short lines",
                )
            ],
            action=check,
        ),
        Command(
            name="parse",
            description="Parse arguments against a spec file\n\n"
            "Pass the arguments to parse after '--'.",
            args=[Arg(name="file"), Arg(name="argv", is_optional=True, is_variadic=True)],
            options=[Option(name="--json", description="Print the result as JSON")],
            action=parse_command,
        ),
        help_command,
    ],
)


def main() -> None:
    run(FIGSPEC_SPEC)


if __name__ == "__main__":
    main()
