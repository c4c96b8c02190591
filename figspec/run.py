# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Parses an argument vector and dispatches the resulting action.

`execute` is the plumbing: it parses, selects an action and returns the exit
code the process should use. `run` wraps it with `asyncio.run` and exits.

Dispatch rules:
- A parse error is printed together with help for the failing command, and the
  exit code is 1.
- The last option action wins. Without one, the action of the deepest command
  that has one is used. Without any action the exit code is 1.
- Actions may be plain functions or coroutines. Returning `None` means 0, any
  other integer is clamped to 0..255, and a value that is not an integer
  gives 1.
- An `Exception` raised by an action is printed and mapped to exit code 1.

Example:
    def greet(init: ActionInit) -> int:
        print(f"Hello {init.args[0]}")
        return 0

    spec = Command(name="greet", args=Arg(name="name"), action=greet)
    run(spec)
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from rich.markup import escape

from figspec.console import error_console
from figspec.exceptions import ParseError, UnknownOption
from figspec.help import get_help
from figspec.logger import logger
from figspec.parse import ParseResult, parse
from figspec.spec import Command
from figspec.utils import ensure_async

MIN_EXIT_CODE = 0
MAX_EXIT_CODE = 255


def print_error(*strings: object) -> None:
    """Print an error message to stderr, prefixed with a styled `Error:`."""
    text = " ".join(str(string) for string in strings)
    error_console.print(
        f"[figspec.error]Error:[/] {escape(text)}", highlight=False, soft_wrap=True
    )


class OptionValues(Mapping[str, tuple[str, ...]]):
    """Read-only view over the options found while parsing."""

    def __init__(self, options: Mapping[str, tuple[str, ...]]) -> None:
        self._options = options

    def __getitem__(self, name: str) -> tuple[str, ...]:
        return self._options[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def has(self, name: str) -> bool:
        return name in self._options

    def first(self, name: str, default: str | None = None) -> str | None:
        """Return the first value bound to `name`, or `default`."""
        values = self._options.get(name)
        if not values:
            return default
        return values[0]

    def all(self, name: str) -> tuple[str, ...]:
        return self._options.get(name, ())

    def count(self, name: str) -> int:
        """Number of values bound to `name`, which is the use count for repeatable options."""
        return len(self._options.get(name, ()))

    def __repr__(self) -> str:
        return f"OptionValues({dict(self._options)!r})"


@dataclass
class ActionInit:
    """
    Everything an action receives when it is dispatched.

    Attributes:
        options (OptionValues): Options found while parsing, keyed by every alias.
        args (tuple[str, ...]): Positional arguments of the last command.
        path (tuple[Command, ...]): Matched commands from the root to the leaf.
        arg_separator_index (int | None): Number of positional arguments before `--`.
    """

    options: OptionValues
    args: tuple[str, ...]
    path: tuple[Command, ...]
    arg_separator_index: int | None = None

    @classmethod
    def from_result(cls, result: ParseResult) -> ActionInit:
        return cls(
            options=OptionValues(result.options),
            args=result.args,
            path=result.path,
            arg_separator_index=result.arg_separator_index,
        )

    def error(self, *strings: object) -> None:
        print_error(*strings)

    def help(
        self,
        path: Sequence[Command] | None = None,
        *,
        description: bool = True,
        usage: bool = True,
        did_you_mean: tuple[str, Sequence[str]] | None = None,
    ) -> str:
        """Return help text for `path`, defaulting to the parsed path."""
        return get_help(
            path or self.path,
            description=description,
            usage=usage,
            did_you_mean=did_you_mean,
        )


def clamp_exit_code(code: object) -> int:
    """Map an action's return value to a process exit code."""
    if code is None:
        return 0
    if not isinstance(code, int):
        logger.warning("Action returned %r instead of an integer exit code", code)
        return 1
    return min(max(code, MIN_EXIT_CODE), MAX_EXIT_CODE)


def format_parse_error(error: ParseError) -> str:
    """Render a parse error followed by help for the command it happened in."""
    if isinstance(error, UnknownOption):
        help_message = get_help(
            error.path,
            description=False,
            did_you_mean=(error.option, error.valid_options),
        )
    else:
        help_message = get_help(error.path, description=False)
    return f"{error.message}\n\n{help_message}"


async def execute(spec: Command, argv: Sequence[str]) -> int:
    """
    Parse `argv` against `spec` and run the selected action.

    Args:
        spec (Command): The root command.
        argv (Sequence[str]): Arguments without the program name.

    Returns:
        int: The exit code, between 0 and 255.
    """
    try:
        result = parse(argv, spec)
    except ParseError as error:
        logger.debug("Parse failed: %s", error.message)
        print_error(format_parse_error(error))
        return 1

    if result.option_actions:
        action = result.option_actions[-1]
    elif result.actions:
        action = result.actions[-1]
    else:
        logger.debug("No action found for path %s", [cmd.names[0] for cmd in result.path])
        return 1

    init = ActionInit.from_result(result)
    logger.debug("Dispatching %s", getattr(action, "__name__", action))
    try:
        code = await ensure_async(action)(init)
    except Exception as error:
        logger.debug("Action %s failed", getattr(action, "__name__", action), exc_info=True)
        print_error(str(error) or type(error).__name__)
        return 1

    return clamp_exit_code(code)


def run(spec: Command, argv: Sequence[str] | None = None) -> None:
    """Run `spec` against `argv` (default `sys.argv[1:]`) and exit the process."""
    if argv is None:
        argv = sys.argv[1:]
    code = asyncio.run(execute(spec, argv))
    sys.exit(code)


__all__ = [
    "ActionInit",
    "OptionValues",
    "clamp_exit_code",
    "execute",
    "format_parse_error",
    "print_error",
    "run",
]
