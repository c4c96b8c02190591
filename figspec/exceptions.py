# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by figspec.

Parse errors carry the command path that was active when parsing failed, so
that a runtime can render help for the right command, plus the data specific
to each failure (offending token and position, valid alternatives, expected
argument counts, missing option name).

All exceptions inherit from `FigspecError`, the base exception for the package.

Exception Hierarchy:
- FigspecError
    ├── ParseError
    │   ├── UnknownOption
    │   ├── InvalidOptionArg
    │   ├── TooManyArguments
    │   ├── TooFewOptionArguments
    │   ├── TooFewArguments
    │   └── MissingRequiredOption
    ├── SpecError
    └── ConfigError

Parse errors are never recovered from inside the parser. They propagate to the
caller of `figspec.parse`, and `figspec.run.execute` turns them into a printed
diagnostic and an exit code.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from figspec.analyze import Token
    from figspec.spec import Command


def _count_message(prefix: str, minimum: int, maximum: int | float) -> str:
    if minimum == maximum:
        return f"{prefix} {minimum} argument{'' if minimum == 1 else 's'}"
    if maximum == math.inf:
        return f"{prefix} at least {minimum} argument{'' if minimum == 1 else 's'}"
    return f"{prefix} between {minimum} and {maximum} arguments"


class FigspecError(Exception):
    """Base exception for figspec."""


class ParseError(FigspecError):
    """Exception raised when the input cannot be parsed against the spec."""

    def __init__(self, message: str, path: Sequence[Command]) -> None:
        super().__init__(message)
        self.message = message
        self.path: tuple[Command, ...] = tuple(path)


class UnknownOption(ParseError):
    """A token looks like an option but matches nothing in the active scope."""

    def __init__(self, token: Token, path: Sequence[Command]) -> None:
        super().__init__(
            f"'{token.literal}' looks like an option, but is unknown in this context",
            path,
        )
        self.option: str = token.literal
        self.valid_options: list[str] = list(token.valid_options)
        self.index: int = token.index
        self.start: int = token.start
        self.end: int = token.end


class InvalidOptionArg(ParseError):
    """An inline option argument arrived while no option accepts one."""

    def __init__(self, token: Token, path: Sequence[Command]) -> None:
        super().__init__(f"Option {token.option_name} doesn't take arguments", path)
        self.arg: str = token.literal
        self.option: str | None = token.option_name
        self.index: int = token.index
        self.start: int = token.start
        self.end: int = token.end


class TooManyArguments(ParseError):
    """A positional argument arrived after the command's maximum was reached."""

    def __init__(self, token: Token, path: Sequence[Command]) -> None:
        super().__init__(f"Too many arguments, '{token.literal}' was unexpected", path)
        self.index: int = token.index
        self.value: str = token.literal


class TooFewOptionArguments(ParseError):
    """An option was closed before receiving its minimum number of arguments."""

    def __init__(
        self,
        minimum: int,
        maximum: int | float,
        path: Sequence[Command],
        option: str | None = None,
    ) -> None:
        prefix = f"Option {option} needs" if option else "Option needs"
        super().__init__(_count_message(prefix, minimum, maximum), path)
        self.min = minimum
        self.max = maximum
        self.option = option


class TooFewArguments(ParseError):
    """The input ended before the command received its minimum number of arguments."""

    def __init__(
        self, minimum: int, maximum: int | float, path: Sequence[Command]
    ) -> None:
        super().__init__(_count_message("Expected", minimum, maximum), path)
        self.min = minimum
        self.max = maximum


class MissingRequiredOption(ParseError):
    """A required option never appeared."""

    def __init__(self, option: str, path: Sequence[Command]) -> None:
        super().__init__(f"Option {option} is required, but wasn't found", path)
        self.option = option


class SpecError(FigspecError):
    """Exception raised when a spec breaks a rule the parser relies on."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems: list[str] = list(problems)
        bullet_list = "\n".join(f" * {problem}" for problem in self.problems)
        super().__init__(f"The spec has {len(self.problems)} problem(s):\n{bullet_list}")


class ConfigError(FigspecError):
    """Exception raised when a spec file cannot be loaded."""
