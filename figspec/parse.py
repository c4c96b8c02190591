# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Consumes the analyzer's token stream and assembles a `ParseResult`.

The parser is a small state machine with three states:

- `COLLECTING_POSITIONALS`: values are bound to the current command.
- `COLLECTING_OPTION_ARGS`: values fill the open option up to its maximum.
- `COLLECTING_OPTION_ARGS_REQUIRE_SEPARATOR`: the open option only accepts a
  value attached through an inline separator (`--opt=value`).

Any violated rule raises a `ParseError` subclass immediately. After the last
token the parser checks argument counts, option dependencies and exclusions,
and required options.

Example:
    spec = Command(name="bench", options=[Option(name="--runs", args=Arg())])
    result = parse(["--runs", "3"], spec)
    # result.options == {"--runs": ("3",)}
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from figspec.analyze import OptionScope, Token, TokenKind, analyze
from figspec.exceptions import (
    InvalidOptionArg,
    MissingRequiredOption,
    ParseError,
    TooFewArguments,
    TooFewOptionArguments,
    TooManyArguments,
    UnknownOption,
)
from figspec.help import usage as builtin_usage_action
from figspec.logger import logger
from figspec.spec import Action, Command, Option
from figspec.utils import get_max_args, get_min_args, set_each


class ParseState(Enum):
    COLLECTING_POSITIONALS = "collecting-positionals"
    COLLECTING_OPTION_ARGS = "collecting-option-args"
    COLLECTING_OPTION_ARGS_REQUIRE_SEPARATOR = "collecting-option-args-require-separator"


@dataclass(frozen=True)
class ParseResult:
    """
    The outcome of a successful parse.

    Attributes:
        path (tuple[Command, ...]): Matched commands from the root to the leaf.
        args (tuple[str, ...]): Positional arguments bound to the leaf command.
        options (Mapping[str, tuple[str, ...]]): Option values keyed by every alias.
            Repeatable options hold one empty string per use.
        arg_separator_index (int | None): Number of positional arguments seen
            before `--`, or None when `--` was not used.
        actions (tuple[Action, ...]): Command actions along the path.
        option_actions (tuple[Action, ...]): Option actions in encounter order.
    """

    path: tuple[Command, ...]
    args: tuple[str, ...]
    options: Mapping[str, tuple[str, ...]]
    arg_separator_index: int | None
    actions: tuple[Action, ...]
    option_actions: tuple[Action, ...]


class ParseStateMachine:
    """Request-scoped parser state. Create one per parse."""

    def __init__(self, spec: Command) -> None:
        self.path: list[Command] = []
        self.actions: list[Action] = []
        self.option_actions: list[Action] = []
        self.found_args: list[str] = []
        self.found_options: dict[str, list[str]] = {}
        self.state: ParseState = ParseState.COLLECTING_POSITIONALS
        self.arg_separator_index: int | None = None

        self.command_args_min: int = 0
        self.command_args_max: int | float = 0

        self.open_option: Option | None = None
        self.option_args: list[str] | None = None
        self.option_args_min: int = 0
        self.option_args_max: int | float = 0
        self.required_separator: bool | str = False

        self.depends_on_options: list[Option] = []
        self.exclusive_on_options: list[Option] = []

        self._enter_command(spec)

    def _enter_command(self, command: Command) -> None:
        self.path.append(command)
        args = command.arg_list
        self.command_args_min = get_min_args(args)
        self.command_args_max = get_max_args(args)
        if command.action is not None:
            self.actions.append(command.action)
        elif command.requires_subcommand:
            self.actions.append(builtin_usage_action)

    def _too_few_option_args(self) -> TooFewOptionArguments:
        name = self.open_option.names[0] if self.open_option else None
        return TooFewOptionArguments(
            self.option_args_min, self.option_args_max, self.path, option=name
        )

    def _close_option(self) -> None:
        """Finish the open option, enforcing its minimum argument count."""
        if self.option_args is not None and len(self.option_args) < self.option_args_min:
            raise self._too_few_option_args()
        self.open_option = None
        self.option_args = None
        self.state = ParseState.COLLECTING_POSITIONALS

    def _parse_option(self, token: Token) -> None:
        option = token.option
        assert option is not None, "option token must carry an option"
        names = option.names

        if not option.is_repeatable and names[0] in self.found_options:
            raise ParseError(f"Option {token.literal} cannot be repeated", self.path)

        if option.exclusive_on:
            self.exclusive_on_options.append(option)
        if option.depends_on:
            self.depends_on_options.append(option)
        if option.action is not None:
            self.option_actions.append(option.action)

        if option.is_repeatable:
            max_repeat = None if option.is_repeatable is True else option.is_repeatable
            values = self.found_options.get(names[0])
            if values is None:
                values = []
                set_each(self.found_options, names, values)
            if max_repeat is not None and len(values) >= max_repeat:
                raise ParseError(
                    f"Option {token.literal} can be used at most {max_repeat} time(s)",
                    self.path,
                )
            values.append("")
            return

        args = option.arg_list
        self.option_args_min = get_min_args(args)
        self.option_args_max = get_max_args(args)
        self.option_args = []
        set_each(self.found_options, names, self.option_args)

        if self.option_args_max == 0:
            self.open_option = None
            self.option_args = None
            self.state = ParseState.COLLECTING_POSITIONALS
            return

        self.open_option = option
        if option.requires_separator:
            self.state = ParseState.COLLECTING_OPTION_ARGS_REQUIRE_SEPARATOR
            self.required_separator = option.requires_separator
        else:
            self.state = ParseState.COLLECTING_OPTION_ARGS

    def _parse_arg(self, token: Token) -> None:
        # A command that requires a subcommand tolerates surplus arguments, the
        # usage action reports them as an unknown command instead.
        if (
            not self.path[-1].requires_subcommand
            and len(self.found_args) >= self.command_args_max
        ):
            raise TooManyArguments(token, self.path)
        self.found_args.append(token.literal)

    def _parse_arg_separator(self) -> None:
        if len(self.found_args) >= self.command_args_max:
            raise ParseError(
                "Unexpected argument '--', did you mean to use an option instead?",
                self.path,
            )
        self.arg_separator_index = len(self.found_args)
        self.state = ParseState.COLLECTING_POSITIONALS

    def _parse_subcommand(self, token: Token) -> None:
        assert token.subcommand is not None, "subcommand token must carry a command"
        self._enter_command(token.subcommand)

    def feed(self, token: Token) -> None:
        """Consume one token."""
        if self.state is ParseState.COLLECTING_POSITIONALS:
            self._feed_positionals(token)
        elif self.state is ParseState.COLLECTING_OPTION_ARGS:
            self._feed_option_args(token)
        else:
            self._feed_option_args_require_separator(token)

    def _feed_positionals(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.SUBCOMMAND:
            self._parse_subcommand(token)
        elif kind is TokenKind.ARG:
            self._parse_arg(token)
        elif kind is TokenKind.OPTION:
            self._parse_option(token)
        elif kind is TokenKind.UNKNOWN_OPTION:
            raise UnknownOption(token, self.path)
        elif kind is TokenKind.OPTION_ARG:
            raise InvalidOptionArg(token, self.path)
        elif kind is TokenKind.ARG_SEPARATOR:
            self._parse_arg_separator()
        else:
            raise ParseError(f"Unexpected token kind: {kind}", self.path)

    def _feed_option_args(self, token: Token) -> None:
        assert self.option_args is not None, "an option must be open to collect arguments"
        kind = token.kind
        if kind in (TokenKind.OPTION_ARG, TokenKind.ARG):
            if len(self.option_args) < self.option_args_max:
                self.option_args.append(token.literal)
            else:
                self._close_option()
                self._parse_arg(token)
        elif kind is TokenKind.OPTION:
            self._close_option()
            self._parse_option(token)
        elif kind is TokenKind.UNKNOWN_OPTION:
            if len(self.option_args) < self.option_args_max:
                self.option_args.append(token.literal)
            else:
                raise UnknownOption(token, self.path)
        elif kind is TokenKind.ARG_SEPARATOR:
            self._close_option()
            self._parse_arg_separator()
        elif kind is TokenKind.SUBCOMMAND:
            self._close_option()
            self._parse_subcommand(token)
        else:
            raise ParseError(f"Unexpected token kind: {kind}", self.path)

    def _feed_option_args_require_separator(self, token: Token) -> None:
        assert self.option_args is not None, "an option must be open to collect arguments"
        assert self.required_separator, "a separator must be required in this state"
        kind = token.kind
        if kind is TokenKind.OPTION_ARG:
            if (
                isinstance(self.required_separator, str)
                and token.separator != self.required_separator
            ):
                raise ParseError(
                    f"Incorrect separator, use '{self.required_separator}' "
                    f"instead of '{token.separator}'",
                    self.path,
                )
            self.option_args.append(token.literal)
            self._close_option()
        elif kind is TokenKind.ARG:
            self._close_option()
            self._parse_arg(token)
        elif kind is TokenKind.OPTION:
            self._close_option()
            self._parse_option(token)
        elif kind is TokenKind.SUBCOMMAND:
            self._close_option()
            self._parse_subcommand(token)
        elif kind is TokenKind.UNKNOWN_OPTION:
            raise UnknownOption(token, self.path)
        elif kind is TokenKind.ARG_SEPARATOR:
            raise ParseError(
                f"Unexpected token '{token.literal}', option values must be attached "
                "with a separator",
                self.path,
            )
        else:
            raise ParseError(f"Unexpected token kind: {kind}", self.path)

    def finish(self, final_state: OptionScope) -> ParseResult:
        """Run the end-of-input checks and build the result."""
        if not self.option_actions and len(self.found_args) < self.command_args_min:
            raise TooFewArguments(self.command_args_min, self.command_args_max, self.path)
        if self.option_args is not None and len(self.option_args) < self.option_args_min:
            raise self._too_few_option_args()

        for option in self.depends_on_options:
            for name in option.depends_on:
                if name not in self.found_options:
                    raise ParseError(
                        f"{option.names[0]} requires {name}, add it to fix this error",
                        self.path,
                    )
        for option in self.exclusive_on_options:
            for name in option.exclusive_on:
                if name in self.found_options:
                    raise ParseError(
                        f"{option.names[0]} can't be used together with {name}",
                        self.path,
                    )
        for name in final_state.local_required_options:
            if name not in self.found_options:
                raise MissingRequiredOption(name, self.path)
        for name in final_state.persistent_required_options:
            if name not in self.found_options:
                raise MissingRequiredOption(name, self.path)

        return ParseResult(
            path=tuple(self.path),
            args=tuple(self.found_args),
            options=MappingProxyType(
                {name: tuple(values) for name, values in self.found_options.items()}
            ),
            arg_separator_index=self.arg_separator_index,
            actions=tuple(self.actions),
            option_actions=tuple(self.option_actions),
        )


def parse(argv: Sequence[str], spec: Command) -> ParseResult:
    """
    Parse `argv` against `spec`.

    Args:
        argv (Sequence[str]): The already-split argument vector.
        spec (Command): The root command.

    Returns:
        ParseResult: The resolved command path and bound values.

    Raises:
        ParseError: If the input does not satisfy the spec.
    """
    analyzed = analyze(argv, spec)
    machine = ParseStateMachine(spec)
    for token in analyzed.tokens:
        machine.feed(token)
    result = machine.finish(analyzed.final_state)
    logger.debug(
        "Parsed path=%s args=%s options=%s",
        [command.names[0] for command in result.path],
        list(result.args),
        dict(result.options),
    )
    return result
