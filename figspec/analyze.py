# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Lexical analysis of a raw argument vector against a figspec spec.

The analyzer walks the input once and classifies every entry using the scope
that is active at that point: the subcommands that can be matched next, the
local and persistent options, and the inherited parser directives. It does
not count arguments or reject anything. Tokens that look like options but do
not match are emitted as `UNKNOWN_OPTION` tokens and the parser decides
whether they are an error.

One input entry can produce several tokens. `-abc` yields one option token per
matching character, and `--name=value` yields an option token followed by an
option-argument token.

Token kinds:
- `ARG`: a value for the current command or the open option.
- `ARG_SEPARATOR`: the literal `--`; everything after it is an `ARG`.
- `SUBCOMMAND`: a matched subcommand.
- `OPTION`: a matched option.
- `OPTION_ARG`: text that belongs to the preceding option (`-I%`, `--config=file.json`).
- `UNKNOWN_OPTION`: option-like text that is not an option in scope.

The scope is held in an explicit `AnalyzerScope` object. `analyze_token` applies
one input entry to a scope and returns the tokens it produced, so every
transition can be exercised on its own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from figspec.logger import logger
from figspec.spec import Command, Option
from figspec.utils import make_array, set_each

ARG_SEPARATOR = "--"


class TokenKind(Enum):
    """Classification of a single analyzed token."""

    ARG = "arg"
    ARG_SEPARATOR = "arg-separator"
    SUBCOMMAND = "subcommand"
    OPTION = "option"
    OPTION_ARG = "option-arg"
    UNKNOWN_OPTION = "unknown-option"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """
    One classified unit of input.

    Attributes:
        kind (TokenKind): The token classification.
        index (int): Position of the input entry that contains this token.
        start (int): Inclusive start offset inside that entry.
        end (int): Exclusive end offset inside that entry.
        literal (str): The text of the token.
        subcommand (Command | None): The matched command for `SUBCOMMAND` tokens.
        option (Option | None): The matched option for `OPTION` tokens.
        option_name (str | None): The option an `OPTION_ARG` belongs to.
        separator (str | None): The separator that introduced an `OPTION_ARG`.
        valid_options (tuple[str, ...]): Option names in scope for `UNKNOWN_OPTION` tokens.
    """

    kind: TokenKind
    index: int
    start: int
    end: int
    literal: str
    subcommand: Command | None = None
    option: Option | None = None
    option_name: str | None = None
    separator: str | None = None
    valid_options: tuple[str, ...] = ()


def arg_token(index: int, start: int, end: int, literal: str) -> Token:
    return Token(TokenKind.ARG, index, start, end, literal)


def arg_separator_token(index: int, start: int, end: int, literal: str) -> Token:
    return Token(TokenKind.ARG_SEPARATOR, index, start, end, literal)


def subcommand_token(
    index: int, start: int, end: int, literal: str, subcommand: Command
) -> Token:
    return Token(TokenKind.SUBCOMMAND, index, start, end, literal, subcommand=subcommand)


def option_token(index: int, start: int, end: int, literal: str, option: Option) -> Token:
    return Token(TokenKind.OPTION, index, start, end, literal, option=option)


def option_arg_token(
    index: int, start: int, end: int, literal: str, option_name: str, separator: str
) -> Token:
    return Token(
        TokenKind.OPTION_ARG,
        index,
        start,
        end,
        literal,
        option_name=option_name,
        separator=separator,
    )


def unknown_option_token(
    index: int, start: int, end: int, literal: str, valid_options: Sequence[str]
) -> Token:
    return Token(
        TokenKind.UNKNOWN_OPTION,
        index,
        start,
        end,
        literal,
        valid_options=tuple(valid_options),
    )


def find_separator(token: str, separators: Sequence[str]) -> tuple[str, int] | None:
    """
    Find the option/value separator inside `token`.

    The separator occurring earliest in the token wins. When several separators
    start at the same position, the one declared last wins.

    Returns:
        tuple[str, int] | None: The separator and its position, or None.
    """
    found: tuple[str, int] | None = None
    for separator in separators:
        if not separator:
            continue
        position = token.find(separator)
        if position == -1:
            continue
        if found is None or position <= found[1]:
            found = (separator, position)
    return found


@dataclass
class OptionScope:
    """Option tables as they stand after the last subcommand transition."""

    local_options: dict[str, Option] = field(default_factory=dict)
    persistent_options: dict[str, Option] = field(default_factory=dict)
    local_required_options: dict[str, Option] = field(default_factory=dict)
    persistent_required_options: dict[str, Option] = field(default_factory=dict)


@dataclass
class AnalyzerScope(OptionScope):
    """
    Mutable analyzer state for one call to `analyze`.

    Persistent tables accumulate across subcommand transitions, local tables are
    rebuilt for each matched subcommand. Directive values are inherited from the
    closest command on the path that sets them.
    """

    subcommands: list[Command] = field(default_factory=list)
    separators: list[str] = field(default_factory=lambda: ["="])
    posix_compliant: bool = True
    options_must_precede_arguments: bool = False
    subcommands_match_unique_prefix: bool = False
    has_found_arg: bool = False
    has_used_non_persistent_option: bool = False

    @classmethod
    def for_spec(cls, spec: Command) -> AnalyzerScope:
        scope = cls()
        scope.enter_command(spec)
        return scope

    def enter_command(self, command: Command) -> None:
        """Make `command` the innermost command of the active path."""
        self.local_options.clear()
        self.local_required_options.clear()
        for option in command.options:
            if option.is_persistent:
                set_each(self.persistent_options, option.names, option)
                if option.is_required:
                    set_each(self.persistent_required_options, option.names, option)
            else:
                set_each(self.local_options, option.names, option)
                if option.is_required:
                    set_each(self.local_required_options, option.names, option)

        self.subcommands = command.subcommands

        directives = command.parser_directives
        if directives is None:
            return
        if directives.option_arg_separators is not None:
            self.separators = make_array(directives.option_arg_separators)
        if directives.subcommands_match_unique_prefix is not None:
            self.subcommands_match_unique_prefix = (
                directives.subcommands_match_unique_prefix
            )
        if directives.options_must_precede_arguments is not None:
            self.options_must_precede_arguments = (
                directives.options_must_precede_arguments
            )
        if directives.flags_are_posix_noncompliant is not None:
            self.posix_compliant = not directives.flags_are_posix_noncompliant

    def get_option(self, name: str) -> Option | None:
        option = self.local_options.get(name)
        if option is None:
            option = self.persistent_options.get(name)
        return option

    def has_option(self, name: str) -> bool:
        return name in self.local_options or name in self.persistent_options

    def valid_option_names(self) -> list[str]:
        return [*self.local_options.keys(), *self.persistent_options.keys()]

    def can_match_subcommand(self) -> bool:
        return (
            not self.has_found_arg
            and not self.has_used_non_persistent_option
            and bool(self.subcommands)
        )

    def can_match_option(self) -> bool:
        return not (self.options_must_precede_arguments and self.has_found_arg)

    def find_subcommand(self, name: str) -> Command | None:
        """
        Resolve `name` against the subcommands in scope.

        An exact name match always wins. With unique-prefix matching enabled, a
        command is also matched when it is the only sibling with a name starting
        with `name`. Ambiguous or missing prefixes return None.
        """
        if not self.subcommands_match_unique_prefix:
            return next(
                (command for command in self.subcommands if name in command.names),
                None,
            )

        prefix_matches: list[Command] = []
        for command in self.subcommands:
            names = command.names
            if name in names:
                return command
            if any(command_name.startswith(name) for command_name in names):
                prefix_matches.append(command)

        if len(prefix_matches) != 1:
            return None
        return prefix_matches[0]

    def mark_option_used(self, option: Option) -> None:
        if not option.is_persistent:
            self.has_used_non_persistent_option = True

    def mark_arg_found(self) -> None:
        self.has_found_arg = True

    def final_state(self) -> OptionScope:
        return OptionScope(
            local_options=dict(self.local_options),
            persistent_options=dict(self.persistent_options),
            local_required_options=dict(self.local_required_options),
            persistent_required_options=dict(self.persistent_required_options),
        )


@dataclass
class AnalyzeResult:
    """The token stream and the option scope left after the final token."""

    tokens: list[Token]
    final_state: OptionScope


def _analyze_short_options(scope: AnalyzerScope, index: int, token: str) -> list[Token]:
    """Classify a POSIX token starting with a single `-` or `+`."""
    leading_char = token[0]

    # `-` and `+` are options in their own right when they take arguments and
    # the first character after them does not name another option.
    sigil_option = scope.get_option(leading_char)
    if (
        sigil_option is not None
        and sigil_option.takes_args
        and not scope.has_option(token[:2])
    ):
        scope.mark_option_used(sigil_option)
        return [
            option_token(index, 0, 1, leading_char, sigil_option),
            option_arg_token(index, 1, len(token), token[1:], leading_char, ""),
        ]

    tokens: list[Token] = []
    for char_index in range(1, len(token)):
        option_name = f"{leading_char}{token[char_index]}"
        option = scope.get_option(option_name)
        if option is None:
            tokens.append(
                unknown_option_token(
                    index,
                    char_index,
                    char_index + 1,
                    option_name,
                    scope.valid_option_names(),
                )
            )
            continue

        scope.mark_option_used(option)
        tokens.append(option_token(index, char_index, char_index + 1, option_name, option))

        if option.takes_args and char_index < len(token) - 1:
            remaining = token[char_index + 1 :]
            separator = next(
                (sep for sep in scope.separators if sep and remaining.startswith(sep)),
                "",
            )
            arg_start = char_index + 1 + len(separator)
            tokens.append(
                option_arg_token(
                    index,
                    arg_start,
                    len(token),
                    token[arg_start:],
                    option_name,
                    separator,
                )
            )
            break
    return tokens


def _analyze_long_option(
    scope: AnalyzerScope, index: int, token: str
) -> list[Token] | None:
    """
    Classify a `--long` token, or any token when options are POSIX-noncompliant.

    Returns None when the token should be treated as a plain argument.
    """
    found = find_separator(token, scope.separators)
    if found is not None:
        separator, position = found
        option_name = token[:position]
        value_start = position + len(separator)
        option = scope.get_option(option_name)
        if option is not None:
            scope.mark_option_used(option)
            return [
                option_token(index, 0, position, option_name, option),
                option_arg_token(
                    index, value_start, len(token), token[value_start:], option_name, separator
                ),
            ]
        if scope.posix_compliant:
            return [
                unknown_option_token(
                    index, 0, position, option_name, scope.valid_option_names()
                ),
                option_arg_token(
                    index, value_start, len(token), token[value_start:], option_name, separator
                ),
            ]
        return None

    option = scope.get_option(token)
    if option is not None:
        scope.mark_option_used(option)
        return [option_token(index, 0, len(token), token, option)]
    if scope.posix_compliant:
        return [
            unknown_option_token(index, 0, len(token), token, scope.valid_option_names())
        ]
    return None


def analyze_token(scope: AnalyzerScope, index: int, token: str) -> list[Token]:
    """
    Classify one input entry (other than `--`) and update `scope`.

    Subcommands are tried first, then options, and anything left over is an
    argument.
    """
    if scope.can_match_subcommand():
        command = scope.find_subcommand(token)
        if command is not None:
            scope.enter_command(command)
            logger.debug("Matched subcommand %r for token %r", command.names[0], token)
            return [subcommand_token(index, 0, len(token), token, command)]

    if scope.can_match_option():
        if (
            scope.posix_compliant
            and len(token) > 1
            and token[0] in "-+"
            and not token.startswith("--")
        ):
            return _analyze_short_options(scope, index, token)

        if not scope.posix_compliant or (len(token) > 2 and token.startswith("--")):
            tokens = _analyze_long_option(scope, index, token)
            if tokens is not None:
                return tokens

    scope.mark_arg_found()
    return [arg_token(index, 0, len(token), token)]


def analyze(argv: Sequence[str], spec: Command) -> AnalyzeResult:
    """
    Tokenize `argv` using the options and subcommands declared by `spec`.

    Args:
        argv (Sequence[str]): The already-split argument vector.
        spec (Command): The root command.

    Returns:
        AnalyzeResult: The ordered tokens and the final option scope.
    """
    scope = AnalyzerScope.for_spec(spec)
    tokens: list[Token] = []

    for index, token in enumerate(argv):
        if token == ARG_SEPARATOR:
            tokens.append(arg_separator_token(index, 0, len(token), token))
            tokens.extend(
                arg_token(rest_index, 0, len(rest), rest)
                for rest_index, rest in enumerate(argv[index + 1 :], start=index + 1)
            )
            break
        tokens.extend(analyze_token(scope, index, token))

    logger.debug("Analyzed %d input(s) into %d token(s)", len(argv), len(tokens))
    return AnalyzeResult(tokens=tokens, final_state=scope.final_state())
