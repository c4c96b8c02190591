# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the declarative spec model consumed by the figspec analyzer and parser.

A spec is a tree of `Command` objects. Each command may declare positional
arguments (`Arg`), options (`Option`), nested subcommands and parser directives
(`ParserDirectives`) that change how tokens are classified for the command and
its descendants.

The model is plain data. All classes compare by identity so that one option can
be registered under each of its aliases and still be recognized as the same
option.

Key Attributes:
- `name`: One string or a list of aliases.
- `args`: One `Arg`, a list of `Arg`, or nothing.
- `is_persistent`: Option is visible to every descendant subcommand.
- `is_repeatable`: `True` or an integer upper bound on repetitions.
- `requires_separator`: Option value must be attached with a separator
  (`--opt=value`); a string restricts the separator to that value.

Example:
    spec = Command(
        name="task",
        requires_subcommand=True,
        options=[Option(name=["-h", "--help"], is_persistent=True)],
        subcommands=[
            Command(name="add", args=Arg(name="description")),
            Command(name=["list", "ls"], options=[Option(name="--json")]),
        ],
    )
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from figspec.utils import make_array, make_array1

if TYPE_CHECKING:
    from figspec.run import ActionInit

Action = Callable[["ActionInit"], Union[int, None, Awaitable[Union[int, None]]]]


@dataclass(eq=False)
class Arg:
    """
    Represents a positional value slot of a command or an option.

    Attributes:
        name (str | None): Display name used in help output.
        description (str): Help text for the argument.
        is_optional (bool): The argument may be omitted.
        is_variadic (bool): The argument accepts any number of values.
        default (str | None): Informational default shown in help.
        suggestions (list[str]): Static completions for interactive shells.
    """

    name: str | None = None
    description: str = ""
    is_optional: bool = False
    is_variadic: bool = False
    default: str | None = None
    suggestions: list[str] = field(default_factory=list)


@dataclass(eq=False)
class Option:
    """
    Represents a named modifier belonging to one command's scope.

    Attributes:
        name (str | list[str]): The option name and its aliases (e.g. `["-v", "--verbose"]`).
        description (str): Help text for the option.
        args (Arg | list[Arg] | None): Values bound to this option.
        is_persistent (bool): Visible in every descendant subcommand.
        is_repeatable (bool | int): May be repeated; an int caps the count.
        is_required (bool): Must be present once parsing completes.
        exclusive_on (list[str]): Option names that must be absent.
        depends_on (list[str]): Option names that must be present.
        requires_separator (bool | str): Values must use an inline separator.
        hidden (bool): Omit from help output.
        action (Action | None): Handler that overrides the command action.
    """

    name: str | list[str]
    description: str = ""
    args: Arg | list[Arg] | None = None
    is_persistent: bool = False
    is_repeatable: bool | int = False
    is_required: bool = False
    exclusive_on: list[str] = field(default_factory=list)
    depends_on: list[str] = field(default_factory=list)
    requires_separator: bool | str = False
    hidden: bool = False
    action: Action | None = None

    @property
    def names(self) -> list[str]:
        return make_array1(self.name)

    @property
    def arg_list(self) -> list[Arg]:
        return make_array(self.args)

    @property
    def takes_args(self) -> bool:
        return bool(self.arg_list)

    def __repr__(self) -> str:
        return f"Option(name={self.name!r})"


@dataclass(eq=False)
class ParserDirectives:
    """
    Parser behavior switches inherited down the active command path.

    A value of `None` means the directive is not set on this command and the
    value from the closest ancestor that sets it stays in effect.

    Attributes:
        flags_are_posix_noncompliant (bool | None): Any token may match an option name,
            chaining is disabled and unknown option-like tokens become arguments.
        options_must_precede_arguments (bool | None): Once a positional argument is
            seen, no further token is treated as an option.
        option_arg_separators (str | list[str] | None): Inline option/value separators.
            Defaults to `"="` when no command on the path sets it.
        subcommands_match_unique_prefix (bool | None): A subcommand may be matched by an
            unambiguous prefix of one of its names.
    """

    flags_are_posix_noncompliant: bool | None = None
    options_must_precede_arguments: bool | None = None
    option_arg_separators: str | list[str] | None = None
    subcommands_match_unique_prefix: bool | None = None


@dataclass(eq=False)
class Command:
    """
    Represents one node of the command tree.

    Attributes:
        name (str | list[str]): The command name and its aliases.
        description (str): Help text for the command.
        args (Arg | list[Arg] | None): Positional arguments.
        options (list[Option]): Options scoped to this command.
        subcommands (list[Command]): Child commands.
        parser_directives (ParserDirectives | None): Inheritable parser switches.
        requires_subcommand (bool): Without an own action, dispatch to the built-in
            usage action and tolerate surplus arguments.
        hidden (bool): Omit from help output.
        action (Action | None): Handler invoked when this is the last command.
    """

    name: str | list[str]
    description: str = ""
    args: Arg | list[Arg] | None = None
    options: list[Option] = field(default_factory=list)
    subcommands: list[Command] = field(default_factory=list)
    parser_directives: ParserDirectives | None = None
    requires_subcommand: bool = False
    hidden: bool = False
    action: Action | None = None

    @property
    def names(self) -> list[str]:
        return make_array1(self.name)

    @property
    def arg_list(self) -> list[Arg]:
        return make_array(self.args)

    def get_subcommand(self, name: str) -> Command | None:
        """Return the direct subcommand with an exact `name` match."""
        return next((cmd for cmd in self.subcommands if name in cmd.names), None)

    def __repr__(self) -> str:
        return f"Command(name={self.name!r})"


Spec = Command


def get_parser_directive(path: list[Command] | tuple[Command, ...], key: str) -> Any:
    """Return the value of directive `key` from the closest command on `path` that sets it."""
    for command in reversed(path):
        directives = command.parser_directives
        if directives is not None and getattr(directives, key) is not None:
            return getattr(directives, key)
    return None
