# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Help text generation and the built-in help actions.

`get_help` renders the help message for a command path as plain text:

    Did you mean '--verbose'?      (only when a suggestion is requested)
    <description>

    Usage:
      task list [flags] <argument>

    Commands:
      add        Add a task

    Flags:
      --json     List as JSON

    Global flags:
      -h, --help  Print a help message

Built-ins:
- `usage`: action for commands that need a subcommand. Prints help when called
  without an argument, otherwise reports the unknown or ambiguous command.
- `help_option`: persistent `-h, --help` option.
- `help_command`: `help [command]` subcommand.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import TYPE_CHECKING, Sequence

from figspec.console import console
from figspec.spec import Arg, Command, Option, get_parser_directive

if TYPE_CHECKING:
    from figspec.run import ActionInit

DEFAULT_DESCRIPTION = "No description"
INDENT = "  "
MIN_SPACING = 2


@dataclass
class HelpSections:
    description: str | None = None
    usage: str | None = None
    did_you_mean: str | None = None
    options: list[tuple[str, str]] = field(default_factory=list)
    persistent_options: list[tuple[str, str]] = field(default_factory=list)
    subcommands: list[tuple[str, str]] = field(default_factory=list)


def get_longest_string(strings: Sequence[str]) -> str:
    longest = strings[0]
    for string in strings[1:]:
        if len(string) > len(longest):
            longest = string
    return longest


def arg_to_string(arg: Arg) -> str:
    name = arg.name or "argument"
    lhs, rhs = ("[", "]") if arg.is_optional else ("<", ">")
    suffix = "..." if arg.is_variadic else ""
    return f"{lhs}{name}{rhs}{suffix}"


def summarize_arguments(args: Sequence[Arg]) -> str:
    return " ".join(arg_to_string(arg) for arg in args)


def option_to_string(option: Option) -> str:
    name = ", ".join(sorted(option.names, key=len))
    option_args = option.arg_list
    if not option_args:
        return name

    if option.requires_separator:
        separator = "=" if option.requires_separator is True else option.requires_separator
        arg_name = option_args[0].name or "argument"
        if option_args[0].is_optional:
            return f"{name}[{separator}{arg_name}]"
        return f"{name}{separator}<{arg_name}>"
    return f"{name} {summarize_arguments(option_args)}"


def get_sections(path: Sequence[Command]) -> HelpSections:
    command = path[-1]

    subcommands = [
        (", ".join(sorted(subcommand.names, key=len)), subcommand.description or DEFAULT_DESCRIPTION)
        for subcommand in command.subcommands
        if not subcommand.hidden
    ]

    persistent_option_objects: list[Option] = []
    # Without subcommands there is nothing for an option to persist into.
    if len(path) == 1 and not subcommands:
        option_objects = [option for option in command.options if not option.hidden]
    else:
        persistent_option_objects = [
            option
            for cmd in path
            for option in cmd.options
            if option.is_persistent and not option.hidden
        ]
        option_objects = [
            option
            for option in command.options
            if not option.hidden and not option.is_persistent
        ]

    options = [
        (option_to_string(option), option.description or DEFAULT_DESCRIPTION)
        for option in option_objects
    ]
    persistent_options = [
        (option_to_string(option), option.description or DEFAULT_DESCRIPTION)
        for option in persistent_option_objects
    ]

    usage_parts = [" ".join(get_longest_string(cmd.names) for cmd in path)]
    for option in [*option_objects, *persistent_option_objects]:
        if option.is_required:
            usage_parts.append(option_to_string(option))
    if options or persistent_options:
        usage_parts.append("[flags]")
    if command.requires_subcommand:
        usage_parts.append("<command>")
    elif command.arg_list:
        usage_parts.append(summarize_arguments(command.arg_list))

    return HelpSections(
        description=command.description or None,
        usage=" ".join(usage_parts),
        options=options,
        persistent_options=persistent_options,
        subcommands=subcommands,
    )


def _format_rows(rows: list[tuple[str, str]], width: int, first_paragraph: bool = False) -> list[str]:
    lines = []
    continuation = INDENT + " " * (width + MIN_SPACING)
    for name, description in rows:
        if first_paragraph:
            description = description.split("\n\n")[0]
        head, *tail = description.split("\n")
        text = "\n".join([head, *(continuation + line for line in tail)])
        spaces = " " * (width - len(name) + MIN_SPACING)
        lines.append(f"{INDENT}{name}{spaces}{text}")
    return lines


def format_help_sections(sections: HelpSections) -> str:
    parts = []

    if sections.did_you_mean:
        parts.append(f"    Did you mean '{sections.did_you_mean}'?")
    if sections.description:
        parts.append(sections.description)
    if sections.usage:
        parts.append(f"Usage:\n{INDENT}{sections.usage}")

    if sections.subcommands:
        width = max(len(name) for name, _ in sections.subcommands)
        parts.append(
            "\n".join(
                ["Commands:", *_format_rows(sections.subcommands, width, first_paragraph=True)]
            )
        )

    option_width = max(
        (len(name) for name, _ in [*sections.options, *sections.persistent_options]),
        default=0,
    )
    if sections.options:
        parts.append("\n".join(["Flags:", *_format_rows(sections.options, option_width)]))
    if sections.persistent_options:
        parts.append(
            "\n".join(
                ["Global flags:", *_format_rows(sections.persistent_options, option_width)]
            )
        )
    return "\n\n".join(parts) + "\n"


def closest_match(value: str, choices: Sequence[str]) -> str | None:
    matches = get_close_matches(value, list(choices), n=1, cutoff=0.6)
    return matches[0] if matches else None


def get_help(
    path: Sequence[Command],
    *,
    description: bool = True,
    usage: bool = True,
    did_you_mean: tuple[str, Sequence[str]] | None = None,
) -> str:
    """
    Build the help message for the last command in `path`.

    Args:
        path (Sequence[Command]): Commands from the root to the one to describe.
        description (bool): Include the command description.
        usage (bool): Include the usage line.
        did_you_mean (tuple[str, Sequence[str]] | None): An input and the valid
            choices it was meant to match; the closest choice is suggested.

    Returns:
        str: The formatted help text.
    """
    sections = get_sections(path)
    if did_you_mean:
        value, choices = did_you_mean
        sections.did_you_mean = closest_match(value, choices)
    if not description:
        sections.description = None
    if not usage:
        sections.usage = None
    return format_help_sections(sections)


def print_help(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True, end="")


def usage(init: ActionInit) -> int:
    """Action for commands that must be followed by a subcommand."""
    command = init.args[0] if init.args else None

    if command is None:
        print_help(init.help())
        return 0

    if command == "":
        init.error(
            f"Found an empty string, but expected a command\n\n{init.help(description=False)}"
        )
        return 1

    subcommands = [
        name
        for cmd in init.path[-1].subcommands
        if not cmd.hidden
        for name in cmd.names
    ]
    if subcommands:
        if get_parser_directive(init.path, "subcommands_match_unique_prefix"):
            possible = [name for name in subcommands if name.startswith(command)]
            if possible:
                init.error(
                    f"Ambiguous command '{command}', could be: {', '.join(possible)}"
                    f"\n\n{init.help(description=False)}"
                )
                return 1

        init.error(
            f"Unknown command '{command}'\n\n"
            f"{init.help(description=False, did_you_mean=(command, subcommands))}"
        )
        return 1

    init.error(f"Unknown command '{command}'\n\n{init.help(description=False)}")
    return 1


def _help_option_action(init: ActionInit) -> int:
    print_help(get_help(init.path))
    return 0


def _help_command_action(init: ActionInit) -> int:
    help_root = list(init.path[:-1]) or list(init.path)
    command_name = init.args[0] if init.args else None

    if not command_name:
        print_help(init.help(path=help_root))
        return 0

    parent = help_root[-1]
    if not parent.subcommands:
        init.error(
            "No subcommands, try using 'help' with nothing after it\n\n"
            f"{init.help(description=False, path=help_root)}"
        )
        return 1

    command = parent.get_subcommand(command_name)
    if command is None:
        subcommands = [
            name for cmd in parent.subcommands if not cmd.hidden for name in cmd.names
        ]
        if subcommands:
            init.error(
                f"There is no subcommand named '{command_name}'\n\n"
                f"{init.help(path=help_root, did_you_mean=(command_name, subcommands))}"
            )
        else:
            init.error(
                f"There is no subcommand named '{command_name}'\n\n"
                f"{init.help(description=False, path=help_root)}"
            )
        return 1

    print_help(init.help(path=[*help_root, command]))
    return 0


help_option = Option(
    name=["-h", "--help"],
    description="Print a help message",
    is_persistent=True,
    action=_help_option_action,
)

help_command = Command(
    name="help",
    description="Print a help message",
    args=Arg(name="command", is_optional=True),
    action=_help_command_action,
)

__all__ = [
    "HelpSections",
    "arg_to_string",
    "format_help_sections",
    "get_help",
    "get_sections",
    "help_command",
    "help_option",
    "option_to_string",
    "print_help",
    "summarize_arguments",
    "usage",
]
