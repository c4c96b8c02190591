# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Spec linting.

The parser trusts the spec it is given. A spec that breaks one of the rules
below still parses, but produces results that look wrong (an option that can
never match, an argument that can never be filled, ...). Run `validate_spec`
in a test suite to catch these mistakes early.

Each `check_*` function yields one message per problem found. `iter_problems`
chains the enabled checks and `validate_spec` raises `SpecError` listing every
problem.

Example:
    def test_cli_spec_is_valid():
        validate_spec(spec, allow_no_description=False)
"""
from __future__ import annotations

from typing import Callable, Iterator

from figspec.exceptions import SpecError
from figspec.spec import Arg, Command, Option, get_parser_directive
from figspec.utils import get_max_args, get_min_args, make_array

MAX_DESCRIPTION_LINE_LENGTH = 68

Path = list[Command]


def walk_commands(spec: Command, path: Path | None = None) -> Iterator[tuple[Command, Path]]:
    """Yield every command of the tree together with its path, root first."""
    path = [*(path or []), spec]
    yield spec, path
    for command in spec.subcommands:
        yield from walk_commands(command, path)


def walk_arg_lists(spec: Command) -> Iterator[tuple[list[Arg], Path]]:
    for command, path in walk_commands(spec):
        yield command.arg_list, path
        for option in command.options:
            yield option.arg_list, path


def _names(*parts: Command | Option) -> str:
    return "`" + " ".join("|".join(sorted(part.names, key=len)) for part in parts) + "`"


def _persistent_names(path: Path) -> set[str]:
    return {
        name
        for command in path[:-1]
        for option in command.options
        if option.is_persistent
        for name in option.names
    }


def check_required_args_follow_optional(spec: Command) -> Iterator[str]:
    for args, path in walk_arg_lists(spec):
        first_optional: int | None = None
        for index, arg in enumerate(args):
            if first_optional is not None and not arg.is_optional:
                yield (
                    f"In {_names(*path)}, argument {arg.name or index} is required, but it "
                    f"must be optional since the argument at index {first_optional} is optional"
                )
            elif arg.is_optional and first_optional is None:
                first_optional = index


def check_repeatable_options(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        for index, option in enumerate(command.options):
            where = f"The option {_names(*path, option)} (index {index})"
            if option.is_repeatable and option.args:
                yield (
                    f"{where} has arguments and is repeatable. Repeatable options cannot "
                    "have arguments, but you can use a variadic argument instead."
                )
            repeat = option.is_repeatable
            if isinstance(repeat, bool) or not isinstance(repeat, int):
                continue
            if repeat < 1:
                yield (
                    f"{where} has its `is_repeatable` value set to a number below 1, "
                    "which means it can't be used at all"
                )
            elif repeat == 1:
                yield (
                    f"{where} has its `is_repeatable` value set to 1, which is no "
                    "different than omitting it"
                )


def check_unique_option_names(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        seen: set[str] = set()
        for index, option in enumerate(command.options):
            for name in option.names:
                if name in seen:
                    yield (
                        f"Option {_names(*path, option)} (index {index}) has a non-unique "
                        f"name, '{name}'. Option names must be unique."
                    )
                seen.add(name)


def check_persistent_option_shadowing(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        persistent = _persistent_names(path)
        for index, option in enumerate(command.options):
            for name in option.names:
                if name in persistent:
                    yield (
                        f"The option {_names(*path, option)} (index {index}) shadows the "
                        f"name of a persistent option, '{name}'. Option names can't "
                        "shadow persistent options."
                    )


def check_unique_command_names(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        seen: set[str] = set()
        for index, subcommand in enumerate(command.subcommands):
            for name in subcommand.names:
                if name in seen:
                    yield (
                        f"The command {_names(*path, subcommand)} (index {index}) has a "
                        f"non-unique name, '{name}'. Command names must be unique among "
                        "sibling subcommands."
                    )
                seen.add(name)


def check_option_name_prefixes(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        if get_parser_directive(path, "flags_are_posix_noncompliant"):
            continue
        for index, option in enumerate(command.options):
            where = f"Option {_names(*path, option)} (index {index})"
            for name in option.names:
                if not name.startswith(("-", "+")):
                    yield (
                        f"{where} doesn't start with a dash or plus, the parser will be "
                        "unable to match it without `flags_are_posix_noncompliant`"
                    )
                elif not name.startswith("--") and len(name) > 2:
                    split = " ".join(name[0] + letter for letter in name[1:])
                    yield (
                        f"{where} has a name that the parser is unable to parse, as it "
                        f"starts with a single '{name[0]}'. '{name}' will be read as "
                        f"'{split}'. Set `flags_are_posix_noncompliant` on an ancestor "
                        "command to allow it."
                    )
                elif name in ("-", "+") and len(option.arg_list) != 1:
                    yield f"{where} must take exactly one argument"


def check_nothing_named_dash_dash(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        if len(path) > 1 and "--" in command.names:
            yield (
                f"Command {_names(*path)} is named '--', which makes every following "
                "token an argument. It will never be matched"
            )
        for index, option in enumerate(command.options):
            if "--" in option.names:
                yield (
                    f"Option {_names(*path, option)} (index {index}) is named '--', which "
                    "makes every following token an argument. It will never be matched"
                )


def check_option_arg_separators(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        directives = command.parser_directives
        if directives is None:
            continue
        for index, separator in enumerate(make_array(directives.option_arg_separators)):
            if separator == "":
                yield (
                    f"Command {_names(*path)} has an empty string for an option arg "
                    f"separator at index {index}. To disable option arg separators, use "
                    "an empty list."
                )


def check_whitespace_in_names(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        if any(name != name.strip() for name in command.names):
            yield f"Command {_names(*path)} has a name with extra whitespace"
        for index, option in enumerate(command.options):
            if any(name != name.strip() for name in option.names):
                yield (
                    f"Option {_names(*path, option)} (index {index}) has a name with "
                    "extra whitespace"
                )
    for args, path in walk_arg_lists(spec):
        for index, arg in enumerate(args):
            if arg.name and arg.name != arg.name.strip():
                yield f"Arg in {_names(*path)} (at index {index}) has a name with extra whitespace"


def check_descriptions(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        if not command.description:
            yield f"Command {_names(*path)} has no description"
        for index, option in enumerate(command.options):
            if not option.description:
                yield f"Option {_names(*path, option)} (index {index}) has no description"


def check_description_line_length(spec: Command) -> Iterator[str]:
    def too_long(description: str) -> bool:
        return any(len(line) > MAX_DESCRIPTION_LINE_LENGTH for line in description.split("\n"))

    for command, path in walk_commands(spec):
        if too_long(command.description):
            yield (
                f"Command {_names(*path)} has a description line over "
                f"{MAX_DESCRIPTION_LINE_LENGTH} characters"
            )
        for index, option in enumerate(command.options):
            if too_long(option.description):
                yield (
                    f"Option {_names(*path, option)} (index {index}) has a description "
                    f"line over {MAX_DESCRIPTION_LINE_LENGTH} characters"
                )


def check_requires_separator_args(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        for index, option in enumerate(command.options):
            if not option.requires_separator:
                continue
            args = option.arg_list
            where = f"Option {_names(*path, option)} (index {index})"
            if get_min_args(args) > 1:
                yield (
                    f"{where} takes a minimum of {get_min_args(args)} args, but because "
                    "of `requires_separator` it must instead be 0 or 1"
                )
            if get_max_args(args) != 1:
                yield (
                    f"{where} takes a maximum of {get_max_args(args)} args, but because "
                    "of `requires_separator` it's only able to take 1"
                )


def check_common_options_are_persistent(spec: Command) -> Iterator[str]:
    reported: list[set[str]] = []
    for command, path in walk_commands(spec):
        if not command.subcommands:
            continue
        descendants = [cmd for cmd, _ in walk_commands(command)]
        for option in command.options:
            names = set(option.names)
            if names in reported:
                continue
            if all(
                any(set(other.names) == names for other in cmd.options)
                for cmd in descendants
            ):
                reported.append(names)
                yield (
                    f"The option {_names(*path, option)} is also defined by every "
                    "subcommand. Define it once with `is_persistent=True` instead."
                )


def check_option_references(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        in_scope = _persistent_names(path) | {
            name for option in command.options for name in option.names
        }
        for index, option in enumerate(command.options):
            where = f"The option {_names(*path, option)} (index {index})"
            for name in option.depends_on:
                if name not in in_scope:
                    yield f"{where} depends on an option named '{name}', which doesn't exist in its scope"
            for name in option.exclusive_on:
                if name not in in_scope:
                    yield f"{where} is exclusive on an option named '{name}', which doesn't exist in its scope"


def check_prefix_match_commands_have_no_args(spec: Command) -> Iterator[str]:
    for command, path in walk_commands(spec):
        if not get_parser_directive(path, "subcommands_match_unique_prefix"):
            continue
        if command.subcommands and command.args:
            yield (
                f"The command {_names(*path)} has arguments and subcommands, but matches "
                "subcommands by unique prefix. Set `subcommands_match_unique_prefix` to "
                "False on it to fix this."
            )


def iter_problems(
    spec: Command,
    *,
    allow_shadowing_persistent_options: bool = False,
    allow_no_description: bool = True,
    allow_long_description_lines: bool = True,
    allow_matching_command_prefix_and_args: bool = False,
) -> Iterator[str]:
    """Yield a message for each rule `spec` breaks."""
    checks: list[Callable[[Command], Iterator[str]]] = [
        check_required_args_follow_optional,
        check_repeatable_options,
        check_option_name_prefixes,
        check_unique_option_names,
        check_unique_command_names,
        check_nothing_named_dash_dash,
        check_option_arg_separators,
        check_whitespace_in_names,
        check_requires_separator_args,
        check_common_options_are_persistent,
        check_option_references,
    ]
    if not allow_shadowing_persistent_options:
        checks.append(check_persistent_option_shadowing)
    if not allow_no_description:
        checks.append(check_descriptions)
    if not allow_long_description_lines:
        checks.append(check_description_line_length)
    if not allow_matching_command_prefix_and_args:
        checks.append(check_prefix_match_commands_have_no_args)

    for check in checks:
        yield from check(spec)


def validate_spec(
    spec: Command,
    *,
    allow_shadowing_persistent_options: bool = False,
    allow_no_description: bool = True,
    allow_long_description_lines: bool = True,
    allow_matching_command_prefix_and_args: bool = False,
) -> None:
    """
    Check `spec` for mistakes the parser cannot report on its own.

    Args:
        spec (Command): The root command.
        allow_shadowing_persistent_options (bool): Allow an option to reuse the
            name of an ancestor's persistent option.
        allow_no_description (bool): Allow commands and options without a description.
        allow_long_description_lines (bool): Allow description lines over 68 characters.
        allow_matching_command_prefix_and_args (bool): Allow a command that matches
            subcommands by unique prefix to take arguments.

    Raises:
        SpecError: Listing every problem found.
    """
    problems = list(
        iter_problems(
            spec,
            allow_shadowing_persistent_options=allow_shadowing_persistent_options,
            allow_no_description=allow_no_description,
            allow_long_description_lines=allow_long_description_lines,
            allow_matching_command_prefix_and_args=allow_matching_command_prefix_and_args,
        )
    )
    if problems:
        raise SpecError(problems)


__all__ = ["iter_problems", "validate_spec", "walk_commands"]
