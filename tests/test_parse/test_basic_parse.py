import math

import pytest

from figspec.exceptions import ParseError, TooFewArguments, TooManyArguments
from figspec.help import usage
from figspec.parse import ParseState, ParseStateMachine, parse
from figspec.spec import Arg, Command, Option


def test_empty_spec_accepts_empty_input():
    spec = Command(name="noop")
    result = parse([], spec)

    assert result.path == (spec,)
    assert result.args == ()
    assert result.options == {}
    assert result.arg_separator_index is None
    assert result.actions == ()
    assert result.option_actions == ()


@pytest.mark.parametrize("argv", [["a"], ["--"], ["a", "b"]])
def test_empty_spec_rejects_input(argv):
    with pytest.raises(ParseError):
        parse(argv, Command(name="noop"))


def test_too_many_arguments():
    with pytest.raises(TooManyArguments) as excinfo:
        parse(["one", "two"], Command(name="app", args=Arg()))

    error = excinfo.value
    assert error.index == 1
    assert error.value == "two"
    assert error.message == "Too many arguments, 'two' was unexpected"


def test_too_few_arguments():
    spec = Command(name="cp", args=[Arg(name="src"), Arg(name="dest")])

    with pytest.raises(TooFewArguments) as excinfo:
        parse(["a"], spec)

    assert excinfo.value.min == 2
    assert excinfo.value.max == 2
    assert excinfo.value.message == "Expected 2 arguments"
    assert excinfo.value.path == (spec,)


def test_optional_and_variadic_argument_bounds():
    spec = Command(name="echo", args=[Arg(), Arg(is_optional=True, is_variadic=True)])

    assert parse(["a"], spec).args == ("a",)
    assert parse(["a", "b", "c"], spec).args == ("a", "b", "c")
    with pytest.raises(TooFewArguments) as excinfo:
        parse([], spec)
    assert excinfo.value.max == math.inf
    assert excinfo.value.message == "Expected at least 1 argument"


def test_between_message():
    spec = Command(name="range", args=[Arg(), Arg(), Arg(is_optional=True)])
    with pytest.raises(TooFewArguments, match="Expected between 2 and 3 arguments"):
        parse(["a"], spec)


def test_every_token_after_separator_is_an_argument():
    spec = Command(name="app", args=Arg(is_variadic=True), options=[Option(name="-a")])
    result = parse(["one", "--", "two", "--", "-a"], spec)

    assert result.args == ("one", "two", "--", "-a")
    assert result.arg_separator_index == 1
    assert result.options == {}


def test_separator_with_two_arguments():
    spec = Command(name="app", args=[Arg(), Arg()])
    result = parse(["--", "two", "--"], spec)

    assert result.args == ("two", "--")
    assert result.arg_separator_index == 0


def test_separator_when_arguments_are_full():
    with pytest.raises(ParseError, match="Unexpected argument '--'"):
        parse(["a", "--"], Command(name="app", args=Arg()))


def test_actions_are_collected_along_the_path():
    def root_action(init):
        return 0

    def child_action(init):
        return 0

    def option_action(init):
        return 0

    child = Command(name="child", action=child_action, options=[Option(name="-o", action=option_action)])
    spec = Command(name="root", action=root_action, subcommands=[child])
    result = parse(["child", "-o"], spec)

    assert result.path == (spec, child)
    assert result.actions == (root_action, child_action)
    assert result.option_actions == (option_action,)


def test_option_action_skips_the_positional_minimum():
    spec = Command(
        name="app",
        args=Arg(name="file"),
        options=[Option(name="--version", action=lambda init: 0)],
    )
    result = parse(["--version"], spec)

    assert result.args == ()
    assert result.options == {"--version": ()}


def test_requires_subcommand_registers_usage_and_tolerates_arguments():
    spec = Command(name="git", requires_subcommand=True, subcommands=[Command(name="commit")])

    assert parse([], spec).actions == (usage,)
    result = parse(["comit", "extra"], spec)
    assert result.args == ("comit", "extra")
    assert result.actions == (usage,)


def test_own_action_wins_over_usage():
    def action(init):
        return 0

    spec = Command(name="git", requires_subcommand=True, action=action)
    assert parse([], spec).actions == (action,)


def test_result_is_read_only():
    result = parse(["-v"], Command(name="app", options=[Option(name="-v")]))

    with pytest.raises(TypeError):
        result.options["-v"] = ("x",)  # type: ignore[index]
    with pytest.raises(AttributeError):
        result.args = ("x",)  # type: ignore[misc]


def test_state_machine_starts_collecting_positionals():
    machine = ParseStateMachine(Command(name="app"))
    assert machine.state is ParseState.COLLECTING_POSITIONALS
    assert [command.names for command in machine.path] == [["app"]]
