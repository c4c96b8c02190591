import pytest

from figspec.exceptions import ParseError, UnknownOption
from figspec.parse import parse
from figspec.run import (
    ActionInit,
    OptionValues,
    clamp_exit_code,
    execute,
    format_parse_error,
    run,
)
from figspec.spec import Arg, Command, Option


@pytest.mark.asyncio
async def test_action_receives_parse_result():
    received: list[ActionInit] = []

    def action(init: ActionInit) -> int:
        received.append(init)
        return 3

    spec = Command(
        name="app",
        args=Arg(is_optional=True, is_variadic=True),
        options=[Option(name=["-o", "--out"], args=Arg()), Option(name="-v", is_repeatable=True)],
        action=action,
    )

    assert await execute(spec, ["-vv", "-o", "x", "a", "--", "b"]) == 3

    (init,) = received
    assert init.args == ("a", "b")
    assert init.arg_separator_index == 1
    assert init.path == (spec,)
    assert init.options.first("--out") == "x"
    assert init.options.has("-o")
    assert init.options.count("-v") == 2
    assert init.options.all("-v") == ("", "")
    assert not init.options.has("--missing")
    assert init.options.first("--missing") is None
    assert init.options.all("--missing") == ()
    assert init.options.count("--missing") == 0
    assert "Usage:" in init.help()


@pytest.mark.asyncio
@pytest.mark.parametrize("returned, expected", [(0, 0), (None, 0), (300, 255), (-5, 0), (42, 42)])
async def test_exit_code_is_clamped(returned, expected):
    spec = Command(name="app", action=lambda init: returned)
    assert await execute(spec, []) == expected


@pytest.mark.asyncio
async def test_async_action():
    async def action(init):
        return 7

    assert await execute(Command(name="app", action=action), []) == 7


@pytest.mark.asyncio
async def test_action_error_is_printed(capsys):
    def action(init):
        raise ValueError("boom")

    assert await execute(Command(name="app", action=action), []) == 1
    assert "Error: boom" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_base_exceptions_propagate():
    def action(init):
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        await execute(Command(name="app", action=action), [])


@pytest.mark.asyncio
async def test_no_action():
    assert await execute(Command(name="app"), []) == 1


@pytest.mark.asyncio
async def test_option_action_wins():
    calls = []
    spec = Command(
        name="app",
        action=lambda init: calls.append("command"),
        options=[
            Option(name="-a", action=lambda init: calls.append("a")),
            Option(name="-b", action=lambda init: calls.append("b")),
        ],
    )

    assert await execute(spec, ["-b", "-a"]) == 0
    assert calls == ["a"]


@pytest.mark.asyncio
async def test_deepest_command_action_wins():
    calls = []
    child = Command(name="child", action=lambda init: calls.append("child"))
    spec = Command(name="app", action=lambda init: calls.append("app"), subcommands=[child])

    assert await execute(spec, ["child"]) == 0
    assert calls == ["child"]


@pytest.mark.asyncio
async def test_parse_error_prints_help(capsys):
    spec = Command(name="app", action=lambda init: 0)
    assert await execute(spec, ["x"]) == 1

    captured = capsys.readouterr()
    assert "Error: Too many arguments, 'x' was unexpected" in captured.err
    assert "Usage:\n  app" in captured.err


@pytest.mark.asyncio
async def test_unknown_option_suggests_a_name(capsys):
    spec = Command(name="app", options=[Option(name="--verbose")], action=lambda init: 0)
    assert await execute(spec, ["--verbos"]) == 1
    assert "Did you mean '--verbose'?" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_error_helper(capsys):
    def action(init):
        init.error("bad", "input")
        return 2

    assert await execute(Command(name="app", action=action), []) == 2
    assert "Error: bad input" in capsys.readouterr().err


def test_option_values_is_a_mapping():
    values = OptionValues({"-a": ("1",), "--all": ("1",)})

    assert dict(values) == {"-a": ("1",), "--all": ("1",)}
    assert len(values) == 2
    assert "-a" in values
    assert values["--all"] == ("1",)


def test_run_exits_with_the_action_code():
    spec = Command(name="app", args=Arg(), action=lambda init: 4)

    with pytest.raises(SystemExit) as excinfo:
        run(spec, ["x"])
    assert excinfo.value.code == 4

    with pytest.raises(SystemExit) as excinfo:
        run(spec, [])
    assert excinfo.value.code == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("returned", ["done", ["a"], 1.5])
async def test_non_integer_return_is_an_error_code(returned):
    spec = Command(name="app", action=lambda init: returned)
    assert await execute(spec, []) == 1


def test_clamp_exit_code():
    assert clamp_exit_code(None) == 0
    assert clamp_exit_code(True) == 1
    assert clamp_exit_code(256) == 255
    assert clamp_exit_code("3") == 1


def test_first_option_value():
    values = OptionValues({"--out": ("a", "b"), "--flag": ()})

    assert values.first("--out") == "a"
    assert values.first("--flag", "x") == "x"
    assert values.first("--missing") is None
    assert values.get("--out") == ("a", "b")


def test_format_parse_error_suggests_option():
    spec = Command(name="app", options=[Option(name="--verbose")])
    with pytest.raises(UnknownOption) as excinfo:
        parse(["--verbos"], spec)

    text = format_parse_error(excinfo.value)
    assert text.startswith("'--verbos' looks like an option, but is unknown in this context\n\n")
    assert "Did you mean '--verbose'?" in text
    assert "Usage:" in text


def test_format_parse_error_without_suggestion():
    spec = Command(name="app")
    with pytest.raises(ParseError) as excinfo:
        parse(["x"], spec)

    text = format_parse_error(excinfo.value)
    assert text.startswith("Too many arguments, 'x' was unexpected\n\n")
    assert "Did you mean" not in text
