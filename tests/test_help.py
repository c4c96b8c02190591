import pytest

from figspec.help import (
    arg_to_string,
    get_help,
    help_command,
    help_option,
    option_to_string,
    summarize_arguments,
)
from figspec.run import execute
from figspec.spec import Arg, Command, Option, ParserDirectives

add = Command(name="add", description="Add a task", args=Arg(name="description"))
list_command = Command(
    name=["list", "ls"],
    description="List tasks\n\nLonger text",
    options=[Option(name="--json", description="List as JSON")],
)
secret = Command(name="secret", description="Not shown", hidden=True)
task = Command(
    name="task",
    description="Manage tasks",
    requires_subcommand=True,
    options=[help_option, Option(name="--debug", hidden=True, is_persistent=True)],
    subcommands=[add, list_command, secret, help_command],
)


@pytest.mark.parametrize(
    "arg, expected",
    [
        (Arg(name="file"), "<file>"),
        (Arg(name="file", is_optional=True), "[file]"),
        (Arg(name="file", is_variadic=True), "<file>..."),
        (Arg(name="file", is_optional=True, is_variadic=True), "[file]..."),
        (Arg(), "<argument>"),
    ],
)
def test_arg_to_string(arg, expected):
    assert arg_to_string(arg) == expected


def test_summarize_arguments():
    args = [Arg(name="src"), Arg(name="dest", is_optional=True)]
    assert summarize_arguments(args) == "<src> [dest]"


@pytest.mark.parametrize(
    "option, expected",
    [
        (Option(name=["--verbose", "-v"]), "-v, --verbose"),
        (Option(name="--out", args=Arg(name="path")), "--out <path>"),
        (
            Option(name="--color", args=Arg(name="when", is_optional=True), requires_separator=True),
            "--color[=when]",
        ),
        (Option(name="--color", args=Arg(name="when"), requires_separator=":"), "--color:<when>"),
    ],
)
def test_option_to_string(option, expected):
    assert option_to_string(option) == expected


def test_root_help():
    assert get_help([task]) == (
        "Manage tasks\n"
        "\n"
        "Usage:\n"
        "  task [flags] <command>\n"
        "\n"
        "Commands:\n"
        "  add       Add a task\n"
        "  ls, list  List tasks\n"
        "  help      Print a help message\n"
        "\n"
        "Global flags:\n"
        "  -h, --help  Print a help message\n"
    )


def test_subcommand_help():
    assert get_help([task, list_command]) == (
        "List tasks\n"
        "\n"
        "Longer text\n"
        "\n"
        "Usage:\n"
        "  task list [flags]\n"
        "\n"
        "Flags:\n"
        "  --json      List as JSON\n"
        "\n"
        "Global flags:\n"
        "  -h, --help  Print a help message\n"
    )


def test_lone_command_help():
    spec = Command(
        name="greet",
        description="Say hello",
        args=Arg(name="name"),
        options=[Option(name="--loud", description="Shout", is_persistent=True)],
    )
    assert get_help([spec]) == (
        "Say hello\n\nUsage:\n  greet [flags] <name>\n\nFlags:\n  --loud  Shout\n"
    )


def test_multiline_option_description():
    spec = Command(name="app", options=[Option(name="--x", description="one\ntwo")])
    assert "  --x  one\n       two\n" in get_help([spec])


def test_missing_descriptions_and_required_options():
    spec = Command(name="login", options=[Option(name="--user", is_required=True, args=Arg(name="name"))])
    text = get_help([spec])

    assert "Usage:\n  login --user <name> [flags]\n" in text
    assert "--user <name>  No description" in text


def test_help_flags():
    text = get_help([task], description=False, usage=False)
    assert "Manage tasks" not in text
    assert "Usage:" not in text
    assert text.startswith("Commands:")


def test_did_you_mean():
    text = get_help([task], did_you_mean=("lsit", ["add", "list", "ls"]))
    assert text.startswith("    Did you mean 'list'?\n\nManage tasks")


def test_did_you_mean_without_close_match():
    text = get_help([task], did_you_mean=("zzzzzz", ["add", "list"]))
    assert "Did you mean" not in text


@pytest.mark.asyncio
async def test_help_option(capsys):
    assert await execute(task, ["add", "--help"]) == 0

    captured = capsys.readouterr()
    assert "Usage:\n  task add [flags] <description>" in captured.out


@pytest.mark.asyncio
async def test_usage_without_arguments_prints_help(capsys):
    assert await execute(task, []) == 0
    assert "Manage tasks" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_usage_with_unknown_command(capsys):
    assert await execute(task, ["lsit"]) == 1

    captured = capsys.readouterr()
    assert "Error: Unknown command 'lsit'" in captured.err
    assert "Did you mean 'list'?" in captured.err


@pytest.mark.asyncio
async def test_usage_with_empty_command(capsys):
    assert await execute(task, [""]) == 1
    assert "Found an empty string, but expected a command" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_usage_with_ambiguous_prefix(capsys):
    spec = Command(
        name="app",
        requires_subcommand=True,
        subcommands=[Command(name="long-name"), Command(name="long-time")],
        parser_directives=ParserDirectives(subcommands_match_unique_prefix=True),
    )
    assert await execute(spec, ["long-"]) == 1
    assert "Ambiguous command 'long-', could be: long-name, long-time" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_help_command(capsys):
    assert await execute(task, ["help"]) == 0
    assert "Manage tasks" in capsys.readouterr().out

    assert await execute(task, ["help", "ls"]) == 0
    assert "List as JSON" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_help_command_with_unknown_subcommand(capsys):
    assert await execute(task, ["help", "ad"]) == 1

    captured = capsys.readouterr()
    assert "There is no subcommand named 'ad'" in captured.err
    assert "Did you mean 'add'?" in captured.err


@pytest.mark.asyncio
async def test_help_command_with_only_itself(capsys):
    spec = Command(name="app", subcommands=[help_command])
    assert await execute(spec, ["help", "x"]) == 1
    assert "There is no subcommand named 'x'" in capsys.readouterr().err
