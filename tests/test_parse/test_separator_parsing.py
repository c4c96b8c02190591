import pytest

from figspec.exceptions import ParseError, UnknownOption
from figspec.parse import parse
from figspec.spec import Arg, Command, Option, ParserDirectives


def sep_spec(**option_kwargs):
    return Command(
        name="app",
        args=Arg(is_optional=True),
        options=[Option(name="--sep", args=Arg(is_optional=True), **option_kwargs)],
        parser_directives=ParserDirectives(option_arg_separators=["=", ":"]),
    )


def test_required_separator_binds_inline_value():
    result = parse(["--sep=val", "val"], sep_spec(requires_separator=True))

    assert result.options == {"--sep": ("val",)}
    assert result.args == ("val",)


def test_required_separator_does_not_take_next_token():
    result = parse(["--sep", "val"], sep_spec(requires_separator=True))

    assert result.options == {"--sep": ()}
    assert result.args == ("val",)


def test_specific_separator():
    spec = sep_spec(requires_separator=":")

    assert parse(["--sep:val"], spec).options == {"--sep": ("val",)}
    with pytest.raises(ParseError, match="Incorrect separator, use ':' instead of '='"):
        parse(["--sep=val"], spec)


def test_arg_separator_after_required_separator_option():
    with pytest.raises(ParseError):
        parse(["--sep", "--"], sep_spec(requires_separator=True))


def test_unknown_option_after_required_separator_option():
    with pytest.raises(UnknownOption):
        parse(["--sep", "--nope"], sep_spec(requires_separator=True))


def test_required_separator_with_required_argument():
    spec = Command(
        name="app",
        args=Arg(is_optional=True),
        options=[Option(name="--sep", args=Arg(), requires_separator=True)],
    )
    assert parse(["--sep=x"], spec).options == {"--sep": ("x",)}
    with pytest.raises(ParseError):
        parse(["--sep", "x"], spec)


def test_custom_separators_replace_the_default():
    spec = Command(
        name="app",
        options=[Option(name="--opt", args=Arg())],
        parser_directives=ParserDirectives(option_arg_separators=":"),
    )

    assert parse(["--opt:a=b"], spec).options == {"--opt": ("a=b",)}
    with pytest.raises(UnknownOption):
        parse(["--opt=a"], spec)


def test_separators_can_be_disabled():
    spec = Command(
        name="app",
        options=[Option(name="--opt", args=Arg())],
        parser_directives=ParserDirectives(option_arg_separators=[]),
    )
    with pytest.raises(UnknownOption):
        parse(["--opt=a"], spec)


def test_earliest_separator_wins():
    spec = Command(
        name="app",
        options=[Option(name="--a", args=Arg())],
        parser_directives=ParserDirectives(option_arg_separators=["=", ":"]),
    )
    assert parse(["--a:b=c"], spec).options == {"--a": ("b=c",)}


def test_last_declared_separator_wins_a_tie():
    spec = Command(
        name="app",
        options=[Option(name="--a", args=Arg())],
        parser_directives=ParserDirectives(option_arg_separators=["=", "=="]),
    )
    assert parse(["--a==b"], spec).options == {"--a": ("b",)}
