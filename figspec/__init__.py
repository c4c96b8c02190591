"""
Figspec CLI Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .analyze import TokenKind, analyze
from .config import load_spec
from .exceptions import (
    ConfigError,
    FigspecError,
    InvalidOptionArg,
    MissingRequiredOption,
    ParseError,
    SpecError,
    TooFewArguments,
    TooFewOptionArguments,
    TooManyArguments,
    UnknownOption,
)
from .help import get_help, help_command, help_option
from .parse import ParseResult, parse
from .run import ActionInit, OptionValues, execute, run
from .spec import Arg, Command, Option, ParserDirectives, Spec
from .validation import iter_problems, validate_spec
from .version import __version__

logger = logging.getLogger("figspec")


__all__ = [
    "ActionInit",
    "Arg",
    "Command",
    "ConfigError",
    "FigspecError",
    "InvalidOptionArg",
    "MissingRequiredOption",
    "Option",
    "OptionValues",
    "ParseError",
    "ParseResult",
    "ParserDirectives",
    "Spec",
    "SpecError",
    "TokenKind",
    "TooFewArguments",
    "TooFewOptionArguments",
    "TooManyArguments",
    "UnknownOption",
    "__version__",
    "analyze",
    "execute",
    "get_help",
    "help_command",
    "help_option",
    "iter_problems",
    "load_spec",
    "parse",
    "run",
    "validate_spec",
]
