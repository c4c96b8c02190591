# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Loads a figspec `Command` tree from a YAML or TOML file.

The file holds the root command as a mapping. Keys mirror the dataclass fields
of the spec model, `name` and `args` take a single value or a list, and
`action` is a dotted import path:

    name: task
    description: Manage tasks
    requires_subcommand: true
    options:
      - name: [-h, --help]
        is_persistent: true
        action: tasks.cli.print_help
    subcommands:
      - name: add
        args: {name: description}
        action: tasks.cli.add
"""
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

import toml
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from figspec.exceptions import ConfigError
from figspec.logger import logger
from figspec.spec import Action, Arg, Command, Option, ParserDirectives


def import_action(dotted_path: str) -> Action:
    """Dynamically imports a callable from a dotted path like 'my.module.func'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise ConfigError(f"Invalid action path: '{dotted_path}'")
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise ConfigError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        action = getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        raise ConfigError(f"Module '{module_path}' has no attribute '{attr}'") from error
    if not callable(action):
        raise ConfigError(f"'{dotted_path}' is not callable")
    return action


def _check_names(value: str | list[str]) -> str | list[str]:
    if isinstance(value, list) and not value:
        raise ValueError("name must hold at least one value")
    return value


class RawArg(BaseModel):
    """Raw argument model for figspec spec files."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str = ""
    is_optional: bool = False
    is_variadic: bool = False
    default: str | None = None
    suggestions: list[str] = Field(default_factory=list)

    def to_arg(self) -> Arg:
        return Arg(**self.model_dump())


def _convert_args(raw: RawArg | list[RawArg] | None) -> Arg | list[Arg] | None:
    if raw is None:
        return None
    if isinstance(raw, list):
        return [arg.to_arg() for arg in raw]
    return raw.to_arg()


def _resolve_action(path: str | None) -> Action | None:
    return import_action(path) if path else None


class RawOption(BaseModel):
    """Raw option model for figspec spec files."""

    model_config = ConfigDict(extra="forbid")

    name: str | list[str]
    description: str = ""
    args: RawArg | list[RawArg] | None = None
    is_persistent: bool = False
    is_repeatable: bool | int = False
    is_required: bool = False
    exclusive_on: list[str] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)
    requires_separator: bool | str = False
    hidden: bool = False
    action: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | list[str]) -> str | list[str]:
        return _check_names(value)

    def to_option(self) -> Option:
        return Option(
            **self.model_dump(exclude={"args", "action"}),
            args=_convert_args(self.args),
            action=_resolve_action(self.action),
        )


class RawDirectives(BaseModel):
    """Raw parser directives for figspec spec files."""

    model_config = ConfigDict(extra="forbid")

    flags_are_posix_noncompliant: bool | None = None
    options_must_precede_arguments: bool | None = None
    option_arg_separators: str | list[str] | None = None
    subcommands_match_unique_prefix: bool | None = None

    def to_directives(self) -> ParserDirectives:
        return ParserDirectives(**self.model_dump())


class RawCommand(BaseModel):
    """Raw command model for figspec spec files."""

    model_config = ConfigDict(extra="forbid")

    name: str | list[str]
    description: str = ""
    args: RawArg | list[RawArg] | None = None
    options: list[RawOption] = Field(default_factory=list)
    subcommands: list[RawCommand] = Field(default_factory=list)
    parser_directives: RawDirectives | None = None
    requires_subcommand: bool = False
    hidden: bool = False
    action: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | list[str]) -> str | list[str]:
        return _check_names(value)

    def to_command(self) -> Command:
        return Command(
            name=self.name,
            description=self.description,
            args=_convert_args(self.args),
            options=[option.to_option() for option in self.options],
            subcommands=[command.to_command() for command in self.subcommands],
            parser_directives=(
                self.parser_directives.to_directives() if self.parser_directives else None
            ),
            requires_subcommand=self.requires_subcommand,
            hidden=self.hidden,
            action=_resolve_action(self.action),
        )


RawCommand.model_rebuild()


def spec_from_dict(raw_spec: dict[str, Any]) -> Command:
    """Validate a raw mapping and convert it into a `Command` tree."""
    try:
        raw_command = RawCommand.model_validate(raw_spec)
    except ValidationError as error:
        raise ConfigError(f"Invalid spec:\n{error}") from error
    return raw_command.to_command()


def load_spec(file_path: Path | str) -> Command:
    """
    Load a figspec spec from a YAML or TOML file.

    Args:
        file_path (Path | str): Path to a `.yaml`, `.yml` or `.toml` file.

    Returns:
        Command: The root command of the loaded spec.

    Raises:
        ConfigError: If the file is missing, has an unsupported suffix, cannot be
            parsed, or does not describe a valid spec.
    """
    path = Path(file_path)
    if not path.is_file():
        raise ConfigError(f"No such spec file: {file_path}")

    suffix = path.suffix
    try:
        with path.open("r", encoding="UTF-8") as spec_file:
            if suffix in (".yaml", ".yml"):
                raw_spec = yaml.safe_load(spec_file)
            elif suffix == ".toml":
                raw_spec = toml.load(spec_file)
            else:
                raise ConfigError(f"Unsupported spec format: {suffix}")
    except (yaml.YAMLError, toml.TomlDecodeError) as error:
        raise ConfigError(f"Could not parse {path}: {error}") from error

    if not isinstance(raw_spec, dict):
        raise ConfigError(
            "Spec file must contain a mapping describing the root command.\n"
            "Example:\n"
            "name: 'my-cli'\n"
            "subcommands:\n"
            "  - name: 'run'\n"
            "    action: 'my_module.my_function'"
        )

    logger.debug("Loaded spec file %s", path)
    return spec_from_dict(raw_spec)


__all__ = [
    "RawArg",
    "RawCommand",
    "RawDirectives",
    "RawOption",
    "import_action",
    "load_spec",
    "spec_from_dict",
]
