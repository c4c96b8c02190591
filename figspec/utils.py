# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""utils.py

Small normalization helpers shared by the spec model, the analyzer and the parser,
plus async and logging helpers used by the runtime.

Spec fields such as `name` and `args` accept either a single value or a list of
values. `make_array` and `make_array1` turn those into lists, and `set_each`
registers one object under every one of its aliases in a name-indexed table.
"""
from __future__ import annotations

import functools
import inspect
import logging
import math
import os
from typing import Any, Awaitable, Callable, Iterable, MutableMapping, Sequence, TypeVar

import pythonjsonlogger.json
from rich.logging import RichHandler

from figspec.console import error_console

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


def make_array(thing: T | Sequence[T] | None) -> list[T]:
    """Return `thing` as a new list with zero or more elements."""
    if thing is None:
        return []
    if isinstance(thing, (list, tuple)):
        return list(thing)
    return [thing]  # type: ignore[list-item]


def make_array1(thing: T | Sequence[T]) -> list[T]:
    """Return `thing` as a new list that is expected to hold at least one element."""
    values = make_array(thing)
    if not values:
        raise ValueError("Expected at least one value")
    return values


def set_each(table: MutableMapping[K, V], keys: K | Iterable[K], value: V) -> None:
    """Insert `value` under every key in `keys`."""
    if isinstance(keys, (list, tuple)):
        for key in keys:
            table[key] = value
    else:
        table[keys] = value  # type: ignore[index]


def get_min_args(args: Sequence[Any]) -> int:
    """Count the arguments before the first optional one."""
    count = 0
    for arg in args:
        if arg.is_optional:
            break
        count += 1
    return count


def get_max_args(args: Sequence[Any]) -> int | float:
    """Return `math.inf` if any argument is variadic, else the number of arguments."""
    if any(arg.is_variadic for arg in args):
        return math.inf
    return len(args)


def is_coroutine(function: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(function)


def ensure_async(function: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    if is_coroutine(function):
        return function  # type: ignore

    if not callable(function):
        raise TypeError(f"{function} is not callable")

    @functools.wraps(function)
    async def async_wrapper(*args, **kwargs) -> T:
        result = function(*args, **kwargs)
        if inspect.isawaitable(result):
            return await result
        return result

    return async_wrapper


def running_in_container() -> bool:
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as f:
            content = f.read()
            return (
                "docker" in content
                or "kubepods" in content
                or "containerd" in content
                or "podman" in content
            )
    except OSError:
        return False


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Configure logging for figspec with CLI-friendly or structured JSON output.

    Args:
        mode (str | None):
            Logging output mode. Can be:
                - "cli": human-readable Rich console logs (default outside containers)
                - "json": machine-readable JSON logs (default inside containers)
            If not provided, the `FIGSPEC_LOG_MODE` environment variable is used,
            falling back to container detection.
        log_filename (str | None):
            Optional path for file-based logging output. No file handler is
            installed when omitted.
        json_log_to_file (bool):
            Whether to format file logs as JSON instead of plain text.
        file_log_level (int):
            Logging level for file output. Defaults to `logging.DEBUG`.
        console_log_level (int):
            Logging level for console output. Defaults to `logging.WARNING`.

    Raises:
        ValueError: If an invalid logging `mode` is passed.
    """
    if not mode:
        mode = os.getenv("FIGSPEC_LOG_MODE") or (
            "json" if running_in_container() else "cli"
        )

    if mode == "cli":
        console_handler: RichHandler | logging.StreamHandler = RichHandler(
            console=error_console,
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    elif mode == "json":
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            pythonjsonlogger.json.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        )
    else:
        raise ValueError(f"Invalid log mode: {mode}")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if root.hasHandlers():
        root.handlers.clear()

    console_handler.setLevel(console_log_level)
    root.addHandler(console_handler)

    if log_filename:
        file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
        file_handler.setLevel(file_log_level)
        if json_log_to_file:
            file_handler.setFormatter(
                pythonjsonlogger.json.JsonFormatter(
                    "%(asctime)s %(name)s %(levelname)s %(message)s"
                )
            )
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        root.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    logger = logging.getLogger("figspec")
    logger.propagate = True
    logger.debug("Logging initialized in '%s' mode.", mode)
