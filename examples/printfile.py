"""printfile.py

Prints a file, using an async action and the opt-in help option and command.
"""
import asyncio
import sys
from pathlib import Path

from figspec import ActionInit, Arg, Command, Option, help_command, help_option, run


async def print_file(init: ActionInit) -> int:
    text = await asyncio.to_thread(Path(init.args[0]).read_text, encoding="UTF-8")
    stream = sys.stderr if init.options.has("--stderr") else sys.stdout
    print(text, file=stream, end="")
    return 0


spec = Command(
    name="printfile",
    description="Print the contents of a file",
    args=Arg(name="path"),
    options=[
        Option(name="--stderr", description="Print on stderr instead of stdout"),
        help_option,
    ],
    subcommands=[help_command],
    action=print_file,
)

if __name__ == "__main__":
    run(spec)
