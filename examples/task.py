"""task.py

An extremely simple to-do list kept in a JSON file.

    python examples/task.py add "water the plants"
    python examples/task.py ls
    python examples/task.py rm 1
"""
import json
from pathlib import Path

from rich.console import Console

from figspec import ActionInit, Arg, Command, Option, ParserDirectives, help_option, run
from figspec.utils import setup_logging

setup_logging()

console = Console()
TASKS_FILE = Path.home() / ".figspec-tasks.json"


def get_tasks() -> list[str]:
    if not TASKS_FILE.exists():
        return []
    return json.loads(TASKS_FILE.read_text(encoding="UTF-8"))


def set_tasks(tasks: list[str]) -> None:
    TASKS_FILE.write_text(json.dumps(tasks), encoding="UTF-8")


def add(init: ActionInit) -> None:
    tasks = get_tasks()
    tasks.append(init.args[0])
    set_tasks(tasks)


def list_tasks(init: ActionInit) -> None:
    tasks = get_tasks()
    if init.options.has("--json"):
        print(json.dumps(tasks))
        return
    for index, task in enumerate(tasks, start=1):
        console.print(f"[bold green]{index}:[/] {task}")


def delete(init: ActionInit) -> int:
    tasks = get_tasks()
    index = int(init.args[0]) - 1
    if not 0 <= index < len(tasks):
        init.error(f"There is no task number {init.args[0]}")
        return 1
    removed = tasks.pop(index)
    set_tasks(tasks)
    if not init.options.has("--quiet"):
        console.print(f"[red]Deleted:[/] {removed}")
    return 0


spec = Command(
    name="task",
    description="An extremely simple to-do list CLI",
    options=[help_option],
    requires_subcommand=True,
    parser_directives=ParserDirectives(subcommands_match_unique_prefix=True),
    subcommands=[
        Command(
            name="add",
            description="Add a task",
            args=Arg(name="task-description"),
            action=add,
        ),
        Command(
            name=["list", "ls"],
            description="List tasks",
            options=[Option(name="--json", description="List as JSON")],
            action=list_tasks,
        ),
        Command(
            name=["delete", "rm"],
            description="Delete a task by its index",
            args=Arg(name="index"),
            options=[Option(name="--quiet", description="No logging")],
            action=delete,
        ),
    ],
)

if __name__ == "__main__":
    run(spec)
