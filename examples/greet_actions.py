"""greet_actions.py

Actions referenced by dotted path from greet.yaml.
"""
from figspec import ActionInit


def greet(init: ActionInit) -> int:
    name = init.args[0] if init.args else "world"
    message = f"Hello, {name}!"
    if init.options.has("--loud"):
        message = message.upper()
    for _ in range(int(init.options.first("--times", "1"))):
        print(message)
    return 0
