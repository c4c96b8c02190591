# Figspec CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""Shared console instances for figspec output and diagnostics."""
from rich.console import Console
from rich.theme import Theme

FIGSPEC_THEME = Theme(
    {
        "figspec.error": "bold #BF616A",
        "figspec.ok": "bold #A3BE8C",
        "figspec.heading": "bold #88C0D0",
        "figspec.muted": "#4C566A",
    }
)

console = Console(theme=FIGSPEC_THEME)
error_console = Console(theme=FIGSPEC_THEME, stderr=True)
