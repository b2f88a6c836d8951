"""
Rich output helpers for the calcula CLI.
"""

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from calcula.core.registry import Registry

console = Console()

# Style definitions
STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "subtitle": Style(color="bright_black"),
    "result": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "muted": Style(color="bright_black"),
}


def print_header(title: str, subtitle: str = "", out: Console | None = None) -> None:
    """Print a styled header."""
    out = out or console
    out.print(Text(title, style=STYLES["title"]))
    if subtitle:
        out.print(Text(subtitle, style=STYLES["subtitle"]))
    out.print()


def print_result(value: str, out: Console | None = None) -> None:
    (out or console).print(Text(f"Result: {value}", style=STYLES["result"]))


def print_error(message: str, out: Console | None = None) -> None:
    (out or console).print(Text(f"Error: {message}", style=STYLES["error"]))


def registry_table(registry: Registry) -> Table:
    """Table of registered functions and constants."""
    table = Table(title="Functions and constants", show_lines=False)
    table.add_column("Name", style="bright_cyan", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Value / description", style="bright_black")

    for kind, name in registry.names():
        if kind == "function":
            fn = registry.functions[name]
            doc = (fn.__doc__ or "").strip().splitlines()
            table.add_row(f"{name}(x)", kind, doc[0] if doc else "")
        else:
            table.add_row(name, kind, repr(registry.constants[name]))
    return table
