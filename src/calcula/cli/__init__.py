"""
calcula CLI package.

- evaluate.py: eval and functions commands
- repl.py: interactive shell
- utils.py: shared utilities
"""

from __future__ import annotations

import typer

from calcula.cli.evaluate import eval_command, functions_command
from calcula.cli.repl import repl_command
from calcula.cli.utils import configure_logging, get_version, version_callback

app = typer.Typer(
    help="""calcula - arithmetic expression evaluator

  • eval "2 + 2 * 3"   → evaluate one expression
  • repl               → interactive session
  • functions          → list functions and constants
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="CALCULA_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """calcula CLI main callback for global options."""
    configure_logging(log_level)


app.command(name="eval")(eval_command)
app.command(name="repl")(repl_command)
app.command(name="functions")(functions_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = ["app", "main", "get_version", "version_callback"]
