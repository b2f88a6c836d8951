"""
Interactive read-evaluate-print loop.

Lines are either shell commands (help, exit/quit, clear, functions) or
expressions handed to the evaluator. Errors are printed and the loop goes on.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from calcula.cli.utils import get_version, load_cli_settings
from calcula.cli_ui import console, print_error, print_header, print_result, registry_table
from calcula.core.errors import EvalError
from calcula.core.expression_lang import Evaluator
from calcula.core.settings import CalculaSettings, build_evaluator

PROMPT = "> "

HELP_TEXT = """\
Available commands:
  help       - Show this help message
  exit/quit  - Exit the calculator
  clear      - Clear the screen
  functions  - List functions and constants

Examples:
  2 + 2 * 3
  sin(pi/2)
  sqrt(144)
  ln(e^2)
"""


class CalculatorShell:
    """Line-oriented driver around one evaluator."""

    def __init__(
        self,
        evaluator: Evaluator,
        settings: CalculaSettings,
        out: Console | None = None,
    ) -> None:
        self.evaluator = evaluator
        self.settings = settings
        self.out = out or console

    def banner(self) -> None:
        print_header(f"calcula {get_version()}", "Type 'help' for commands.", out=self.out)

    def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the shell should stop."""
        line = line.strip()
        if not line:
            return True

        if line in ("exit", "quit"):
            self.out.print("Goodbye!")
            return False
        if line == "help":
            self.out.print(HELP_TEXT, highlight=False)
            return True
        if line == "clear":
            self.out.clear()
            self.banner()
            return True
        if line == "functions":
            self.out.print(registry_table(self.evaluator.registry))
            return True

        try:
            value = self.evaluator.evaluate(line)
        except EvalError as e:
            print_error(str(e), out=self.out)
        else:
            print_result(self.settings.format_result(value), out=self.out)
        return True

    def run(self) -> None:
        self.banner()
        while True:
            try:
                line = self.out.input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.out.print()
                break
            if not self.handle(line):
                break


def repl_command(
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Settings file (default: ./calcula.toml if present)",
    ),
) -> None:
    """
    Start an interactive calculator session.

    Examples:
        calcula repl
        calcula repl -c calcula.toml
    """
    settings = load_cli_settings(config)
    shell = CalculatorShell(build_evaluator(settings), settings)
    shell.run()
