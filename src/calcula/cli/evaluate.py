"""
One-shot evaluation commands for the calcula CLI.

- eval: Evaluate a single expression and print the result
- functions: List registered functions and constants
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from calcula.cli.utils import load_cli_settings
from calcula.cli_ui import console, registry_table
from calcula.core.errors import EvalError
from calcula.core.settings import build_evaluator

logger = logging.getLogger(__name__)


def eval_command(
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Settings file (default: ./calcula.toml if present)",
    ),
    precision: int | None = typer.Option(
        None,
        "--precision",
        "-p",
        min=1,
        max=17,
        help="Significant digits to print (overrides settings)",
    ),
) -> None:
    """
    Evaluate an expression and print the result.

    Expressions starting with '-' must follow '--' so they are not read as
    options.

    Examples:
        calcula eval "2 + 2 * 3"        # 8
        calcula eval "sqrt(2)" -p 4     # 1.414
        calcula eval -- "-2^2"          # -4
    """
    settings = load_cli_settings(config)
    if precision is not None:
        settings = settings.model_copy(update={"precision": precision})

    evaluator = build_evaluator(settings)
    try:
        value = evaluator.evaluate(expression)
    except EvalError as e:
        logger.debug("Evaluation failed: %s", e.kind)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(settings.format_result(value))


def functions_command(
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Settings file (default: ./calcula.toml if present)",
    ),
) -> None:
    """List the functions and constants available to expressions."""
    settings = load_cli_settings(config)
    evaluator = build_evaluator(settings)
    console.print(registry_table(evaluator.registry))
