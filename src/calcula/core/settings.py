"""
Settings for the calcula evaluator and command line.

Settings come from the ``[calculator]`` table of a ``calcula.toml`` file,
then from environment variables, which take precedence:

    [calculator]
    max_depth = 100
    precision = 12
    extended_functions = true

    [calculator.constants]
    tau = 6.283185307179586

Environment overrides:
    CALCULA_MAX_DEPTH  - recursion ceiling
    CALCULA_PRECISION  - significant digits in printed results
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from calcula.core.errors import ConfigError
from calcula.core.expression_lang import DEFAULT_MAX_DEPTH, Evaluator
from calcula.core.registry import Registry, is_identifier

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "calcula.toml"

# Environment variable -> settings field
ENV_OVERRIDES: dict[str, str] = {
    "CALCULA_MAX_DEPTH": "max_depth",
    "CALCULA_PRECISION": "precision",
}


class CalculaSettings(BaseModel):
    """Validated calculator settings."""

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=250,
        description="Maximum nesting of groups, calls, signs and powers",
    )
    precision: int = Field(
        default=12,
        ge=1,
        le=17,
        description="Significant digits when printing results",
    )
    extended_functions: bool = Field(
        default=False,
        description="Also register asinh, acosh, atanh, exp2 and fact",
    )
    constants: dict[str, float] = Field(
        default_factory=dict,
        description="Extra constants registered at startup",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("constants")
    @classmethod
    def _check_constant_names(cls, value: dict[str, float]) -> dict[str, float]:
        bad = [name for name in value if not is_identifier(name)]
        if bad:
            raise ValueError(f"invalid constant names: {', '.join(bad)}")
        return value

    def format_result(self, value: float) -> str:
        return format(value, f".{self.precision}g")


def load_settings(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> CalculaSettings:
    """Load settings from a TOML file and the environment.

    Args:
        path: Settings file. Defaults to ./calcula.toml; a missing default
            file means built-in defaults, a missing explicit file is an error.
        environ: Environment mapping (defaults to os.environ).

    Raises:
        ConfigError: If the file cannot be parsed or values are invalid.
    """
    env = os.environ if environ is None else environ
    data: dict[str, object] = {}

    explicit = path is not None
    config_path = path if path is not None else Path.cwd() / DEFAULT_CONFIG_FILENAME
    if config_path.exists():
        logger.debug("Loading settings from %s", config_path)
        data = dict(_read_calculator_table(config_path))
    elif explicit:
        raise ConfigError(f"Settings file not found: {config_path}")

    for var, field_name in ENV_OVERRIDES.items():
        raw = env.get(var, "").strip()
        if raw:
            logger.debug("Using %s=%s from environment", var, raw)
            data[field_name] = raw

    try:
        return CalculaSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid calculator settings: {e}") from e


def _read_calculator_table(path: Path) -> dict[str, object]:
    try:
        document = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    table = document.get("calculator", {})
    if not isinstance(table, dict):
        raise ConfigError(f"[calculator] in {path} must be a table")
    return table


def build_evaluator(settings: CalculaSettings | None = None) -> Evaluator:
    """Create an evaluator configured from settings."""
    if settings is None:
        settings = CalculaSettings()
    registry = Registry.with_defaults(extended=settings.extended_functions)
    for name, value in settings.constants.items():
        registry.register_constant(name, value)
    return Evaluator(registry, max_depth=settings.max_depth)
