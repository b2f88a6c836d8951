"""Shared pytest fixtures for calcula tests."""

from pathlib import Path

import pytest

from calcula.core.expression_lang import Evaluator
from calcula.core.registry import Registry


@pytest.fixture
def registry() -> Registry:
    """Return a registry seeded with the default functions and constants."""
    return Registry.with_defaults()


@pytest.fixture
def evaluator(registry: Registry) -> Evaluator:
    """Return an evaluator over the default registry."""
    return Evaluator(registry)


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no calcula environment overrides."""
    monkeypatch.chdir(tmp_path)
    for var in ("CALCULA_MAX_DEPTH", "CALCULA_PRECISION", "CALCULA_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
