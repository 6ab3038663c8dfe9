"""Shared test fixtures for obey."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point OBEY_CONFIG at a file that does not exist unless a test writes it."""
    path = tmp_path / "obey-config.yaml"
    monkeypatch.setenv("OBEY_CONFIG", str(path))
    return path


@pytest.fixture
def load_yaml():
    """Return a function that loads a YAML fixture file."""

    def _load(name: str) -> dict:
        path = FIXTURES_DIR / name
        with open(path) as f:
            return yaml.safe_load(f)

    return _load


@pytest.fixture
def reporter():
    """A reporter double with a ``report`` spy."""
    return MagicMock()


@pytest.fixture
def functions():
    """Before, after and failing functions shared by engine tests."""
    return {
        "beforeFunction": MagicMock(return_value={"factValue": 10}),
        "afterFunction": MagicMock(),
        "functionWithError": MagicMock(side_effect=RuntimeError("Error in function")),
    }
