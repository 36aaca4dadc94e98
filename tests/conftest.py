"""Shared fixtures."""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def extra_lints() -> ModuleType:
    """The scripts/extra_lints.py module, loaded from its file."""
    path = ROOT / "scripts" / "extra_lints.py"
    spec = importlib.util.spec_from_file_location("extra_lints", path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
