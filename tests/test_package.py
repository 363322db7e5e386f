"""Tests that every module imports and the declared dependencies cover the imports."""

import importlib
import pkgutil
from pathlib import Path

import pytest

import nixf_diagnose


def _module_names() -> list[str]:
    return [
        info.name
        for info in pkgutil.walk_packages(nixf_diagnose.__path__, prefix="nixf_diagnose.")
    ]


@pytest.mark.parametrize("name", _module_names())
def test_module_imports(name):
    assert importlib.import_module(name) is not None


def test_direct_imports_are_declared():
    tomllib = pytest.importorskip("tomllib")
    pyproject = Path(__file__).parent.parent / "pyproject.toml"
    with pyproject.open("rb") as fh:
        dependencies = tomllib.load(fh)["project"]["dependencies"]
    declared = {dep.split(">")[0].split("=")[0].split("<")[0].strip() for dep in dependencies}
    assert {"typer", "rich", "pydantic", "click"} <= declared
