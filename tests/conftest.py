from __future__ import annotations

import importlib
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable, Iterator, List

import pytest

from tests._fixtures.tree_builder import SourceTreeBuilder


@pytest.fixture
def tree_builder(tmp_path: Path) -> SourceTreeBuilder:
    """Provide a reusable source tree builder rooted at the pytest tmp_path."""
    return SourceTreeBuilder(tmp_path)


@pytest.fixture
def import_generated(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[Path, str], ModuleType]]:
    """Import a module from a generated tree, dropping it from sys.modules afterwards."""
    packages: List[str] = []

    def _import(root: Path, dotted: str) -> ModuleType:
        monkeypatch.syspath_prepend(str(root))
        packages.append(dotted.split(".", 1)[0])
        return importlib.import_module(dotted)

    yield _import

    for name in list(sys.modules):
        if any(name == package or name.startswith(f"{package}.") for package in packages):
            sys.modules.pop(name, None)
