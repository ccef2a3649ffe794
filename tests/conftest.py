"""Pytest configuration and fixtures for DepGraph CLI tests."""

from pathlib import Path
from typing import Callable, Dict, List

import pytest

from depgraph_cli.config import AnalysisConfig
from depgraph_cli.graph_builder import GraphBuilder
from depgraph_cli.models import DependencyGraph, SourceFile


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Point the default config file at an empty temp location.

    Keeps a developer's own ``~/.depgraph/config.toml`` out of the tests.
    """
    monkeypatch.setattr("depgraph_cli.config_manager.CONFIG_FILE", tmp_path / "home" / "config.toml")


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample web application."""
    return Path(__file__).parent / "fixtures" / "web_app"


@pytest.fixture
def make_files() -> Callable[[Dict[str, str]], List[SourceFile]]:
    """Turn a ``{path: content}`` dict into a snapshot, preserving order."""

    def _make(mapping: Dict[str, str]) -> List[SourceFile]:
        return [SourceFile(path=path, content=content) for path, content in mapping.items()]

    return _make


@pytest.fixture
def scenario_files(make_files) -> List[SourceFile]:
    """A is the entry and imports B; C imports B but is unreachable; D is alone."""
    return make_files({
        "/src/A.ts": "import { b } from './B';\nexport const a = b + 1;\n",
        "/src/B.ts": "export const b = 1;\n",
        "/src/C.ts": "import { b } from './B';\nexport const c = b * 2;\n",
        "/src/D.ts": "export const d = 4;\n",
    })


@pytest.fixture
def scenario_graph(scenario_files) -> DependencyGraph:
    return GraphBuilder(AnalysisConfig()).build(scenario_files)


@pytest.fixture
def cyclic_graph(make_files) -> DependencyGraph:
    """a <-> b cycle, a self-import in s, and a diamond top -> (l, r) -> base."""
    files = make_files({
        "/src/a.ts": "import './b';",
        "/src/b.ts": "import './a';",
        "/src/s.ts": "import './s';",
        "/src/top.ts": "import './l';\nimport './r';",
        "/src/l.ts": "import './base';",
        "/src/r.ts": "import './base';",
        "/src/base.ts": "export const base = 0;",
    })
    return GraphBuilder(AnalysisConfig()).build(files)
