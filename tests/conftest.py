"""Pytest configuration and fixtures for RefGraph CLI tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from refgraph_cli.catalog import NodeCatalog
from refgraph_cli.edges import EdgeStore
from refgraph_cli.ingest import Snapshot, load_snapshot
from refgraph_cli.models import AssemblyNode, ProjectNode, SolutionNode


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture(autouse=True)
def temp_config(temp_dir: Path, monkeypatch) -> Path:
    """Point the config file at a temporary location for every test."""
    base_dir = temp_dir / "home"
    monkeypatch.setattr("refgraph_cli.config.BASE_DIR", base_dir)
    monkeypatch.setattr("refgraph_cli.config.CONFIG_FILE", base_dir / "config.toml")
    return base_dir / "config.toml"


@pytest.fixture
def sample_snapshot_path() -> Path:
    """Path to the sample CSV record snapshot."""
    return Path(__file__).parent / "fixtures" / "sample_records"


@pytest.fixture
def sample_snapshot(sample_snapshot_path: Path) -> Snapshot:
    return load_snapshot(sample_snapshot_path)


@pytest.fixture
def make_graph():
    """Build a catalog and edge store from short names.

    Node ids are ``sln:<name>``, ``prj:<name>`` and ``asm:<name>``; edges are
    ``(src_id, dst_id, reference_type)`` tuples inserted in order.
    """

    def _make(solutions=(), projects=(), assemblies=(), references=()):
        catalog = NodeCatalog()
        for name in solutions:
            catalog.add(SolutionNode(f"sln:{name}", name, f"C:\\src\\{name}.sln"))
        for name in projects:
            catalog.add(ProjectNode(f"prj:{name}", name, f"C:\\src\\{name}\\{name}.csproj"))
        for name in assemblies:
            catalog.add(
                AssemblyNode(f"asm:{name}", name, f"C:\\src\\{name}\\{name}.csproj", output_file=f"{name}.dll")
            )
        edges = EdgeStore()
        for src, dst, edge_type in references:
            edges.add_edge(src, dst, edge_type)
        return catalog, edges

    return _make
