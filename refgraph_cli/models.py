"""Core data models shared by ingestion, graph building and rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Tuple

SOLUTION = "Solution"
PROJECT = "Project"
ASSEMBLY = "Assembly"

SOLUTION_TO_PROJECT = "Solution-to-Project"
PROJECT_TO_PROJECT = "Project-to-Project"
ASSEMBLY_TO_ASSEMBLY = "Assembly-to-Assembly"
REFERENCE_TYPES = (SOLUTION_TO_PROJECT, PROJECT_TO_PROJECT, ASSEMBLY_TO_ASSEMBLY)

# Edge graphs: project-level holds solution and project references,
# assembly-level holds only assembly references.
PROJECT_GRAPH = "project"
ASSEMBLY_GRAPH = "assembly"

# Upper bound for max_depth: project and nested assembly walks recurse once per level.
MAX_DEPTH_LIMIT = 200

REFERENCE_KINDS: Dict[str, Tuple[str, str]] = {
    SOLUTION_TO_PROJECT: (SOLUTION, PROJECT),
    PROJECT_TO_PROJECT: (PROJECT, PROJECT),
    ASSEMBLY_TO_ASSEMBLY: (ASSEMBLY, ASSEMBLY),
}

REFERENCE_GRAPHS: Dict[str, str] = {
    SOLUTION_TO_PROJECT: PROJECT_GRAPH,
    PROJECT_TO_PROJECT: PROJECT_GRAPH,
    ASSEMBLY_TO_ASSEMBLY: ASSEMBLY_GRAPH,
}


@dataclass(frozen=True)
class Node:
    node_id: str
    name: str
    file_path: str

    kind: ClassVar[str] = ""


@dataclass(frozen=True)
class SolutionNode(Node):
    kind: ClassVar[str] = SOLUTION


@dataclass(frozen=True)
class ProjectNode(Node):
    kind: ClassVar[str] = PROJECT


@dataclass(frozen=True)
class AssemblyNode(Node):
    output_file: str = ""

    kind: ClassVar[str] = ASSEMBLY


@dataclass(frozen=True)
class Edge:
    src: str
    dst: str
    edge_type: str

    @property
    def src_kind(self) -> str:
        return REFERENCE_KINDS[self.edge_type][0]

    @property
    def graph(self) -> str:
        return REFERENCE_GRAPHS[self.edge_type]


@dataclass(frozen=True)
class RenderOptions:
    max_depth: int = 3
    include_assembly_dependencies: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 0 and {MAX_DEPTH_LIMIT}, got {self.max_depth}")
