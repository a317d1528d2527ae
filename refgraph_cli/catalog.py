"""In-memory index of solution, project and assembly nodes."""

from __future__ import annotations

import logging
from pathlib import PureWindowsPath
from typing import Dict, Iterable, Iterator, List, Optional

from .models import AssemblyNode, Node, ProjectNode, SolutionNode

logger = logging.getLogger(__name__)


class NodeCatalog:
    """Nodes keyed by stable identifier, in insertion order."""

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self._nodes: Dict[str, Node] = {}
        for node in nodes:
            self.add(node)

    def add(self, node: Node) -> bool:
        """Add *node*; a second node with a known id is the same entity and is ignored."""
        if node.node_id in self._nodes:
            logger.debug("Duplicate node id %s (%s) ignored", node.node_id, node.name)
            return False
        self._nodes[node.node_id] = node
        return True

    def get(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def name_of(self, node_id: str) -> Optional[str]:
        node = self._nodes.get(node_id)
        return node.name if node else None

    def kind_of(self, node_id: str) -> Optional[str]:
        node = self._nodes.get(node_id)
        return node.kind if node else None

    def path_of(self, node_id: str) -> Optional[str]:
        node = self._nodes.get(node_id)
        return node.file_path if node else None

    def solutions(self) -> List[SolutionNode]:
        return [n for n in self._nodes.values() if isinstance(n, SolutionNode)]

    def projects(self) -> List[ProjectNode]:
        return [n for n in self._nodes.values() if isinstance(n, ProjectNode)]

    def assemblies(self) -> List[AssemblyNode]:
        return [n for n in self._nodes.values() if isinstance(n, AssemblyNode)]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)


def file_stem(path: str) -> str:
    """Base name without extension; accepts Windows and POSIX separators."""
    return PureWindowsPath(path.replace("/", "\\")).stem if path else ""


def map_projects_to_assemblies(catalog: NodeCatalog) -> Dict[str, str]:
    """Associate each project with the assembly it is presumed to produce.

    A project matches an assembly whose display name equals the project's
    display name or its project file base name. The first matching assembly
    in catalog order wins.
    """
    by_name: Dict[str, str] = {}
    for assembly in catalog.assemblies():
        by_name.setdefault(assembly.name, assembly.node_id)

    mapping: Dict[str, str] = {}
    for project in catalog.projects():
        for candidate in (project.name, file_stem(project.file_path)):
            if candidate and candidate in by_name:
                mapping[project.node_id] = by_name[candidate]
                break
    logger.debug("Mapped %d of %d projects to assemblies", len(mapping), len(catalog.projects()))
    return mapping
