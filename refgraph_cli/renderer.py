"""ASCII dependency tree rendering.

Each root gets a depth-first walk in which every node is expanded once, at
the shallowest depth it is reachable from the root. All other occurrences
are printed with a marker instead of their sub-tree:

    ``[*CIRCULAR*]``        the node is already on the current path
    ``*``                   the node was expanded elsewhere in this tree
    ``...``                 a deeper occurrence; the shallow copy is expanded elsewhere
    ``[MAX DEPTH REACHED]`` the node has children but the depth limit stops here

Children are ordered by display name so the output is reproducible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set

from .catalog import NodeCatalog, map_projects_to_assemblies
from .edges import EdgeStore
from .models import ASSEMBLY_GRAPH, PROJECT_GRAPH, Node, ProjectNode, RenderOptions
from .reachability import shallowest_depths

logger = logging.getLogger(__name__)

CIRCULAR = "[*CIRCULAR*]"
SHOWN_ELSEWHERE = "*"
DEEPER_OCCURRENCE = "..."
MAX_DEPTH_REACHED = "[MAX DEPTH REACHED]"
ASSEMBLY_MARKER = "[assembly]"

BRANCH = "|-- "
LAST_BRANCH = "+-- "
INDENT = "|   "
LAST_INDENT = "    "


@dataclass
class TraversalContext:
    """Mutable state of one root's walk; never shared between roots."""

    graph: str
    depths: Dict[str, int]
    shown: Set[str] = field(default_factory=set)
    lines: List[str] = field(default_factory=list)


class TreeRenderer:
    """Render dependency trees from a node catalog and an edge store."""

    def __init__(
        self,
        catalog: NodeCatalog,
        edges: EdgeStore,
        options: Optional[RenderOptions] = None,
        assembly_map: Optional[Dict[str, str]] = None,
    ) -> None:
        self.catalog = catalog
        self.edges = edges
        self.options = options or RenderOptions()
        if assembly_map is None and self.options.include_assembly_dependencies:
            assembly_map = map_projects_to_assemblies(catalog)
        self.assembly_map = assembly_map or {}

    def render(self, root_id: str, graph: str = PROJECT_GRAPH) -> List[str]:
        """Return the tree lines for *root_id* over *graph*."""
        root = self.catalog.get(root_id)
        if root is None:
            logger.warning("Root %s is not in the catalog; skipped", root_id)
            return []
        ctx = self._new_context(root_id, graph)
        self._expand(root, 0, "", "", frozenset(), ctx)
        return ctx.lines

    def _new_context(self, root_id: str, graph: str) -> TraversalContext:
        # depths only follow nodes present in the catalog
        depths = shallowest_depths(self.edges, root_id, graph, include=self.catalog.__contains__)
        return TraversalContext(graph=graph, depths=depths)

    def _children(self, node_id: str, graph: str) -> List[Node]:
        children = []
        for child_id in self.edges.adjacency(node_id, graph):
            child = self.catalog.get(child_id)
            if child is None:
                logger.debug("Unresolved reference %s -> %s skipped", node_id, child_id)
                continue
            children.append(child)
        # sorted() is stable, so equal names keep adjacency order
        return sorted(children, key=lambda n: (n.name.casefold(), n.name))

    def _expand(
        self,
        node: Node,
        depth: int,
        line_prefix: str,
        child_prefix: str,
        path: FrozenSet[str],
        ctx: TraversalContext,
        label: Optional[str] = None,
    ) -> None:
        ctx.shown.add(node.node_id)
        children = self._children(node.node_id, ctx.graph)
        truncated = bool(children) and depth >= self.options.max_depth
        ctx.lines.append(_line(line_prefix, label or node.name, MAX_DEPTH_REACHED if truncated else ""))

        if ctx.graph == PROJECT_GRAPH and isinstance(node, ProjectNode):
            self._nest_assembly(node, child_prefix, ctx.lines)
        if truncated:
            return

        path = path | {node.node_id}
        last_index = len(children) - 1
        for index, child in enumerate(children):
            is_last = index == last_index
            branch = child_prefix + (LAST_BRANCH if is_last else BRANCH)
            if child.node_id in path:
                ctx.lines.append(_line(branch, child.name, CIRCULAR))
            elif child.node_id in ctx.shown:
                ctx.lines.append(_line(branch, child.name, SHOWN_ELSEWHERE))
            elif ctx.depths.get(child.node_id) == depth + 1:
                indent = child_prefix + (LAST_INDENT if is_last else INDENT)
                self._expand(child, depth + 1, branch, indent, path, ctx)
            else:
                ctx.lines.append(_line(branch, child.name, DEEPER_OCCURRENCE))

    def _nest_assembly(self, project: ProjectNode, prefix: str, lines: List[str]) -> None:
        if not self.options.include_assembly_dependencies:
            return
        assembly_id = self.assembly_map.get(project.node_id)
        if assembly_id is None:
            return
        assembly = self.catalog.get(assembly_id)
        if assembly is None or not self.edges.adjacency(assembly_id, ASSEMBLY_GRAPH):
            return

        sub = self._new_context(assembly_id, ASSEMBLY_GRAPH)
        label = getattr(assembly, "output_file", "") or assembly.name
        self._expand(assembly, 0, f"{prefix}{ASSEMBLY_MARKER} ", prefix + LAST_INDENT, frozenset(), sub, label=label)
        lines.extend(sub.lines)


def _line(prefix: str, name: str, annotation: str = "") -> str:
    return f"{prefix}{name} {annotation}" if annotation else f"{prefix}{name}"
