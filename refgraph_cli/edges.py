"""Deduplicated store of directed reference edges."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional

from .models import ASSEMBLY_GRAPH, PROJECT_GRAPH, REFERENCE_TYPES, Edge


class EdgeStore:
    """Reference edges partitioned into project-level and assembly-level graphs.

    Edges are unique per ``(src, dst)`` within a reference type; the first
    insertion wins and later duplicates are dropped. Adjacency lists keep
    insertion order.
    """

    def __init__(self, edges: Iterable[Edge] = ()) -> None:
        self._edges: Dict[str, Dict[tuple, Edge]] = {ref: {} for ref in REFERENCE_TYPES}
        self._adjacency: Dict[str, Dict[str, Dict[str, None]]] = {
            PROJECT_GRAPH: {},
            ASSEMBLY_GRAPH: {},
        }
        self.add_edges(edges)

    def add_edge(self, src: str, dst: str, edge_type: str) -> bool:
        """Insert an edge; returns False when the pair already exists for *edge_type*."""
        if edge_type not in self._edges:
            raise ValueError(f"Unknown reference type: {edge_type}")
        bucket = self._edges[edge_type]
        key = (src, dst)
        if key in bucket:
            return False
        edge = Edge(src=src, dst=dst, edge_type=edge_type)
        bucket[key] = edge
        successors = self._adjacency[edge.graph].setdefault(src, {})
        successors[dst] = None
        return True

    def add_edges(self, edges: Iterable[Edge]) -> int:
        added = 0
        for edge in edges:
            if self.add_edge(edge.src, edge.dst, edge.edge_type):
                added += 1
        return added

    def adjacency(self, node_id: str, graph: str = PROJECT_GRAPH) -> List[str]:
        """Direct successors of *node_id* in *graph*; unknown nodes have none."""
        if graph not in self._adjacency:
            raise ValueError(f"Unknown graph: {graph}")
        return list(self._adjacency[graph].get(node_id, ()))

    def edges(self, edge_type: Optional[str] = None) -> List[Edge]:
        if edge_type is not None:
            return list(self._edges[edge_type].values())
        return [edge for ref in REFERENCE_TYPES for edge in self._edges[ref].values()]

    def counts(self) -> Counter:
        return Counter({ref: len(self._edges[ref]) for ref in REFERENCE_TYPES})

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._edges.values())
