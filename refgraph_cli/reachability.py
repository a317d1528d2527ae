"""Shallowest-depth analysis over an edge graph."""

from __future__ import annotations

from collections import deque
from typing import Callable, Dict, Optional

from .edges import EdgeStore
from .models import PROJECT_GRAPH


def shallowest_depths(
    edges: EdgeStore,
    root_id: str,
    graph: str = PROJECT_GRAPH,
    include: Optional[Callable[[str], bool]] = None,
) -> Dict[str, int]:
    """Breadth-first depth of every node reachable from *root_id*.

    The root sits at depth 0. A node keeps the depth at which it is first
    discovered, which is the length of a shortest path from the root; ties
    follow adjacency order. Unreachable nodes are absent. When *include* is
    given, successors it rejects are neither recorded nor walked through.
    """
    depths = {root_id: 0}
    queue = deque([root_id])

    while queue:
        current = queue.popleft()
        for nxt in edges.adjacency(current, graph):
            if nxt in depths or (include is not None and not include(nxt)):
                continue
            depths[nxt] = depths[current] + 1
            queue.append(nxt)
    return depths
