"""Report assembly: header, per-solution trees, orphans and statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .catalog import NodeCatalog
from .edges import EdgeStore
from .errors import NoEdgesAvailable, NoRootsMatched
from .models import (
    REFERENCE_TYPES,
    SOLUTION,
    SOLUTION_TO_PROJECT,
    ProjectNode,
    RenderOptions,
    SolutionNode,
)
from .renderer import CIRCULAR, DEEPER_OCCURRENCE, MAX_DEPTH_REACHED, SHOWN_ELSEWHERE, TreeRenderer

logger = logging.getLogger(__name__)

TITLE = "Build Dependency Tree"
ORPHANS_TITLE = "Orphaned Projects (not referenced by any solution)"
STATISTICS_TITLE = "Statistics"

STAT_ORPHANS = "Orphaned projects"
STAT_CIRCULAR = "Circular references"
STAT_TRUNCATED = "Truncated branches"


@dataclass
class DependencyReport:
    lines: List[str]
    trees: Dict[str, List[str]] = field(default_factory=dict)
    orphans: List[ProjectNode] = field(default_factory=list)
    statistics: Dict[str, int] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


def find_orphans(catalog: NodeCatalog, edges: EdgeStore) -> List[ProjectNode]:
    """Projects that no solution references, sorted by name."""
    referenced = {
        edge.dst for edge in edges.edges(SOLUTION_TO_PROJECT) if edge.src_kind == SOLUTION
    }
    orphans = [p for p in catalog.projects() if p.node_id not in referenced]
    return sorted(orphans, key=_name_key)


def edge_statistics(edges: EdgeStore, orphans: List[ProjectNode]) -> Dict[str, int]:
    counts = edges.counts()
    stats = {f"{ref} references": counts[ref] for ref in REFERENCE_TYPES}
    stats[STAT_ORPHANS] = len(orphans)
    return stats


def forest_statistics(trees: Dict[str, List[str]]) -> Dict[str, int]:
    """Count cycle and truncation markers across rendered trees."""
    circular = truncated = 0
    for lines in trees.values():
        for line in lines:
            if line.endswith(CIRCULAR):
                circular += 1
            elif line.endswith(MAX_DEPTH_REACHED):
                truncated += 1
    return {STAT_CIRCULAR: circular, STAT_TRUNCATED: truncated}


def select_roots(catalog: NodeCatalog, root_name: Optional[str] = None) -> List[SolutionNode]:
    roots = sorted(catalog.solutions(), key=_name_key)
    if root_name is None:
        return roots
    matched = [root for root in roots if root.name == root_name]
    if not matched:
        raise NoRootsMatched(root_name, [root.name for root in roots])
    return matched


def build_report(
    catalog: NodeCatalog,
    edges: EdgeStore,
    options: Optional[RenderOptions] = None,
    root_name: Optional[str] = None,
    revision: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> DependencyReport:
    """Render every matching solution and wrap the trees in a report.

    Raises:
        NoEdgesAvailable: the snapshot has no references at all.
        NoRootsMatched: *root_name* names no solution.
    """
    if len(edges) == 0:
        raise NoEdgesAvailable()

    options = options or RenderOptions()
    roots = select_roots(catalog, root_name)
    renderer = TreeRenderer(catalog, edges, options)

    trees: Dict[str, List[str]] = {}
    for root in roots:
        trees[root.node_id] = renderer.render(root.node_id)
    logger.info("Rendered %d solution trees", len(trees))

    orphans = find_orphans(catalog, edges)
    statistics = edge_statistics(edges, orphans)
    statistics.update(forest_statistics(trees))

    lines = _header(catalog, edges, options, revision, generated_at or datetime.now())
    for root in roots:
        lines.extend(trees[root.node_id])
        lines.append("")
    lines.extend(_orphan_section(orphans))
    lines.append("")
    lines.extend(_statistics_section(statistics))

    return DependencyReport(lines=lines, trees=trees, orphans=orphans, statistics=statistics)


def _header(
    catalog: NodeCatalog,
    edges: EdgeStore,
    options: RenderOptions,
    revision: Optional[str],
    generated_at: datetime,
) -> List[str]:
    lines = [TITLE, "=" * len(TITLE), f"Generated: {generated_at.isoformat(timespec='seconds')}"]
    if revision:
        lines.append(f"Revision: {revision}")
    lines.append(
        f"Solutions: {len(catalog.solutions())} | Projects: {len(catalog.projects())} | "
        f"Assemblies: {len(catalog.assemblies())} | References: {len(edges)}"
    )
    assemblies = "on" if options.include_assembly_dependencies else "off"
    lines.append(f"Max depth: {options.max_depth} | Assembly dependencies: {assemblies}")
    lines.append(
        f"Legend: {SHOWN_ELSEWHERE} shown elsewhere, {DEEPER_OCCURRENCE} expanded at a shallower depth, "
        f"{CIRCULAR} circular reference, {MAX_DEPTH_REACHED} truncated"
    )
    lines.append("")
    return lines


def _orphan_section(orphans: List[ProjectNode]) -> List[str]:
    lines = [ORPHANS_TITLE, "-" * len(ORPHANS_TITLE)]
    if not orphans:
        lines.append("  (none)")
    for project in orphans:
        lines.append(f"  {project.name} ({project.file_path})")
    return lines


def _statistics_section(statistics: Dict[str, int]) -> List[str]:
    lines = [STATISTICS_TITLE, "-" * len(STATISTICS_TITLE)]
    for label, value in statistics.items():
        lines.append(f"{label}: {value}")
    return lines


def _name_key(node) -> tuple:
    return (node.name.casefold(), node.name)
