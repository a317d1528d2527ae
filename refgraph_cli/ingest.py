"""Load extracted node and reference records into a catalog and edge store.

A snapshot is either a directory of CSV tables or one JSON document:

    solutions.csv   id, name, path
    projects.csv    id, name, path
    assemblies.csv  id, name, path, outputFile
    references.csv  fromId, fromKind, fromName, toId, toKind, toName, referenceType

The JSON form holds the same rows under ``solutions``, ``projects``,
``assemblies`` and ``references``. Column names match case-insensitively.
Malformed rows are logged and skipped; they never abort the load.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type

from .catalog import NodeCatalog, file_stem
from .edges import EdgeStore
from .errors import SnapshotError, SnapshotNotFound
from .models import REFERENCE_KINDS, AssemblyNode, Edge, Node, ProjectNode, SolutionNode

logger = logging.getLogger(__name__)

TABLES = ("solutions", "projects", "assemblies", "references")
NODE_TABLES: Dict[str, Type[Node]] = {
    "solutions": SolutionNode,
    "projects": ProjectNode,
    "assemblies": AssemblyNode,
}


@dataclass
class Snapshot:
    catalog: NodeCatalog
    edges: EdgeStore


def load_snapshot(path: Path) -> Snapshot:
    """Read a CSV directory or JSON document into a :class:`Snapshot`."""
    path = Path(path)
    if not path.exists():
        raise SnapshotNotFound(str(path))
    tables = _read_json(path) if path.is_file() else _read_csv_dir(path)
    return build_snapshot(tables)


def build_snapshot(tables: Dict[str, List[Dict[str, Any]]]) -> Snapshot:
    catalog = NodeCatalog()
    for table, node_cls in NODE_TABLES.items():
        for row in tables.get(table, []):
            node = parse_node(row, node_cls)
            if node is not None:
                catalog.add(node)

    edges = EdgeStore()
    skipped = 0
    for row in tables.get("references", []):
        edge = parse_edge(row)
        if edge is None:
            skipped += 1
            continue
        edges.add_edge(edge.src, edge.dst, edge.edge_type)

    logger.info(
        "Loaded %d nodes and %d references (%d reference rows skipped)",
        len(catalog),
        len(edges),
        skipped,
    )
    return Snapshot(catalog=catalog, edges=edges)


def parse_node(row: Dict[str, Any], node_cls: Type[Node]) -> Optional[Node]:
    fields = _normalize(row)
    node_id = fields.get("id", "")
    if not node_id:
        logger.warning("Skipping %s row without id: %r", node_cls.kind, row)
        return None
    file_path = fields.get("path", "")
    name = fields.get("name", "") or file_stem(file_path) or node_id
    if node_cls is AssemblyNode:
        output_file = fields.get("outputfile", "") or f"{name}.dll"
        return AssemblyNode(node_id=node_id, name=name, file_path=file_path, output_file=output_file)
    return node_cls(node_id=node_id, name=name, file_path=file_path)


def parse_edge(row: Dict[str, Any]) -> Optional[Edge]:
    fields = _normalize(row)
    src, dst = fields.get("fromid", ""), fields.get("toid", "")
    edge_type = fields.get("referencetype", "")
    if not src or not dst:
        logger.warning("Skipping reference row without endpoints: %r", row)
        return None
    if edge_type not in REFERENCE_KINDS:
        logger.warning("Skipping reference %s -> %s with unknown type %r", src, dst, edge_type)
        return None

    expected = REFERENCE_KINDS[edge_type]
    declared = (fields.get("fromkind") or expected[0], fields.get("tokind") or expected[1])
    if tuple(kind.casefold() for kind in declared) != tuple(kind.casefold() for kind in expected):
        logger.warning(
            "Skipping %s reference %s -> %s: kinds %s do not match %s",
            edge_type, src, dst, declared, expected,
        )
        return None
    return Edge(src=src, dst=dst, edge_type=edge_type)


def _normalize(row: Dict[str, Any]) -> Dict[str, str]:
    return {
        str(key).strip().lower(): "" if value is None else str(value).strip()
        for key, value in row.items()
        if key is not None
    }


def _read_json(path: Path) -> Dict[str, List[Dict[str, Any]]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SnapshotError(f"Snapshot {path} must contain a JSON object")
    tables = {}
    for table in TABLES:
        rows = payload.get(table) or []
        if not isinstance(rows, list):
            raise SnapshotError(f"'{table}' in {path} must be a list of records")
        tables[table] = [row for row in rows if isinstance(row, dict)]
    return tables


def _read_csv_dir(path: Path) -> Dict[str, List[Dict[str, Any]]]:
    tables = {}
    for table in TABLES:
        csv_file = path / f"{table}.csv"
        if not csv_file.exists():
            logger.debug("No %s table in %s", table, path)
            tables[table] = []
            continue
        tables[table] = list(_read_csv(csv_file))
    return tables


def _read_csv(csv_file: Path) -> Iterable[Dict[str, Any]]:
    try:
        with open(csv_file, newline="", encoding="utf-8-sig") as f:
            return list(csv.DictReader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise SnapshotError(f"Cannot read {csv_file}: {exc}") from exc
