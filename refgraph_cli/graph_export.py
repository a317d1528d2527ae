"""Graph export helpers for DOT and simple standalone HTML outputs."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Dict, List

from .catalog import NodeCatalog
from .edges import EdgeStore
from .models import REFERENCE_TYPES, Edge

NODE_SHAPES = {"Solution": "folder", "Project": "box", "Assembly": "component"}


def export_dot(catalog: NodeCatalog, edges: EdgeStore, output_file: Path, focus: str = "") -> None:
    selected = _focused_subgraph(catalog, edges.edges(), focus)

    lines = ["digraph References {"]
    lines.append("  rankdir=LR;")

    for node_id in selected["nodes"]:
        node = catalog.get(node_id)
        label = f"{node.kind}\\n{_esc(node.name)}"
        lines.append(f'  "{_esc(node_id)}" [label="{label}", shape={NODE_SHAPES[node.kind]}];')

    for edge in selected["edges"]:
        lines.append(f'  "{_esc(edge.src)}" -> "{_esc(edge.dst)}" [label="{_esc(edge.edge_type)}"];')

    lines.append("}")
    output_file.write_text("\n".join(lines) + "\n", encoding="utf-8")


def export_html(catalog: NodeCatalog, edges: EdgeStore, output_file: Path, focus: str = "") -> None:
    """Write a standalone page with one reference table per reference type."""
    selected = _focused_subgraph(catalog, edges.edges(), focus)

    sections = [_node_table(catalog, selected["nodes"])]
    for edge_type in REFERENCE_TYPES:
        rows = [e for e in selected["edges"] if e.edge_type == edge_type]
        if rows:
            sections.append(_reference_table(catalog, edge_type, rows))

    title = f"Build References: {focus}" if focus else "Build References"
    doc = HTML_PAGE.format(title=html.escape(title), body="\n".join(sections))
    output_file.write_text(doc, encoding="utf-8")


HTML_PAGE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{title}</title>
  <style>
    body {{ font-family: ui-monospace, SFMono-Regular, Menlo, monospace; margin: 20px; }}
    table {{ border-collapse: collapse; margin-bottom: 24px; }}
    th, td {{ border: 1px solid #ddd; padding: 4px 10px; text-align: left; }}
    th {{ background: #f4f4f4; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
{body}
</body>
</html>
"""


def _node_table(catalog: NodeCatalog, node_ids: List[str]) -> str:
    rows = []
    for node_id in node_ids:
        node = catalog.get(node_id)
        rows.append(
            f"    <tr><td>{html.escape(node.kind)}</td><td>{html.escape(node.name)}</td>"
            f"<td>{html.escape(node.file_path)}</td></tr>"
        )
    return (
        f"  <h2>Nodes ({len(node_ids)})</h2>\n  <table>\n"
        "    <tr><th>Kind</th><th>Name</th><th>Path</th></tr>\n" + "\n".join(rows) + "\n  </table>"
    )


def _reference_table(catalog: NodeCatalog, edge_type: str, rows: List[Edge]) -> str:
    body = "\n".join(
        f"    <tr><td>{html.escape(catalog.name_of(e.src))}</td><td>{html.escape(catalog.name_of(e.dst))}</td></tr>"
        for e in rows
    )
    return (
        f"  <h2>{html.escape(edge_type)} ({len(rows)})</h2>\n  <table>\n"
        "    <tr><th>From</th><th>To</th></tr>\n" + body + "\n  </table>"
    )


def _focused_subgraph(catalog: NodeCatalog, edges: List[Edge], focus: str) -> Dict[str, List]:
    """Nodes and edges to export; edges with unresolved endpoints are dropped."""
    resolved = [e for e in edges if e.src in catalog and e.dst in catalog]
    if not focus:
        return {"nodes": [n.node_id for n in catalog], "edges": resolved}

    focus_ids = {node.node_id for node in catalog if focus in node.node_id or focus in node.name}
    if not focus_ids:
        return {"nodes": [n.node_id for n in catalog], "edges": resolved}

    edge_subset = [e for e in resolved if e.src in focus_ids or e.dst in focus_ids]
    node_subset = set(focus_ids)
    for e in edge_subset:
        node_subset.add(e.src)
        node_subset.add(e.dst)
    return {"nodes": sorted(node_subset), "edges": edge_subset}


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
