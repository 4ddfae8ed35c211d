from __future__ import annotations

from pathlib import Path

import networkx as nx
from pyvis.network import Network


def export_pyvis(g: nx.DiGraph, out: Path, roots: set[str] | None = None, height: str = "800px") -> Path:
    """Write the resolution graph as an interactive HTML page; roots are highlighted."""
    net = Network(height=height, width="100%", directed=True)
    for node in g.nodes:
        node_id = str(node)
        color = "#d62728" if roots and node_id in roots else "#1f77b4"
        net.add_node(node_id, label=node_id.split(":")[1] if node_id.count(":") >= 2 else node_id,
                     title=node_id, color=color)
    for u, v, data in g.edges(data=True):
        net.add_edge(str(u), str(v), title=(data or {}).get("scope") or "compile")
    out.parent.mkdir(parents=True, exist_ok=True)
    net.write_html(str(out))
    return out
