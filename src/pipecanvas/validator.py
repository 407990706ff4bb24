from pathlib import Path
from typing import Tuple, List

from .dag import find_cycle
from .generator import load_graph
from .ir import Graph


def validate_graph(g: Graph) -> Tuple[bool, List[str]]:
    messages: List[str] = []
    ok = True
    node_ids = {n.id for n in g.nodes}

    # 1) Edges refer to existing nodes
    for e in g.edges:
        missing = [nid for nid in (e.source, e.target) if nid not in node_ids]
        if missing:
            ok = False
            messages.append(f"ERR: Edge {e.id} references missing node(s): {', '.join(missing)}.")
    if ok:
        messages.append("OK: All edges reference existing nodes.")

    # 2) Ports exist with matching directions
    ports_ok = True
    for e in g.edges:
        if e.source not in node_ids or e.target not in node_ids:
            continue
        for problem in g.edge_problems(e):
            ports_ok = False
            messages.append(f"ERR: Edge {e.id}: {problem}.")
    if ports_ok:
        messages.append("OK: All edge endpoints correspond to ports with matching directions.")
    ok = ok and ports_ok

    # 3) Acyclic check
    cycle = find_cycle([n.id for n in g.nodes], g.edges)
    if cycle is None:
        messages.append("OK: Graph is acyclic.")
    else:
        ok = False
        messages.append(f"ERR: Cycle detected in the graph: {' -> '.join(cycle)}.")

    return ok, messages


def validate_graph_from_file(path: Path) -> Tuple[bool, List[str]]:
    return validate_graph(load_graph(path))
