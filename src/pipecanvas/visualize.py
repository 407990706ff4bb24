import networkx as nx
from .dag import find_cycle
from .ir import Graph


def ascii_plan(g: Graph) -> str:
    cycle = find_cycle([n.id for n in g.nodes], g.edges)
    if cycle is not None:
        return "# No plan: the graph has a cycle\n    " + " -> ".join(cycle)

    node_map = g.node_map()
    nxg = nx.DiGraph()
    nxg.add_nodes_from(node_map)
    for e in g.edges:
        # same rule as the checker: an edge leaving an unknown node is not followed
        if e.source not in node_map:
            continue
        labels = nxg.get_edge_data(e.source, e.target, {}).get('labels', [])
        nxg.add_edge(e.source, e.target, labels=labels + [f"{e.source_port}->{e.target_port}"])

    order = list(nx.topological_sort(nxg))
    lines = ["# ASCII Plan (topological order)"]
    for i, nid in enumerate(order, 1):
        node = node_map.get(nid)
        kind = node.kind.value if node is not None else "missing"
        lines.append(f"{i:02d}. {nid} [{kind}]")
        for succ in nxg.successors(nid):
            elabel = ", ".join(nxg.get_edge_data(nid, succ)['labels'])
            lines.append(f"    └─▶ {succ}  ({elabel})")
    return "\n".join(lines)
