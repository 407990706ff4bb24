from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Set

from .ir import Edge


def _adjacency(node_ids: List[str], edges: Iterable[Edge]) -> Dict[str, Dict[str, None]]:
    # dict-as-ordered-set: parallel edges collapse, insertion order kept
    adj: Dict[str, Dict[str, None]] = {nid: {} for nid in node_ids}
    for e in edges:
        # edges leaving an unknown node have nowhere to start from
        if e.source in adj:
            adj[e.source][e.target] = None
    return adj


def find_cycle(node_ids: Iterable[str], edges: Iterable[Edge]) -> Optional[List[str]]:
    """Return the first directed cycle found as a node path, or None.

    Iterative depth-first search: every node is tried as a root, nodes already
    finished from an earlier root are skipped, and the search stops at the
    first back-edge. The returned path repeats its first node at the end.
    """
    node_ids = list(dict.fromkeys(node_ids))
    adj = _adjacency(node_ids, edges)
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    for root in node_ids:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        path = [root]
        stack = [iter(adj[root])]
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue
            if nxt in on_stack:
                return path[path.index(nxt):] + [nxt]
            if nxt in visited:
                continue
            visited.add(nxt)
            on_stack.add(nxt)
            path.append(nxt)
            stack.append(iter(adj.get(nxt, ())))
    return None


def is_acyclic(node_ids: Iterable[str], edges: Iterable[Edge]) -> bool:
    return find_cycle(node_ids, edges) is None
