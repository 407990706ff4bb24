import random

import networkx as nx
import pytest
from pipecanvas.dag import find_cycle, is_acyclic
from pipecanvas.ir import Edge


def E(s, t):
    return Edge(source=s, source_port="out", target=t, target_port="in")


def test_no_edges_is_acyclic():
    assert is_acyclic(["a", "b", "c"], [])
    assert is_acyclic([], [])


def test_self_loop_is_a_cycle():
    assert not is_acyclic(["a", "b"], [E("a", "b"), E("b", "b")])
    assert find_cycle(["a", "b"], [E("b", "b")]) == ["b", "b"]


def test_back_edge_creates_a_cycle():
    edges = [E("a", "b"), E("b", "c"), E("c", "d")]
    assert is_acyclic("abcd", edges)
    assert not is_acyclic("abcd", edges + [E("d", "b")])
    assert find_cycle("abcd", edges + [E("d", "b")]) == ["b", "c", "d", "b"]


def test_diamond_is_acyclic():
    # d is reached twice but is never on the stack the second time
    assert is_acyclic("abcd", [E("a", "b"), E("a", "c"), E("b", "d"), E("c", "d")])


def test_cycle_in_a_later_component():
    edges = [E("a", "b"), E("x", "y"), E("y", "x")]
    assert not is_acyclic(["a", "b", "x", "y"], edges)


def test_parallel_edges_do_not_change_the_result():
    assert is_acyclic("ab", [E("a", "b"), E("a", "b")])


def test_dangling_edges_are_taken_at_face_value():
    # unknown source: skipped; unknown target: a leaf
    assert is_acyclic(["a"], [E("ghost", "a"), E("a", "ghost")])


def test_deep_chain_does_not_recurse():
    n = 20000
    ids = [str(i) for i in range(n)]
    edges = [E(ids[i], ids[i + 1]) for i in range(n - 1)]
    assert is_acyclic(ids, edges)
    assert not is_acyclic(ids, edges + [E(ids[-1], ids[0])])


@pytest.mark.parametrize("seed", range(40))
def test_agrees_with_networkx(seed):
    rng = random.Random(seed)
    ids = [f"n{i}" for i in range(rng.randint(1, 9))]
    edges = [E(rng.choice(ids), rng.choice(ids)) for _ in range(rng.randint(0, 12))]
    g = nx.DiGraph()
    g.add_nodes_from(ids)
    g.add_edges_from((e.source, e.target) for e in edges)
    assert is_acyclic(ids, edges) == nx.is_directed_acyclic_graph(g)
    cycle = find_cycle(ids, edges)
    if cycle is not None:
        assert cycle[0] == cycle[-1]
        assert all(g.has_edge(u, v) for u, v in zip(cycle, cycle[1:]))
