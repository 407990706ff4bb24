from pipecanvas.analysis import analyze
from pipecanvas.generator import generate_graph_from_task
from pipecanvas.ir import Graph
from pipecanvas.visualize import ascii_plan


def test_plan_follows_topological_order():
    plan = ascii_plan(generate_graph_from_task("prompt-chain")).splitlines()
    assert plan[0] == "# ASCII Plan (topological order)"
    steps = [line.split(". ", 1)[1].split(" ")[0] for line in plan if line[:2].isdigit()]
    assert steps.index("prompt") < steps.index("llm") < steps.index("answer")


def test_plan_reports_the_cycle():
    g = Graph.model_validate({
        "nodes": [{"id": "t1", "kind": "transform"}, {"id": "t2", "kind": "transform"}],
        "edges": [
            {"source": "t1", "source_port": "output", "target": "t2", "target_port": "input"},
            {"source": "t2", "source_port": "output", "target": "t1", "target_port": "input"},
        ],
    })
    assert ascii_plan(g) == "# No plan: the graph has a cycle\n    t1 -> t2 -> t1"


def test_plan_agrees_with_analysis_on_dangling_edges():
    # the loop runs through a node that does not exist
    g = Graph.model_validate({
        "nodes": [{"id": "a", "kind": "transform"}],
        "edges": [
            {"source": "a", "source_port": "output", "target": "ghost", "target_port": "input"},
            {"source": "ghost", "source_port": "output", "target": "a", "target_port": "input"},
        ],
    })
    assert analyze(g).is_dag
    plan = ascii_plan(g)
    assert plan.startswith("# ASCII Plan")
    assert "01. a [transform]" in plan
    assert "ghost [missing]" in plan
