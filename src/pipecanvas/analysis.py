from __future__ import annotations
from pydantic import BaseModel

from .dag import is_acyclic
from .ir import Graph


class AnalysisResult(BaseModel):
    """Wire shape returned for a submitted pipeline."""

    num_nodes: int
    num_edges: int
    is_dag: bool


def analyze(graph: Graph) -> AnalysisResult:
    """Count nodes and edges and classify the graph as a DAG or not.

    Edges are taken at face value, dangling ones included.
    """
    return AnalysisResult(
        num_nodes=len(graph.nodes),
        num_edges=len(graph.edges),
        is_dag=is_acyclic([n.id for n in graph.nodes], graph.edges),
    )
