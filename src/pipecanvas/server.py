"""FastAPI application answering pipeline analysis requests."""

import logging
from typing import Dict, List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import config
from .analysis import AnalysisResult, analyze
from .client import PARSE_PATH
from .ir import Graph, Node, Port, PortPlacement
from .layout import assign_layout

logger = logging.getLogger(__name__)


class ResolveResponse(BaseModel):
    node_id: str
    ports: List[Port]
    layout: Dict[str, PortPlacement]


app = FastAPI(
    title="pipecanvas",
    description="Structural analysis for pipeline graphs",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post(PARSE_PATH)
def parse_pipeline(graph: Graph) -> AnalysisResult:
    """Count nodes and edges and report whether the pipeline is a DAG.

    The body is the editor's snapshot, ``{"nodes": [...], "edges": [...]}``.
    """
    result = analyze(graph)
    logger.info("parsed pipeline: %s", result.model_dump())
    return result


@app.post("/nodes/resolve")
def resolve_node(node: Node) -> ResolveResponse:
    """Ports and layout for a node's current content."""
    ports = node.ports
    return ResolveResponse(node_id=node.id, ports=ports, layout=assign_layout(ports))
