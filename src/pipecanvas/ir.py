from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from .errors import DuplicateNode, InvalidEdge, UnknownEdge, UnknownNode

logger = logging.getLogger(__name__)


class PortDirection(str, Enum):
    source = "source"  # output
    target = "target"  # input


class PortSide(str, Enum):
    left = "left"
    right = "right"
    top = "top"
    bottom = "bottom"


class NodeKind(str, Enum):
    input = "input"
    output = "output"
    model_call = "model-call"
    template_text = "template-text"
    database = "database"
    transform = "transform"
    filter = "filter"
    http_call = "http-call"
    note = "note"


# node type names used by the canvas editor
KIND_ALIASES = {
    "customInput": NodeKind.input,
    "customOutput": NodeKind.output,
    "llm": NodeKind.model_call,
    "text": NodeKind.template_text,
    "api": NodeKind.http_call,
}


class Port(BaseModel):
    id: str
    direction: PortDirection
    label: Optional[str] = None
    side: Optional[PortSide] = None

    @property
    def effective_side(self) -> PortSide:
        if self.side is not None:
            return self.side
        return PortSide.left if self.direction is PortDirection.target else PortSide.right


class PortPlacement(BaseModel):
    side: PortSide
    offset_percent: Optional[float] = None  # None: centered

    @property
    def axis(self) -> str:
        """CSS property the offset applies to."""
        return "top" if self.side in (PortSide.left, PortSide.right) else "left"


def _as_content(v: Any) -> Dict[str, Any]:
    """Content dict for ``v``; a bare string is template text."""
    if isinstance(v, str):
        return {"text": v}
    if isinstance(v, Mapping):
        return dict(v)
    return {}


class Node(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: NodeKind = Field(validation_alias=AliasChoices("kind", "type"))
    content: Dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("content", "data"))

    @field_validator("kind", mode="before")
    @classmethod
    def _editor_kind(cls, v: Any) -> Any:
        return KIND_ALIASES.get(v, v) if isinstance(v, str) else v

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, v: Any) -> Any:
        return _as_content(v) if v is None or isinstance(v, str) else v

    @computed_field  # type: ignore[misc]
    @property
    def ports(self) -> List[Port]:
        # always derived from content; any "ports" key in a snapshot is ignored
        from .ports import resolve_ports
        return resolve_ports(self.id, self.kind, self.content)

    def port(self, port_id: str) -> Optional[Port]:
        return next((p for p in self.ports if p.id == port_id), None)


def default_edge_id(source: str, source_port: str, target: str, target_port: str) -> str:
    return f"e{source}.{source_port}-{target}.{target_port}"


class Edge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    source: str = Field(validation_alias=AliasChoices("source", "sourceNodeId"))
    source_port: str = Field(validation_alias=AliasChoices("source_port", "sourcePortId", "sourceHandle"))
    target: str = Field(validation_alias=AliasChoices("target", "targetNodeId"))
    target_port: str = Field(validation_alias=AliasChoices("target_port", "targetPortId", "targetHandle"))

    @model_validator(mode="after")
    def _fill_id(self) -> "Edge":
        if not self.id:
            self.id = default_edge_id(self.source, self.source_port, self.target, self.target_port)
        return self

    @property
    def endpoints(self) -> Tuple[str, str, str, str]:
        return (self.source, self.source_port, self.target, self.target_port)

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


class NodeUpdate(BaseModel):
    """Result of a content change: the node's new ports, their layout and
    any edges that had to go because their port disappeared."""

    node_id: str
    ports: List[Port]
    layout: Dict[str, PortPlacement]
    dropped_edges: List[Edge] = Field(default_factory=list)


def _free_edge_id(base: str, taken: Set[str]) -> str:
    n = 2
    while f"{base}~{n}" in taken:
        n += 1
    return f"{base}~{n}"


def _duplicates(ids: List[str]) -> List[str]:
    seen, dups = set(), []
    for i in ids:
        if i in seen and i not in dups:
            dups.append(i)
        seen.add(i)
    return dups


class Graph(BaseModel):
    """Pipeline graph snapshot plus the mutations that keep it consistent.

    A graph loaded from a snapshot is taken as-is, dangling edges included;
    the mutation methods below never produce one.
    """

    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _unique_ids(self) -> "Graph":
        # generated ids can collide for different endpoints when ids contain "." or "-"
        taken: Dict[str, Edge] = {}
        for e in self.edges:
            prior = taken.get(e.id)
            if prior is not None and e.id == default_edge_id(*e.endpoints) and prior.endpoints != e.endpoints:
                e.id = _free_edge_id(e.id, set(taken))
            taken.setdefault(e.id, e)
        dup_nodes = _duplicates([n.id for n in self.nodes])
        if dup_nodes:
            raise ValueError(f"duplicate node id(s): {', '.join(dup_nodes)}")
        dup_edges = _duplicates([e.id for e in self.edges])
        if dup_edges:
            raise ValueError(f"duplicate edge id(s): {', '.join(dup_edges)}")
        return self

    def node_map(self) -> Dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def get_node(self, node_id: str) -> Node:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise UnknownNode(f"no node with id '{node_id}'")

    def edges_of(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.touches(node_id)]

    def edge_problems(self, edge: Edge) -> List[str]:
        """Reasons ``edge`` can't live in this graph; empty when it can."""
        problems: List[str] = []
        nodes = self.node_map()
        ends: Tuple[Tuple[str, str, str, PortDirection], ...] = (
            ("source", edge.source, edge.source_port, PortDirection.source),
            ("target", edge.target, edge.target_port, PortDirection.target),
        )
        for end, node_id, port_id, direction in ends:
            node = nodes.get(node_id)
            if node is None:
                problems.append(f"{end} node '{node_id}' does not exist")
                continue
            port = node.port(port_id)
            if port is None:
                problems.append(f"{end} port '{node_id}.{port_id}' does not exist")
            elif port.direction is not direction:
                problems.append(
                    f"{end} port '{node_id}.{port_id}' is a {port.direction.value} port, expected {direction.value}"
                )
        return problems

    # -- mutations -----------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        if any(n.id == node.id for n in self.nodes):
            raise DuplicateNode(f"node '{node.id}' already exists")
        self.nodes.append(node)
        logger.debug("added node %s (%s)", node.id, node.kind.value)
        return node

    def create_node(self, kind: NodeKind, node_id: Optional[str] = None,
                    content: Optional[Dict[str, Any]] = None) -> Node:
        """Add a node with editor defaults, picking ``<kind>-<n>`` as id if none is given."""
        from .ports import default_content
        kind = NodeKind(kind)
        if node_id is None:
            n = len(self.nodes) + 1
            taken = {x.id for x in self.nodes}
            while f"{kind.value}-{n}" in taken:
                n += 1
            node_id = f"{kind.value}-{n}"
        if content is None:
            content = default_content(kind, node_id)
        return self.add_node(Node(id=node_id, kind=kind, content=content))

    def remove_node(self, node_id: str) -> List[Edge]:
        """Remove a node and every edge touching it; return the removed edges."""
        node = self.get_node(node_id)
        removed = self.edges_of(node_id)
        self.edges = [e for e in self.edges if not e.touches(node_id)]
        self.nodes = [n for n in self.nodes if n is not node]
        logger.debug("removed node %s and %d edge(s)", node_id, len(removed))
        return removed

    def update_node_content(self, node_id: str, content: Any) -> NodeUpdate:
        """Replace a node's content and re-derive its ports and layout.

        A bare string is stored as ``{"text": ...}``. Edges attached to ports
        that no longer exist are removed.
        """
        from .layout import assign_layout
        from .ports import resolve_ports

        node = self.get_node(node_id)
        content = _as_content(content)
        ports = resolve_ports(node.id, node.kind, content)
        alive = {(p.id, p.direction) for p in ports}

        def survives(e: Edge) -> bool:
            if e.source == node_id and (e.source_port, PortDirection.source) not in alive:
                return False
            if e.target == node_id and (e.target_port, PortDirection.target) not in alive:
                return False
            return True

        kept = [e for e in self.edges if survives(e)]
        dropped = [e for e in self.edges if not survives(e)]

        node.content = content
        self.edges = kept
        if dropped:
            logger.warning("content change on %s dropped edge(s): %s",
                           node_id, ", ".join(e.id for e in dropped))
        return NodeUpdate(node_id=node_id, ports=ports, layout=assign_layout(ports), dropped_edges=dropped)

    def add_edge(self, edge: Edge) -> Edge:
        if any(e.id == edge.id for e in self.edges):
            raise InvalidEdge(f"edge '{edge.id}' already exists")
        problems = self.edge_problems(edge)
        if problems:
            raise InvalidEdge(f"edge '{edge.id}': " + "; ".join(problems))
        self.edges.append(edge)
        logger.debug("added edge %s", edge.id)
        return edge

    def connect(self, source: str, source_port: str, target: str, target_port: str) -> Edge:
        edge = Edge(source=source, source_port=source_port, target=target, target_port=target_port)
        clash = next((e for e in self.edges if e.id == edge.id), None)
        if clash is not None and clash.endpoints != edge.endpoints:
            edge.id = _free_edge_id(edge.id, {e.id for e in self.edges})
        return self.add_edge(edge)

    def remove_edge(self, edge_id: str) -> Edge:
        for i, e in enumerate(self.edges):
            if e.id == edge_id:
                del self.edges[i]
                logger.debug("removed edge %s", edge_id)
                return e
        raise UnknownEdge(f"no edge with id '{edge_id}'")
