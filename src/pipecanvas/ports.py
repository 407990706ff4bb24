from __future__ import annotations
import re
from typing import Any, Dict, List, Mapping, Tuple

from .ir import NodeKind, Port, PortDirection, PortSide

# {{ name }} with optional whitespace inside the braces
VARIABLE_RE = re.compile(r"\{\{\s*([a-zA-Z_$][a-zA-Z0-9_$]*)\s*\}\}")

TEMPLATE_OUTPUT_PORT = "output"

_S = PortDirection.source
_T = PortDirection.target

_FIXED_PORTS: Dict[NodeKind, List[Port]] = {
    NodeKind.input: [Port(id="value", direction=_S, side=PortSide.right)],
    NodeKind.output: [Port(id="value", direction=_T, side=PortSide.left)],
    NodeKind.model_call: [
        Port(id="system", direction=_T, side=PortSide.left, label="System"),
        Port(id="prompt", direction=_T, side=PortSide.left, label="Prompt"),
        Port(id="response", direction=_S, side=PortSide.right, label="Response"),
    ],
    NodeKind.database: [
        Port(id="query", direction=_T, side=PortSide.left),
        Port(id="result", direction=_S, side=PortSide.right),
    ],
    NodeKind.transform: [
        Port(id="input", direction=_T, side=PortSide.left),
        Port(id="output", direction=_S, side=PortSide.right),
    ],
    NodeKind.filter: [
        Port(id="input", direction=_T, side=PortSide.left),
        Port(id="true", direction=_S, side=PortSide.right),
        Port(id="false", direction=_S, side=PortSide.right),
    ],
    NodeKind.http_call: [
        Port(id="params", direction=_T, side=PortSide.left),
        Port(id="response", direction=_S, side=PortSide.right),
    ],
    NodeKind.note: [],
}


def extract_variables(text: str) -> List[str]:
    """Distinct ``{{ var }}`` names in order of first appearance."""
    seen: Dict[str, None] = {}
    for match in VARIABLE_RE.finditer(text):
        seen.setdefault(match.group(1), None)
    return list(seen)


def variable_port_id(node_id: str, name: str) -> str:
    return f"{node_id}-{name}"


def template_text(content: Any) -> str:
    """The template string held by ``content``: the bare string, or its ``text`` key."""
    if isinstance(content, str):
        return content
    if isinstance(content, Mapping):
        text = content.get("text", "")
        return text if isinstance(text, str) else ""
    return ""


def _template_ports(node_id: str, content: Any) -> List[Port]:
    ports = [
        Port(id=variable_port_id(node_id, name), direction=_T, side=PortSide.left, label=name)
        for name in extract_variables(template_text(content))
    ]
    ports.append(Port(id=TEMPLATE_OUTPUT_PORT, direction=_S, side=PortSide.right))
    return ports


def resolve_ports(node_id: str, kind: NodeKind, content: Any) -> List[Port]:
    """Ports exposed by a node of ``kind`` holding ``content``.

    Never raises on odd content: unterminated or invalid ``{{`` delimiters are
    simply not variables, and content of an unexpected type reads as empty.
    Fresh Port objects are returned on every call.
    """
    kind = NodeKind(kind)
    if kind is NodeKind.template_text:
        return _template_ports(node_id, content)
    return [p.model_copy() for p in _FIXED_PORTS[kind]]


def _field_name(node_id: str, prefixes: Tuple[str, ...], stem: str) -> str:
    for prefix in prefixes:
        if node_id.startswith(prefix):
            return stem + node_id[len(prefix):]
    return node_id


def default_content(kind: NodeKind, node_id: str) -> Dict[str, Any]:
    """Initial content the editor gives a freshly dropped node."""
    kind = NodeKind(kind)
    if kind is NodeKind.input:
        return {"inputName": _field_name(node_id, ("customInput-", "input-"), "input_"), "inputType": "Text"}
    if kind is NodeKind.output:
        return {"outputName": _field_name(node_id, ("customOutput-", "output-"), "output_"), "outputType": "Text"}
    if kind is NodeKind.template_text:
        return {"text": "{{input}}"}
    if kind is NodeKind.model_call:
        return {"prompt": "Tell me a joke"}
    if kind is NodeKind.http_call:
        return {"url": "", "method": "GET"}
    return {}
