from __future__ import annotations
from typing import Dict, List, Sequence

from .ir import Port, PortPlacement, PortSide


def assign_layout(ports: Sequence[Port]) -> Dict[str, PortPlacement]:
    """Spread ports evenly along their sides.

    The i-th of n ports on a side (1-indexed, list order) sits at
    100 * i / (n + 1) percent, so no port touches a corner. A port alone on
    its side gets no offset and is centered.
    """
    by_side: Dict[PortSide, List[Port]] = {}
    for port in ports:
        by_side.setdefault(port.effective_side, []).append(port)

    layout: Dict[str, PortPlacement] = {}
    for side, group in by_side.items():
        n = len(group)
        for i, port in enumerate(group, 1):
            offset = 100 * i / (n + 1) if n > 1 else None
            layout[port.id] = PortPlacement(side=side, offset_percent=offset)
    return layout
