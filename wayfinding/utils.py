"""Path helpers shared by the navigator and the API.

Purpose:
- Sum route distance with the same cost rules used for edge weights.
- Extract floor-change waypoints for renderers.
- Convert node paths to JSON-safe payloads.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from wayfinding.config import FLOOR_TRANSITION_COST
from wayfinding.graph import edge_distance
from wayfinding.registry import GraphNode


def path_distance(path: Sequence[GraphNode], floor_transition_cost: float = FLOOR_TRANSITION_COST) -> float:
    """Total route length recomputed from node coordinates and floors."""
    if len(path) < 2:
        return 0.0
    return float(sum(edge_distance(a, b, floor_transition_cost) for a, b in zip(path, path[1:])))


def floor_transitions(path: Sequence[GraphNode]) -> list[dict[str, Any]]:
    """Floor-change waypoints along a path.

    One entry per consecutive pair whose floors differ, de-duplicated by
    rounded position and target floor.
    """
    transitions: list[dict[str, Any]] = []
    seen: set[tuple[int, int, int]] = set()

    for index, (a, b) in enumerate(zip(path, path[1:]), start=1):
        if a.floor == b.floor:
            continue
        key = (round(a.x), round(a.y), b.floor)
        if key in seen:
            continue
        seen.add(key)
        transitions.append(
            {
                "index": index,
                "from_node_id": a.id,
                "to_node_id": b.id,
                "from_floor": int(a.floor),
                "to_floor": int(b.floor),
                "x": float(a.x),
                "y": float(a.y),
            }
        )
    return transitions


def floors_visited(path: Iterable[GraphNode]) -> list[int]:
    """Floors in route order without consecutive repeats."""
    out: list[int] = []
    for node in path:
        if not out or out[-1] != node.floor:
            out.append(int(node.floor))
    return out


def to_serializable_path(path: Iterable[GraphNode]) -> list[dict[str, Any]]:
    """Convert nodes to JSON-friendly `{id, x, y, floor}` dictionaries."""
    return [node.to_dict() for node in path]
