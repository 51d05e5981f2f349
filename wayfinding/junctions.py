"""Floor-local hallway junction mesh.

Junction layouts are defined once (shared) or per floor and instantiated on
every floor under a floor-scoped id, so `j1` on floor 2 and `j1` on floor 3
are distinct graph nodes:

    >>> scoped_id("j1", 2)
    'j1__floor__2'
    >>> parse_scoped_id("j1__floor__2")
    ('j1', 2)
"""

from __future__ import annotations

from dataclasses import dataclass

from wayfinding.dataset import DatasetPayload
from wayfinding.registry import GraphNode, NodeKind

FLOOR_NODE_DELIMITER = "__floor__"


@dataclass(frozen=True, slots=True)
class JunctionSpec:
    """Junction definition in floor-local coordinates, before scoping."""

    id: str
    x: float
    y: float


def scoped_id(base_id: str, floor: int) -> str:
    """Scope a junction base id to one floor."""
    return f"{base_id}{FLOOR_NODE_DELIMITER}{int(floor)}"


def parse_scoped_id(node_id: str) -> tuple[str, int] | None:
    """Recover `(base_id, floor)` from a scoped id, None if not scoped."""
    base_id, sep, floor_part = node_id.partition(FLOOR_NODE_DELIMITER)
    if not sep or not base_id or not floor_part:
        return None
    try:
        return base_id, int(floor_part)
    except ValueError:
        return None


class JunctionMesh:
    """Shared and floor-specific junction layouts."""

    def __init__(
        self,
        shared: list[JunctionSpec],
        per_floor: dict[int, list[JunctionSpec]] | None = None,
    ) -> None:
        self._shared: tuple[JunctionSpec, ...] = tuple(shared)
        self._per_floor: dict[int, tuple[JunctionSpec, ...]] = {
            int(floor): tuple(layout) for floor, layout in (per_floor or {}).items()
        }
        self._base_ids: set[str] = {junction.id for junction in self._shared}
        for layout in self._per_floor.values():
            self._base_ids.update(junction.id for junction in layout)

    @classmethod
    def from_dataset(cls, dataset: DatasetPayload) -> "JunctionMesh":
        shared = [JunctionSpec(id=j.id, x=float(j.x), y=float(j.y)) for j in dataset.junctions]
        per_floor = {
            int(floor): [JunctionSpec(id=j.id, x=float(j.x), y=float(j.y)) for j in structure.junctions]
            for floor, structure in dataset.structures.items()
        }
        return cls(shared=shared, per_floor=per_floor)

    def layout_for_floor(self, floor: int) -> tuple[JunctionSpec, ...]:
        """Floor-specific layout when defined, otherwise the shared one."""
        return self._per_floor.get(int(floor), self._shared)

    def junctions_for_floor(self, floor: int) -> list[GraphNode]:
        return [
            GraphNode(
                id=scoped_id(junction.id, floor),
                x=junction.x,
                y=junction.y,
                floor=int(floor),
                kind=NodeKind.JUNCTION,
            )
            for junction in self.layout_for_floor(floor)
        ]

    def is_junction_base(self, base_id: str) -> bool:
        return base_id in self._base_ids

    def resolve(self, node_id: str) -> GraphNode | None:
        """Resolve a scoped junction id against the layout of its floor."""
        parsed = parse_scoped_id(node_id)
        if parsed is None:
            return None

        base_id, floor = parsed
        for junction in self.layout_for_floor(floor):
            if junction.id == base_id:
                return GraphNode(id=node_id, x=junction.x, y=junction.y, floor=floor, kind=NodeKind.JUNCTION)
        return None
