"""Location registry: typed rooms, custom points and floors of one building.

Room ids carry a 3-4 digit room code whose hundreds encode the floor
(`"204"` -> floor 2, `"stair-301"` -> floor 3). That derivation is only used
while loading raw dataset rows without an explicit floor; every node produced
here carries its floor and kind as explicit fields.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from wayfinding.dataset import DatasetPayload

logger = logging.getLogger(__name__)

STAIR_ID_PREFIX = "stair-"
ROOM_CODE_PATTERN = re.compile(r"\d{3,4}")
STAIR_FLOOR_MARKER = re.compile(r"[-_]\d{1,2}$")


class NodeKind(str, Enum):
    """Role of a graph node."""

    ROOM = "room"
    JUNCTION = "junction"
    POINT = "point"


@dataclass(frozen=True, slots=True)
class GraphNode:
    """Routable point in 2D floor space."""

    id: str
    x: float
    y: float
    floor: int
    kind: NodeKind
    name: str | None = None
    stair: bool = False

    def to_dict(self) -> dict[str, float | int | str]:
        """Serialize to the `{id, x, y, floor}` renderer contract."""
        return {"id": self.id, "x": float(self.x), "y": float(self.y), "floor": int(self.floor)}


@dataclass(frozen=True, slots=True)
class Room:
    """Named destination on one floor."""

    id: str
    name: str
    x: float
    y: float
    floor: int
    show: bool = True
    stair: bool = False

    def to_node(self) -> GraphNode:
        return GraphNode(
            id=self.id,
            x=self.x,
            y=self.y,
            floor=self.floor,
            kind=NodeKind.ROOM,
            name=self.name,
            stair=self.stair,
        )


@dataclass(frozen=True, slots=True)
class PointOfInterest:
    """Custom point placement, either annotating a room or standing alone."""

    id: str
    title: str
    x: float
    y: float
    floor: int
    src: str | None = None
    icon_size: float | None = None

    def to_node(self) -> GraphNode:
        return GraphNode(
            id=self.id,
            x=self.x,
            y=self.y,
            floor=self.floor,
            kind=NodeKind.POINT,
            name=self.title,
        )


@dataclass(frozen=True, slots=True)
class Floor:
    """Selectable floor metadata."""

    id: int
    name: str
    image_src: str | None = None


def room_code(room_id: str) -> int | None:
    """Extract the numeric room code (first 3-4 digit run, >= 100)."""
    match = ROOM_CODE_PATTERN.search(room_id)
    if match is None:
        return None
    value = int(match.group(0))
    return value if value >= 100 else None


def floor_from_room_code(code: int) -> int | None:
    """Map a room code to its floor (`code // 100`), None for non-positive floors."""
    floor = int(code) // 100
    return floor if floor > 0 else None


def floor_from_room_id(room_id: str) -> int | None:
    code = room_code(room_id)
    if code is None:
        return None
    return floor_from_room_code(code)


def has_stair_prefix(room_id: str) -> bool:
    return room_id.startswith(STAIR_ID_PREFIX)


def stair_shaft_key(room_id: str) -> str | None:
    """Group key shared by the landings of one physical staircase.

    Numeric stair ids use the last two digits of their room code
    (`stair-102`, `stair-202` -> `"02"`). Other ids fall back to the suffix
    after the stair prefix with a trailing floor marker removed
    (`stair-east-1`, `stair-east-2` -> `"east"`).
    """
    if not has_stair_prefix(room_id):
        return None

    code = room_code(room_id)
    if code is not None:
        return f"{code % 100:02d}"

    suffix = room_id[len(STAIR_ID_PREFIX):]
    suffix = STAIR_FLOOR_MARKER.sub("", suffix) or suffix
    return suffix or None


class LocationRegistry:
    """Normalized rooms, points and floors for one building dataset."""

    def __init__(
        self,
        rooms: list[Room],
        points: list[PointOfInterest],
        floors: list[Floor] | None = None,
    ) -> None:
        self.rooms: tuple[Room, ...] = tuple(rooms)
        self.points: tuple[PointOfInterest, ...] = tuple(points)
        self._room_by_id: dict[str, Room] = {room.id: room for room in self.rooms}

        if floors:
            self.floors: tuple[Floor, ...] = tuple(sorted(floors, key=lambda f: f.id))
        else:
            derived = sorted({room.floor for room in self.rooms if not room.stair})
            self.floors = tuple(Floor(id=f, name=str(f)) for f in derived)

    @classmethod
    def from_dataset(cls, dataset: DatasetPayload) -> "LocationRegistry":
        """Shape validated dataset rows into typed registry entries."""
        rooms: list[Room] = []
        for record in dataset.rooms:
            floor = record.floor if record.floor is not None else floor_from_room_id(record.id)
            if floor is None:
                logger.warning("Dropping room '%s': floor cannot be derived from its id", record.id)
                continue

            rooms.append(
                Room(
                    id=record.id,
                    name=record.name,
                    x=float(record.x),
                    y=float(record.y),
                    floor=int(floor),
                    show=bool(record.show),
                    stair=has_stair_prefix(record.id),
                )
            )

        points = [
            PointOfInterest(
                id=p.id,
                title=p.title,
                x=float(p.x),
                y=float(p.y),
                floor=int(p.floor),
                src=p.src,
                icon_size=p.icon_size,
            )
            for p in dataset.points
        ]
        floors = [Floor(id=f.id, name=f.name, image_src=f.image_src) for f in dataset.floors]
        return cls(rooms=rooms, points=points, floors=floors)

    @property
    def floor_numbers(self) -> list[int]:
        return [floor.id for floor in self.floors]

    def get_room(self, room_id: str) -> Room | None:
        return self._room_by_id.get(room_id)

    def is_room_id(self, node_id: str) -> bool:
        return node_id in self._room_by_id

    def is_stair_room_id(self, node_id: str) -> bool:
        """True for stair landings: stair-prefixed ids that are known rooms."""
        return has_stair_prefix(node_id) and node_id in self._room_by_id

    def stair_rooms(self) -> list[Room]:
        return [room for room in self.rooms if room.stair]

    def standalone_points(self) -> list[PointOfInterest]:
        """Points whose id does not coincide with a room (first placement wins)."""
        seen: set[str] = set()
        out: list[PointOfInterest] = []
        for point in self.points:
            if point.id in self._room_by_id or point.id in seen:
                continue
            seen.add(point.id)
            out.append(point)
        return out

    def point_titles_by_room(self) -> dict[str, list[str]]:
        """Titles of points placed on an existing room, keyed by room id."""
        titles: dict[str, list[str]] = {}
        for point in self.points:
            if point.id in self._room_by_id:
                titles.setdefault(point.id, []).append(point.title)
        return titles

    def located_nodes(self) -> list[GraphNode]:
        """Room nodes followed by standalone point nodes."""
        nodes = [room.to_node() for room in self.rooms]
        nodes.extend(point.to_node() for point in self.standalone_points())
        return nodes
