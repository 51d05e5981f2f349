"""Unit tests for wayfinding.registry."""

from __future__ import annotations

from typing import Any

import pytest

from wayfinding.dataset import DatasetPayload, parse_dataset
from wayfinding.registry import (
    LocationRegistry,
    NodeKind,
    floor_from_room_code,
    floor_from_room_id,
    room_code,
    stair_shaft_key,
)


@pytest.mark.parametrize(
    ("room_id", "expected"),
    [("204", 204), ("stair-301", 301), ("A-1203", 1203), ("12", None), ("lab-099", None), ("cafe", None)],
)
def test_room_code_extracts_three_or_four_digits(room_id: str, expected: int | None) -> None:
    assert room_code(room_id) == expected


def test_floor_from_room_code() -> None:
    assert floor_from_room_code(204) == 2
    assert floor_from_room_code(1203) == 12
    assert floor_from_room_code(50) is None


def test_floor_from_room_id() -> None:
    assert floor_from_room_id("stair-301") == 3
    assert floor_from_room_id("lobby") is None


@pytest.mark.parametrize(
    ("room_id", "expected"),
    [
        ("stair-102", "02"),
        ("stair-202", "02"),
        ("stair-1002", "02"),
        ("stair-east-2", "east"),
        ("stair-east", "east"),
        ("stair-", None),
        ("101", None),
    ],
)
def test_stair_shaft_key(room_id: str, expected: str | None) -> None:
    assert stair_shaft_key(room_id) == expected


def test_registry_derives_floors_from_non_stair_rooms(small_dataset: DatasetPayload) -> None:
    registry = LocationRegistry.from_dataset(small_dataset)

    assert registry.floor_numbers == [1, 2, 3]
    assert registry.get_room("204").floor == 2
    assert registry.is_stair_room_id("stair-101")
    assert not registry.is_stair_room_id("stair-999")
    assert not registry.is_stair_room_id("101")
    assert [room.id for room in registry.stair_rooms()] == ["stair-101", "stair-201", "stair-301"]


def test_registry_prefers_dataset_floor_list(small_building: dict[str, Any]) -> None:
    small_building["floors"] = [{"id": 2, "name": "2"}, {"id": 1, "name": "1"}]
    registry = LocationRegistry.from_dataset(parse_dataset(small_building))

    assert registry.floor_numbers == [1, 2]


def test_explicit_room_floor_overrides_room_code(small_building: dict[str, Any]) -> None:
    small_building["rooms"].append({"id": "A-205", "name": "Annex", "x": 5, "y": 5, "floor": 1})
    registry = LocationRegistry.from_dataset(parse_dataset(small_building))

    assert registry.get_room("A-205").floor == 1


def test_room_without_derivable_floor_is_dropped(small_building: dict[str, Any]) -> None:
    small_building["rooms"].append({"id": "lobby", "name": "Lobby", "x": 5, "y": 5})
    registry = LocationRegistry.from_dataset(parse_dataset(small_building))

    assert registry.get_room("lobby") is None
    assert len(registry.rooms) == len(small_building["rooms"]) - 1


def test_points_split_into_annotations_and_standalone(small_dataset: DatasetPayload) -> None:
    registry = LocationRegistry.from_dataset(small_dataset)

    assert [p.id for p in registry.standalone_points()] == ["kiosk", "storage"]
    assert registry.point_titles_by_room() == {"102": ["Кафедра"]}


def test_located_nodes_carry_explicit_kind_and_floor(small_dataset: DatasetPayload) -> None:
    registry = LocationRegistry.from_dataset(small_dataset)
    nodes = {node.id: node for node in registry.located_nodes()}

    assert nodes["stair-201"].kind is NodeKind.ROOM
    assert nodes["stair-201"].stair is True
    assert nodes["stair-201"].floor == 2
    assert nodes["kiosk"].kind is NodeKind.POINT
    assert nodes["kiosk"].floor == 1
    assert "102" in nodes and nodes["102"].kind is NodeKind.ROOM
    assert nodes["204"].to_dict() == {"id": "204", "x": 200.0, "y": 80.0, "floor": 2}
