"""Pytest global fixtures and test isolation hooks."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from wayfinding.config import NavigationConfig
from wayfinding.dataset import DatasetPayload, parse_dataset
from wayfinding.navigator import Navigator, get_default_navigator

SMALL_BUILDING: dict[str, Any] = {
    "rooms": [
        {"id": "101", "name": "Аудиторія 1.01", "x": 0, "y": 80},
        {"id": "102", "name": "Їдальня", "x": 200, "y": 80},
        {"id": "201", "name": "Аудиторія 2.01", "x": 0, "y": 80},
        {"id": "204", "name": "Аудиторія 2.04", "x": 200, "y": 80},
        {"id": "301", "name": "Аудиторія 3.01", "x": 100, "y": 80},
        {"id": "stair-101", "name": "Сходи", "x": 100, "y": 120, "show": False},
        {"id": "stair-201", "name": "Сходи", "x": 100, "y": 120, "show": False},
        {"id": "stair-301", "name": "Сходи", "x": 100, "y": 120, "show": False},
    ],
    "points": [
        {"id": "102", "title": "Кафедра", "x": 200, "y": 80, "floor": 1},
        {"id": "kiosk", "title": "Café Crème", "x": 200, "y": 120, "floor": 1},
        {"id": "storage", "title": "Склад", "x": 0, "y": 500, "floor": 1},
    ],
    "junctions": [
        {"id": "a", "x": 0, "y": 100},
        {"id": "b", "x": 100, "y": 100},
        {"id": "c", "x": 200, "y": 100},
    ],
    "edges": [
        {"from": "a", "to": "b"},
        {"from": "b", "to": "c"},
    ],
}


@pytest.fixture(autouse=True)
def reset_navigator_cache() -> None:
    """Drop the process-wide navigator so env overrides apply per test."""
    get_default_navigator.cache_clear()


@pytest.fixture()
def small_building() -> dict[str, Any]:
    """Raw three-floor building mapping, safe to mutate per test."""
    return copy.deepcopy(SMALL_BUILDING)


@pytest.fixture()
def small_dataset(small_building: dict[str, Any]) -> DatasetPayload:
    return parse_dataset(small_building)


@pytest.fixture()
def small_config() -> NavigationConfig:
    """Tight link radii so the small building has one shortest route per pair."""
    return NavigationConfig(nearby_junction_max_distance=150, connector_max_distance=50)


@pytest.fixture()
def small_navigator(small_dataset: DatasetPayload, small_config: NavigationConfig) -> Navigator:
    return Navigator.from_dataset(small_dataset, config=small_config)


@pytest.fixture(scope="session")
def campus_navigator() -> Navigator:
    """Navigator over the bundled campus dataset."""
    return Navigator.default()
