"""Unit tests for wayfinding.pathfinding."""

from __future__ import annotations

import heapq
import math
from typing import Any

import pytest

from wayfinding.config import NavigationConfig
from wayfinding.dataset import parse_dataset
from wayfinding.graph import Edge, Graph
from wayfinding.navigator import Navigator
from wayfinding.pathfinding import astar
from wayfinding.registry import GraphNode, NodeKind


def _ids(path: list[GraphNode] | None) -> list[str] | None:
    return None if path is None else [node.id for node in path]


def _route_cost(graph: Graph, ids: list[str]) -> float:
    total = 0.0
    for source, target in zip(ids, ids[1:]):
        total += next(e.distance for e in graph.neighbors(source) if e.target == target)
    return total


def _dijkstra(graph: Graph, start: str, goal: str) -> float | None:
    dist = {start: 0.0}
    heap = [(0.0, start)]
    done: set[str] = set()
    while heap:
        d, node = heapq.heappop(heap)
        if node in done:
            continue
        if node == goal:
            return d
        done.add(node)
        for edge in graph.neighbors(node):
            nd = d + edge.distance
            if nd < dist.get(edge.target, math.inf):
                dist[edge.target] = nd
                heapq.heappush(heap, (nd, edge.target))
    return None


def _diamond(first_branch: str) -> Graph:
    """S -> {U, D} -> G where both branches cost exactly the same."""
    nodes = {
        "S": GraphNode("S", 0, 0, 1, NodeKind.JUNCTION),
        "U": GraphNode("U", 5, 5, 1, NodeKind.JUNCTION),
        "D": GraphNode("D", 5, -5, 1, NodeKind.JUNCTION),
        "G": GraphNode("G", 10, 0, 1, NodeKind.JUNCTION),
    }
    leg = math.hypot(5, 5)
    branches = ["U", "D"] if first_branch == "U" else ["D", "U"]
    adjacency = {
        "S": tuple(Edge("S", b, leg) for b in branches),
        "U": (Edge("U", "G", leg),),
        "D": (Edge("D", "G", leg),),
    }
    return Graph(nodes=nodes, adjacency=adjacency, floors=(1,), floor_transition_cost=140.0)


def test_astar_crosses_floor_through_stairs(small_navigator: Navigator) -> None:
    path = astar(small_navigator.graph, "101", "204")

    assert _ids(path) == [
        "101",
        "a__floor__1",
        "b__floor__1",
        "stair-101",
        "stair-201",
        "b__floor__2",
        "c__floor__2",
        "204",
    ]


def test_astar_two_floor_trip_uses_middle_landing(small_navigator: Navigator) -> None:
    ids = _ids(astar(small_navigator.graph, "101", "301"))

    assert ids is not None
    assert ids.index("stair-101") < ids.index("stair-201") < ids.index("stair-301")


def test_astar_is_deterministic(small_navigator: Navigator) -> None:
    runs = {tuple(_ids(astar(small_navigator.graph, "storage", "301"))) for _ in range(5)}
    assert len(runs) == 1


@pytest.mark.parametrize("first_branch", ["U", "D"])
def test_equal_cost_ties_pop_first_inserted(first_branch: str) -> None:
    graph = _diamond(first_branch)
    assert _ids(astar(graph, "S", "G")) == ["S", first_branch, "G"]


def test_astar_matches_bruteforce_dijkstra(small_navigator: Navigator) -> None:
    graph = small_navigator.graph
    located = [n.id for n in graph.nodes.values() if n.kind is not NodeKind.JUNCTION]

    for start in located:
        for goal in located:
            path = _ids(astar(graph, start, goal))
            expected = _dijkstra(graph, start, goal)
            assert path is not None
            assert _route_cost(graph, path) == pytest.approx(expected)


def test_astar_never_exceeds_concrete_alternative(small_navigator: Navigator) -> None:
    graph = small_navigator.graph
    detour = [
        "101",
        "a__floor__1",
        "b__floor__1",
        "stair-101",
        "stair-201",
        "stair-301",
        "stair-201",
        "b__floor__2",
        "c__floor__2",
        "204",
    ]
    best = _ids(astar(graph, "101", "204"))

    assert _route_cost(graph, best) == pytest.approx(420.0)
    assert _route_cost(graph, best) <= _route_cost(graph, detour)


def test_floor_crossings_cost_at_least_transition_each(small_navigator: Navigator) -> None:
    graph = small_navigator.graph
    path = astar(graph, "storage", "301")
    crossings = sum(1 for a, b in zip(path, path[1:]) if a.floor != b.floor)

    assert crossings >= 2
    assert _route_cost(graph, _ids(path)) >= crossings * graph.floor_transition_cost


def test_astar_same_start_and_goal(small_navigator: Navigator) -> None:
    assert _ids(astar(small_navigator.graph, "204", "204")) == ["204"]


def test_astar_unknown_ids_return_none(small_navigator: Navigator) -> None:
    assert astar(small_navigator.graph, "ghost", "101") is None
    assert astar(small_navigator.graph, "101", "ghost") is None


def test_astar_isolated_node_returns_none(small_building: dict[str, Any], small_config: NavigationConfig) -> None:
    small_building["floors"] = [{"id": f, "name": str(f)} for f in (1, 2, 3)]
    small_building["rooms"].append({"id": "501", "name": "Аудиторія 5.01", "x": 0, "y": 80})
    nav = Navigator.from_dataset(parse_dataset(small_building), config=small_config)

    assert astar(nav.graph, "501", "101") is None
    assert astar(nav.graph, "101", "501") is None


def test_astar_expansion_budget(small_navigator: Navigator) -> None:
    assert astar(small_navigator.graph, "101", "301", max_expansions=1) is None
    assert astar(small_navigator.graph, "101", "301", max_expansions=1000) is not None
