"""A* pathfinding over the multi-floor navigation graph.

Purpose:
- Compute shortest walkable routes between two graph node ids.
- Account for stair use in both edge cost and heuristic.

Usage example:
    >>> from wayfinding.navigator import Navigator
    >>> nav = Navigator.default()
    >>> [node.id for node in astar(nav.graph, "stair-101", "stair-201")]
    ['stair-101', 'stair-201']
"""

from __future__ import annotations

import heapq
import itertools
import logging

from wayfinding.graph import Graph, planar_distance
from wayfinding.registry import GraphNode

logger = logging.getLogger(__name__)


def _heuristic(a: GraphNode, b: GraphNode, floor_transition_cost: float) -> float:
    """Planar distance plus one transition cost per floor still to cross."""
    return planar_distance(a, b) + abs(b.floor - a.floor) * floor_transition_cost


def astar(
    graph: Graph,
    start_id: str,
    goal_id: str,
    max_expansions: int | None = None,
) -> list[GraphNode] | None:
    """Compute the cheapest route via A*.

    Open entries are ordered by `(f, seq)` where `seq` is the insertion
    counter, so equal-cost frontier nodes pop first-inserted-first. Stale
    entries stay in the heap and are dropped when popped after their node
    was closed.

    Args:
        graph: Immutable navigation graph.
        start_id: Source node id.
        goal_id: Destination node id.
        max_expansions: Optional cap on closed nodes; exceeding it yields None.

    Returns:
        Ordered nodes from start to goal inclusive. None for unknown ids and
        unreachable goals, including searches stopped by the expansion budget.
    """
    start = graph.get_node(start_id)
    goal = graph.get_node(goal_id)
    if start is None or goal is None:
        logger.debug("Unknown endpoint in path query %s -> %s", start_id, goal_id)
        return None

    cost = graph.floor_transition_cost
    seq = itertools.count()

    open_heap: list[tuple[float, int, str]] = []
    heapq.heappush(open_heap, (_heuristic(start, goal, cost), next(seq), start.id))

    came_from: dict[str, str] = {}
    g_score: dict[str, float] = {start.id: 0.0}
    closed: set[str] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)

        if current in closed:
            continue

        if current == goal.id:
            path = [graph.nodes[current]]
            while current in came_from:
                current = came_from[current]
                path.append(graph.nodes[current])
            path.reverse()
            return path

        closed.add(current)
        if max_expansions is not None and len(closed) > max_expansions:
            logger.debug("Expansion budget %d exhausted for %s -> %s", max_expansions, start_id, goal_id)
            return None

        for edge in graph.neighbors(current):
            neighbor = edge.target
            if neighbor in closed:
                continue

            tentative = g_score[current] + edge.distance
            if tentative < g_score.get(neighbor, float("inf")):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                f_score = tentative + _heuristic(graph.nodes[neighbor], goal, cost)
                heapq.heappush(open_heap, (f_score, next(seq), neighbor))

    logger.debug("No path found for %s -> %s", start_id, goal_id)
    return None
