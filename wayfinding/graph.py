"""Weighted multi-floor navigation graph assembly.

The graph merges four edge sources, in order:
1. explicit static adjacency from the dataset, expanded per floor
2. nearby-junction links inside each floor's hallway mesh
3. room/point connectors to the nearest same-floor junctions
4. stair shaft links between consecutive floors

Every insertion is idempotent: an existing directed `from -> to` edge is never
added twice, so earlier sources win over later ones for the same pair.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from wayfinding.config import NavigationConfig
from wayfinding.dataset import DatasetPayload
from wayfinding.junctions import JunctionMesh, scoped_id
from wayfinding.registry import GraphNode, LocationRegistry, stair_shaft_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed weighted edge."""

    source: str
    target: str
    distance: float


@dataclass(frozen=True, slots=True)
class Graph:
    """Immutable node map plus directed adjacency lists."""

    nodes: Mapping[str, GraphNode]
    adjacency: Mapping[str, tuple[Edge, ...]]
    floors: tuple[int, ...]
    floor_transition_cost: float

    def get_node(self, node_id: str) -> GraphNode | None:
        return self.nodes.get(node_id)

    def neighbors(self, node_id: str) -> tuple[Edge, ...]:
        return self.adjacency.get(node_id, ())

    def has_edge(self, source: str, target: str) -> bool:
        return any(edge.target == target for edge in self.neighbors(source))

    def edges(self) -> Iterator[Edge]:
        for out_edges in self.adjacency.values():
            yield from out_edges

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(out_edges) for out_edges in self.adjacency.values())


def planar_distance(a: GraphNode, b: GraphNode) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def edge_distance(a: GraphNode, b: GraphNode, floor_transition_cost: float) -> float:
    """Euclidean distance on one floor, transition cost per floor crossed otherwise."""
    if a.floor != b.floor:
        return abs(a.floor - b.floor) * float(floor_transition_cost)
    return planar_distance(a, b)


def _nearest_indices(
    origin_xy: tuple[float, float],
    coords: np.ndarray,
    count: int,
    max_distance: float,
    exclude: int | None = None,
) -> tuple[list[int], np.ndarray]:
    """Indices of the `count` nearest rows within `max_distance`, ascending.

    Ties keep input order (stable sort) so assembly stays deterministic.
    """
    dists = np.hypot(coords[:, 0] - origin_xy[0], coords[:, 1] - origin_xy[1])
    order = np.argsort(dists, kind="stable")

    picked: list[int] = []
    for idx in order:
        idx = int(idx)
        if idx == exclude:
            continue
        if dists[idx] > max_distance:
            break
        picked.append(idx)
        if len(picked) >= count:
            break
    return picked, dists


class _GraphBuilder:
    """Mutable accumulator used only while assembling one Graph."""

    def __init__(self, registry: LocationRegistry, mesh: JunctionMesh, config: NavigationConfig) -> None:
        self.registry = registry
        self.mesh = mesh
        self.config = config
        self.floors = registry.floor_numbers

        self.located: dict[str, GraphNode] = {node.id: node for node in registry.located_nodes()}
        self.junctions_by_floor: dict[int, list[GraphNode]] = {
            floor: mesh.junctions_for_floor(floor) for floor in self.floors
        }

        self.nodes: dict[str, GraphNode] = dict(self.located)
        for floor in self.floors:
            for junction in self.junctions_by_floor[floor]:
                self.nodes.setdefault(junction.id, junction)

        self.adjacency: dict[str, list[Edge]] = {}
        self.edge_keys: set[tuple[str, str]] = set()
        self.skipped = 0

    def add_edge(self, source: str, target: str, forced_distance: float | None = None) -> bool:
        """Insert `source -> target` unless an endpoint is unknown or the edge exists."""
        from_node = self.nodes.get(source)
        to_node = self.nodes.get(target)
        if from_node is None or to_node is None:
            self.skipped += 1
            logger.debug("Skipping edge %s -> %s: unresolved endpoint", source, target)
            return False
        if source == target or (source, target) in self.edge_keys:
            return False

        if forced_distance is None:
            dist = edge_distance(from_node, to_node, self.config.floor_transition_cost)
        else:
            dist = float(forced_distance)

        self.edge_keys.add((source, target))
        self.adjacency.setdefault(source, []).append(Edge(source=source, target=target, distance=dist))
        return True

    def link(self, a: str, b: str, forced_distance: float | None = None) -> None:
        self.add_edge(a, b, forced_distance)
        self.add_edge(b, a, forced_distance)

    def floors_for_pair(self, a: str, b: str) -> list[int]:
        node_a = self.located.get(a)
        node_b = self.located.get(b)

        if node_a is not None and node_b is not None:
            return [node_a.floor] if node_a.floor == node_b.floor else []

        if self.mesh.is_junction_base(a) and self.mesh.is_junction_base(b):
            return list(self.floors)

        located = node_a if node_a is not None else node_b
        return [located.floor] if located is not None else []

    def graph_node_id(self, base_id: str, floor: int) -> str | None:
        located = self.located.get(base_id)
        if located is not None:
            return base_id if located.floor == floor else None
        if self.mesh.is_junction_base(base_id):
            return scoped_id(base_id, floor)
        return None

    def add_explicit_adjacency(self, dataset: DatasetPayload) -> None:
        for record in dataset.edges:
            floors = self.floors_for_pair(record.source, record.target)
            if not floors:
                self.skipped += 1
                logger.debug("Skipping static edge %s -> %s: no shared floor", record.source, record.target)
                continue

            for floor in floors:
                source = self.graph_node_id(record.source, floor)
                target = self.graph_node_id(record.target, floor)
                if source is None or target is None:
                    self.skipped += 1
                    continue
                if record.bidirectional:
                    self.link(source, target)
                else:
                    self.add_edge(source, target)

    def add_nearby_junction_links(self) -> None:
        count = self.config.nearby_junction_link_count
        if count <= 0:
            return

        for floor in self.floors:
            junctions = self.junctions_by_floor[floor]
            if len(junctions) < 2:
                continue

            coords = np.array([[j.x, j.y] for j in junctions], dtype=float)
            for idx, junction in enumerate(junctions):
                nearest, _ = _nearest_indices(
                    (junction.x, junction.y),
                    coords,
                    count=count,
                    max_distance=self.config.nearby_junction_max_distance,
                    exclude=idx,
                )
                for other in nearest:
                    self.link(junction.id, junctions[other].id)

    def add_connector_links(self) -> None:
        coords_by_floor: dict[int, np.ndarray] = {}

        for node in self.located.values():
            junctions = self.junctions_by_floor.get(node.floor)
            if not junctions:
                logger.debug("No junctions on floor %s for '%s'", node.floor, node.id)
                continue

            coords = coords_by_floor.get(node.floor)
            if coords is None:
                coords = np.array([[j.x, j.y] for j in junctions], dtype=float)
                coords_by_floor[node.floor] = coords

            nearest, dists = _nearest_indices(
                (node.x, node.y),
                coords,
                count=self.config.connector_link_count,
                max_distance=self.config.connector_max_distance,
            )
            if not nearest:
                nearest = [int(np.argmin(dists))]

            for idx in nearest:
                self.link(node.id, junctions[idx].id)

    def add_stair_links(self) -> None:
        shafts: dict[str, list[GraphNode]] = {}
        for room in self.registry.stair_rooms():
            key = stair_shaft_key(room.id)
            if key is None:
                continue
            shafts.setdefault(key, []).append(self.located[room.id])

        cost = self.config.floor_transition_cost
        for key, landings in shafts.items():
            landings.sort(key=lambda node: node.floor)
            for lower, upper in zip(landings, landings[1:]):
                if lower.floor == upper.floor:
                    logger.debug("Shaft %s has two landings on floor %s", key, lower.floor)
                    continue
                self.link(lower.id, upper.id, forced_distance=cost)

    def freeze(self) -> Graph:
        return Graph(
            nodes=MappingProxyType(dict(self.nodes)),
            adjacency=MappingProxyType({k: tuple(v) for k, v in self.adjacency.items()}),
            floors=tuple(self.floors),
            floor_transition_cost=float(self.config.floor_transition_cost),
        )


def build_graph(
    registry: LocationRegistry,
    mesh: JunctionMesh,
    dataset: DatasetPayload | None = None,
    config: NavigationConfig | None = None,
) -> Graph:
    """Assemble the immutable navigation graph.

    Args:
        registry: Rooms, points and floors.
        mesh: Junction layouts scoped per floor.
        dataset: Source of explicit static adjacency; omitted => no explicit edges.
        config: Link counts, distances and floor transition cost.

    Returns:
        Graph containing every room, standalone point and scoped junction.
    """
    builder = _GraphBuilder(registry, mesh, config or NavigationConfig())

    if dataset is not None:
        builder.add_explicit_adjacency(dataset)
    builder.add_nearby_junction_links()
    builder.add_connector_links()
    builder.add_stair_links()

    graph = builder.freeze()
    logger.info(
        "Assembled navigation graph: %d nodes, %d edges, %d floors (%d references skipped)",
        graph.node_count,
        graph.edge_count,
        len(graph.floors),
        builder.skipped,
    )
    return graph
