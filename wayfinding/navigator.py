"""Query façade composing registry, junction mesh, graph and resolver.

The graph is assembled once in `Navigator.from_dataset` and shared read-only
by every query; each query allocates its own search state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from wayfinding.config import NavigationConfig
from wayfinding.dataset import DatasetPayload, load_dataset, load_default_dataset
from wayfinding.graph import Graph, build_graph
from wayfinding.junctions import JunctionMesh
from wayfinding.pathfinding import astar
from wayfinding.registry import GraphNode, LocationRegistry
from wayfinding.resolver import LocationResolver
from wayfinding.utils import floor_transitions, path_distance, to_serializable_path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ClassPathResult:
    """Route between two resolved locations."""

    from_class_id: str
    to_class_id: str
    path: list[GraphNode]
    distance: float
    floor_transitions: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from_class_id": self.from_class_id,
            "to_class_id": self.to_class_id,
            "path": to_serializable_path(self.path),
            "distance": float(self.distance),
            "floor_transitions": list(self.floor_transitions),
        }


class Navigator:
    """Wayfinding entry point for one building dataset."""

    def __init__(
        self,
        dataset: DatasetPayload,
        registry: LocationRegistry,
        mesh: JunctionMesh,
        graph: Graph,
        config: NavigationConfig,
    ) -> None:
        self.dataset = dataset
        self.registry = registry
        self.mesh = mesh
        self.graph = graph
        self.config = config
        self.resolver = LocationResolver(registry, graph)

    @classmethod
    def from_dataset(cls, dataset: DatasetPayload, config: NavigationConfig | None = None) -> "Navigator":
        cfg = config or NavigationConfig()
        registry = LocationRegistry.from_dataset(dataset)
        mesh = JunctionMesh.from_dataset(dataset)
        graph = build_graph(registry, mesh, dataset=dataset, config=cfg)
        return cls(dataset=dataset, registry=registry, mesh=mesh, graph=graph, config=cfg)

    @classmethod
    def from_file(cls, path: str | Path, config: NavigationConfig | None = None) -> "Navigator":
        return cls.from_dataset(load_dataset(path), config=config)

    @classmethod
    def default(cls) -> "Navigator":
        """Navigator over the bundled campus dataset with default tuning."""
        return cls.from_dataset(load_default_dataset())

    def get_node_by_id(self, node_id: str) -> GraphNode | None:
        return self.graph.get_node(node_id)

    def resolve(self, query: str) -> str | None:
        return self.resolver.resolve(query)

    def find_path(self, from_id: str, to_id: str) -> list[GraphNode] | None:
        return astar(self.graph, from_id, to_id, max_expansions=self.config.max_expansions)

    def path_distance(self, path: list[GraphNode]) -> float:
        return path_distance(path, self.graph.floor_transition_cost)

    def find_class_path(self, from_query: str, to_query: str) -> ClassPathResult | None:
        """Resolve two free-text locations and route between them.

        Returns None when either query is unresolvable or no route exists.
        Identical locations yield a single-node path of distance 0 without
        running a search.
        """
        from_id = self.resolver.resolve(from_query)
        to_id = self.resolver.resolve(to_query)
        if from_id is None or to_id is None:
            logger.debug("Unresolved path query %r -> %r", from_query, to_query)
            return None

        if from_id == to_id:
            node = self.get_node_by_id(from_id)
            if node is None:
                return None
            return ClassPathResult(from_class_id=from_id, to_class_id=to_id, path=[node], distance=0.0)

        path = self.find_path(from_id, to_id)
        if path is None:
            return None

        return ClassPathResult(
            from_class_id=from_id,
            to_class_id=to_id,
            path=path,
            distance=self.path_distance(path),
            floor_transitions=floor_transitions(path),
        )


@lru_cache(maxsize=1)
def get_default_navigator(dataset_path: str | None = None, config: NavigationConfig | None = None) -> Navigator:
    """Build one navigator per process for the given dataset path and config."""
    cfg = config or NavigationConfig.from_env()
    if dataset_path:
        return Navigator.from_file(dataset_path, config=cfg)
    return Navigator.from_dataset(load_default_dataset(), config=cfg)
