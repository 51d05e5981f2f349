"""FastAPI routes exposing building metadata, location lookup and routing.

Endpoints:
- `/health`, `/floors`, `/locations`, `/nodes/{node_id}`, `/resolve`
- `/find-path` (free-text endpoints) and `/find-path-ids` (raw node ids)
"""

from __future__ import annotations

import os
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from wayfinding import __version__
from wayfinding.navigator import Navigator, get_default_navigator
from wayfinding.utils import floor_transitions, to_serializable_path


class PathNodeModel(BaseModel):
    """One waypoint of a route."""

    id: str
    x: float
    y: float
    floor: int


class FloorTransitionModel(BaseModel):
    """Stair waypoint where the route switches floors."""

    index: int
    from_node_id: str
    to_node_id: str
    from_floor: int
    to_floor: int
    x: float
    y: float


class ClassPathRequest(BaseModel):
    """Request payload for free-text routing."""

    from_query: str = Field(..., min_length=1)
    to_query: str = Field(..., min_length=1)


class NodePathRequest(BaseModel):
    """Request payload for routing between known node ids."""

    from_id: str = Field(..., min_length=1)
    to_id: str = Field(..., min_length=1)


class ClassPathResponse(BaseModel):
    """Response payload for free-text routing."""

    from_class_id: str
    to_class_id: str
    path: list[PathNodeModel]
    distance: float
    floor_transitions: list[FloorTransitionModel] = Field(default_factory=list)


class NodePathResponse(BaseModel):
    """Response payload for node-id routing."""

    path: list[PathNodeModel]
    distance: float
    floor_transitions: list[FloorTransitionModel] = Field(default_factory=list)


def _navigator_from_env() -> Navigator:
    """Load the process-wide navigator; WAYFINDING_DATASET overrides the bundled data."""
    dataset_path = os.getenv("WAYFINDING_DATASET", "").strip() or None
    return get_default_navigator(dataset_path)


def create_app(navigator: Navigator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        navigator: Prebuilt navigator; loaded from env/bundled data when omitted.
    """
    try:
        nav = navigator or _navigator_from_env()
    except ValueError as exc:
        raise RuntimeError(f"Navigation dataset could not be loaded: {exc}") from exc

    app = FastAPI(title="Wayfinding API", version=__version__)
    app.state.navigator = nav

    raw_origins = os.getenv("WAYFINDING_CORS_ORIGINS", "*").strip()
    if raw_origins == "*":
        cors_origins = ["*"]
        allow_credentials = False
    else:
        cors_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
        allow_credentials = True

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Health endpoint with graph size metadata."""
        return {
            "status": "ok",
            "version": app.version,
            "node_count": nav.graph.node_count,
            "edge_count": nav.graph.edge_count,
        }

    @app.get("/floors")
    def get_floors() -> dict[str, Any]:
        """Return building identity and selectable floors."""
        building = nav.dataset.building
        return {
            "building": building.model_dump() if building is not None else None,
            "floors": [
                {"id": floor.id, "name": floor.name, "image_src": floor.image_src}
                for floor in nav.registry.floors
            ],
        }

    @app.get("/locations")
    def get_locations(
        q: str | None = Query(default=None),
        limit: int | None = Query(default=None, ge=1),
    ) -> dict[str, Any]:
        """Return location picker items, filtered when `q` is given."""
        items = nav.resolver.suggest(q or "", limit=limit)
        return {"items": [item.to_dict() for item in items]}

    @app.get("/nodes/{node_id}", response_model=PathNodeModel)
    def get_node(node_id: str) -> PathNodeModel:
        """Return one graph node for pin rendering."""
        node = nav.get_node_by_id(node_id)
        if node is None:
            raise HTTPException(status_code=404, detail=f"Node '{node_id}' was not found")
        return PathNodeModel(**node.to_dict())

    @app.get("/resolve")
    def resolve_location(q: str = Query(..., min_length=1)) -> dict[str, Any]:
        """Resolve one free-text location to a node id."""
        node_id = nav.resolve(q)
        if node_id is None:
            raise HTTPException(status_code=404, detail=f"Location not found: {q}")
        return {"query": q, "node_id": node_id}

    @app.post("/find-path", response_model=ClassPathResponse)
    def find_path(payload: ClassPathRequest) -> ClassPathResponse:
        """Route between two free-text locations."""
        for label, query in (("from", payload.from_query), ("to", payload.to_query)):
            if nav.resolve(query) is None:
                raise HTTPException(status_code=404, detail=f"Location not found ({label}): {query}")

        try:
            result = nav.find_class_path(payload.from_query, payload.to_query)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid path query: {exc}") from exc
        except Exception as exc:  # pragma: no cover - safety net
            raise HTTPException(status_code=500, detail=f"Unexpected pathfinding error: {exc}") from exc

        if result is None:
            raise HTTPException(status_code=404, detail="No navigable path found")

        return ClassPathResponse(**result.to_dict())

    @app.post("/find-path-ids", response_model=NodePathResponse)
    def find_path_ids(payload: NodePathRequest) -> NodePathResponse:
        """Route between two graph node ids."""
        for label, node_id in (("from_id", payload.from_id), ("to_id", payload.to_id)):
            if nav.get_node_by_id(node_id) is None:
                raise HTTPException(status_code=404, detail=f"{label} '{node_id}' was not found")

        path = nav.find_path(payload.from_id, payload.to_id)
        if path is None:
            raise HTTPException(status_code=404, detail="No navigable path found")

        return NodePathResponse(
            path=[PathNodeModel(**step) for step in to_serializable_path(path)],
            distance=nav.path_distance(path),
            floor_transitions=[FloorTransitionModel(**t) for t in floor_transitions(path)],
        )

    return app
