"""Static building dataset schema and loaders.

The dataset is a JSON document describing one building: rooms, custom points,
hallway junction layouts (shared and per-floor), explicit adjacency pairs and
the floor list. It is validated once at load time; everything downstream
treats it as trusted, read-only data.

Usage example:
    >>> from wayfinding.dataset import load_default_dataset
    >>> dataset = load_default_dataset()
    >>> len(dataset.rooms) > 0
    True
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

DEFAULT_DATASET_PATH = Path(__file__).resolve().parent / "data" / "campus.json"


class DatasetError(ValueError):
    """Raised when a building dataset cannot be read or fails validation."""


class BuildingInfo(BaseModel):
    """Building identity shown alongside floor metadata."""

    id: str
    name: str
    address: str = ""


class FloorInfo(BaseModel):
    """One selectable floor of the building."""

    id: int
    name: str
    image_src: str | None = None


class RoomRecord(BaseModel):
    """Named destination; `floor` is derived from the room code when omitted."""

    id: str = Field(..., min_length=1)
    name: str
    x: float
    y: float
    show: bool = True
    floor: int | None = None


class PointRecord(BaseModel):
    """Custom point of interest placed on a floor."""

    id: str = Field(..., min_length=1)
    title: str
    x: float
    y: float
    floor: int
    src: str | None = None
    icon_size: float | None = None


class JunctionRecord(BaseModel):
    """Hallway waypoint in floor-local coordinates."""

    id: str = Field(..., min_length=1)
    x: float
    y: float


class StructureRecord(BaseModel):
    """Floor-specific hallway layout overriding the shared junction list."""

    junctions: list[JunctionRecord] = Field(default_factory=list)


class EdgeRecord(BaseModel):
    """Explicit static adjacency pair between two base ids.

    Pairs are walkable both ways unless `bidirectional` is false.
    """

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias="from")
    target: str = Field(..., alias="to")
    bidirectional: bool = True


class DatasetPayload(BaseModel):
    """Validated building dataset."""

    building: BuildingInfo | None = None
    floors: list[FloorInfo] = Field(default_factory=list)
    rooms: list[RoomRecord] = Field(default_factory=list)
    points: list[PointRecord] = Field(default_factory=list)
    junctions: list[JunctionRecord] = Field(default_factory=list)
    structures: dict[int, StructureRecord] = Field(default_factory=dict)
    edges: list[EdgeRecord] = Field(default_factory=list)
    other_buildings: list[BuildingInfo] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "DatasetPayload":
        """Reject duplicated room ids and duplicated junction ids within one layout."""
        seen: set[str] = set()
        for room in self.rooms:
            if room.id in seen:
                raise ValueError(f"duplicate room id '{room.id}'")
            seen.add(room.id)

        layouts = [("shared", self.junctions)]
        layouts.extend((f"floor {floor}", s.junctions) for floor, s in self.structures.items())
        for label, junctions in layouts:
            ids = [j.id for j in junctions]
            if len(set(ids)) != len(ids):
                raise ValueError(f"duplicate junction id in {label} layout")

        floor_ids = [f.id for f in self.floors]
        if len(set(floor_ids)) != len(floor_ids):
            raise ValueError("floor ids must be unique")
        return self


def parse_dataset(raw: dict[str, Any]) -> DatasetPayload:
    """Validate an in-memory mapping into a DatasetPayload.

    Raises:
        DatasetError: If the mapping does not match the dataset schema.
    """
    if not isinstance(raw, dict):
        raise DatasetError("dataset must be a JSON object")

    try:
        return DatasetPayload.model_validate(raw)
    except ValidationError as exc:
        raise DatasetError(f"invalid building dataset: {exc}") from exc


def load_dataset(path: str | Path) -> DatasetPayload:
    """Read and validate a dataset JSON file."""
    dataset_path = Path(path)
    if not dataset_path.exists():
        raise DatasetError(f"dataset file not found: {dataset_path}")

    try:
        raw = json.loads(dataset_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DatasetError(f"dataset file is not valid JSON: {dataset_path}") from exc

    return parse_dataset(raw)


def load_default_dataset() -> DatasetPayload:
    """Load the campus dataset bundled with the package."""
    return load_dataset(DEFAULT_DATASET_PATH)
