"""Navigation tuning parameters and environment overrides.

Env vars:
  WAYFINDING_FLOOR_TRANSITION_COST=140
  WAYFINDING_JUNCTION_LINKS=2
  WAYFINDING_JUNCTION_MAX_DISTANCE=220
  WAYFINDING_CONNECTOR_LINKS=2
  WAYFINDING_CONNECTOR_MAX_DISTANCE=120
  WAYFINDING_MAX_EXPANSIONS=            (empty => unlimited)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

FLOOR_TRANSITION_COST = 140.0
NEARBY_JUNCTION_LINK_COUNT = 2
NEARBY_JUNCTION_MAX_DISTANCE = 220.0
CONNECTOR_LINK_COUNT = 2
CONNECTOR_MAX_DISTANCE = 120.0


@dataclass(frozen=True, slots=True)
class NavigationConfig:
    """Graph assembly and search parameters."""

    floor_transition_cost: float = FLOOR_TRANSITION_COST
    nearby_junction_link_count: int = NEARBY_JUNCTION_LINK_COUNT
    nearby_junction_max_distance: float = NEARBY_JUNCTION_MAX_DISTANCE
    connector_link_count: int = CONNECTOR_LINK_COUNT
    connector_max_distance: float = CONNECTOR_MAX_DISTANCE
    max_expansions: int | None = None

    def __post_init__(self) -> None:
        if self.floor_transition_cost <= 0:
            raise ValueError("floor_transition_cost must be > 0")
        if self.nearby_junction_link_count < 0 or self.connector_link_count < 1:
            raise ValueError("link counts must be >= 0 (junctions) and >= 1 (connectors)")
        if self.nearby_junction_max_distance < 0 or self.connector_max_distance < 0:
            raise ValueError("max link distances must be >= 0")
        if self.max_expansions is not None and self.max_expansions <= 0:
            raise ValueError("max_expansions must be > 0 when set")

    @classmethod
    def from_env(cls) -> "NavigationConfig":
        """Build config from WAYFINDING_* env vars, falling back to defaults."""
        raw_budget = os.getenv("WAYFINDING_MAX_EXPANSIONS", "").strip()

        try:
            return cls(
                floor_transition_cost=float(
                    os.getenv("WAYFINDING_FLOOR_TRANSITION_COST", str(FLOOR_TRANSITION_COST))
                ),
                nearby_junction_link_count=int(
                    os.getenv("WAYFINDING_JUNCTION_LINKS", str(NEARBY_JUNCTION_LINK_COUNT))
                ),
                nearby_junction_max_distance=float(
                    os.getenv("WAYFINDING_JUNCTION_MAX_DISTANCE", str(NEARBY_JUNCTION_MAX_DISTANCE))
                ),
                connector_link_count=int(os.getenv("WAYFINDING_CONNECTOR_LINKS", str(CONNECTOR_LINK_COUNT))),
                connector_max_distance=float(
                    os.getenv("WAYFINDING_CONNECTOR_MAX_DISTANCE", str(CONNECTOR_MAX_DISTANCE))
                ),
                max_expansions=int(raw_budget) if raw_budget else None,
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid navigation configuration: {exc}") from exc
