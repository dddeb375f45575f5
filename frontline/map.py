"""
Region map for the frontline wargame.

Eight fixed regions lettered a-h, each with a phonetic display name.
Adjacency is symmetric and static for the lifetime of a game.
"""

import logging
import yaml
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .errors import ScenarioError

logger = logging.getLogger(__name__)


class RegionId(Enum):
    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    G = "g"
    H = "h"

    @property
    def phonetic(self) -> str:
        return PHONETIC_NAMES[self]

    @classmethod
    def parse(cls, value: "RegionId | str") -> "RegionId":
        """Accept a RegionId, its letter or its phonetic name (any case)."""
        if isinstance(value, RegionId):
            return value
        key = str(value).strip().lower()
        for region in cls:
            if key in (region.value, region.phonetic):
                return region
        raise ValueError(f"Unknown region: {value!r}")


PHONETIC_NAMES = {
    RegionId.A: "alpha",
    RegionId.B: "bravo",
    RegionId.C: "charlie",
    RegionId.D: "delta",
    RegionId.E: "echo",
    RegionId.F: "foxtrot",
    RegionId.G: "golf",
    RegionId.H: "hotel",
}

# Echo is the hub; the other seven form a ring around it.
DEFAULT_CONNECTIONS = {
    "a": ["b", "e", "h"],
    "b": ["a", "c", "e"],
    "c": ["b", "d", "e"],
    "d": ["c", "e", "f"],
    "e": ["a", "b", "c", "d", "f", "g", "h"],
    "f": ["d", "e", "g"],
    "g": ["e", "f", "h"],
    "h": ["a", "e", "g"],
}


class RegionGraph:
    """
    Static region topology.

    Holds no game state; forces live in the controller.
    """

    def __init__(self, connections: Optional[dict[str, Iterable[str]]] = None):
        connections = connections if connections is not None else DEFAULT_CONNECTIONS
        self._adjacency: dict[RegionId, frozenset[RegionId]] = {}

        for region in RegionId:
            try:
                neighbours = connections[region.value]
            except KeyError:
                raise ScenarioError(f"No connections defined for region '{region.value}'")
            try:
                parsed = frozenset(RegionId.parse(n) for n in neighbours)
            except ValueError as e:
                raise ScenarioError(f"Region '{region.value}': {e}") from e
            if region in parsed:
                raise ScenarioError(f"Region '{region.value}' lists itself as a neighbour")
            self._adjacency[region] = parsed

        self._check_symmetric()

    @classmethod
    def from_yaml(cls, data_path: Path | str = "data") -> "RegionGraph":
        """Load adjacency from map/regions.yaml, falling back to the standard map."""
        map_file = Path(data_path) / "map" / "regions.yaml"
        if not map_file.exists():
            logger.warning(f"Region map not found: {map_file}, using standard map")
            return cls()

        with open(map_file) as f:
            data = yaml.safe_load(f) or {}

        connections = data.get("connections")
        if not isinstance(connections, dict):
            raise ScenarioError(f"{map_file}: 'connections' mapping is required")

        logger.info(f"Loaded region map from {map_file}")
        try:
            parsed = {RegionId.parse(k).value: v for k, v in connections.items()}
        except ValueError as e:
            raise ScenarioError(f"{map_file}: {e}") from e
        return cls(parsed)

    def _check_symmetric(self):
        for region, neighbours in self._adjacency.items():
            for neighbour in neighbours:
                if region not in self._adjacency[neighbour]:
                    raise ScenarioError(
                        f"Adjacency is not symmetric: {region.value} -> {neighbour.value}"
                    )

    # Queries
    @property
    def regions(self) -> list[RegionId]:
        return list(RegionId)

    def neighbours(self, region: RegionId) -> frozenset[RegionId]:
        return self._adjacency[region]

    def are_adjacent(self, a: RegionId, b: RegionId) -> bool:
        return b in self._adjacency[a]

    def degree(self, region: RegionId) -> int:
        return len(self._adjacency[region])
