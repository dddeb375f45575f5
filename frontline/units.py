"""
Unit definitions for the frontline wargame.

Handles sides, unit kinds, per-kind combat constants and the health-pool
stacks that make up a force.
"""

import math
import logging
import yaml
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import InvariantViolation, ScenarioError

logger = logging.getLogger(__name__)


class Side(Enum):
    ATTACKER = "attacker"
    DEFENDER = "defender"
    NEUTRAL = "neutral"  # Unoccupied region, never a playable turn

    @property
    def opponent(self) -> "Side":
        if self == Side.ATTACKER:
            return Side.DEFENDER
        if self == Side.DEFENDER:
            return Side.ATTACKER
        return Side.NEUTRAL


class UnitKind(Enum):
    """Troop kinds, in canonical delta-vector order."""
    INFANTRY = "infantry"
    ROTARY = "rotary"
    ARMORED = "armored"


@dataclass(frozen=True)
class UnitProfile:
    """Per-individual constants for one unit kind."""
    kind: UnitKind
    health_per_unit: float
    damage_per_unit: float


# Formation names and the largest head-count each one covers
FORMATION_SIZES = [
    ("fireteam pair", 2),
    ("fireteam", 5),
    ("patrol", 10),
    ("section", 20),
    ("platoon", 40),
    ("company", 250),
    ("battalion", 1000),
    ("regiment", 2000),
    ("brigade", 5000),
]


def formation_size(count: int) -> str:
    """Name of the smallest formation that holds `count` troops."""
    if count <= 0:
        return "none"
    for name, limit in FORMATION_SIZES:
        if count <= limit:
            return name
    return "division"


class UnitCatalog:
    """Lookup table of unit profiles, one per kind."""

    DEFAULTS = {
        UnitKind.INFANTRY: (10.0, 2.0),
        UnitKind.ROTARY: (125.0, 100.0),
        UnitKind.ARMORED: (250.0, 100.0),
    }

    def __init__(self, profiles: Optional[dict[UnitKind, UnitProfile]] = None):
        if profiles is None:
            profiles = {
                kind: UnitProfile(kind, health, damage)
                for kind, (health, damage) in self.DEFAULTS.items()
            }
        missing = [k.value for k in UnitKind if k not in profiles]
        if missing:
            raise ScenarioError(f"Unit catalog is missing kinds: {', '.join(missing)}")
        for profile in profiles.values():
            if profile.health_per_unit <= 0 or profile.damage_per_unit < 0:
                raise ScenarioError(f"Invalid constants for {profile.kind.value}")
        self._profiles = dict(profiles)

    @classmethod
    def from_yaml(cls, data_path: Path | str = "data") -> "UnitCatalog":
        """Load unit constants from schema/units.yaml; absent kinds keep defaults."""
        schema_file = Path(data_path) / "schema" / "units.yaml"
        if not schema_file.exists():
            logger.warning(f"Unit schema not found: {schema_file}, using defaults")
            return cls()

        with open(schema_file) as f:
            data = yaml.safe_load(f) or {}

        units = data.get("units") or {}
        if not isinstance(units, dict):
            raise ScenarioError(f"{schema_file}: 'units' must be a mapping")

        profiles = {}
        for kind in UnitKind:
            health, damage = cls.DEFAULTS[kind]
            entry = units.get(kind.value) or {}
            profiles[kind] = UnitProfile(
                kind=kind,
                health_per_unit=float(entry.get("health", health)),
                damage_per_unit=float(entry.get("damage", damage)),
            )

        unknown = set(units) - {k.value for k in UnitKind}
        if unknown:
            raise ScenarioError(f"{schema_file}: unknown unit kinds {sorted(unknown)}")

        logger.info(f"Loaded unit catalog from {schema_file}")
        return cls(profiles)

    def profile(self, kind: UnitKind) -> UnitProfile:
        return self._profiles[kind]

    def health_per_unit(self, kind: UnitKind) -> float:
        return self._profiles[kind].health_per_unit

    def damage_per_unit(self, kind: UnitKind) -> float:
        return self._profiles[kind].damage_per_unit


@dataclass
class UnitStack:
    """
    One kind's troops in one region for one side.

    Health is the only stored quantity; count is derived from it so the two
    can never disagree.
    """
    kind: UnitKind
    side: Side
    profile: UnitProfile
    health: float = 0.0

    @classmethod
    def create(cls, kind: UnitKind, side: Side, count: int, catalog: UnitCatalog) -> "UnitStack":
        """Create a stack of `count` full-health troops."""
        if count <= 0:
            raise InvariantViolation(f"Cannot create an empty {kind.value} stack")
        if side == Side.NEUTRAL:
            raise InvariantViolation(f"Cannot create a neutral {kind.value} stack")
        profile = catalog.profile(kind)
        return cls(kind=kind, side=side, profile=profile, health=count * profile.health_per_unit)

    @property
    def count(self) -> int:
        if self.health <= 0:
            return 0
        return math.ceil(self.health / self.profile.health_per_unit)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def apply_health_delta(self, delta: float) -> tuple[int, int]:
        """Add `delta` health (negative for damage), clamped at zero.

        Returns the (old, new) count pair.
        """
        before = self.count
        self.health = max(0.0, self.health + delta)
        return before, self.count

    def damage_output(self, roll: float) -> float:
        """Damage this stack deals in one tick for a roll in [0, 1)."""
        return self.count * self.profile.damage_per_unit * roll
