"""
Base combat resolution system with common mechanics.
"""

import random
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from ..map import RegionId
from ..units import Side, UnitKind


class CombatResult(Enum):
    ATTACKER_WON = "attacker_won"
    ATTACKER_LOST = "attacker_lost"


@dataclass
class CombatReport:
    """Report of a resolved battle."""
    attacker_region: RegionId
    defender_region: RegionId
    attacker_side: Side
    defender_side: Side
    result: Optional[CombatResult] = None
    ticks: int = 0
    attacker_losses: dict[UnitKind, int] = field(default_factory=dict)
    defender_losses: dict[UnitKind, int] = field(default_factory=dict)
    survivors: list[int] = field(default_factory=lambda: [0, 0, 0])  # Winner's [inf, rot, arm]
    notes: list[str] = field(default_factory=list)

    @property
    def attacker_won(self) -> bool:
        return self.result == CombatResult.ATTACKER_WON

    def add_losses(self, attacker: dict[UnitKind, int], defender: dict[UnitKind, int]):
        for kind, lost in attacker.items():
            self.attacker_losses[kind] = self.attacker_losses.get(kind, 0) + lost
        for kind, lost in defender.items():
            self.defender_losses[kind] = self.defender_losses.get(kind, 0) + lost

    def to_dict(self) -> dict:
        return {
            "attacker_region": self.attacker_region.value,
            "defender_region": self.defender_region.value,
            "attacker_side": self.attacker_side.value,
            "defender_side": self.defender_side.value,
            "result": self.result.value if self.result else None,
            "ticks": self.ticks,
            "attacker_losses": {k.value: v for k, v in self.attacker_losses.items()},
            "defender_losses": {k.value: v for k, v in self.defender_losses.items()},
            "survivors": list(self.survivors),
            "notes": list(self.notes),
        }


class CombatResolver:
    """Base class for combat resolution."""

    def __init__(self, rng: Optional[random.Random] = None, rng_seed: Optional[int] = None):
        self.rng = rng or random.Random(rng_seed)

    def roll(self) -> float:
        """Uniform roll in [0, 1)."""
        return self.rng.random()
