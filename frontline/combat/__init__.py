"""
Combat resolution for contested regions.

A battle runs in ticks of simultaneous damage exchange until one force is empty.
"""

from .base import CombatResolver, CombatReport, CombatResult
from .battle import BattleResolver, MAX_TICKS

__all__ = [
    "CombatResolver",
    "CombatReport",
    "CombatResult",
    "BattleResolver",
    "MAX_TICKS",
]
