"""
Frontline: turn-based territory wargame over eight connected regions.

Core modules:
- map: Region identifiers and adjacency
- units: Sides, unit kinds, unit catalog and stacks
- forces: Per-region force aggregates
- combat/: Battle resolution
- turn: Turn order and selection state machine
- scenario: Initial deployments
- view: Outbound notification interface
"""

from .errors import InvariantViolation, NonTerminatingBattle, ScenarioError
from .map import RegionGraph, RegionId
from .units import Side, UnitKind, UnitProfile, UnitCatalog, UnitStack, formation_size
from .forces import Force
from .combat import BattleResolver, CombatReport, CombatResult
from .view import MapView, LoggingMapView
from .scenario import Scenario, Deployment, load_scenario, default_scenario
from .turn import GameController, InteractionState, ActionRecord, ActionType

__all__ = [
    # Errors
    "InvariantViolation", "NonTerminatingBattle", "ScenarioError",
    # Map
    "RegionGraph", "RegionId",
    # Units
    "Side", "UnitKind", "UnitProfile", "UnitCatalog", "UnitStack", "formation_size",
    # Forces and combat
    "Force", "BattleResolver", "CombatReport", "CombatResult",
    # View
    "MapView", "LoggingMapView",
    # Scenario
    "Scenario", "Deployment", "load_scenario", "default_scenario",
    # Turn Management
    "GameController", "InteractionState", "ActionRecord", "ActionType",
]
