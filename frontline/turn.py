"""
Turn sequencing and interaction state machine.

One action per turn: the acting side picks an origin region it holds, then an
adjacent destination. Moving into a neutral or friendly region transfers the
whole force; moving into an enemy region starts a battle. The turn passes to
the other side after every completed action, whatever the outcome.
"""

import random
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .combat import BattleResolver, CombatReport
from .forces import Force
from .map import RegionGraph, RegionId
from .scenario import Scenario
from .units import Side, UnitCatalog, formation_size
from .view import MapView

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    IDLE = "idle"
    AWAITING_DESTINATION = "awaiting_destination"
    IN_BATTLE = "in_battle"  # Transient; no input accepted


class ActionType(Enum):
    TRANSFER = "transfer"
    BATTLE = "battle"


@dataclass
class ActionRecord:
    """A completed action."""
    turn_number: int
    side: Side
    origin: RegionId
    destination: RegionId
    action: ActionType
    moved: list[int] = field(default_factory=list)  # [inf, rot, arm] that left the origin
    report: Optional[CombatReport] = None


class GameController:
    """Owns the forces, the turn order and the selection state machine."""

    def __init__(
        self,
        graph: Optional[RegionGraph] = None,
        catalog: Optional[UnitCatalog] = None,
        view: Optional[MapView] = None,
        rng: Optional[random.Random] = None,
        rng_seed: Optional[int] = None,
        starting_side: Side = Side.ATTACKER,
    ):
        if starting_side == Side.NEUTRAL:
            raise ValueError("Neutral cannot take a turn")

        self.graph = graph or RegionGraph()
        self.catalog = catalog or UnitCatalog()
        self.view = view or MapView()
        self.battles = BattleResolver(rng=rng, rng_seed=rng_seed)

        self.forces: dict[RegionId, Force] = {
            region: Force(region, self.catalog, self.view) for region in self.graph.regions
        }
        self.current_turn = starting_side
        self.state = InteractionState.IDLE
        self.pending_origin: Optional[RegionId] = None

        self.turn_number = 1
        self.history: list[ActionRecord] = []
        self.winner: Optional[Side] = None  # None after a draw
        self.finished = False

    @classmethod
    def from_scenario(cls, scenario: Scenario, **kwargs) -> "GameController":
        """Create a controller and place the scenario's initial forces."""
        controller = cls(starting_side=scenario.starting_side, **kwargs)
        for deployment in scenario.deployments:
            controller.deploy(deployment.region, deployment.side, deployment.counts)
        logger.info(
            f"Game started: {scenario.name}, {scenario.starting_side.value} moves first"
        )
        return controller

    def deploy(self, region: RegionId | str, side: Side, counts: list[int]):
        """Place troops before play starts."""
        force = self.forces[RegionId.parse(region)]
        if not any(counts):
            logger.debug(f"Skipped empty deployment in {force.region.phonetic}")
            return
        force.claim(side)
        force.alter_force(counts, side=side)

    # Queries
    @property
    def game_over(self) -> bool:
        return self.finished

    def force(self, region: RegionId | str) -> Force:
        return self.forces[RegionId.parse(region)]

    def owned_regions(self, side: Side) -> list[RegionId]:
        return [region for region, force in self.forces.items() if force.side == side]

    def valid_destinations(self) -> frozenset[RegionId]:
        if self.state != InteractionState.AWAITING_DESTINATION:
            return frozenset()
        return self.graph.neighbours(self.pending_origin)

    # Inbound interface
    def select_region(self, region: RegionId | str) -> bool:
        """Pick an origin or a destination, depending on the current state.

        Returns False when the input is ignored.
        """
        region = RegionId.parse(region)

        if self.game_over or self.state == InteractionState.IN_BATTLE:
            logger.debug(f"Ignored selection of {region.phonetic} while {self.state.value}")
            return False

        if self.state == InteractionState.IDLE:
            return self._select_origin(region)

        if region == self.pending_origin:
            self._clear_selection()
            return True

        if region not in self.valid_destinations():
            logger.debug(
                f"Ignored {region.phonetic}: not adjacent to {self.pending_origin.phonetic}"
            )
            return False

        self._execute_move(self.pending_origin, region)
        return True

    def cancel_selection(self, region: RegionId | str) -> bool:
        """Deselect the pending origin."""
        region = RegionId.parse(region)
        if self.state != InteractionState.AWAITING_DESTINATION or region != self.pending_origin:
            logger.debug(f"Ignored cancel of {region.phonetic} while {self.state.value}")
            return False
        self._clear_selection()
        return True

    # State transitions
    def _select_origin(self, region: RegionId) -> bool:
        if self.forces[region].side != self.current_turn:
            logger.debug(
                f"Ignored {region.phonetic}: not held by {self.current_turn.value}"
            )
            return False

        self.pending_origin = region
        self.state = InteractionState.AWAITING_DESTINATION
        self.view.on_selection_changed(region, True)
        self.view.on_valid_destinations_changed(sorted(self.valid_destinations(), key=lambda r: r.value), True)
        return True

    def _clear_selection(self):
        destinations = sorted(self.valid_destinations(), key=lambda r: r.value)
        origin = self.pending_origin
        self.pending_origin = None
        self.state = InteractionState.IDLE
        self.view.on_selection_changed(origin, False)
        self.view.on_valid_destinations_changed(destinations, False)

    def _execute_move(self, origin: RegionId, destination: RegionId):
        self._clear_selection()
        src = self.forces[origin]
        dst = self.forces[destination]

        if dst.side == Side.NEUTRAL:
            dst.claim(src.side)

        if dst.side == self.current_turn:
            record = self._transfer(src, dst)
        else:
            record = self._battle(src, dst)

        self.history.append(record)
        self._end_action()

    def _transfer(self, src: Force, dst: Force) -> ActionRecord:
        moved = src.counts()
        side = src.side
        message = (
            f"{side.value.capitalize()} moves {src.summary()} "
            f"({formation_size(src.total_count)}) from {src.region.phonetic} to {dst.region.phonetic}"
        )

        dst.alter_force(moved, side=side)
        src.alter_force([-n for n in moved])

        logger.info(message)
        self.view.on_log_event(message)
        return ActionRecord(
            turn_number=self.turn_number,
            side=side,
            origin=src.region,
            destination=dst.region,
            action=ActionType.TRANSFER,
            moved=moved,
        )

    def _battle(self, src: Force, dst: Force) -> ActionRecord:
        attacker_side = src.side
        defender_side = dst.side
        moved = src.counts()
        self.view.on_log_event(
            f"{attacker_side.value.capitalize()} attacks {dst.region.phonetic} from "
            f"{src.region.phonetic} with {src.summary()}"
        )

        self.state = InteractionState.IN_BATTLE
        report = self.battles.resolve(defender=dst, attacker=src)
        self.state = InteractionState.IDLE

        if report.attacker_won:
            self.view.on_log_event(
                f"Attacker won: {attacker_side.value} takes {dst.region.phonetic} "
                f"with {dst.summary()} after {report.ticks} ticks"
            )
        elif dst.is_empty:
            self.view.on_log_event(
                f"Attacker lost: both forces destroyed in {dst.region.phonetic} "
                f"after {report.ticks} ticks"
            )
        else:
            self.view.on_log_event(
                f"Attacker lost: {defender_side.value} holds {dst.region.phonetic} "
                f"with {dst.summary()} after {report.ticks} ticks"
            )

        self._check_victory(attacker_side, defender_side)

        return ActionRecord(
            turn_number=self.turn_number,
            side=attacker_side,
            origin=src.region,
            destination=dst.region,
            action=ActionType.BATTLE,
            moved=moved,
            report=report,
        )

    def _check_victory(self, *sides: Side):
        """End the game once a side holds no regions; a draw if neither does."""
        beaten = [side for side in sides if not self.owned_regions(side)]
        if not beaten:
            return

        self.finished = True
        if len(beaten) == len(sides):
            message = "Draw: neither side holds any regions"
        else:
            loser = beaten[0]
            self.winner = loser.opponent
            message = f"{self.winner.value.capitalize()} wins: {loser.value} holds no regions"
        logger.info(message)
        self.view.on_log_event(message)

    def _end_action(self):
        self.turn_number += 1
        self.current_turn = self.current_turn.opponent
        self.view.on_turn_changed(self.current_turn)
