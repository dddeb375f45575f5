"""
Force management: the troops one side holds in one region.

A force owns at most one stack per unit kind, all of one side. Mutations go
through alter_force, claim and distribute_damage; the view is notified once
the mutation has settled.
"""

import random
import logging
from typing import Iterable, Optional

from .errors import InvariantViolation
from .map import RegionId
from .units import Side, UnitCatalog, UnitKind, UnitStack
from .view import MapView

logger = logging.getLogger(__name__)

# Lower bound for the infantry/vehicle balance factor; vehicles take at most 1/0.2 = 5x weight
BALANCE_FLOOR = 0.2


class Force:
    """All of one side's unit stacks in a single region."""

    def __init__(self, region: RegionId, catalog: UnitCatalog, view: Optional[MapView] = None):
        self.region = region
        self.catalog = catalog
        self.view = view or MapView()
        self._stacks: dict[UnitKind, UnitStack] = {}
        self._side = Side.NEUTRAL
        self._published_side = Side.NEUTRAL

    def __repr__(self) -> str:
        return f"Force({self.region.value}, {self._side.value}, {self.counts()})"

    # Queries
    @property
    def side(self) -> Side:
        return self._side

    @property
    def total_count(self) -> int:
        return sum(stack.count for stack in self._stacks.values())

    @property
    def is_empty(self) -> bool:
        return not self._stacks

    def stack(self, kind: UnitKind) -> Optional[UnitStack]:
        return self._stacks.get(kind)

    def stacks(self) -> list[UnitStack]:
        return [self._stacks[k] for k in UnitKind if k in self._stacks]

    def count(self, kind: UnitKind) -> int:
        stack = self._stacks.get(kind)
        return stack.count if stack else 0

    def counts(self) -> list[int]:
        """Counts as an [infantry, rotary, armored] vector."""
        return [self.count(kind) for kind in UnitKind]

    def summary(self) -> str:
        parts = [f"{stack.count} {stack.kind.value}" for stack in self.stacks()]
        return ", ".join(parts) if parts else "no troops"

    # Mutations
    def claim(self, side: Side):
        """Pre-assign the side that is about to move into an empty region."""
        if self._stacks and self._side != side:
            raise InvariantViolation(
                f"{self.region.phonetic} is held by {self._side.value}, cannot be claimed by {side.value}"
            )
        self._side = side

    def alter_force(self, deltas: Iterable[int], side: Optional[Side] = None):
        """Add or remove troop counts, given as [infantry, rotary, armored].

        New stacks take `side` if given, otherwise the force's current side.
        Stacks that reach zero are removed.
        """
        deltas = list(deltas)
        if len(deltas) != len(UnitKind):
            raise ValueError(f"Expected {len(UnitKind)} deltas, got {len(deltas)}")
        if not any(deltas):
            return

        incoming = side or self._side
        if self._stacks and incoming != self._side:
            raise InvariantViolation(
                f"Cannot add {incoming.value} troops to {self._side.value} force in {self.region.phonetic}"
            )

        changes = []
        for kind, delta in zip(UnitKind, deltas):
            if delta == 0:
                continue
            stack = self._stacks.get(kind)
            if stack is not None:
                before, after = stack.apply_health_delta(delta * stack.profile.health_per_unit)
                if before != after:
                    changes.append((stack.side, kind, after))
            elif delta > 0:
                if incoming == Side.NEUTRAL:
                    raise InvariantViolation(
                        f"Troops moving into {self.region.phonetic} have no side"
                    )
                stack = UnitStack.create(kind, incoming, delta, self.catalog)
                self._stacks[kind] = stack
                changes.append((incoming, kind, stack.count))

        self._settle(changes)

    def distribute_damage(self, total_damage: float, rng: random.Random) -> dict[UnitKind, int]:
        """Spread `total_damage` health loss over the present stacks.

        One balance factor b is drawn per call: infantry's share is weighted by
        b and vehicles' by 1/b, each scaled by the kind's fraction of the force.
        Returns the count lost per kind.
        """
        total = self.total_count
        if total_damage <= 0 or total == 0:
            return {}

        balance = max(rng.random(), BALANCE_FLOOR)

        # Shares come from the composition before any loss is applied
        shares = {}
        for stack in self.stacks():
            weight = balance if stack.kind == UnitKind.INFANTRY else 1.0 / balance
            shares[stack.kind] = weight * stack.count / total * total_damage

        losses = {}
        changes = []
        for kind, share in shares.items():
            stack = self._stacks[kind]
            before, after = stack.apply_health_delta(-share)
            if before != after:
                losses[kind] = before - after
                changes.append((stack.side, kind, after))

        logger.debug(
            f"{self.region.phonetic}: {total_damage:.1f} damage (balance {balance:.2f}) -> {self.summary()}"
        )
        self._settle(changes)
        return losses

    def _settle(self, changes: list[tuple[Side, UnitKind, int]]):
        """Drop empty stacks, recompute side, check invariants, then notify the view."""
        for kind in [k for k, s in self._stacks.items() if s.is_empty]:
            del self._stacks[kind]

        sides = {stack.side for stack in self._stacks.values()}
        if len(sides) > 1:
            raise InvariantViolation(
                f"Mixed sides in {self.region.phonetic}: {sorted(s.value for s in sides)}"
            )
        if any(stack.health < 0 for stack in self._stacks.values()):
            raise InvariantViolation(f"Negative health in {self.region.phonetic}")
        self._side = sides.pop() if sides else Side.NEUTRAL

        for side, kind, count in changes:
            self.view.on_unit_stack_changed(side, self.region, kind, count)
        if self._side != self._published_side:
            self._published_side = self._side
            self.view.on_region_owner_changed(self.region, self._side)
