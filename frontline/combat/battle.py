"""
Battle resolution - an attacking force moves into a region held by the enemy.

Each tick both forces roll their damage output from their current strength,
then both outputs are applied at once. The battle ends when either force is
empty; a victorious attacker moves its survivors into the conquered region.
"""

import logging

from .base import CombatResolver, CombatReport, CombatResult
from ..errors import InvariantViolation, NonTerminatingBattle
from ..forces import Force
from ..units import Side

logger = logging.getLogger(__name__)

# Far beyond any real battle; hitting it means damage stopped reducing health
MAX_TICKS = 100_000


class BattleResolver(CombatResolver):
    """Resolves a battle between two forces, mutating both in place."""

    def resolve(self, defender: Force, attacker: Force) -> CombatReport:
        """Fight until one side is destroyed and apply the outcome."""
        self._check_preconditions(defender, attacker)

        report = CombatReport(
            attacker_region=attacker.region,
            defender_region=defender.region,
            attacker_side=attacker.side,
            defender_side=defender.side,
        )
        logger.info(
            f"Battle for {defender.region.phonetic}: {attacker.side.value} ({attacker.summary()}) "
            f"vs {defender.side.value} ({defender.summary()})"
        )

        while attacker.total_count > 0 and defender.total_count > 0:
            if report.ticks >= MAX_TICKS:
                raise NonTerminatingBattle(
                    f"Battle for {defender.region.phonetic} undecided after {MAX_TICKS} ticks"
                )
            report.ticks += 1

            attacker_output = self.damage_output(attacker)
            defender_output = self.damage_output(defender)

            defender_lost = defender.distribute_damage(attacker_output, self.rng)
            attacker_lost = attacker.distribute_damage(defender_output, self.rng)
            report.add_losses(attacker_lost, defender_lost)

            logger.debug(
                f"Tick {report.ticks}: attacker dealt {attacker_output:.1f}, "
                f"defender dealt {defender_output:.1f}"
            )

        if attacker.total_count == 0:
            report.result = CombatResult.ATTACKER_LOST
            report.survivors = defender.counts()
            if defender.total_count == 0:
                report.notes.append("Both forces destroyed")
        else:
            report.result = CombatResult.ATTACKER_WON
            report.survivors = attacker.counts()
            self._occupy(defender, attacker)

        report.notes.append(f"Ticks: {report.ticks}")
        logger.info(
            f"Battle for {defender.region.phonetic} ended after {report.ticks} ticks: {report.result.value}"
        )
        return report

    def damage_output(self, force: Force) -> float:
        """Damage a force deals in one tick, with a fresh roll per present kind."""
        return sum(stack.damage_output(self.roll()) for stack in force.stacks())

    def _occupy(self, defender: Force, attacker: Force):
        """Move the attacker's survivors into the emptied defending region."""
        survivors = attacker.counts()
        defender.claim(attacker.side)
        defender.alter_force(survivors, side=attacker.side)
        attacker.alter_force([-n for n in survivors])

    def _check_preconditions(self, defender: Force, attacker: Force):
        if Side.NEUTRAL in (defender.side, attacker.side):
            raise InvariantViolation("Battle requires two occupied forces")
        if defender.side == attacker.side:
            raise InvariantViolation(
                f"Battle between two {attacker.side.value} forces in "
                f"{attacker.region.phonetic} and {defender.region.phonetic}"
            )
        if defender.total_count == 0 or attacker.total_count == 0:
            raise InvariantViolation("Battle requires troops on both sides")
