"""Tests for force aggregation, alteration and damage distribution."""

import pytest

from frontline import Force, InvariantViolation, RegionId, Side, UnitKind


class FixedRandom:
    """Stand-in random source returning a fixed sequence, repeating the last value."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


@pytest.fixture
def force(catalog, view):
    return Force(RegionId.B, catalog, view)


def occupied(catalog, view, side, counts, region=RegionId.B):
    force = Force(region, catalog, view)
    force.alter_force(counts, side=side)
    view.clear()
    return force


class TestAlterForce:

    def test_new_force_is_neutral_and_empty(self, force):
        assert force.side == Side.NEUTRAL
        assert force.total_count == 0
        assert force.counts() == [0, 0, 0]

    def test_adding_troops_creates_stacks_and_claims_region(self, force, view):
        force.alter_force([10, 0, 2], side=Side.ATTACKER)

        assert force.side == Side.ATTACKER
        assert force.counts() == [10, 0, 2]
        assert force.total_count == 12
        assert force.stack(UnitKind.ROTARY) is None
        assert view.of("stack") == [
            ("stack", Side.ATTACKER, RegionId.B, UnitKind.INFANTRY, 10),
            ("stack", Side.ATTACKER, RegionId.B, UnitKind.ARMORED, 2),
        ]
        assert view.of("owner") == [("owner", RegionId.B, Side.ATTACKER)]

    def test_zero_delta_changes_nothing(self, catalog, view):
        force = occupied(catalog, view, Side.DEFENDER, [5, 1, 0])
        health = [s.health for s in force.stacks()]

        force.alter_force([0, 0, 0])

        assert force.counts() == [5, 1, 0]
        assert [s.health for s in force.stacks()] == health
        assert view.events == []

    def test_zero_delta_on_empty_force_fires_nothing(self, force, view):
        force.alter_force([0, 0, 0])
        assert force.side == Side.NEUTRAL
        assert view.events == []

    def test_reinforcing_uses_current_side(self, catalog, view):
        force = occupied(catalog, view, Side.DEFENDER, [5, 0, 0])
        force.alter_force([3, 1, 0])
        assert force.counts() == [8, 1, 0]
        assert force.stack(UnitKind.ROTARY).side == Side.DEFENDER
        assert view.of("owner") == []

    def test_removing_everything_empties_and_neutralises(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [10, 0, 1])
        force.alter_force([-10, 0, -1])

        assert force.is_empty
        assert force.side == Side.NEUTRAL
        assert ("stack", Side.ATTACKER, RegionId.B, UnitKind.INFANTRY, 0) in view.events
        assert view.of("owner") == [("owner", RegionId.B, Side.NEUTRAL)]

    def test_stack_reaching_zero_is_removed(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [10, 0, 1])
        force.alter_force([0, 0, -1])
        assert force.stack(UnitKind.ARMORED) is None
        assert force.side == Side.ATTACKER

    def test_removal_clamps_at_zero(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [3, 0, 0])
        force.alter_force([-10, 0, 0])
        assert force.count(UnitKind.INFANTRY) == 0
        assert force.side == Side.NEUTRAL

    def test_negative_delta_for_absent_kind_is_ignored(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [3, 0, 0])
        force.alter_force([0, -2, 0])
        assert force.counts() == [3, 0, 0]
        assert view.events == []

    def test_enemy_troops_cannot_join(self, catalog, view):
        force = occupied(catalog, view, Side.DEFENDER, [5, 0, 0])
        with pytest.raises(InvariantViolation):
            force.alter_force([0, 2, 0], side=Side.ATTACKER)
        assert force.counts() == [5, 0, 0]
        assert force.side == Side.DEFENDER

    def test_sideless_troops_rejected(self, force):
        with pytest.raises(InvariantViolation):
            force.alter_force([4, 0, 0])

    def test_wrong_vector_length(self, force):
        with pytest.raises(ValueError):
            force.alter_force([1, 2])

    def test_present_stacks_share_one_side(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [4, 0, 0])
        for deltas in ([0, 1, 0], [2, 0, 3], [-4, 0, 0], [0, -1, 1]):
            force.alter_force(deltas)
            assert len({s.side for s in force.stacks()}) <= 1
            assert force.total_count == sum(force.counts())


class TestClaim:

    def test_claim_pre_assigns_empty_region(self, force, view):
        force.claim(Side.ATTACKER)
        assert force.side == Side.ATTACKER
        assert view.events == []

        force.alter_force([6, 0, 0])
        assert force.stack(UnitKind.INFANTRY).side == Side.ATTACKER
        assert view.of("owner") == [("owner", RegionId.B, Side.ATTACKER)]

    def test_claim_of_enemy_force_rejected(self, catalog, view):
        force = occupied(catalog, view, Side.DEFENDER, [5, 0, 0])
        with pytest.raises(InvariantViolation):
            force.claim(Side.ATTACKER)

    def test_claim_by_own_side_allowed(self, catalog, view):
        force = occupied(catalog, view, Side.DEFENDER, [5, 0, 0])
        force.claim(Side.DEFENDER)
        assert force.side == Side.DEFENDER


class TestDistributeDamage:

    def test_shares_weighted_by_balance_and_fraction(self, catalog, view):
        force = occupied(catalog, view, Side.DEFENDER, [10, 0, 1])

        # b = 0.5: infantry takes 0.5 * 10/11 * 110 = 50, armor 2 * 1/11 * 110 = 20
        losses = force.distribute_damage(110, FixedRandom(0.5))

        assert force.stack(UnitKind.INFANTRY).health == pytest.approx(50)
        assert force.stack(UnitKind.ARMORED).health == pytest.approx(230)
        assert force.counts() == [5, 0, 1]
        assert losses == {UnitKind.INFANTRY: 5}
        assert view.of("stack") == [("stack", Side.DEFENDER, RegionId.B, UnitKind.INFANTRY, 5)]

    def test_balance_factor_is_floored(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [10, 0, 0])
        force.distribute_damage(100, FixedRandom(0.0))
        # b clamped to 0.2
        assert force.stack(UnitKind.INFANTRY).health == pytest.approx(80)

    def test_vehicles_weighted_by_inverse_balance(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [0, 2, 0])
        force.distribute_damage(50, FixedRandom(0.25))
        assert force.stack(UnitKind.ROTARY).health == pytest.approx(250 - 200)
        assert force.count(UnitKind.ROTARY) == 1

    def test_overkill_empties_force(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [2, 1, 0])
        losses = force.distribute_damage(10_000, FixedRandom(0.9))

        assert force.total_count == 0
        assert force.side == Side.NEUTRAL
        assert losses == {UnitKind.INFANTRY: 2, UnitKind.ROTARY: 1}
        assert view.of("owner") == [("owner", RegionId.B, Side.NEUTRAL)]

    def test_no_damage_is_noop(self, catalog, view):
        force = occupied(catalog, view, Side.ATTACKER, [2, 0, 0])
        assert force.distribute_damage(0, FixedRandom(0.5)) == {}
        assert force.counts() == [2, 0, 0]
        assert view.events == []

    def test_positive_damage_always_lowers_health(self, catalog, view, rng):
        force = occupied(catalog, view, Side.DEFENDER, [7, 1, 1])
        for _ in range(20):
            before = sum(s.health for s in force.stacks())
            if not before:
                break
            force.distribute_damage(3, rng)
            after = sum(s.health for s in force.stacks())
            assert after < before
