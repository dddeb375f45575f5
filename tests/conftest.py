"""Shared test fixtures and helpers."""

import random

import pytest

from frontline import GameController, MapView, RegionGraph, Side, UnitCatalog


class ConstantRandom:
    """Random source that always returns the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class RecordingMapView(MapView):
    """Collects every notification as a (hook, args) tuple."""

    def __init__(self):
        self.events = []

    def on_unit_stack_changed(self, side, region, kind, new_count):
        self.events.append(("stack", side, region, kind, new_count))

    def on_region_owner_changed(self, region, new_side):
        self.events.append(("owner", region, new_side))

    def on_selection_changed(self, region, selected):
        self.events.append(("selection", region, selected))

    def on_valid_destinations_changed(self, regions, active):
        self.events.append(("destinations", tuple(regions), active))

    def on_turn_changed(self, new_side):
        self.events.append(("turn", new_side))

    def on_log_event(self, message):
        self.events.append(("log", message))

    def of(self, hook):
        return [e for e in self.events if e[0] == hook]

    def clear(self):
        self.events.clear()


# --- Fixtures ---


@pytest.fixture
def catalog():
    return UnitCatalog()


@pytest.fixture
def graph():
    return RegionGraph()


@pytest.fixture
def view():
    return RecordingMapView()


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


# --- Helper functions ---


def make_controller(deployments, view=None, seed=42, starting_side=Side.ATTACKER, rng=None):
    """Controller with {region: (side, [inf, rot, arm])} deployed."""
    controller = GameController(view=view, rng=rng, rng_seed=seed, starting_side=starting_side)
    for region, (side, counts) in deployments.items():
        controller.deploy(region, side, counts)
    return controller
