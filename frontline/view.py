"""
Outbound notification interface between the engine and whatever draws the map.

The engine never inspects a view; it only calls these hooks after state changes.
"""

import logging
from typing import Iterable

from .map import RegionId
from .units import Side, UnitKind, formation_size

logger = logging.getLogger(__name__)


class MapView:
    """Base view. Every hook is a no-op; subclasses override what they render."""

    def on_unit_stack_changed(self, side: Side, region: RegionId, kind: UnitKind, new_count: int):
        """A stack's count changed. Zero means the unit should be hidden."""

    def on_region_owner_changed(self, region: RegionId, new_side: Side):
        """A region's controlling side changed."""

    def on_selection_changed(self, region: RegionId, selected: bool):
        """The move origin was selected or deselected."""

    def on_valid_destinations_changed(self, regions: Iterable[RegionId], active: bool):
        """Destination highlights switched on or off."""

    def on_turn_changed(self, new_side: Side):
        """The acting side changed."""

    def on_log_event(self, message: str):
        """Human-readable narration of moves and battles."""


class LoggingMapView(MapView):
    """Text view for the terminal runner; narration goes to stdout, the rest to the log."""

    def __init__(self, echo: bool = True):
        self.echo = echo

    def on_unit_stack_changed(self, side, region, kind, new_count):
        logger.debug(
            f"{region.phonetic}: {side.value} {kind.value} -> {new_count} ({formation_size(new_count)})"
        )

    def on_region_owner_changed(self, region, new_side):
        logger.info(f"{region.phonetic} now held by {new_side.value}")

    def on_selection_changed(self, region, selected):
        logger.debug(f"{region.phonetic} {'selected' if selected else 'deselected'}")

    def on_valid_destinations_changed(self, regions, active):
        names = ", ".join(r.phonetic for r in regions)
        if active and self.echo:
            print(f"  destinations: {names}")

    def on_turn_changed(self, new_side):
        if self.echo:
            print(f"--- {new_side.value.upper()} to move ---")

    def on_log_event(self, message):
        logger.info(message)
        if self.echo:
            print(f"  {message}")
