"""
Hot-seat terminal runner for the frontline wargame.

Both players share one terminal and drive the engine through the same
select/cancel interface a map view would use.
"""

import os
import sys
import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional, TextIO

from dotenv import load_dotenv

from frontline import (
    GameController, LoggingMapView, RegionGraph, RegionId, UnitCatalog,
    InvariantViolation, ScenarioError, load_scenario, formation_size,
)

logger = logging.getLogger(__name__)

HELP = """Commands:
  <region>          select an origin or destination (letter or name, e.g. 'a' or 'alpha')
  cancel <region>   deselect the current origin
  map               show all regions
  history           list completed actions
  help              show this text
  quit              leave the game"""


class WargameSession:
    """Text front end around one GameController."""

    def __init__(
        self,
        data_path: str = "data",
        scenario: str = "standard",
        seed: Optional[int] = None,
        log_dir: Optional[str] = None,
        out: Optional[TextIO] = None,
    ):
        self.data_path = Path(data_path)
        self.log_dir = Path(log_dir) if log_dir else None
        self.out = out or sys.stdout

        logger.info("Loading map and unit catalog...")
        graph = RegionGraph.from_yaml(self.data_path)
        catalog = UnitCatalog.from_yaml(self.data_path)

        self.controller = GameController.from_scenario(
            load_scenario(self.data_path, scenario),
            graph=graph,
            catalog=catalog,
            view=LoggingMapView(),
            rng_seed=seed,
        )
        self.game_log: list[dict] = []
        self.start_time = datetime.now()

    def render_map(self) -> str:
        lines = []
        for region, force in self.controller.forces.items():
            marker = "*" if region == self.controller.pending_origin else " "
            owner = force.side.value if force.total_count else "-"
            troops = force.summary() if force.total_count else ""
            size = f" [{formation_size(force.total_count)}]" if force.total_count else ""
            lines.append(f"{marker} {region.value} {region.phonetic:<8} {owner:<9} {troops}{size}")
        return "\n".join(lines)

    def render_history(self) -> str:
        if not self.controller.history:
            return "No actions yet."
        lines = []
        for record in self.controller.history:
            line = (
                f"{record.turn_number:>3}. {record.side.value:<9} {record.action.value:<8} "
                f"{record.origin.phonetic} -> {record.destination.phonetic}"
            )
            if record.report:
                line += f" ({record.report.result.value}, {record.report.ticks} ticks)"
            lines.append(line)
        return "\n".join(lines)

    def handle(self, command: str) -> bool:
        """Process one line of input. Returns False when the session should end."""
        words = command.strip().lower().split()
        if not words:
            return True

        verb = words[0]
        if verb in ("quit", "exit"):
            return False
        if verb == "help":
            print(HELP, file=self.out)
        elif verb == "map":
            print(self.render_map(), file=self.out)
        elif verb == "history":
            print(self.render_history(), file=self.out)
        elif verb == "cancel" and len(words) == 2:
            self._apply("cancel", words[1])
        elif verb == "select" and len(words) == 2:
            self._apply("select", words[1])
        elif len(words) == 1:
            self._apply("select", verb)
        else:
            print(f"Unknown command: {command.strip()!r} (type 'help')", file=self.out)
        return not self.controller.game_over

    def _apply(self, action: str, region_name: str):
        try:
            region = RegionId.parse(region_name)
        except ValueError as e:
            print(e, file=self.out)
            return

        turn = self.controller.current_turn
        if action == "cancel":
            accepted = self.controller.cancel_selection(region)
        else:
            accepted = self.controller.select_region(region)

        self.game_log.append({
            "timestamp": datetime.now().isoformat(),
            "turn": turn.value,
            "action": action,
            "region": region.value,
            "accepted": accepted,
        })
        if not accepted:
            print(f"  {region.phonetic}: not a valid choice for {turn.value}", file=self.out)

    def run(self, stream: Optional[TextIO] = None):
        print(self.render_map(), file=self.out)
        print(f"--- {self.controller.current_turn.value.upper()} to move ---", file=self.out)

        for line in stream or sys.stdin:
            if not self.handle(line):
                break

        if self.controller.winner:
            print(f"Game over: {self.controller.winner.value} wins", file=self.out)
        elif self.controller.game_over:
            print("Game over: draw", file=self.out)
        self._save_game_log()

    def _save_game_log(self):
        if not self.log_dir:
            return
        self.log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = self.start_time.strftime("%Y%m%d_%H%M%S")
        log_path = self.log_dir / f"game_{timestamp}.json"

        with open(log_path, "w") as f:
            json.dump({
                "inputs": self.game_log,
                "actions": [
                    {
                        "turn": r.turn_number,
                        "side": r.side.value,
                        "action": r.action.value,
                        "origin": r.origin.value,
                        "destination": r.destination.value,
                        "moved": r.moved,
                        "battle": r.report.to_dict() if r.report else None,
                    }
                    for r in self.controller.history
                ],
                "winner": self.controller.winner.value if self.controller.winner else None,
            }, f, indent=2)

        logger.info(f"Game log saved to: {log_path}")


def main(argv: Optional[list[str]] = None) -> int:
    """Run a hot-seat game."""
    import argparse

    load_dotenv(Path(__file__).parent / ".env")

    parser = argparse.ArgumentParser(description="Frontline hot-seat wargame")
    parser.add_argument("--scenario", default=os.getenv("FRONTLINE_SCENARIO", "standard"),
                        help="Scenario name under data/scenarios")
    parser.add_argument("--data", default=os.getenv("FRONTLINE_DATA", "data"), help="Data directory path")
    parser.add_argument("--seed", type=int, default=os.getenv("FRONTLINE_SEED"), help="Battle RNG seed")
    parser.add_argument("--logs", default=None, help="Write a JSON game log to this directory")
    parser.add_argument("--log-level", default=os.getenv("FRONTLINE_LOG_LEVEL", "WARNING"),
                        help="Python logging level")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    try:
        session = WargameSession(
            data_path=args.data,
            scenario=args.scenario,
            seed=args.seed,
            log_dir=args.logs,
        )
        print(HELP)
        session.run()
    except ScenarioError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except InvariantViolation as e:
        logger.error(f"Engine invariant violated: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
