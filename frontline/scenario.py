"""
Scenario loading: initial occupancy and starting side.

Scenario files live under data/scenarios/<name>.yaml:

    scenario:
      name: Standard
      starting_side: attacker
    deployments:
      a: {side: attacker, infantry: 40, armored: 2}
      d: {side: defender, infantry: 40, rotary: 1}
"""

import logging
import yaml
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ScenarioError
from .map import RegionId
from .units import Side, UnitKind

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Troops placed in one region at game start."""
    region: RegionId
    side: Side
    counts: list[int]  # [infantry, rotary, armored]


@dataclass
class Scenario:
    name: str = "Standard"
    starting_side: Side = Side.ATTACKER
    deployments: list[Deployment] = field(default_factory=list)


def default_scenario() -> Scenario:
    """Attacker holds the west (alpha, bravo, hotel), defender the east (charlie, delta, foxtrot)."""
    return Scenario(
        name="Standard",
        starting_side=Side.ATTACKER,
        deployments=[
            Deployment(RegionId.A, Side.ATTACKER, [40, 0, 2]),
            Deployment(RegionId.B, Side.ATTACKER, [30, 1, 0]),
            Deployment(RegionId.H, Side.ATTACKER, [50, 0, 0]),
            Deployment(RegionId.C, Side.DEFENDER, [40, 0, 1]),
            Deployment(RegionId.D, Side.DEFENDER, [30, 1, 1]),
            Deployment(RegionId.F, Side.DEFENDER, [50, 0, 0]),
        ],
    )


def _parse_side(value, where: str) -> Side:
    try:
        side = Side(str(value).lower())
    except ValueError:
        raise ScenarioError(f"{where}: unknown side {value!r}")
    if side == Side.NEUTRAL:
        raise ScenarioError(f"{where}: neutral is not a playable side")
    return side


def parse_scenario(data: dict, source: str = "<scenario>") -> Scenario:
    """Build a Scenario from already-loaded YAML data."""
    meta = data.get("scenario", {}) or {}
    scenario = Scenario(
        name=meta.get("name", "Unnamed"),
        starting_side=_parse_side(meta.get("starting_side", "attacker"), f"{source} starting_side"),
    )

    kind_names = {k.value for k in UnitKind}
    seen = set()
    for key, entry in (data.get("deployments", {}) or {}).items():
        where = f"{source} deployment '{key}'"
        try:
            region = RegionId.parse(key)
        except ValueError as e:
            raise ScenarioError(f"{where}: {e}") from e
        if region in seen:
            raise ScenarioError(f"{where}: region deployed twice")
        seen.add(region)

        entry = entry or {}
        unknown = set(entry) - kind_names - {"side"}
        if unknown:
            raise ScenarioError(f"{where}: unknown fields {sorted(unknown)}")

        counts = []
        for kind in UnitKind:
            count = entry.get(kind.value, 0)
            if not isinstance(count, int) or count < 0:
                raise ScenarioError(f"{where}: {kind.value} must be a non-negative integer")
            counts.append(count)

        if not any(counts):
            continue
        side = _parse_side(entry.get("side"), where)
        scenario.deployments.append(Deployment(region, side, counts))

    return scenario


def load_scenario(data_path: Path | str = "data", name: str = "standard") -> Scenario:
    """Load data/scenarios/<name>.yaml, falling back to the built-in deployment."""
    scenario_file = Path(data_path) / "scenarios" / f"{name}.yaml"
    if not scenario_file.exists():
        logger.warning(f"Scenario not found: {scenario_file}, using default deployment")
        return default_scenario()

    with open(scenario_file) as f:
        data = yaml.safe_load(f) or {}

    scenario = parse_scenario(data, str(scenario_file))
    logger.info(f"Scenario loaded: {scenario.name} ({len(scenario.deployments)} deployments)")
    return scenario
