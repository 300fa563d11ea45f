"""Services layer: the market state machine and scenario replay."""

from parimutuel.services.market import Market
from parimutuel.services.simulation import (
    Scenario,
    ScenarioError,
    SimulationResult,
    load_scenario,
    parse_scenario,
    run_scenario,
)

__all__ = [
    "Market",
    "Scenario",
    "ScenarioError",
    "SimulationResult",
    "load_scenario",
    "parse_scenario",
    "run_scenario",
]
