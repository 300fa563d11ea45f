"""Scenario replay against an in-memory asset ledger.

A scenario file describes one market, the starting balances, and an ordered
list of operations.  ``run_scenario`` builds the market, applies every step in
order, and returns the final state.  A step may declare the error it is
expected to raise; any other error propagates unchanged.

Example (YAML)::

    market:
      market_id: worlds-final
      denom: uusd
      outcomes: [FNC, G2]
      admin: admin
    balances: {alice: 100, bob: 100}
    steps:
      - {op: bet, caller: alice, amount: 10, outcome: FNC}
      - {op: bet, caller: bob, amount: 0, outcome: G2, expect_error: ValidationError}
      - {op: resolve, caller: admin, outcome: FNC}
      - {op: claim, participant: alice}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from parimutuel.domain.exceptions import (
    AuthorizationError,
    BalanceError,
    ParimutuelError,
    StateError,
    ValidationError,
)
from parimutuel.domain.resolver import AdminResolver, OracleResolver, Resolver
from parimutuel.infrastructure.assets import InMemoryAssetLedger
from parimutuel.infrastructure.config import MarketConfig
from parimutuel.infrastructure.event_bus import EventBus, EventStore
from parimutuel.infrastructure.serialization import market_snapshot
from parimutuel.services.market import Market

logger = logging.getLogger(__name__)

ErrorName = Literal["ValidationError", "AuthorizationError", "StateError", "BalanceError"]

_ERRORS: dict[str, type[ParimutuelError]] = {
    "ValidationError": ValidationError,
    "AuthorizationError": AuthorizationError,
    "StateError": StateError,
    "BalanceError": BalanceError,
}


class ScenarioError(ParimutuelError):
    """Raised when a step did not raise the error it declared."""


# -- Scenario schema ---------------------------------------------------------


class _Step(BaseModel):
    model_config = ConfigDict(extra="forbid")

    expect_error: ErrorName | None = None


class BetStep(_Step):
    op: Literal["bet"]
    caller: str
    amount: int
    outcome: str
    now: float | None = None
    receiver: str | None = None


class ResolveStep(_Step):
    """Resolve through the market (any resolver kind)."""

    op: Literal["resolve"]
    caller: str
    outcome: str


class ReportStep(_Step):
    """Write the winner straight to the resolver, bypassing the market."""

    op: Literal["report"]
    caller: str
    outcome: str


class ClaimStep(_Step):
    op: Literal["claim"]
    participant: str
    receiver: str | None = None


class CancelStep(_Step):
    op: Literal["cancel"]
    caller: str


class UpdateCutoffStep(_Step):
    op: Literal["update_cutoff"]
    caller: str
    cutoff: float | None = None


class CollectFeesStep(_Step):
    op: Literal["collect_fees"]
    caller: str


Step = Annotated[
    Union[
        BetStep,
        ResolveStep,
        ReportStep,
        ClaimStep,
        CancelStep,
        UpdateCutoffStep,
        CollectFeesStep,
    ],
    Field(discriminator="op"),
]


class ResolverSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["admin", "oracle"] = "admin"
    authority: str = Field(default="", description="Oracle owner; ignored for 'admin'")


class Scenario(BaseModel):
    """Validated contents of a scenario file."""

    model_config = ConfigDict(extra="forbid")

    market: dict[str, Any]
    resolver: ResolverSpec = Field(default_factory=ResolverSpec)
    balances: dict[str, NonNegativeInt] = Field(default_factory=dict)
    steps: list[Step] = Field(default_factory=list)


# -- Results -----------------------------------------------------------------


@dataclass
class StepResult:
    """What one scenario step did."""

    index: int
    op: str
    result: Any = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"index": self.index, "op": self.op}
        if self.error:
            data["error"] = self.error
        else:
            data["result"] = self.result
        return data


@dataclass
class SimulationResult:
    market: Market
    assets: InMemoryAssetLedger
    events: EventStore
    steps: list[StepResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        accounts = set(self.market.ledger.participants())
        accounts.update(c.receiver for c in self.market.claims)
        accounts.add(self.market.escrow_account)
        if self.market.config.treasury:
            accounts.add(self.market.config.treasury)
        return {
            "steps": [s.to_dict() for s in self.steps],
            "market": market_snapshot(self.market),
            "balances": {a: self.assets.balance_of(a) for a in sorted(accounts)},
            "events": len(self.events),
            "invariant_issues": self.market.check_invariants(),
        }


# -- Loading -----------------------------------------------------------------


def parse_scenario(raw: Any) -> Scenario:
    """Validate already-decoded scenario data."""
    try:
        return Scenario.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"invalid scenario: {exc}", field="scenario") from exc


def load_scenario(path: str | Path) -> Scenario:
    """Read and validate a ``.json``, ``.yaml`` or ``.yml`` scenario file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        raw = yaml.safe_load(text)
    else:
        raw = json.loads(text)
    return parse_scenario(raw)


# -- Runner ------------------------------------------------------------------


def build_market(
    scenario: Scenario,
    event_bus: EventBus | None = None,
) -> tuple[Market, InMemoryAssetLedger]:
    """Create the funded asset ledger and the market a scenario describes."""
    config = MarketConfig.from_dict(scenario.market)
    assets = InMemoryAssetLedger(config.denom, scenario.balances)
    resolver: Resolver
    if scenario.resolver.kind == "oracle":
        resolver = OracleResolver(config.outcome_set, scenario.resolver.authority)
    else:
        resolver = AdminResolver(config.outcome_set, config.admin)
    market = Market(config, assets, resolver=resolver, event_bus=event_bus)
    return market, assets


def _apply(market: Market, step: Any) -> Any:
    if isinstance(step, BetStep):
        bet = market.place_bet(
            step.caller, step.amount, step.outcome, now=step.now, receiver=step.receiver
        )
        return bet.sequence
    if isinstance(step, ResolveStep):
        return market.resolve(step.caller, step.outcome)
    if isinstance(step, ReportStep):
        market.resolver.set_winner(step.caller, step.outcome)
        return step.outcome
    if isinstance(step, ClaimStep):
        return market.claim_rewards(step.participant, receiver=step.receiver)
    if isinstance(step, CancelStep):
        market.cancel(step.caller)
        return None
    if isinstance(step, UpdateCutoffStep):
        market.update_cutoff(step.caller, step.cutoff)
        return step.cutoff
    if isinstance(step, CollectFeesStep):
        return market.collect_fees(step.caller)
    raise TypeError(f"Unknown scenario step {type(step).__name__}")


def run_scenario(scenario: Scenario) -> SimulationResult:
    """Replay every step of *scenario* and return the final state."""
    bus = EventBus()
    store = EventStore()
    bus.subscribe_all(store.append)
    market, assets = build_market(scenario, event_bus=bus)
    result = SimulationResult(market=market, assets=assets, events=store)

    for index, step in enumerate(scenario.steps):
        if step.expect_error is None:
            value = _apply(market, step)
            result.steps.append(StepResult(index=index, op=step.op, result=value))
            continue
        expected = _ERRORS[step.expect_error]
        try:
            value = _apply(market, step)
        except expected as exc:
            logger.debug("step %d (%s) raised expected %s: %s", index, step.op, step.expect_error, exc)
            result.steps.append(
                StepResult(index=index, op=step.op, error=f"{step.expect_error}: {exc}")
            )
            continue
        raise ScenarioError(
            f"step {index} ({step.op}) was expected to raise {step.expect_error}, "
            f"returned {value!r}",
            details={"index": index, "op": step.op},
        )

    logger.info(
        "Scenario for market %s finished: %d steps, status=%s",
        market.market_id, len(scenario.steps), market.status.value,
    )
    return result
