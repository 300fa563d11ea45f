"""Shared fixtures for the parimutuel test suite."""

from __future__ import annotations

import pytest

from parimutuel.domain.ledger import BetLedger
from parimutuel.domain.values import OutcomeSet
from parimutuel.infrastructure.assets import InMemoryAssetLedger
from parimutuel.infrastructure.config import MarketConfig
from parimutuel.infrastructure.event_bus import EventBus, EventStore
from parimutuel.services.market import Market

# 18-decimal token, as in the worked settlement examples
UNIT = 10**18

SCENARIO_BETS = [
    ("p1", 2, "team1"),
    ("p2", 10, "team2"),
    ("p1", 3, "team2"),
    ("p3", 3, "team1"),
    ("p1", 3, "team1"),
]


# ---------------------------------------------------------------------------
# Value / aggregate fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def outcomes() -> OutcomeSet:
    return OutcomeSet.of("team1", "team2")


@pytest.fixture
def scenario_ledger(outcomes: OutcomeSet) -> BetLedger:
    """Bet ledger holding the five worked-example bets."""
    ledger = BetLedger(outcomes)
    for participant, amount, outcome in SCENARIO_BETS:
        ledger.append(participant, amount * UNIT, outcome)
    return ledger


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def assets() -> InMemoryAssetLedger:
    """Ledger funding p1 with 800 tokens and p2/p3 with 100 each."""
    return InMemoryAssetLedger(
        "token", {"p1": 800 * UNIT, "p2": 100 * UNIT, "p3": 100 * UNIT}
    )


@pytest.fixture
def event_store() -> EventStore:
    return EventStore()


@pytest.fixture
def event_bus(event_store: EventStore) -> EventBus:
    """A fresh event bus recording everything into ``event_store``."""
    bus = EventBus()
    bus.subscribe_all(event_store.append)
    return bus


@pytest.fixture
def config() -> MarketConfig:
    return MarketConfig(
        market_id="m1",
        label="team1 vs team2",
        denom="token",
        outcomes=("team1", "team2"),
        admin="admin",
        treasury="treasury",
    )


# ---------------------------------------------------------------------------
# Market fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def market(config: MarketConfig, assets: InMemoryAssetLedger, event_bus: EventBus) -> Market:
    return Market(config, assets, event_bus=event_bus)


@pytest.fixture
def scenario_market(market: Market) -> Market:
    """Open market holding the five worked-example bets."""
    for participant, amount, outcome in SCENARIO_BETS:
        market.place_bet(participant, amount * UNIT, outcome)
    return market
