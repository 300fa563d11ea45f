#!/usr/bin/env python3
"""Example 01: Settle a two-sided market end to end.

Demonstrates:
- Creating a market with an embedded admin resolver
- Placing bets in 18-decimal base units
- Forecasting payouts before resolution
- Resolving, claiming, and reading the audit trail

Run:
    PYTHONPATH=src python examples/01_settle_two_sided_market.py
"""

from __future__ import annotations

from decimal import Decimal

from parimutuel import EventBus, InMemoryAssetLedger, Market, MarketConfig
from parimutuel.infrastructure import EventStore

UNIT = 10**18


def fmt(amount: int) -> str:
    return f"{Decimal(amount) / UNIT:f}"


def main() -> None:
    assets = InMemoryAssetLedger(
        "token", {"player1": 800 * UNIT, "player2": 100 * UNIT, "player3": 100 * UNIT}
    )
    bus = EventBus()
    store = EventStore()
    bus.subscribe_all(store.append)

    config = MarketConfig(
        market_id="fnc-g2",
        label="FNC vs G2",
        denom="token",
        outcomes=("FNC", "G2"),
        admin="admin",
    )
    market = Market(config, assets, event_bus=bus)

    for caller, amount, outcome in [
        ("player1", 2, "FNC"),
        ("player2", 10, "G2"),
        ("player1", 3, "G2"),
        ("player3", 3, "FNC"),
        ("player1", 3, "FNC"),
    ]:
        market.place_bet(caller, amount * UNIT, outcome)

    print("=== Open market ===")
    print(f"Pool: {fmt(market.total_pool())}")
    for outcome in market.outcomes:
        print(f"  {outcome}: {fmt(market.total_for(outcome))}")
    print(f"If G2 wins, player2 gets {fmt(market.get_potential_rewards('player2', 'G2'))}")
    print()

    market.resolve("admin", "FNC")
    print(f"=== Resolved: {market.winner} ===")
    for player in ("player1", "player2", "player3"):
        print(f"  {player}: reward {fmt(market.get_rewards(player))}")

    market.claim_rewards("player1")
    market.claim_rewards("player3")
    print()
    print(f"player1 balance: {fmt(assets.balance_of('player1'))}")
    print(f"player3 balance: {fmt(assets.balance_of('player3'))}")
    print(f"escrow balance:  {fmt(assets.balance_of(market.escrow_account))}")
    print(f"Events recorded: {len(store)}")
    print(f"Invariant issues: {market.check_invariants() or 'none'}")


if __name__ == "__main__":
    main()
