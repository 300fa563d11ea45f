"""Domain events for the parimutuel settlement engine.

Every event is a frozen dataclass inheriting from ``DomainEvent``.  A market
emits an event only after the transition it describes has fully committed, so
a subscriber never observes a bet, resolution, or claim that was rolled back.

All events carry a ``timestamp`` and a ``source_id`` (the market id).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Base event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    timestamp: float = field(default_factory=time.time)
    source_id: str = ""


# ---------------------------------------------------------------------------
# Betting
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BetPlaced(DomainEvent):
    """A bet was accepted and its stake moved into escrow."""

    participant: str = ""
    placed_by: str = ""
    outcome: str = ""
    amount: int = 0
    sequence: int = 0
    total_for_outcome: int = 0
    total_pool: int = 0


@dataclass(frozen=True)
class CutoffUpdated(DomainEvent):
    """The bet-acceptance cutoff was moved (or cleared)."""

    previous_cutoff: float | None = None
    cutoff: float | None = None


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MarketResolved(DomainEvent):
    """The true outcome was fixed and the market is now settled."""

    winner: str = ""
    resolved_by: str = ""
    total_pool: int = 0
    total_for_winner: int = 0


@dataclass(frozen=True)
class MarketCancelled(DomainEvent):
    """The market was cancelled; every stake became refundable."""

    cancelled_by: str = ""
    total_pool: int = 0


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RewardsClaimed(DomainEvent):
    """A participant's reward (or refund) left escrow."""

    participant: str = ""
    receiver: str = ""
    amount: int = 0
    refund: bool = False


@dataclass(frozen=True)
class FeesCollected(DomainEvent):
    """The withheld fee was sent to the treasury."""

    treasury: str = ""
    amount: int = 0
