"""Parimutuel settlement engine.

Bet intake, one-time outcome resolution, proportional payout computation, and
one-time claims for pooled wagering markets.
"""

__version__ = "0.1.0"

from parimutuel.domain import (
    AdminResolver,
    AuthorizationError,
    BalanceError,
    MarketStatus,
    OracleResolver,
    OutcomeSet,
    ParimutuelError,
    StateError,
    ValidationError,
)
from parimutuel.infrastructure import EventBus, InMemoryAssetLedger, MarketConfig
from parimutuel.services import Market

__all__ = [
    "Market",
    "MarketConfig",
    "MarketStatus",
    "OutcomeSet",
    "AdminResolver",
    "OracleResolver",
    "InMemoryAssetLedger",
    "EventBus",
    "ParimutuelError",
    "ValidationError",
    "AuthorizationError",
    "StateError",
    "BalanceError",
]
