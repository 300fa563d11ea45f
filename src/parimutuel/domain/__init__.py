"""Domain layer for the parimutuel settlement engine.

Re-exports all public domain types so that consumers can write::

    from parimutuel.domain import BetLedger, OutcomeSet, StateError
"""

# -- Enumerations -------------------------------------------------------------
from .enums import MarketStatus

# -- Value Objects ------------------------------------------------------------
from .values import Bet, ClaimRecord, OutcomeSet, SettlementSummary

# -- Aggregates ---------------------------------------------------------------
from .claims import ClaimTracker
from .ledger import BetLedger

# -- Resolvers ----------------------------------------------------------------
from .resolver import AdminResolver, OracleResolver, Resolver

# -- Settlement ---------------------------------------------------------------
from .settlement import (
    BPS_DENOMINATOR,
    compute_refund,
    compute_reward,
    fee_amount,
    net_pool,
    parimutuel_share,
    payout_table,
    summarize,
)

# -- Domain Events ------------------------------------------------------------
from .events import (
    BetPlaced,
    CutoffUpdated,
    DomainEvent,
    FeesCollected,
    MarketCancelled,
    MarketResolved,
    RewardsClaimed,
)

# -- Exceptions ---------------------------------------------------------------
from .exceptions import (
    AuthorizationError,
    BalanceError,
    ParimutuelError,
    StateError,
    ValidationError,
)

__all__ = [
    # enums
    "MarketStatus",
    # values
    "Bet",
    "ClaimRecord",
    "OutcomeSet",
    "SettlementSummary",
    # aggregates
    "BetLedger",
    "ClaimTracker",
    # resolvers
    "AdminResolver",
    "OracleResolver",
    "Resolver",
    # settlement
    "BPS_DENOMINATOR",
    "compute_refund",
    "compute_reward",
    "fee_amount",
    "net_pool",
    "parimutuel_share",
    "payout_table",
    "summarize",
    # events
    "BetPlaced",
    "CutoffUpdated",
    "DomainEvent",
    "FeesCollected",
    "MarketCancelled",
    "MarketResolved",
    "RewardsClaimed",
    # exceptions
    "AuthorizationError",
    "BalanceError",
    "ParimutuelError",
    "StateError",
    "ValidationError",
]
