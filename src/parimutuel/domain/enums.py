"""Domain enumerations for the parimutuel settlement engine."""

from enum import Enum


class MarketStatus(Enum):
    """Lifecycle states of a market.

    ``OPEN`` is the only non-terminal state.  A market leaves it exactly once,
    either by resolution (``SETTLED``) or by administrative cancellation.
    """

    OPEN = "open"
    SETTLED = "settled"
    CANCELLED = "cancelled"  # every stake is refundable

    @property
    def is_terminal(self) -> bool:
        return self is not MarketStatus.OPEN
