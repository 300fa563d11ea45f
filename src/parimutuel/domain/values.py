"""Value objects for the parimutuel settlement engine.

All types here are frozen dataclasses: immutable and compared by value.
Amounts are integers in the asset's smallest base unit.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .exceptions import ValidationError

MIN_OUTCOMES = 2
MAX_OUTCOMES = 3

# ---------------------------------------------------------------------------
# OutcomeSet
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OutcomeSet:
    """The allowed outcome labels of one market.

    Two labels for a head-to-head event, three when a draw is possible.
    Labels must be non-empty and pairwise distinct; order is preserved and is
    the order used for per-outcome totals.
    """

    labels: tuple[str, ...]

    def __post_init__(self) -> None:
        # accept any iterable of labels except a bare string, store a tuple
        if isinstance(self.labels, str) or not isinstance(self.labels, Iterable):
            raise ValidationError(
                f"outcome labels must be a sequence of strings, got {self.labels!r}",
                field="outcomes",
            )
        object.__setattr__(self, "labels", tuple(self.labels))
        if not (MIN_OUTCOMES <= len(self.labels) <= MAX_OUTCOMES):
            raise ValidationError(
                f"outcome set must have {MIN_OUTCOMES} to {MAX_OUTCOMES} labels, "
                f"got {len(self.labels)}",
                field="outcomes",
            )
        for label in self.labels:
            if not isinstance(label, str) or not label:
                raise ValidationError(
                    "outcome labels must be non-empty strings", field="outcomes"
                )
        if len(set(self.labels)) != len(self.labels):
            raise ValidationError(
                f"outcome labels must be distinct, got {list(self.labels)}",
                field="outcomes",
            )

    @classmethod
    def of(cls, *labels: str) -> OutcomeSet:
        return cls(labels)

    def require(self, outcome: str) -> str:
        """Return *outcome* unchanged, or raise ``ValidationError``."""
        if not outcome:
            raise ValidationError("outcome can't be empty", field="outcome")
        if outcome not in self.labels:
            raise ValidationError(
                f"outcome needs to be one of {', '.join(self.labels)}; got {outcome!r}",
                field="outcome",
                details={"outcome": outcome},
            )
        return outcome

    def __contains__(self, outcome: object) -> bool:
        return outcome in self.labels

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)


# ---------------------------------------------------------------------------
# Bet
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Bet:
    """One accepted wager.

    ``sequence`` is the bet's position in the market-wide insertion order, so
    sorting a participant's bets by it reproduces the order they were placed.
    ``placed_by`` is the paying caller, which differs from ``participant`` when
    a bet is placed on behalf of a receiver.
    """

    participant: str
    amount: int
    outcome: str
    sequence: int
    placed_by: str = ""
    placed_at: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"bet amount must be an integer, got {type(self.amount).__name__}",
                field="amount",
            )
        if self.amount <= 0:
            raise ValidationError("the bet must be more than 0", field="amount")
        if not self.outcome:
            raise ValidationError("outcome can't be empty", field="outcome")
        if not self.placed_by:
            object.__setattr__(self, "placed_by", self.participant)


# ---------------------------------------------------------------------------
# ClaimRecord
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClaimRecord:
    """Proof that a participant has been paid out."""

    participant: str
    amount: int
    receiver: str = ""
    claimed: bool = True

    def __post_init__(self) -> None:
        if not self.receiver:
            object.__setattr__(self, "receiver", self.participant)


# ---------------------------------------------------------------------------
# SettlementSummary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SettlementSummary:
    """Pool-level figures for a settled market.

    ``distributable`` is the sum of every individual reward; it never exceeds
    ``net_pool`` and the difference (``dust``) is what integer truncation
    leaves behind in escrow.
    """

    winner: str
    gross_pool: int
    fee: int
    net_pool: int
    winning_total: int
    distributable: int

    @property
    def dust(self) -> int:
        return self.net_pool - self.distributable
