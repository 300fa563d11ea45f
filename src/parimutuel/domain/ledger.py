"""Append-only bet ledger with running aggregates.

``BetLedger`` owns every accepted ``Bet`` of one market together with the
per-participant stakes and per-outcome totals derived from them.  Totals are
maintained incrementally on append rather than recomputed on read.  Bets are
never removed or edited.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .values import Bet, OutcomeSet


class BetLedger:
    """Aggregate: the bet record of a single market.

    Usage::

        ledger = BetLedger(OutcomeSet.of("home", "away"))
        ledger.append("alice", 10, "home")
        ledger.total_for("home")   # 10
    """

    def __init__(self, outcomes: OutcomeSet) -> None:
        self._outcomes = outcomes
        self._bets: list[Bet] = []
        self._by_participant: dict[str, list[Bet]] = {}
        self._stakes: dict[tuple[str, str], int] = {}
        self._totals: dict[str, int] = {label: 0 for label in outcomes}
        self._total_pool = 0

    # -- properties -----------------------------------------------------------

    @property
    def outcomes(self) -> OutcomeSet:
        return self._outcomes

    # -- mutations ------------------------------------------------------------

    def append(
        self,
        participant: str,
        amount: int,
        outcome: str,
        *,
        placed_by: str = "",
        placed_at: float | None = None,
    ) -> Bet:
        """Record a bet and update the aggregates.

        The bet is fully validated before anything is written, so a rejected
        append leaves the ledger untouched.
        """
        self._outcomes.require(outcome)
        bet = Bet(
            participant=participant,
            amount=amount,
            outcome=outcome,
            sequence=len(self._bets),
            placed_by=placed_by,
            placed_at=placed_at,
        )
        self._bets.append(bet)
        self._by_participant.setdefault(participant, []).append(bet)
        key = (participant, outcome)
        self._stakes[key] = self._stakes.get(key, 0) + amount
        self._totals[outcome] += amount
        self._total_pool += amount
        return bet

    # -- queries --------------------------------------------------------------

    def get_bets(self, participant: str) -> tuple[Bet, ...]:
        """Return *participant*'s bets in insertion order (empty if none)."""
        return tuple(self._by_participant.get(participant, ()))

    def total_pool(self) -> int:
        return self._total_pool

    def total_for(self, outcome: str) -> int:
        """Total staked on *outcome*; 0 for labels outside the outcome set."""
        return self._totals.get(outcome, 0)

    def totals(self) -> dict[str, int]:
        """Per-outcome totals keyed in outcome-set order."""
        return dict(self._totals)

    def stake(self, participant: str, outcome: str) -> int:
        return self._stakes.get((participant, outcome), 0)

    def stakes(self, participant: str) -> dict[str, int]:
        """*participant*'s stake on every outcome (zeros included)."""
        return {label: self.stake(participant, label) for label in self._outcomes}

    def total_staked_by(self, participant: str) -> int:
        return sum(self.stakes(participant).values())

    def participants(self) -> list[str]:
        """Every participant with at least one bet, in first-bet order."""
        return list(self._by_participant)

    # -- validation -----------------------------------------------------------

    def check_invariants(self) -> list[str]:
        """Check the ledger's accounting identities.

        Returns a (possibly empty) list of human-readable issue descriptions.
        """
        issues: list[str] = []
        if sum(self._totals.values()) != self._total_pool:
            issues.append(
                f"per-outcome totals {self._totals} do not sum to "
                f"total pool {self._total_pool}"
            )
        recomputed: dict[str, int] = {label: 0 for label in self._outcomes}
        for bet in self._bets:
            if bet.amount <= 0:
                issues.append(f"bet #{bet.sequence} has non-positive amount {bet.amount}")
            if bet.outcome not in self._outcomes:
                issues.append(f"bet #{bet.sequence} has unknown outcome {bet.outcome!r}")
                continue
            recomputed[bet.outcome] += bet.amount
        if recomputed != self._totals:
            issues.append(
                f"running totals {self._totals} diverge from bet record {recomputed}"
            )
        return issues

    # -- dunder protocols -----------------------------------------------------

    def __iter__(self) -> Iterator[Bet]:
        return iter(list(self._bets))

    def __len__(self) -> int:
        return len(self._bets)

    def __repr__(self) -> str:
        return f"BetLedger(bets={len(self._bets)}, total_pool={self._total_pool})"


def stakes_on(ledger: BetLedger, outcome: str) -> Mapping[str, int]:
    """Map every participant with a non-zero stake on *outcome* to that stake."""
    result: dict[str, int] = {}
    for participant in ledger.participants():
        amount = ledger.stake(participant, outcome)
        if amount:
            result[participant] = amount
    return result
