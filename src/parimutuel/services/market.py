"""Market state machine.

``Market`` is the aggregate root of one parimutuel event.  It gates bet intake
while the market is open, hands resolution to its ``Resolver``, computes
rewards from the ``BetLedger``, and releases each participant's payout exactly
once through the ``ClaimTracker``.

Every state-changing method follows the same shape:

1. validate inputs and state (raise before touching anything),
2. move funds through the ``AssetLedger`` (which either applies the transfer
   or raises ``BalanceError`` with nothing changed),
3. commit the in-memory change,
4. log and publish a domain event.

A failure at step 1 or 2 therefore leaves the market exactly as it was.
"""

from __future__ import annotations

import logging

from parimutuel.domain.claims import ClaimTracker
from parimutuel.domain.enums import MarketStatus
from parimutuel.domain.events import (
    BetPlaced,
    CutoffUpdated,
    DomainEvent,
    FeesCollected,
    MarketCancelled,
    MarketResolved,
    RewardsClaimed,
)
from parimutuel.domain.exceptions import AuthorizationError, StateError, ValidationError
from parimutuel.domain.ledger import BetLedger
from parimutuel.domain.resolver import AdminResolver, Resolver
from parimutuel.domain.settlement import (
    compute_refund,
    compute_reward,
    fee_amount,
    summarize,
)
from parimutuel.domain.values import Bet, ClaimRecord, OutcomeSet, SettlementSummary
from parimutuel.infrastructure.assets import AssetLedger, transfer
from parimutuel.infrastructure.config import MarketConfig
from parimutuel.infrastructure.event_bus import EventBus

logger = logging.getLogger(__name__)


class Market:
    """One parimutuel market: Open -> Settled, or Open -> Cancelled.

    Parameters
    ----------
    config:
        Instantiation parameters; validated on construction.
    assets:
        Transfer capability for the market's denomination.
    resolver:
        Source of the true outcome.  Defaults to an ``AdminResolver`` whose
        authority is ``config.admin``.  Its outcome set must equal the
        market's.
    event_bus:
        Optional bus receiving an event after every committed transition.
    """

    def __init__(
        self,
        config: MarketConfig,
        assets: AssetLedger,
        resolver: Resolver | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        config.validate()
        outcomes = config.outcome_set
        if assets.denom and assets.denom != config.denom:
            raise ValidationError(
                f"asset ledger denom {assets.denom!r} does not match market denom "
                f"{config.denom!r}",
                field="denom",
            )
        if resolver is None:
            resolver = AdminResolver(outcomes, config.admin)
        elif resolver.outcomes != outcomes:
            raise ValidationError(
                f"resolver outcomes {list(resolver.outcomes)} do not match market "
                f"outcomes {list(outcomes)}",
                field="outcomes",
            )
        self._config = config
        self._outcomes = outcomes
        self._assets = assets
        self._resolver = resolver
        self._event_bus = event_bus
        self._ledger = BetLedger(outcomes)
        self._claims = ClaimTracker()
        self._cutoff = config.cutoff_time
        self._cancelled = False
        self._fees_collected = 0
        resolver.add_listener(self._on_resolved)

    # -- properties -----------------------------------------------------------

    @property
    def market_id(self) -> str:
        return self._config.market_id

    @property
    def config(self) -> MarketConfig:
        return self._config

    @property
    def outcomes(self) -> OutcomeSet:
        return self._outcomes

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    @property
    def escrow_account(self) -> str:
        return self._config.escrow_account

    @property
    def fee_bps(self) -> int:
        return self._config.fee_bps

    @property
    def cutoff_time(self) -> float | None:
        return self._cutoff

    @property
    def status(self) -> MarketStatus:
        # derived, so an oracle written directly by its authority still settles us
        if self._cancelled:
            return MarketStatus.CANCELLED
        if self._resolver.has_winner():
            return MarketStatus.SETTLED
        return MarketStatus.OPEN

    @property
    def winner(self) -> str | None:
        """The resolved outcome; ``None`` unless the market is settled."""
        if self.status is not MarketStatus.SETTLED:
            return None
        return self._resolver.get_winner()

    @property
    def fees_collected(self) -> int:
        return self._fees_collected

    @property
    def ledger(self) -> BetLedger:
        return self._ledger

    @property
    def claims(self) -> ClaimTracker:
        return self._claims

    # -- betting --------------------------------------------------------------

    def place_bet(
        self,
        caller: str,
        amount: int,
        outcome: str,
        *,
        now: float | None = None,
        receiver: str | None = None,
    ) -> Bet:
        """Stake *amount* from *caller* on *outcome*.

        The bet is owned by *receiver* when given, otherwise by *caller*;
        the funds always come from *caller*.  *now* is the host's current
        timestamp and is required when a cutoff is configured.
        """
        _require_identity(caller, "caller")
        participant = receiver or caller
        self._outcomes.require(outcome)
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError(
                f"bet amount must be an integer, got {type(amount).__name__}",
                field="amount",
            )
        if amount <= 0:
            raise ValidationError("the bet must be more than 0", field="amount")
        self._require_open("place bet")
        self._require_before_cutoff(now)

        transfer(self._assets, caller, self.escrow_account, amount)
        bet = self._ledger.append(
            participant, amount, outcome, placed_by=caller, placed_at=now
        )

        logger.info(
            "Market %s: bet #%d %s %d %s on %r",
            self.market_id, bet.sequence, participant, amount, self._config.denom, outcome,
        )
        self._publish(BetPlaced(
            source_id=self.market_id,
            participant=participant,
            placed_by=caller,
            outcome=outcome,
            amount=amount,
            sequence=bet.sequence,
            total_for_outcome=self._ledger.total_for(outcome),
            total_pool=self._ledger.total_pool(),
        ))
        return bet

    def update_cutoff(self, caller: str, cutoff: float | None) -> None:
        """Move (or clear, with ``None``) the bet-acceptance cutoff."""
        self._require_admin(caller)
        self._require_open("update cutoff")
        if cutoff is not None and (
            isinstance(cutoff, bool) or not isinstance(cutoff, (int, float))
        ):
            raise ValidationError(f"cutoff must be a number, got {cutoff!r}", field="cutoff")
        if cutoff is not None and cutoff < 0:
            raise ValidationError(f"cutoff must be >= 0, got {cutoff}", field="cutoff")
        previous, self._cutoff = self._cutoff, cutoff
        logger.info("Market %s: cutoff %s -> %s", self.market_id, previous, cutoff)
        self._publish(CutoffUpdated(
            source_id=self.market_id, previous_cutoff=previous, cutoff=cutoff
        ))

    # -- resolution -----------------------------------------------------------

    def resolve(self, caller: str, outcome: str) -> str:
        """Fix *outcome* as the winner and settle the market."""
        self._require_open("resolve")
        self._resolver.set_winner(caller, outcome)
        return outcome

    def _on_resolved(self, outcome: str, caller: str) -> None:
        # fires for writes made through resolve() and straight to a shared resolver
        if self._cancelled:
            return
        logger.info(
            "Market %s: resolved to %r (pool %d, on winner %d)",
            self.market_id, outcome, self._ledger.total_pool(),
            self._ledger.total_for(outcome),
        )
        self._publish(MarketResolved(
            source_id=self.market_id,
            winner=outcome,
            resolved_by=caller,
            total_pool=self._ledger.total_pool(),
            total_for_winner=self._ledger.total_for(outcome),
        ))

    def cancel(self, caller: str) -> None:
        """Cancel the event; every stake becomes refundable through claims."""
        self._require_admin(caller)
        self._require_open("cancel")
        self._cancelled = True
        logger.info("Market %s: cancelled by %s", self.market_id, caller)
        self._publish(MarketCancelled(
            source_id=self.market_id,
            cancelled_by=caller,
            total_pool=self._ledger.total_pool(),
        ))

    # -- reads ----------------------------------------------------------------

    def get_bets(self, participant: str) -> tuple[Bet, ...]:
        return self._ledger.get_bets(participant)

    def get_stakes(self, participant: str) -> dict[str, int]:
        return self._ledger.stakes(participant)

    def total_pool(self) -> int:
        return self._ledger.total_pool()

    def total_for(self, outcome: str) -> int:
        return self._ledger.total_for(outcome)

    def get_rewards(self, participant: str) -> int:
        """What *participant* can claim now.

        The parimutuel reward on the winning outcome once settled, or the full
        refund of their stakes once cancelled.  Raises ``StateError`` while open.
        """
        status = self.status
        if status is MarketStatus.OPEN:
            raise StateError("market not settled", status=status.value)
        if status is MarketStatus.CANCELLED:
            return compute_refund(self._ledger, participant)
        return compute_reward(
            self._ledger, participant, self._resolver.get_winner(), self.fee_bps
        )

    def get_potential_rewards(self, participant: str, outcome: str) -> int:
        """Forecast the reward if *outcome* wins, from the current bets."""
        self._outcomes.require(outcome)
        return compute_reward(self._ledger, participant, outcome, self.fee_bps)

    def settlement_summary(self) -> SettlementSummary:
        if self.status is not MarketStatus.SETTLED:
            raise StateError("market not settled", status=self.status.value)
        return summarize(self._ledger, self._resolver.get_winner(), self.fee_bps)

    def has_claimed(self, participant: str) -> bool:
        return self._claims.has_claimed(participant)

    def get_claim(self, participant: str) -> ClaimRecord | None:
        return self._claims.get_claim(participant)

    # -- payouts --------------------------------------------------------------

    def claim_rewards(self, participant: str, *, receiver: str | None = None) -> int:
        """Pay *participant*'s reward (or refund) out of escrow, once.

        Funds go to *receiver* when given.  Returns the amount paid.
        """
        _require_identity(participant, "participant")
        self._claims.ensure_unclaimed(participant)
        amount = self.get_rewards(participant)
        if amount == 0:
            raise ValidationError(
                "no rewards to claim",
                field="participant",
                details={"participant": participant},
            )
        destination = receiver or participant
        transfer(self._assets, self.escrow_account, destination, amount)
        self._claims.record(participant, amount, receiver=destination)

        refund = self.status is MarketStatus.CANCELLED
        logger.info(
            "Market %s: %s claimed %d %s%s",
            self.market_id, participant, amount, self._config.denom,
            " (refund)" if refund else "",
        )
        self._publish(RewardsClaimed(
            source_id=self.market_id,
            participant=participant,
            receiver=destination,
            amount=amount,
            refund=refund,
        ))
        return amount

    def collect_fees(self, caller: str) -> int:
        """Send the withheld fee to the treasury.  Admin only, once."""
        self._require_admin(caller)
        status = self.status
        if status is not MarketStatus.SETTLED:
            raise StateError(
                "market is cancelled" if status is MarketStatus.CANCELLED
                else "market not settled",
                status=status.value,
            )
        if not self._config.treasury:
            raise ValidationError("no treasury configured", field="treasury")
        if self._fees_collected:
            raise StateError("fees already collected", status=status.value)
        amount = fee_amount(self._ledger.total_pool(), self.fee_bps)
        if amount == 0:
            raise ValidationError("no fees to collect", field="fee_bps")
        transfer(self._assets, self.escrow_account, self._config.treasury, amount)
        self._fees_collected = amount
        logger.info(
            "Market %s: collected %d %s in fees", self.market_id, amount, self._config.denom
        )
        self._publish(FeesCollected(
            source_id=self.market_id, treasury=self._config.treasury, amount=amount
        ))
        return amount

    # -- validation -----------------------------------------------------------

    def check_invariants(self) -> list[str]:
        """Check accounting identities across ledger, claims, and escrow.

        Returns a (possibly empty) list of human-readable issue descriptions.
        """
        issues = self._ledger.check_invariants()
        owed = self._ledger.total_pool() - self._claims.total_paid - self._fees_collected
        if owed < 0:
            issues.append(f"paid out {-owed} more than was staked")
        escrow = self._assets.balance_of(self.escrow_account)
        if escrow < owed:
            issues.append(f"escrow holds {escrow}, but {owed} is still owed")
        if self.status is MarketStatus.SETTLED:
            summary = self.settlement_summary()
            if summary.distributable > summary.net_pool:
                issues.append(
                    f"rewards {summary.distributable} exceed net pool {summary.net_pool}"
                )
        return issues

    # -- internal helpers -----------------------------------------------------

    def _require_open(self, action: str) -> None:
        status = self.status
        if status is MarketStatus.OPEN:
            return
        logger.debug("Market %s: %s rejected, status=%s", self.market_id, action, status.value)
        message = (
            "market is already settled" if status is MarketStatus.SETTLED
            else "market is cancelled"
        )
        raise StateError(message, status=status.value, details={"action": action})

    def _require_before_cutoff(self, now: float | None) -> None:
        if self._cutoff is None:
            return
        if now is None:
            raise ValidationError(
                "a timestamp is required while a bet cutoff is configured", field="now"
            )
        if now >= self._cutoff:
            logger.debug(
                "Market %s: bet at %s rejected, cutoff %s", self.market_id, now, self._cutoff
            )
            raise StateError(
                "bets no longer accepted",
                status=self.status.value,
                details={"now": now, "cutoff": self._cutoff},
            )

    def _require_admin(self, caller: str) -> None:
        if not self._config.admin or caller != self._config.admin:
            raise AuthorizationError(
                f"{caller!r} is not the admin of market {self.market_id}", caller=caller
            )

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)

    def __repr__(self) -> str:
        return (
            f"Market(id={self.market_id!r}, status={self.status.value}, "
            f"pool={self._ledger.total_pool()}, bets={len(self._ledger)})"
        )


def _require_identity(value: str, name: str) -> None:
    if not value:
        raise ValidationError(f"{name} must not be empty", field=name)
