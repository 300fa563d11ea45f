"""Parimutuel settlement arithmetic.

Pure functions over a ``BetLedger``; nothing here mutates state or is cached,
so every value reflects the ledger at the moment of the call.

The formula::

    net_pool     = gross_pool * (10000 - fee_bps) // 10000
    fee          = gross_pool - net_pool
    reward(p, o) = stake(p, o) * net_pool // total_for(o)     (0 if total_for(o) == 0)

All arithmetic is on Python integers in base units.  Each quotient multiplies
before it divides and truncates toward zero, so results are exact and
reproducible; the remainder lost to truncation (at most one unit per winner)
stays in escrow.
"""

from __future__ import annotations

from .exceptions import ValidationError
from .ledger import BetLedger, stakes_on
from .values import SettlementSummary

BPS_DENOMINATOR = 10_000


def _check_fee(fee_bps: int) -> None:
    if not (0 <= fee_bps <= BPS_DENOMINATOR):
        raise ValidationError(
            f"fee_bps must be in [0, {BPS_DENOMINATOR}], got {fee_bps}",
            field="fee_bps",
        )


def net_pool(gross_pool: int, fee_bps: int) -> int:
    """The part of *gross_pool* left for winners after the fee is withheld."""
    _check_fee(fee_bps)
    return gross_pool * (BPS_DENOMINATOR - fee_bps) // BPS_DENOMINATOR


def fee_amount(gross_pool: int, fee_bps: int) -> int:
    """The withheld fee.  ``fee_amount + net_pool == gross_pool`` exactly."""
    return gross_pool - net_pool(gross_pool, fee_bps)


def parimutuel_share(stake: int, outcome_total: int, pool: int) -> int:
    """Proportional share of *pool* for *stake* out of *outcome_total*."""
    if stake <= 0 or outcome_total <= 0 or pool <= 0:
        return 0
    return stake * pool // outcome_total


def compute_reward(
    ledger: BetLedger,
    participant: str,
    outcome: str,
    fee_bps: int,
) -> int:
    """Reward *participant* would receive if *outcome* were the winner."""
    return parimutuel_share(
        ledger.stake(participant, outcome),
        ledger.total_for(outcome),
        net_pool(ledger.total_pool(), fee_bps),
    )


def compute_refund(ledger: BetLedger, participant: str) -> int:
    """Everything *participant* staked, across all outcomes (no fee)."""
    return ledger.total_staked_by(participant)


def payout_table(ledger: BetLedger, outcome: str, fee_bps: int) -> dict[str, int]:
    """Reward per participant for *outcome*, omitting zero rewards.

    Participants appear in first-bet order.
    """
    pool = net_pool(ledger.total_pool(), fee_bps)
    outcome_total = ledger.total_for(outcome)
    table: dict[str, int] = {}
    for participant, stake in stakes_on(ledger, outcome).items():
        reward = parimutuel_share(stake, outcome_total, pool)
        if reward:
            table[participant] = reward
    return table


def summarize(ledger: BetLedger, winner: str, fee_bps: int) -> SettlementSummary:
    """Pool-level settlement figures for *winner*."""
    gross = ledger.total_pool()
    net = net_pool(gross, fee_bps)
    return SettlementSummary(
        winner=winner,
        gross_pool=gross,
        fee=gross - net,
        net_pool=net,
        winning_total=ledger.total_for(winner),
        distributable=sum(payout_table(ledger, winner, fee_bps).values()),
    )
