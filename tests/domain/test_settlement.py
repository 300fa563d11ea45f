"""Tests for the settlement arithmetic."""

from __future__ import annotations

import random

import pytest

from parimutuel.domain.exceptions import ValidationError
from parimutuel.domain.ledger import BetLedger, stakes_on
from parimutuel.domain.settlement import (
    BPS_DENOMINATOR,
    compute_refund,
    compute_reward,
    fee_amount,
    net_pool,
    parimutuel_share,
    payout_table,
    summarize,
)
from parimutuel.domain.values import OutcomeSet

UNIT = 10**18


class TestPoolSplit:
    @pytest.mark.parametrize(
        "gross, fee_bps, expected_net",
        [
            (1_000_000, 0, 1_000_000),
            (1_000_000, 250, 975_000),
            (1_000_000, BPS_DENOMINATOR, 0),
            (999, 1, 998),  # 999 * 9999 // 10000 = 998.9001
            (0, 500, 0),
        ],
    )
    def test_net_pool(self, gross: int, fee_bps: int, expected_net: int) -> None:
        assert net_pool(gross, fee_bps) == expected_net
        assert fee_amount(gross, fee_bps) == gross - expected_net

    @pytest.mark.parametrize("fee_bps", [-1, BPS_DENOMINATOR + 1])
    def test_fee_out_of_range(self, fee_bps: int) -> None:
        with pytest.raises(ValidationError, match="fee_bps"):
            net_pool(100, fee_bps)

    def test_truncation_favours_the_fee(self) -> None:
        # 7 * 9997 / 10000 = 6.9979 -> net 6, fee 1
        assert net_pool(7, 3) == 6
        assert fee_amount(7, 3) == 1


class TestShare:
    def test_proportional(self) -> None:
        assert parimutuel_share(5, 8, 21) == 13

    @pytest.mark.parametrize(
        "stake, total, pool", [(0, 8, 21), (5, 0, 21), (5, 8, 0)]
    )
    def test_zero_cases(self, stake: int, total: int, pool: int) -> None:
        assert parimutuel_share(stake, total, pool) == 0

    def test_multiplies_before_dividing(self) -> None:
        # dividing first would give 1 * (10 // 3) = 3
        assert parimutuel_share(2, 3, 10) == 6


class TestWorkedExample:
    """Five bets, 21 tokens total, 18 decimals, no fee."""

    def test_team1_wins(self, scenario_ledger: BetLedger) -> None:
        assert compute_reward(scenario_ledger, "p1", "team1", 0) == 13_125_000_000_000_000_000
        assert compute_reward(scenario_ledger, "p3", "team1", 0) == 7_875_000_000_000_000_000
        assert compute_reward(scenario_ledger, "p2", "team1", 0) == 0

    def test_team2_forecast(self, scenario_ledger: BetLedger) -> None:
        assert compute_reward(scenario_ledger, "p2", "team2", 0) == 16_153_846_153_846_153_846
        assert compute_reward(scenario_ledger, "p1", "team2", 0) == 4_846_153_846_153_846_153

    def test_payout_table_omits_zero_rewards(self, scenario_ledger: BetLedger) -> None:
        assert payout_table(scenario_ledger, "team1", 0) == {
            "p1": 13_125_000_000_000_000_000,
            "p3": 7_875_000_000_000_000_000,
        }

    def test_summary_team1_exact(self, scenario_ledger: BetLedger) -> None:
        summary = summarize(scenario_ledger, "team1", 0)
        assert summary.gross_pool == 21 * UNIT
        assert summary.fee == 0
        assert summary.net_pool == 21 * UNIT
        assert summary.winning_total == 8 * UNIT
        assert summary.distributable == 21 * UNIT
        assert summary.dust == 0

    def test_summary_team2_leaves_dust(self, scenario_ledger: BetLedger) -> None:
        summary = summarize(scenario_ledger, "team2", 0)
        assert summary.distributable == 21 * UNIT - 1
        assert summary.dust == 1

    def test_with_fee(self, scenario_ledger: BetLedger) -> None:
        summary = summarize(scenario_ledger, "team1", 500)
        assert summary.fee == 21 * UNIT * 500 // BPS_DENOMINATOR
        assert summary.fee + summary.net_pool == summary.gross_pool
        assert compute_reward(scenario_ledger, "p1", "team1", 500) == (
            5 * UNIT * summary.net_pool // (8 * UNIT)
        )

    def test_refund_ignores_fee(self, scenario_ledger: BetLedger) -> None:
        assert compute_refund(scenario_ledger, "p1") == 8 * UNIT
        assert compute_refund(scenario_ledger, "p2") == 10 * UNIT
        assert compute_refund(scenario_ledger, "nobody") == 0


class TestNobodyOnWinner:
    def test_everything_zero(self) -> None:
        ledger = BetLedger(OutcomeSet.of("home", "away"))
        ledger.append("alice", 10, "home")
        assert compute_reward(ledger, "alice", "away", 0) == 0
        assert payout_table(ledger, "away", 0) == {}
        summary = summarize(ledger, "away", 0)
        assert summary.distributable == 0
        assert summary.dust == 10


class TestConservation:
    """Rewards never exceed the net pool and lose at most one unit per winner."""

    @pytest.mark.parametrize("seed", range(20))
    def test_random_markets(self, seed: int) -> None:
        rng = random.Random(seed)
        labels = ("a", "b", "c")[: rng.choice((2, 3))]
        ledger = BetLedger(OutcomeSet(labels))
        for _ in range(rng.randint(1, 40)):
            ledger.append(
                f"p{rng.randint(0, 9)}",
                rng.randint(1, 10**24),
                rng.choice(labels),
            )
        fee_bps = rng.randint(0, BPS_DENOMINATOR)
        for winner in labels:
            table = payout_table(ledger, winner, fee_bps)
            net = net_pool(ledger.total_pool(), fee_bps)
            paid = sum(table.values())
            assert paid <= net
            stakers = stakes_on(ledger, winner)
            if stakers:
                # each staker loses strictly less than one unit
                assert net - paid < len(stakers)
            for participant, reward in table.items():
                assert reward == compute_reward(ledger, participant, winner, fee_bps)


class TestNoLosers:
    def test_everyone_on_winner_gets_stake_back(self) -> None:
        ledger = BetLedger(OutcomeSet.of("home", "away"))
        ledger.append("alice", 3 * UNIT, "home")
        ledger.append("bob", 7 * UNIT, "home")
        assert payout_table(ledger, "home", 0) == {"alice": 3 * UNIT, "bob": 7 * UNIT}
