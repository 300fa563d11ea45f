"""Serialization utilities for the parimutuel settlement engine.

Provides ``to_dict`` / ``from_dict`` conversion for value objects and configs,
a read-only ``market_snapshot`` of a live market, and JSON / YAML helpers on
top of them.

- Every ``to_dict`` output is JSON- and YAML-serializable.
- Amounts stay integers (base units); nothing is converted to float.
- ``from_dict`` reconstructors go through the normal constructors, so
  malformed data raises ``ValidationError`` exactly as direct construction
  would.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

from parimutuel.domain.values import Bet, ClaimRecord, OutcomeSet, SettlementSummary
from parimutuel.infrastructure.config import MarketConfig

if TYPE_CHECKING:
    from parimutuel.services.market import Market


# =========================================================================== #
#  Value objects                                                               #
# =========================================================================== #

def outcome_set_to_dict(outcomes: OutcomeSet) -> dict[str, Any]:
    return {"labels": list(outcomes.labels)}


def outcome_set_from_dict(data: dict[str, Any]) -> OutcomeSet:
    return OutcomeSet(tuple(str(label) for label in data["labels"]))


def bet_to_dict(bet: Bet) -> dict[str, Any]:
    return {
        "participant": bet.participant,
        "amount": bet.amount,
        "outcome": bet.outcome,
        "sequence": bet.sequence,
        "placed_by": bet.placed_by,
        "placed_at": bet.placed_at,
    }


def bet_from_dict(data: dict[str, Any]) -> Bet:
    placed_at = data.get("placed_at")
    return Bet(
        participant=str(data["participant"]),
        amount=int(data["amount"]),
        outcome=str(data["outcome"]),
        sequence=int(data["sequence"]),
        placed_by=str(data.get("placed_by", "")),
        placed_at=float(placed_at) if placed_at is not None else None,
    )


def claim_record_to_dict(record: ClaimRecord) -> dict[str, Any]:
    return {
        "participant": record.participant,
        "amount": record.amount,
        "receiver": record.receiver,
        "claimed": record.claimed,
    }


def claim_record_from_dict(data: dict[str, Any]) -> ClaimRecord:
    return ClaimRecord(
        participant=str(data["participant"]),
        amount=int(data["amount"]),
        receiver=str(data.get("receiver", "")),
        claimed=bool(data.get("claimed", True)),
    )


def settlement_summary_to_dict(summary: SettlementSummary) -> dict[str, Any]:
    return {
        "winner": summary.winner,
        "gross_pool": summary.gross_pool,
        "fee": summary.fee,
        "net_pool": summary.net_pool,
        "winning_total": summary.winning_total,
        "distributable": summary.distributable,
        "dust": summary.dust,
    }


def settlement_summary_from_dict(data: dict[str, Any]) -> SettlementSummary:
    return SettlementSummary(
        winner=str(data["winner"]),
        gross_pool=int(data["gross_pool"]),
        fee=int(data["fee"]),
        net_pool=int(data["net_pool"]),
        winning_total=int(data["winning_total"]),
        distributable=int(data["distributable"]),
    )


def config_to_dict(cfg: MarketConfig) -> dict[str, Any]:
    return cfg.to_dict()


# =========================================================================== #
#  Market snapshot                                                             #
# =========================================================================== #

def market_snapshot(market: Market) -> dict[str, Any]:
    """Point-in-time view of *market*: config, status, totals, bets, claims.

    Settled markets also carry the settlement summary and each participant's
    reward.
    """
    participants = market.ledger.participants()
    snapshot: dict[str, Any] = {
        "config": config_to_dict(market.config),
        "status": market.status.value,
        "winner": market.winner,
        "resolver": market.resolver.kind,
        "cutoff_time": market.cutoff_time,
        "total_pool": market.total_pool(),
        "totals": market.ledger.totals(),
        "bets": [bet_to_dict(b) for b in market.ledger],
        "claims": [claim_record_to_dict(c) for c in market.claims],
        "fees_collected": market.fees_collected,
    }
    if market.winner is not None:
        snapshot["settlement"] = settlement_summary_to_dict(market.settlement_summary())
    if market.status.is_terminal:
        snapshot["rewards"] = {p: market.get_rewards(p) for p in participants}
    return snapshot


# =========================================================================== #
#  Unified serializer                                                          #
# =========================================================================== #

# Maps type -> (to_dict_fn, from_dict_fn)
_SERIALIZERS: dict[type, tuple[Any, Any]] = {
    OutcomeSet: (outcome_set_to_dict, outcome_set_from_dict),
    Bet: (bet_to_dict, bet_from_dict),
    ClaimRecord: (claim_record_to_dict, claim_record_from_dict),
    SettlementSummary: (settlement_summary_to_dict, settlement_summary_from_dict),
    MarketConfig: (config_to_dict, MarketConfig.from_dict),
}


def serialize(obj: Any) -> dict[str, Any]:
    """Serialize a known value object, config, or ``Market`` to a dict.

    Raises ``TypeError`` for unsupported types.
    """
    ser = _SERIALIZERS.get(type(obj))
    if ser is not None:
        to_fn, _ = ser
        return to_fn(obj)
    # local import: services depends on this module
    from parimutuel.services.market import Market

    if isinstance(obj, Market):
        return market_snapshot(obj)
    raise TypeError(f"Cannot serialize object of type {type(obj).__name__}")


def deserialize(data: dict[str, Any], target_type: type) -> Any:
    """Deserialize a dict into *target_type*."""
    ser = _SERIALIZERS.get(target_type)
    if ser is None:
        raise TypeError(f"No deserializer registered for {target_type.__name__}")
    _, from_fn = ser
    return from_fn(data)


# =========================================================================== #
#  JSON / YAML helpers                                                         #
# =========================================================================== #

def to_json(obj: Any, *, indent: int | None = 2) -> str:
    """Serialize a supported object to a JSON string."""
    return json.dumps(serialize(obj), indent=indent)


def from_json(json_str: str, target_type: type) -> Any:
    """Deserialize a JSON string into *target_type*."""
    return deserialize(json.loads(json_str), target_type)


def to_yaml(obj: Any) -> str:
    """Serialize a supported object to a YAML string."""
    return yaml.safe_dump(serialize(obj), default_flow_style=False, sort_keys=False)


def from_yaml(yaml_str: str, target_type: type) -> Any:
    """Deserialize a YAML string into *target_type*."""
    return deserialize(yaml.safe_load(yaml_str), target_type)
