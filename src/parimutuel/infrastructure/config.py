"""Configuration dataclasses for the parimutuel settlement engine.

A config is a plain frozen ``dataclass`` with a ``validate()`` method that
raises ``ValidationError`` (a ``ValueError``) on invalid combinations.  Frozen
configs can be shared between a market and its resolver without risk of
silent mutation.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from parimutuel.domain.exceptions import ValidationError
from parimutuel.domain.settlement import BPS_DENOMINATOR
from parimutuel.domain.values import OutcomeSet

_STRING_FIELDS = ("market_id", "denom", "label", "admin", "treasury", "escrow_account")


# ===================================================================== #
#  Market Configuration                                                  #
# ===================================================================== #

@dataclass(frozen=True)
class MarketConfig:
    """Everything fixed at market instantiation.

    Attributes
    ----------
    market_id:
        Unique identifier; also the ``source_id`` of emitted events.
    denom:
        Denomination of the staked asset.
    outcomes:
        Two or three distinct outcome labels.
    fee_bps:
        Fee withheld from the gross pool, in basis points (0-10000).
    label:
        Free-form human-readable name of the event.
    cutoff_time:
        Host timestamp at (and after) which bets are rejected.  ``None``
        accepts bets until resolution.
    admin:
        Identity allowed to cancel, move the cutoff, collect fees, and
        resolve through the embedded resolver.
    treasury:
        Account receiving collected fees.  Empty disables fee collection.
    escrow_account:
        Account holding staked funds.  Defaults to ``market:<market_id>``.
    """

    market_id: str
    denom: str
    outcomes: tuple[str, ...]
    fee_bps: int = 0
    label: str = ""
    cutoff_time: float | None = None
    admin: str = ""
    treasury: str = ""
    escrow_account: str = ""

    def __post_init__(self) -> None:
        # frozen=True prevents normal assignment; coerce lists from JSON/YAML
        if isinstance(self.outcomes, list):
            object.__setattr__(self, "outcomes", tuple(self.outcomes))
        if not self.escrow_account and isinstance(self.market_id, str):
            object.__setattr__(self, "escrow_account", f"market:{self.market_id}")

    @property
    def outcome_set(self) -> OutcomeSet:
        return OutcomeSet(self.outcomes)

    def validate(self) -> None:
        """Raise ``ValidationError`` if any field is out of valid range."""
        for name in _STRING_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValidationError(
                    f"{name} must be a string, got {type(value).__name__}", field=name
                )
        if not isinstance(self.outcomes, tuple):
            raise ValidationError(
                f"outcomes must be a list of labels, got {type(self.outcomes).__name__}",
                field="outcomes",
            )
        if not self.market_id:
            raise ValidationError("market_id must not be empty", field="market_id")
        if not self.denom:
            raise ValidationError("denom must not be empty", field="denom")
        OutcomeSet(self.outcomes)
        if isinstance(self.fee_bps, bool) or not isinstance(self.fee_bps, int):
            raise ValidationError(
                f"fee_bps must be an integer, got {self.fee_bps!r}", field="fee_bps"
            )
        if not (0 <= self.fee_bps <= BPS_DENOMINATOR):
            raise ValidationError(
                f"fee_bps must be in [0, {BPS_DENOMINATOR}], got {self.fee_bps}",
                field="fee_bps",
            )
        if self.cutoff_time is not None and (
            isinstance(self.cutoff_time, bool)
            or not isinstance(self.cutoff_time, (int, float))
        ):
            raise ValidationError(
                f"cutoff_time must be a number, got {self.cutoff_time!r}",
                field="cutoff_time",
            )
        if self.cutoff_time is not None and self.cutoff_time < 0:
            raise ValidationError(
                f"cutoff_time must be >= 0, got {self.cutoff_time}",
                field="cutoff_time",
            )
        if self.escrow_account in (self.admin, self.treasury):
            raise ValidationError(
                "escrow_account must differ from admin and treasury",
                field="escrow_account",
            )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["outcomes"] = list(self.outcomes)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MarketConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        try:
            cfg = cls(**filtered)
        except TypeError as exc:
            raise ValidationError(f"incomplete market config: {exc}") from exc
        cfg.validate()
        return cfg


# ===================================================================== #
#  Loaders                                                               #
# ===================================================================== #

def _require_mapping(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValidationError("top-level config must be a mapping")
    return raw


def load_config_from_json(json_str: str) -> MarketConfig:
    """Parse a JSON object into a validated ``MarketConfig``."""
    return MarketConfig.from_dict(_require_mapping(json.loads(json_str)))


def load_config_from_yaml(yaml_str: str) -> MarketConfig:
    """Parse a YAML mapping into a validated ``MarketConfig``."""
    return MarketConfig.from_dict(_require_mapping(yaml.safe_load(yaml_str)))


def load_config_file(path: str | Path) -> MarketConfig:
    """Load a config from a ``.json``, ``.yaml`` or ``.yml`` file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return load_config_from_yaml(text)
    return load_config_from_json(text)
