"""Tests for MarketConfig and the config loaders."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from parimutuel.domain.exceptions import ValidationError
from parimutuel.domain.values import OutcomeSet
from parimutuel.infrastructure.config import (
    MarketConfig,
    load_config_file,
    load_config_from_json,
    load_config_from_yaml,
)


def _config(**overrides: object) -> MarketConfig:
    data: dict[str, object] = {
        "market_id": "m1",
        "denom": "uusd",
        "outcomes": ("home", "away"),
    }
    data.update(overrides)
    return MarketConfig(**data)  # type: ignore[arg-type]


class TestMarketConfig:
    def test_defaults(self) -> None:
        cfg = _config()
        cfg.validate()
        assert cfg.fee_bps == 0
        assert cfg.cutoff_time is None
        assert cfg.escrow_account == "market:m1"
        assert cfg.outcome_set == OutcomeSet.of("home", "away")

    def test_list_outcomes_coerced(self) -> None:
        assert _config(outcomes=["a", "b", "c"]).outcomes == ("a", "b", "c")

    def test_frozen(self) -> None:
        cfg = _config()
        with pytest.raises(AttributeError):
            cfg.fee_bps = 10  # type: ignore[misc]

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"market_id": ""}, "market_id"),
            ({"denom": ""}, "denom"),
            ({"outcomes": ("only",)}, "outcomes"),
            ({"outcomes": ("a", "a")}, "outcomes"),
            ({"fee_bps": -1}, "fee_bps"),
            ({"fee_bps": 10_001}, "fee_bps"),
            ({"fee_bps": 2.5}, "fee_bps"),
            ({"cutoff_time": -1}, "cutoff_time"),
            ({"cutoff_time": "soon"}, "cutoff_time"),
            ({"cutoff_time": True}, "cutoff_time"),
            ({"market_id": 7}, "market_id"),
            ({"denom": ["u"]}, "denom"),
            ({"admin": 1}, "admin"),
            ({"treasury": None}, "treasury"),
            ({"outcomes": "AB"}, "outcomes"),
            ({"outcomes": 2}, "outcomes"),
            ({"admin": "vault", "escrow_account": "vault"}, "escrow_account"),
            ({"treasury": "market:m1"}, "escrow_account"),
        ],
    )
    def test_validate_rejects(self, overrides: dict[str, object], field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _config(**overrides).validate()
        assert exc_info.value.field == field

    def test_round_trip_dict(self) -> None:
        cfg = _config(fee_bps=250, cutoff_time=1_700_000_000, admin="admin", label="x")
        data = cfg.to_dict()
        assert data["outcomes"] == ["home", "away"]
        assert MarketConfig.from_dict(data) == cfg

    def test_from_dict_ignores_unknown_keys(self) -> None:
        cfg = MarketConfig.from_dict(
            {"market_id": "m1", "denom": "uusd", "outcomes": ["a", "b"], "colour": "red"}
        )
        assert cfg.market_id == "m1"

    def test_from_dict_missing_field(self) -> None:
        with pytest.raises(ValidationError, match="incomplete"):
            MarketConfig.from_dict({"market_id": "m1"})

    def test_from_dict_validates(self) -> None:
        with pytest.raises(ValidationError):
            MarketConfig.from_dict({"market_id": "m1", "denom": "u", "outcomes": ["a"]})


class TestLoaders:
    def test_json(self) -> None:
        cfg = load_config_from_json(
            json.dumps({"market_id": "m1", "denom": "u", "outcomes": ["a", "b"], "fee_bps": 5})
        )
        assert cfg.fee_bps == 5

    def test_yaml(self) -> None:
        cfg = load_config_from_yaml(
            "market_id: m1\ndenom: u\noutcomes: [home, away, draw]\nadmin: root\n"
        )
        assert cfg.outcomes == ("home", "away", "draw")
        assert cfg.admin == "root"

    @pytest.mark.parametrize(
        "line, field",
        [
            ("outcomes: AB", "outcomes"),
            ("outcomes: [a, b]\ncutoff_time: soon", "cutoff_time"),
            ("outcomes: [a, b]\nadmin: 42", "admin"),
        ],
    )
    def test_yaml_wrong_types(self, line: str, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            load_config_from_yaml(f"market_id: m\ndenom: t\n{line}\n")
        assert exc_info.value.field == field

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ValidationError, match="mapping"):
            load_config_from_yaml("- a\n- b\n")

    @pytest.mark.parametrize("suffix", [".json", ".yaml", ".yml"])
    def test_file_by_suffix(self, tmp_path: Path, suffix: str) -> None:
        path = tmp_path / f"market{suffix}"
        # JSON is valid YAML, so one payload serves every suffix
        path.write_text(
            json.dumps({"market_id": "m9", "denom": "u", "outcomes": ["a", "b"]}),
            encoding="utf-8",
        )
        assert load_config_file(path).market_id == "m9"
