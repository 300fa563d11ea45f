"""Tests for the single-write outcome resolvers."""

from __future__ import annotations

import logging

import pytest

from parimutuel.domain.exceptions import AuthorizationError, StateError, ValidationError
from parimutuel.domain.resolver import AdminResolver, OracleResolver, Resolver
from parimutuel.domain.values import OutcomeSet

OUTCOMES = OutcomeSet.of("FNC", "G2")


@pytest.fixture(params=[AdminResolver, OracleResolver], ids=["admin", "oracle"])
def resolver(request: pytest.FixtureRequest) -> Resolver:
    return request.param(OUTCOMES, "owner")


class TestResolver:
    def test_starts_unresolved(self, resolver: Resolver) -> None:
        assert resolver.get_winner() is None
        assert resolver.has_winner() is False
        assert resolver.outcomes == OUTCOMES
        assert resolver.authority == "owner"

    def test_set_winner(self, resolver: Resolver) -> None:
        resolver.set_winner("owner", "G2")
        assert resolver.get_winner() == "G2"
        assert resolver.has_winner() is True

    def test_unauthorized(self, resolver: Resolver) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            resolver.set_winner("mallory", "G2")
        assert exc_info.value.caller == "mallory"
        assert resolver.get_winner() is None

    def test_unauthorized_checked_before_outcome(self, resolver: Resolver) -> None:
        with pytest.raises(AuthorizationError):
            resolver.set_winner("mallory", "TSM")

    @pytest.mark.parametrize("outcome", ["", "TSM"])
    def test_invalid_outcome(self, resolver: Resolver, outcome: str) -> None:
        with pytest.raises(ValidationError):
            resolver.set_winner("owner", outcome)
        assert resolver.has_winner() is False

    def test_single_write(self, resolver: Resolver) -> None:
        resolver.set_winner("owner", "FNC")
        with pytest.raises(StateError, match="already set"):
            resolver.set_winner("owner", "G2")
        with pytest.raises(StateError):
            resolver.set_winner("owner", "FNC")
        assert resolver.get_winner() == "FNC"

    def test_logs_resolution(
        self, resolver: Resolver, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="parimutuel.domain.resolver"):
            resolver.set_winner("owner", "FNC")
        assert "winner set to 'FNC'" in caplog.text


class TestListeners:
    def test_called_once_after_write(self, resolver: Resolver) -> None:
        calls: list[tuple[str, str]] = []
        resolver.add_listener(lambda outcome, caller: calls.append((outcome, caller)))
        with pytest.raises(AuthorizationError):
            resolver.set_winner("mallory", "G2")
        resolver.set_winner("owner", "G2")
        with pytest.raises(StateError):
            resolver.set_winner("owner", "FNC")
        assert calls == [("G2", "owner")]

    def test_listener_sees_stored_winner(self, resolver: Resolver) -> None:
        seen: list[str | None] = []
        resolver.add_listener(lambda outcome, caller: seen.append(resolver.get_winner()))
        resolver.set_winner("owner", "FNC")
        assert seen == ["FNC"]


class TestKinds:
    def test_kind_labels(self) -> None:
        assert AdminResolver(OUTCOMES, "admin").kind == "admin"
        assert OracleResolver(OUTCOMES, "oracle").kind == "oracle"

    def test_empty_authority_rejects_everyone(self) -> None:
        resolver = AdminResolver(OUTCOMES, "")
        with pytest.raises(AuthorizationError):
            resolver.set_winner("", "FNC")

    def test_abstract(self) -> None:
        with pytest.raises(TypeError):
            Resolver(OUTCOMES, "owner")  # type: ignore[abstract]

    def test_repr(self) -> None:
        resolver = OracleResolver(OUTCOMES, "oracle")
        assert repr(resolver) == "OracleResolver(outcomes=['FNC', 'G2'], winner=None)"
