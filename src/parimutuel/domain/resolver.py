"""Outcome resolvers.

A resolver holds a market's outcome set and accepts exactly one write of the
true outcome from a designated authority.  ``Market`` only talks to the
abstract ``Resolver`` interface, so the two shapes below are interchangeable:

* ``OracleResolver`` -- a standalone component owned by an external reporting
  authority.  Several markets may observe the same oracle; writing to it
  settles all of them.
* ``AdminResolver`` -- resolution folded into the market itself, authorised by
  the market's admin identity.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from .exceptions import AuthorizationError, StateError
from .values import OutcomeSet

logger = logging.getLogger(__name__)

# called as listener(outcome, caller) once the winner is stored
ResolutionListener = Callable[[str, str], None]


class Resolver(ABC):
    """Single-write register of the true outcome."""

    def __init__(self, outcomes: OutcomeSet, authority: str) -> None:
        self._outcomes = outcomes
        self._authority = authority
        self._winner: str | None = None
        self._listeners: list[ResolutionListener] = []

    @property
    def outcomes(self) -> OutcomeSet:
        return self._outcomes

    @property
    def authority(self) -> str:
        return self._authority

    def get_winner(self) -> str | None:
        """The resolved outcome, or ``None`` before resolution."""
        return self._winner

    def has_winner(self) -> bool:
        return self._winner is not None

    def add_listener(self, listener: ResolutionListener) -> None:
        """Call *listener* after the winner is recorded.

        Lets every market observing a shared resolver react to a write made
        directly by the authority.
        """
        self._listeners.append(listener)

    def set_winner(self, caller: str, outcome: str) -> None:
        """Record *outcome* as the true result.

        Raises ``AuthorizationError`` if *caller* is not the authority,
        ``ValidationError`` if *outcome* is not in the outcome set, and
        ``StateError`` if a winner was already recorded.
        """
        self._authorize(caller)
        self._outcomes.require(outcome)
        if self._winner is not None:
            raise StateError(
                f"winner already set to {self._winner!r}",
                status="settled",
                details={"winner": self._winner, "attempted": outcome},
            )
        self._winner = outcome
        logger.info("%s: winner set to %r by %s", self.kind, outcome, caller)
        for listener in list(self._listeners):
            listener(outcome, caller)

    @property
    @abstractmethod
    def kind(self) -> str:
        """Short identifier used in logs and serialized snapshots."""

    def _authorize(self, caller: str) -> None:
        if not self._authority or caller != self._authority:
            raise AuthorizationError(
                f"{caller!r} is not authorized to resolve this market",
                caller=caller,
            )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(outcomes={list(self._outcomes)}, "
            f"winner={self._winner!r})"
        )


class OracleResolver(Resolver):
    """Standalone oracle owned by an external reporting authority."""

    @property
    def kind(self) -> str:
        return "oracle"


class AdminResolver(Resolver):
    """Resolution embedded in a market, authorised by the market admin."""

    @property
    def kind(self) -> str:
        return "admin"
