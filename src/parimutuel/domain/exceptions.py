"""Domain exceptions for the parimutuel settlement engine.

All engine errors inherit from ``ParimutuelError`` so callers can catch the
whole family with a single ``except`` clause.  Each concrete error also derives
from the closest built-in exception, so generic handlers (``except ValueError``)
keep working.
"""

from __future__ import annotations

from typing import Any


class ParimutuelError(Exception):
    """Base exception for all settlement engine errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class ValidationError(ParimutuelError, ValueError):
    """Raised when an input is malformed.

    Examples: empty or duplicate outcome labels, a non-positive bet amount,
    an outcome outside the market's outcome set, or a claim whose computed
    reward is zero.
    """

    def __init__(
        self,
        message: str = "Invalid input",
        field: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class AuthorizationError(ParimutuelError, PermissionError):
    """Raised when a caller lacks the authority for a privileged operation."""

    def __init__(
        self,
        message: str = "Unauthorized",
        caller: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.caller = caller


class StateError(ParimutuelError, RuntimeError):
    """Raised when an operation is not valid in the market's current state.

    Covers betting after settlement or past the cutoff, resolving twice,
    claiming before settlement, and claiming twice.
    """

    def __init__(
        self,
        message: str = "Invalid state",
        status: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status = status


class BalanceError(ParimutuelError):
    """Raised by an asset ledger when a transfer cannot be applied.

    The engine never catches this; it propagates to the caller unmodified
    and aborts the enclosing operation.
    """

    def __init__(
        self,
        message: str = "Transfer rejected",
        account: str = "",
        amount: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.account = account
        self.amount = amount
