"""Asset transfer capability.

The engine never holds balances itself: every movement of value goes through
an ``AssetLedger`` supplied by the host.  ``InMemoryAssetLedger`` is the
reference implementation used by the simulator, the examples, and the tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

from parimutuel.domain.exceptions import BalanceError

logger = logging.getLogger(__name__)


class AssetLedger(ABC):
    """Fungible balance ledger for a single denomination.

    Implementations must apply each call completely or not at all and signal
    every failure with ``BalanceError``.
    """

    denom: str = ""

    @abstractmethod
    def debit(self, account: str, amount: int) -> None:
        """Remove *amount* from *account*."""

    @abstractmethod
    def credit(self, account: str, amount: int) -> None:
        """Add *amount* to *account*."""

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Current balance of *account* (0 for unknown accounts)."""


def transfer(assets: AssetLedger, source: str, destination: str, amount: int) -> None:
    """Move *amount* from *source* to *destination* as one step.

    If the credit leg fails after the debit succeeded, the debit is reversed
    before the original ``BalanceError`` is re-raised.
    """
    assets.debit(source, amount)
    try:
        assets.credit(destination, amount)
    except BalanceError:
        assets.credit(source, amount)
        raise


class InMemoryAssetLedger(AssetLedger):
    """Dict-backed ledger.

    Accounts can be frozen to make every transfer touching them fail, which
    is how tests exercise rollback paths.
    """

    def __init__(self, denom: str = "", balances: Mapping[str, int] | None = None) -> None:
        self.denom = denom
        self._balances: dict[str, int] = {}
        self._frozen: set[str] = set()
        for account, amount in (balances or {}).items():
            if amount:
                self.mint(account, amount)

    # -- administration -------------------------------------------------------

    def mint(self, account: str, amount: int) -> None:
        """Create *amount* new units in *account*."""
        self._check_amount(account, amount)
        self._balances[account] = self._balances.get(account, 0) + amount

    def freeze(self, account: str) -> None:
        self._frozen.add(account)

    def unfreeze(self, account: str) -> None:
        self._frozen.discard(account)

    @property
    def total_supply(self) -> int:
        return sum(self._balances.values())

    # -- AssetLedger ----------------------------------------------------------

    def debit(self, account: str, amount: int) -> None:
        self._check_amount(account, amount)
        self._check_frozen(account, amount)
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise BalanceError(
                f"insufficient balance: {account!r} has {balance}, needs {amount}",
                account=account,
                amount=amount,
                details={"balance": balance, "denom": self.denom},
            )
        self._balances[account] = balance - amount
        logger.debug("debit %s %d %s", account, amount, self.denom)

    def credit(self, account: str, amount: int) -> None:
        self._check_amount(account, amount)
        self._check_frozen(account, amount)
        self._balances[account] = self._balances.get(account, 0) + amount
        logger.debug("credit %s %d %s", account, amount, self.denom)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    # -- internal helpers -----------------------------------------------------

    def _check_amount(self, account: str, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise BalanceError(
                f"transfer amount must be a positive integer, got {amount!r}",
                account=account,
            )

    def _check_frozen(self, account: str, amount: int) -> None:
        if account in self._frozen:
            raise BalanceError(
                f"account {account!r} is frozen",
                account=account,
                amount=amount,
            )

    def __repr__(self) -> str:
        return f"InMemoryAssetLedger(denom={self.denom!r}, accounts={len(self._balances)})"
