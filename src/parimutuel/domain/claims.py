"""One-time payout gate.

``ClaimTracker`` remembers which participants have already been paid.  It is
the only place a ``ClaimRecord`` is created, and a record once written is never
replaced.
"""

from __future__ import annotations

from collections.abc import Iterator

from .exceptions import StateError
from .values import ClaimRecord


class ClaimTracker:
    """Per-participant claimed flags and paid amounts."""

    def __init__(self) -> None:
        self._records: dict[str, ClaimRecord] = {}

    def has_claimed(self, participant: str) -> bool:
        record = self._records.get(participant)
        return record is not None and record.claimed

    def get_claim(self, participant: str) -> ClaimRecord | None:
        return self._records.get(participant)

    def ensure_unclaimed(self, participant: str) -> None:
        """Raise ``StateError`` if *participant* has already been paid."""
        if self.has_claimed(participant):
            raise StateError(
                "already claimed",
                details={"participant": participant},
            )

    def record(self, participant: str, amount: int, receiver: str = "") -> ClaimRecord:
        """Mark *participant* as paid *amount*.  Raises if already claimed."""
        self.ensure_unclaimed(participant)
        claim = ClaimRecord(participant=participant, amount=amount, receiver=receiver)
        self._records[participant] = claim
        return claim

    @property
    def total_paid(self) -> int:
        return sum(r.amount for r in self._records.values())

    def __iter__(self) -> Iterator[ClaimRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ClaimTracker(claims={len(self._records)}, total_paid={self.total_paid})"
