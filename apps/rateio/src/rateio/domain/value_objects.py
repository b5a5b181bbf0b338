"""Domain value objects for split requests and their results."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal

from rateio.domain.money import exact_sum, from_units, to_units


@dataclass(frozen=True, slots=True)
class SplitRequest:
    """Amount to divide among ``recipients`` at ``scale`` fractional digits."""

    amount: Decimal
    recipients: int
    scale: int

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise TypeError("Split amount must be a Decimal")
        if isinstance(self.recipients, bool) or not isinstance(self.recipients, int):
            raise TypeError("Recipients must be an integer")
        if isinstance(self.scale, bool) or not isinstance(self.scale, int):
            raise TypeError("Scale must be an integer")

    def is_well_formed(self) -> bool:
        """Return whether recipients and scale satisfy the request invariants."""
        return self.recipients >= 1 and self.scale >= 0

    def with_changes(
        self,
        *,
        amount: Decimal | None = None,
        recipients: int | None = None,
        scale: int | None = None,
    ) -> SplitRequest:
        """Return a copy with the given fields replaced."""
        return SplitRequest(
            amount=self.amount if amount is None else amount,
            recipients=self.recipients if recipients is None else recipients,
            scale=self.scale if scale is None else scale,
        )

    def key(self) -> tuple[str, int, int]:
        """Return a hashable identity that distinguishes 1.0 from 1.00."""
        return (str(self.amount), self.recipients, self.scale)

    def describe(self) -> str:
        """Render a compact human-readable form."""
        return f"{self.amount} / {self.recipients} @ scale {self.scale}"


@dataclass(frozen=True, slots=True)
class ShareSet:
    """Ordered shares, one per recipient index."""

    shares: tuple[Decimal, ...]
    scale: int

    @classmethod
    def from_units(cls, units: list[int], scale: int) -> ShareSet:
        """Build a share set from per-recipient unit counts."""
        shares = tuple(from_units(value, scale) for value in units)
        return cls(shares=shares, scale=scale)

    def __len__(self) -> int:
        return len(self.shares)

    def __iter__(self) -> Iterator[Decimal]:
        return iter(self.shares)

    def __getitem__(self, index: int) -> Decimal:
        return self.shares[index]

    def total(self) -> Decimal:
        """Return the exact sum of all shares."""
        return exact_sum(self.shares)

    def units(self) -> list[int]:
        """Return each share as a count of smallest units at scale."""
        return [to_units(share, self.scale) for share in self.shares]
