"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union


@dataclass(frozen=True)
class RawQuote:
    """Unscaled oracle reading for a single symbol."""

    symbol: str
    description: str
    decimals: int
    raw_price: int
    updated_at: int


@dataclass(frozen=True)
class NormalizedQuote:
    """Successful, display-ready quote."""

    symbol: str
    description: str
    normalized_price: str
    updated_at_iso: str
    raw_price: int
    decimals: int

    @property
    def ok(self) -> bool:
        return True

    @property
    def price(self) -> Decimal:
        return Decimal(self.normalized_price)


@dataclass(frozen=True)
class UsdPrice:
    """Quote from the fixed-scale USD call (value in cents)."""

    symbol: str
    price_in_usd: int
    formatted: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchError:
    """Isolated failure for one symbol of a batch."""

    symbol: str
    message: str
    kind: str = "unknown"

    @property
    def ok(self) -> bool:
        return False


QueryOutcome = Union[NormalizedQuote, FetchError]
UsdOutcome = Union[UsdPrice, FetchError]
