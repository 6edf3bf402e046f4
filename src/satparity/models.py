"""Shared data models for the sat parity tracker.

All monetary values use Decimal. Timestamps used for interpolation are
integer Unix milliseconds.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum

SATS_PER_BTC = Decimal("100000000")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def to_timestamp_ms(value: datetime) -> int:
    """Convert an aware datetime to integer Unix milliseconds (floored)."""
    return (value - _EPOCH) // _ONE_MS


def from_timestamp_ms(value: int) -> datetime:
    """Convert integer Unix milliseconds to a UTC datetime."""
    return _EPOCH + timedelta(milliseconds=value)


class ParityKind(str, Enum):
    """Where a currency stands relative to sat parity."""

    PAST = "past"
    FUTURE = "future"
    NOW = "now"


@dataclass(frozen=True)
class ControlPoint:
    """A historical or projected (date, USD per BTC) anchor of the price curve."""

    date: datetime
    reference_price: Decimal

    @property
    def timestamp_ms(self) -> int:
        return to_timestamp_ms(self.date)


@dataclass(frozen=True)
class RateSnapshot:
    """Live BTC rate observation for a single currency."""

    currency_code: str
    units_per_btc: Decimal  # units of the currency one BTC buys
    btc_usd_rate: Decimal  # USD price of one BTC

    @property
    def sat_price(self) -> Decimal:
        """Value of one sat expressed in units of the currency."""
        return self.units_per_btc / SATS_PER_BTC


@dataclass(frozen=True)
class ParityInfo:
    """Classified parity outcome for one snapshot."""

    kind: ParityKind
    date: datetime


@dataclass
class RateBatch:
    """One fetch of BTC rates: units per BTC for each currency plus BTC/USD."""

    btc_usd_rate: Decimal
    rates: dict[str, Decimal]
    fetched_at: float = field(default_factory=time.time)


@dataclass
class CurrencyRate:
    """Render-side row: one currency with its sat price and parity estimate."""

    code: str
    name: str
    rate: Decimal
    sat_price: Decimal
    parity: ParityInfo

    @property
    def has_sat_parity(self) -> bool:
        return self.sat_price >= 1
