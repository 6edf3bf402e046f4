"""Human-scale wording for parity dates."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from satparity.models import ParityInfo, ParityKind, to_timestamp_ms

_MS_PER_DAY = Decimal("86400000")
_DAYS_PER_MONTH = Decimal("30")
_DAYS_PER_YEAR = Decimal("365")


def _round_half_up(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_time_distance(date: datetime, now: datetime) -> str:
    """Return the absolute distance between two dates as days, months or years.

    Under 30 days the distance is in days, under 365 days in 30-day months,
    otherwise in 365-day years, each rounded to the nearest whole unit.
    """
    diff_days = Decimal(abs(to_timestamp_ms(date) - to_timestamp_ms(now))) / _MS_PER_DAY

    if diff_days < _DAYS_PER_MONTH:
        return _plural(_round_half_up(diff_days), "day")
    if diff_days < _DAYS_PER_YEAR:
        return _plural(_round_half_up(diff_days / _DAYS_PER_MONTH), "month")
    return _plural(_round_half_up(diff_days / _DAYS_PER_YEAR), "year")


def parity_label(info: ParityInfo, now: datetime) -> str:
    """Card caption for a parity estimate."""
    if info.kind is ParityKind.PAST:
        return f"Hit parity {format_time_distance(info.date, now)} ago"
    if info.kind is ParityKind.FUTURE:
        return f"Expected parity in {format_time_distance(info.date, now)}"
    return "Just hit parity!"
