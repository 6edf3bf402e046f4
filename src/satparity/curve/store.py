"""Reference BTC/USD price curve used to date sat parity crossings.

The curve mixes observed prices (up to late 2024) with speculative
projections out to 2046. It must be monotone in both date and price so
that any target price is bracketed by at most one pair of adjacent points.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from decimal import Decimal

from satparity.exceptions import CurveConfigurationError
from satparity.models import ControlPoint, to_timestamp_ms

_HUNDRED = Decimal("100")


def _point(year: int, month: int, day: int, price: str) -> ControlPoint:
    return ControlPoint(
        date=datetime(year, month, day, tzinfo=timezone.utc),
        reference_price=Decimal(price),
    )


DEFAULT_CONTROL_POINTS: tuple[ControlPoint, ...] = (
    _point(2010, 1, 1, "0.09"),
    _point(2013, 1, 1, "1238"),
    _point(2018, 1, 1, "20000"),
    _point(2021, 1, 1, "68000"),
    _point(2024, 11, 8, "75000"),
    # projected
    _point(2025, 1, 1, "300000"),
    _point(2029, 1, 1, "3000000"),
    _point(2034, 1, 1, "10000000"),
    _point(2038, 1, 1, "100000000"),
    _point(2042, 1, 1, "1000000000"),
    _point(2046, 1, 1, "10000000000"),
)


class CurveStore:
    """Immutable, validated sequence of control points.

    Raises CurveConfigurationError on construction if the points cannot
    support bracket search: fewer than two points, dates not strictly
    increasing, non-positive prices, or prices not strictly increasing.
    """

    def __init__(self, points: Iterable[ControlPoint]) -> None:
        self._points = tuple(points)
        self._validate()

    def _validate(self) -> None:
        if len(self._points) < 2:
            raise CurveConfigurationError(
                f"curve needs at least two control points, got {len(self._points)}"
            )

        for point in self._points:
            if point.date.tzinfo is None:
                raise CurveConfigurationError(f"control point {point.date} is naive")
            price = point.reference_price
            if not price.is_finite() or price <= 0:
                raise CurveConfigurationError(
                    f"control point {point.date:%Y-%m-%d} has invalid price {price}"
                )

        for current, nxt in zip(self._points, self._points[1:]):
            if nxt.date <= current.date:
                raise CurveConfigurationError(
                    f"control point dates not increasing at {nxt.date:%Y-%m-%d}"
                )
            if nxt.reference_price <= current.reference_price:
                raise CurveConfigurationError(
                    f"control point prices not increasing at {nxt.date:%Y-%m-%d}"
                )

    def points(self) -> tuple[ControlPoint, ...]:
        """Return the control points in time order."""
        return self._points

    @property
    def first(self) -> ControlPoint:
        return self._points[0]

    @property
    def last(self) -> ControlPoint:
        return self._points[-1]

    def brackets(self) -> Iterator[tuple[ControlPoint, ControlPoint]]:
        """Yield consecutive (current, next) pairs in time order."""
        return zip(self._points, self._points[1:])

    def timeline_position(self, date: datetime) -> Decimal:
        """Position of a date along the curve's time span, as a 0-100 percentage.

        Dates outside the span are clamped to the ends.
        """
        start = self.first.timestamp_ms
        span = self.last.timestamp_ms - start
        position = Decimal(to_timestamp_ms(date) - start) / Decimal(span) * _HUNDRED
        return min(max(position, Decimal("0")), _HUNDRED)

    def __len__(self) -> int:
        return len(self._points)


def default_curve() -> CurveStore:
    """Return the curve built from DEFAULT_CONTROL_POINTS."""
    return CurveStore(DEFAULT_CONTROL_POINTS)
