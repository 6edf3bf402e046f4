"""Tests for CurveStore validation, bracket iteration and timeline positions."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from satparity.curve.store import DEFAULT_CONTROL_POINTS, CurveStore, default_curve
from satparity.exceptions import CurveConfigurationError
from satparity.models import ControlPoint


def _cp(year: int, price: str, month: int = 1, day: int = 1) -> ControlPoint:
    return ControlPoint(
        date=datetime(year, month, day, tzinfo=timezone.utc),
        reference_price=Decimal(price),
    )


class TestDefaultCurve:
    def test_has_eleven_points_spanning_2010_to_2046(self) -> None:
        curve = default_curve()
        assert len(curve) == 11
        assert curve.first.date == datetime(2010, 1, 1, tzinfo=timezone.utc)
        assert curve.first.reference_price == Decimal("0.09")
        assert curve.last.date == datetime(2046, 1, 1, tzinfo=timezone.utc)
        assert curve.last.reference_price == Decimal("10000000000")

    def test_points_preserve_order(self) -> None:
        assert default_curve().points() == DEFAULT_CONTROL_POINTS

    def test_brackets_are_adjacent_pairs(self) -> None:
        curve = default_curve()
        pairs = list(curve.brackets())
        assert len(pairs) == 10
        assert pairs[4][0].date == datetime(2024, 11, 8, tzinfo=timezone.utc)
        assert pairs[4][1].reference_price == Decimal("300000")


class TestValidation:
    def test_rejects_empty(self) -> None:
        with pytest.raises(CurveConfigurationError):
            CurveStore([])

    def test_rejects_single_point(self) -> None:
        with pytest.raises(CurveConfigurationError, match="at least two"):
            CurveStore([_cp(2010, "1")])

    def test_rejects_non_increasing_dates(self) -> None:
        with pytest.raises(CurveConfigurationError, match="dates"):
            CurveStore([_cp(2013, "1"), _cp(2010, "2")])

    def test_rejects_duplicate_dates(self) -> None:
        with pytest.raises(CurveConfigurationError, match="dates"):
            CurveStore([_cp(2013, "1"), _cp(2013, "2")])

    def test_rejects_equal_adjacent_prices(self) -> None:
        with pytest.raises(CurveConfigurationError, match="prices"):
            CurveStore([_cp(2010, "5"), _cp(2013, "5")])

    def test_rejects_decreasing_prices(self) -> None:
        with pytest.raises(CurveConfigurationError, match="prices"):
            CurveStore([_cp(2010, "5"), _cp(2013, "4")])

    @pytest.mark.parametrize("price", ["0", "-1", "NaN", "Infinity"])
    def test_rejects_invalid_prices(self, price: str) -> None:
        with pytest.raises(CurveConfigurationError, match="invalid price"):
            CurveStore([_cp(2010, price), _cp(2013, "10")])

    def test_rejects_naive_dates(self) -> None:
        naive = ControlPoint(date=datetime(2010, 1, 1), reference_price=Decimal("1"))
        with pytest.raises(CurveConfigurationError, match="naive"):
            CurveStore([naive, _cp(2013, "2")])

    def test_points_cannot_be_mutated_through_store(self) -> None:
        source = [_cp(2010, "1"), _cp(2013, "2")]
        curve = CurveStore(source)
        source.append(_cp(2020, "3"))
        assert len(curve.points()) == 2


class TestTimelinePosition:
    def test_endpoints(self) -> None:
        curve = CurveStore([_cp(2010, "1"), _cp(2020, "2")])
        assert curve.timeline_position(curve.first.date) == Decimal("0")
        assert curve.timeline_position(curve.last.date) == Decimal("100")

    def test_clamps_outside_span(self) -> None:
        curve = CurveStore([_cp(2010, "1"), _cp(2020, "2")])
        assert curve.timeline_position(datetime(2000, 1, 1, tzinfo=timezone.utc)) == 0
        assert curve.timeline_position(datetime(2050, 1, 1, tzinfo=timezone.utc)) == 100

    def test_midpoint(self) -> None:
        curve = CurveStore([
            _cp(2010, "1"),
            ControlPoint(date=datetime(2010, 1, 3, tzinfo=timezone.utc), reference_price=Decimal("2")),
        ])
        mid = datetime(2010, 1, 2, tzinfo=timezone.utc)
        assert curve.timeline_position(mid) == Decimal("50")
