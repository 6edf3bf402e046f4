"""View-model helpers shared by the page routes, JSON API and update loop."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from satparity.curve.store import CurveStore
from satparity.models import CurrencyRate
from satparity.parity.formatting import parity_label
from satparity.rates.board import parity_tier, visible_rates
from satparity.rates.monitor import RateMonitor


def rate_row(rate: CurrencyRate, now: datetime, curve: CurveStore) -> dict[str, Any]:
    """Flatten a CurrencyRate into the fields templates and JSON clients use."""
    return {
        "code": rate.code,
        "name": rate.name,
        "rate": rate.rate,
        "sat_price": rate.sat_price,
        "parity_kind": rate.parity.kind.value,
        "parity_date": rate.parity.date,
        "label": parity_label(rate.parity, now),
        "tier": parity_tier(rate, now).value,
        "has_sat_parity": rate.has_sat_parity,
        "timeline_position": curve.timeline_position(rate.parity.date),
    }


def board_context(
    monitor: RateMonitor, show_historic: bool, window_years: int
) -> dict[str, Any]:
    """Gather everything the dashboard templates render.

    ``loading`` is true until the first fetch completes; ``error`` carries the
    user-facing fetch failure message, if any.
    """
    curve = monitor.estimator.curve
    board = monitor.board
    now = monitor.now()

    rows: list[dict[str, Any]] = []
    if board is not None:
        shown = visible_rates(board.rates, now, show_historic, window_years)
        rows = [rate_row(r, now, curve) for r in shown]

    return {
        "rows": rows,
        "board": board,
        "loading": board is None and monitor.last_error is None,
        "error": monitor.last_error,
        "show_historic": show_historic,
        "today_position": curve.timeline_position(now),
        "curve_points": [
            {"year": p.date.year, "position": curve.timeline_position(p.date)}
            for p in curve.points()
        ],
        "policy": monitor.estimator.policy.name,
    }
