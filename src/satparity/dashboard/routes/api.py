"""JSON API endpoints: parity rows, the reference curve and refresh status."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from satparity.dashboard.view import board_context

log = structlog.get_logger(__name__)

router = APIRouter()


def _jsonable(obj: Any) -> Any:
    """Recursively convert Decimal and datetime values for JSON serialization."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_jsonable(item) for item in obj]
    return obj


@router.get("/rates")
async def get_rates(request: Request, historic: bool = False) -> JSONResponse:
    """Parity rows for every currency, sorted by sat price descending.

    Returns 503 with the fetch error while no board is available.
    """
    monitor = request.app.state.rate_monitor
    if monitor.board is None:
        return JSONResponse(
            status_code=503,
            content={"error": monitor.last_error or "Rates not loaded yet"},
        )

    context = board_context(
        monitor,
        show_historic=historic,
        window_years=request.app.state.historic_window_years,
    )
    return JSONResponse(content=_jsonable(context["rows"]))


@router.get("/curve")
async def get_curve(request: Request) -> JSONResponse:
    """Control points of the reference BTC/USD curve, oldest first."""
    curve = request.app.state.rate_monitor.estimator.curve
    return JSONResponse(content=[
        {"date": p.date.isoformat(), "price": str(p.reference_price)}
        for p in curve.points()
    ])


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Last refresh time, current error (if any) and currency count."""
    monitor = request.app.state.rate_monitor
    board = monitor.board
    last_refresh = (
        datetime.fromtimestamp(board.fetched_at, tz=timezone.utc).isoformat()
        if board is not None
        else None
    )
    return JSONResponse(content={
        "last_refresh": last_refresh,
        "error": monitor.last_error,
        "currencies": len(board.rates) if board is not None else 0,
        "skipped": board.skipped if board is not None else [],
        "btc_usd_rate": str(board.btc_usd_rate) if board is not None else None,
        "policy": monitor.estimator.policy.name,
    })
