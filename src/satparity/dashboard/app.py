"""FastAPI dashboard application factory with Jinja2 templates and WebSocket hub."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from satparity.dashboard.routes import api, pages, ws
from satparity.dashboard.routes.ws import hub

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _format_sat_price(value: Decimal | None) -> str:
    """Sat price with four decimals (e.g., '0.0068')."""
    if value is None:
        return "N/A"
    return f"{value:.4f}"


def _format_rate(value: Decimal | None) -> str:
    """Units per BTC with thousands separators, trailing zeros dropped."""
    if value is None:
        return "N/A"
    text = f"{value:,.8f}".rstrip("0").rstrip(".")
    return text


def _format_date(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%b %d, %Y")


def _format_percent(value: Any) -> str:
    """Render a Decimal percentage for CSS (e.g., '42.50%')."""
    return f"{Decimal(value):.2f}%"


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logic.

    Returns:
        Configured FastAPI application with templates, WebSocket hub, and routes.
    """
    app = FastAPI(
        title="Bitcoin Purchasing Power Tracker",
        lifespan=lifespan,
    )

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["sat_price"] = _format_sat_price
    templates.env.filters["rate"] = _format_rate
    templates.env.filters["short_date"] = _format_date
    templates.env.filters["percent"] = _format_percent
    app.state.templates = templates

    app.state.hub = hub
    app.state.historic_window_years = 3

    app.include_router(pages.router)
    app.include_router(api.router, prefix="/api")
    app.include_router(ws.router)

    return app
