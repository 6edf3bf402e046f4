"""Page routes serving the main dashboard HTML template."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from satparity.dashboard.view import board_context

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def dashboard_index(request: Request, historic: bool = False) -> HTMLResponse:
    """Main page: one card per currency, sorted by sat price, plus the timeline."""
    templates: Jinja2Templates = request.app.state.templates
    context = board_context(
        request.app.state.rate_monitor,
        show_historic=historic,
        window_years=request.app.state.historic_window_years,
    )
    return templates.TemplateResponse(request, "index.html", context)
