"""Periodic WebSocket update loop for real-time dashboard refresh.

Renders the rate partials with the monitor's latest board and broadcasts
them as OOB-swap HTML fragments to all connected WebSocket clients.
"""

from __future__ import annotations

import asyncio

import structlog
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from satparity.dashboard.view import board_context

log = structlog.get_logger(__name__)

_PARTIALS = (
    ("partials/status.html", "status-panel"),
    ("partials/timeline.html", "timeline-panel"),
    ("partials/rate_cards.html", "rate-cards-panel"),
)


def render_fragments(app: FastAPI, show_historic: bool) -> str:
    """Render every dashboard partial wrapped in an hx-swap-oob div."""
    templates: Jinja2Templates = app.state.templates
    context = board_context(
        app.state.rate_monitor,
        show_historic=show_historic,
        window_years=app.state.historic_window_years,
    )

    fragments = []
    for template_name, panel_id in _PARTIALS:
        html = templates.env.get_template(template_name).render(**context)
        fragments.append(f'<div id="{panel_id}" hx-swap-oob="true">{html}</div>')
    return "\n".join(fragments)


async def dashboard_update_loop(app: FastAPI) -> None:
    """Periodically render and broadcast dashboard partials via WebSocket.

    Runs until the application shuts down. Skips rendering while nobody is
    connected.
    """
    update_interval = getattr(app.state, "update_interval", 5)

    log.info("dashboard_update_loop_started", interval=update_interval)

    while True:
        try:
            await asyncio.sleep(update_interval)

            hub = app.state.hub
            if not hub.connections:
                continue

            await hub.broadcast(lambda show_historic: render_fragments(app, show_historic))

        except asyncio.CancelledError:
            log.info("dashboard_update_loop_cancelled")
            break
        except Exception:
            log.warning("dashboard_update_loop_error", exc_info=True)
            await asyncio.sleep(1)
