"""WebSocket hub pushing refreshed rate fragments to dashboard clients.

Each client connects with the same ``historic`` flag as the page it came
from, so a refresh never un-hides (or hides) rows the viewer toggled.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

log = structlog.get_logger(__name__)

router = APIRouter()


class DashboardHub:
    """Tracks WebSocket clients and their historic-rows preference."""

    def __init__(self) -> None:
        self.connections: dict[int, tuple[WebSocket, bool]] = {}

    async def connect(self, ws: WebSocket, show_historic: bool = False) -> None:
        await ws.accept()
        self.connections[id(ws)] = (ws, show_historic)
        log.info(
            "dashboard_ws_connected",
            total=len(self.connections),
            historic=show_historic,
        )

    def disconnect(self, ws: WebSocket) -> None:
        self.connections.pop(id(ws), None)
        log.info("dashboard_ws_disconnected", total=len(self.connections))

    async def broadcast(self, render: Callable[[bool], str]) -> None:
        """Render once per historic preference and send to matching clients.

        Clients whose send fails are dropped.
        """
        payloads: dict[bool, str] = {}
        for ws, show_historic in list(self.connections.values()):
            if show_historic not in payloads:
                payloads[show_historic] = render(show_historic)
            try:
                await ws.send_text(payloads[show_historic])
            except Exception:
                self.connections.pop(id(ws), None)
                log.warning("dashboard_ws_broadcast_error", remaining=len(self.connections))


hub = DashboardHub()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, historic: bool = False) -> None:
    """WebSocket endpoint for periodic rate board pushes."""
    ws_hub: DashboardHub = websocket.app.state.hub
    await ws_hub.connect(websocket, show_historic=historic)
    try:
        while True:
            # Consume messages to keep connection alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        ws_hub.disconnect(websocket)
