"""Entry point for the sat parity tracker.

Wires the rate source, parity estimator and rate monitor together and
serves the FastAPI dashboard with uvicorn. Rate polling and the WebSocket
update loop run as background tasks inside the dashboard's lifespan.

Component wiring order (in build_components):
1. CurveStore (reference price curve)
2. ParityPolicy (banded or legacy, from settings)
3. ParityEstimator
4. YadioRateSource (httpx)
5. RateMonitor (periodic refresh)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from satparity.config import AppSettings, ParitySettings
from satparity.curve.store import default_curve
from satparity.logging import get_logger, setup_logging
from satparity.parity.estimator import ParityEstimator, ParityPolicy
from satparity.rates.client import YadioRateSource
from satparity.rates.monitor import RateMonitor


def build_policy(settings: ParitySettings) -> ParityPolicy:
    """Select the near-parity policy revision configured in settings."""
    if settings.policy == "legacy":
        return ParityPolicy.legacy(settings.legacy_tolerance)
    return ParityPolicy(band_high=settings.band_high)


def build_components(settings: AppSettings) -> dict[str, Any]:
    """Build the estimator, rate source and monitor from settings."""
    logger = get_logger("satparity.main")

    curve = default_curve()
    policy = build_policy(settings.parity)
    estimator = ParityEstimator(curve, policy)

    # The two policy revisions classify borderline currencies differently
    logger.info(
        "parity_policy_selected",
        policy=policy.name,
        band_low=str(policy.band_low),
        band_high=str(policy.band_high),
        past_guard=policy.require_sat_price_above_one,
        control_points=len(curve),
    )

    source = YadioRateSource(settings.rates)
    monitor = RateMonitor(
        source=source,
        estimator=estimator,
        refresh_interval=settings.rates.refresh_interval,
    )

    return {
        "curve": curve,
        "estimator": estimator,
        "source": source,
        "rate_monitor": monitor,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start rate polling and the WebSocket update loop; stop them on shutdown."""
    from satparity.dashboard.update_loop import dashboard_update_loop

    logger = get_logger("satparity.main")
    settings: AppSettings = app.state.settings
    components = app.state.components

    app.state.rate_monitor = components["rate_monitor"]
    app.state.update_interval = settings.dashboard.update_interval
    app.state.historic_window_years = settings.parity.historic_window_years

    await components["rate_monitor"].start()
    update_task = asyncio.create_task(dashboard_update_loop(app))

    logger.info("lifespan_started", rates_url=settings.rates.url)

    yield

    update_task.cancel()
    try:
        await update_task
    except asyncio.CancelledError:
        pass

    await components["rate_monitor"].stop()
    await components["source"].close()

    logger.info("sat_parity_tracker_stopped")


async def run() -> None:
    """Load settings, configure logging and serve the dashboard."""
    from satparity.dashboard.app import create_dashboard_app

    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("satparity.main")

    components = build_components(settings)

    app = create_dashboard_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
