"""Rate monitor -- polls the rate source and keeps the latest rate board.

Rates are refreshed every five minutes by default. A failed poll is logged
and retried on the next tick; the last good board keeps being served and
the failure is exposed through ``last_error`` for the dashboard.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

from satparity.exceptions import RateFetchError
from satparity.logging import get_logger
from satparity.parity.estimator import ParityEstimator
from satparity.rates.board import RateBoard, build_rate_board
from satparity.rates.client import RateSource

logger = get_logger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch rates. Please try again later."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RateMonitor:
    """Periodically fetches rates and rebuilds the parity board.

    The estimator core is pure; this class owns the clock and the schedule.
    """

    def __init__(
        self,
        source: RateSource,
        estimator: ParityEstimator,
        refresh_interval: float = 300.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._source = source
        self._estimator = estimator
        self._refresh_interval = refresh_interval
        self._clock = clock
        self._board: RateBoard | None = None
        self._last_error: str | None = None
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    @property
    def board(self) -> RateBoard | None:
        """Latest successfully built board, or None before the first fetch succeeds."""
        return self._board

    @property
    def last_error(self) -> str | None:
        """User-facing message for the most recent failed poll, cleared on success."""
        return self._last_error

    @property
    def estimator(self) -> ParityEstimator:
        return self._estimator

    def now(self) -> datetime:
        return self._clock()

    async def start(self) -> None:
        """Begin polling in the background."""
        if self._running:
            logger.warning("rate_monitor_already_running")
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("rate_monitor_started", refresh_interval=self._refresh_interval)

    async def stop(self) -> None:
        """Stop polling gracefully."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("rate_monitor_stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception:
                self._last_error = FETCH_ERROR_MESSAGE
                logger.warning("rate_monitor_poll_error", exc_info=True)
            if self._running:
                await asyncio.sleep(self._refresh_interval)

    async def refresh(self) -> RateBoard | None:
        """Fetch one batch and rebuild the board.

        Returns the new board, or None if the fetch failed (the previous
        board is kept).
        """
        try:
            batch = await self._source.fetch_batch()
        except RateFetchError as exc:
            self._last_error = FETCH_ERROR_MESSAGE
            logger.error("rate_fetch_failed", error=str(exc))
            return None

        board = build_rate_board(batch, self._estimator, self._clock())
        self._board = board
        self._last_error = None
        return board
