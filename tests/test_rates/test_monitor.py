"""Tests for RateMonitor refresh, failure handling and start/stop lifecycle.

The rate source is an AsyncMock; no real network calls.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from satparity.exceptions import RateFetchError
from satparity.models import RateBatch
from satparity.parity.estimator import ParityEstimator
from satparity.rates.monitor import FETCH_ERROR_MESSAGE, RateMonitor


@pytest.fixture
def mock_source(sample_batch: RateBatch) -> AsyncMock:
    source = AsyncMock()
    source.fetch_batch = AsyncMock(return_value=sample_batch)
    return source


@pytest.fixture
def monitor(mock_source: AsyncMock, estimator: ParityEstimator, now: datetime) -> RateMonitor:
    return RateMonitor(
        source=mock_source,
        estimator=estimator,
        refresh_interval=0.01,
        clock=lambda: now,
    )


class TestRefresh:
    @pytest.mark.asyncio
    async def test_no_board_before_first_fetch(self, monitor: RateMonitor) -> None:
        assert monitor.board is None
        assert monitor.last_error is None

    @pytest.mark.asyncio
    async def test_refresh_builds_board(self, monitor: RateMonitor, now: datetime) -> None:
        board = await monitor.refresh()
        assert board is not None
        assert monitor.board is board
        assert board.built_at == now
        assert [r.code for r in board.rates] == ["VES", "ARS", "JPY", "USD"]

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_board(
        self, monitor: RateMonitor, mock_source: AsyncMock
    ) -> None:
        first = await monitor.refresh()
        mock_source.fetch_batch.side_effect = RateFetchError("boom")

        assert await monitor.refresh() is None
        assert monitor.board is first
        assert monitor.last_error == FETCH_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_success_clears_error(
        self, monitor: RateMonitor, mock_source: AsyncMock, sample_batch: RateBatch
    ) -> None:
        mock_source.fetch_batch.side_effect = RateFetchError("boom")
        await monitor.refresh()
        assert monitor.last_error == FETCH_ERROR_MESSAGE

        mock_source.fetch_batch.side_effect = None
        mock_source.fetch_batch.return_value = sample_batch
        await monitor.refresh()
        assert monitor.last_error is None
        assert monitor.board is not None


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_polls_until_stopped(
        self, monitor: RateMonitor, mock_source: AsyncMock
    ) -> None:
        await monitor.start()
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert mock_source.fetch_batch.await_count >= 2
        assert monitor.board is not None

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_kill_loop(
        self, monitor: RateMonitor, mock_source: AsyncMock, sample_batch: RateBatch
    ) -> None:
        mock_source.fetch_batch.side_effect = [RuntimeError("bug"), sample_batch, sample_batch]
        await monitor.start()
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert monitor.board is not None
        assert monitor.last_error is None

    @pytest.mark.asyncio
    async def test_unexpected_error_sets_last_error(
        self, monitor: RateMonitor, mock_source: AsyncMock
    ) -> None:
        mock_source.fetch_batch.side_effect = RuntimeError("bug")
        await monitor.start()
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert monitor.board is None
        assert monitor.last_error == FETCH_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_double_start_is_noop(self, monitor: RateMonitor) -> None:
        await monitor.start()
        await monitor.start()
        await monitor.stop()
