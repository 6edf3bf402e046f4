"""Shared test fixtures for the sat parity tracker."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from satparity.config import AppSettings, ParitySettings, RatesSettings
from satparity.curve.store import CurveStore, default_curve
from satparity.models import RateBatch
from satparity.parity.estimator import ParityEstimator, ParityPolicy

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (banded policy, fast refresh)."""
    return AppSettings(
        log_level="DEBUG",
        rates=RatesSettings(url="https://rates.test/exrates/BTC", refresh_interval=1),
        parity=ParitySettings(policy="banded"),
    )


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return NOW


@pytest.fixture
def curve() -> CurveStore:
    return default_curve()


@pytest.fixture
def estimator(curve: CurveStore) -> ParityEstimator:
    """Estimator with the default curve and the banded policy."""
    return ParityEstimator(curve, ParityPolicy())


@pytest.fixture
def legacy_estimator(curve: CurveStore) -> ParityEstimator:
    return ParityEstimator(curve, ParityPolicy.legacy())


@pytest.fixture
def sample_batch() -> RateBatch:
    """A small rate batch at BTC = $68,000.

    Sat prices: VES 50 (far past), ARS 1.1 (near parity), JPY 0.1,
    USD 0.00068, plus an invalid zero rate for XXX.
    """
    return RateBatch(
        btc_usd_rate=Decimal("68000"),
        rates={
            "USD": Decimal("68000"),
            "JPY": Decimal("10000000"),
            "ARS": Decimal("110000000"),
            "VES": Decimal("5000000000"),
            "XXX": Decimal("0"),
            "BTC": Decimal("1"),
        },
        fetched_at=1760875200.0,
    )
