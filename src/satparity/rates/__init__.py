"""Rate layer -- fetching BTC exchange rates and building the parity board."""

from satparity.rates.board import ParityTier, RateBoard, build_rate_board, parity_tier, visible_rates
from satparity.rates.client import RateSource, YadioRateSource
from satparity.rates.monitor import RateMonitor

__all__ = [
    "ParityTier",
    "RateBoard",
    "RateMonitor",
    "RateSource",
    "YadioRateSource",
    "build_rate_board",
    "parity_tier",
    "visible_rates",
]
