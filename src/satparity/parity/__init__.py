"""Parity estimation core -- curve interpolation and time-distance wording."""

from satparity.parity.estimator import ParityEstimator, ParityPolicy, estimate_parity
from satparity.parity.formatting import format_time_distance, parity_label

__all__ = [
    "ParityEstimator",
    "ParityPolicy",
    "estimate_parity",
    "format_time_distance",
    "parity_label",
]
