"""Reference BTC/USD price curve."""

from satparity.curve.store import DEFAULT_CONTROL_POINTS, CurveStore, default_curve

__all__ = ["CurveStore", "DEFAULT_CONTROL_POINTS", "default_curve"]
