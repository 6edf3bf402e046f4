"""Sat parity estimation.

Given how many units of a currency one BTC buys and the current BTC/USD
price, estimate when one unit of the currency is (or was) worth one sat:

  sat_price        = units_per_btc / 100_000_000
  usd_price_needed = btc_usd_rate * (100_000_000 / units_per_btc)

usd_price_needed is the BTC/USD price at which this currency hits parity,
assuming its USD exchange rate stays where it is today. That price is
located on the reference curve and its date linearly interpolated.

Two anti-noise heuristics apply, independently:
- near-parity band: a sat price already close to 1 is reported as "now"
  instead of flapping between past and future on every refresh;
- past guard: an interpolated date at or before now only counts as "past"
  if the sat price is actually above 1, so rounding cannot report a
  crossing for a currency that has not reached parity.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from satparity.curve.store import CurveStore, default_curve
from satparity.exceptions import InvalidRateError, SatParityError
from satparity.logging import get_logger
from satparity.models import (
    SATS_PER_BTC,
    ParityInfo,
    ParityKind,
    RateSnapshot,
    from_timestamp_ms,
    to_timestamp_ms,
)

logger = get_logger(__name__)

_ONE = Decimal("1")


@dataclass(frozen=True)
class ParityPolicy:
    """Near-parity band and past-guard settings.

    The default is the banded revision: sat prices in [1, 1.25) are "now"
    and the past guard is on. ParityPolicy.legacy() reproduces the earlier
    revision: |sat_price - 1| < 0.1 and no guard.
    """

    band_low: Decimal = Decimal("1")
    band_high: Decimal = Decimal("1.25")
    inclusive_low: bool = True
    require_sat_price_above_one: bool = True
    name: str = "banded"

    @classmethod
    def legacy(cls, tolerance: Decimal = Decimal("0.1")) -> "ParityPolicy":
        return cls(
            band_low=_ONE - tolerance,
            band_high=_ONE + tolerance,
            inclusive_low=False,
            require_sat_price_above_one=False,
            name="legacy",
        )

    def is_near_parity(self, sat_price: Decimal) -> bool:
        if sat_price >= self.band_high:
            return False
        if self.inclusive_low:
            return sat_price >= self.band_low
        return sat_price > self.band_low


def _validate(snapshot: RateSnapshot) -> None:
    for field in ("units_per_btc", "btc_usd_rate"):
        value = getattr(snapshot, field)
        if not isinstance(value, Decimal) or not value.is_finite() or value <= 0:
            raise InvalidRateError(snapshot.currency_code, field, value)


class ParityEstimator:
    """Classifies rate snapshots as past, now or future parity against a curve.

    Stateless apart from the immutable curve and policy; estimate() is a
    pure function of its arguments, with the evaluation time passed in.
    """

    def __init__(
        self,
        curve: CurveStore | None = None,
        policy: ParityPolicy | None = None,
    ) -> None:
        self._curve = curve if curve is not None else default_curve()
        self._policy = policy if policy is not None else ParityPolicy()

    @property
    def curve(self) -> CurveStore:
        return self._curve

    @property
    def policy(self) -> ParityPolicy:
        return self._policy

    def estimate(self, snapshot: RateSnapshot, now: datetime) -> ParityInfo:
        """Estimate the parity date for a snapshot, evaluated at ``now``.

        ``now`` must be timezone-aware.

        Raises:
            InvalidRateError: units_per_btc or btc_usd_rate is zero,
                negative or non-finite.
            SatParityError: now is a naive datetime.
        """
        if now.tzinfo is None:
            raise SatParityError("evaluation time must be timezone-aware")
        _validate(snapshot)
        sat_price = snapshot.sat_price

        if self._policy.is_near_parity(sat_price):
            return ParityInfo(kind=ParityKind.NOW, date=now)

        usd_price_needed = snapshot.btc_usd_rate * (SATS_PER_BTC / snapshot.units_per_btc)
        now_ms = to_timestamp_ms(now)

        for current, nxt in self._curve.brackets():
            if not current.reference_price <= usd_price_needed <= nxt.reference_price:
                continue

            logger.debug(
                "parity_bracket_found",
                currency=snapshot.currency_code,
                low=str(current.reference_price),
                high=str(nxt.reference_price),
            )
            ratio = (usd_price_needed - current.reference_price) / (
                nxt.reference_price - current.reference_price
            )
            start_ms = current.timestamp_ms
            timestamp_ms = math.floor(start_ms + ratio * (nxt.timestamp_ms - start_ms))

            is_past = timestamp_ms <= now_ms
            if self._policy.require_sat_price_above_one:
                is_past = is_past and sat_price > 1

            return ParityInfo(
                kind=ParityKind.PAST if is_past else ParityKind.FUTURE,
                date=from_timestamp_ms(timestamp_ms),
            )

        # Outside the curve: before recorded history, or past the projection horizon
        if sat_price >= 1:
            return ParityInfo(kind=ParityKind.PAST, date=self._curve.first.date)
        return ParityInfo(kind=ParityKind.FUTURE, date=self._curve.last.date)


def estimate_parity(
    snapshot: RateSnapshot,
    now: datetime,
    curve: CurveStore | None = None,
    policy: ParityPolicy | None = None,
) -> ParityInfo:
    """Estimate parity with the default curve and banded policy unless given."""
    return ParityEstimator(curve, policy).estimate(snapshot, now)
