"""Rate board -- turns a fetched rate batch into sorted per-currency parity rows.

Each currency gets a RateSnapshot that is run through the ParityEstimator.
Currencies with unusable rates are dropped and logged so one bad entry
never fails the whole batch.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from satparity.exceptions import InvalidRateError
from satparity.logging import get_logger
from satparity.models import CurrencyRate, ParityKind, RateBatch, RateSnapshot
from satparity.parity.estimator import ParityEstimator
from satparity.rates.currencies import currency_name

logger = get_logger(__name__)

_ONE_YEAR = timedelta(days=365)
_FOUR_YEARS = timedelta(days=365 * 4)


class ParityTier(str, Enum):
    """Display tier of a currency row, from already-at-parity to far future."""

    JUST_HIT = "just_hit"
    PAST = "past"
    WITHIN_YEAR = "within_year"
    WITHIN_FOUR_YEARS = "within_four_years"
    BEYOND = "beyond"


@dataclass
class RateBoard:
    """All currency rows derived from one rate batch, sorted by sat price descending."""

    rates: list[CurrencyRate]
    btc_usd_rate: Decimal
    fetched_at: float
    built_at: datetime
    skipped: list[str] = field(default_factory=list)


def build_rate_board(
    batch: RateBatch, estimator: ParityEstimator, now: datetime
) -> RateBoard:
    """Estimate parity for every currency in a batch.

    Args:
        batch: Units-per-BTC rates plus the BTC/USD rate from one fetch.
        estimator: Parity estimator to run each snapshot through.
        now: Evaluation time shared by every currency in the batch.

    Returns:
        RateBoard with rows sorted by sat price, highest first.
    """
    rows: list[CurrencyRate] = []
    skipped: list[str] = []

    for code, units_per_btc in batch.rates.items():
        if code == "BTC":
            continue
        snapshot = RateSnapshot(
            currency_code=code,
            units_per_btc=units_per_btc,
            btc_usd_rate=batch.btc_usd_rate,
        )
        try:
            parity = estimator.estimate(snapshot, now)
        except InvalidRateError as exc:
            logger.warning(
                "currency_skipped_invalid_rate",
                code=code,
                field=exc.field,
                value=str(exc.value),
            )
            skipped.append(code)
            continue

        rows.append(
            CurrencyRate(
                code=code,
                name=currency_name(code),
                rate=units_per_btc,
                sat_price=snapshot.sat_price,
                parity=parity,
            )
        )

    rows.sort(key=lambda r: r.sat_price, reverse=True)
    logger.info("rate_board_built", currencies=len(rows), skipped=len(skipped))
    return RateBoard(
        rates=rows,
        btc_usd_rate=batch.btc_usd_rate,
        fetched_at=batch.fetched_at,
        built_at=now,
        skipped=skipped,
    )


def parity_tier(rate: CurrencyRate, now: datetime) -> ParityTier:
    """Classify a row for colouring: at parity already, or how soon it gets there."""
    if rate.has_sat_parity:
        if rate.parity.kind is ParityKind.NOW:
            return ParityTier.JUST_HIT
        return ParityTier.PAST

    if rate.parity.kind is ParityKind.FUTURE:
        time_to_parity = rate.parity.date - now
    else:
        time_to_parity = timedelta(0)

    if time_to_parity <= _ONE_YEAR:
        return ParityTier.WITHIN_YEAR
    if time_to_parity <= _FOUR_YEARS:
        return ParityTier.WITHIN_FOUR_YEARS
    return ParityTier.BEYOND


def _years_before(now: datetime, years: int) -> datetime:
    try:
        return now.replace(year=now.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return now.replace(year=now.year - years, day=28)


def visible_rates(
    rates: list[CurrencyRate],
    now: datetime,
    show_historic: bool = False,
    window_years: int = 3,
) -> list[CurrencyRate]:
    """Hide rows that hit parity more than ``window_years`` ago unless asked for.

    Only past rows are ever hidden; now and future rows always show.
    """
    if show_historic:
        return list(rates)
    cutoff = _years_before(now, window_years)
    return [
        r for r in rates
        if r.parity.kind is not ParityKind.PAST or r.parity.date >= cutoff
    ]
