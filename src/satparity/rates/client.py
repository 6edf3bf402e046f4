"""Exchange-rate sources.

Board and monitor code depends only on RateSource, keeping the yadio.io
payload format isolated in YadioRateSource.
"""

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation

import httpx

from satparity.config import RatesSettings
from satparity.exceptions import RateFetchError
from satparity.logging import get_logger
from satparity.models import RateBatch

logger = get_logger(__name__)


class RateSource(ABC):
    """Abstract base class for BTC exchange-rate sources."""

    @abstractmethod
    async def fetch_batch(self) -> RateBatch:
        """Fetch units-per-BTC for every available currency plus the BTC/USD rate."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...


def parse_yadio_payload(payload: dict) -> RateBatch:
    """Build a RateBatch from a yadio.io ``/exrates/BTC`` response.

    The payload looks like ``{"BTC": {"USD": 68000.1, "EUR": 62000, ...}, ...}``.
    The BTC self-rate is dropped and entries that are not numbers are skipped.

    Raises:
        RateFetchError: The BTC map or a usable USD rate is missing.
    """
    table = payload.get("BTC") if isinstance(payload, dict) else None
    if not isinstance(table, dict):
        raise RateFetchError("rate payload has no BTC table")

    rates: dict[str, Decimal] = {}
    for code, raw in table.items():
        if code == "BTC":
            continue
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            logger.warning("invalid_rate_entry", code=code, raw=raw)
            continue
        try:
            rates[code] = Decimal(str(raw))
        except InvalidOperation:
            logger.warning("invalid_rate_entry", code=code, raw=raw)

    btc_usd_rate = rates.get("USD")
    if btc_usd_rate is None or not btc_usd_rate.is_finite() or btc_usd_rate <= 0:
        raise RateFetchError(f"rate payload has no usable USD rate: {table.get('USD')!r}")

    return RateBatch(btc_usd_rate=btc_usd_rate, rates=rates)


class YadioRateSource(RateSource):
    """Rate source backed by the public yadio.io exchange-rate API."""

    def __init__(
        self,
        settings: RatesSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)

    async def fetch_batch(self) -> RateBatch:
        try:
            response = await self._client.get(self._settings.url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise RateFetchError(f"rate request failed: {exc}") from exc
        except ValueError as exc:
            raise RateFetchError("rate response is not valid JSON") from exc

        batch = parse_yadio_payload(payload)
        logger.debug(
            "rates_fetched",
            count=len(batch.rates),
            btc_usd=str(batch.btc_usd_rate),
        )
        return batch

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("rate_source_closed")
