"""Custom exceptions for the sat parity tracker.

All exceptions live here to avoid circular imports between the core
(curve, parity) and the rate fetching layer.
"""


class SatParityError(Exception):
    """Base exception for all sat parity errors."""


class InvalidRateError(SatParityError, ValueError):
    """Raised when a rate snapshot has a zero, negative or non-finite value.

    Callers should drop the affected currency rather than fail the batch.
    """

    def __init__(self, currency_code: str, field: str, value: object) -> None:
        self.currency_code = currency_code
        self.field = field
        self.value = value
        super().__init__(f"{currency_code}: invalid {field} {value!r}")


class CurveConfigurationError(SatParityError):
    """Raised when a price curve is misconfigured at construction time."""


class RateFetchError(SatParityError):
    """Raised when the exchange-rate source fails or returns an unusable payload."""
