"""
Error taxonomy for the PTO balance engine.

Only UnsupportedCadence is allowed to stop a computation. The others are
raised internally and recovered where they occur.
"""

from __future__ import annotations

from datetime import date
from typing import Optional


class PTOBalanceError(Exception):
    """Base class for every error raised by pto_balance."""


class InvalidConfiguration(PTOBalanceError, ValueError):
    """A configuration field could not be coerced to a usable value."""

    def __init__(self, field: str, value: object, reason: str = "") -> None:
        self.field = field
        self.value = value
        message = f"Invalid value for {field!r}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedCadence(PTOBalanceError, ValueError):
    """The accrual cadence has no scheduler implementation."""

    def __init__(self, cadence: object) -> None:
        self.cadence = cadence
        super().__init__(
            f"Unsupported accrual cadence {cadence!r}; only 'biweekly' is implemented."
        )


class DateOutOfCatalogRange(PTOBalanceError, LookupError):
    """A holiday lookup fell outside the years the catalog was built for."""

    def __init__(self, day: date, first_year: Optional[int], last_year: Optional[int]) -> None:
        self.day = day
        self.first_year = first_year
        self.last_year = last_year
        super().__init__(
            f"{day.isoformat()} is outside the holiday catalog span "
            f"{first_year}-{last_year}"
        )
