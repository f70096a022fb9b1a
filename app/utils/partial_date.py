"""Partially known calendar dates.

Acquisition, connection and disposal dates are often only known to the year
or month. They are stored as a zero-padded ``YYYY-MM-DD`` string next to a
precision tag; the padding of unknown components is ``01`` and must never be
read back as real information. ``PartialDate`` keeps the precision and the
components it defines together so callers cannot trust a synthetic day.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from app.exceptions import InvalidInputException


class DatePrecision(str, Enum):
    """Granularity at which a date is actually known."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"


# Returned by get_date_precision() when no year was supplied at all.
NO_PRECISION = "none"


def get_date_precision(year: int | None, month: int | None = None, day: int | None = None) -> str:
    """Determine the precision implied by the supplied components."""
    if not year:
        return NO_PRECISION
    if not month:
        return DatePrecision.YEAR.value
    if not day:
        return DatePrecision.MONTH.value
    return DatePrecision.DAY.value


def create_date_string(year: int | None, month: int | None = None, day: int | None = None) -> str | None:
    """Build the stored ``YYYY-MM-DD`` form, padding unknown components with 01."""
    if not year:
        return None
    month_str = f"{month:02d}" if month else "01"
    day_str = f"{day:02d}" if month and day else "01"
    return f"{year:04d}-{month_str}-{day_str}"


@dataclass(frozen=True)
class PartialDate:
    """A date together with the precision it is known at."""

    precision: DatePrecision
    year: int
    month: int | None = None
    day: int | None = None

    @classmethod
    def from_parts(
        cls, year: int | None, month: int | None = None, day: int | None = None, field: str = "date"
    ) -> "PartialDate":
        """Build from user supplied components, validating the calendar values."""
        if not year:
            raise InvalidInputException(field, "a year is required")
        if day and not month:
            raise InvalidInputException(field, "a day was given without a month")
        if month is not None and not 1 <= month <= 12:
            raise InvalidInputException(field, f"month {month} is out of range")

        try:
            date(year, month or 1, day or 1)
        except ValueError as e:
            raise InvalidInputException(field, str(e)) from e

        precision = DatePrecision(get_date_precision(year, month, day))
        return cls(
            precision=precision,
            year=year,
            month=month if precision != DatePrecision.YEAR else None,
            day=day if precision == DatePrecision.DAY else None,
        )

    @classmethod
    def from_stored(cls, value: str, precision: str | DatePrecision | None) -> "PartialDate":
        """Re-parse a stored date string, keeping only the components its precision defines.

        A missing precision tag is read as day precision, which is how rows
        written without one were always interpreted.
        """
        try:
            parsed = date.fromisoformat(value)
        except (TypeError, ValueError) as e:
            raise InvalidInputException("stored date", f"'{value}' is not a YYYY-MM-DD date") from e

        resolved = DatePrecision(precision) if precision else DatePrecision.DAY
        return cls(
            precision=resolved,
            year=parsed.year,
            month=parsed.month if resolved != DatePrecision.YEAR else None,
            day=parsed.day if resolved == DatePrecision.DAY else None,
        )

    @property
    def date_string(self) -> str:
        """Stored representation of this date."""
        # year is always set, so the result is never None
        return create_date_string(self.year, self.month, self.day)  # type: ignore[return-value]

    @property
    def precision_value(self) -> str:
        return self.precision.value

    def as_date(self) -> date:
        """Earliest calendar date this partial date can stand for."""
        return date(self.year, self.month or 1, self.day or 1)

    def __str__(self) -> str:
        if self.precision == DatePrecision.YEAR:
            return f"{self.year:04d}"
        if self.precision == DatePrecision.MONTH:
            return f"{self.year:04d}-{self.month:02d}"
        return self.date_string
