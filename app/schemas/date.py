"""Partial date schemas shared by every request that carries a date."""

from pydantic import BaseModel, Field

from app.exceptions import InvalidInputException
from app.utils.partial_date import DatePrecision, PartialDate


class PartialDateSchema(BaseModel):
    """A date known to the year, the month or the day.

    Leaving out the month gives year precision; leaving out the day gives
    month precision.
    """

    year: int | None = Field(
        None,
        ge=1,
        le=9999,
        description="Year; a date without a year is treated as absent",
        json_schema_extra={"example": 2021}
    )
    month: int | None = Field(
        None,
        ge=1,
        le=12,
        description="Month, when known",
        json_schema_extra={"example": 6}
    )
    day: int | None = Field(
        None,
        ge=1,
        le=31,
        description="Day of the month, when known",
        json_schema_extra={"example": None}
    )

    def to_partial_date(self, field: str = "date") -> PartialDate | None:
        """Convert to a ``PartialDate``; ``None`` when no year was given."""
        if not self.year:
            if self.month or self.day:
                raise InvalidInputException(field, "a year is required when a month or day is given")
            return None
        return PartialDate.from_parts(self.year, self.month, self.day, field=field)


def to_partial_date(value: PartialDateSchema | None, field: str = "date") -> PartialDate | None:
    return value.to_partial_date(field) if value is not None else None


class PartialDateResponseSchema(BaseModel):
    """A stored date with only the components its precision defines."""

    date: str = Field(description="Stored YYYY-MM-DD form", json_schema_extra={"example": "2021-06-01"})
    precision: DatePrecision = Field(description="Precision of the date", json_schema_extra={"example": "month"})
    year: int = Field(json_schema_extra={"example": 2021})
    month: int | None = Field(default=None, json_schema_extra={"example": 6})
    day: int | None = Field(default=None, json_schema_extra={"example": None})
    display: str = Field(description="Date rendered at its precision", json_schema_extra={"example": "2021-06"})

    @classmethod
    def from_stored(cls, value: str | None, precision: DatePrecision | str | None) -> "PartialDateResponseSchema | None":
        if not value:
            return None
        parsed = PartialDate.from_stored(value, precision)
        return cls(
            date=parsed.date_string,
            precision=parsed.precision,
            year=parsed.year,
            month=parsed.month,
            day=parsed.day,
            display=str(parsed),
        )
