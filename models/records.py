"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from errors import InvalidCategoryError, InvalidMonthError

MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

FLOORS: tuple[int, ...] = (1, 2, 3, 4, 5)

# kWh; a reading strictly above this is flagged as exceeded.
EXCEED_THRESHOLD = 3500


class EnergyCategory(str, Enum):
    """Consumption categories tracked per floor."""

    HVAC = "HVAC"
    LIGHTING = "Lighting"
    RENEWABLE = "Renewable"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> "EnergyCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCategoryError(value) from None


def month_index(month: str) -> int:
    """Zero-based calendar position of a month name."""
    try:
        return MONTHS.index(month)
    except ValueError:
        raise InvalidMonthError(month) from None


@dataclass(frozen=True, slots=True)
class EnergyReading:
    """A single synthetic kWh reading for one floor, category and month."""

    year: int
    month: str
    floor: int
    category: EnergyCategory
    reading: int
    is_exceeded: bool
