"""Synthetic energy reading generation.

Readings follow a per-category linear model over the floor number with a
seasonal multiplier, then receive a symmetric jitter of up to 10% of the
seasonal base. Both the random source and the calendar date are explicit
parameters so callers can pin them.
"""

from __future__ import annotations

import math
import random
from datetime import date
from typing import Iterator, Optional, Protocol, Sequence

from models.records import (
    EXCEED_THRESHOLD,
    FLOORS,
    MONTHS,
    EnergyCategory,
    EnergyReading,
    month_index,
)

JITTER_RATIO = 0.1
# Legacy base for categories outside the known set.
# Unknown categories are rejected instead; see EnergyCategory.parse.
DEFAULT_BASE_READING = 1000


class RandomSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


# (intercept, slope per floor, seasonal multiplier, month indexes in season)
_CATEGORY_MODELS: dict[EnergyCategory, tuple[int, int, tuple[tuple[float, frozenset[int]], ...]]] = {
    EnergyCategory.HVAC: (
        2000,
        150,
        ((1.4, frozenset({5, 6, 7})), (1.3, frozenset({11, 0, 1}))),
    ),
    EnergyCategory.LIGHTING: (800, 80, ((1.2, frozenset({10, 11, 0, 1})),)),
    EnergyCategory.RENEWABLE: (300, 30, ((1.5, frozenset({4, 5, 6, 7, 8})),)),
    EnergyCategory.OTHER: (500, 50, ()),
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def base_reading(category: EnergyCategory | str, month: str, floor: int) -> float:
    """Seasonally adjusted reading before jitter."""
    parsed = EnergyCategory.parse(category)
    index = month_index(month)
    intercept, slope, seasons = _CATEGORY_MODELS[parsed]
    value = float(intercept + slope * floor)
    for multiplier, months in seasons:
        if index in months:
            return value * multiplier
    return value


def calculate_reading(
    category: EnergyCategory | str,
    month: str,
    floor: int,
    rng: RandomSource,
) -> int:
    """Return a jittered integer kWh reading for one category, month and floor.

    Raises InvalidCategoryError for categories outside EnergyCategory and
    InvalidMonthError for unknown month names.
    """
    base = base_reading(category, month, floor)
    variation = base * JITTER_RATIO
    return round_half_up(base + rng.uniform(-1.0, 1.0) * variation)


def months_for_year(year: int, today: date) -> Sequence[str]:
    if year == today.year:
        return MONTHS[: today.month]
    return MONTHS


def iter_energy_data(today: date, rng: RandomSource) -> Iterator[EnergyReading]:
    for year in (today.year - 1, today.year):
        for month in months_for_year(year, today):
            for floor in FLOORS:
                for category in EnergyCategory:
                    value = calculate_reading(category, month, floor, rng)
                    yield EnergyReading(
                        year=year,
                        month=month,
                        floor=floor,
                        category=category,
                        reading=value,
                        is_exceeded=value > EXCEED_THRESHOLD,
                    )


def generate_energy_data(
    today: Optional[date] = None,
    rng: Optional[RandomSource] = None,
) -> list[EnergyReading]:
    """Materialize the full two-year dataset.

    The previous calendar year is complete; the current one stops at the
    month of ``today`` inclusive. Order is year, month, floor, category.
    """
    return list(iter_energy_data(today=today or date.today(), rng=rng or random.Random()))


def expected_record_count(current_month_index: int) -> int:
    return (len(MONTHS) + current_month_index + 1) * len(FLOORS) * len(EnergyCategory)
