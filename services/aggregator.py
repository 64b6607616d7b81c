"""Aggregation logic for energy readings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from app.schemas import CategorySummary, SeedSummary
from models.records import EnergyCategory, EnergyReading
from services.generator import round_half_up


@dataclass
class _CategoryTotals:
    count: int = 0
    total: int = 0
    min_reading: int | None = None
    max_reading: int | None = None


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(self, readings: Iterable[EnergyReading]) -> SeedSummary:
        totals: Dict[EnergyCategory, _CategoryTotals] = {
            category: _CategoryTotals() for category in EnergyCategory
        }
        total_count = 0
        exceeded_count = 0

        for reading in readings:
            total_count += 1
            if reading.is_exceeded:
                exceeded_count += 1

            bucket = totals[reading.category]
            value = reading.reading
            bucket.count += 1
            bucket.total += value
            if bucket.min_reading is None or value < bucket.min_reading:
                bucket.min_reading = value
            if bucket.max_reading is None or value > bucket.max_reading:
                bucket.max_reading = value

        categories = [
            CategorySummary(
                category=category,
                count=bucket.count,
                average_reading=(
                    round_half_up(bucket.total / bucket.count) if bucket.count else None
                ),
                min_reading=bucket.min_reading,
                max_reading=bucket.max_reading,
            )
            for category, bucket in totals.items()
        ]
        return SeedSummary(
            total_count=total_count,
            exceeded_count=exceeded_count,
            categories=categories,
        )
