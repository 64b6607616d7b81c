"""Pydantic schemas shared by the store, the HTTP API and the CLI."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import EnergyCategory, EnergyReading


class EnergyReadingDocument(BaseModel):
    """Stored shape of a reading, matching the dashboard's documents."""

    model_config = ConfigDict(populate_by_name=True)

    year: int
    month: str
    floor: int = Field(..., ge=1, le=5)
    category: EnergyCategory
    reading: int = Field(..., ge=0)
    is_exceeded: bool = Field(..., alias="isExceeded")

    @classmethod
    def from_reading(cls, reading: EnergyReading) -> "EnergyReadingDocument":
        return cls(
            year=reading.year,
            month=reading.month,
            floor=reading.floor,
            category=reading.category,
            reading=reading.reading,
            is_exceeded=reading.is_exceeded,
        )

    def to_reading(self) -> EnergyReading:
        return EnergyReading(
            year=self.year,
            month=self.month,
            floor=self.floor,
            category=self.category,
            reading=self.reading,
            is_exceeded=self.is_exceeded,
        )


class CategorySummary(BaseModel):
    """Counts and reading statistics for one energy category."""

    category: EnergyCategory
    count: int = Field(..., ge=0)
    average_reading: Optional[int] = Field(
        default=None, description="Mean reading in kWh, rounded to the nearest integer."
    )
    min_reading: Optional[int] = None
    max_reading: Optional[int] = None


class SeedSummary(BaseModel):
    """Summary report for a generated or stored dataset."""

    total_count: int = Field(..., ge=0)
    exceeded_count: int = Field(..., ge=0)
    categories: List[CategorySummary] = Field(default_factory=list)
