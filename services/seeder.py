"""Bulk-replace seeding of synthetic energy readings."""

from __future__ import annotations

import logging
import random
from datetime import date
from functools import lru_cache
from typing import Callable, Optional

from app.schemas import SeedSummary
from datastore.document_store import EnergySink, build_default_collection
from errors import SeederError
from services.aggregator import Aggregator
from services.generator import RandomSource, generate_energy_data
from settings import get_settings

logger = logging.getLogger(__name__)


class SeederService:
    """Replaces every stored reading with a freshly generated dataset."""

    def __init__(
        self,
        sink: EnergySink,
        aggregator: Aggregator,
        clock: Callable[[], date] = date.today,
        rng_factory: Callable[[], RandomSource] = random.Random,
    ) -> None:
        self.sink = sink
        self.aggregator = aggregator
        self.clock = clock
        self.rng_factory = rng_factory

    def seed(self) -> SeedSummary:
        """Run one full clear, generate and insert cycle.

        The clear and the insert reach the sink as one ``replace_all`` commit,
        so a failed run leaves the previous generation in place. Any
        SeederError is logged and re-raised; nothing is retried.
        """
        today = self.clock()
        logger.info("Starting energy data seeding", extra={"year": today.year})
        try:
            self.sink.connect()
            readings = generate_energy_data(today=today, rng=self.rng_factory())
            self.sink.replace_all(readings)
        except SeederError as exc:
            logger.error("Energy data seeding failed", extra={"reason": str(exc)})
            raise

        summary = self.aggregator.summarize(readings)
        logger.info(
            "Seeded energy records",
            extra={
                "record_count": summary.total_count,
                "exceeded_count": summary.exceeded_count,
            },
        )
        return summary


@lru_cache
def build_default_seeder(
    store_path: Optional[str] = None,
    random_seed: Optional[int] = None,
) -> SeederService:
    """Factory that wires the seeder with the configured collection."""
    settings = get_settings()
    seed = settings.random_seed if random_seed is None else random_seed
    if store_path is None:
        collection = build_default_collection()
    else:
        collection = build_default_collection(path=store_path)

    def rng_factory() -> RandomSource:
        return random.Random(seed)

    return SeederService(
        sink=collection,
        aggregator=Aggregator(),
        rng_factory=rng_factory,
    )
