"""Tests for the bulk-replace seeding service."""

from __future__ import annotations

import json
import logging
import random
from datetime import date
from typing import List, Sequence

import pytest

from datastore.document_store import EnergyDocumentCollection, build_default_collection
from errors import StorageError, StoreConnectionError
from models.records import EnergyCategory, EnergyReading
from services.aggregator import Aggregator
from services.seeder import SeederService, build_default_seeder


class RecordingSink:
    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: List[str] = []
        self.inserted: List[Sequence[EnergyReading]] = []
        self.fail_on = fail_on

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name == self.fail_on:
            if name == "connect":
                raise StoreConnectionError("store unreachable")
            raise StorageError(f"{name} failed")

    def connect(self) -> None:
        self._record("connect")

    def clear_all(self) -> None:
        self._record("clear_all")

    def bulk_insert(self, records: Sequence[EnergyReading]) -> None:
        self._record("bulk_insert")
        self.inserted.append(list(records))

    def replace_all(self, records: Sequence[EnergyReading]) -> None:
        self._record("replace_all")
        self.inserted.append(list(records))


def _seeder(sink, today: date = date(2026, 4, 10), seed: int = 99) -> SeederService:
    return SeederService(
        sink=sink,
        aggregator=Aggregator(),
        clock=lambda: today,
        rng_factory=lambda: random.Random(seed),
    )


def test_seed_replaces_everything_in_one_batch() -> None:
    sink = RecordingSink()

    summary = _seeder(sink).seed()

    assert sink.calls == ["connect", "replace_all"]
    assert len(sink.inserted) == 1
    assert len(sink.inserted[0]) == (12 + 4) * 20
    assert summary.total_count == (12 + 4) * 20
    assert summary.exceeded_count == sum(r.is_exceeded for r in sink.inserted[0])
    assert all(r.is_exceeded == (r.reading > 3500) for r in sink.inserted[0])
    assert {item.category: item.count for item in summary.categories} == {
        category: 80 for category in EnergyCategory
    }


def test_seeding_twice_leaves_one_generation(tmp_path) -> None:
    path = tmp_path / "energy.json"
    collection = EnergyDocumentCollection(name="energy", persistence_path=path)
    seeder = _seeder(collection, today=date(2026, 12, 1))

    seeder.seed()
    seeder.seed()

    assert collection.count() == 24 * 20
    assert len(json.loads(path.read_text())) == 24 * 20


def test_reseeding_replaces_stale_records(tmp_path) -> None:
    path = tmp_path / "energy.json"
    collection = EnergyDocumentCollection(name="energy", persistence_path=path)
    _seeder(collection, today=date(2025, 12, 1)).seed()

    _seeder(collection, today=date(2026, 1, 5)).seed()

    years = {doc.year for doc in collection.scan()}
    assert years == {2025, 2026}
    assert collection.count() == 13 * 20


@pytest.mark.parametrize("failing_step", ["connect", "replace_all"])
def test_seed_failures_are_logged_and_reraised(failing_step: str, caplog) -> None:
    sink = RecordingSink(fail_on=failing_step)

    with caplog.at_level(logging.ERROR):
        with pytest.raises((StorageError, StoreConnectionError)):
            _seeder(sink).seed()

    assert sink.calls[-1] == failing_step
    assert any("seeding failed" in record.message for record in caplog.records)


def test_failed_write_keeps_previous_generation(tmp_path, monkeypatch) -> None:
    path = tmp_path / "energy.json"
    collection = EnergyDocumentCollection(name="energy", persistence_path=path)
    _seeder(collection, seed=1).seed()
    before = collection.scan()
    before_file = path.read_text()

    def failing_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("datastore.document_store.os.replace", failing_replace)
    with pytest.raises(StorageError):
        _seeder(collection, seed=2).seed()

    assert collection.scan() == before
    assert path.read_text() == before_file

    monkeypatch.undo()
    _seeder(collection, seed=2).seed()
    assert collection.count() == (12 + 4) * 20
    assert collection.scan() != before


def test_seed_recovers_from_undecodable_store_file(tmp_path, caplog) -> None:
    path = tmp_path / "energy.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    collection = EnergyDocumentCollection(name="energy", persistence_path=path)

    with caplog.at_level(logging.WARNING):
        summary = _seeder(collection).seed()

    assert summary.total_count == (12 + 4) * 20
    assert len(json.loads(path.read_text(encoding="utf-8"))) == (12 + 4) * 20
    assert any(getattr(record, "reason", None) == "not utf-8" for record in caplog.records)


def test_build_default_seeder_uses_fixed_seed(tmp_path) -> None:
    build_default_seeder.cache_clear()
    try:
        first = build_default_seeder(store_path=str(tmp_path / "a.json"), random_seed=5)
        second = build_default_seeder(store_path=str(tmp_path / "b.json"), random_seed=5)
        first.clock = second.clock = lambda: date(2026, 6, 1)

        assert first.seed() == second.seed()
    finally:
        build_default_seeder.cache_clear()
        build_default_collection.cache_clear()
