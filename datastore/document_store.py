from __future__ import annotations

import json
import logging
import os
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Iterable, Optional, Protocol, Sequence

from pydantic import ValidationError

from app.schemas import EnergyReadingDocument
from errors import StorageError, StoreConnectionError
from models.records import EnergyReading
from settings import get_settings

logger = logging.getLogger(__name__)

# (st_mtime_ns, st_size, st_ino) of the file last loaded or written.
_FileSignature = tuple[int, int, int]


class EnergySink(Protocol):
    """Storage operations the seeding procedure depends on."""

    def connect(self) -> None: ...

    def clear_all(self) -> None: ...

    def bulk_insert(self, records: Sequence[EnergyReading]) -> None: ...

    def replace_all(self, records: Sequence[EnergyReading]) -> None: ...


class EnergyDocumentCollection:
    """JSON-file backed collection of energy reading documents.

    Every write replaces the backing file through a temporary sibling and
    ``os.replace``, so readers of the file never see a half-written payload.
    In-memory state only changes once the file write has succeeded.
    """

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self.persistence_path = persistence_path
        self._documents: list[EnergyReadingDocument] = []
        self._connected = False
        self._loaded_signature: Optional[_FileSignature] = None
        self._lock = Lock()

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        with self._lock:
            if self._connected:
                return
            if self.persistence_path:
                try:
                    self.persistence_path.parent.mkdir(parents=True, exist_ok=True)
                    self._documents = self._load_from_disk()
                    self._loaded_signature = self._file_signature()
                except OSError as exc:
                    raise StoreConnectionError(
                        f"Cannot open collection {self.name!r} at {self.persistence_path}: {exc}"
                    ) from exc
            self._connected = True
        logger.debug(
            "Connected to document collection",
            extra={"collection": self.name, "record_count": len(self._documents)},
        )

    def clear_all(self) -> None:
        with self._lock:
            self._ensure_connected()
            removed = len(self._documents)
            self._persist([])
            self._documents = []
        logger.info(
            "Cleared energy readings",
            extra={"collection": self.name, "record_count": removed},
        )

    def bulk_insert(self, records: Sequence[EnergyReading]) -> None:
        documents = [EnergyReadingDocument.from_reading(record) for record in records]
        with self._lock:
            self._ensure_connected()
            combined = self._documents + documents
            self._persist(combined)
            self._documents = combined
        logger.info(
            "Inserted energy readings",
            extra={"collection": self.name, "record_count": len(documents)},
        )

    def replace_all(self, records: Sequence[EnergyReading]) -> None:
        """Clear the collection and insert ``records`` as a single commit.

        Readers see either the previous documents or the new ones. When the
        write fails the previous documents stay in place.
        """
        documents = [EnergyReadingDocument.from_reading(record) for record in records]
        with self._lock:
            self._ensure_connected()
            removed = len(self._documents)
            self._persist(documents)
            self._documents = documents
        logger.info(
            "Replaced energy readings",
            extra={
                "collection": self.name,
                "record_count": len(documents),
                "removed_count": removed,
            },
        )

    def scan(self) -> list[EnergyReadingDocument]:
        """Return copies of all stored documents in insertion order."""

        with self._lock:
            self._ensure_connected()
            self._refresh_if_stale()
            return [document.model_copy() for document in self._documents]

    def count(self) -> int:
        with self._lock:
            self._ensure_connected()
            self._refresh_if_stale()
            return len(self._documents)

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise StoreConnectionError(
                f"Collection {self.name!r} is not connected."
            )

    def _file_signature(self) -> Optional[_FileSignature]:
        if not self.persistence_path or not self.persistence_path.exists():
            return None
        stat = self.persistence_path.stat()
        return (stat.st_mtime_ns, stat.st_size, stat.st_ino)

    def _refresh_if_stale(self) -> None:
        # Another process (the seed command) may have replaced the file.
        if not self.persistence_path:
            return
        try:
            signature = self._file_signature()
            if signature == self._loaded_signature:
                return
            self._documents = self._load_from_disk()
        except OSError as exc:
            raise StorageError(
                f"Failed to read collection {self.name!r}: {exc}"
            ) from exc
        self._loaded_signature = signature

    def _persist(self, documents: Iterable[EnergyReadingDocument]) -> None:
        if not self.persistence_path:
            return
        payload = [document.model_dump(mode="json", by_alias=True) for document in documents]
        temp_path = self.persistence_path.with_name(self.persistence_path.name + ".tmp")
        try:
            temp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(temp_path, self.persistence_path)
            self._loaded_signature = self._file_signature()
        except OSError as exc:
            with suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise StorageError(
                f"Failed to write collection {self.name!r}: {exc}"
            ) from exc

    def _load_from_disk(self) -> list[EnergyReadingDocument]:
        if not self.persistence_path or not self.persistence_path.exists():
            return []

        try:
            raw = self.persistence_path.read_text(encoding="utf-8") or "[]"
            data = json.loads(raw)
        except UnicodeDecodeError:
            self._warn_discarded("not utf-8")
            return []
        except json.JSONDecodeError:
            self._warn_discarded("invalid json")
            return []

        try:
            return [EnergyReadingDocument.model_validate(item) for item in data]
        except (TypeError, ValidationError):
            self._warn_discarded("invalid document")
            return []

    def _warn_discarded(self, reason: str) -> None:
        logger.warning(
            "Discarding unreadable collection file",
            extra={"collection": self.name, "reason": reason},
        )


@lru_cache
def build_default_collection(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> EnergyDocumentCollection:
    settings = get_settings()
    collection_name = settings.collection_name if name is None else name
    store_path = settings.store_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return EnergyDocumentCollection(name=collection_name, persistence_path=persistence)
