"""Error taxonomy for the energy seeder."""

from __future__ import annotations


class SeederError(Exception):
    """Base class for all seeder failures."""


class StoreConnectionError(SeederError, ConnectionError):
    """The document store could not be reached or opened."""


class StorageError(SeederError):
    """A clear or bulk insert against the document store failed."""


class InvalidCategoryError(SeederError, ValueError):
    def __init__(self, category: object) -> None:
        super().__init__(f"Unknown energy category {category!r}.")
        self.category = category


class InvalidMonthError(SeederError, ValueError):
    def __init__(self, month: object) -> None:
        super().__init__(f"Unknown month {month!r}.")
        self.month = month
