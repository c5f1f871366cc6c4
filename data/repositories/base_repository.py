"""Abstract table repository interface and repository exceptions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Union

Record = Union[Dict[str, Any], Any]


class BaseTableRepository(ABC):
    """Contract for whole-table access used by the page controllers.

    Implementations keep the last fetched rows in memory and report
    failures through their state instead of raising, so a failed call
    never takes a page down.
    """

    @abstractmethod
    def fetch_all(self) -> bool:
        """Reload every row in the configured order.

        Returns:
            True if the rows were refreshed
        """
        pass

    @abstractmethod
    def insert(self, record: Record, refetch: bool = True) -> bool:
        """Insert one record.

        Args:
            record: Mapping or record model to insert
            refetch: Reload the table after a successful insert

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def insert_many(self, records: List[Record], refetch: bool = False) -> bool:
        """Insert several records in a single call."""
        pass

    @abstractmethod
    def update(self, record_id: int, changes: Record) -> bool:
        """Update the row with ``record_id`` and reload the table."""
        pass

    @abstractmethod
    def remove(self, record_id: int) -> bool:
        """Delete the row with ``record_id`` and reload the table."""
        pass

    @abstractmethod
    def remove_many(self, record_ids: Iterable[int]) -> bool:
        """Delete every listed row in a single call and reload the table."""
        pass

    @abstractmethod
    def clear_error(self) -> None:
        """Dismiss the current error message."""
        pass


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class DataValidationError(RepositoryError):
    """Exception raised when a record cannot be turned into a payload."""
    pass


class DataNotFoundError(RepositoryError):
    """Exception raised when requested data is not found."""
    pass
