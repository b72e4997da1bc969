"""Repository interfaces (Ports) - abstraction for backend access."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from tracker.domain.entities import Dataset, DatasetCreate, EntryCreate


class DatasetRepository(ABC):
    """Interface for dataset access."""

    @abstractmethod
    async def list(self) -> List[Dataset]:
        """Get all datasets."""
        pass

    @abstractmethod
    async def get(self, dataset_id: int) -> Dataset:
        """Get a single dataset."""
        pass

    @abstractmethod
    async def create(self, record: DatasetCreate) -> Optional[int]:
        """Create a dataset and return its new id, if the backend sent one."""
        pass

    @abstractmethod
    async def update(self, dataset_id: int, record: DatasetCreate) -> None:
        """Replace a dataset."""
        pass

    @abstractmethod
    async def delete(self, dataset_id: int) -> None:
        """Delete a dataset."""
        pass


class EntryRepository(ABC):
    """Interface for entry access.

    Reads return raw rows; sanitizing them is up to the caller since rows may
    be incomplete.
    """

    @abstractmethod
    async def list(self, dataset_id: int) -> List[Dict[str, Any]]:
        """Get the recorded entries of a dataset."""
        pass

    @abstractmethod
    async def list_projected_to_target(self, dataset_id: int) -> List[Dict[str, Any]]:
        """Get entries plus projections up to the target value."""
        pass

    @abstractmethod
    async def list_projected_to_end_date(self, dataset_id: int) -> List[Dict[str, Any]]:
        """Get entries plus projections up to the end date."""
        pass

    @abstractmethod
    async def create(self, dataset_id: int, record: EntryCreate) -> Optional[Dict[str, Any]]:
        """Create an entry and return the stored row, if the backend sent one."""
        pass

    @abstractmethod
    async def update(self, entry_id: int, record: EntryCreate) -> None:
        """Replace an entry."""
        pass

    @abstractmethod
    async def delete(self, entry_id: int) -> None:
        """Delete an entry."""
        pass
