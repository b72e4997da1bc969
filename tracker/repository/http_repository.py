"""REST implementation of the tracker repositories."""
from typing import Any, Dict, List, Optional
import logging

from tracker.domain.interfaces import DatasetRepository, EntryRepository
from tracker.domain.entities import Dataset, DatasetCreate, EntryCreate
from tracker.infrastructure.api_gateway import ApiGateway

logger = logging.getLogger(__name__)


def _rows(payload: Any) -> List[Dict[str, Any]]:
    """Backend may answer null for an empty collection."""
    if not payload:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list, got {type(payload).__name__}")
    return [row for row in payload if isinstance(row, dict)]


class HttpDatasetRepository(DatasetRepository):
    """Dataset repository backed by the REST API."""

    def __init__(self, gateway: ApiGateway):
        self._api = gateway

    async def list(self) -> List[Dataset]:
        rows = _rows(await self._api.get("/datasets"))
        return [Dataset.model_validate(row) for row in rows]

    async def get(self, dataset_id: int) -> Dataset:
        return Dataset.model_validate(await self._api.get(f"/datasets/{dataset_id}"))

    async def create(self, record: DatasetCreate) -> Optional[int]:
        result = await self._api.post("/datasets", record.to_payload())
        if isinstance(result, dict) and result.get("id"):
            new_id = int(result["id"])
            logger.info(f"Created dataset {new_id}")
            return new_id
        return None

    async def update(self, dataset_id: int, record: DatasetCreate) -> None:
        await self._api.put(f"/datasets/{dataset_id}", record.to_payload())
        logger.info(f"Updated dataset {dataset_id}")

    async def delete(self, dataset_id: int) -> None:
        await self._api.delete(f"/datasets/{dataset_id}")
        logger.info(f"Deleted dataset {dataset_id}")


class HttpEntryRepository(EntryRepository):
    """Entry repository backed by the REST API."""

    def __init__(self, gateway: ApiGateway):
        self._api = gateway

    async def list(self, dataset_id: int) -> List[Dict[str, Any]]:
        return _rows(await self._api.get(f"/datasets/{dataset_id}/entries"))

    async def list_projected_to_target(self, dataset_id: int) -> List[Dict[str, Any]]:
        return _rows(await self._api.get(f"/datasets/{dataset_id}/entries/projected/target"))

    async def list_projected_to_end_date(self, dataset_id: int) -> List[Dict[str, Any]]:
        return _rows(await self._api.get(f"/datasets/{dataset_id}/entries/projected/endDate"))

    async def create(self, dataset_id: int, record: EntryCreate) -> Optional[Dict[str, Any]]:
        result = await self._api.post(f"/datasets/{dataset_id}/entries", record.to_payload())
        return result if isinstance(result, dict) else None

    async def update(self, entry_id: int, record: EntryCreate) -> None:
        await self._api.put(f"/entries/{entry_id}", record.to_payload())

    async def delete(self, entry_id: int) -> None:
        await self._api.delete(f"/entries/{entry_id}")
