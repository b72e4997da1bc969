"""Create/edit/delete/copy form for a dataset."""
import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from tracker.controllers.base import Controller, Navigate, REQUEST_ERRORS
from tracker.domain.entities import CopyResult, DatasetCreate, EntryCreate
from tracker.domain.interfaces import DatasetRepository, EntryRepository
from tracker.routes import dataset_path, HOME_PATH
from tracker.services.date_normalizer import to_date_input_value
from tracker.services.messages import MESSAGES, UI_TEXT
from tracker.services.notification_bus import NotificationBus

logger = logging.getLogger(__name__)

COPY_SUFFIX = " - 2"


def empty_form() -> Dict[str, Any]:
    return {
        "name": "",
        "description": "",
        "symbol": "",
        "target_value": None,
        "start_date": None,
        "end_date": None,
    }


class DatasetFormController(Controller):
    """Binds the dataset form to the REST API."""

    def __init__(
        self,
        bus: NotificationBus,
        datasets: DatasetRepository,
        entries: EntryRepository,
        navigate: Optional[Navigate] = None,
    ):
        super().__init__(bus, navigate)
        self._datasets = datasets
        self._entries = entries
        self.dataset_id: Optional[int] = None
        self.form: Dict[str, Any] = empty_form()
        self.loading = False

    @property
    def edit_mode(self) -> bool:
        return self.dataset_id is not None

    async def load(self, dataset_id: Optional[int]) -> None:
        """Edit mode with an id, empty create form without."""
        if dataset_id is None:
            self.dataset_id = None
            self.form = empty_form()
            return

        self.dataset_id = dataset_id
        self.loading = True
        try:
            dataset = await self._datasets.get(dataset_id)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["load_dataset_error"])
            return
        finally:
            self.loading = False

        self.form = {
            "name": dataset.name or "",
            "description": dataset.description or "",
            "symbol": dataset.symbol or "",
            "target_value": dataset.target_value,
            "start_date": to_date_input_value(dataset.start_date) or None,
            "end_date": to_date_input_value(dataset.end_date) or None,
        }

    def _to_dataset(self, form: Mapping[str, Any]) -> Optional[DatasetCreate]:
        try:
            return DatasetCreate.model_validate(dict(form))
        except ValidationError as e:
            logger.info(f"Dataset form rejected: {e.error_count()} error(s)")
            self._bus.publish_alert("info", MESSAGES["dataset_invalid"])
            return None

    # Submit

    async def submit(self, form: Mapping[str, Any]) -> bool:
        dto = self._to_dataset(form)
        if dto is None:
            return False
        self.form = {**self.form, **form}

        self.loading = True
        try:
            if self.edit_mode:
                return await self._update(dto)
            return await self._create(dto)
        finally:
            self.loading = False

    async def _update(self, dto: DatasetCreate) -> bool:
        try:
            await self._datasets.update(self.dataset_id, dto)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["dataset_update_error"])
            return False
        self._bus.publish_alert("success", MESSAGES["dataset_updated"])
        self._bus.request_sidebar_refresh()
        self.navigate(dataset_path(self.dataset_id))
        return True

    async def _create(self, dto: DatasetCreate) -> bool:
        try:
            new_id = await self._datasets.create(dto)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["dataset_create_error"])
            return False
        self._bus.publish_alert("success", MESSAGES["dataset_created"])
        self._bus.request_sidebar_refresh()
        self.navigate(dataset_path(new_id) if new_id else HOME_PATH)
        return True

    # Delete

    def delete(self) -> None:
        """Ask for confirmation; the dataset is deleted once the user confirms."""
        if not self.edit_mode:
            return
        self.confirm(UI_TEXT["labels"]["confirm_delete_dataset"], self._delete_confirmed)

    async def _delete_confirmed(self) -> None:
        self.loading = True
        try:
            await self._datasets.delete(self.dataset_id)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["dataset_delete_error"])
            return
        finally:
            self.loading = False
        self._bus.publish_alert("success", MESSAGES["dataset_deleted"])
        self._bus.request_sidebar_refresh()
        self.navigate(HOME_PATH)

    # Copy

    async def create_copy(self, form: Optional[Mapping[str, Any]] = None) -> Optional[CopyResult]:
        """Create ``"<name> - 2"`` and copy every entry of this dataset into it.

        Entries are posted concurrently. A failed post does not stop the
        others; the summary alert is published once all of them settled.
        """
        if not self.edit_mode:
            return None
        values = dict(form if form is not None else self.form)
        values["name"] = f"{(values.get('name') or '').strip()}{COPY_SUFFIX}"
        dto = self._to_dataset(values)
        if dto is None:
            return None

        self.loading = True
        try:
            try:
                new_id = await self._datasets.create(dto)
            except REQUEST_ERRORS as e:
                self.handle_error(e, MESSAGES["dataset_create_error"])
                return None
            if not new_id:
                self._bus.publish_alert("error", MESSAGES["dataset_create_error"])
                return None

            result = await self._copy_entries(new_id)
            self._finish_copy(result)
            return result
        finally:
            self.loading = False

    async def _copy_entries(self, new_id: int) -> CopyResult:
        try:
            rows = await self._entries.list(self.dataset_id)
        except REQUEST_ERRORS as e:
            logger.error(f"Error fetching entries for copy: {e}")
            return CopyResult(dataset_id=new_id, source_unavailable=True)

        outcomes = await asyncio.gather(
            *(self._copy_entry(new_id, row) for row in rows),
            return_exceptions=True,
        )
        failures = [o for o in outcomes if isinstance(o, Exception)]
        for failure in failures:
            logger.error(f"Error copying entry: {failure}")
        return CopyResult(
            dataset_id=new_id,
            copied=len(outcomes) - len(failures),
            total=len(outcomes),
        )

    async def _copy_entry(self, new_id: int, row: Mapping[str, Any]) -> None:
        record = EntryCreate(
            value=row.get("value"),
            label=row.get("label"),
            date=row.get("date"),
        )
        await self._entries.create(new_id, record)

    def _finish_copy(self, result: CopyResult) -> None:
        if result.complete:
            self._bus.publish_alert("success", MESSAGES["dataset_copied"])
        elif result.source_unavailable:
            self._bus.publish_alert("error", MESSAGES["entries_copy_error"])
        else:
            logger.warning(
                f"Copied {result.copied}/{result.total} entries to dataset {result.dataset_id}"
            )
            self._bus.publish_alert(
                "error",
                MESSAGES["entry_copy_error"].format(copied=result.copied, total=result.total),
            )
        self._bus.request_sidebar_refresh()
        self.navigate(dataset_path(result.dataset_id))
