"""Dataset detail view: entry table, entry CRUD and charts."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from tracker.controllers.base import Controller, Navigate, REQUEST_ERRORS
from tracker.domain.entities import Entry, EntryCreate
from tracker.domain.interfaces import DatasetRepository, EntryRepository
from tracker.services.chart_pipeline import ChartData, prepare_chart_data, sort_rows_by_date
from tracker.services.date_normalizer import to_date_input_value
from tracker.services.messages import MESSAGES, UI_TEXT
from tracker.services.notification_bus import NotificationBus

logger = logging.getLogger(__name__)

GRAPH_TYPES = ("actual", "target", "end_date")
TABS = ("data", "graph", "edit")


class EntryListController(Controller):
    """Loads and edits the entries of one dataset."""

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
        self.active_tab = "data"
        self.entries: List[Entry] = []
        self.dataset_name = ""
        self.dataset_symbol = ""
        self.graph_type = "actual"
        self.graph_rows: List[Dict[str, Any]] = []
        self.chart: Optional[ChartData] = None
        self.entries_loading = False
        self.graph_loading = False

    async def load(self, dataset_id: Optional[int], fragment: str = "") -> None:
        """Show a dataset; ``#edit`` in the URL preselects the edit tab."""
        if fragment.lstrip("#") == "edit":
            self.active_tab = "edit"

        self.dataset_id = dataset_id
        if not dataset_id:
            self._reset()
            return

        await asyncio.gather(
            self.load_meta(),
            self.load_entries(),
            self.load_graph("actual"),
        )

    async def load_meta(self) -> None:
        try:
            dataset = await self._datasets.get(self.dataset_id)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["dataset_meta_error"])
            return
        self.dataset_name = dataset.name
        self.dataset_symbol = dataset.symbol

    # Entries

    async def load_entries(self) -> None:
        """Fetch entries, newest first, with dates as ``YYYY-MM-DD``."""
        self.entries_loading = True
        try:
            rows = await self._entries.list(self.dataset_id)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["load_entries_error"])
            return
        finally:
            self.entries_loading = False

        entries = []
        for row in rows:
            try:
                entry = Entry.model_validate(row)
            except ValueError as e:
                logger.warning(f"Skipping malformed entry row {row!r}: {e}")
                continue
            entry.date = to_date_input_value(entry.date) if entry.date else ""
            entries.append(entry)
        self.entries = sort_rows_by_date(entries, descending=True)

    async def add_entry(self, value: Any, label: str, date: str) -> bool:
        if not self.dataset_id:
            return False

        if value is None or value == "" or not (label or "").strip() or not (date or "").strip():
            self._bus.publish_alert("info", MESSAGES["missing_fields"])
            return False
        try:
            record = EntryCreate(value=value, label=label, date=date)
        except ValueError:
            self._bus.publish_alert("info", MESSAGES["missing_fields"])
            return False

        try:
            created = await self._entries.create(self.dataset_id, record)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["entry_create_error"])
            return False

        self._bus.publish_alert("success", MESSAGES["entry_created"])
        if created and created.get("id"):
            try:
                entry = Entry.model_validate(created)
            except ValueError:
                await self.load_entries()
                return True
            entry.date = to_date_input_value(entry.date) if entry.date else ""
            self.entries = sort_rows_by_date([entry, *self.entries], descending=True)
        else:
            await self.load_entries()
        return True

    async def save_entry(self, entry: Entry) -> bool:
        if not self.dataset_id:
            return False
        try:
            record = EntryCreate(
                id=entry.id,
                dataset_id=self.dataset_id,
                value=entry.value,
                label=entry.label,
                date=entry.date,
            )
        except ValueError:
            self._bus.publish_alert("info", MESSAGES["missing_fields"])
            return False

        try:
            await self._entries.update(entry.id, record)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["entry_update_error"])
            return False
        self._bus.publish_alert("success", MESSAGES["entry_updated"])
        return True

    def delete_entry(self, entry: Entry) -> None:
        """Ask for confirmation; the entry is deleted once the user confirms."""
        self.confirm(
            UI_TEXT["labels"]["confirm_delete_entry"],
            lambda: self._delete_confirmed(entry),
        )

    async def _delete_confirmed(self, entry: Entry) -> None:
        try:
            await self._entries.delete(entry.id)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["entry_delete_error"])
            return
        self._bus.publish_alert("success", MESSAGES["entry_deleted"])
        self.entries = [e for e in self.entries if e.id != entry.id]

    def sort_entries(self, by: str = "date", descending: bool = True) -> List[Entry]:
        if by == "value":
            self.entries = sorted(self.entries, key=lambda e: e.value, reverse=descending)
        else:
            self.entries = sort_rows_by_date(self.entries, descending=descending)
        return self.entries

    # Graph

    async def set_graph_type(self, graph_type: str) -> None:
        self.graph_type = graph_type
        self.active_tab = "graph"
        await self.load_graph(graph_type)

    async def load_graph(self, graph_type: Optional[str] = None) -> None:
        if not self.dataset_id:
            return
        graph_type = graph_type or self.graph_type
        if graph_type not in GRAPH_TYPES:
            raise ValueError(f"Unknown graph type: {graph_type}")

        fetchers = {
            "actual": self._entries.list,
            "target": self._entries.list_projected_to_target,
            "end_date": self._entries.list_projected_to_end_date,
        }
        self.graph_loading = True
        try:
            rows = await fetchers[graph_type](self.dataset_id)
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["graph_load_error"])
            return
        finally:
            self.graph_loading = False

        self.graph_rows = sort_rows_by_date(rows)
        self.chart = prepare_chart_data(self.graph_rows)

    def _reset(self) -> None:
        self.entries = []
        self.graph_rows = []
        self.chart = None
        self.dataset_name = ""
        self.dataset_symbol = ""
