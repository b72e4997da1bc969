"""Navigation sidebar listing every dataset."""
import logging
from typing import List, Optional

from tracker.controllers.base import Controller, Navigate, REQUEST_ERRORS
from tracker.domain.entities import NavItem
from tracker.domain.interfaces import DatasetRepository
from tracker.routes import NEW_DATASET_PATH, dataset_path
from tracker.services.messages import MESSAGES, UI_TEXT
from tracker.services.notification_bus import NotificationBus

logger = logging.getLogger(__name__)


class SidebarController(Controller):
    """Keeps the dataset list fresh; re-fetches on every refresh signal."""

    def __init__(
        self,
        bus: NotificationBus,
        datasets: DatasetRepository,
        navigate: Optional[Navigate] = None,
    ):
        super().__init__(bus, navigate)
        self._datasets = datasets
        self.items: List[NavItem] = []
        self.stale = True
        self._subscriptions.append(bus.subscribe_sidebar_refresh(self._mark_stale))

    def _mark_stale(self) -> None:
        self.stale = True

    async def refresh_if_stale(self) -> None:
        if self.stale:
            await self.load()

    async def load(self) -> None:
        try:
            datasets = await self._datasets.list()
        except REQUEST_ERRORS as e:
            self.handle_error(e, MESSAGES["datasets_load_error"])
            return
        self.stale = False
        add_item = NavItem(
            route=NEW_DATASET_PATH,
            icon=":material/add:",
            label=UI_TEXT["labels"]["add_dataset"],
        )
        self.items = [add_item] + [
            NavItem(route=dataset_path(d.id), icon=":material/database:", label=d.name)
            for d in datasets
            if d.id is not None
        ]
        logger.info(f"Loaded {len(datasets)} datasets")
