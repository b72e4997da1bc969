"""Application wiring.

``init_services`` is called once at startup and returns the container that
owns the process-wide notification bus; everything else receives the bus
from it by reference.
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from tracker.config import AppConfig, app_config
from tracker.controllers.base import Navigate
from tracker.controllers.dataset_form import DatasetFormController
from tracker.controllers.entry_list import EntryListController
from tracker.controllers.sidebar import SidebarController
from tracker.infrastructure.api_gateway import ApiGateway
from tracker.repository.http_repository import HttpDatasetRepository, HttpEntryRepository
from tracker.services.notification_bus import NotificationBus
from tracker.services.presentation_host import PresentationHost


@dataclass
class Services:
    """Everything a view needs, created once per application."""
    config: AppConfig
    bus: NotificationBus
    gateway: ApiGateway
    datasets: HttpDatasetRepository
    entries: HttpEntryRepository
    host: PresentationHost

    def entry_list(self, navigate: Optional[Navigate] = None) -> EntryListController:
        return EntryListController(self.bus, self.datasets, self.entries, navigate)

    def dataset_form(self, navigate: Optional[Navigate] = None) -> DatasetFormController:
        return DatasetFormController(self.bus, self.datasets, self.entries, navigate)

    def sidebar(self, navigate: Optional[Navigate] = None) -> SidebarController:
        return SidebarController(self.bus, self.datasets, navigate)

    def shutdown(self) -> None:
        self.host.close()


def init_services(
    config: Optional[AppConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Services:
    """Initialize all services; the presentation host subscribes before anything can publish."""
    config = config or app_config
    bus = NotificationBus()
    host = PresentationHost(bus, alert_duration=config.ALERT_DURATION_SECONDS)
    gateway = ApiGateway(config.BACKEND_URL, config.REQUEST_TIMEOUT, transport=transport)
    return Services(
        config=config,
        bus=bus,
        gateway=gateway,
        datasets=HttpDatasetRepository(gateway),
        entries=HttpEntryRepository(gateway),
        host=host,
    )
