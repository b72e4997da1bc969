"""State of the single top-level host that renders alerts and dialogs."""
from dataclasses import dataclass, field
from itertools import count
from typing import Callable, List, Optional
import logging
import time

from tracker.config import app_config
from tracker.domain.entities import AlertEvent, DialogRequest, DialogResult
from tracker.services.notification_bus import NotificationBus, Subscription

logger = logging.getLogger(__name__)


@dataclass
class VisibleAlert:
    id: int
    event: AlertEvent
    expires_at: float


@dataclass
class PresentationHost:
    """Subscribes once to the bus and keeps what the UI has to draw.

    Alerts hide themselves after ``alert_duration`` seconds or when
    dismissed. Only one dialog is shown at a time; a new request replaces
    the current one.
    """
    bus: NotificationBus
    alert_duration: float = app_config.ALERT_DURATION_SECONDS
    clock: Callable[[], float] = time.monotonic
    alerts: List[VisibleAlert] = field(default_factory=list)
    dialog: Optional[DialogRequest] = None
    _ids: count = field(default_factory=lambda: count(1), repr=False)
    _subscriptions: List[Subscription] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self._subscriptions = [
            self.bus.subscribe_alerts(self._on_alert),
            self.bus.subscribe_dialogs(self._on_dialog),
        ]

    def _on_alert(self, event: AlertEvent) -> None:
        self.alerts.append(
            VisibleAlert(next(self._ids), event, self.clock() + self.alert_duration)
        )

    def _on_dialog(self, request: Optional[DialogRequest]) -> None:
        self.dialog = request

    def visible_alerts(self, now: Optional[float] = None) -> List[VisibleAlert]:
        """Drop expired alerts and return the remaining ones, oldest first."""
        now = self.clock() if now is None else now
        self.alerts = [a for a in self.alerts if a.expires_at > now]
        return list(self.alerts)

    def dismiss_alert(self, alert_id: int) -> None:
        self.alerts = [a for a in self.alerts if a.id != alert_id]

    def choose(self, result: DialogResult) -> None:
        """Hide the dialog and hand the user's choice back to the requester."""
        if self.dialog is None:
            logger.warning("Dialog choice without an open dialog ignored")
            return
        self.dialog = None
        self.bus.resolve_dialog(result)

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
