"""Process-wide publish/subscribe hub for alerts, dialogs and sidebar refreshes."""
from typing import Callable, Dict, List, Optional
import logging

from tracker.domain.entities import AlertEvent, AlertType, DialogRequest, DialogResult

logger = logging.getLogger(__name__)

ALERT = "alert"
DIALOG = "dialog"
DIALOG_RESULT = "dialog_result"
SIDEBAR_REFRESH = "sidebar_refresh"


class Subscription:
    """Handle returned by every subscribe call."""

    def __init__(
        self, bus: "NotificationBus", kind: str, callback: Callable, once: bool = False
    ):
        self._bus = bus
        self._kind = kind
        self.callback = callback
        self.once = once
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self.active:
            self.active = False
            self._bus._remove(self._kind, self)


class NotificationBus:
    """Routes UI events from controllers to the presentation host.

    Delivery is synchronous: every subscriber registered at publish time is
    called, in registration order, before the publish call returns. Nothing
    is buffered, so events published while nobody listens are dropped.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Subscription]] = {
            ALERT: [],
            DIALOG: [],
            DIALOG_RESULT: [],
            SIDEBAR_REFRESH: [],
        }

    # Registration

    def subscribe_alerts(self, callback: Callable[[AlertEvent], None]) -> Subscription:
        """Register alert callback."""
        return self._add(ALERT, callback)

    def subscribe_dialogs(
        self, callback: Callable[[Optional[DialogRequest]], None]
    ) -> Subscription:
        """Register dialog callback; receives None when the dialog must close."""
        return self._add(DIALOG, callback)

    def subscribe_sidebar_refresh(self, callback: Callable[[], None]) -> Subscription:
        """Register sidebar refresh callback."""
        return self._add(SIDEBAR_REFRESH, callback)

    def observe_dialog_result(
        self, callback: Callable[[DialogResult], None]
    ) -> Subscription:
        """Register a listener for every future dialog result."""
        return self._add(DIALOG_RESULT, callback)

    def once_dialog_result(
        self, callback: Callable[[DialogResult], None]
    ) -> Subscription:
        """Register a listener that only receives the next dialog result.

        The listener belongs to the dialog that is currently open: requesting
        or closing a dialog discards it without a call.
        """
        subscription: Optional[Subscription] = None

        def _once(result: DialogResult) -> None:
            subscription.unsubscribe()
            callback(result)

        subscription = self._add(DIALOG_RESULT, _once, once=True)
        return subscription

    def subscriber_count(self, kind: str) -> int:
        return len(self._subscribers[kind])

    # Publishing

    def publish_alert(self, severity: AlertType, message: str) -> None:
        """Show a transient alert."""
        self._publish(ALERT, AlertEvent(severity=severity, message=message))

    def request_dialog(self, config: DialogRequest) -> None:
        """Ask the host to open (or replace) the confirmation dialog."""
        self._discard_pending_results()
        self._publish(DIALOG, config)

    def close_dialog(self) -> None:
        """Ask the host to hide the dialog without producing a result."""
        self._discard_pending_results()
        self._publish(DIALOG, None)

    def resolve_dialog(self, result: DialogResult) -> None:
        """Publish the user's choice for the open dialog."""
        self._publish(DIALOG_RESULT, DialogResult(result))

    def request_sidebar_refresh(self) -> None:
        """Tell list views to re-fetch their collection."""
        self._publish(SIDEBAR_REFRESH)

    # Internals

    def _add(self, kind: str, callback: Callable, once: bool = False) -> Subscription:
        subscription = Subscription(self, kind, callback, once)
        self._subscribers[kind].append(subscription)
        return subscription

    def _discard_pending_results(self) -> None:
        for subscription in list(self._subscribers[DIALOG_RESULT]):
            if subscription.once:
                subscription.unsubscribe()

    def _remove(self, kind: str, subscription: Subscription) -> None:
        try:
            self._subscribers[kind].remove(subscription)
        except ValueError:
            pass

    def _publish(self, kind: str, *payload) -> None:
        # Snapshot, so callbacks may (un)subscribe while we iterate
        for subscription in list(self._subscribers[kind]):
            if not subscription.active:
                continue
            try:
                subscription.callback(*payload)
            except Exception as e:
                logger.error(f"Error in {kind} callback: {e}")
