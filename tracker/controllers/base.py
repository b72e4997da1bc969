"""Shared plumbing for view controllers."""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set

import httpx

from tracker.domain.entities import DialogRequest, DialogResult
from tracker.services.messages import UI_TEXT
from tracker.services.notification_bus import NotificationBus, Subscription

logger = logging.getLogger(__name__)

# Failures a controller turns into an error alert
REQUEST_ERRORS = (httpx.HTTPError, ValueError)

Navigate = Callable[[str], None]


def _no_navigation(path: str) -> None:
    logger.debug(f"Navigation to {path} ignored")


class Controller:
    """Base for controllers that talk to the backend and the bus."""

    def __init__(self, bus: NotificationBus, navigate: Optional[Navigate] = None):
        self._bus = bus
        self._navigate = navigate or _no_navigation
        self._subscriptions: List[Subscription] = []
        self._tasks: Set[asyncio.Task] = set()

    def handle_error(self, error: Exception, message: str) -> None:
        """Log the failure and show one error alert."""
        logger.error(f"{message} ({error})")
        self._bus.publish_alert("error", message)

    def navigate(self, path: str) -> None:
        self._navigate(path)

    def confirm(
        self, message: str, on_confirm: Callable[[], Awaitable[None]]
    ) -> None:
        """Open a delete confirmation; run ``on_confirm`` only on the right button."""
        self._bus.request_dialog(
            DialogRequest(
                header=UI_TEXT["headers"]["confirm_delete"],
                message=message,
                left_button_text=UI_TEXT["buttons"]["cancel"],
                right_button_text=UI_TEXT["buttons"]["confirm"],
            )
        )

        def _on_result(result: DialogResult) -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
            if result == DialogResult.RIGHT:
                self._schedule(on_confirm())

        subscription = self._bus.once_dialog_result(_on_result)
        self._subscriptions.append(subscription)

    def _schedule(self, coro: Awaitable[None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_pending(self) -> None:
        """Wait for continuations started by dialog confirmations."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Release listeners when the view goes away."""
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
