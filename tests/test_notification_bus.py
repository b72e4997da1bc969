"""Tests for the notification bus."""
from tracker.domain.entities import AlertEvent, DialogRequest, DialogResult
from tracker.services.notification_bus import DIALOG_RESULT, NotificationBus
from tracker.services.presentation_host import PresentationHost


def test_alerts_reach_every_subscriber_in_publish_order(bus):
    first, second = [], []
    bus.subscribe_alerts(first.append)
    bus.subscribe_alerts(second.append)

    bus.publish_alert("info", "one")
    bus.publish_alert("error", "two")
    bus.publish_alert("success", "three")

    expected = [
        AlertEvent(severity="info", message="one"),
        AlertEvent(severity="error", message="two"),
        AlertEvent(severity="success", message="three"),
    ]
    assert first == expected
    assert second == expected


def test_subscribers_called_in_registration_order(bus):
    calls = []
    bus.subscribe_alerts(lambda e: calls.append("a"))
    bus.subscribe_alerts(lambda e: calls.append("b"))
    bus.subscribe_alerts(lambda e: calls.append("c"))

    bus.publish_alert("info", "x")

    assert calls == ["a", "b", "c"]


def test_publish_without_subscribers_is_dropped(bus):
    bus.publish_alert("warning", "nobody listens")

    late = []
    bus.subscribe_alerts(late.append)
    assert late == []


def test_unsubscribe_stops_delivery_and_is_idempotent(bus):
    received = []
    subscription = bus.subscribe_alerts(received.append)

    subscription.unsubscribe()
    subscription.unsubscribe()
    bus.publish_alert("info", "after")

    assert received == []


def test_failing_subscriber_does_not_block_others(bus):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe_alerts(broken)
    bus.subscribe_alerts(received.append)

    bus.publish_alert("info", "still delivered")

    assert [e.message for e in received] == ["still delivered"]


def test_request_then_close_leaves_no_dialog(bus):
    host = PresentationHost(bus)

    bus.request_dialog(DialogRequest(header="Delete?", message="Sure?"))
    bus.close_dialog()

    assert host.dialog is None


def test_new_dialog_replaces_current_one(bus):
    host = PresentationHost(bus)

    bus.request_dialog(DialogRequest(header="first"))
    bus.request_dialog(DialogRequest(header="second"))

    assert host.dialog.header == "second"


def test_one_shot_listener_sees_exactly_one_result(bus):
    first, late = [], []
    bus.request_dialog(DialogRequest(header="Delete?"))
    bus.once_dialog_result(first.append)

    bus.resolve_dialog(DialogResult.RIGHT)
    bus.once_dialog_result(late.append)

    assert first == [DialogResult.RIGHT]
    assert late == []
    assert bus.subscriber_count(DIALOG_RESULT) == 1


def test_one_shot_listener_ignores_later_dialogs(bus):
    received = []
    bus.request_dialog(DialogRequest(header="first"))
    bus.once_dialog_result(received.append)

    bus.resolve_dialog(DialogResult.LEFT)
    bus.request_dialog(DialogRequest(header="second"))
    bus.resolve_dialog(DialogResult.RIGHT)

    assert received == [DialogResult.LEFT]


def test_replacing_dialog_discards_pending_one_shot_listener(bus):
    stale, fresh = [], []
    bus.request_dialog(DialogRequest(header="first"))
    bus.once_dialog_result(stale.append)

    bus.request_dialog(DialogRequest(header="second"))
    bus.once_dialog_result(fresh.append)
    bus.resolve_dialog(DialogResult.RIGHT)

    assert stale == []
    assert fresh == [DialogResult.RIGHT]


def test_closing_dialog_discards_pending_one_shot_listener(bus):
    received = []
    bus.request_dialog(DialogRequest(header="Delete?"))
    bus.once_dialog_result(received.append)

    bus.close_dialog()
    bus.resolve_dialog(DialogResult.RIGHT)

    assert received == []
    assert bus.subscriber_count(DIALOG_RESULT) == 0


def test_observer_receives_every_result(bus):
    received = []
    bus.observe_dialog_result(received.append)

    bus.request_dialog(DialogRequest(header="a"))
    bus.resolve_dialog("left")
    bus.request_dialog(DialogRequest(header="b"))
    bus.resolve_dialog("right")

    assert received == [DialogResult.LEFT, DialogResult.RIGHT]


def test_sidebar_refresh_signal(bus):
    calls = []
    bus.subscribe_sidebar_refresh(lambda: calls.append(True))

    bus.request_sidebar_refresh()
    bus.request_sidebar_refresh()

    assert calls == [True, True]


def test_buses_are_independent():
    one, two = NotificationBus(), NotificationBus()
    received = []
    one.subscribe_alerts(received.append)

    two.publish_alert("info", "elsewhere")

    assert received == []
