"""Tests for the dataset form controller: create, update, delete and copy."""
import json

import httpx
import pytest

from tracker.domain.entities import DialogResult
from tracker.services.messages import MESSAGES

DATASET = {
    "id": 4,
    "name": "Savings",
    "description": "Monthly savings",
    "symbol": "EUR",
    "targetValue": 5000,
    "startDate": "2025-01-01T00:00:00Z",
    "endDate": "2025-12-31T00:00:00Z",
}

ENTRIES = [
    {"id": 1, "value": 10, "label": "a", "date": "2025-01-01T00:00:00Z"},
    {"id": 2, "value": 20, "label": "b", "date": "2025-02-01T00:00:00Z"},
    {"id": 3, "value": 30, "label": "c", "date": "2025-03-01T00:00:00Z"},
]


@pytest.fixture
def refreshes(services):
    calls = []
    services.bus.subscribe_sidebar_refresh(lambda: calls.append(True))
    return calls


@pytest.fixture
def form(services, navigations):
    controller = services.dataset_form(navigations.append)
    yield controller
    controller.close()


def valid_form(**overrides):
    values = {
        "name": "Weight",
        "description": "",
        "symbol": "kg",
        "target_value": "70",
        "start_date": "2025-01-01",
        "end_date": None,
    }
    values.update(overrides)
    return values


@pytest.mark.anyio
async def test_load_fills_form_with_input_dates(form, backend):
    backend.on("GET", "/datasets/4", payload=DATASET)

    await form.load(4)

    assert form.edit_mode
    assert form.form == {
        "name": "Savings",
        "description": "Monthly savings",
        "symbol": "EUR",
        "target_value": 5000,
        "start_date": "2025-01-01",
        "end_date": "2025-12-31",
    }


@pytest.mark.anyio
async def test_load_without_id_is_create_mode(form):
    await form.load(None)

    assert not form.edit_mode
    assert form.form["name"] == ""


@pytest.mark.anyio
async def test_load_failure(form, backend, alerts):
    backend.on("GET", "/datasets/4", status=503)

    await form.load(4)

    assert [(a.severity, a.message) for a in alerts] == [("error", MESSAGES["load_dataset_error"])]
    assert not form.loading


@pytest.mark.anyio
@pytest.mark.parametrize("overrides", [
    {"name": "   "},
    {"symbol": ""},
    {"name": "x" * 256},
    {"start_date": "2025-13-45"},
    {"target_value": "lots"},
])
async def test_invalid_form_is_not_sent(form, backend, alerts, overrides):
    assert await form.submit(valid_form(**overrides)) is False

    assert [(a.severity, a.message) for a in alerts] == [("info", MESSAGES["dataset_invalid"])]
    assert backend.requests == []


@pytest.mark.anyio
async def test_create_navigates_to_new_dataset(form, backend, alerts, refreshes, navigations):
    backend.on("POST", "/datasets", payload={"id": 12})

    assert await form.submit(valid_form(name="  Weight  ")) is True

    assert backend.bodies("POST", "/datasets") == [{
        "name": "Weight",
        "description": "",
        "symbol": "kg",
        "targetValue": 70.0,
        "startDate": "2025-01-01T00:00:00.000Z",
        "endDate": None,
    }]
    assert [(a.severity, a.message) for a in alerts] == [("success", MESSAGES["dataset_created"])]
    assert refreshes == [True]
    assert navigations == ["/datasets/12"]


@pytest.mark.anyio
async def test_create_without_returned_id_goes_home(form, backend, navigations):
    backend.on("POST", "/datasets", status=201)

    assert await form.submit(valid_form()) is True

    assert navigations == ["/"]


@pytest.mark.anyio
async def test_create_failure(form, backend, alerts, refreshes, navigations):
    backend.on("POST", "/datasets", status=500)

    assert await form.submit(valid_form()) is False

    assert [(a.severity, a.message) for a in alerts] == [("error", MESSAGES["dataset_create_error"])]
    assert refreshes == []
    assert navigations == []
    assert not form.loading


@pytest.mark.anyio
async def test_update_in_edit_mode(form, backend, alerts, refreshes, navigations):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("PUT", "/datasets/4", status=204)
    await form.load(4)

    assert await form.submit({**form.form, "name": "Savings 2025"}) is True

    assert backend.bodies("PUT", "/datasets/4")[0]["name"] == "Savings 2025"
    assert backend.calls("POST", "/datasets") == 0
    assert alerts[-1].message == MESSAGES["dataset_updated"]
    assert refreshes == [True]
    assert navigations == ["/datasets/4"]


@pytest.mark.anyio
async def test_delete_after_confirmation(form, services, backend, alerts, refreshes, navigations):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("DELETE", "/datasets/4", status=204)
    await form.load(4)

    form.delete()
    assert services.host.dialog.message
    assert backend.calls("DELETE", "/datasets/4") == 0

    services.host.choose(DialogResult.RIGHT)
    await form.wait_pending()

    assert backend.calls("DELETE", "/datasets/4") == 1
    assert alerts[-1].message == MESSAGES["dataset_deleted"]
    assert refreshes == [True]
    assert navigations == ["/"]


@pytest.mark.anyio
async def test_delete_is_ignored_in_create_mode(form, services):
    form.delete()

    assert services.host.dialog is None


@pytest.mark.anyio
async def test_dialog_closed_before_answer_never_deletes(form, services, backend):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("DELETE", "/datasets/4", status=204)
    await form.load(4)

    form.delete()
    services.bus.close_dialog()
    services.bus.resolve_dialog(DialogResult.RIGHT)
    await form.wait_pending()

    assert backend.calls("DELETE", "/datasets/4") == 0


@pytest.mark.anyio
async def test_copy_all_entries(form, backend, alerts, refreshes, navigations):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("POST", "/datasets", payload={"id": 8})
    backend.on("GET", "/datasets/4/entries", payload=ENTRIES)
    backend.on("POST", "/datasets/8/entries", payload={"id": 100})
    await form.load(4)

    result = await form.create_copy()

    assert result.copied == 3 and result.total == 3 and result.complete
    assert backend.bodies("POST", "/datasets")[0]["name"] == "Savings - 2"
    assert sorted(b["label"] for b in backend.bodies("POST", "/datasets/8/entries")) == ["a", "b", "c"]
    assert [(a.severity, a.message) for a in alerts] == [("success", MESSAGES["dataset_copied"])]
    assert refreshes == [True]
    assert navigations == ["/datasets/8"]


@pytest.mark.anyio
async def test_copy_with_one_failed_entry_reports_once(form, backend, alerts, navigations):
    def entry_handler(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["label"] == "b":
            return httpx.Response(500)
        return httpx.Response(200, json={"id": 100})

    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("POST", "/datasets", payload={"id": 8})
    backend.on("GET", "/datasets/4/entries", payload=ENTRIES)
    backend.on("POST", "/datasets/8/entries", handler=entry_handler)
    await form.load(4)

    result = await form.create_copy()

    assert (result.copied, result.total) == (2, 3)
    assert not result.complete
    assert backend.calls("POST", "/datasets/8/entries") == 3
    assert len(alerts) == 1
    assert alerts[0].severity == "error"
    assert alerts[0].message == MESSAGES["entry_copy_error"].format(copied=2, total=3)
    assert navigations == ["/datasets/8"]


@pytest.mark.anyio
async def test_copy_when_source_entries_unavailable(form, backend, alerts):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("POST", "/datasets", payload={"id": 8})
    backend.on("GET", "/datasets/4/entries", status=500)
    await form.load(4)

    result = await form.create_copy()

    assert result.source_unavailable
    assert [(a.severity, a.message) for a in alerts] == [("error", MESSAGES["entries_copy_error"])]


@pytest.mark.anyio
async def test_copy_without_new_id(form, backend, alerts, navigations):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("POST", "/datasets", status=201)
    await form.load(4)

    assert await form.create_copy() is None

    assert [(a.severity, a.message) for a in alerts] == [("error", MESSAGES["dataset_create_error"])]
    assert backend.calls("GET", "/datasets/4/entries") == 0
    assert navigations == []


@pytest.mark.anyio
async def test_copy_of_empty_dataset(form, backend, alerts):
    backend.on("GET", "/datasets/4", payload=DATASET)
    backend.on("POST", "/datasets", payload={"id": 8})
    backend.on("GET", "/datasets/4/entries", payload=[])
    await form.load(4)

    result = await form.create_copy()

    assert result.complete and result.total == 0
    assert alerts[0].message == MESSAGES["dataset_copied"]
