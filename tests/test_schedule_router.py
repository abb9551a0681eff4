import pytest
from fastapi.testclient import TestClient

from tripboard.dependencies import WorkspaceRegistry, get_workspace_registry
from tripboard.errors import RejectionError, TransportError
from tripboard.main import app

from mock_trip_api import FakeTripApi, build_schedule

BASE = "/api/v1/trips/trip_1"


@pytest.fixture
def api():
    return FakeTripApi(build_schedule({"d1": ["A", "B", "C"], "d2": ["X", "Y"], "d3": []}, notes={"d1": "old"}))


@pytest.fixture
def client(api):
    registry = WorkspaceRegistry(api)
    app.dependency_overrides[get_workspace_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def day_items(schedule_json, day_id):
    for day in schedule_json["tripDays"]:
        if day["tripDay"]["tripDayId"] == day_id:
            return [entry["item"]["itemId"] for entry in day["tripDayItems"]]
    raise AssertionError(f"day {day_id} missing")


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_get_schedule_loads_once(client, api):
    first = client.get(f"{BASE}/schedule").json()
    client.get(f"{BASE}/schedule")

    assert day_items(first, "d1") == ["A", "B", "C"]
    assert first["tripDays"][0]["tripDay"]["notes"] == "old"
    assert len(api.calls_to("load_schedule")) == 1


def test_load_failure_is_bad_gateway(client, api):
    api.fail("load_schedule", TransportError("connection refused"))
    response = client.get(f"{BASE}/schedule")
    assert response.status_code == 502


def test_drag_flow_commits(client, api):
    assert client.post(f"{BASE}/drag/start", json={"itemId": "A"}).json()["dragActive"] is True

    hover = client.post(f"{BASE}/drag/hover", json={"overId": "Y"}).json()
    assert hover["changed"] is True
    assert hover["intent"] == {"itemId": "A", "targetDayId": "d2", "prevItemId": "X", "nextItemId": "Y"}
    assert day_items(hover["schedule"], "d2") == ["X", "A", "Y"]

    end = client.post(f"{BASE}/drag/end").json()
    assert end["ok"] is True
    assert end["status"] == "committed"
    assert day_items(end["schedule"], "d1") == ["B", "C"]
    assert api.calls_to("move_item") == [("trip_1", "A", "d2", "X", "Y")]


def test_drag_flow_rolls_back_and_posts_notice(client, api):
    api.fail("move_item", RejectionError("No permission to edit this trip", code=403))
    client.post(f"{BASE}/drag/start", json={"itemId": "C"})
    client.post(f"{BASE}/drag/hover", json={"overId": "empty-day-d3"})

    end = client.post(f"{BASE}/drag/end").json()

    assert end["ok"] is False
    assert end["status"] == "rolled_back"
    assert end["message"] == "No permission to edit this trip"
    assert day_items(end["schedule"], "d1") == ["A", "B", "C"]
    assert day_items(end["schedule"], "d3") == []

    notices = client.get(f"{BASE}/notices").json()["notices"]
    assert [n["message"] for n in notices] == ["No permission to edit this trip"]
    assert client.get(f"{BASE}/notices").json()["notices"] == []


def test_drag_state_conflicts(client):
    assert client.post(f"{BASE}/drag/hover", json={"overId": "A"}).status_code == 409
    assert client.post(f"{BASE}/drag/end").status_code == 409
    assert client.post(f"{BASE}/drag/start", json={"itemId": "ghost"}).status_code == 404

    client.post(f"{BASE}/drag/start", json={"itemId": "A"})
    assert client.post(f"{BASE}/drag/start", json={"itemId": "B"}).status_code == 409
    assert client.post(f"{BASE}/schedule/refresh").status_code == 409

    cancel = client.post(f"{BASE}/drag/cancel").json()
    assert cancel["status"] == "cancelled"
    assert client.post(f"{BASE}/schedule/refresh").status_code == 200


def test_exchange_days(client, api):
    response = client.put(f"{BASE}/days/exchange", json={"aTripDayId": "d1", "bTripDayId": "d3"}).json()
    assert response["ok"] is True
    assert [d["tripDay"]["tripDayId"] for d in response["schedule"]["tripDays"]] == ["d3", "d2", "d1"]

    missing = client.put(f"{BASE}/days/exchange", json={"aTripDayId": "d1", "bTripDayId": "ghost"})
    assert missing.status_code == 404


def test_day_notes_failure(client, api):
    api.fail("set_day_notes", TransportError("timeout"))
    response = client.put(f"{BASE}/days/d1/notes", json={"notes": "new"}).json()

    assert response["ok"] is False
    assert response["message"] == "Network error: timeout"
    assert response["schedule"]["tripDays"][0]["tripDay"]["notes"] == "old"


def test_day_edits_conflict_with_active_drag(client, api):
    client.post(f"{BASE}/drag/start", json={"itemId": "A"})

    assert client.put(f"{BASE}/days/exchange", json={"aTripDayId": "d1", "bTripDayId": "d2"}).status_code == 409
    assert client.put(f"{BASE}/days/d1/notes", json={"notes": "new"}).status_code == 409
    assert api.calls_to("swap_day_order") == []
    assert api.calls_to("set_day_notes") == []

    client.post(f"{BASE}/drag/cancel")
    assert client.put(f"{BASE}/days/d1/notes", json={"notes": "new"}).json()["ok"] is True
