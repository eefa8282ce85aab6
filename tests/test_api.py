import asyncio

import pytest
from fastapi import HTTPException

import web.backend.deps as deps
from core.daily_service import DailyService
from web.backend.routers import preferences as preferences_router
from web.backend.routers import progress as progress_router
from web.backend.routers import tasks as tasks_router
from web.backend.routers.preferences import PreferencesRequest

MONDAY = "2024-01-01"


@pytest.fixture
def service(users):
    service = DailyService(store=users)
    deps.set_service(service)
    yield service
    deps.set_service(None)


def _save_monday_prefs():
    req = PreferencesRequest(
        wakeWeekday="07:00",
        sleepHoursWeekday=8,
        weightLbs=150,
        screenLimitHours=3,
        workoutDays=[1],
        workoutHoursPerDay=1,
        selectedActivities={"Reading": [3]},
    )
    return asyncio.run(preferences_router.update_preferences("u1", req))


def test_update_and_get_preferences(service):
    saved = _save_monday_prefs()
    assert saved["wakeWeekday"] == 700
    assert saved["waterOunces"] == 100
    assert saved["selectedActivities"] == {"reading": [3]}

    loaded = asyncio.run(preferences_router.get_preferences("u1"))
    assert loaded == saved


def test_today_and_complete(service):
    _save_monday_prefs()

    today = asyncio.run(tasks_router.get_today("u1", day=MONDAY))
    assert today["date"] == MONDAY
    assert today["summary"]["total"] == 5
    assert today["tasks"][0]["id"] == "2024-01-01:wake-up"

    result = asyncio.run(tasks_router.complete_task("u1", "2024-01-01:workout", day=MONDAY))
    assert result["changed"] is True
    assert result["xpAwarded"] == 50
    assert result["totalXP"] == 50


def test_unknown_task_is_not_an_error(service):
    _save_monday_prefs()
    result = asyncio.run(tasks_router.complete_task("u1", "2024-01-01:nope", day=MONDAY))
    assert result["changed"] is False
    assert result["task"] is None


def test_malformed_day_is_400(service):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(tasks_router.get_today("u1", day="01/02/2024"))
    assert exc.value.status_code == 400


def test_invalid_preferences_are_422(service):
    req = PreferencesRequest(selectedActivities={"Reading": [1], "Run": [2], "Pray": [3]})
    with pytest.raises(HTTPException) as exc:
        asyncio.run(preferences_router.update_preferences("u1", req))
    assert exc.value.status_code == 422
    assert "selectedActivities" in exc.value.detail["hint"]


def test_unknown_activity_is_422(service):
    req = PreferencesRequest(selectedActivities={"Workout": [1]})
    with pytest.raises(HTTPException) as exc:
        asyncio.run(preferences_router.update_preferences("u1", req))
    assert exc.value.status_code == 422


def test_unparseable_wake_time_is_422(service):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(preferences_router.update_preferences("u1", PreferencesRequest(wakeWeekday="25:00")))
    assert exc.value.status_code == 422


def test_invalid_user_id_is_400(service):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(progress_router.get_progress("bad id!"))
    assert exc.value.status_code == 400


def test_progress_and_streak_reset(service):
    _save_monday_prefs()
    for task in asyncio.run(tasks_router.get_today("u1", day=MONDAY))["tasks"]:
        asyncio.run(tasks_router.complete_task("u1", task["id"], day=MONDAY))

    summary = asyncio.run(progress_router.get_progress("u1", day=MONDAY))
    assert summary["totalXP"] == 140
    assert summary["streak"] == 1
    assert summary["journeyProgress"] == pytest.approx(140 / 20100)

    reset = asyncio.run(progress_router.reset_streak("u1"))
    assert reset == {"streak": 0, "previousStreak": 1}


def test_app_mounts_user_routes(client):
    day = {"day": MONDAY}
    assert client.get("/health").status_code == 200
    assert client.get("/api/v1/users/u1/tasks/today", params=day).status_code == 200
    assert client.post("/api/v1/users/u1/tasks/2024-01-01:nope/complete", params=day).status_code == 200
    assert client.get("/api/v1/users/u1/progress", params=day).status_code == 200
    assert client.post("/api/v1/users/u1/progress/streak/reset").status_code == 200
    assert client.get("/api/v1/users/u1/preferences").status_code == 200
    assert client.get("/api/v1/users/u1/nothing-here").status_code == 404


@pytest.fixture
def client(service):
    from fastapi.testclient import TestClient
    from web.backend.app import create_app

    return TestClient(create_app())


def test_http_round_trip(client):
    assert client.get("/health").json() == {"status": "ok", "service": "Arise"}

    put = client.put("/api/v1/users/u1/preferences", json={"weightLbs": 150, "screenLimitHours": 2})
    assert put.status_code == 200

    today = client.get("/api/v1/users/u1/tasks/today", params={"day": MONDAY}).json()
    assert [t["name"] for t in today["tasks"]] == ["Drink Water", "Screen Time Limit"]

    done = client.post("/api/v1/users/u1/tasks/2024-01-01:drink-water/complete", params={"day": MONDAY})
    assert done.json()["totalXP"] == 20


def test_http_validation_error(client):
    resp = client.put("/api/v1/users/u1/preferences", json={"workoutDays": [0]})
    assert resp.status_code == 422
    assert resp.json()["detail"]["message"].startswith("workoutDays")
