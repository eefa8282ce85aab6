import json

import pytest

from core.document_store import JsonDocumentStore, deep_merge
from core.exceptions import StateError
from core.models import Preferences, ProgressState
from core.user_store import UserStore


def test_deep_merge_merges_nested_maps_and_replaces_values():
    base = {"skills": {"Fuel": {"xp": 1}}, "streak": 2}
    merged = deep_merge(base, {"skills": {"Wisdom": {"xp": 3}}, "streak": 0})

    assert merged == {"skills": {"Fuel": {"xp": 1}, "Wisdom": {"xp": 3}}, "streak": 0}
    assert base["streak"] == 2


def test_merge_persists_and_keeps_other_keys(tmp_path):
    store = JsonDocumentStore(root=tmp_path)
    store.merge("u1", {"xp": 10, "skills": {"Fuel": {"level": 1, "xp": 10}}})
    store.merge("u1", {"skills": {"Fitness": {"level": 1, "xp": 50}}})

    on_disk = json.loads((tmp_path / "u1.json").read_text(encoding="utf-8"))
    assert on_disk["xp"] == 10
    assert set(on_disk["skills"]) == {"Fuel", "Fitness"}


def test_replace_drops_removed_nested_entries(tmp_path):
    store = JsonDocumentStore(root=tmp_path)
    store.merge("u1", {"selectedActivities": {"reading": [1], "run": [2]}})
    store.merge("u1", {"selectedActivities": {"pray": [3]}}, replace=("selectedActivities",))

    assert store.get("u1")["selectedActivities"] == {"pray": [3]}


def test_get_returns_copies_and_refresh_rereads(tmp_path):
    store = JsonDocumentStore(root=tmp_path)
    store.merge("u1", {"streak": 1})

    doc = store.get("u1")
    doc["streak"] = 99
    assert store.get("u1")["streak"] == 1

    (tmp_path / "u1.json").write_text(json.dumps({"streak": 5}), encoding="utf-8")
    assert store.get("u1")["streak"] == 1
    assert store.get("u1", refresh=True)["streak"] == 5


def test_missing_document_is_empty(tmp_path):
    assert JsonDocumentStore(root=tmp_path).get("nobody") == {}


def test_corrupt_document_raises_state_error(tmp_path):
    (tmp_path / "u1.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StateError):
        JsonDocumentStore(root=tmp_path).get("u1")


def test_invalid_user_id_rejected(tmp_path):
    with pytest.raises(StateError):
        JsonDocumentStore(root=tmp_path).get("../etc")


def test_user_store_round_trips_preferences(tmp_path):
    users = UserStore(JsonDocumentStore(root=tmp_path))
    users.save_preferences("u1", Preferences(wake_weekday=450, weight_lbs=150, selected_activities={"Reading": [1]}))

    raw = users.documents.get("u1")
    assert raw["wakeWeekday"] == 730
    assert raw["waterOunces"] == 100
    assert raw["selectedActivities"] == {"reading": [1]}

    prefs = users.load_preferences("u1")
    assert prefs.wake_weekday == 450
    assert prefs.selected_activities == {"Reading": [1]}


def test_user_store_progress_defaults_and_delta(tmp_path):
    users = UserStore(JsonDocumentStore(root=tmp_path))
    assert users.load_progress("u1") == ProgressState()

    saved = users.save_progress("u1", {"xp": 40, "lastResetDate": "2024-01-01"})
    assert saved.total_xp == 40
    assert saved.last_reset_date.isoformat() == "2024-01-01"
    assert saved.skills["Wisdom"].level == 1
