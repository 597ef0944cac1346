from __future__ import annotations

from decimal import Decimal

import pytest

from attendance_bot.main import create_app
from attendance_bot.storage.store import InMemoryStore, Table


@pytest.fixture
def store():
    s = InMemoryStore()
    s.append(
        Table.ROSTER,
        {"person_id": "P1", "name": "Somchai", "role": "employee", "active": True, "daily_rate": "500", "total_debt": "1000"},
    )
    return s


@pytest.fixture
def app(settings, store, push, clock):
    app = create_app(settings, store=store, push=push, clock=clock)
    app.config.update({"TESTING": True})
    yield app
    app.extensions["attendance_bot.runtime"].stop()


@pytest.fixture
def client(app):
    return app.test_client()


def test_health(client):
    assert client.get("/health").data == b"OK"
    assert client.get("/").status_code == 200


def test_state_is_reconciled_at_startup(app):
    ctx = app.extensions["attendance_bot"]
    assert ctx.directory.get("P1").total_debt == Decimal("1000")


def test_command_round_trip(client, store):
    resp = client.post("/commands", json={"person_id": "P1", "text": "checkin", "timestamp": "2025-01-06T09:00:00"})
    assert resp.status_code == 200
    assert resp.get_json()["type"] == "menu"
    assert len(resp.get_json()["choices"]) == 4

    resp = client.post("/commands", json={"person_id": "P1", "text": "work:full", "timestamp": "2025-01-06T09:01:00"})
    assert resp.get_json()["type"] == "text"
    assert resp.get_json()["text"].startswith("✅")
    assert store.read(Table.ATTENDANCE)[0]["work_type"] == "full"


@pytest.mark.parametrize(
    "payload",
    [{}, {"person_id": "P1"}, {"text": "checkin"}, {"person_id": "P1", "text": "checkin", "timestamp": "yesterday"}],
)
def test_bad_command_payload(client, payload):
    assert client.post("/commands", json=payload).status_code == 400


def test_hooks_list(client):
    hooks = client.get("/hooks").get_json()
    assert {"hook": "weeklyPayroll", "cron": "0 18 * * 6", "label": None} in hooks


def test_run_named_hook(client, push):
    resp = client.post("/hooks/dailyReminder", json={"label": "⏰ Reminder 09:00"})

    assert resp.status_code == 200
    assert resp.get_json()["sent"] == ["P1"]
    assert push.to("P1")[0].startswith("⏰ Reminder 09:00")


def test_unknown_hook(client):
    assert client.post("/hooks/nightlyBackup").status_code == 404


def test_tick_runs_due_hooks(client, clock, push):
    resp = client.post("/hooks/tick")
    ran = resp.get_json()["ran"]

    assert [r["hook"] for r in ran] == ["dailyReminder"]
    assert push.to("P1")[0].startswith("⏰ Reminder 09:00")
