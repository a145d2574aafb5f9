from datetime import datetime, timedelta

import pytest

from app.errors import RegistrationClosed
from app.services import events


def _event(**kw):
    data = {"title": "GenAI Bootcamp", "description": "Hands-on session on LLM apps",
            "date": datetime.utcnow() + timedelta(days=3), "registration_open": True}
    data.update(kw)
    return events.save_event(data)


def test_register_sends_ticket(app, sent_mail):
    ev = _event()
    reg = events.register(ev.id, " Kiran ", "Kiran@Example.com")
    assert reg.email == "kiran@example.com"
    assert sent_mail[0]["subject"] == "Your Ticket for GenAI Bootcamp"
    assert f"EVT{ev.id}-{reg.id:05d}" in sent_mail[0]["html"]


def test_closed_event_rejects(app):
    ev = _event(registration_open=False)
    with pytest.raises(RegistrationClosed):
        events.register(ev.id, "Kiran", "kiran@example.com")


def test_duplicate_registration_rejected(app):
    ev = _event()
    events.register(ev.id, "Kiran", "kiran@example.com")
    with pytest.raises(RegistrationClosed):
        events.register(ev.id, "Kiran again", "KIRAN@example.com")


def test_registrations_csv_and_reminders(app, sent_mail):
    ev = _event()
    events.register(ev.id, "A", "a@example.com")
    events.register(ev.id, "B", "b@example.com")
    lines = events.export_registrations_csv(ev.id).strip().splitlines()
    assert lines[0] == "name,email,registeredAt"
    assert [l.split(",")[0] for l in lines[1:]] == ["A", "B"]
    assert events.send_reminders(ev.id) == 2
    assert sent_mail[-1]["subject"].startswith("Reminder: GenAI Bootcamp")


def test_upcoming_only(app):
    past = _event(title="Old meetup", date=datetime.utcnow() - timedelta(days=10))
    future = _event()
    assert [e.id for e in events.list_events(upcoming_only=True)] == [future.id]
    assert {e.id for e in events.list_events()} == {past.id, future.id}


def test_public_registration_route(client, app):
    ev = _event()
    resp = client.post(f"/events/{ev.id}/register", data={"name": "Kiran", "email": "kiran@example.com"})
    assert resp.status_code == 201
    again = client.post(f"/events/{ev.id}/register", data={"name": "Kiran", "email": "kiran@example.com"})
    assert again.status_code == 400
    assert again.get_json()["error"] == "You have already registered for this event."


def test_admin_event_crud(admin_client):
    resp = admin_client.post("/admin/events", data={
        "title": "Azure Day", "description": "Cloud fundamentals workshop",
        "date": "2031-02-01T10:00", "registration_open": "y",
    })
    assert resp.status_code == 201
    ev_id = resp.get_json()["id"]
    assert admin_client.get("/admin/events").get_json()["items"][0]["registrationOpen"] is True
    assert admin_client.post(f"/admin/events/{ev_id}/delete").get_json()["success"] is True
    assert admin_client.get(f"/events/{ev_id}").status_code == 404


def test_concurrent_duplicate_registration_rejected(app, monkeypatch):
    from app.models.event import EventRegistration

    ev = _event()
    events.register(ev.id, "Kiran", "kiran@example.com")

    class MissedCheck:
        def filter_by(self, **kw):
            return self

        def first(self):
            return None

    # the other request's row is not visible to the pre-insert lookup
    monkeypatch.setattr(EventRegistration, "query", MissedCheck())
    with pytest.raises(RegistrationClosed):
        events.register(ev.id, "Kiran", "kiran@example.com")
    monkeypatch.undo()
    assert len(events.registrations(ev.id)) == 1
