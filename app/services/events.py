"""Events and public registrations."""
import csv
from datetime import datetime
from io import StringIO

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import NotFound, RegistrationClosed
from ..extensions import db
from ..models.event import Event, EventRegistration


def list_events(upcoming_only=False):
    query = Event.query
    if upcoming_only:
        query = query.filter(Event.date >= datetime.utcnow())
    return query.order_by(Event.date.desc()).all()


def get_event(event_id):
    ev = db.session.get(Event, event_id)
    if ev is None:
        raise NotFound("Event not found.")
    return ev


def save_event(data, event_id=None):
    ev = get_event(event_id) if event_id else Event()
    for key in ("title", "description", "date", "image", "registration_open", "speakers", "timeline"):
        if key in data:
            setattr(ev, key, data[key])
    if not event_id:
        db.session.add(ev)
    db.session.commit()
    return ev


def delete_event(event_id):
    ev = get_event(event_id)
    db.session.delete(ev)
    db.session.commit()


def _format_date(ev):
    return ev.date.strftime("%B %d, %Y at %I:%M %p") if ev.date else ""


def register(event_id, name, email):
    from ..jobs.notify import send_notification

    ev = get_event(event_id)
    if not ev.registration_open:
        raise RegistrationClosed("Registration for this event is closed.")
    email = email.strip().lower()
    if EventRegistration.query.filter_by(event_id=ev.id, email=email).first():
        raise RegistrationClosed("You have already registered for this event.")

    reg = EventRegistration(event_id=ev.id, name=name.strip(), email=email)
    db.session.add(reg)
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent request registered the same email first
        db.session.rollback()
        raise RegistrationClosed("You have already registered for this event.")
    current_app.logger.info('registration %s for event %s', reg.id, ev.id)

    send_notification("event_confirmation", reg.email, {
        "name": reg.name,
        "event_title": ev.title,
        "event_date": _format_date(ev),
        "registration_id": f"EVT{ev.id}-{reg.id:05d}",
    })
    return reg


def registrations(event_id):
    ev = get_event(event_id)
    return ev.registrations.order_by(EventRegistration.registered_at.asc(), EventRegistration.id.asc()).all()


def export_registrations_csv(event_id):
    buf = StringIO()
    w = csv.writer(buf)
    w.writerow(["name", "email", "registeredAt"])
    for r in registrations(event_id):
        w.writerow([r.name, r.email, r.registered_at.isoformat() if r.registered_at else ""])
    return buf.getvalue()


def send_reminders(event_id):
    """Email every registrant; returns how many reminders were queued."""
    from ..jobs.notify import send_notification

    ev = get_event(event_id)
    sent = 0
    for r in registrations(event_id):
        if send_notification("event_reminder", r.email, {
            "name": r.name,
            "event_title": ev.title,
            "event_date": _format_date(ev),
        }):
            sent += 1
    current_app.logger.info('queued %s reminders for event %s', sent, ev.id)
    return sent
