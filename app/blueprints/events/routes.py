from flask import Response, jsonify

from . import bp
from .forms import EventForm
from ...services import events as svc
from ...utils.decorators import admin_required


@bp.get("")
@admin_required
def list_events():
    rows = svc.list_events()
    return jsonify({"items": [dict(e.to_dict(), registrations=e.registrations.count()) for e in rows]})


@bp.post("")
@admin_required
def create_event():
    form = EventForm().validate_or_raise()
    ev = svc.save_event(form.event_data())
    return jsonify(ev.to_dict()), 201


@bp.post("/<int:event_id>")
@admin_required
def update_event(event_id):
    form = EventForm().validate_or_raise()
    ev = svc.save_event(form.event_data(), event_id=event_id)
    return jsonify(ev.to_dict())


@bp.post("/<int:event_id>/delete")
@admin_required
def delete_event(event_id):
    svc.delete_event(event_id)
    return jsonify({"success": True})


@bp.get("/<int:event_id>/registrations")
@admin_required
def registrations(event_id):
    return jsonify({"items": [r.to_dict() for r in svc.registrations(event_id)]})


@bp.get("/<int:event_id>/registrations.csv")
@admin_required
def registrations_csv(event_id):
    return Response(svc.export_registrations_csv(event_id), mimetype="text/csv",
                    headers={"Content-Disposition": f"attachment; filename=event-{event_id}-registrations.csv"})


@bp.post("/<int:event_id>/reminders")
@admin_required
def send_reminders(event_id):
    return jsonify({"success": True, "queued": svc.send_reminders(event_id)})
