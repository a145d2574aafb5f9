"""Public endpoints: applying, status checks, events, team roster."""
import io
import mimetypes

from flask import current_app, jsonify, redirect, request, send_file

from . import bp
from ..applications.forms import ApplicationForm
from ..events.forms import RegistrationForm
from ..team.forms import OnboardingForm, ProfileForm
from ...errors import NotFound, PortalError
from ...models.notification import Notification
from ...services import applications as app_svc
from ...services import events as event_svc
from ...services import team as team_svc
from ...services.storage import download_bytes


@bp.get("/")
def index():
    deadline = app_svc.get_deadline()
    return jsonify({"club": current_app.config.get("CLUB_NAME"),
                    "deadline": deadline.isoformat() if deadline else None})


@bp.post("/apply")
def apply():
    form = ApplicationForm().validate_or_raise()
    app_row = app_svc.submit_application(form.profile_data(), resume=form.resume.data)
    return jsonify({"success": True, "referenceId": app_row.id}), 201


@bp.get("/status")
def status():
    ref = request.args.get("ref") or request.args.get("id")
    if not ref:
        raise PortalError("Please enter your reference ID.")
    return jsonify(app_svc.lookup_status(ref))


@bp.get("/notifications")
def ticker():
    rows = Notification.query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(20).all()
    return jsonify({"items": [n.to_dict() for n in rows]})


@bp.get("/events")
def events():
    upcoming = request.args.get("upcoming", "").lower() in app_svc.TRUE_VALUES
    return jsonify({"items": [e.to_dict() for e in event_svc.list_events(upcoming_only=upcoming)]})


@bp.get("/events/<int:event_id>")
def event_detail(event_id):
    return jsonify(event_svc.get_event(event_id).to_dict())


@bp.post("/events/<int:event_id>/register")
def event_register(event_id):
    form = RegistrationForm().validate_or_raise()
    reg = event_svc.register(event_id, form.name.data, form.email.data)
    return jsonify({"success": True, "registration": reg.to_dict()}), 201


@bp.get("/team")
def team():
    return jsonify({"categories": team_svc.roster()})


@bp.get("/team/<int:member_id>")
def id_card(member_id):
    """Digital ID card; only active members have one."""
    member = team_svc.get_member(member_id)
    if member.status != "active":
        raise NotFound("Team member not found.")
    out = member.to_dict()
    out["category"] = member.category.to_dict() if member.category else None
    out["club"] = current_app.config.get("CLUB_NAME")
    return jsonify(out)


@bp.get("/team/<int:member_id>/image")
def member_image(member_id):
    member = team_svc.get_member(member_id)
    if member.status != "active" or not member.image:
        raise NotFound("Image not found.")
    if member.image.startswith(("http://", "https://")):
        return redirect(member.image)
    try:
        data = download_bytes(member.image)
    except Exception:
        current_app.logger.exception('could not load image for member %s', member.id)
        raise NotFound("Image not found.")
    mime = mimetypes.guess_type(member.image)[0] or "application/octet-stream"
    return send_file(io.BytesIO(data), mimetype=mime)


@bp.get("/onboard/<token>")
def onboarding(token):
    member = team_svc.get_member_by_token(token)
    return jsonify({"name": member.name, "role": member.role, "email": member.email})


@bp.post("/onboard/<token>")
def complete_onboarding(token):
    team_svc.get_member_by_token(token)
    form = OnboardingForm().validate_or_raise()
    member = team_svc.complete_onboarding(token, form.linkedin.data, form.image.data)
    return jsonify({"success": True, "member": member.to_dict()})


@bp.get("/profile/edit/<token>")
def profile(token):
    member = team_svc.get_member_by_edit_token(token)
    return jsonify(member.to_dict())


@bp.post("/profile/edit/<token>")
def update_profile(token):
    team_svc.get_member_by_edit_token(token)
    form = ProfileForm().validate_or_raise()
    member = team_svc.update_profile(token, form.linkedin.data or None, form.image.data)
    return jsonify({"success": True, "member": member.to_dict()})
