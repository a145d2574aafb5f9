"""Team roster: categories, member invitations and onboarding."""
import secrets
from datetime import datetime, timedelta

from flask import current_app

from ..errors import NotFound, PortalError
from ..extensions import db
from ..models.team import TeamCategory, TeamMember


def _new_token():
    return secrets.token_urlsafe(32)


def _link(path):
    return current_app.config.get("PUBLIC_BASE_URL", "").rstrip("/") + path


def list_categories():
    return TeamCategory.query.order_by(TeamCategory.order.asc(), TeamCategory.name.asc()).all()


def get_category(category_id):
    cat = db.session.get(TeamCategory, category_id)
    if cat is None:
        raise NotFound("Category not found.")
    return cat


def save_category(data, category_id=None):
    cat = get_category(category_id) if category_id else TeamCategory()
    cat.name = data["name"]
    cat.order = data["order"]
    cat.type = data["type"]
    if not category_id:
        db.session.add(cat)
    db.session.commit()
    return cat


def delete_category(category_id):
    cat = get_category(category_id)
    # members stay on the roster without a category
    TeamMember.query.filter_by(category_id=cat.id).update({"category_id": None})
    db.session.delete(cat)
    db.session.commit()


def get_member(member_id):
    m = db.session.get(TeamMember, member_id)
    if m is None:
        raise NotFound("Team member not found.")
    return m


def _send_invitation(member):
    from ..jobs.notify import send_notification
    ttl = current_app.config.get("ONBOARDING_TOKEN_TTL_DAYS", 7)
    return send_notification("invitation", member.email, {
        "name": member.name,
        "role": member.role,
        "ttl_days": ttl,
        "onboarding_link": _link(f"/onboard/{member.onboarding_token}"),
    })


def _issue_onboarding_token(member):
    ttl = current_app.config.get("ONBOARDING_TOKEN_TTL_DAYS", 7)
    member.onboarding_token = _new_token()
    member.onboarding_token_expires_at = datetime.utcnow() + timedelta(days=ttl)


def invite_member(data):
    """Create a member in ``invited`` state and email the onboarding link."""
    if data.get("category_id"):
        get_category(data["category_id"])
    member = TeamMember(
        name=data["name"],
        email=data["email"],
        role=data["role"],
        image=data.get("image") or None,
        linkedin=data.get("linkedin") or None,
        category_id=data.get("category_id") or None,
        status="invited",
    )
    _issue_onboarding_token(member)
    db.session.add(member)
    db.session.commit()
    current_app.logger.info('invited team member %s (%s)', member.id, member.email)
    _send_invitation(member)
    return member


def update_member(member_id, data):
    member = get_member(member_id)
    if data.get("category_id"):
        get_category(data["category_id"])
    for key in ("name", "email", "role"):
        if data.get(key):
            setattr(member, key, data[key])
    for key in ("image", "linkedin", "category_id"):
        if key in data:
            setattr(member, key, data[key] or None)
    db.session.commit()
    return member


def delete_member(member_id):
    member = get_member(member_id)
    db.session.delete(member)
    db.session.commit()


def resend_invitation(member_id):
    member = get_member(member_id)
    if member.status != "invited":
        raise PortalError("Member has already completed onboarding.")
    _issue_onboarding_token(member)
    db.session.commit()
    _send_invitation(member)
    return member


def get_member_by_token(token):
    """Member for a valid, unexpired onboarding token."""
    member = TeamMember.query.filter_by(onboarding_token=token).first() if token else None
    if member is None or member.status != "invited":
        raise NotFound("Invalid or expired onboarding link.")
    if member.onboarding_token_expires_at and member.onboarding_token_expires_at < datetime.utcnow():
        raise NotFound("Invalid or expired onboarding link.")
    return member


def complete_onboarding(token, linkedin, image_file=None):
    from ..jobs.notify import send_notification
    from .storage import save_file

    member = get_member_by_token(token)
    member.linkedin = linkedin
    if image_file is not None and getattr(image_file, "filename", ""):
        member.image = save_file(image_file, prefix=f"team/{member.id}")
    member.status = "active"
    member.onboarding_token = None
    member.onboarding_token_expires_at = None
    member.edit_token = _new_token()
    db.session.commit()
    current_app.logger.info('team member %s completed onboarding', member.id)

    send_notification("profile_confirmation", member.email, {
        "name": member.name,
        "edit_link": _link(f"/profile/edit/{member.edit_token}"),
    })
    return member


def send_profile_edit_link(member_id):
    from ..jobs.notify import send_notification

    member = get_member(member_id)
    if member.status != "active":
        raise PortalError("Member has not completed onboarding yet.")
    if not member.edit_token:
        member.edit_token = _new_token()
        db.session.commit()
    return send_notification("profile_edit_link", member.email, {
        "name": member.name,
        "edit_link": _link(f"/profile/edit/{member.edit_token}"),
    })


def get_member_by_edit_token(token):
    member = TeamMember.query.filter_by(edit_token=token).first() if token else None
    if member is None:
        raise NotFound("Invalid profile link.")
    return member


def update_profile(token, linkedin=None, image_file=None):
    from .storage import save_file

    member = get_member_by_edit_token(token)
    if linkedin:
        member.linkedin = linkedin
    if image_file is not None and getattr(image_file, "filename", ""):
        member.image = save_file(image_file, prefix=f"team/{member.id}")
    db.session.commit()
    return member


def roster():
    """Active members grouped by category, in category order."""
    out = []
    for cat in list_categories():
        members = cat.members.filter_by(status="active").order_by(TeamMember.name.asc()).all()
        if members:
            out.append({"category": cat.to_dict(), "members": [m.to_dict() for m in members]})
    return out
