from flask import jsonify

from . import bp
from .forms import CategoryForm, MemberForm
from ...models.team import TeamMember
from ...services import team as svc
from ...utils.decorators import admin_required


@bp.get("/categories")
@admin_required
def list_categories():
    return jsonify({"items": [c.to_dict() for c in svc.list_categories()]})


@bp.post("/categories")
@admin_required
def create_category():
    form = CategoryForm().validate_or_raise()
    cat = svc.save_category({"name": form.name.data.strip(), "order": form.order.data, "type": form.type.data})
    return jsonify(cat.to_dict()), 201


@bp.post("/categories/<int:category_id>")
@admin_required
def update_category(category_id):
    form = CategoryForm().validate_or_raise()
    cat = svc.save_category({"name": form.name.data.strip(), "order": form.order.data, "type": form.type.data},
                            category_id=category_id)
    return jsonify(cat.to_dict())


@bp.post("/categories/<int:category_id>/delete")
@admin_required
def delete_category(category_id):
    svc.delete_category(category_id)
    return jsonify({"success": True})


@bp.get("/members")
@admin_required
def list_members():
    rows = TeamMember.query.order_by(TeamMember.name.asc()).all()
    return jsonify({"items": [m.to_dict(private=True) for m in rows]})


@bp.post("/members")
@admin_required
def invite_member():
    form = MemberForm().validate_or_raise()
    member = svc.invite_member(form.member_data())
    return jsonify(member.to_dict(private=True)), 201


@bp.post("/members/<int:member_id>")
@admin_required
def update_member(member_id):
    form = MemberForm().validate_or_raise()
    member = svc.update_member(member_id, form.member_data())
    return jsonify(member.to_dict(private=True))


@bp.post("/members/<int:member_id>/delete")
@admin_required
def delete_member(member_id):
    svc.delete_member(member_id)
    return jsonify({"success": True})


@bp.post("/members/<int:member_id>/resend-invitation")
@admin_required
def resend_invitation(member_id):
    member = svc.resend_invitation(member_id)
    return jsonify({"success": True, "member": member.to_dict(private=True)})


@bp.post("/members/<int:member_id>/send-edit-link")
@admin_required
def send_edit_link(member_id):
    queued = svc.send_profile_edit_link(member_id)
    return jsonify({"success": queued is not None})
