"""Ticker notifications and the visitor log."""
from flask import jsonify, request

from . import bp
from .forms import TickerForm
from ...errors import NotFound
from ...extensions import db
from ...models.notification import Notification
from ...models.visitor import Visitor
from ...utils.decorators import admin_required


@bp.get("/notifications")
@admin_required
def list_notifications():
    rows = Notification.query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()
    return jsonify({"items": [n.to_dict() for n in rows]})


@bp.post("/notifications")
@admin_required
def add_notification():
    form = TickerForm().validate_or_raise()
    n = Notification(message=form.message.data.strip())
    db.session.add(n)
    db.session.commit()
    return jsonify(n.to_dict()), 201


@bp.post("/notifications/<int:notification_id>/delete")
@admin_required
def delete_notification(notification_id):
    n = db.session.get(Notification, notification_id)
    if n is None:
        raise NotFound("Notification not found.")
    db.session.delete(n)
    db.session.commit()
    return jsonify({"success": True})


@bp.get("/visitors")
@admin_required
def visitors():
    page = request.args.get('page', default=1, type=int)
    per_page = request.args.get('per_page', default=50, type=int)
    pag = Visitor.query.order_by(Visitor.timestamp.desc(), Visitor.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False)
    return jsonify({"items": [v.to_dict() for v in pag.items], "page": pag.page,
                    "pages": pag.pages, "total": pag.total})
