from datetime import datetime

from flask import current_app

from ..extensions import db, rq
from ..services.mail import compose, send_mail
from ..models.notification import OutboxMessage
from ..models.application import Application


def send_notification(kind, recipient, data, application_id=None):
    """Record an outbox message and enqueue its delivery.

    Best-effort: any failure is logged and None returned, the caller's own
    work is never affected.
    """
    try:
        subject, html = compose(kind, data)
        msg = OutboxMessage(kind=kind, application_id=application_id, sent_to=recipient,
                            subject=subject, body=html, status="pending")
        db.session.add(msg)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('could not queue %s notification to %s', kind, recipient)
        return None
    rq.enqueue(deliver_message, msg.id)
    return msg.id


def deliver_message(message_id: int):
    msg = db.session.get(OutboxMessage, message_id)
    if not msg or msg.status == "sent":
        return None
    if not current_app.config.get('SENDGRID_API_KEY'):
        current_app.logger.info('SENDGRID_API_KEY not set, skipping %s email to %s', msg.kind, msg.sent_to)
        msg.status = "skipped"
        db.session.commit()
        return msg.status

    msg.attempts = (msg.attempts or 0) + 1
    try:
        status, provider_id = send_mail(msg.sent_to, msg.subject, msg.body)
        if status and int(status) >= 400:
            raise RuntimeError(f'SendGrid returned HTTP {status}')
        msg.status = "sent"
        msg.provider_message_id = str(provider_id or "")
        msg.sent_at = datetime.utcnow()
        msg.last_error = None
        current_app.logger.info('sent %s email to %s', msg.kind, msg.sent_to)
    except Exception as e:
        current_app.logger.exception('failed to send %s email to %s', msg.kind, msg.sent_to)
        msg.status = "failed"
        msg.last_error = str(e)[:2000]
    db.session.commit()
    return msg.status


def retry_failed():
    """Re-enqueue every failed message; returns how many were queued."""
    ids = [m.id for m in OutboxMessage.query.filter_by(status="failed").all()]
    for mid in ids:
        msg = db.session.get(OutboxMessage, mid)
        msg.status = "pending"
    db.session.commit()
    for mid in ids:
        rq.enqueue(deliver_message, mid)
    return len(ids)


def notify_status_change(application_id: str):
    app_row = db.session.get(Application, application_id)
    if not app_row:
        return None
    return send_notification(
        "status_update", app_row.email,
        {"name": app_row.name, "status": app_row.status},
        application_id=app_row.id,
    )
