from ..extensions import db
from .base import TimestampMixin


class Notification(db.Model, TimestampMixin):
    """Message shown in the public scrolling ticker."""
    __tablename__ = "notifications"
    id = db.Column(db.Integer, primary_key=True)
    message = db.Column(db.String(500), nullable=False)

    def to_dict(self):
        return {"id": self.id, "message": self.message,
                "createdAt": self.created_at.isoformat() if self.created_at else None}


class OutboxMessage(db.Model, TimestampMixin):
    """Queued transactional email; one row per send attempt chain."""
    __tablename__ = "outbox_messages"
    id = db.Column(db.Integer, primary_key=True)
    kind = db.Column(db.String(50), nullable=False)  # status_update/invitation/...
    application_id = db.Column(db.String(32), db.ForeignKey("applications.id"), nullable=True, index=True)
    sent_to = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255))
    body = db.Column(db.Text)
    status = db.Column(db.String(20), default="pending", nullable=False, index=True)  # pending/sent/failed/skipped
    attempts = db.Column(db.Integer, default=0, nullable=False)
    last_error = db.Column(db.Text)
    provider_message_id = db.Column(db.String(255))
    sent_at = db.Column(db.DateTime)

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "applicationId": self.application_id,
            "sentTo": self.sent_to,
            "subject": self.subject,
            "status": self.status,
            "attempts": self.attempts,
            "lastError": self.last_error,
            "sentAt": self.sent_at.isoformat() if self.sent_at else None,
        }
