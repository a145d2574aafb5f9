from ..extensions import db
from .base import TimestampMixin


class Event(db.Model, TimestampMixin):
    __tablename__ = "events"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime, nullable=False, index=True)
    image = db.Column(db.String(512))
    registration_open = db.Column(db.Boolean, default=False, nullable=False)
    speakers = db.Column(db.Text)
    timeline = db.Column(db.Text)

    registrations = db.relationship("EventRegistration", backref="event", lazy="dynamic",
                                    cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "image": self.image,
            "registrationOpen": bool(self.registration_open),
            "speakers": self.speakers,
            "timeline": self.timeline,
        }


class EventRegistration(db.Model):
    __tablename__ = "event_registrations"
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey("events.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    registered_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('event_id', 'email', name='uq_event_registration_email'),
    )

    def to_dict(self):
        return {"id": self.id, "eventId": self.event_id, "name": self.name, "email": self.email,
                "registeredAt": self.registered_at.isoformat() if self.registered_at else None}
