from ..extensions import db


class Visitor(db.Model):
    __tablename__ = "visitors"
    id = db.Column(db.Integer, primary_key=True)
    ip = db.Column(db.String(64))
    user_agent = db.Column(db.String(512))
    path = db.Column(db.String(512))
    timestamp = db.Column(db.DateTime, server_default=db.func.now(), nullable=False, index=True)

    def to_dict(self):
        return {"id": self.id, "ip": self.ip, "userAgent": self.user_agent, "path": self.path,
                "timestamp": self.timestamp.isoformat() if self.timestamp else None}
