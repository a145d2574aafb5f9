from ..extensions import db
from .base import TimestampMixin
from werkzeug.security import generate_password_hash, check_password_hash


class User(db.Model, TimestampMixin):
    """Reviewer account. Panels are scoped to one technical domain."""
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), default="panel", nullable=False)  # admin/panel
    domain = db.Column(db.String(40))  # technical domain, panel only

    def set_password(self, raw):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw):
        return check_password_hash(self.password_hash, raw)
