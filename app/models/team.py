from ..extensions import db
from .base import TimestampMixin

CATEGORY_TYPES = ["Core", "Technical", "Non-Technical"]


class TeamCategory(db.Model, TimestampMixin):
    __tablename__ = "team_categories"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    type = db.Column(db.String(20), nullable=False)  # Core/Technical/Non-Technical

    members = db.relationship("TeamMember", backref="category", lazy="dynamic")

    def to_dict(self):
        return {"id": self.id, "name": self.name, "order": self.order, "type": self.type}


class TeamMember(db.Model, TimestampMixin):
    __tablename__ = "team_members"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), nullable=False, index=True)
    role = db.Column(db.String(120), nullable=False)
    image = db.Column(db.String(512))
    linkedin = db.Column(db.String(255))
    category_id = db.Column(db.Integer, db.ForeignKey("team_categories.id"), nullable=True)
    # invited -> active (after onboarding)
    status = db.Column(db.String(20), default="invited", nullable=False)
    onboarding_token = db.Column(db.String(64), unique=True, index=True)
    onboarding_token_expires_at = db.Column(db.DateTime)
    edit_token = db.Column(db.String(64), unique=True, index=True)

    def to_dict(self, private=False):
        out = {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "image": self.image,
            "linkedin": self.linkedin,
            "categoryId": self.category_id,
            "status": self.status,
        }
        if private:
            out["email"] = self.email
        return out
