from ..extensions import db
from .base import TimestampMixin


class Setting(db.Model, TimestampMixin):
    __tablename__ = 'settings'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), nullable=False, unique=True)
    value = db.Column(db.Text, nullable=True)

    @classmethod
    def get_value(cls, key, default=None):
        row = cls.query.filter_by(key=key).first()
        return row.value if row and row.value is not None else default

    @classmethod
    def put(cls, key, value):
        row = cls.query.filter_by(key=key).first()
        if row:
            row.value = value
        else:
            row = cls(key=key, value=value)
            db.session.add(row)
        return row

    def __repr__(self):
        return f"<Setting key={self.key} value={self.value}>"
