from flask import current_app

from ..extensions import db
from ..models.visitor import Visitor


def record_visit(ip, user_agent, path):
    try:
        db.session.add(Visitor(ip=(ip or "")[:64], user_agent=(user_agent or "")[:512], path=(path or "")[:512]))
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.warning('could not record visit to %s', path, exc_info=True)
