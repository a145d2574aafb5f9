"""Signed session tokens and the reviewer context derived from them."""
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from flask_login import UserMixin

from ..models.application import TECHNICAL_DOMAINS

ROLES = ("admin", "panel")


class ReviewerContext(UserMixin):
    """Who is acting: passed explicitly into every query and command."""

    def __init__(self, role, username, domain=None):
        self.role = role
        self.username = username
        self.domain = domain if role == "panel" else None

    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def is_panel(self):
        return self.role == "panel"

    def get_id(self):
        return self.username

    def __repr__(self):
        return f"<ReviewerContext role={self.role} username={self.username} domain={self.domain}>"


def sign_session(role, username, domain=None, ttl_seconds=None):
    if role not in ROLES:
        raise ValueError(f"unknown role: {role}")
    ttl = ttl_seconds if ttl_seconds is not None else current_app.config.get("SESSION_TTL_SECONDS", 86400)
    now = datetime.now(timezone.utc)
    payload = {"role": role, "username": username, "iat": now, "exp": now + timedelta(seconds=ttl)}
    if role == "panel" and domain:
        payload["domain"] = domain
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm="HS256")


def resolve_session(token):
    """Return a ReviewerContext for a valid token, None otherwise."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        current_app.logger.info("session token expired")
        return None
    except jwt.InvalidTokenError:
        current_app.logger.warning("session token verification failed")
        return None

    role = payload.get("role")
    username = payload.get("username")
    if role not in ROLES or not username:
        return None
    domain = payload.get("domain")
    if role == "panel" and domain not in TECHNICAL_DOMAINS:
        return None
    return ReviewerContext(role, username, domain)


def authenticate(username, password):
    """Check credentials; returns a ReviewerContext or None."""
    from ..models.user import User

    cfg = current_app.config
    if cfg.get("ADMIN_PASSWORD") and username == cfg.get("ADMIN_USERNAME") and password == cfg.get("ADMIN_PASSWORD"):
        return ReviewerContext("admin", username)

    user = User.query.filter_by(username=username).first()
    if not user or not user.check_password(password):
        return None
    if user.role == "panel" and user.domain not in TECHNICAL_DOMAINS:
        current_app.logger.warning("panel account %s has no valid domain", username)
        return None
    return ReviewerContext(user.role, user.username, user.domain)
