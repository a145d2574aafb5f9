import jwt

from app.services.session import authenticate, resolve_session, sign_session
from app.extensions import db
from app.models.user import User


def test_roundtrip_panel(app):
    ctx = resolve_session(sign_session("panel", "p1", "azure"))
    assert ctx.role == "panel" and ctx.domain == "azure" and ctx.username == "p1"


def test_admin_has_no_domain(app):
    ctx = resolve_session(sign_session("admin", "root", "azure"))
    assert ctx.is_admin and ctx.domain is None


def test_expired_token_is_unauthenticated(app):
    assert resolve_session(sign_session("admin", "root", ttl_seconds=-10)) is None


def test_bad_signature_is_unauthenticated(app):
    forged = jwt.encode({"role": "admin", "username": "root"}, "other-secret", algorithm="HS256")
    assert resolve_session(forged) is None
    assert resolve_session("not-a-token") is None
    assert resolve_session(None) is None


def test_panel_without_domain_is_unauthenticated(app):
    token = jwt.encode({"role": "panel", "username": "p"}, app.config["JWT_SECRET"], algorithm="HS256")
    assert resolve_session(token) is None


def test_unknown_role_is_unauthenticated(app):
    token = jwt.encode({"role": "owner", "username": "p"}, app.config["JWT_SECRET"], algorithm="HS256")
    assert resolve_session(token) is None


def test_authenticate_config_admin_and_users(app):
    assert authenticate("admin", "admin-pass").is_admin
    assert authenticate("admin", "wrong") is None

    u = User(username="lead", role="panel", domain="web_app")
    u.set_password("s3cret-pass")
    db.session.add(u)
    db.session.commit()
    ctx = authenticate("lead", "s3cret-pass")
    assert ctx.is_panel and ctx.domain == "web_app"
    assert authenticate("lead", "nope") is None
