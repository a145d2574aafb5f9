import os
import sys
from datetime import datetime, timedelta

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app  # noqa: E402
from app.extensions import db  # noqa: E402
from app.models.application import Application  # noqa: E402
from app.services.session import ReviewerContext, sign_session  # noqa: E402


@pytest.fixture
def app(tmp_path):
    app = create_app('config.TestConfig')
    app.config['LOCAL_STORAGE_DIR'] = str(tmp_path / 'storage')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_ctx():
    return ReviewerContext('admin', 'admin')


@pytest.fixture
def panel_ctx():
    return ReviewerContext('panel', 'panel-genai', 'gen_ai')


def login_as(client, app, role, username, domain=None):
    token = sign_session(role, username, domain)
    client.set_cookie(app.config['AUTH_COOKIE_NAME'], token)
    return token


@pytest.fixture
def admin_client(app, client):
    login_as(client, app, 'admin', 'admin')
    return client


@pytest.fixture
def panel_client(app, client):
    login_as(client, app, 'panel', 'panel-genai', 'gen_ai')
    return client


_counter = {'n': 0}


@pytest.fixture
def make_application(app):
    """Insert an application directly; keyword args override columns."""
    def _make(**kw):
        _counter['n'] += 1
        n = _counter['n']
        defaults = dict(
            id=f"MLSC-{n:06d}-TEST",
            name=f"Student {n}",
            email=f"student{n}@example.com",
            phone="9876543210",
            roll_no=f"22A{n:04d}",
            branch="CSE",
            section="A",
            year_of_study="2",
            cgpa="8.5",
            backlogs="0",
            technical_domain="gen_ai",
            non_technical_domain="creativity",
            status="Received",
            submitted_at=datetime.utcnow() - timedelta(minutes=1000 - n),
        )
        defaults.update(kw)
        row = Application(**defaults)
        db.session.add(row)
        db.session.commit()
        return row
    return _make


@pytest.fixture
def sent_mail(app, monkeypatch):
    """Capture outgoing SendGrid calls instead of hitting the network."""
    app.config["SENDGRID_API_KEY"] = "SG.test"
    calls = []

    def fake_send(to, subject, html):
        calls.append({'to': to, 'subject': subject, 'html': html})
        return 202, f"msg-{len(calls)}"

    monkeypatch.setattr('app.jobs.notify.send_mail', fake_send)
    return calls
