import io
from datetime import datetime, timedelta

import pytest

from app.errors import NotFound, PortalError
from app.extensions import db
from app.models.team import TeamMember
from app.services import team


def _invite(**kw):
    data = {"name": "Neha", "email": "neha@example.com", "role": "Design Lead"}
    data.update(kw)
    return team.invite_member(data)


def test_invite_sends_onboarding_link(app, sent_mail):
    member = _invite()
    assert member.status == "invited"
    assert member.onboarding_token
    assert f"/onboard/{member.onboarding_token}" in sent_mail[0]["html"]


def test_expired_token_rejected(app):
    member = _invite()
    member.onboarding_token_expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.session.commit()
    with pytest.raises(NotFound):
        team.get_member_by_token(member.onboarding_token)


def test_resend_issues_new_token(app):
    member = _invite()
    old = member.onboarding_token
    team.resend_invitation(member.id)
    assert member.onboarding_token != old
    with pytest.raises(NotFound):
        team.get_member_by_token(old)


def test_onboarding_flow_over_http(client, app, sent_mail):
    cat = team.save_category({"name": "Core", "order": 0, "type": "Core"})
    member = _invite(category_id=cat.id)
    token = member.onboarding_token

    assert client.get(f"/onboard/{token}").get_json()["name"] == "Neha"
    resp = client.post(f"/onboard/{token}", data={
        "linkedin": "https://www.linkedin.com/in/neha",
        "image": (io.BytesIO(b"\x89PNG fake"), "me.png"),
    }, content_type="multipart/form-data")
    assert resp.status_code == 200

    member = db.session.get(TeamMember, member.id)
    assert member.status == "active"
    assert member.onboarding_token is None
    assert member.image.startswith("file://")
    assert f"/profile/edit/{member.edit_token}" in sent_mail[-1]["html"]

    # token is single-use
    assert client.get(f"/onboard/{token}").status_code == 404

    roster = client.get("/team").get_json()["categories"]
    assert roster[0]["category"]["name"] == "Core"
    assert roster[0]["members"][0]["name"] == "Neha"
    assert "email" not in roster[0]["members"][0]

    card = client.get(f"/team/{member.id}").get_json()
    assert card["category"]["name"] == "Core"
    assert client.get(f"/team/{member.id}/image").data == b"\x89PNG fake"


def test_invited_member_has_no_id_card(client, app):
    member = _invite()
    assert client.get(f"/team/{member.id}").status_code == 404


def test_edit_link_only_for_active(app):
    member = _invite()
    with pytest.raises(PortalError):
        team.send_profile_edit_link(member.id)


def test_delete_category_keeps_members(app):
    cat = team.save_category({"name": "Tech", "order": 1, "type": "Technical"})
    member = _invite(category_id=cat.id)
    team.delete_category(cat.id)
    assert db.session.get(TeamMember, member.id).category_id is None


def test_admin_category_form_accepts_zero_order(admin_client):
    resp = admin_client.post("/admin/team/categories", data={"name": "Core", "order": "0", "type": "Core"})
    assert resp.status_code == 201
    assert resp.get_json()["order"] == 0
