import io

from app.extensions import db
from app.models.application import Application
from app.models.visitor import Visitor


def _cookies(resp):
    return "\n".join(resp.headers.getlist("Set-Cookie"))


def test_login_page_renders(client):
    resp = client.get("/auth/login")
    assert resp.status_code == 200
    assert b"password" in resp.data.lower()


def test_login_sets_cookie_and_redirects(client, app):
    resp = client.post("/auth/login", data={"username": "admin", "password": "admin-pass"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/applications")
    cookie = next(c for c in resp.headers.getlist("Set-Cookie") if c.startswith(app.config["AUTH_COOKIE_NAME"] + "="))
    assert "HttpOnly" in cookie


def test_login_rejects_bad_password(client):
    resp = client.post("/auth/login", data={"username": "admin", "password": "nope"})
    assert resp.status_code == 401


def test_login_rejects_unknown_fields(client):
    resp = client.post("/auth/login", data={"username": "admin", "password": "admin-pass", "role": "admin"})
    assert resp.status_code == 200
    assert "auth_token=" not in _cookies(resp)


def test_protected_view_redirects_to_login(client):
    resp = client.get("/admin/applications")
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_invalid_cookie_is_cleared(client, app):
    client.set_cookie(app.config["AUTH_COOKIE_NAME"], "garbage")
    resp = client.get("/admin/applications")
    assert resp.status_code == 302
    assert f"{app.config['AUTH_COOKIE_NAME']}=;" in _cookies(resp)


def test_panel_listing_ignores_requested_domain(panel_client, make_application):
    mine = make_application(technical_domain="gen_ai")
    make_application(technical_domain="web_app")
    resp = panel_client.get("/admin/applications?domain=web_app")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [a["id"] for a in body["items"]] == [mine.id]
    assert body["domain"] == "gen_ai"


def test_panel_is_redirected_from_admin_actions(panel_client):
    resp = panel_client.post("/admin/applications/bulk-status", data={"target_status": "Rejected"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/applications")


def test_detail_outside_domain_is_not_found(panel_client, make_application):
    other = make_application(technical_domain="azure")
    resp = panel_client.get(f"/admin/applications/{other.id}")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "No application found with that reference ID."


def test_review_ignores_client_overall(admin_client, make_application):
    row = make_application()
    resp = admin_client.post(f"/admin/applications/{row.id}/review", data={
        "communication": "4", "technical": "3", "problem_solving": "0", "team_fit": "5",
        "overall": "1.5", "is_recommended": "true",
    })
    assert resp.status_code == 200
    ratings = resp.get_json()["application"]["ratings"]
    assert ratings["overall"] == 4.0
    assert resp.get_json()["application"]["isRecommended"] is True


def test_review_rejects_unknown_fields(admin_client, make_application):
    row = make_application()
    resp = admin_client.post(f"/admin/applications/{row.id}/review", data={"status": "Interviewing", "score": "9"})
    assert resp.status_code == 400
    assert "_form" in resp.get_json()["fields"]
    assert db.session.get(Application, row.id).status == "Received"


def test_review_rejects_out_of_range_rating(admin_client, make_application):
    row = make_application()
    resp = admin_client.post(f"/admin/applications/{row.id}/review", data={"technical": "7"})
    assert resp.status_code == 400
    assert "technical" in resp.get_json()["fields"]


def test_panel_cannot_hire(panel_client, make_application):
    row = make_application()
    resp = panel_client.post(f"/admin/applications/{row.id}/review", data={"status": "Hired"})
    assert resp.status_code == 403
    assert db.session.get(Application, row.id).status == "Received"


def test_bulk_hire_upload(admin_client, make_application):
    a = make_application(roll_no="A")
    b = make_application(roll_no="B")
    resp = admin_client.post("/admin/applications/bulk-hire", data={
        "csv_file": (io.BytesIO(b"rollNo\nA\n"), "final.csv"),
    }, content_type="multipart/form-data")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["hired"] == 1 and body["rejected"] == 1
    assert db.session.get(Application, a.id).status == "Hired"
    assert db.session.get(Application, b.id).status == "Rejected"


def test_bulk_hire_missing_column(admin_client, make_application):
    make_application(roll_no="A")
    resp = admin_client.post("/admin/applications/bulk-hire", data={
        "csv_file": (io.BytesIO(b"name\nA\n"), "final.csv"),
    }, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert "rollNo" in resp.get_json()["error"]


def test_public_apply_and_status(client):
    resp = client.post("/apply", data={
        "name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210", "roll_no": "22C0001",
        "branch": "ECE", "section": "B", "year_of_study": "1", "cgpa": "9.1", "backlogs": "0",
        "technical_domain": "ds_ml", "non_technical_domain": "public_relations",
        "join_reason": "I enjoy building ML projects with friends",
        "about_club": "The club runs AI and cloud workshops",
    })
    assert resp.status_code == 201
    ref = resp.get_json()["referenceId"]
    status = client.get(f"/status?ref={ref}").get_json()
    assert status["status"] == "Received"
    assert status["name"] == "Asha Rao"


def test_public_apply_validation(client):
    resp = client.post("/apply", data={"name": "A", "email": "not-an-email"})
    assert resp.status_code == 400
    fields = resp.get_json()["fields"]
    assert "email" in fields and "phone" in fields


def test_internal_registration_checks_phone_and_cgpa(admin_client):
    resp = admin_client.post("/admin/applications/register", data={
        "name": "Ravi Kumar", "email": "ravi@example.com", "phone": "12345", "roll_no": "22D0001",
        "branch": "CSE", "section": "C", "year_of_study": "3", "cgpa": "11", "backlogs": "0",
        "technical_domain": "azure", "non_technical_domain": "creativity",
    })
    assert resp.status_code == 400
    fields = resp.get_json()["fields"]
    assert "phone" in fields and "cgpa" in fields


def test_deadline_endpoint(admin_client):
    resp = admin_client.post("/admin/applications/deadline", data={"deadline": "2031-05-01T17:30"})
    assert resp.get_json()["deadline"] == "2031-05-01T17:30:00"
    assert admin_client.get("/").get_json()["deadline"] == "2031-05-01T17:30:00"


def test_public_visits_are_logged(client):
    client.get("/events")
    client.get("/auth/login")
    visits = Visitor.query.all()
    assert [v.path for v in visits] == ["/events"]


def test_logout_clears_cookie(admin_client, app):
    resp = admin_client.post("/auth/logout")
    assert resp.status_code == 302
    assert f"{app.config['AUTH_COOKIE_NAME']}=;" in _cookies(resp)


def test_review_accepts_json_boolean_flag(admin_client, make_application):
    row = make_application()
    resp = admin_client.post(f"/admin/applications/{row.id}/review",
                             json={"is_recommended": True, "communication": 4})
    assert resp.status_code == 200
    body = resp.get_json()["application"]
    assert body["isRecommended"] is True
    assert body["ratings"]["communication"] == 4

    resp = admin_client.post(f"/admin/applications/{row.id}/review", json={"is_recommended": False})
    assert resp.get_json()["application"]["isRecommended"] is False


def test_review_rejects_unclear_flag(admin_client, make_application):
    row = make_application()
    resp = admin_client.post(f"/admin/applications/{row.id}/review", data={"is_recommended": "maybe"})
    assert resp.status_code == 400
    assert "is_recommended" in resp.get_json()["fields"]


def test_internal_registration_rejects_nan_cgpa(admin_client):
    resp = admin_client.post("/admin/applications/register", data={
        "name": "Ravi Kumar", "email": "ravi@example.com", "phone": "9876543210", "roll_no": "22D0002",
        "branch": "CSE", "section": "C", "year_of_study": "3", "cgpa": "nan", "backlogs": "0",
        "technical_domain": "azure", "non_technical_domain": "creativity",
    })
    assert resp.status_code == 400
    assert "cgpa" in resp.get_json()["fields"]
    assert db.session.query(Application).count() == 0
