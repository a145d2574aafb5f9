import re
from datetime import datetime, timedelta

import pytest

from app.errors import ApplicationNotFound, DeadlinePassed
from app.models.notification import OutboxMessage
from app.services import applications as svc
from app.services.applications import ApplicationFilters


def _ids(page):
    return [a.id for a in page.items]


def test_reference_id_format(app):
    ref = svc.generate_reference_id()
    assert re.fullmatch(r"MLSC-\d{6}-[A-Z0-9]{4}", ref)


def test_panel_domain_is_forced(panel_ctx, make_application):
    mine = make_application(technical_domain="gen_ai")
    make_application(technical_domain="web_app")
    page = svc.list_applications(panel_ctx, ApplicationFilters(domain="web_app"))
    assert _ids(page) == [mine.id]


def test_admin_sees_all_domains(admin_ctx, make_application):
    make_application(technical_domain="gen_ai")
    make_application(technical_domain="web_app")
    assert svc.list_applications(admin_ctx, ApplicationFilters()).total == 2
    assert svc.list_applications(admin_ctx, ApplicationFilters(domain="web_app")).total == 1


def test_panel_cannot_fetch_other_domain(panel_ctx, make_application):
    other = make_application(technical_domain="azure")
    with pytest.raises(ApplicationNotFound):
        svc.get_application(panel_ctx, other.id)


def test_search_modes(admin_ctx, make_application):
    a = make_application(name="Priya Sharma", roll_no="22B0001")
    make_application(name="Rahul Verma", roll_no="22B0002")
    assert _ids(svc.list_applications(admin_ctx, ApplicationFilters(search="priya"))) == [a.id]
    assert _ids(svc.list_applications(admin_ctx, ApplicationFilters(search="0001", search_by="rollNo"))) == [a.id]
    assert svc.list_applications(admin_ctx, ApplicationFilters(search="0001", search_by="name")).total == 0
    assert _ids(svc.list_applications(admin_ctx, ApplicationFilters(search=a.id.lower()))) == [a.id]


def test_default_order_newest_first(admin_ctx, make_application):
    old = make_application(submitted_at=datetime.utcnow() - timedelta(days=2))
    new = make_application(submitted_at=datetime.utcnow())
    assert _ids(svc.list_applications(admin_ctx, ApplicationFilters())) == [new.id, old.id]


def test_sort_by_recommended_then_performance(admin_ctx, make_application):
    low = make_application(rating_overall=2.0)
    high = make_application(rating_overall=4.5)
    rec = make_application(rating_overall=1.0, is_recommended=True)
    page = svc.list_applications(admin_ctx, ApplicationFilters(by_recommended=True, by_performance=True))
    assert _ids(page) == [rec.id, high.id, low.id]


def test_filters_from_args_aliases():
    f = ApplicationFilters.from_args({"q": "x", "searchBy": "name", "sortByPerformance": "true", "page": "abc"})
    assert f.search == "x"
    assert f.search_by == "name"
    assert f.by_performance is True
    assert f.page == 1


def test_status_change_queues_email(admin_ctx, make_application, sent_mail):
    row = make_application()
    svc.update_review(admin_ctx, row.id, {"status": "Interviewing"})
    assert len(sent_mail) == 1
    assert "Interview" in sent_mail[0]["subject"]
    msg = OutboxMessage.query.filter_by(application_id=row.id, kind="status_update").one()
    assert msg.status == "sent"


def test_no_email_when_status_unchanged(admin_ctx, make_application, sent_mail):
    row = make_application(status="Interviewing")
    svc.update_review(admin_ctx, row.id, {"status": "Interviewing", "remarks": "again"})
    assert sent_mail == []


def test_submit_application(app, sent_mail):
    data = dict(name="Asha", email="asha@example.com", phone="9876543210", roll_no="22C0001",
                branch="ECE", section="B", year_of_study="1", cgpa="9.1", backlogs="0",
                technical_domain="ds_ml", non_technical_domain="public_relations",
                join_reason="I enjoy building ML projects", about_club="Runs workshops on cloud and AI")
    row = svc.submit_application(data)
    assert row.status == "Received"
    assert row.rating_overall == 0
    assert row.suitability_technical == "undecided"
    assert sent_mail[0]["to"] == "asha@example.com"
    assert row.id in sent_mail[0]["html"]


def test_deadline_blocks_public_submissions(app):
    svc.set_deadline(datetime.utcnow() - timedelta(hours=1))
    with pytest.raises(DeadlinePassed):
        svc.submit_application({"name": "Late"})


def test_deadline_roundtrip(app):
    assert svc.get_deadline() is None
    when = datetime(2030, 1, 31, 18, 0)
    svc.set_deadline(when)
    assert svc.get_deadline() == when
    svc.set_deadline(None)
    assert svc.get_deadline() is None


def test_lookup_status(make_application):
    row = make_application(status="Interviewing")
    out = svc.lookup_status(f"  {row.id} ")
    assert out["status"] == "Interviewing"
    with pytest.raises(ApplicationNotFound):
        svc.lookup_status("MLSC-000000-NONE")


def test_analytics_scoped_for_panel(panel_ctx, make_application):
    make_application(technical_domain="gen_ai", status="Hired")
    make_application(technical_domain="azure")
    out = svc.analytics(panel_ctx)
    assert out["total"] == 1
    assert out["byStatus"] == {"Hired": 1}


def test_export_hired_csv(make_application):
    hired = make_application(status="Hired")
    make_application(status="Rejected")
    lines = svc.export_hired_csv().strip().splitlines()
    assert lines[0].startswith("id,name,email")
    assert len(lines) == 2
    assert lines[1].startswith(hired.id)
