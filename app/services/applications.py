"""Queries and commands over hiring applications.

Every function that reads or mutates applications on behalf of a reviewer
takes a ``ReviewerContext`` first. Panel contexts are always scoped to their
own technical domain.
"""
import csv
import random
import string
import time
from datetime import datetime
from io import StringIO

from flask import current_app
from sqlalchemy import func, or_

from ..errors import ApplicationNotFound, DeadlinePassed
from ..extensions import db, rq
from ..models.application import Application, RATING_KEYS, STATUSES, SUITABILITY
from ..models.setting import Setting
from . import review

TRUE_VALUES = {"1", "true", "yes", "on"}
DEADLINE_KEY = "application_deadline"


def generate_reference_id(prefix=None):
    prefix = prefix or current_app.config.get("REFERENCE_PREFIX", "MLSC")
    stamp = str(int(time.time() * 1000))[-6:]
    rand = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{prefix}-{stamp}-{rand}"


class ApplicationFilters:
    """Filter/sort/page parameters shared by listing and bulk updates."""

    def __init__(self, search=None, search_by="all", status=None, year=None, branch=None,
                 domain=None, by_performance=False, by_recommended=False, page=1, per_page=None):
        self.search = (search or "").strip() or None
        self.search_by = search_by if search_by in ("all", "rollNo", "name") else "all"
        self.status = status or None
        self.year = year or None
        self.branch = branch or None
        self.domain = domain or None
        self.by_performance = bool(by_performance)
        self.by_recommended = bool(by_recommended)
        self.page = max(int(page or 1), 1)
        self.per_page = per_page

    @classmethod
    def from_args(cls, args):
        def flag(name):
            return str(args.get(name, "")).lower() in TRUE_VALUES

        try:
            page = int(args.get("page", 1))
        except (TypeError, ValueError):
            page = 1
        try:
            per_page = int(args["per_page"]) if args.get("per_page") else None
        except (TypeError, ValueError):
            per_page = None
        return cls(
            search=args.get("search") or args.get("q"),
            search_by=args.get("searchBy") or args.get("search_by") or "all",
            status=args.get("status"),
            year=args.get("year"),
            branch=args.get("branch"),
            domain=args.get("domain"),
            by_performance=flag("byPerformance") or flag("sortByPerformance"),
            by_recommended=flag("byRecommended") or flag("sortByRecommended"),
            page=page,
            per_page=per_page,
        )


def scoped_query(ctx, filters):
    """Apply role scoping and filters; no ordering."""
    query = Application.query
    # a panel only ever sees its own domain, whatever was asked for
    domain = ctx.domain if ctx.is_panel else filters.domain
    if domain:
        query = query.filter(Application.technical_domain == domain)

    if filters.search:
        like = f"%{filters.search.lower()}%"
        if filters.search_by == "rollNo":
            query = query.filter(func.lower(Application.roll_no).like(like))
        elif filters.search_by == "name":
            query = query.filter(func.lower(Application.name).like(like))
        else:
            query = query.filter(or_(
                func.lower(Application.name).like(like),
                func.lower(Application.email).like(like),
                func.lower(Application.id).like(like),
                func.lower(Application.roll_no).like(like),
            ))
    if filters.status:
        query = query.filter(Application.status == filters.status)
    if filters.year:
        query = query.filter(Application.year_of_study == filters.year)
    if filters.branch:
        query = query.filter(Application.branch == filters.branch)
    return query


def list_applications(ctx, filters):
    query = scoped_query(ctx, filters)
    order = []
    if filters.by_recommended:
        order.append(Application.is_recommended.desc())
    if filters.by_performance:
        order.append(Application.rating_overall.desc())
    order += [Application.submitted_at.desc(), Application.id.desc()]
    per_page = filters.per_page or current_app.config.get("PER_PAGE", 20)
    return query.order_by(*order).paginate(page=filters.page, per_page=per_page, error_out=False)


def get_application(ctx, app_id):
    app_row = db.session.get(Application, app_id)
    if app_row is None or not review.can_view(ctx, app_row):
        raise ApplicationNotFound(app_id)
    return app_row


def queue_status_notification(app_row, old_status):
    if app_row.status == old_status:
        return
    if app_row.status not in current_app.config.get("NOTIFY_STATUSES", []):
        return
    from ..jobs.notify import notify_status_change
    try:
        rq.enqueue(notify_status_change, app_row.id)
    except Exception:
        current_app.logger.exception('status notification for %s could not be queued', app_row.id)


def update_review(ctx, app_id, payload):
    """Apply a reviewer's payload and persist it.

    ``payload`` keys (all optional): status, ratings, remarks, suitability
    ({'technical', 'nonTechnical'}), is_recommended. Any ``overall`` rating
    in the payload is ignored.
    """
    app_row = get_application(ctx, app_id)
    old_status = app_row.status

    status = payload.get("status")
    if status:
        review.check_transition(ctx, app_row, status)
        app_row.status = status

    ratings = payload.get("ratings")
    if ratings:
        app_row.apply_ratings({k: ratings.get(k) for k in RATING_KEYS})

    if payload.get("remarks") is not None:
        app_row.remarks = payload["remarks"]

    suitability = payload.get("suitability") or {}
    if suitability.get("technical") in SUITABILITY:
        app_row.suitability_technical = suitability["technical"]
    if suitability.get("nonTechnical") in SUITABILITY:
        app_row.suitability_non_technical = suitability["nonTechnical"]

    if payload.get("is_recommended") is not None:
        app_row.is_recommended = bool(payload["is_recommended"])

    app_row.reviewed_by = ctx.username
    db.session.commit()
    current_app.logger.info('%s %s reviewed %s (%s -> %s)', ctx.role, ctx.username, app_row.id, old_status, app_row.status)

    queue_status_notification(app_row, old_status)
    return app_row


def get_deadline():
    raw = Setting.get_value(DEADLINE_KEY)
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        current_app.logger.warning('ignoring malformed deadline setting %r', raw)
        return None


def set_deadline(deadline):
    Setting.put(DEADLINE_KEY, deadline.isoformat() if deadline else None)
    db.session.commit()
    return deadline


def submit_application(data, resume=None, enforce_deadline=True):
    """Create a new application in ``Received`` state.

    ``data`` holds validated form values keyed by column name. The
    confirmation email and resume summary are best-effort.
    """
    deadline = get_deadline()
    if enforce_deadline and deadline and datetime.utcnow() > deadline:
        raise DeadlinePassed()

    app_row = Application(
        id=generate_reference_id(),
        status="Received",
        submitted_at=datetime.utcnow(),
        suitability_technical="undecided",
        suitability_non_technical="undecided",
        remarks="",
        **data,
    )
    if resume is not None and getattr(resume, "filename", ""):
        from .storage import save_file
        try:
            app_row.resume_url = save_file(resume, prefix=f"resumes/{app_row.id}")
        except Exception:
            current_app.logger.exception('resume upload failed for %s', app_row.id)

    db.session.add(app_row)
    db.session.commit()
    current_app.logger.info('application %s received (%s)', app_row.id, app_row.technical_domain)

    from ..jobs.notify import send_notification
    from ..jobs.summarize import summarize_application
    send_notification("application_received", app_row.email,
                      {"name": app_row.name, "reference_id": app_row.id},
                      application_id=app_row.id)
    if app_row.resume_url:
        rq.enqueue(summarize_application, app_row.id)
    return app_row


def lookup_status(reference_id):
    app_row = db.session.get(Application, (reference_id or "").strip())
    if app_row is None:
        raise ApplicationNotFound(reference_id)
    return {
        "id": app_row.id,
        "name": app_row.name,
        "status": app_row.status,
        "submittedAt": app_row.submitted_at.isoformat() if app_row.submitted_at else None,
    }


def filter_options(ctx):
    query = scoped_query(ctx, ApplicationFilters())

    def distinct(col):
        return sorted(v for (v,) in query.with_entities(col).distinct().all() if v)

    return {
        "statuses": list(STATUSES),
        "years": distinct(Application.year_of_study),
        "branches": distinct(Application.branch),
        "domains": distinct(Application.technical_domain),
    }


HIRED_CSV_COLUMNS = ["id", "name", "email", "phone", "rollNo", "branch", "section",
                     "yearOfStudy", "technicalDomain", "nonTechnicalDomain", "overall"]


def export_hired_csv():
    buf = StringIO()
    w = csv.writer(buf)
    w.writerow(HIRED_CSV_COLUMNS)
    rows = Application.query.filter_by(status="Hired").order_by(Application.technical_domain, Application.name).all()
    for a in rows:
        w.writerow([a.id, a.name, a.email, a.phone, a.roll_no, a.branch, a.section, a.year_of_study,
                    a.technical_domain, a.non_technical_domain, a.rating_overall])
    return buf.getvalue()


def analytics(ctx):
    query = scoped_query(ctx, ApplicationFilters())

    def counts(col):
        rows = query.with_entities(col, func.count(Application.id)).group_by(col).all()
        return {(k or "Unknown"): int(v) for k, v in rows}

    rated = query.filter(Application.rating_overall > 0)
    avg = rated.with_entities(
        func.avg(Application.rating_communication),
        func.avg(Application.rating_technical),
        func.avg(Application.rating_problem_solving),
        func.avg(Application.rating_team_fit),
        func.avg(Application.rating_overall),
    ).one()
    return {
        "total": query.count(),
        "byStatus": counts(Application.status),
        "byDomain": counts(Application.technical_domain),
        "byBranch": counts(Application.branch),
        "byYear": counts(Application.year_of_study),
        "recommended": query.filter(Application.is_recommended.is_(True)).count(),
        "averageRatings": {
            k: round(float(v), 2) if v is not None else None
            for k, v in zip(["communication", "technical", "problemSolving", "teamFit", "overall"], avg)
        },
    }
