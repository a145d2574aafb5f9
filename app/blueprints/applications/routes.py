from flask import Response, current_app, jsonify, request

from . import bp
from .forms import (BulkStatusForm, DeadlineForm, EvaluateForm, HiringCsvForm,
                    InternalRegistrationForm, ReviewForm)
from ...errors import CsvFormatError, PortalError
from ...jobs.notify import retry_failed
from ...models.application import compute_overall
from ...models.notification import OutboxMessage
from ...services import applications as svc
from ...services import bulk, review
from ...services.openai_wrap import evaluate_candidate
from ...utils.decorators import admin_required, current_context, reviewer_required


def _page_dict(page):
    return {
        "items": [a.to_dict() for a in page.items],
        "page": page.page,
        "pages": page.pages,
        "perPage": page.per_page,
        "total": page.total,
    }


@bp.get("")
@reviewer_required
def list_applications():
    ctx = current_context()
    filters = svc.ApplicationFilters.from_args(request.args)
    page = svc.list_applications(ctx, filters)
    out = _page_dict(page)
    out["role"] = ctx.role
    out["domain"] = ctx.domain
    return jsonify(out)


@bp.get("/filters")
@reviewer_required
def filter_options():
    return jsonify(svc.filter_options(current_context()))


@bp.get("/analytics")
@reviewer_required
def analytics():
    return jsonify(svc.analytics(current_context()))


@bp.get("/<app_id>")
@reviewer_required
def detail(app_id):
    ctx = current_context()
    app_row = svc.get_application(ctx, app_id)
    out = app_row.to_dict()
    out["allowedStatuses"] = review.allowed_statuses(ctx)
    return jsonify(out)


@bp.post("/<app_id>/review")
@reviewer_required
def update_review(app_id):
    form = ReviewForm().validate_or_raise()
    app_row = svc.update_review(current_context(), app_id, form.payload())
    return jsonify({"success": True, "application": app_row.to_dict()})


@bp.post("/<app_id>/evaluate")
@reviewer_required
def evaluate(app_id):
    """AI-suggested ratings from an interview transcript; nothing is saved."""
    ctx = current_context()
    form = EvaluateForm().validate_or_raise()
    app_row = svc.get_application(ctx, app_id)
    result = evaluate_candidate(app_row.resume_summary or "", form.transcript.data)
    if result is None:
        raise PortalError("AI evaluation is unavailable right now.")
    ratings = result["ratings"]
    ratings["overall"] = compute_overall(ratings)
    return jsonify({"ratings": ratings, "remarks": result.get("remarks", "")})


@bp.post("/bulk-status")
@admin_required
def bulk_status():
    form = BulkStatusForm().validate_or_raise()
    filters = svc.ApplicationFilters.from_args(request.args)
    result = bulk.bulk_update_status(current_context(), filters, form.target_status.data)
    return jsonify({"success": True, **result.to_dict()})


@bp.post("/bulk-hire")
@admin_required
def bulk_hire():
    form = HiringCsvForm().validate_or_raise()
    try:
        text = form.csv_file.data.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        raise CsvFormatError("The CSV file must be UTF-8 encoded.")
    result = bulk.bulk_hire_from_csv(current_context(), text)
    return jsonify({"success": True, **result.to_dict()})


@bp.get("/export/hired.csv")
@admin_required
def export_hired():
    return Response(svc.export_hired_csv(), mimetype="text/csv",
                    headers={"Content-Disposition": "attachment; filename=hired.csv"})


@bp.post("/register")
@admin_required
def internal_register():
    form = InternalRegistrationForm().validate_or_raise()
    app_row = svc.submit_application(form.profile_data(), enforce_deadline=False)
    current_app.logger.info('%s registered %s internally', current_context().username, app_row.id)
    return jsonify({"success": True, "referenceId": app_row.id}), 201


@bp.route("/deadline", methods=["GET", "POST"])
@admin_required
def deadline():
    if request.method == "POST":
        # an empty deadline clears it
        form = DeadlineForm().validate_or_raise()
        svc.set_deadline(form.deadline.data)
    current = svc.get_deadline()
    return jsonify({"deadline": current.isoformat() if current else None})


@bp.get("/outbox")
@admin_required
def outbox():
    status = request.args.get("status")
    query = OutboxMessage.query
    if status:
        query = query.filter_by(status=status)
    rows = query.order_by(OutboxMessage.id.desc()).limit(200).all()
    return jsonify({"items": [m.to_dict() for m in rows]})


@bp.post("/outbox/retry")
@admin_required
def outbox_retry():
    return jsonify({"success": True, "requeued": retry_failed()})
