"""Bulk status changes.

Each record is committed on its own; a crash part-way leaves the earlier
records updated. Notifications are queued only after all updates are done.
"""
import csv
from io import StringIO

from flask import current_app

from ..errors import CsvFormatError, InvalidStatusError
from ..extensions import db
from ..models.application import Application, STATUSES, TERMINAL_STATUSES
from .applications import queue_status_notification, scoped_query
from . import review


class BulkResult:
    def __init__(self):
        self.updated = []  # (app_id, old_status, new_status)
        self.skipped = 0
        self.failed = 0
        self.unknown_roll_numbers = []

    @property
    def updated_count(self):
        return len(self.updated)

    def count_for(self, status):
        return sum(1 for _, _, new in self.updated if new == status)

    def to_dict(self):
        out = {
            "updatedCount": self.updated_count,
            "skipped": self.skipped,
            "failed": self.failed,
        }
        for status in TERMINAL_STATUSES:
            out[status.lower()] = self.count_for(status)
        if self.unknown_roll_numbers:
            out["unknownRollNumbers"] = self.unknown_roll_numbers
        return out


def _apply(result, app_row, status):
    old = app_row.status
    try:
        app_row.status = status
        db.session.commit()
    except Exception:
        db.session.rollback()
        result.failed += 1
        current_app.logger.exception('bulk update of %s to %s failed', app_row.id, status)
        return
    result.updated.append((app_row.id, old, status))


def _fan_out(result):
    for app_id, old, _ in result.updated:
        try:
            app_row = db.session.get(Application, app_id)
            queue_status_notification(app_row, old)
        except Exception:
            current_app.logger.exception('bulk notification for %s failed', app_id)


def bulk_update_status(ctx, filters, target_status):
    """Move every matching non-terminal application to ``target_status``."""
    if target_status not in STATUSES:
        raise InvalidStatusError(f"Unknown status: {target_status}")

    result = BulkResult()
    candidates = scoped_query(ctx, filters).filter(~Application.status.in_(TERMINAL_STATUSES)).all()
    for app_row in candidates:
        if app_row.status == target_status:
            result.skipped += 1
            continue
        review.check_transition(ctx, app_row, target_status)
        _apply(result, app_row, target_status)

    current_app.logger.info('%s bulk-updated %s applications to %s', ctx.username, result.updated_count, target_status)
    _fan_out(result)
    return result


def parse_roll_numbers(csv_text):
    """Roll numbers from a CSV with a ``rollNo`` header column."""
    reader = csv.DictReader(StringIO(csv_text.lstrip("\ufeff")))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    if "rollNo" not in headers:
        raise CsvFormatError("The CSV file is missing required columns: rollNo.")
    reader.fieldnames = headers
    rolls = []
    for row in reader:
        roll = (row.get("rollNo") or "").strip()
        if roll:
            rolls.append(roll)
    return rolls


def bulk_hire_from_csv(ctx, csv_text):
    """Listed roll numbers become Hired, every other open application Rejected.

    Applications already Hired or Rejected are left alone. Irreversible.
    """
    rolls = parse_roll_numbers(csv_text)
    wanted = {r.lower() for r in rolls}

    # roll numbers that exist only on already-final applications are not unknown
    finals = {(r or "").strip().lower() for (r,) in
              Application.query.with_entities(Application.roll_no)
              .filter(Application.status.in_(TERMINAL_STATUSES)).all()}

    result = BulkResult()
    seen = set()
    open_apps = Application.query.filter(~Application.status.in_(TERMINAL_STATUSES)).all()
    for app_row in open_apps:
        roll = (app_row.roll_no or "").strip().lower()
        if roll in wanted:
            seen.add(roll)
            target = "Hired"
        else:
            target = "Rejected"
        review.check_transition(ctx, app_row, target)
        _apply(result, app_row, target)

    result.unknown_roll_numbers = [r for r in rolls if r.lower() not in seen and r.lower() not in finals]

    current_app.logger.info('%s applied hiring CSV: %s hired, %s rejected', ctx.username,
                            result.count_for("Hired"), result.count_for("Rejected"))
    _fan_out(result)
    return result
