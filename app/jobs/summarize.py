import mimetypes

from flask import current_app

from ..extensions import db
from ..models.application import Application
from ..services.openai_wrap import summarize_resume
from ..services.storage import download_bytes


def summarize_application(app_id: str):
    """Fill ``resume_summary`` from the uploaded resume; no-op on failure."""
    app_row = db.session.get(Application, app_id)
    if not app_row or not app_row.resume_url:
        return None
    try:
        data = download_bytes(app_row.resume_url)
    except Exception:
        current_app.logger.exception('could not read resume for %s', app_id)
        return None

    filename = app_row.resume_url.rsplit('/', 1)[-1]
    mimetype = mimetypes.guess_type(filename)[0] or 'application/pdf'
    summary = summarize_resume(data, mimetype=mimetype, filename=filename)
    if not summary:
        current_app.logger.warning('no resume summary produced for %s', app_id)
        return None
    app_row.resume_summary = summary
    db.session.commit()
    return summary
