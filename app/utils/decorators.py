from functools import wraps
from flask import flash, redirect, url_for
from flask_login import current_user

from ..extensions import login_manager


def current_context():
    """The ReviewerContext of the logged-in reviewer (not the proxy)."""
    return current_user._get_current_object()


def reviewer_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if getattr(current_user, "role", None) not in ("admin", "panel"):
            return login_manager.unauthorized()
        return view(*args, **kwargs)
    return wrapped


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if getattr(current_user, "role", None) != "admin":
            flash("You do not have permission to access this page.", "danger")
            return redirect(url_for("applications.list_applications"))
        return view(*args, **kwargs)
    return wrapped
