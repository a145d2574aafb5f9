from flask import current_app, flash, jsonify, redirect, render_template, url_for
from flask_login import current_user

from . import bp
from .forms import LoginForm
from ...services.session import authenticate, sign_session
from ...utils.decorators import current_context, reviewer_required


@bp.route("/login", methods=["GET", "POST"])
def login():
    form = LoginForm()
    if form.validate_on_submit():
        ctx = authenticate(form.username.data.strip(), form.password.data)
        if ctx is not None:
            token = sign_session(ctx.role, ctx.username, ctx.domain)
            resp = redirect(url_for("applications.list_applications"))
            resp.set_cookie(
                current_app.config["AUTH_COOKIE_NAME"], token,
                max_age=current_app.config.get("SESSION_TTL_SECONDS", 86400),
                httponly=True, samesite="Lax",
                secure=current_app.config.get("AUTH_COOKIE_SECURE", False),
            )
            current_app.logger.info('%s %s logged in', ctx.role, ctx.username)
            return resp
        current_app.logger.warning('failed login for %r', form.username.data)
        flash("Invalid credentials", "danger")
        return render_template("login.html", form=form), 401
    return render_template("login.html", form=form)


@bp.route("/logout", methods=["POST"])
def logout():
    resp = redirect(url_for("auth.login"))
    resp.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return resp


@bp.get("/me")
@reviewer_required
def me():
    ctx = current_context()
    return jsonify({"role": ctx.role, "username": ctx.username, "domain": ctx.domain,
                    "authenticated": current_user.is_authenticated})
