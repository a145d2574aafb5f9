from flask import Flask, g, request

from .errors import register_error_handlers
from .extensions import db, login_manager, migrate, rq

# visits to these are not logged
UNTRACKED_PREFIXES = ("/admin", "/auth", "/static", "/favicon")
UNTRACKED_SUFFIXES = ("/image", ".ico", ".png", ".jpg", ".jpeg", ".svg", ".webp", ".css", ".js", ".map")


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    rq.init_app(app)

    @login_manager.request_loader
    def load_reviewer(req):
        from .services.session import resolve_session
        token = req.cookies.get(app.config["AUTH_COOKIE_NAME"])
        if not token:
            return None
        ctx = resolve_session(token)
        if ctx is None:
            g.clear_auth_cookie = True
        return ctx

    @app.after_request
    def clear_invalid_cookie(response):
        if g.get("clear_auth_cookie"):
            response.delete_cookie(app.config["AUTH_COOKIE_NAME"])
        return response

    @app.before_request
    def log_visit():
        if request.method != "GET" or request.path.startswith(UNTRACKED_PREFIXES):
            return None
        if request.path.lower().endswith(UNTRACKED_SUFFIXES):
            return None
        from .jobs.visitors import record_visit
        try:
            ip = request.headers.get("X-Forwarded-For", request.remote_addr or "").split(",")[0].strip()
            rq.enqueue(record_visit, ip, request.user_agent.string, request.path)
        except Exception:
            app.logger.warning('visitor logging failed for %s', request.path, exc_info=True)
        return None

    from .blueprints.auth import bp as auth_bp
    from .blueprints.applications import bp as applications_bp
    from .blueprints.team import bp as team_bp
    from .blueprints.events import bp as events_bp
    from .blueprints.content import bp as content_bp
    from .blueprints.public import bp as public_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(applications_bp, url_prefix="/admin/applications")
    app.register_blueprint(team_bp, url_prefix="/admin/team")
    app.register_blueprint(events_bp, url_prefix="/admin/events")
    app.register_blueprint(content_bp, url_prefix="/admin")
    app.register_blueprint(public_bp)

    register_error_handlers(app)
    return app
