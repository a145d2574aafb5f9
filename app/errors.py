"""Errors raised by the service layer.

Blueprints translate these into JSON responses (see ``register_error_handlers``).
"""
from flask import jsonify


class PortalError(Exception):
    status_code = 400

    def __init__(self, message=None, **extra):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.extra = extra

    def to_dict(self):
        out = {"error": self.message}
        out.update(self.extra)
        return out


class ValidationFailed(PortalError):
    def __init__(self, errors, message="Invalid form data. Please check your inputs."):
        super().__init__(message, fields=errors)
        self.errors = errors


class NotFound(PortalError):
    status_code = 404


class ApplicationNotFound(NotFound):
    def __init__(self, app_id=None):
        super().__init__("No application found with that reference ID.")
        self.app_id = app_id


class InvalidStatusError(PortalError):
    pass


class ReviewPermissionError(PortalError):
    status_code = 403


class CsvFormatError(PortalError):
    pass


class RegistrationClosed(PortalError):
    pass


class DeadlinePassed(PortalError):
    def __init__(self):
        super().__init__("The application deadline has passed.")


def register_error_handlers(app):
    @app.errorhandler(PortalError)
    def _portal_error(e):
        return jsonify(e.to_dict()), e.status_code
