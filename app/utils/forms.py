import math

from flask import request
from flask_wtf import FlaskForm
from wtforms.validators import ValidationError

from ..errors import ValidationFailed


class StrictForm(FlaskForm):
    """FlaskForm that also fails on fields it does not declare."""

    ignored_fields = ("csrf_token", "submit")

    def unknown_fields(self):
        sent = set(request.form.keys()) | set(request.files.keys())
        payload = request.get_json(silent=True) if request.is_json else None
        if isinstance(payload, dict):
            sent |= set(payload)
        return sorted(sent - set(self._fields) - set(self.ignored_fields))

    def validate(self, extra_validators=None):
        ok = super().validate(extra_validators=extra_validators)
        unknown = self.unknown_fields()
        if unknown:
            self.form_errors.append("Unknown fields: " + ", ".join(unknown))
            return False
        return ok

    def validate_or_raise(self):
        if not self.validate_on_submit():
            raise ValidationFailed(field_errors(self))
        return self


def field_errors(form):
    out = {name: list(f.errors) for name, f in form._fields.items() if f.errors}
    if form.form_errors:
        out["_form"] = list(form.form_errors)
    return out


def number_between(low, high=None, integer=False):
    """Validator for numeric strings (CGPA, backlog counts)."""
    def _check(form, field):
        raw = (field.data or "").strip()
        try:
            value = int(raw) if integer else float(raw)
        except ValueError:
            raise ValidationError("Please enter a valid number.")
        if not math.isfinite(value):
            raise ValidationError("Please enter a valid number.")
        if value < low or (high is not None and value > high):
            if high is None:
                raise ValidationError(f"Must be at least {low}.")
            raise ValidationError(f"Must be between {low} and {high}.")
    return _check


def coerce_flag(value):
    """Coerce a yes/no form value (HTML string or JSON bool) to a bool."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"not a yes/no value: {value!r}")
