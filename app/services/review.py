"""Status rules for application review.

Any status may follow any other (no enforced transition graph); what is
gated is *who* may set it. Panels work on the early stages only and can
never move an application out of a final decision.
"""
from ..errors import InvalidStatusError, ReviewPermissionError
from ..models.application import STATUSES, TERMINAL_STATUSES

PANEL_STATUSES = ("Received", "Under Processing", "Interviewing")


def allowed_statuses(ctx):
    if ctx.is_admin:
        return list(STATUSES)
    return list(PANEL_STATUSES)


def check_transition(ctx, application, new_status):
    """Raise if ``ctx`` may not move ``application`` to ``new_status``.

    Returns True when the status actually changes.
    """
    if new_status not in STATUSES:
        raise InvalidStatusError(f"Unknown status: {new_status}")
    current = application.status
    if new_status == current:
        return False
    if ctx.is_admin:
        return True
    if current in TERMINAL_STATUSES:
        raise ReviewPermissionError(f"Application is already {current}; panels cannot change it.")
    if new_status not in PANEL_STATUSES:
        raise ReviewPermissionError(f"Panels cannot set status {new_status}.")
    return True


def can_view(ctx, application):
    if ctx.is_admin:
        return True
    return application.technical_domain == ctx.domain
