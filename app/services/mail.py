from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app, render_template

# subject line and body copy per application status
STATUS_COPY = {
    "Hired": (
        "Congratulations! You're Hired for {club}!",
        "We are thrilled to offer you a position with {club}! Your skills and passion stood out to us, "
        "and we can't wait for you to join the team. You will receive another email soon with onboarding details.",
    ),
    "Interviewing": (
        "You're Invited for an Interview with {club}",
        "Your application has impressed us, and we would like to invite you for an interview. "
        "You will receive a separate communication shortly with details on how to schedule your slot.",
    ),
    "Under Processing": (
        "Update on Your {club} Application",
        "Your application has passed our initial screening and is now under review by our domain leads. "
        "We will get back to you with the next steps as soon as possible.",
    ),
    "Recommended": (
        "Great News Regarding Your {club} Interview",
        "Congratulations on clearing the interview round! Your application has been recommended for the "
        "final review. We will notify you with the final decision soon.",
    ),
    "Rejected": (
        "Update on Your {club} Application",
        "Thank you for your interest in {club} and for the time you invested in your application. "
        "We have decided not to move forward at this time. We encourage you to apply for future openings.",
    ),
}

SUBJECTS = {
    "application_received": "Your {club} Application has been Received!",
    "invitation": "Welcome to the {club} Team, {name}!",
    "profile_confirmation": "Your {club} Profile is Active!",
    "profile_edit_link": "Edit your {club} team profile",
    "event_confirmation": "Your Ticket for {event_title}",
    "event_reminder": "Reminder: {event_title} is coming up!",
}


def compose(kind, data):
    """Render (subject, html) for a notification kind."""
    club = current_app.config.get("CLUB_NAME", "MLSC")
    ctx = dict(data, club=club)
    if kind == "status_update":
        status = data.get("status")
        subject, message = STATUS_COPY.get(status, (
            "Update on Your {club} Application",
            'Your application status has been updated to "{status}". Please stay tuned for more information.',
        ))
        ctx["message"] = message.format(club=club, status=status)
        subject = subject.format(club=club)
    else:
        subject = SUBJECTS[kind].format(**ctx)
    html = render_template(f"mail/{kind}.html", **ctx)
    return subject, html


def send_mail(to_email, subject, html):
    sg = SendGridAPIClient(api_key=current_app.config['SENDGRID_API_KEY'])
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   html_content=html)
    resp = sg.send(message)
    headers = getattr(resp, 'headers', None) or {}
    return resp.status_code, headers.get('X-Message-Id')
