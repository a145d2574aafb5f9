from ..extensions import db
from .base import TimestampMixin

STATUSES = ["Received", "Under Processing", "Interviewing", "Recommended", "Hired", "Rejected"]
TERMINAL_STATUSES = {"Hired", "Rejected"}

TECHNICAL_DOMAINS = ["gen_ai", "ds_ml", "azure", "web_app"]
NON_TECHNICAL_DOMAINS = ["event_management", "public_relations", "media_marketing", "creativity"]
DOMAIN_LABELS = {
    "gen_ai": "Generative AI",
    "ds_ml": "Data Science & ML",
    "azure": "Azure Cloud",
    "web_app": "Web & App Development",
    "event_management": "Event Management",
    "public_relations": "Public Relations",
    "media_marketing": "Media Marketing",
    "creativity": "Creativity",
}

SUITABILITY = ["yes", "no", "undecided"]
RATING_KEYS = ["communication", "technical", "problem_solving", "team_fit"]


def compute_overall(ratings):
    """Mean of the non-zero sub-ratings rounded to two decimals, 0 if none."""
    values = [float(ratings.get(k) or 0) for k in RATING_KEYS]
    rated = [v for v in values if v > 0]
    if not rated:
        return 0.0
    return round(sum(rated) / len(rated), 2)


class Application(db.Model, TimestampMixin):
    __tablename__ = "applications"

    # reference ID handed to the applicant, e.g. MLSC-123456-AB12
    id = db.Column(db.String(32), primary_key=True)

    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), nullable=False, index=True)
    phone = db.Column(db.String(20), nullable=False)
    roll_no = db.Column(db.String(40), nullable=False, index=True)
    branch = db.Column(db.String(60))
    section = db.Column(db.String(20))
    year_of_study = db.Column(db.String(10), index=True)
    cgpa = db.Column(db.String(10))
    backlogs = db.Column(db.String(10))
    join_reason = db.Column(db.Text)
    about_club = db.Column(db.Text)
    anything_else = db.Column(db.Text)
    linkedin = db.Column(db.String(255))
    resume_url = db.Column(db.String(512))
    resume_summary = db.Column(db.Text)

    technical_domain = db.Column(db.String(40), index=True)
    non_technical_domain = db.Column(db.String(40))

    status = db.Column(db.String(30), default="Received", nullable=False, index=True)
    is_recommended = db.Column(db.Boolean, default=False, nullable=False)
    suitability_technical = db.Column(db.String(10), default="undecided", nullable=False)
    suitability_non_technical = db.Column(db.String(10), default="undecided", nullable=False)

    # 0-5 each; overall is derived, see compute_overall
    rating_communication = db.Column(db.Float, default=0, nullable=False)
    rating_technical = db.Column(db.Float, default=0, nullable=False)
    rating_problem_solving = db.Column(db.Float, default=0, nullable=False)
    rating_team_fit = db.Column(db.Float, default=0, nullable=False)
    rating_overall = db.Column(db.Float, default=0, nullable=False, index=True)
    remarks = db.Column(db.Text, default="")
    reviewed_by = db.Column(db.String(80))

    submitted_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False, index=True)

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def ratings(self):
        return {
            "communication": self.rating_communication or 0,
            "technical": self.rating_technical or 0,
            "problem_solving": self.rating_problem_solving or 0,
            "team_fit": self.rating_team_fit or 0,
            "overall": self.rating_overall or 0,
        }

    def apply_ratings(self, ratings):
        for k in RATING_KEYS:
            if k in ratings and ratings[k] is not None:
                setattr(self, f"rating_{k}", float(ratings[k]))
        self.rating_overall = compute_overall({k: getattr(self, f"rating_{k}") for k in RATING_KEYS})

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "rollNo": self.roll_no,
            "branch": self.branch,
            "section": self.section,
            "yearOfStudy": self.year_of_study,
            "cgpa": self.cgpa,
            "backlogs": self.backlogs,
            "joinReason": self.join_reason,
            "aboutClub": self.about_club,
            "anythingElse": self.anything_else,
            "linkedin": self.linkedin,
            "resumeSummary": self.resume_summary,
            "technicalDomain": self.technical_domain,
            "nonTechnicalDomain": self.non_technical_domain,
            "status": self.status,
            "isRecommended": bool(self.is_recommended),
            "suitability": {
                "technical": self.suitability_technical,
                "nonTechnical": self.suitability_non_technical,
            },
            "ratings": {
                "communication": self.rating_communication or 0,
                "technical": self.rating_technical or 0,
                "problemSolving": self.rating_problem_solving or 0,
                "teamFit": self.rating_team_fit or 0,
                "overall": self.rating_overall or 0,
            },
            "remarks": self.remarks or "",
            "reviewedBy": self.reviewed_by,
            "submittedAt": self.submitted_at.isoformat() if self.submitted_at else None,
        }

    def __repr__(self) -> str:
        return f"<Application id={self.id} status={self.status!r}>"
