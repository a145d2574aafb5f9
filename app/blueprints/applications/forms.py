from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import (DateTimeLocalField, FloatField, SelectField, StringField,
                     SubmitField, TextAreaField)
from wtforms.validators import (DataRequired, Email, Length, NumberRange, Optional,
                                Regexp, URL)

from ...models.application import (DOMAIN_LABELS, NON_TECHNICAL_DOMAINS, STATUSES,
                                   SUITABILITY, TECHNICAL_DOMAINS)
from ...utils.forms import StrictForm, coerce_flag, number_between

TECH_CHOICES = [(d, DOMAIN_LABELS[d]) for d in TECHNICAL_DOMAINS]
NON_TECH_CHOICES = [(d, DOMAIN_LABELS[d]) for d in NON_TECHNICAL_DOMAINS]
STATUS_CHOICES = [(s, s) for s in STATUSES]
SUITABILITY_CHOICES = [(s, s.title()) for s in SUITABILITY]

# form field -> Application column
PROFILE_FIELDS = ("name", "email", "phone", "roll_no", "branch", "section", "year_of_study",
                  "cgpa", "backlogs", "technical_domain", "non_technical_domain",
                  "linkedin", "anything_else")


class InternalRegistrationForm(StrictForm):
    """Registration entered by an admin on a candidate's behalf."""
    name = StringField("Full name", validators=[DataRequired(), Length(min=2, max=120)])
    email = StringField("Email", validators=[DataRequired(), Email()])
    phone = StringField("Phone", validators=[DataRequired(), Regexp(r"^\d{10}$", message="Phone number must be 10 digits.")])
    roll_no = StringField("Roll number", validators=[DataRequired(), Length(max=40)])
    branch = StringField("Branch", validators=[DataRequired(), Length(max=60)])
    section = StringField("Section", validators=[DataRequired(), Length(max=20)])
    year_of_study = StringField("Year of study", validators=[DataRequired(), Length(max=10)])
    cgpa = StringField("CGPA", validators=[DataRequired(), number_between(0, 10)])
    backlogs = StringField("Backlogs", validators=[DataRequired(), number_between(0, integer=True)])
    technical_domain = SelectField("Technical domain", choices=TECH_CHOICES, validators=[DataRequired()])
    non_technical_domain = SelectField("Non-technical domain", choices=NON_TECH_CHOICES, validators=[DataRequired()])
    linkedin = StringField("LinkedIn", validators=[Optional(), URL()])
    anything_else = TextAreaField("Anything else", validators=[Optional(), Length(max=2000)])
    submit = SubmitField("Register")

    def profile_data(self):
        return {k: (self[k].data.strip() if isinstance(self[k].data, str) else self[k].data) or None
                for k in PROFILE_FIELDS if k in self}


class ApplicationForm(InternalRegistrationForm):
    """Public hiring application."""
    join_reason = TextAreaField("Why do you want to join?", validators=[DataRequired(), Length(min=20, max=2000)])
    about_club = TextAreaField("What do you know about the club?", validators=[DataRequired(), Length(min=20, max=2000)])
    resume = FileField("Resume", validators=[Optional(), FileAllowed(["pdf", "doc", "docx"], "PDF or Word documents only.")])
    submit = SubmitField("Apply")

    def profile_data(self):
        data = super().profile_data()
        data["join_reason"] = self.join_reason.data.strip()
        data["about_club"] = self.about_club.data.strip()
        return data


class ReviewForm(StrictForm):
    # overall is derived server-side; clients may still post it
    ignored_fields = StrictForm.ignored_fields + ("overall",)

    status = SelectField("Status", choices=STATUS_CHOICES, validators=[Optional()])
    communication = FloatField("Communication", validators=[Optional(), NumberRange(0, 5)])
    technical = FloatField("Technical", validators=[Optional(), NumberRange(0, 5)])
    problem_solving = FloatField("Problem solving", validators=[Optional(), NumberRange(0, 5)])
    team_fit = FloatField("Team fit", validators=[Optional(), NumberRange(0, 5)])
    suitability_technical = SelectField("Technical suitability", choices=SUITABILITY_CHOICES, validators=[Optional()])
    suitability_non_technical = SelectField("Non-technical suitability", choices=SUITABILITY_CHOICES, validators=[Optional()])
    is_recommended = SelectField("Recommended", choices=[(True, "Yes"), (False, "No")], coerce=coerce_flag,
                                 validators=[Optional()])
    remarks = TextAreaField("Remarks", validators=[Optional(), Length(max=5000)])
    submit = SubmitField("Save")

    def payload(self):
        """Payload for ``update_review``; absent fields are left as they are."""
        out = {}
        if self.status.data:
            out["status"] = self.status.data
        ratings = {k: self[k].data for k in ("communication", "technical", "problem_solving", "team_fit")
                   if self[k].data is not None}
        if ratings:
            out["ratings"] = ratings
        suitability = {}
        if self.suitability_technical.data:
            suitability["technical"] = self.suitability_technical.data
        if self.suitability_non_technical.data:
            suitability["nonTechnical"] = self.suitability_non_technical.data
        if suitability:
            out["suitability"] = suitability
        if self.is_recommended.data is not None:
            out["is_recommended"] = self.is_recommended.data
        if self.remarks.raw_data:
            out["remarks"] = self.remarks.data or ""
        return out


class EvaluateForm(StrictForm):
    transcript = TextAreaField("Interview transcript", validators=[DataRequired(), Length(max=50000)])


class BulkStatusForm(StrictForm):
    target_status = SelectField("New status", choices=STATUS_CHOICES, validators=[DataRequired()])
    submit = SubmitField("Apply to all matching")


class HiringCsvForm(StrictForm):
    csv_file = FileField("Hiring CSV", validators=[FileRequired(), FileAllowed(["csv"], "CSV files only.")])
    submit = SubmitField("Finalize hiring")


class DeadlineForm(StrictForm):
    deadline = DateTimeLocalField("Deadline", format="%Y-%m-%dT%H:%M", validators=[Optional()])
    submit = SubmitField("Save")
