from wtforms import BooleanField, DateTimeLocalField, StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, Optional, URL

from ...utils.forms import StrictForm


class EventForm(StrictForm):
    title = StringField("Title", validators=[DataRequired(), Length(min=3, max=200)])
    description = TextAreaField("Description", validators=[DataRequired(), Length(min=10)])
    date = DateTimeLocalField("Date", format="%Y-%m-%dT%H:%M", validators=[DataRequired()])
    image = StringField("Image URL", validators=[Optional(), URL()])
    registration_open = BooleanField("Registration open")
    speakers = TextAreaField("Speakers", validators=[Optional()])
    timeline = TextAreaField("Timeline", validators=[Optional()])
    submit = SubmitField("Save")

    def event_data(self):
        return {
            "title": self.title.data.strip(),
            "description": self.description.data.strip(),
            "date": self.date.data,
            "image": self.image.data or None,
            "registration_open": bool(self.registration_open.data),
            "speakers": self.speakers.data or None,
            "timeline": self.timeline.data or None,
        }


class RegistrationForm(StrictForm):
    name = StringField("Name", validators=[DataRequired(), Length(min=2, max=120)])
    email = StringField("Email", validators=[DataRequired(), Email()])
    submit = SubmitField("Register")
