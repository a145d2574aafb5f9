from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import IntegerField, SelectField, StringField, SubmitField
from wtforms.validators import DataRequired, Email, InputRequired, Length, NumberRange, Optional, URL

from ...models.team import CATEGORY_TYPES
from ...utils.forms import StrictForm

IMAGE_TYPES = ["jpg", "jpeg", "png", "webp"]


class CategoryForm(StrictForm):
    name = StringField("Name", validators=[DataRequired(), Length(min=2, max=120)])
    order = IntegerField("Order", validators=[InputRequired(), NumberRange(min=0)])
    type = SelectField("Type", choices=[(t, t) for t in CATEGORY_TYPES], validators=[DataRequired()])
    submit = SubmitField("Save")


class MemberForm(StrictForm):
    name = StringField("Name", validators=[DataRequired(), Length(min=2, max=120)])
    email = StringField("Email", validators=[DataRequired(), Email()])
    role = StringField("Role", validators=[DataRequired(), Length(max=120)])
    image = StringField("Image URL", validators=[Optional(), URL()])
    linkedin = StringField("LinkedIn", validators=[Optional(), URL()])
    category_id = IntegerField("Category", validators=[Optional()])
    submit = SubmitField("Save")

    def member_data(self):
        return {
            "name": self.name.data.strip(),
            "email": self.email.data.strip().lower(),
            "role": self.role.data.strip(),
            "image": self.image.data or None,
            "linkedin": self.linkedin.data or None,
            "category_id": self.category_id.data,
        }


class OnboardingForm(StrictForm):
    linkedin = StringField("LinkedIn", validators=[DataRequired(), URL()])
    image = FileField("Profile photo", validators=[FileRequired(), FileAllowed(IMAGE_TYPES, "Images only.")])
    submit = SubmitField("Complete onboarding")


class ProfileForm(StrictForm):
    linkedin = StringField("LinkedIn", validators=[Optional(), URL()])
    image = FileField("Profile photo", validators=[Optional(), FileAllowed(IMAGE_TYPES, "Images only.")])
    submit = SubmitField("Update profile")
