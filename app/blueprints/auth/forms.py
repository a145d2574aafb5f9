from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Length

from ...utils.forms import StrictForm


class LoginForm(StrictForm):
    username = StringField("Username", validators=[DataRequired(), Length(max=80)])
    password = PasswordField("Password", validators=[DataRequired()])
    submit = SubmitField("Login")
