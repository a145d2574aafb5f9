from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length

from ...utils.forms import StrictForm


class TickerForm(StrictForm):
    message = StringField("Message", validators=[DataRequired(), Length(max=500)])
    submit = SubmitField("Add")
