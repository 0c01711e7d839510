from flask_wtf import FlaskForm
from wtforms import IntegerField
from wtforms.validators import DataRequired


class ApplyForm(FlaskForm):
    startup_id = IntegerField("Startup", validators=[DataRequired()])
    convocatoria_id = IntegerField("Convocatoria", validators=[DataRequired()])
