from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField, TextAreaField
from wtforms.validators import DataRequired, Optional


class StartEvaluationForm(FlaskForm):
    applicant_id = IntegerField("Postulación", validators=[DataRequired()])


class CompleteEvaluationForm(FlaskForm):
    decision = SelectField(
        "Decisión",
        choices=[("", "Según recomendación"), ("aprobado", "Aprobado"),
                 ("rechazado", "Rechazado"), ("pendiente", "Pendiente")],
        default="",
        validators=[Optional()],
    )
    comment = TextAreaField("Comentario", validators=[Optional()])
