from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, TextAreaField, SelectField
from wtforms.validators import DataRequired, Optional, Email, Length, NumberRange, URL


class StartupForm(FlaskForm):
    name = StringField("Nombre", validators=[DataRequired(), Length(max=120)])
    description = TextAreaField("Descripción", validators=[Optional()])
    industry = StringField("Industria", validators=[Optional(), Length(max=80)])
    founded_year = IntegerField("Año de fundación", validators=[Optional(), NumberRange(min=1900, max=2100)])
    website = StringField("Sitio web", validators=[Optional(), URL(), Length(max=255)])
    status = SelectField("Estado", choices=[("activa", "Activa"), ("inactiva", "Inactiva"), ("pendiente", "Pendiente")],
                         default="activa")


class MemberForm(FlaskForm):
    name = StringField("Nombre", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[Optional(), Email()])
    role = StringField("Cargo", validators=[Optional(), Length(max=80)])
