from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField
from wtforms.validators import DataRequired, Email, EqualTo, Length


class SignupForm(FlaskForm):
    name = StringField("Nombre", validators=[Length(max=120)])
    email = StringField("Email del administrador", validators=[DataRequired(), Email()])
    password = PasswordField("Contraseña", validators=[DataRequired(), Length(min=8)])
    confirm = PasswordField("Contraseña (confirmación)", validators=[DataRequired(), EqualTo('password')])


class RegisterForm(FlaskForm):
    name = StringField("Nombre", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Contraseña", validators=[DataRequired(), Length(min=8)])
    confirm = PasswordField("Contraseña (confirmación)", validators=[DataRequired(), EqualTo('password')])


class LoginForm(FlaskForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])


class RoleForm(FlaskForm):
    role = SelectField("Rol", choices=[("admin", "Administrador"), ("user", "Usuario")])
