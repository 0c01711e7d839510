from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, DateField
from wtforms.validators import DataRequired, Optional, Length, ValidationError


class ConvocatoriaForm(FlaskForm):
    titulo = StringField("Título", validators=[DataRequired(), Length(max=200)])
    descripcion = TextAreaField("Descripción", validators=[DataRequired()])
    tipo = StringField("Tipo", validators=[Optional(), Length(max=50)])
    fecha_inicio = DateField("Fecha de inicio", format="%Y-%m-%d", validators=[DataRequired()])
    fecha_fin = DateField("Fecha de fin", format="%Y-%m-%d", validators=[DataRequired()])

    def validate_fecha_fin(self, field):
        if self.fecha_inicio.data and field.data and field.data < self.fecha_inicio.data:
            raise ValidationError("La fecha de fin debe ser posterior a la de inicio")
