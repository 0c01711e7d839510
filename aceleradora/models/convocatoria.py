from ..extensions import db
from .base import TimestampMixin, iso

# borrador -> activa (published, criteria frozen) -> cerrada
CONVOCATORIA_STATUSES = ("borrador", "activa", "cerrada")


class Convocatoria(db.Model, TimestampMixin):
    __tablename__ = "convocatorias"
    id = db.Column(db.Integer, primary_key=True)
    titulo = db.Column(db.String(200), nullable=False)
    descripcion = db.Column(db.Text, nullable=False)
    tipo = db.Column(db.String(50))
    fecha_inicio = db.Column(db.Date, nullable=False)
    fecha_fin = db.Column(db.Date, nullable=False)
    estado = db.Column(db.String(20), default="borrador")
    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id"))
    published_at = db.Column(db.DateTime)

    criteria = db.relationship("Criterion", backref="convocatoria", cascade="all, delete-orphan",
                               order_by="Criterion.order")

    @property
    def is_published(self):
        return self.published_at is not None

    def is_open_on(self, day):
        return self.estado == "activa" and self.fecha_inicio <= day <= self.fecha_fin

    def to_dict(self, with_criteria=False):
        d = {
            "id": self.id,
            "titulo": self.titulo,
            "descripcion": self.descripcion,
            "tipo": self.tipo,
            "fechaInicio": iso(self.fecha_inicio),
            "fechaFin": iso(self.fecha_fin),
            "estado": self.estado,
            "publishedAt": iso(self.published_at),
        }
        if with_criteria:
            d["criterios"] = [c.to_dict() for c in self.criteria]
        return d


class Criterion(db.Model, TimestampMixin):
    __tablename__ = "criteria"
    id = db.Column(db.Integer, primary_key=True)
    convocatoria_id = db.Column(db.Integer, db.ForeignKey("convocatorias.id"), nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False)  # scoring.Category value
    prompt = db.Column(db.Text, nullable=False)
    weight = db.Column(db.Float, nullable=False, default=1.0)
    required = db.Column(db.Boolean, nullable=False, default=True)
    order = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {"id": self.id, "category": self.category, "prompt": self.prompt,
                "weight": self.weight, "required": self.required, "order": self.order}
