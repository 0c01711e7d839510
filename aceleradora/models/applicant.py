from ..extensions import db
from .base import TimestampMixin, iso

APPLICANT_STATUSES = ("borrador", "enviada", "en_revision", "evaluada", "aprobada", "rechazada")


class Applicant(db.Model, TimestampMixin):
    """Postulación: a startup's submission to a convocatoria."""
    __tablename__ = "applicants"
    __table_args__ = (db.UniqueConstraint("startup_id", "convocatoria_id", name="uq_applicant_startup_convocatoria"),)

    id = db.Column(db.Integer, primary_key=True)
    startup_id = db.Column(db.Integer, db.ForeignKey("startups.id"), nullable=False, index=True)
    convocatoria_id = db.Column(db.Integer, db.ForeignKey("convocatorias.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default="borrador")
    submitted_at = db.Column(db.DateTime)

    startup = db.relationship("Startup")
    convocatoria = db.relationship("Convocatoria")
    answers = db.relationship("Answer", backref="applicant", cascade="all, delete-orphan",
                              order_by="Answer.order")

    def to_dict(self, with_answers=False):
        d = {
            "id": self.id,
            "startupId": self.startup_id,
            "startupName": self.startup.name if self.startup else None,
            "convocatoriaId": self.convocatoria_id,
            "status": self.status,
            "submittedAt": iso(self.submitted_at),
        }
        if with_answers:
            d["answers"] = [a.to_dict() for a in self.answers]
        return d
