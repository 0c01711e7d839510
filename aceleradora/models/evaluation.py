from ..extensions import db
from .base import TimestampMixin, iso

# pending -> in_review -> completed (terminal)
EVALUATION_STATUSES = ("pending", "in_review", "completed")
SOURCE_MANUAL = "manual"
SOURCE_AI = "ai"


class Evaluation(db.Model, TimestampMixin):
    __tablename__ = "evaluations"
    id = db.Column(db.Integer, primary_key=True)
    applicant_id = db.Column(db.Integer, db.ForeignKey("applicants.id"), nullable=False, unique=True)
    evaluator_id = db.Column(db.Integer, db.ForeignKey("users.id"))
    status = db.Column(db.String(20), nullable=False, default="pending")
    total_score = db.Column(db.Float)
    recommendation = db.Column(db.String(20))  # aprobado/rechazado/pendiente
    decision = db.Column(db.String(20))  # admin override at completion
    per_category = db.Column(db.JSON)
    confidence = db.Column(db.Float)
    analysis = db.Column(db.JSON)  # fortalezas/debilidades/observaciones/recomendaciones
    model_version = db.Column(db.String(50))
    comment = db.Column(db.Text)
    completed_at = db.Column(db.DateTime)

    applicant = db.relationship("Applicant", backref=db.backref("evaluation", uselist=False))
    criterion_scores = db.relationship("CriterionScore", backref="evaluation", cascade="all, delete-orphan",
                                       order_by="CriterionScore.id")

    @property
    def is_completed(self):
        return self.status == "completed"

    def to_dict(self, with_scores=True):
        d = {
            "id": self.id,
            "applicantId": self.applicant_id,
            "evaluatorId": self.evaluator_id,
            "status": self.status,
            "totalScore": self.total_score,
            "recommendation": self.recommendation,
            "decision": self.decision,
            "perCategory": self.per_category or {},
            "confidence": self.confidence,
            "analysis": self.analysis,
            "modelVersion": self.model_version,
            "comment": self.comment,
            "completedAt": iso(self.completed_at),
        }
        if with_scores:
            d["criteriaScores"] = [s.to_dict() for s in self.criterion_scores]
        return d

    def __repr__(self) -> str:
        return f"<Evaluation id={self.id} applicant_id={self.applicant_id} status={self.status}>"


class CriterionScore(db.Model, TimestampMixin):
    __tablename__ = "criterion_scores"
    __table_args__ = (db.UniqueConstraint("evaluation_id", "criterion_id", "source", name="uq_score_eval_criterion_source"),)

    id = db.Column(db.Integer, primary_key=True)
    evaluation_id = db.Column(db.Integer, db.ForeignKey("evaluations.id"), nullable=False, index=True)
    criterion_id = db.Column(db.Integer, db.ForeignKey("criteria.id"), nullable=False)
    source = db.Column(db.String(10), nullable=False)  # manual / ai
    raw_score = db.Column(db.Float, nullable=False)
    justification = db.Column(db.Text)
    recommendations = db.Column(db.Text)
    confidence = db.Column(db.Float)  # ai only

    criterion = db.relationship("Criterion")

    def to_dict(self):
        return {
            "id": self.id,
            "criterionId": self.criterion_id,
            "category": self.criterion.category if self.criterion else None,
            "source": self.source,
            "rawScore": self.raw_score,
            "justification": self.justification,
            "recommendations": self.recommendations,
            "confidence": self.confidence,
        }
