from ..extensions import db
from .base import TimestampMixin


class Answer(db.Model, TimestampMixin):
    __tablename__ = "answers"
    __table_args__ = (db.UniqueConstraint("applicant_id", "criterion_id", name="uq_answer_applicant_criterion"),)

    id = db.Column(db.Integer, primary_key=True)
    applicant_id = db.Column(db.Integer, db.ForeignKey("applicants.id"), nullable=False, index=True)
    criterion_id = db.Column(db.Integer, db.ForeignKey("criteria.id"), nullable=False)
    text = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False, default=0)

    criterion = db.relationship("Criterion")

    def to_dict(self):
        return {"id": self.id, "criterionId": self.criterion_id,
                "category": self.criterion.category if self.criterion else None,
                "text": self.text, "order": self.order}
