"""Persistence access for the evaluation workflow.

The workflow receives one of these instead of reaching for the ORM session
itself, so tests can hand in a repository bound to their own database.
"""

from ..extensions import db
from ..models.answer import Answer
from ..models.applicant import Applicant
from ..models.convocatoria import Criterion
from ..models.evaluation import Evaluation, CriterionScore


class EvaluationRepository:
    def __init__(self, session=None):
        self.session = session or db.session

    def get_applicant(self, applicant_id):
        return self.session.get(Applicant, applicant_id)

    def get_evaluation(self, evaluation_id):
        return self.session.get(Evaluation, evaluation_id)

    def evaluation_for_applicant(self, applicant_id):
        return self.session.query(Evaluation).filter_by(applicant_id=applicant_id).first()

    def list_evaluations(self, status=None):
        q = self.session.query(Evaluation)
        if status:
            q = q.filter(Evaluation.status == status)
        return q.order_by(Evaluation.id.desc()).all()

    def criteria_for(self, applicant):
        return (self.session.query(Criterion)
                .filter_by(convocatoria_id=applicant.convocatoria_id)
                .order_by(Criterion.order)
                .all())

    def answers_for(self, applicant_id):
        return (self.session.query(Answer)
                .filter_by(applicant_id=applicant_id)
                .order_by(Answer.order)
                .all())

    def create_evaluation(self, applicant, evaluator_id=None):
        ev = Evaluation(applicant_id=applicant.id, evaluator_id=evaluator_id, status="pending")
        self.session.add(ev)
        self.session.flush()
        return ev

    def upsert_score(self, evaluation, criterion_id, source, raw_score,
                     justification=None, confidence=None, recommendations=None):
        row = (self.session.query(CriterionScore)
               .filter_by(evaluation_id=evaluation.id, criterion_id=criterion_id, source=source)
               .first())
        if row is None:
            row = CriterionScore(evaluation_id=evaluation.id, criterion_id=criterion_id, source=source)
            self.session.add(row)
        row.raw_score = raw_score
        row.justification = justification
        row.confidence = confidence
        row.recommendations = recommendations
        return row

    def scores_for(self, evaluation, source=None):
        q = self.session.query(CriterionScore).filter_by(evaluation_id=evaluation.id)
        if source:
            q = q.filter(CriterionScore.source == source)
        return q.order_by(CriterionScore.id).all()

    def flush(self):
        self.session.flush()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
