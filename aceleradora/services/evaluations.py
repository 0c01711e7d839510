"""Evaluation workflow: the CRUD side around the score aggregator.

Loads scores through an injected repository, reconciles manual and AI
scores, runs `score_evaluation` and writes the report back. Status moves
pending -> in_review -> completed; completed evaluations are read-only.
"""

from datetime import datetime

from flask import current_app

from . import openai_wrap
from .repository import EvaluationRepository
from .scoring import (AIScore, Category, ManualScore, ScoreValidationError, APROBADO, PENDIENTE,
                      RECHAZADO, RECOMMENDATIONS, average_confidence, reconcile_scores,
                      score_evaluation, to_number, validate_score)
from ..models.evaluation import SOURCE_AI, SOURCE_MANUAL

# applicant status once the evaluation is completed, by final recommendation
APPLICANT_STATUS_BY_DECISION = {
    APROBADO: "aprobada",
    RECHAZADO: "rechazada",
    PENDIENTE: "evaluada",
}


class WorkflowError(Exception):
    status_code = 400


class NotFound(WorkflowError):
    status_code = 404


class Conflict(WorkflowError):
    status_code = 409


class EvaluationWorkflow:
    def __init__(self, repo=None, approve_threshold=70.0, reject_threshold=40.0,
                 scorer=None, analyzer=None, model_version=None):
        self.repo = repo or EvaluationRepository()
        self.approve_threshold = approve_threshold
        self.reject_threshold = reject_threshold
        self.scorer = scorer or openai_wrap.score_category
        self.analyzer = analyzer or openai_wrap.gen_analysis
        self.model_version = model_version

    @classmethod
    def from_config(cls, config, repo=None, **kwargs):
        return cls(
            repo=repo,
            approve_threshold=float(config.get("APPROVAL_THRESHOLD", 70.0)),
            reject_threshold=float(config.get("REJECTION_THRESHOLD", 40.0)),
            model_version=config.get("OPENAI_MODEL") if config.get("OPENAI_API_KEY") else "fallback",
            **kwargs,
        )

    # -- lookups ---------------------------------------------------------

    def _evaluation(self, evaluation_id):
        ev = self.repo.get_evaluation(evaluation_id)
        if ev is None:
            raise NotFound(f"evaluation {evaluation_id} not found")
        return ev

    def _editable(self, evaluation_id):
        ev = self._evaluation(evaluation_id)
        if ev.is_completed:
            raise Conflict(f"evaluation {ev.id} is completed")
        return ev

    def _criteria_map(self, applicant):
        return {c.id: c for c in self.repo.criteria_for(applicant)}

    # -- scoring ---------------------------------------------------------

    def _to_score(self, row):
        category = Category.parse(row.criterion.category)
        if row.source == SOURCE_MANUAL:
            return ManualScore(str(row.criterion_id), category, row.raw_score, row.justification or "")
        return AIScore(str(row.criterion_id), category, row.raw_score,
                       row.confidence or 0.0, row.justification or "")

    def effective_scores(self, evaluation):
        rows = self.repo.scores_for(evaluation)
        manual = [self._to_score(r) for r in rows if r.source == SOURCE_MANUAL]
        ai = [self._to_score(r) for r in rows if r.source == SOURCE_AI]
        return reconcile_scores(manual, ai)

    def recompute(self, evaluation):
        """Re-run the aggregator over the reconciled scores and store the report."""
        self.repo.flush()
        scores = self.effective_scores(evaluation)
        weights = {str(c.id): c.weight or 1.0 for c in self.repo.criteria_for(evaluation.applicant)}
        report = score_evaluation(scores, weights=weights,
                                  approve_threshold=self.approve_threshold,
                                  reject_threshold=self.reject_threshold)
        evaluation.per_category = report.to_dict()["perCategory"]
        evaluation.total_score = report.total
        evaluation.recommendation = report.recommendation
        evaluation.confidence = average_confidence(scores)
        return report

    def _mark_in_review(self, evaluation):
        if evaluation.status == "pending":
            evaluation.status = "in_review"
        evaluation.applicant.status = "en_revision"

    # -- operations ------------------------------------------------------

    def start(self, applicant_id, evaluator_id=None):
        applicant = self.repo.get_applicant(applicant_id)
        if applicant is None:
            raise NotFound(f"applicant {applicant_id} not found")
        if applicant.status == "borrador":
            raise Conflict(f"applicant {applicant_id} has not been submitted")
        existing = self.repo.evaluation_for_applicant(applicant_id)
        if existing is not None:
            err = Conflict(f"applicant {applicant_id} already has evaluation {existing.id}")
            err.evaluation_id = existing.id
            raise err
        ev = self.repo.create_evaluation(applicant, evaluator_id=evaluator_id)
        self.repo.commit()
        current_app.logger.info("evaluation %s started for applicant %s", ev.id, applicant_id)
        return ev

    def record_manual_scores(self, evaluation_id, entries, evaluator_id=None):
        """Store reviewer scores (1-4). All entries are validated before anything is written."""
        ev = self._editable(evaluation_id)
        criteria = self._criteria_map(ev.applicant)
        parsed = []
        for entry in entries:
            try:
                criterion_id = int(entry["criterionId"])
                raw_value = entry["rawScore"]
            except (KeyError, TypeError, ValueError) as e:
                raise ScoreValidationError(f"malformed manual score: {entry!r}") from e
            raw = to_number(raw_value, f"rawScore of criterion {criterion_id}")
            criterion = criteria.get(criterion_id)
            if criterion is None:
                raise ScoreValidationError(f"criterion {criterion_id} does not belong to this convocatoria")
            score = ManualScore(str(criterion_id), Category.parse(criterion.category), raw,
                                entry.get("justification") or "")
            validate_score(score)
            parsed.append(score)

        for s in parsed:
            self.repo.upsert_score(ev, int(s.criterion_id), SOURCE_MANUAL, s.raw_score,
                                   justification=s.justification)
        if evaluator_id is not None:
            ev.evaluator_id = evaluator_id
        self._mark_in_review(ev)
        report = self.recompute(ev)
        self.repo.commit()
        current_app.logger.info("evaluation %s: %s manual scores, total=%s", ev.id, len(parsed), report.total)
        return ev

    def run_ai(self, evaluation_id):
        """Score every answered criterion with the AI provider and recompute."""
        ev = self._editable(evaluation_id)
        criteria = self._criteria_map(ev.applicant)
        by_category = {}
        for answer in self.repo.answers_for(ev.applicant_id):
            criterion = criteria.get(answer.criterion_id)
            if criterion is None or not (answer.text or "").strip():
                continue
            by_category.setdefault(Category.parse(criterion.category), []).append({
                "criterion_id": criterion.id,
                "prompt": criterion.prompt,
                "text": answer.text,
                "order": answer.order,
            })

        count = 0
        for category in Category:
            items = by_category.get(category)
            if not items:
                continue
            for res in self.scorer(category, items):
                score = AIScore(str(res["criterion_id"]), category, float(res["score"]),
                                float(res["confidence"]), res.get("justification") or "")
                validate_score(score)
                self.repo.upsert_score(ev, int(res["criterion_id"]), SOURCE_AI, score.raw_score,
                                       justification=score.justification,
                                       confidence=score.confidence,
                                       recommendations=res.get("recommendations"))
                count += 1

        self._mark_in_review(ev)
        report = self.recompute(ev)
        if count:
            ev.analysis = self.analyzer(report.to_dict()["perCategory"], report.total)
        ev.model_version = self.model_version
        self.repo.commit()
        current_app.logger.info("evaluation %s: %s AI scores, total=%s confidence=%s",
                                ev.id, count, report.total, ev.confidence)
        return ev

    def complete(self, evaluation_id, decision=None, comment=None):
        """Finalize the evaluation; `decision` lets the admin override the recommendation."""
        ev = self._editable(evaluation_id)
        if decision is not None and decision not in RECOMMENDATIONS:
            raise WorkflowError(f"unknown decision {decision!r}")
        report = self.recompute(ev)
        final = decision or report.recommendation
        ev.decision = decision
        ev.comment = comment or ev.comment
        ev.status = "completed"
        ev.completed_at = datetime.utcnow()
        ev.applicant.status = APPLICANT_STATUS_BY_DECISION[final]
        self.repo.commit()
        current_app.logger.info("evaluation %s completed: total=%s final=%s", ev.id, report.total, final)
        return ev
