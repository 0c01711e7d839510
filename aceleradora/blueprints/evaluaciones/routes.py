from flask import current_app, jsonify, abort, request
from flask_login import login_required, current_user
from rq.job import Job
from . import bp
from .forms import StartEvaluationForm, CompleteEvaluationForm
from ...extensions import db, rq
from ...jobs.evaluate import run_ai_evaluation
from ...models.applicant import Applicant
from ...models.evaluation import Evaluation
from ...services.evaluations import EvaluationWorkflow
from ...services.repository import EvaluationRepository
from ...services.scoring import Category, ScoreValidationError, parse_score, score_evaluation
from ...utils.decorators import admin_required
from ...utils.forms import form_error_response, json_body


def _workflow():
    return EvaluationWorkflow.from_config(current_app.config, repo=EvaluationRepository(db.session))


@bp.get("")
@admin_required
def list_evaluations():
    """Every submitted applicant with its evaluation, pending ones included."""
    status = request.args.get("status")
    applicants = (Applicant.query
                  .filter(Applicant.status != "borrador")
                  .order_by(Applicant.id.desc()).all())
    out = []
    for a in applicants:
        ev = a.evaluation
        ev_status = ev.status if ev else "pending"
        if status and ev_status != status:
            continue
        out.append({
            "applicant": a.to_dict(),
            "evaluationId": ev.id if ev else None,
            "status": ev_status,
            "totalScore": ev.total_score if ev else None,
            "recommendation": ev.recommendation if ev else None,
            "hasEvaluation": ev is not None,
        })
    return jsonify(out)


@bp.post("/iniciar")
@admin_required
def start():
    form = StartEvaluationForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    ev = _workflow().start(form.applicant_id.data, evaluator_id=current_user.id)
    return jsonify(ev.to_dict()), 201


@bp.post("/preview")
@admin_required
def preview():
    """Run the aggregator over raw `{criterionId, category, rawScore, scaleMax}` items."""
    items = json_body().get("scores")
    if not isinstance(items, list):
        raise ScoreValidationError("scores must be a list")
    cfg = current_app.config
    report = score_evaluation([parse_score(i) for i in items],
                              approve_threshold=float(cfg.get("APPROVAL_THRESHOLD", 70)),
                              reject_threshold=float(cfg.get("REJECTION_THRESHOLD", 40)))
    return jsonify(report.to_dict())


@bp.get("/<int:evaluation_id>")
@login_required
def detail(evaluation_id):
    ev = db.get_or_404(Evaluation, evaluation_id)
    if not (current_user.is_admin or ev.applicant.startup.is_member(current_user)):
        abort(403)
    d = ev.to_dict()
    d["applicant"] = ev.applicant.to_dict()
    return jsonify(d)


@bp.get("/<int:evaluation_id>/respuestas")
@admin_required
def answers(evaluation_id):
    """Answers grouped by category for the manual review screen."""
    ev = db.get_or_404(Evaluation, evaluation_id)
    grouped = {c.value: [] for c in Category}
    for ans in ev.applicant.answers:
        grouped[Category.parse(ans.criterion.category).value].append(
            dict(ans.to_dict(), prompt=ans.criterion.prompt))
    return jsonify({"applicant": ev.applicant.to_dict(), "respuestas": grouped,
                    "totalRespuestas": len(ev.applicant.answers)})


@bp.post("/<int:evaluation_id>/manual")
@admin_required
def manual_scores(evaluation_id):
    entries = json_body().get("scores")
    if not isinstance(entries, list):
        raise ScoreValidationError("scores must be a list")
    ev = _workflow().record_manual_scores(evaluation_id, entries, evaluator_id=current_user.id)
    return jsonify(ev.to_dict())


@bp.post("/<int:evaluation_id>/ia")
@admin_required
def kick_ai(evaluation_id):
    ev = db.get_or_404(Evaluation, evaluation_id)
    if ev.is_completed:
        return jsonify({"error": f"evaluation {ev.id} is completed"}), 409
    job = rq.enqueue(run_ai_evaluation, ev.id, job_timeout=600)
    if not isinstance(job, Job):
        # no queue or enqueue failed: the job already ran inline
        db.session.refresh(ev)
        return jsonify(ev.to_dict())
    return jsonify({"job_id": job.id, "evaluationId": ev.id}), 202


@bp.post("/<int:evaluation_id>/completar")
@admin_required
def complete(evaluation_id):
    form = CompleteEvaluationForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    ev = _workflow().complete(evaluation_id, decision=form.decision.data or None,
                              comment=form.comment.data or None)
    return jsonify(ev.to_dict())
