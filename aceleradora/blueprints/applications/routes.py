from datetime import date, datetime
from flask import current_app, jsonify, abort, request
from flask_login import login_required, current_user
from . import bp
from .forms import ApplyForm
from ...extensions import db
from ...models.answer import Answer
from ...models.applicant import Applicant
from ...models.convocatoria import Convocatoria
from ...models.startup import Startup
from ..startups.routes import startup_for_current_user
from ...utils.forms import form_error_response, json_body


def _applicant_for_current_user(applicant_id):
    a = db.get_or_404(Applicant, applicant_id)
    if not (current_user.is_admin or a.startup.is_member(current_user)):
        abort(403)
    return a


def _detail(a):
    d = a.to_dict(with_answers=True)
    d["criterios"] = [c.to_dict() for c in a.convocatoria.criteria]
    return d


@bp.get("")
@login_required
def list_applications():
    query = Applicant.query
    if not current_user.is_admin:
        startup_ids = [s.id for s in Startup.query.all() if s.is_member(current_user)]
        if not startup_ids:
            return jsonify([])
        query = query.filter(Applicant.startup_id.in_(startup_ids))
    status = request.args.get("status")
    if status:
        query = query.filter(Applicant.status == status)
    conv_id = request.args.get("convocatoria_id", type=int)
    if conv_id:
        query = query.filter(Applicant.convocatoria_id == conv_id)
    items = query.order_by(Applicant.id.desc()).all()
    return jsonify([a.to_dict() for a in items])


@bp.post("")
@login_required
def apply():
    form = ApplyForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    startup = startup_for_current_user(form.startup_id.data)
    conv = db.get_or_404(Convocatoria, form.convocatoria_id.data)
    if not conv.is_open_on(date.today()):
        return jsonify({"error": "La convocatoria no está activa"}), 400
    existing = Applicant.query.filter_by(startup_id=startup.id, convocatoria_id=conv.id).first()
    if existing:
        return jsonify({"error": "Esta startup ya ha postulado a esta convocatoria",
                        "applicantId": existing.id}), 409
    a = Applicant(startup_id=startup.id, convocatoria_id=conv.id, status="borrador")
    db.session.add(a)
    db.session.commit()
    current_app.logger.info("startup %s applied to convocatoria %s (applicant %s)", startup.id, conv.id, a.id)
    return jsonify(_detail(a)), 201


@bp.get("/<int:applicant_id>")
@login_required
def detail(applicant_id):
    return jsonify(_detail(_applicant_for_current_user(applicant_id)))


@bp.put("/<int:applicant_id>/answers")
@login_required
def save_answers(applicant_id):
    a = _applicant_for_current_user(applicant_id)
    if a.status != "borrador":
        return jsonify({"error": "La postulación ya fue enviada"}), 409
    entries = json_body().get("answers")
    if not isinstance(entries, list):
        return jsonify({"error": "answers debe ser una lista"}), 400

    criteria = {c.id: c for c in a.convocatoria.criteria}
    current = {ans.criterion_id: ans for ans in a.answers}
    for entry in entries:
        try:
            criterion_id = int(entry["criterionId"])
        except (KeyError, TypeError, ValueError):
            return jsonify({"error": f"Respuesta inválida: {entry!r}"}), 400
        criterion = criteria.get(criterion_id)
        if criterion is None:
            return jsonify({"error": f"El criterio {criterion_id} no pertenece a la convocatoria"}), 400
        ans = current.get(criterion_id)
        if ans is None:
            ans = Answer(applicant_id=a.id, criterion_id=criterion_id, order=criterion.order)
            db.session.add(ans)
            current[criterion_id] = ans
        ans.text = str(entry.get("text") or "")
    db.session.commit()
    db.session.refresh(a)
    return jsonify(_detail(a))


@bp.post("/<int:applicant_id>/submit")
@login_required
def submit(applicant_id):
    a = _applicant_for_current_user(applicant_id)
    if a.status != "borrador":
        return jsonify({"error": "La postulación ya fue enviada"}), 409
    if not a.convocatoria.is_open_on(date.today()):
        return jsonify({"error": "La convocatoria no está activa"}), 400
    answered = {ans.criterion_id for ans in a.answers if (ans.text or "").strip()}
    missing = [c.id for c in a.convocatoria.criteria if c.required and c.id not in answered]
    if missing:
        return jsonify({"error": "Faltan respuestas obligatorias", "missing": missing}), 400
    a.status = "enviada"
    a.submitted_at = datetime.utcnow()
    db.session.commit()
    current_app.logger.info("applicant %s submitted", a.id)
    return jsonify(_detail(a))
