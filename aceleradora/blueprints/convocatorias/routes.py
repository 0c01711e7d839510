from datetime import datetime
from flask import current_app, jsonify, abort
from flask_login import login_required, current_user
from . import bp
from .forms import ConvocatoriaForm
from ...extensions import db
from ...models.applicant import Applicant
from ...models.convocatoria import Convocatoria, Criterion
from ...services.rubric import default_criteria
from ...services.scoring import Category, ScoreValidationError
from ...utils.decorators import admin_required
from ...utils.forms import form_error_response, json_body


def _parse_criteria(items):
    """Validate a custom criteria list from the request body."""
    if not isinstance(items, list) or not items:
        raise ScoreValidationError("criterios must be a non-empty list")
    out = []
    for i, item in enumerate(items, start=1):
        if not isinstance(item, dict) or not (item.get("prompt") or "").strip():
            raise ScoreValidationError(f"criterio {i} requires a prompt")
        try:
            weight = float(item.get("weight", 1.0))
            order = int(item.get("order", i))
        except (TypeError, ValueError) as e:
            raise ScoreValidationError(f"criterio {i} has an invalid weight or order") from e
        if weight <= 0:
            raise ScoreValidationError(f"criterio {i} weight must be positive")
        out.append({
            "category": Category.parse(item.get("category")),
            "prompt": item["prompt"].strip(),
            "weight": weight,
            "required": bool(item.get("required", True)),
            "order": order,
        })
    return out


def _set_criteria(conv, definitions):
    conv.criteria = [
        Criterion(category=d["category"].value, prompt=d["prompt"], weight=d["weight"],
                  required=d["required"], order=d["order"])
        for d in definitions
    ]


@bp.get("")
@login_required
def list_convocatorias():
    query = Convocatoria.query
    if not current_user.is_admin:
        query = query.filter_by(estado="activa")
    items = query.order_by(Convocatoria.fecha_inicio.desc()).all()
    return jsonify([c.to_dict() for c in items])


@bp.post("")
@admin_required
def create_convocatoria():
    form = ConvocatoriaForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    body = json_body()
    definitions = _parse_criteria(body["criterios"]) if body.get("criterios") else default_criteria()
    conv = Convocatoria(created_by_id=current_user.id, estado="borrador")
    form.populate_obj(conv)
    _set_criteria(conv, definitions)
    db.session.add(conv)
    db.session.commit()
    current_app.logger.info("convocatoria %s created with %s criteria", conv.id, len(conv.criteria))
    return jsonify(conv.to_dict(with_criteria=True)), 201


@bp.get("/<int:conv_id>")
@login_required
def detail(conv_id):
    conv = db.get_or_404(Convocatoria, conv_id)
    if conv.estado != "activa" and not current_user.is_admin:
        abort(404)
    return jsonify(conv.to_dict(with_criteria=True))


@bp.post("/<int:conv_id>")
@admin_required
def update(conv_id):
    conv = db.get_or_404(Convocatoria, conv_id)
    form = ConvocatoriaForm(obj=conv)
    if not form.validate_on_submit():
        return form_error_response(form)
    form.populate_obj(conv)
    db.session.commit()
    return jsonify(conv.to_dict(with_criteria=True))


@bp.put("/<int:conv_id>/criterios")
@admin_required
def replace_criteria(conv_id):
    conv = db.get_or_404(Convocatoria, conv_id)
    if conv.is_published:
        return jsonify({"error": "Los criterios de una convocatoria publicada no se pueden modificar"}), 409
    _set_criteria(conv, _parse_criteria(json_body().get("criterios")))
    db.session.commit()
    return jsonify(conv.to_dict(with_criteria=True))


@bp.post("/<int:conv_id>/publicar")
@admin_required
def publish(conv_id):
    conv = db.get_or_404(Convocatoria, conv_id)
    if conv.estado != "borrador":
        return jsonify({"error": f"La convocatoria está {conv.estado}"}), 409
    if not conv.criteria:
        return jsonify({"error": "La convocatoria no tiene criterios"}), 409
    conv.estado = "activa"
    conv.published_at = datetime.utcnow()
    db.session.commit()
    current_app.logger.info("convocatoria %s published", conv.id)
    return jsonify(conv.to_dict())


@bp.post("/<int:conv_id>/cerrar")
@admin_required
def close(conv_id):
    conv = db.get_or_404(Convocatoria, conv_id)
    if conv.estado != "activa":
        return jsonify({"error": f"La convocatoria está {conv.estado}"}), 409
    conv.estado = "cerrada"
    db.session.commit()
    return jsonify(conv.to_dict())


@bp.delete("/<int:conv_id>")
@admin_required
def delete(conv_id):
    conv = db.get_or_404(Convocatoria, conv_id)
    if conv.is_published or Applicant.query.filter_by(convocatoria_id=conv.id).first():
        return jsonify({"error": "Solo se pueden eliminar convocatorias en borrador sin postulaciones"}), 409
    db.session.delete(conv)
    db.session.commit()
    return jsonify({"ok": True})
