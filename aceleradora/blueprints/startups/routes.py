from flask import jsonify, abort
from flask_login import login_required, current_user
from sqlalchemy import or_
from . import bp
from .forms import StartupForm, MemberForm
from ...extensions import db
from ...models.startup import Startup, Member
from ...models.user import User
from ...utils.forms import form_error_response


def startup_for_current_user(startup_id):
    """Load a startup the current user may act for (founder, member or admin)."""
    s = db.get_or_404(Startup, startup_id)
    if not (current_user.is_admin or s.is_member(current_user)):
        abort(403)
    return s


@bp.get("")
@login_required
def list_startups():
    if current_user.is_admin:
        items = Startup.query.order_by(Startup.name).all()
    else:
        member_ids = db.session.query(Member.startup_id).filter(
            or_(Member.user_id == current_user.id, Member.email == current_user.email))
        items = (Startup.query
                 .filter(or_(Startup.founder_id == current_user.id, Startup.id.in_(member_ids)))
                 .order_by(Startup.name).all())
    return jsonify([s.to_dict() for s in items])


@bp.post("")
@login_required
def create_startup():
    form = StartupForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    s = Startup(founder_id=current_user.id)
    form.populate_obj(s)
    db.session.add(s)
    db.session.flush()
    # the founder is always part of the team
    db.session.add(Member(startup_id=s.id, user_id=current_user.id,
                          name=current_user.name or current_user.email,
                          email=current_user.email, role="Fundador"))
    db.session.commit()
    return jsonify(s.to_dict(with_members=True)), 201


@bp.get("/<int:startup_id>")
@login_required
def detail(startup_id):
    s = startup_for_current_user(startup_id)
    return jsonify(s.to_dict(with_members=True))


@bp.post("/<int:startup_id>")
@login_required
def update(startup_id):
    s = startup_for_current_user(startup_id)
    form = StartupForm(obj=s)
    if not form.validate_on_submit():
        return form_error_response(form)
    form.populate_obj(s)
    db.session.commit()
    return jsonify(s.to_dict(with_members=True))


@bp.post("/<int:startup_id>/members")
@login_required
def add_member(startup_id):
    s = startup_for_current_user(startup_id)
    form = MemberForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    email = (form.email.data or "").lower() or None
    if email and any(m.email == email for m in s.members):
        return jsonify({"error": "Ese miembro ya pertenece a la startup"}), 409
    linked = User.query.filter_by(email=email).first() if email else None
    m = Member(startup_id=s.id, name=form.name.data, email=email, role=form.role.data,
               user_id=linked.id if linked else None)
    db.session.add(m)
    db.session.commit()
    return jsonify(m.to_dict()), 201


@bp.delete("/<int:startup_id>/members/<int:member_id>")
@login_required
def remove_member(startup_id, member_id):
    s = startup_for_current_user(startup_id)
    m = Member.query.filter_by(id=member_id, startup_id=s.id).first_or_404()
    if m.user_id == s.founder_id:
        return jsonify({"error": "No se puede eliminar al fundador"}), 409
    db.session.delete(m)
    db.session.commit()
    return jsonify({"ok": True})
