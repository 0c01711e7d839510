from flask import current_app, jsonify, abort
from flask_login import login_user, logout_user, login_required, current_user
from . import bp
from ...extensions import db
from .forms import LoginForm, SignupForm, RegisterForm, RoleForm
from ...models.user import User, ROLE_ADMIN, ROLE_USER
from ...utils.decorators import admin_required
from ...utils.forms import form_error_response


@bp.post("/login")
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    user = User.query.filter_by(email=form.email.data.lower()).first()
    if user and user.check_password(form.password.data):
        login_user(user)
        return jsonify({"user": user.to_dict()})
    current_app.logger.info("failed login for %s", form.email.data)
    return jsonify({"error": "Credenciales inválidas"}), 401


@bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@bp.get("/me")
@login_required
def me():
    return jsonify({"user": current_user.to_dict()})


@bp.post("/register")
def register():
    """Alta de usuarios fundadores (rol user)."""
    form = RegisterForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    email = form.email.data.lower()
    if User.query.filter_by(email=email).first():
        return jsonify({"error": "Ya existe un usuario con ese email"}), 409
    user = User(email=email, name=form.name.data, role=ROLE_USER)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    current_app.logger.info("user %s registered", user.id)
    return jsonify({"user": user.to_dict()}), 201


@bp.post("/signup")
def signup():
    """El primer administrador se crea libremente; los siguientes solo por un admin."""
    admin_exists = User.query.filter_by(role=ROLE_ADMIN).first() is not None
    if admin_exists and (not current_user.is_authenticated or not current_user.is_admin):
        abort(403)

    form = SignupForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    email = form.email.data.lower()
    if User.query.filter_by(email=email).first():
        return jsonify({"error": "Ya existe un usuario con ese email"}), 409
    user = User(email=email, name=form.name.data or None, role=ROLE_ADMIN)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("admin %s created", user.id)
    return jsonify({"user": user.to_dict()}), 201


@bp.get("/users")
@admin_required
def users_index():
    users = User.query.order_by(User.id).all()
    return jsonify([u.to_dict() for u in users])


@bp.post("/users/<int:user_id>/role")
@admin_required
def update_role(user_id):
    user = db.get_or_404(User, user_id)
    form = RoleForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    user.role = form.role.data
    db.session.commit()
    return jsonify({"user": user.to_dict()})
