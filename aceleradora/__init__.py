import logging

from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from .extensions import db, login_manager, rq

migrate = Migrate()


def _register_error_handlers(app):
    from .services.evaluations import WorkflowError
    from .services.scoring import ScoreValidationError

    @app.errorhandler(ScoreValidationError)
    def handle_score_validation(e):
        db.session.rollback()
        app.logger.warning('score validation failed: %s', e)
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(WorkflowError)
    def handle_workflow_error(e):
        db.session.rollback()
        body = {'error': str(e)}
        if getattr(e, 'evaluation_id', None):
            body['evaluationId'] = e.evaluation_id
        return jsonify(body), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code


def create_app(config_object='config.Config'):
    """App factory. `config_object` is an import path or a config class."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    rq.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'No autorizado'}), 401

    from .blueprints.auth import bp as auth_bp
    from .blueprints.startups import bp as startups_bp
    from .blueprints.convocatorias import bp as convocatorias_bp
    from .blueprints.applications import bp as applications_bp
    from .blueprints.evaluaciones import bp as evaluaciones_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(startups_bp, url_prefix='/startups')
    app.register_blueprint(convocatorias_bp, url_prefix='/convocatorias')
    app.register_blueprint(applications_bp, url_prefix='/applications')
    app.register_blueprint(evaluaciones_bp, url_prefix='/evaluaciones')

    _register_error_handlers(app)

    @app.get('/')
    def index():
        from flask_login import current_user
        from sqlalchemy import func
        from .models import Applicant, Convocatoria, Evaluation, Startup

        if not current_user.is_authenticated:
            return jsonify({'error': 'No autorizado'}), 401

        if not current_user.is_admin:
            startups = Startup.query.filter_by(founder_id=current_user.id).all()
            startup_ids = [s.id for s in startups]
            apps = Applicant.query.filter(Applicant.startup_id.in_(startup_ids)).all() if startup_ids else []
            return jsonify({
                'user': current_user.to_dict(),
                'startups': len(startups),
                'applications': [a.to_dict() for a in apps],
                'openConvocatorias': Convocatoria.query.filter_by(estado='activa').count(),
            })

        applicants_by_status = dict(
            db.session.query(Applicant.status, func.count(Applicant.id)).group_by(Applicant.status).all())
        evaluations_by_status = dict(
            db.session.query(Evaluation.status, func.count(Evaluation.id)).group_by(Evaluation.status).all())
        avg_score = db.session.query(func.avg(Evaluation.total_score)).filter(
            Evaluation.status == 'completed').scalar()
        return jsonify({
            'user': current_user.to_dict(),
            'stats': {
                'startups': Startup.query.count(),
                'convocatorias': Convocatoria.query.count(),
                'applicants': applicants_by_status,
                'evaluations': evaluations_by_status,
                'avgCompletedScore': round(float(avg_score), 2) if avg_score is not None else None,
            },
        })

    return app
