from flask import current_app, has_app_context

from ..services.evaluations import EvaluationWorkflow


def _run_ai_evaluation(evaluation_id: int):
    workflow = EvaluationWorkflow.from_config(current_app.config)
    ev = workflow.run_ai(evaluation_id)
    return ev.id


def run_ai_evaluation(evaluation_id: int):
    """Entrypoint that ensures execution inside a Flask app context for workers."""
    if has_app_context():
        return _run_ai_evaluation(evaluation_id)
    from aceleradora import create_app
    app = create_app()
    with app.app_context():
        return _run_ai_evaluation(evaluation_id)
