from flask import jsonify, request


def form_error_response(form, status=400):
    """JSON body for a FlaskForm that failed validation."""
    fields = {name: errs for name, errs in form.errors.items()}
    return jsonify({"error": "Datos inválidos", "fields": fields}), status


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
