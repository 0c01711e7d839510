from flask import Blueprint

bp = Blueprint("evaluaciones", __name__)

from . import routes  # noqa: E402,F401
