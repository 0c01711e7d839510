from flask import Blueprint

bp = Blueprint("convocatorias", __name__)

from . import routes  # noqa: E402,F401
