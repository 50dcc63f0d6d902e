from flask import Blueprint

bp = Blueprint('lessons', __name__)

from qbank.lessons import routes  # noqa: E402,F401
