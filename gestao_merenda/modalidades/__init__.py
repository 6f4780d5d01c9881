"""
Módulo de Modalidades de ensino
"""

from flask import Blueprint

modalidades_bp = Blueprint('modalidades', __name__, url_prefix='/modalidades')

from . import routes  # noqa: E402,F401
