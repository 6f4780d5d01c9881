"""
Módulo de Cardápios
"""

from flask import Blueprint

cardapios_bp = Blueprint('cardapios', __name__, url_prefix='/cardapios')

from . import routes  # noqa: E402,F401
