"""
Módulo de Refeições
"""

from flask import Blueprint

refeicoes_bp = Blueprint('refeicoes', __name__, url_prefix='/refeicoes')

from . import routes  # noqa: E402,F401
