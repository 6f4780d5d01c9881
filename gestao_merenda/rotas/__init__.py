"""
Módulo de Rotas
Rotas de entrega e a sequência de escolas atendidas
"""

from flask import Blueprint

rotas_bp = Blueprint('rotas', __name__, url_prefix='/rotas')

from . import routes  # noqa: E402,F401
