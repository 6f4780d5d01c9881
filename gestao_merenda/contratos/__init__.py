"""
Módulo de Contratos
Contratos com fornecedores e os produtos contratados
"""

from flask import Blueprint

contratos_bp = Blueprint('contratos', __name__, url_prefix='/contratos')

from . import routes  # noqa: E402,F401
