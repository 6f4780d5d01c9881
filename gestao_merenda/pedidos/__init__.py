"""
Módulo de Pedidos
Pedidos de compra com itens dos contratos vigentes
"""

from flask import Blueprint

pedidos_bp = Blueprint('pedidos', __name__, url_prefix='/pedidos')

from . import routes  # noqa: E402,F401
