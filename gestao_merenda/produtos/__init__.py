"""
Módulo de Produtos
Catálogo de gêneros alimentícios com importação e exportação por planilha
"""

from flask import Blueprint

produtos_bp = Blueprint('produtos', __name__, url_prefix='/produtos')

from . import routes  # noqa: E402,F401
