"""
Módulo de Fornecedores
Cadastro de fornecedores com importação e exportação por planilha
"""

from flask import Blueprint

fornecedores_bp = Blueprint('fornecedores', __name__, url_prefix='/fornecedores')

from . import routes  # noqa: E402,F401
