"""
Módulo de Escolas
Cadastro de escolas, alunos por modalidade e importação por planilha
"""

from flask import Blueprint

escolas_bp = Blueprint('escolas', __name__, url_prefix='/escolas')

from . import routes  # noqa: E402,F401
