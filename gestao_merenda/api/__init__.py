"""
API JSON
========

As mesmas operações das telas de cadastro expostas em ``/api/<entidade>``.
Rejeições de serviço respondem ``{success: false, message, dependencias?}``
com status 400, 404 ou 409.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

from . import routes  # noqa: E402,F401
