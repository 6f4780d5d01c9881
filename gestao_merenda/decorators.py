"""
Decoradores de Acesso
=====================

Controle de autenticação e de perfil das rotas. Requisições de API ou AJAX
recebem JSON (401/403); as demais são redirecionadas para o login.
"""

from functools import wraps

from flask import current_app, jsonify, redirect, request, session, url_for
from flask_login import current_user

from .sessao import obter_sessao
from .time_utils import now_utc


def _requisicao_json() -> bool:
    return (
        request.headers.get('X-Requested-With') == 'XMLHttpRequest'
        or request.path.startswith('/api/')
        or request.headers.get('Accept') == 'application/json'
    )


def _autenticado() -> bool:
    is_authenticated = getattr(current_user, 'is_authenticated', False)
    return bool(is_authenticated and 'usuario_id' in session and obter_sessao().autenticado)


def _negar_autenticacao():
    if _requisicao_json():
        return jsonify({
            'success': False,
            'message': 'Acesso negado. Faça login para continuar.',
            'type': 'AuthenticationRequired',
            'timestamp': now_utc().isoformat()
        }), 401
    return redirect(url_for('main.login', next=request.full_path))


def login_obrigatorio(f):
    """
    Decorador que verifica se o usuário está logado

    Args:
        f: Função a ser decorada

    Returns:
        Função decorada que verifica autenticação
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _autenticado():
            return _negar_autenticacao()
        return f(*args, **kwargs)
    return decorated_function


def perfil_necessario(*perfis):
    """
    Decorador que restringe a rota aos perfis informados.
    Administradores têm acesso a todas as rotas.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _autenticado():
                return _negar_autenticacao()

            perfil = obter_sessao().perfil
            if perfil == 'admin' or perfil in perfis:
                return f(*args, **kwargs)

            current_app.logger.warning(
                f"Tentativa de acesso negada: usuário {session.get('usuario_nome', 'desconhecido')} "
                f"tentou acessar {request.endpoint} sem perfil {', '.join(perfis)} "
                f"(IP: {request.remote_addr})"
            )
            return jsonify({
                'success': False,
                'message': 'Acesso negado. Você não tem permissão para acessar esta funcionalidade.',
                'type': 'InsufficientPermissions',
                'timestamp': now_utc().isoformat()
            }), 403
        return decorated_function
    return decorator
