from flask import Blueprint, current_app, flash, jsonify, redirect, render_template, request, session, url_for
from flask_login import login_user, logout_user

from .dashboard_service import DashboardService
from .decorators import login_obrigatorio
from .erros import ErroValidacao
from .models import Usuario
from .security import limiter
from .sessao import encerrar_sessao, iniciar_sessao, obter_sessao, trocar_tenant
from .time_utils import now_utc

# Criar blueprint
bp = Blueprint('main', __name__)


def _destino_seguro(destino):
    # Apenas caminhos internos
    if destino and destino.startswith('/') and not destino.startswith('//'):
        return destino
    return url_for('main.painel')


@bp.route('/')
def index():
    if obter_sessao().autenticado:
        return redirect(url_for('main.painel'))
    return redirect(url_for('main.login'))


@bp.route('/login', methods=['GET', 'POST'])
@limiter.limit(
    lambda: current_app.config.get('LOGIN_RATE_LIMIT', '10 per minute'),
    methods=['POST']
)
def login():
    if request.method == 'POST':
        nome = request.form.get('usuario', '').strip()
        senha = request.form.get('senha', '')
        usuario = Usuario.query.filter_by(nome=nome).first()
        if usuario and usuario.ativo and usuario.check_senha(senha):
            login_user(usuario)
            iniciar_sessao(usuario)
            current_app.logger.info(f"Login bem-sucedido: {nome} (IP: {request.remote_addr})")
            return redirect(_destino_seguro(request.args.get('next')))

        current_app.logger.warning(f"Tentativa de login falhou: {nome} (IP: {request.remote_addr})")
        return render_template('login.html', erro="Usuário ou senha inválidos."), 401
    return render_template('login.html', erro=None)


@bp.route('/logout')
def logout():
    usuario = session.get('usuario_nome', 'N/A')
    logout_user()
    encerrar_sessao()
    session.clear()
    current_app.logger.info(f"Logout: {usuario} (IP: {request.remote_addr})")
    return redirect(url_for('main.login'))


@bp.route('/painel')
@login_obrigatorio
def painel():
    service = DashboardService()
    try:
        contexto = service.gerar_contexto()
    except Exception as e:
        current_app.logger.error(f'Erro no painel: {str(e)}')
        contexto = DashboardService.contexto_vazio()
        flash('Erro ao carregar os indicadores. Tente novamente.', 'error')
    return render_template('painel.html', **contexto)


@bp.route('/tenant', methods=['POST'])
@login_obrigatorio
def alterar_tenant():
    try:
        contexto = trocar_tenant(request.form.get('tenant_id'))
    except ErroValidacao as e:
        flash(e.mensagem, 'error')
    else:
        current_app.logger.info(
            f"Tenant alterado para {contexto.tenant_atual['codigo']} por {session.get('usuario_nome', 'N/A')}"
        )
        flash(f"Tenant alterado para {contexto.tenant_atual['nome']}", 'success')
    return redirect(_destino_seguro(request.form.get('retorno')))


@bp.route('/healthz')
def healthz():
    """Verificação de disponibilidade"""
    return jsonify({
        'status': 'healthy',
        'service': 'gestao-merenda',
        'timestamp': now_utc().isoformat(),
    }), 200
