"""
Gestão de Merenda Escolar
=========================

Fábrica da aplicação Flask: extensões, blueprints, filtros de template e
logging.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()


def _configurar_logging(app):
    """Arquivo rotativo em LOG_DIR; testes usam apenas o logger padrão."""
    nivel = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(nivel)

    if app.config.get('TESTING'):
        return

    log_dir = app.config.get('LOG_DIR') or os.path.join(app.root_path, '..', 'instance', 'logs')
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, 'gestao_merenda.log'),
        maxBytes=app.config.get('LOG_MAX_BYTES', 1024 * 1024),
        backupCount=app.config.get('LOG_BACKUP_COUNT', 5),
        encoding='utf-8',
    )
    handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s [%(name)s] %(message)s [em %(pathname)s:%(lineno)d]'
    ))
    handler.setLevel(nivel)
    # app.logger é o logger 'gestao_merenda'; os loggers dos módulos propagam para ele
    app.logger.addHandler(handler)


def _registrar_blueprints(app):
    from .routes import bp as main_bp
    from .escolas import escolas_bp
    from .modalidades import modalidades_bp
    from .fornecedores import fornecedores_bp
    from .produtos import produtos_bp
    from .contratos import contratos_bp
    from .pedidos import pedidos_bp
    from .cardapios import cardapios_bp
    from .refeicoes import refeicoes_bp
    from .rotas import rotas_bp
    from .estoque import estoque_bp
    from .api import api_bp

    for blueprint in (
        main_bp,
        escolas_bp,
        modalidades_bp,
        fornecedores_bp,
        produtos_bp,
        contratos_bp,
        pedidos_bp,
        cardapios_bp,
        refeicoes_bp,
        rotas_bp,
        estoque_bp,
        api_bp,
    ):
        app.register_blueprint(blueprint)

    # A API JSON é protegida pela sessão e consumida por XHR
    csrf.exempt(api_bp)


def _registrar_filtros(app):
    from .utils.formatacao import formatar_data, formatar_moeda, formatar_numero

    app.jinja_env.filters['moeda'] = formatar_moeda
    app.jinja_env.filters['data_br'] = formatar_data
    app.jinja_env.filters['numero'] = formatar_numero


def create_app(config_class=None):
    """Cria e configura a aplicação."""
    from config import get_config
    from .security import limiter

    app = Flask(__name__, instance_relative_config=True)
    if config_class is None:
        config_class = get_config(os.getenv('FLASK_ENV'))
    app.config.from_object(config_class)
    if hasattr(config_class, 'init_app'):
        config_class.init_app(app)

    _configurar_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    limiter.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'main.login'
    login_manager.login_message = 'Faça login para continuar.'

    from .models import Usuario

    @login_manager.user_loader
    def carregar_usuario(usuario_id):
        return db.session.get(Usuario, int(usuario_id))

    _registrar_blueprints(app)
    _registrar_filtros(app)

    from .sessao import obter_sessao

    @app.context_processor
    def injetar_sessao():
        return {'sessao_atual': obter_sessao()}

    app.logger.info("Aplicação Gestão de Merenda iniciada")
    return app
