"""
Configurações da Aplicação por Ambiente
========================================

Configuração simples e objetiva para a Flask App Factory da Gestão de Merenda.
"""

import os
from datetime import timedelta


APP_ENV = os.getenv('FLASK_ENV', 'development').lower()


def _default_sqlite_uri(base_dir: str) -> str:
    return f"sqlite:///{os.path.abspath(os.path.join(base_dir, 'instance', 'merenda.db'))}"


def _resolve_secret_key(env: str) -> str:
    secret = os.getenv('SECRET_KEY')
    if secret:
        return secret
    if env in ('development', 'testing'):
        return 'dev-key-insecure-change-me'
    raise RuntimeError(
        'SECRET_KEY não configurada. Defina SECRET_KEY nas variáveis de ambiente para executar em produção.'
    )


def _sanitize_database_url(raw_url: str) -> str:
    url = raw_url.strip()
    if not url:
        return ''
    placeholders = ('usuario', 'senha', 'porta', 'host', 'example.com')
    if any(token in url for token in placeholders):
        return ''
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _resolve_database_uri(base_dir: str, env: str, require_ssl: bool) -> str:
    db_url = _sanitize_database_url(os.getenv('DATABASE_URL', ''))
    if db_url:
        if db_url.lower().startswith('postgresql://') and require_ssl and 'sslmode=' not in db_url.lower():
            separator = '&' if '?' in db_url else '?'
            db_url = f"{db_url}{separator}sslmode=require"
        return db_url
    if env == 'production':
        raise RuntimeError('DATABASE_URL não configurada. Defina um banco PostgreSQL antes do deploy.')
    return _default_sqlite_uri(base_dir)


def _int_env(nome: str, padrao: int) -> int:
    try:
        return int(os.getenv(nome, str(padrao)))
    except (TypeError, ValueError):
        return padrao


class BaseConfig:
    """Configuração base compartilhada entre todos os ambientes"""

    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    ENVIRONMENT = APP_ENV

    # Segurança - SECRET_KEY obrigatória
    SECRET_KEY = _resolve_secret_key(APP_ENV)

    # Banco de dados
    DATABASE_REQUIRE_SSL = os.getenv('DATABASE_REQUIRE_SSL', 'True').lower() == 'true'
    SQLALCHEMY_DATABASE_URI = _resolve_database_uri(BASE_DIR, APP_ENV, DATABASE_REQUIRE_SSL)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Sessão
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    PERMANENT_SESSION_LIFETIME = timedelta(hours=8)

    # Uploads de planilhas
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

    # Logging
    LOG_DIR = os.path.join(BASE_DIR, 'instance', 'logs')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # CSRF
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

    # Rate Limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL', 'memory://')
    RATELIMIT_DEFAULT = "200 per hour"
    LOGIN_RATE_LIMIT = os.getenv('LOGIN_RATE_LIMIT', '10 per minute')

    # Listagens
    LISTAGEM_LINHAS_POR_PAGINA = _int_env('LISTAGEM_LINHAS_POR_PAGINA', 10)
    LISTAGEM_OPCOES_LINHAS = [5, 10, 25, 50, 100]


class DevelopmentConfig(BaseConfig):
    """Configuração para desenvolvimento"""

    DEBUG = True
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = 'DEBUG'
    RATELIMIT_DEFAULT = "500 per hour"


class TestingConfig(BaseConfig):
    """Configuração para testes"""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    """Configuração para produção"""

    DEBUG = False
    SESSION_COOKIE_SAMESITE = "Strict"
    LOG_LEVEL = 'INFO'

    _force_https_env = os.getenv('FORCE_HTTPS')
    FORCE_HTTPS = True if _force_https_env is None else _force_https_env.lower() == 'true'
    PREFERRED_URL_SCHEME = 'https' if FORCE_HTTPS else 'http'

    @classmethod
    def init_app(cls, app):
        """Validações adicionais para produção"""
        if cls.SECRET_KEY == "dev-key-insecure-change-me":
            raise RuntimeError("SECRET_KEY padrão detectada em produção! Configure SECRET_KEY.")
        if 'sqlite' in cls.SQLALCHEMY_DATABASE_URI.lower():
            import warnings
            warnings.warn("SQLite em produção não é recomendado. Use PostgreSQL.")


# Mapeamento de ambientes
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """
    Retorna a configuração apropriada baseada no ambiente

    Args:
        env: Nome do ambiente ou None para auto-detectar via FLASK_ENV

    Returns:
        Classe de configuração apropriada
    """
    if env is None:
        env = os.getenv('FLASK_ENV', 'development')

    return config.get(env, config['default'])
