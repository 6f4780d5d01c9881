import pytest
from config import TestingConfig
from gestao_merenda import create_app, db as _db
from gestao_merenda.models import Tenant, Usuario

SENHA_TESTE = 'senha-de-teste-123'


class PytestConfig(TestingConfig):
    """Configuração de teste compartilhada para fixtures pytest-flask."""
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False}}


@pytest.fixture
def app():
    """Instância da aplicação Flask com o banco em memória criado."""
    app = create_app(PytestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


def _criar_usuario(nome, perfil, tenants=()):
    usuario = Usuario(nome=nome, perfil=perfil)
    usuario.set_senha(SENHA_TESTE)
    usuario.tenants = list(tenants)
    _db.session.add(usuario)
    _db.session.commit()
    return usuario


@pytest.fixture
def tenants(app):
    sede = Tenant(nome='Secretaria Municipal', codigo='SEMED')
    anexo = Tenant(nome='Polo Rural', codigo='RURAL')
    _db.session.add_all([sede, anexo])
    _db.session.commit()
    return [sede, anexo]


@pytest.fixture
def gestor(app, tenants):
    return _criar_usuario('gestor', 'gestor', tenants)


@pytest.fixture
def operador(app):
    return _criar_usuario('operador', 'operador')


def _login(client, nome):
    return client.post('/login', data={'usuario': nome, 'senha': SENHA_TESTE})


@pytest.fixture
def cliente_gestor(client, gestor):
    """Cliente autenticado com perfil de escrita."""
    _login(client, gestor.nome)
    return client


@pytest.fixture
def cliente_operador(client, operador):
    """Cliente autenticado apenas com leitura."""
    _login(client, operador.nome)
    return client
