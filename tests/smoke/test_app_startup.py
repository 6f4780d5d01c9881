import pytest

from config import DevelopmentConfig
from gestao_merenda import create_app


@pytest.mark.smoke
def test_app_startup(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    app = create_app(DevelopmentConfig)

    assert app is not None
    assert app.config.get("SQLALCHEMY_DATABASE_URI")
    assert "main" in app.blueprints
    for nome in ("escolas", "modalidades", "fornecedores", "produtos", "contratos", "pedidos",
                 "cardapios", "refeicoes", "rotas", "estoque", "api"):
        assert nome in app.blueprints
