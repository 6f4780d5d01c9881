import pytest


@pytest.mark.smoke
@pytest.mark.parametrize(
    ("path", "expected_status"),
    [
        ("/healthz", 200),
        ("/login", 200),
        ("/", 302),
        ("/escolas/", 302),
        ("/contratos/", 302),
        ("/api/escolas", 401),
    ],
)
def test_smoke_endpoints(client, path, expected_status):
    response = client.get(path)
    assert response.status_code == expected_status


@pytest.mark.smoke
@pytest.mark.parametrize(
    "path",
    [
        "/painel",
        "/escolas/",
        "/modalidades/",
        "/fornecedores/",
        "/produtos/",
        "/contratos/",
        "/pedidos/",
        "/cardapios/",
        "/refeicoes/",
        "/rotas/",
        "/estoque/",
    ],
)
def test_paginas_autenticadas(cliente_gestor, path):
    response = cliente_gestor.get(path)
    assert response.status_code == 200
