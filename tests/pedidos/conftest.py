from datetime import date

import pytest

from gestao_merenda.models import Contrato, ContratoProduto, Fornecedor, Produto


def _contrato(db, fornecedor, numero, inicio=date(2020, 1, 1), fim=date(2099, 12, 31)):
    contrato = Contrato(fornecedor_id=fornecedor.id, numero=numero, data_inicio=inicio, data_fim=fim)
    db.session.add(contrato)
    db.session.flush()
    return contrato


@pytest.fixture
def produtos_contratados(db):
    """Arroz e feijão do fornecedor Alfa, leite do Beta, e um item de contrato já expirado."""
    alfa = Fornecedor(nome='Alfa Alimentos Ltda', cnpj='12345678000190')
    beta = Fornecedor(nome='Beta Laticínios', cnpj='98765432000110')
    arroz = Produto(nome='Arroz', unidade='kg')
    feijao = Produto(nome='Feijão', unidade='kg')
    leite = Produto(nome='Leite', unidade='l')
    db.session.add_all([alfa, beta, arroz, feijao, leite])
    db.session.flush()

    contrato_alfa = _contrato(db, alfa, '001/2026')
    contrato_beta = _contrato(db, beta, '002/2026')
    contrato_antigo = _contrato(db, alfa, '009/2020', fim=date(2020, 12, 31))

    itens = {
        'arroz': ContratoProduto(contrato_id=contrato_alfa.id, produto_id=arroz.id,
                                 quantidade_contratada=1000, preco_unitario=2.5),
        'feijao': ContratoProduto(contrato_id=contrato_alfa.id, produto_id=feijao.id,
                                  quantidade_contratada=500, preco_unitario=7),
        'leite': ContratoProduto(contrato_id=contrato_beta.id, produto_id=leite.id,
                                 quantidade_contratada=800, preco_unitario=4.2),
        'expirado': ContratoProduto(contrato_id=contrato_antigo.id, produto_id=arroz.id,
                                    quantidade_contratada=10, preco_unitario=1),
    }
    db.session.add_all(itens.values())
    db.session.commit()
    return itens
