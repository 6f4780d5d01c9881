from datetime import date

import pytest

from gestao_merenda.erros import ErroValidacao
from gestao_merenda.estoque.services import (
    SITUACAO_VALIDO,
    SITUACAO_VENCIDO,
    EstoqueService,
    resumo_por_produto,
    situacao_lote,
)
from gestao_merenda.models import Produto

HOJE = date(2026, 10, 17)


def test_resumo_por_produto_separa_vencidos():
    lotes = [
        {'produto_id': 2, 'produto_nome': 'Feijão', 'unidade': 'kg', 'quantidade': 50, 'vencido': False},
        {'produto_id': 1, 'produto_nome': 'arroz', 'unidade': 'kg', 'quantidade': 100, 'vencido': False},
        {'produto_id': 1, 'produto_nome': 'arroz', 'unidade': 'kg', 'quantidade': '20.5', 'vencido': True},
        {'produto_id': 1, 'produto_nome': 'arroz', 'unidade': 'kg', 'quantidade': 999, 'vencido': False, 'ativo': False},
    ]

    resumo = resumo_por_produto(lotes)

    assert [p['produto_nome'] for p in resumo] == ['arroz', 'Feijão']
    assert resumo[0]['lotes'] == 2
    assert resumo[0]['quantidade_disponivel'] == 100.0
    assert resumo[0]['quantidade_vencida'] == 20.5
    assert resumo[1]['quantidade_vencida'] == 0.0


def test_situacao_lote():
    assert situacao_lote({'vencido': True}) == SITUACAO_VENCIDO
    assert situacao_lote({'vencido': False}) == SITUACAO_VALIDO
    assert situacao_lote({}) == SITUACAO_VALIDO


@pytest.fixture
def arroz(db):
    produto = Produto(nome='Arroz', unidade='kg')
    db.session.add(produto)
    db.session.commit()
    return produto


@pytest.fixture
def servico(app):
    return EstoqueService(hoje=HOJE)


def test_lote_vencido_e_dias_para_vencer(servico, arroz):
    vencido = servico.criar({'produto_id': arroz.id, 'lote': 'L-01', 'quantidade': '10', 'data_validade': '2026-10-16'})
    hoje = servico.criar({'produto_id': arroz.id, 'lote': 'L-02', 'quantidade': '10', 'data_validade': '2026-10-17'})
    sem_validade = servico.criar({'produto_id': arroz.id, 'lote': 'L-03', 'quantidade': '1,5'})

    assert vencido['vencido'] is True
    assert vencido['dias_para_vencer'] == -1
    assert hoje['vencido'] is False
    assert hoje['dias_para_vencer'] == 0
    assert sem_validade['dias_para_vencer'] is None
    assert sem_validade['quantidade'] == 1.5
    assert sem_validade['unidade'] == 'kg'


def test_quantidade_deve_ser_positiva(servico, arroz):
    with pytest.raises(ErroValidacao, match='Quantidade deve ser maior que zero'):
        servico.criar({'produto_id': arroz.id, 'lote': 'L-01', 'quantidade': 0})


def test_lote_repetido_para_o_mesmo_produto(servico, arroz):
    servico.criar({'produto_id': arroz.id, 'lote': 'L-01', 'quantidade': 1})
    with pytest.raises(ErroValidacao, match='Lote L-01 já cadastrado para este produto'):
        servico.criar({'produto_id': arroz.id, 'lote': 'L-01', 'quantidade': 2})


def test_resumo_do_servico(servico, arroz):
    servico.criar({'produto_id': arroz.id, 'lote': 'L-01', 'quantidade': 10, 'data_validade': '2026-01-01'})
    servico.criar({'produto_id': arroz.id, 'lote': 'L-02', 'quantidade': 30, 'data_validade': '2027-01-01'})

    assert servico.resumo() == [{
        'produto_id': arroz.id,
        'produto_nome': 'Arroz',
        'unidade': 'kg',
        'lotes': 2,
        'quantidade_disponivel': 30.0,
        'quantidade_vencida': 10.0,
    }]


def test_pagina_de_estoque_mostra_resumo(cliente_operador, arroz):
    EstoqueService().criar({'produto_id': arroz.id, 'lote': 'L-77', 'quantidade': 12})

    resposta = cliente_operador.get('/estoque/')

    assert resposta.status_code == 200
    html = resposta.get_data(as_text=True)
    assert 'L-77' in html
    assert 'Arroz' in html
