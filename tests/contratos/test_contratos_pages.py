import re
from datetime import date

import pytest

from gestao_merenda.models import Contrato, ContratoProduto, Fornecedor, Produto


@pytest.fixture
def contrato(db):
    fornecedor = Fornecedor(nome='Alfa Alimentos Ltda', cnpj='12345678000190')
    arroz = Produto(nome='Arroz Tipo 1', unidade='kg')
    db.session.add_all([fornecedor, arroz])
    db.session.flush()
    contrato = Contrato(
        fornecedor_id=fornecedor.id,
        numero='001/2026',
        data_inicio=date(2026, 1, 1),
        data_fim=date(2026, 12, 31),
    )
    db.session.add(contrato)
    db.session.flush()
    db.session.add(ContratoProduto(
        contrato_id=contrato.id, produto_id=arroz.id, quantidade_contratada=100, preco_unitario=2.5,
    ))
    db.session.commit()
    return contrato


def test_listagem_mostra_fornecedor_e_total(cliente_gestor, contrato):
    resposta = cliente_gestor.get('/contratos/')
    html = resposta.get_data(as_text=True)

    assert resposta.status_code == 200
    assert '001/2026' in html
    assert 'Alfa Alimentos Ltda' in html
    assert 'R$ 250,00' in html
    assert 'Mostrando 1-1 de 1 contratos' in html


def test_detalhe_mostra_valor_total(cliente_gestor, contrato):
    resposta = cliente_gestor.get(f'/contratos/{contrato.id}')
    html = resposta.get_data(as_text=True)

    assert resposta.status_code == 200
    assert 'Arroz Tipo 1' in html
    assert 'R$ 250,00' in html


def test_detalhe_inexistente(cliente_gestor, contrato):
    assert cliente_gestor.get('/contratos/9999').status_code == 404


def test_criar_periodo_invertido_reexibe_dialogo(cliente_gestor, contrato, db):
    resposta = cliente_gestor.post('/contratos/salvar', data={
        'fornecedor_id': str(contrato.fornecedor_id),
        'numero': '002/2026',
        'data_inicio': '2026-12-31',
        'data_fim': '2026-01-01',
        'ativo': 'on',
    })

    assert resposta.status_code == 400
    assert 'Data de fim deve ser posterior à data de início' in resposta.get_data(as_text=True)
    assert db.session.query(Contrato).count() == 1


def test_criar_redireciona_para_listagem(cliente_gestor, contrato, db):
    resposta = cliente_gestor.post('/contratos/salvar', data={
        'fornecedor_id': str(contrato.fornecedor_id),
        'numero': '002/2026',
        'data_inicio': '2026-01-01',
        'data_fim': '2026-06-30',
        'ativo': 'on',
    })

    assert resposta.status_code == 302
    assert db.session.query(Contrato).filter_by(numero='002/2026').count() == 1


def test_excluir_com_produtos_pede_exclusao_forcada(cliente_gestor, contrato, db):
    resposta = cliente_gestor.post(f'/contratos/{contrato.id}/excluir')

    assert resposta.status_code == 409
    assert 'Forçar Remoção' in resposta.get_data(as_text=True)
    assert db.session.query(Contrato).count() == 1

    resposta = cliente_gestor.post(f'/contratos/{contrato.id}/excluir', data={'forcar': '1'})

    assert resposta.status_code == 302
    assert db.session.query(Contrato).count() == 0
    assert db.session.query(ContratoProduto).count() == 0


def test_operador_nao_pode_excluir(cliente_operador, contrato, db):
    resposta = cliente_operador.post(f'/contratos/{contrato.id}/excluir', data={'forcar': '1'})

    assert resposta.status_code == 403
    assert db.session.query(Contrato).count() == 1


def test_filtro_por_fornecedor_pela_url(cliente_gestor, contrato):
    resposta = cliente_gestor.get(f'/contratos/?fornecedor_id={contrato.fornecedor_id + 1}')
    assert 'Mostrando 0-0 de 0 contratos' in resposta.get_data(as_text=True)


def test_alerta_de_exclusao_mostra_quantidade_e_bloqueia_confirmacao(cliente_gestor, contrato, db):
    for nome in ('Feijão Carioca', 'Óleo de Soja'):
        produto = Produto(nome=nome, unidade='kg')
        db.session.add(produto)
        db.session.flush()
        db.session.add(ContratoProduto(
            contrato_id=contrato.id, produto_id=produto.id, quantidade_contratada=10, preco_unitario=5,
        ))
    db.session.commit()

    resposta = cliente_gestor.post(f'/contratos/{contrato.id}/excluir')
    html = resposta.get_data(as_text=True)

    assert resposta.status_code == 409
    assert '3 produtos vinculados' in html
    assert 'name="forcar"' in html
    assert re.search(r'<button type="submit" class="botao perigo"\s+disabled>', html)
