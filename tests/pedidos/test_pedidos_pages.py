import re
from datetime import date

import pytest

from gestao_merenda.models import Pedido, PedidoItem
from gestao_merenda.pedidos.services import PedidoService


def _pedido(db, numero, dia, status='rascunho'):
    pedido = Pedido(numero=numero, data_pedido=dia, status=status)
    db.session.add(pedido)
    db.session.commit()
    return pedido


@pytest.fixture
def pedidos(db):
    return [
        _pedido(db, 'PED-001', date(2026, 9, 1), 'pendente'),
        _pedido(db, 'PED-002', date(2026, 10, 1), 'pendente'),
        _pedido(db, 'PED-003', date(2026, 10, 15), 'em_separacao'),
    ]


@pytest.fixture
def pedido_com_itens(db, produtos_contratados):
    pedido = _pedido(db, 'PED-010', date(2026, 10, 1))
    servico = PedidoService()
    for chave, quantidade in (('arroz', '100'), ('feijao', '10'), ('leite', '50')):
        servico.adicionar_item(pedido.id, {
            'contrato_produto_id': produtos_contratados[chave].id,
            'quantidade': quantidade,
            'data_entrega_prevista': '2026-10-20',
        })
    return pedido


def test_listagem_mostra_contagem_por_status(cliente_gestor, pedidos):
    resposta = cliente_gestor.get('/pedidos/')
    html = resposta.get_data(as_text=True)

    assert resposta.status_code == 200
    assert 'Mostrando 1-3 de 3 pedidos' in html
    assert re.search(r'<td>Pendente</td>\s*<td>2</td>', html)
    assert re.search(r'<td>Em separação</td>\s*<td>1</td>', html)
    assert re.search(r'<td>Entregue</td>\s*<td>0</td>', html)


def test_listagem_ordena_mais_recentes_primeiro(cliente_gestor, pedidos):
    html = cliente_gestor.get('/pedidos/').get_data(as_text=True)

    assert html.index('PED-003') < html.index('PED-002') < html.index('PED-001')


def test_filtro_por_periodo(cliente_gestor, pedidos):
    resposta = cliente_gestor.get('/pedidos/?data_inicio=2026-10-01&data_fim=2026-10-10')
    html = resposta.get_data(as_text=True)

    assert 'Mostrando 1-1 de 1 pedidos' in html
    assert 'PED-002' in html
    assert 'PED-003' not in html
    assert 'value="2026-10-01"' in html


def test_filtro_por_status(cliente_gestor, pedidos):
    html = cliente_gestor.get('/pedidos/?status=em_separacao').get_data(as_text=True)

    assert 'Mostrando 1-1 de 1 pedidos' in html
    assert 'PED-003' in html


def test_detalhe_mostra_total_e_fornecedores(cliente_gestor, pedido_com_itens):
    resposta = cliente_gestor.get(f'/pedidos/{pedido_com_itens.id}')
    html = resposta.get_data(as_text=True)

    assert resposta.status_code == 200
    assert 'R$ 530,00' in html
    assert 'Itens por fornecedor' in html
    assert re.search(r'<td>Alfa Alimentos Ltda</td>\s*<td>2</td>\s*<td>R\$ 320,00</td>', html)
    assert re.search(r'<td>Beta Laticínios</td>\s*<td>1</td>\s*<td>R\$ 210,00</td>', html)


def test_adicionar_item_pelo_detalhe(cliente_gestor, db, produtos_contratados):
    pedido = _pedido(db, 'PED-020', date(2026, 10, 1))

    resposta = cliente_gestor.post(f'/pedidos/{pedido.id}/itens/salvar', data={
        'contrato_produto_id': str(produtos_contratados['leite'].id),
        'quantidade': '12',
        'data_entrega_prevista': '2026-10-25',
    })

    assert resposta.status_code == 302
    assert db.session.query(PedidoItem).filter_by(pedido_id=pedido.id).count() == 1


def test_adicionar_item_em_pedido_enviado(cliente_gestor, db, produtos_contratados):
    pedido = _pedido(db, 'PED-021', date(2026, 10, 1), 'enviado')

    resposta = cliente_gestor.post(f'/pedidos/{pedido.id}/itens/salvar', data={
        'contrato_produto_id': str(produtos_contratados['leite'].id),
        'quantidade': '12',
        'data_entrega_prevista': '2026-10-25',
    })

    assert resposta.status_code == 400
    assert 'Itens só podem ser alterados em pedidos em rascunho' in resposta.get_data(as_text=True)
    assert db.session.query(PedidoItem).count() == 0


def test_operador_nao_cria_pedido(cliente_operador, db):
    resposta = cliente_operador.post('/pedidos/salvar', data={'numero': 'PED-030', 'data_pedido': '2026-10-01'})

    assert resposta.status_code == 403
    assert db.session.query(Pedido).count() == 0
