def test_itens_do_pedido_pela_api(cliente_gestor, produtos_contratados):
    resposta = cliente_gestor.post('/api/pedidos', json={'numero': 'PED-100', 'data_pedido': '2026-10-01'})
    assert resposta.status_code == 201
    pedido = resposta.get_json()

    resposta = cliente_gestor.post(f"/api/pedidos/{pedido['id']}/itens", json={
        'contrato_produto_id': produtos_contratados['arroz'].id,
        'quantidade': 40,
        'data_entrega_prevista': '2026-10-20',
    })
    assert resposta.status_code == 201
    item = resposta.get_json()
    assert item['valor_total'] == 100.0

    resposta = cliente_gestor.put(f"/api/pedidos/{pedido['id']}/itens/{item['id']}", json={'quantidade': 20})
    assert resposta.get_json()['valor_total'] == 50.0

    itens = cliente_gestor.get(f"/api/pedidos/{pedido['id']}/itens").get_json()
    assert [i['produto_nome'] for i in itens] == ['Arroz']

    resposta = cliente_gestor.put(f"/api/pedidos/{pedido['id']}", json={'status': 'pendente'})
    assert resposta.get_json()['status'] == 'pendente'

    resposta = cliente_gestor.delete(f"/api/pedidos/{pedido['id']}/itens/{item['id']}")
    assert resposta.status_code == 400
    assert resposta.get_json()['message'] == 'Itens só podem ser alterados em pedidos em rascunho'


def test_produtos_disponiveis_pela_api(cliente_operador, produtos_contratados):
    resposta = cliente_operador.get('/api/pedidos/produtos-disponiveis')

    assert resposta.status_code == 200
    descricoes = {p['descricao']: p['ativo'] for p in resposta.get_json()}
    assert descricoes['Leite - Beta Laticínios (Contrato 002/2026)'] is True
    assert descricoes['Arroz - Alfa Alimentos Ltda (Contrato 009/2020)'] is False


def test_exclusao_de_pedido_com_itens_retorna_409(cliente_gestor, produtos_contratados):
    pedido = cliente_gestor.post('/api/pedidos', json={'numero': 'PED-101', 'data_pedido': '2026-10-01'}).get_json()
    cliente_gestor.post(f"/api/pedidos/{pedido['id']}/itens", json={
        'contrato_produto_id': produtos_contratados['leite'].id,
        'quantidade': 1,
        'data_entrega_prevista': '2026-10-20',
    })

    resposta = cliente_gestor.delete(f"/api/pedidos/{pedido['id']}")

    assert resposta.status_code == 409
    assert resposta.get_json()['dependencias'] == {'itens': 1}
