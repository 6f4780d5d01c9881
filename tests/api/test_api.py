import pytest

from gestao_merenda.models import Escola, Modalidade


def test_api_exige_login(client):
    resposta = client.get('/api/escolas')

    assert resposta.status_code == 401
    assert resposta.get_json()['success'] is False


def test_entidade_desconhecida(cliente_operador):
    resposta = cliente_operador.get('/api/alunos')

    assert resposta.status_code == 404
    assert resposta.get_json() == {'success': False, 'message': "Entidade 'alunos' não encontrada"}


def test_crud_de_fornecedor(cliente_gestor):
    resposta = cliente_gestor.post('/api/fornecedores', json={'nome': 'Alfa Ltda', 'cnpj': '12.345.678/0001-90'})
    assert resposta.status_code == 201
    fornecedor = resposta.get_json()
    assert fornecedor['cnpj_formatado'] == '12.345.678/0001-90'

    resposta = cliente_gestor.put(f"/api/fornecedores/{fornecedor['id']}", json={'email': 'compras@alfa.com.br'})
    assert resposta.status_code == 200
    assert resposta.get_json()['email'] == 'compras@alfa.com.br'

    assert [f['nome'] for f in cliente_gestor.get('/api/fornecedores').get_json()] == ['Alfa Ltda']

    resposta = cliente_gestor.delete(f"/api/fornecedores/{fornecedor['id']}")
    assert resposta.status_code == 200
    assert cliente_gestor.get(f"/api/fornecedores/{fornecedor['id']}").status_code == 404


def test_validacao_retorna_400(cliente_gestor):
    resposta = cliente_gestor.post('/api/fornecedores', json={'nome': 'Alfa', 'cnpj': '1'})

    assert resposta.status_code == 400
    assert 'CNPJ deve ter 14 dígitos' in resposta.get_json()['message']


def test_exclusao_com_vinculos_retorna_409(cliente_gestor, db):
    modalidade = Modalidade(nome='Creche')
    escola = Escola(nome='Creche Municipal')
    db.session.add_all([modalidade, escola])
    db.session.commit()
    resposta = cliente_gestor.post(
        f'/api/escolas/{escola.id}/modalidades',
        json={'modalidade_id': modalidade.id, 'quantidade_alunos': 40},
    )
    assert resposta.status_code == 201

    resposta = cliente_gestor.delete(f'/api/modalidades/{modalidade.id}')
    assert resposta.status_code == 409
    corpo = resposta.get_json()
    assert corpo['success'] is False
    assert corpo['dependencias']['escolas'] == 1

    resposta = cliente_gestor.delete(f'/api/modalidades/{modalidade.id}?forcar=1')
    assert resposta.status_code == 200
    assert resposta.get_json()['dependencias_removidas']['escolas'] == 1
    assert cliente_gestor.get(f'/api/escolas/{escola.id}').get_json()['total_alunos'] == 0


def test_operador_nao_escreve(cliente_operador):
    resposta = cliente_operador.post('/api/fornecedores', json={'nome': 'Alfa', 'cnpj': '12345678000190'})
    assert resposta.status_code == 403


@pytest.mark.parametrize('caminho', ['/api/contratos/1/escolas', '/api/rotas/1/produtos'])
def test_sub_recurso_desconhecido(cliente_operador, caminho):
    assert cliente_operador.get(caminho).status_code == 404


def test_sessao_e_troca_de_tenant(cliente_gestor, tenants):
    sessao = cliente_gestor.get('/api/sessao').get_json()
    assert sessao['perfil'] == 'gestor'
    assert {t['codigo'] for t in sessao['tenants_disponiveis']} == {'SEMED', 'RURAL'}
    assert sessao['tenant_atual']['codigo'] == 'RURAL'

    sede = next(t for t in tenants if t.codigo == 'SEMED')
    resposta = cliente_gestor.post('/api/sessao/tenant', json={'tenant_id': sede.id})
    assert resposta.status_code == 200
    assert resposta.get_json()['tenant_atual']['codigo'] == 'SEMED'
    assert cliente_gestor.get('/api/sessao').get_json()['tenant_atual']['codigo'] == 'SEMED'


def test_tenant_indisponivel(cliente_gestor):
    resposta = cliente_gestor.post('/api/sessao/tenant', json={'tenant_id': 999})

    assert resposta.status_code == 400
    assert resposta.get_json()['message'] == 'Tenant não disponível para este usuário'


@pytest.mark.parametrize('corpo', [[{'nome': 'Alfa Ltda'}], 'Alfa Ltda', 42])
def test_payload_que_nao_e_objeto_retorna_400(cliente_gestor, corpo):
    resposta = cliente_gestor.post('/api/fornecedores', json=corpo)

    assert resposta.status_code == 400
    assert resposta.get_json() == {'success': False, 'message': 'Payload inválido'}


def test_payload_invalido_em_sub_recurso(cliente_gestor, db):
    escola = Escola(nome='Creche Municipal')
    db.session.add(escola)
    db.session.commit()

    resposta = cliente_gestor.post(f'/api/escolas/{escola.id}/modalidades', json=[1, 2])

    assert resposta.status_code == 400
