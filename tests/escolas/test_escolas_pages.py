import pytest

from gestao_merenda.models import Escola, EscolaModalidade, Modalidade


@pytest.fixture
def escolas(db):
    fundamental = Modalidade(nome='Ensino Fundamental')
    creche = Modalidade(nome='Creche')
    nabuco = Escola(nome='EMEF Joaquim Nabuco', municipio='Belém')
    sao_jose = Escola(nome='Escola São José', municipio='Ananindeua', ativo=False)
    db.session.add_all([fundamental, creche, nabuco, sao_jose])
    db.session.flush()
    db.session.add_all([
        EscolaModalidade(escola_id=nabuco.id, modalidade_id=fundamental.id, quantidade_alunos=120),
        EscolaModalidade(escola_id=nabuco.id, modalidade_id=creche.id, quantidade_alunos=30),
    ])
    db.session.commit()
    return nabuco, sao_jose


def test_busca_sem_acento(cliente_operador, escolas):
    html = cliente_operador.get('/escolas/?busca=sao jose').get_data(as_text=True)

    assert 'Escola São José' in html
    assert 'EMEF Joaquim Nabuco' not in html
    assert 'Mostrando 1-1 de 1 escolas' in html


def test_filtro_de_status(cliente_operador, escolas):
    html = cliente_operador.get('/escolas/?status=ativo').get_data(as_text=True)
    assert 'EMEF Joaquim Nabuco' in html
    assert 'Escola São José' not in html


def test_detalhe_soma_alunos(cliente_operador, escolas):
    resposta = cliente_operador.get(f'/escolas/{escolas[0].id}')
    html = resposta.get_data(as_text=True)

    assert resposta.status_code == 200
    assert 'Ensino Fundamental' in html
    assert '150' in html


def test_operador_nao_cria_escola(cliente_operador, escolas, db):
    resposta = cliente_operador.post('/escolas/salvar', data={'nome': 'Nova Escola'})
    assert resposta.status_code == 403
    assert db.session.query(Escola).count() == 2


def test_gestor_adiciona_modalidade_pelo_detalhe(cliente_gestor, escolas, db):
    nabuco, sao_jose = escolas
    creche = db.session.query(Modalidade).filter_by(nome='Creche').one()

    resposta = cliente_gestor.post(
        f'/escolas/{sao_jose.id}/modalidades/salvar',
        data={'modalidade_id': str(creche.id), 'quantidade_alunos': '25'},
    )

    assert resposta.status_code == 302
    assert db.session.query(EscolaModalidade).filter_by(escola_id=sao_jose.id).count() == 1


def test_campos_obrigatorios_do_vinculo(cliente_gestor, escolas):
    resposta = cliente_gestor.post(f'/escolas/{escolas[1].id}/modalidades/salvar', data={'modalidade_id': ''})

    assert resposta.status_code == 400
    assert 'Preencha os campos obrigatórios' in resposta.get_data(as_text=True)
