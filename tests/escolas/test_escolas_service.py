import pytest

from gestao_merenda.erros import DependenciasEncontradas, ErroValidacao, NaoEncontrado
from gestao_merenda.escolas.services import EscolaService
from gestao_merenda.models import Escola, EscolaModalidade, Modalidade, Rota, RotaEscola


@pytest.fixture
def servico(app):
    return EscolaService()


@pytest.fixture
def modalidades(db):
    creche = Modalidade(nome='Creche')
    fundamental = Modalidade(nome='Ensino Fundamental')
    db.session.add_all([creche, fundamental])
    db.session.commit()
    return creche, fundamental


def test_criar_escola_normaliza_campos(servico):
    escola = servico.criar({'nome': 'EMEF Joaquim Nabuco', 'administracao': 'Municipal', 'codigo_acesso': '', 'ativo': 'on'})

    assert escola['administracao'] == 'municipal'
    assert escola['codigo_acesso'] is None
    assert escola['total_alunos'] == 0
    assert escola['modalidades'] == ''


@pytest.mark.parametrize('payload, mensagem', [
    ({'nome': 'Escola', 'administracao': 'privada'}, 'Administração deve ser uma de'),
    ({'nome': 'Escola', 'codigo_acesso': '12ab'}, 'Código de acesso deve ter 6 dígitos'),
])
def test_validacoes(servico, payload, mensagem):
    with pytest.raises(ErroValidacao, match=mensagem):
        servico.criar(payload)


def test_codigo_de_acesso_unico(servico):
    servico.criar({'nome': 'Escola A', 'codigo_acesso': '123456'})
    with pytest.raises(ErroValidacao, match='Código de acesso já utilizado'):
        servico.criar({'nome': 'Escola B', 'codigo_acesso': '123456'})


def test_modalidades_e_total_de_alunos(servico, modalidades):
    creche, fundamental = modalidades
    escola = servico.criar({'nome': 'EMEF Joaquim Nabuco'})

    servico.adicionar_modalidade(escola['id'], {'modalidade_id': fundamental.id, 'quantidade_alunos': '120'})
    vinculo = servico.adicionar_modalidade(escola['id'], {'modalidade_id': creche.id, 'quantidade_alunos': 30})

    atualizada = servico.buscar(escola['id'])
    assert atualizada['total_alunos'] == 150
    assert atualizada['modalidades_lista'] == ['Creche', 'Ensino Fundamental']
    assert vinculo['modalidade_nome'] == 'Creche'

    servico.editar_modalidade(escola['id'], vinculo['id'], {'quantidade_alunos': 45})
    assert servico.buscar(escola['id'])['total_alunos'] == 165

    servico.remover_modalidade(escola['id'], vinculo['id'])
    assert [v['modalidade_id'] for v in servico.listar_modalidades(escola['id'])] == [fundamental.id]


def test_modalidade_repetida(servico, modalidades):
    creche = modalidades[0]
    escola = servico.criar({'nome': 'Creche Municipal'})
    servico.adicionar_modalidade(escola['id'], {'modalidade_id': creche.id, 'quantidade_alunos': 10})

    with pytest.raises(ErroValidacao, match='Esta modalidade já está vinculada à escola'):
        servico.adicionar_modalidade(escola['id'], {'modalidade_id': creche.id, 'quantidade_alunos': 5})


def test_modalidade_inexistente(servico):
    escola = servico.criar({'nome': 'Creche Municipal'})
    with pytest.raises(ErroValidacao, match='Modalidade não encontrada'):
        servico.adicionar_modalidade(escola['id'], {'modalidade_id': 999, 'quantidade_alunos': 5})


def test_sub_recurso_de_escola_inexistente(servico):
    with pytest.raises(NaoEncontrado, match='Escola não encontrada'):
        servico.listar_modalidades(999)


def test_exclusao_forcada_retira_escola_das_rotas(servico, modalidades, db):
    escola = servico.criar({'nome': 'EMEF Joaquim Nabuco'})
    servico.adicionar_modalidade(escola['id'], {'modalidade_id': modalidades[0].id, 'quantidade_alunos': 10})
    rota = Rota(nome='Rota Norte')
    db.session.add(rota)
    db.session.flush()
    db.session.add(RotaEscola(rota_id=rota.id, escola_id=escola['id'], ordem=1))
    db.session.commit()

    with pytest.raises(DependenciasEncontradas) as erro:
        servico.remover(escola['id'])
    assert erro.value.dependencias == {'rotas': 1}

    servico.remover(escola['id'], forcar=True)

    assert db.session.query(Escola).count() == 0
    assert db.session.query(RotaEscola).count() == 0
    assert db.session.query(EscolaModalidade).count() == 0
    assert db.session.query(Rota).count() == 1
