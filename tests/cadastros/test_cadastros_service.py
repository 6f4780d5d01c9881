from datetime import date

import pytest

from gestao_merenda.cardapios.services import CardapioService
from gestao_merenda.erros import DependenciasEncontradas, ErroValidacao
from gestao_merenda.modalidades.services import ModalidadeService
from gestao_merenda.models import (
    Cardapio,
    Contrato,
    ContratoProduto,
    Escola,
    EscolaModalidade,
    EstoqueLote,
    Fornecedor,
    Modalidade,
    Produto,
)
from gestao_merenda.produtos.services import ProdutoService
from gestao_merenda.refeicoes.services import RefeicaoService
from gestao_merenda.rotas.services import RotaService


class TestRotas:

    def test_cor_padrao_e_normalizada(self, app):
        servico = RotaService()
        assert servico.criar({'nome': 'Rota Norte', 'cor': ''})['cor'] == '#1976d2'
        assert servico.criar({'nome': 'Rota Sul', 'cor': '#FF8800'})['cor'] == '#ff8800'

    def test_cor_invalida(self, app):
        with pytest.raises(ErroValidacao, match='Cor deve estar no formato #RRGGBB'):
            RotaService().criar({'nome': 'Rota Norte', 'cor': 'azul'})

    def test_nome_unico(self, app):
        servico = RotaService()
        servico.criar({'nome': 'Rota Norte'})
        with pytest.raises(ErroValidacao, match="Já existe uma rota com o nome 'rota norte'"):
            servico.criar({'nome': 'rota norte'})

    def test_escolas_na_ordem_de_entrega(self, db):
        primeira = Escola(nome='EMEF Ana Maria', municipio='Belém')
        segunda = Escola(nome='EMEF Joaquim Nabuco', municipio='Belém')
        db.session.add_all([primeira, segunda])
        db.session.commit()
        servico = RotaService()
        rota = servico.criar({'nome': 'Rota Norte'})

        servico.adicionar_escola(rota['id'], {'escola_id': segunda.id, 'ordem': '2'})
        servico.adicionar_escola(rota['id'], {'escola_id': primeira.id, 'ordem': ''})

        escolas = servico.listar_escolas(rota['id'])
        assert [e['escola_nome'] for e in escolas] == ['EMEF Ana Maria', 'EMEF Joaquim Nabuco']
        assert escolas[0]['municipio'] == 'Belém'
        assert servico.buscar(rota['id'])['quantidade_escolas'] == 2

        with pytest.raises(ErroValidacao, match='Esta escola já está na rota'):
            servico.adicionar_escola(rota['id'], {'escola_id': primeira.id})
        with pytest.raises(ErroValidacao, match='Escola não encontrada'):
            servico.adicionar_escola(rota['id'], {'escola_id': 999})

        with pytest.raises(DependenciasEncontradas):
            servico.remover(rota['id'])
        servico.remover(rota['id'], forcar=True)
        assert db.session.query(Escola).count() == 2


class TestCardapios:

    def test_modalidade_precisa_existir(self, app):
        with pytest.raises(ErroValidacao, match='Modalidade não encontrada'):
            CardapioService().criar({'nome': 'Cardápio Creche', 'modalidade_id': '999'})

    def test_periodo(self, app):
        servico = CardapioService()
        with pytest.raises(ErroValidacao, match='Período deve ter ao menos 1 dia'):
            servico.criar({'nome': 'Cardápio', 'periodo_dias': '0'})
        with pytest.raises(ErroValidacao, match='Data de fim deve ser posterior à data de início'):
            servico.criar({'nome': 'Cardápio', 'data_inicio': '2026-03-01', 'data_fim': '2026-03-01'})

        cardapio = servico.criar({'nome': 'Cardápio Março', 'periodo_dias': '20', 'data_inicio': '2026-03-01'})
        assert cardapio['periodo_dias'] == 20
        assert cardapio['data_fim'] is None


class TestRefeicoes:

    def test_tipo_valido(self, app):
        refeicao = RefeicaoService().criar({'nome': 'Mingau de aveia', 'tipo': 'cafe_manha'})
        assert refeicao['tipo_rotulo'] == 'Café da manhã'

    def test_tipo_invalido(self, app):
        with pytest.raises(ErroValidacao, match='Tipo deve ser um de: cafe_manha'):
            RefeicaoService().criar({'nome': 'Sopa', 'tipo': 'merenda'})


class TestProdutos:

    def test_nome_unico(self, app):
        servico = ProdutoService()
        servico.criar({'nome': 'Arroz'})
        with pytest.raises(ErroValidacao, match="Já existe um produto com o nome 'ARROZ'"):
            servico.criar({'nome': 'ARROZ'})

    def test_exclusao_forcada_remove_itens_de_contrato_e_lotes(self, db):
        fornecedor = Fornecedor(nome='Alfa Ltda', cnpj='12345678000190')
        produto = Produto(nome='Arroz')
        db.session.add_all([fornecedor, produto])
        db.session.flush()
        contrato = Contrato(fornecedor_id=fornecedor.id, numero='001/2026',
                            data_inicio=date(2026, 1, 1), data_fim=date(2026, 12, 31))
        db.session.add(contrato)
        db.session.flush()
        db.session.add_all([
            ContratoProduto(contrato_id=contrato.id, produto_id=produto.id, quantidade_contratada=1, preco_unitario=1),
            EstoqueLote(produto_id=produto.id, lote='L-01', quantidade=3),
            EstoqueLote(produto_id=produto.id, lote='L-02', quantidade=4),
        ])
        db.session.commit()
        servico = ProdutoService()

        with pytest.raises(DependenciasEncontradas) as erro:
            servico.remover(produto.id)
        assert erro.value.dependencias == {'contratos': 1, 'lotes': 2}

        servico.remover(produto.id, forcar=True)

        assert db.session.query(Produto).count() == 0
        assert db.session.query(EstoqueLote).count() == 0
        assert db.session.query(ContratoProduto).count() == 0
        assert db.session.query(Contrato).count() == 1


class TestModalidades:

    def test_exclusao_forcada_preserva_cardapios(self, db):
        modalidade = Modalidade(nome='Creche')
        escola = Escola(nome='Creche Municipal')
        db.session.add_all([modalidade, escola])
        db.session.flush()
        db.session.add_all([
            EscolaModalidade(escola_id=escola.id, modalidade_id=modalidade.id, quantidade_alunos=30),
            Cardapio(nome='Cardápio Creche', modalidade_id=modalidade.id),
        ])
        db.session.commit()
        servico = ModalidadeService()

        with pytest.raises(DependenciasEncontradas) as erro:
            servico.remover(modalidade.id)
        assert erro.value.dependencias == {'escolas': 1, 'cardapios': 1}

        servico.remover(modalidade.id, forcar=True)

        cardapio = db.session.query(Cardapio).one()
        assert cardapio.modalidade_id is None
        assert db.session.query(EscolaModalidade).count() == 0
        assert db.session.query(Escola).count() == 1
