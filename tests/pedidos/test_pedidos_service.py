import pytest

from gestao_merenda.contratos.services import ContratoService
from gestao_merenda.erros import DependenciasEncontradas, ErroValidacao, NaoEncontrado
from gestao_merenda.models import Pedido, PedidoItem
from gestao_merenda.pedidos.services import PedidoService, contar_por_status, validar_transicao


@pytest.fixture
def servico(app):
    return PedidoService()


@pytest.fixture
def pedido(servico):
    return servico.criar({'numero': 'PED-001', 'data_pedido': '2026-10-01'})


def _item(contrato_produto, quantidade='10', **extras):
    payload = {
        'contrato_produto_id': contrato_produto.id,
        'quantidade': quantidade,
        'data_entrega_prevista': '2026-10-20',
    }
    payload.update(extras)
    return payload


class TestTransicoes:

    def test_fluxo_completo(self):
        for atual, novo in [('rascunho', 'pendente'), ('pendente', 'aprovado'), ('aprovado', 'em_separacao'),
                            ('em_separacao', 'enviado'), ('enviado', 'entregue')]:
            validar_transicao(atual, novo)

    def test_cancelamento_depois_do_rascunho(self):
        validar_transicao('aprovado', 'cancelado')

    def test_nao_pula_etapas(self):
        with pytest.raises(ErroValidacao, match='de Rascunho para Aprovado'):
            validar_transicao('rascunho', 'aprovado')

    def test_entregue_e_final(self):
        with pytest.raises(ErroValidacao, match='de Entregue para Cancelado'):
            validar_transicao('entregue', 'cancelado')

    def test_mesmo_status(self):
        validar_transicao('pendente', 'pendente')


def test_contar_por_status_inclui_status_sem_pedidos():
    contagem = contar_por_status([{'status': 'pendente'}, {'status': 'pendente'}, {'status': None}])
    por_status = {linha['status']: linha['quantidade'] for linha in contagem}

    assert [linha['status'] for linha in contagem][0] == 'rascunho'
    assert por_status['pendente'] == 2
    assert por_status['rascunho'] == 1
    assert por_status['entregue'] == 0
    assert contagem[3]['rotulo'] == 'Em separação'


class TestPedidoService:

    def test_criar_em_rascunho(self, pedido):
        assert pedido['status'] == 'rascunho'
        assert pedido['status_rotulo'] == 'Rascunho'
        assert pedido['valor_total'] == 0
        assert pedido['quantidade_itens'] == 0

    def test_criar_fora_do_rascunho(self, servico):
        with pytest.raises(ErroValidacao, match='Adicione pelo menos um item'):
            servico.criar({'numero': 'PED-002', 'data_pedido': '2026-10-01', 'status': 'pendente'})

    def test_status_invalido(self, servico):
        with pytest.raises(ErroValidacao, match='Status deve ser um de'):
            servico.criar({'numero': 'PED-002', 'data_pedido': '2026-10-01', 'status': 'perdido'})

    def test_numero_duplicado(self, servico, pedido):
        with pytest.raises(ErroValidacao, match='Já existe um pedido com o número PED-001'):
            servico.criar({'numero': 'PED-001', 'data_pedido': '2026-10-02'})

    def test_itens_totalizam_pedido(self, servico, pedido, produtos_contratados):
        servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz'], '100'))
        servico.adicionar_item(pedido['id'], _item(produtos_contratados['leite'], '50'))

        atualizado = servico.buscar(pedido['id'])
        assert atualizado['valor_total'] == 460.0
        assert atualizado['quantidade_itens'] == 2
        assert atualizado['fornecedores_nomes'] == 'Alfa Alimentos Ltda, Beta Laticínios'
        assert atualizado['quantidade_fornecedores'] == 2

        itens = servico.listar_itens(pedido['id'])
        assert itens[0]['produto_nome'] == 'Arroz'
        assert itens[0]['contrato_numero'] == '001/2026'
        assert itens[0]['valor_total'] == 250.0

    def test_produto_repetido(self, servico, pedido, produtos_contratados):
        servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz']))
        with pytest.raises(ErroValidacao, match='Este produto já está no pedido'):
            servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz'], '5'))

    def test_contrato_expirado(self, servico, pedido, produtos_contratados):
        with pytest.raises(ErroValidacao, match='O contrato 009/2020 não está vigente'):
            servico.adicionar_item(pedido['id'], _item(produtos_contratados['expirado']))

    def test_produto_de_contrato_inexistente(self, servico, pedido, produtos_contratados):
        with pytest.raises(ErroValidacao, match='Produto do contrato não encontrado'):
            servico.adicionar_item(pedido['id'], {
                'contrato_produto_id': 999, 'quantidade': '1', 'data_entrega_prevista': '2026-10-20',
            })

    def test_quantidade_zero(self, servico, pedido, produtos_contratados):
        with pytest.raises(ErroValidacao, match='Quantidade deve ser maior que zero'):
            servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz'], '0'))

    def test_enviar_sem_itens(self, servico, pedido):
        with pytest.raises(ErroValidacao, match='Adicione pelo menos um item'):
            servico.editar(pedido['id'], {'status': 'pendente'})

    def test_avancar_status(self, servico, pedido, produtos_contratados):
        servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz']))

        assert servico.editar(pedido['id'], {'status': 'pendente'})['status'] == 'pendente'
        assert servico.editar(pedido['id'], {'status': 'aprovado'})['status_rotulo'] == 'Aprovado'

        with pytest.raises(ErroValidacao, match='de Aprovado para Entregue'):
            servico.editar(pedido['id'], {'status': 'entregue'})

    def test_itens_bloqueados_fora_do_rascunho(self, servico, pedido, produtos_contratados):
        item = servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz']))
        servico.editar(pedido['id'], {'status': 'pendente'})

        with pytest.raises(ErroValidacao, match='Itens só podem ser alterados em pedidos em rascunho'):
            servico.adicionar_item(pedido['id'], _item(produtos_contratados['leite']))
        with pytest.raises(ErroValidacao, match='Itens só podem ser alterados'):
            servico.editar_item(pedido['id'], item['id'], {'quantidade': '20'})
        with pytest.raises(ErroValidacao, match='Itens só podem ser alterados'):
            servico.remover_item(pedido['id'], item['id'])

    def test_item_de_outro_pedido(self, servico, pedido, produtos_contratados):
        outro = servico.criar({'numero': 'PED-002', 'data_pedido': '2026-10-02'})
        item = servico.adicionar_item(outro['id'], _item(produtos_contratados['arroz']))

        with pytest.raises(NaoEncontrado, match='Item do pedido não encontrado'):
            servico.remover_item(pedido['id'], item['id'])

    def test_remover_com_itens_exige_forcar(self, servico, pedido, produtos_contratados, db):
        servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz']))

        with pytest.raises(DependenciasEncontradas) as erro:
            servico.remover(pedido['id'])
        assert erro.value.dependencias == {'itens': 1}

        resultado = servico.remover(pedido['id'], forcar=True)
        assert resultado['dependencias_removidas'] == {'itens': 1}
        assert db.session.query(Pedido).count() == 0
        assert db.session.query(PedidoItem).count() == 0

    def test_remover_pedido_em_andamento(self, servico, pedido, produtos_contratados):
        servico.adicionar_item(pedido['id'], _item(produtos_contratados['arroz']))
        servico.editar(pedido['id'], {'status': 'pendente'})

        with pytest.raises(ErroValidacao, match='Apenas pedidos em rascunho ou cancelados'):
            servico.remover(pedido['id'], forcar=True)

    def test_produtos_disponiveis(self, servico, produtos_contratados):
        disponiveis = {p['id']: p for p in servico.listar_produtos_disponiveis()}

        arroz = disponiveis[produtos_contratados['arroz'].id]
        assert arroz['descricao'] == 'Arroz - Alfa Alimentos Ltda (Contrato 001/2026)'
        assert arroz['ativo'] is True
        assert disponiveis[produtos_contratados['expirado'].id]['ativo'] is False


class TestVinculoComContratos:

    def test_produto_do_contrato_usado_em_pedido(self, servico, pedido, produtos_contratados):
        arroz = produtos_contratados['arroz']
        servico.adicionar_item(pedido['id'], _item(arroz))

        with pytest.raises(ErroValidacao, match='Produto já utilizado em pedidos'):
            ContratoService().remover_produto(arroz.contrato_id, arroz.id)

    def test_exclusao_forcada_do_contrato_remove_itens_de_pedido(self, servico, pedido, produtos_contratados, db):
        arroz = produtos_contratados['arroz']
        servico.adicionar_item(pedido['id'], _item(arroz))
        contratos = ContratoService()

        with pytest.raises(DependenciasEncontradas) as erro:
            contratos.remover(arroz.contrato_id)
        assert erro.value.dependencias == {'produtos': 2, 'itens_pedido': 1}

        contratos.remover(arroz.contrato_id, forcar=True)
        assert db.session.query(PedidoItem).count() == 0
        assert servico.buscar(pedido['id'])['quantidade_itens'] == 0
