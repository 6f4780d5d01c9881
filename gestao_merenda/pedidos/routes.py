from datetime import date

from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_fixas,
    registrar_paginas_crud,
)
from ..listagem import (
    Campo,
    ConfigDetalhe,
    ConfigListagem,
    FiltroBusca,
    FiltroCategoria,
    FiltroData,
    SubRecurso,
    agrupar_por_fornecedor,
    calcular_valor_total_pedido,
    chave_numero,
    chave_texto,
    opcoes_de_colecao,
)
from . import pedidos_bp
from .schemas import ROTULOS_STATUS
from .services import PedidoService, contar_por_status

OPCOES_STATUS = list(ROTULOS_STATUS.items())


def _chave_data_recente(pedido) -> int:
    data = pedido.get('data_pedido')
    return -date.fromisoformat(data[:10]).toordinal() if data else 0


CAMPOS = (
    Campo('numero', 'Número', obrigatorio=True),
    Campo('data_pedido', 'Data do pedido', tipo='data', obrigatorio=True),
    Campo('status', 'Status', tipo='selecao', padrao='rascunho', opcoes=OPCOES_STATUS),
    Campo('observacoes', 'Observações', tipo='area'),
)

CAMPOS_ITEM = (
    Campo('contrato_produto_id', 'Produto', tipo='selecao', obrigatorio=True,
          opcoes=opcoes_de_colecao('produtos_disponiveis', rotulo='descricao', somente_ativos=True)),
    Campo('quantidade', 'Quantidade', tipo='numero', obrigatorio=True),
    Campo('data_entrega_prevista', 'Entrega prevista', tipo='data', obrigatorio=True),
    Campo('observacoes', 'Observações'),
)


def configurar_listagem(servico: PedidoService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Pedidos',
        rotulo_plural='pedidos',
        buscar=servico.listar,
        filtros=[
            FiltroBusca(campos=('numero', 'fornecedores_nomes')),
            FiltroCategoria('status', 'status'),
            FiltroData('data_inicio', 'data_pedido', limite='inicio'),
            FiltroData('data_fim', 'data_pedido', limite='fim'),
        ],
        ordenacoes={
            'data': ('Mais recentes', _chave_data_recente),
            'numero': ('Número', chave_texto('numero')),
            'status': ('Status', chave_texto('status')),
            'valor': ('Maior valor', chave_numero('valor_total', decrescente=True)),
        },
        ordenacao_padrao='data',
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


def configurar_detalhe(servico: PedidoService) -> ConfigDetalhe:
    return ConfigDetalhe(
        rotulo='Pedido',
        buscar=servico.buscar,
        editar=servico.editar,
        campos=CAMPOS,
        relacionados={'produtos_disponiveis': servico.listar_produtos_disponiveis},
        subrecursos=[
            SubRecurso(
                'itens',
                'Produto',
                listar=servico.listar_itens,
                adicionar=servico.adicionar_item,
                editar=servico.editar_item,
                remover=servico.remover_item,
                campos=CAMPOS_ITEM,
            ),
        ],
        agregados={
            'valor_total': lambda det: calcular_valor_total_pedido(det.itens.get('itens')),
            'quantidade_fornecedores': lambda det: len(agrupar_por_fornecedor(det.itens.get('itens'))),
        },
    )


pagina = registrar_paginas_crud(pedidos_bp, PaginaEntidade(
    titulo='Pedidos',
    rotulo='Pedido',
    servico=PedidoService,
    listagem=configurar_listagem,
    detalhe=configurar_detalhe,
    colunas=(
        ColunaTabela('numero', 'Número', link_detalhe=True),
        ColunaTabela('data_pedido', 'Data', formato='data'),
        ColunaTabela('fornecedores_nomes', 'Fornecedores'),
        ColunaTabela('quantidade_itens', 'Itens', formato='inteiro'),
        ColunaTabela('valor_total', 'Valor total', formato='moeda'),
        ColunaTabela('status_rotulo', 'Status', formato='status'),
    ),
    controles_filtro=(
        ControleFiltro('status', 'Status', opcoes_fixas([('', 'Todos')] + OPCOES_STATUS)),
        ControleFiltro('data_inicio', 'De', tipo='data'),
        ControleFiltro('data_fim', 'Até', tipo='data'),
    ),
    resumo=lambda ctrl: contar_por_status(ctrl.dados),
    colunas_resumo=(
        ColunaTabela('rotulo', 'Status'),
        ColunaTabela('quantidade', 'Pedidos', formato='inteiro'),
    ),
    campos_detalhe=(
        ColunaTabela('data_pedido', 'Data do pedido', formato='data'),
        ColunaTabela('status_rotulo', 'Status', formato='status'),
        ColunaTabela('observacoes', 'Observações'),
    ),
    colunas_subrecursos={
        'itens': (
            ColunaTabela('produto_nome', 'Produto'),
            ColunaTabela('fornecedor_nome', 'Fornecedor'),
            ColunaTabela('contrato_numero', 'Contrato'),
            ColunaTabela('quantidade', 'Quantidade', formato='numero'),
            ColunaTabela('unidade', 'Unidade'),
            ColunaTabela('preco_unitario', 'Preço unitário', formato='moeda'),
            ColunaTabela('valor_total', 'Total', formato='moeda'),
            ColunaTabela('data_entrega_prevista', 'Entrega prevista', formato='data'),
        ),
    },
    rotulos_agregados={
        'valor_total': ('Valor total do pedido', 'moeda'),
        'quantidade_fornecedores': ('Fornecedores', 'inteiro'),
    },
    resumo_detalhe=lambda det: agrupar_por_fornecedor(det.itens.get('itens')),
    colunas_resumo_detalhe=(
        ColunaTabela('fornecedor_nome', 'Fornecedor'),
        ColunaTabela('quantidade_itens', 'Itens', formato='inteiro'),
        ColunaTabela('valor_total', 'Subtotal', formato='moeda'),
    ),
    titulo_resumo_detalhe='Itens por fornecedor',
    placeholder_busca='Buscar por número ou fornecedor...',
))
