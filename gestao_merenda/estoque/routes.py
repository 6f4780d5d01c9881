from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_auxiliar,
    opcoes_fixas,
    opcoes_status,
    registrar_paginas_crud,
)
from ..listagem import (
    Campo,
    ConfigListagem,
    FiltroBusca,
    FiltroCategoria,
    FiltroStatus,
    Juncao,
    chave_numero,
    chave_texto,
    opcoes_de_colecao,
)
from ..produtos.services import ProdutoService
from . import estoque_bp
from .services import SITUACAO_VALIDO, SITUACAO_VENCIDO, EstoqueService, resumo_por_produto, situacao_lote

CAMPOS = (
    Campo('produto_id', 'Produto', tipo='selecao', obrigatorio=True,
          opcoes=opcoes_de_colecao('produtos', somente_ativos=True)),
    Campo('lote', 'Lote', obrigatorio=True),
    Campo('quantidade', 'Quantidade', tipo='numero', obrigatorio=True),
    Campo('data_validade', 'Validade', tipo='data'),
    Campo('ativo', 'Ativo', tipo='booleano', padrao=True),
)

OPCOES_SITUACAO = [(SITUACAO_VALIDO, 'Dentro da validade'), (SITUACAO_VENCIDO, 'Vencidos')]


def _chave_validade(lote):
    # Lotes sem validade vão para o fim
    dias = lote.get('dias_para_vencer')
    return dias if dias is not None else float('inf')


def configurar_listagem(servico: EstoqueService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Estoque Central',
        rotulo_plural='lotes',
        buscar=servico.listar,
        auxiliares={'produtos': ProdutoService().listar},
        juncoes=[Juncao('produto_nome', 'produtos', 'produto_id')],
        filtros=[
            FiltroBusca(campos=('lote', 'produto_nome')),
            FiltroCategoria('produto_id', 'produto_id', conversor=int),
            FiltroCategoria('situacao', situacao_lote),
            FiltroStatus(),
        ],
        ordenacoes={
            'validade': ('Vence primeiro', _chave_validade),
            'produto': ('Produto', chave_texto('produto_nome')),
            'quantidade': ('Maior quantidade', chave_numero('quantidade', decrescente=True)),
        },
        ordenacao_padrao='validade',
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


pagina = registrar_paginas_crud(estoque_bp, PaginaEntidade(
    titulo='Estoque Central',
    rotulo='Lote',
    servico=EstoqueService,
    listagem=configurar_listagem,
    colunas=(
        ColunaTabela('produto_nome', 'Produto'),
        ColunaTabela('lote', 'Lote'),
        ColunaTabela('quantidade', 'Quantidade', formato='numero'),
        ColunaTabela('unidade', 'Unidade'),
        ColunaTabela('data_validade', 'Validade', formato='data'),
        ColunaTabela('dias_para_vencer', 'Dias para vencer', formato='inteiro'),
        ColunaTabela('vencido', 'Vencido', formato='vencido'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(
        ControleFiltro('produto_id', 'Produto', opcoes_auxiliar('produtos')),
        ControleFiltro('situacao', 'Situação', opcoes_fixas(OPCOES_SITUACAO)),
        ControleFiltro('status', 'Status', opcoes_status),
    ),
    resumo=lambda ctrl: resumo_por_produto(ctrl.dados),
    colunas_resumo=(
        ColunaTabela('produto_nome', 'Produto'),
        ColunaTabela('lotes', 'Lotes', formato='inteiro'),
        ColunaTabela('quantidade_disponivel', 'Disponível', formato='numero'),
        ColunaTabela('quantidade_vencida', 'Vencida', formato='numero'),
        ColunaTabela('unidade', 'Unidade'),
    ),
    placeholder_busca='Buscar por lote ou produto...',
))
