from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_auxiliar,
    opcoes_fixas,
    registrar_paginas_crud,
)
from ..fornecedores.services import FornecedorService
from ..listagem import (
    Campo,
    ConfigDetalhe,
    ConfigListagem,
    FiltroBusca,
    FiltroCategoria,
    FiltroStatus,
    Juncao,
    SubRecurso,
    calcular_valor_total_contrato,
    chave_numero,
    chave_texto,
    opcoes_de_colecao,
    validar_periodo,
)
from ..produtos.services import ProdutoService
from . import contratos_bp
from .services import STATUS_CONTRATO, ContratoService

CAMPOS = (
    Campo('numero', 'Número', obrigatorio=True),
    Campo('fornecedor_id', 'Fornecedor', tipo='selecao', obrigatorio=True,
          opcoes=opcoes_de_colecao('fornecedores', somente_ativos=True)),
    Campo('data_inicio', 'Início da vigência', tipo='data', obrigatorio=True),
    Campo('data_fim', 'Fim da vigência', tipo='data', obrigatorio=True),
    Campo('ativo', 'Ativo', tipo='booleano', padrao=True),
)

CAMPOS_PRODUTO = (
    Campo('produto_id', 'Produto', tipo='selecao', obrigatorio=True,
          opcoes=opcoes_de_colecao('produtos', somente_ativos=True)),
    Campo('quantidade_contratada', 'Quantidade contratada', tipo='numero', obrigatorio=True),
    Campo('preco_unitario', 'Preço unitário', tipo='numero', obrigatorio=True),
)


def configurar_listagem(servico: ContratoService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Contratos',
        rotulo_plural='contratos',
        buscar=servico.listar,
        auxiliares={'fornecedores': FornecedorService().listar},
        juncoes=[Juncao('fornecedor_nome', 'fornecedores', 'fornecedor_id')],
        filtros=[
            FiltroBusca(campos=('numero', 'fornecedor_nome')),
            FiltroCategoria('fornecedor_id', 'fornecedor_id', conversor=int),
            FiltroStatus(extrator=lambda contrato: contrato.get('status')),
        ],
        ordenacoes={
            'numero': ('Número', chave_texto('numero')),
            'fornecedor': ('Fornecedor', chave_texto('fornecedor_nome')),
            'data_fim': ('Fim da vigência', chave_texto('data_fim')),
            'valor_total': ('Maior valor', chave_numero('valor_total', decrescente=True)),
        },
        ordenacao_padrao='numero',
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
        validar=validar_periodo,
    )


def configurar_detalhe(servico: ContratoService) -> ConfigDetalhe:
    return ConfigDetalhe(
        rotulo='Contrato',
        buscar=servico.buscar,
        editar=servico.editar,
        campos=CAMPOS,
        validar=validar_periodo,
        relacionados={
            'fornecedores': FornecedorService().listar,
            'produtos': ProdutoService().listar,
        },
        juncoes=[Juncao('fornecedor_nome', 'fornecedores', 'fornecedor_id')],
        subrecursos=[
            SubRecurso(
                'produtos',
                'Produto',
                listar=servico.listar_produtos,
                adicionar=servico.adicionar_produto,
                editar=servico.editar_produto,
                remover=servico.remover_produto,
                campos=CAMPOS_PRODUTO,
            ),
        ],
        agregados={'valor_total': lambda det: calcular_valor_total_contrato(det.itens.get('produtos'))},
    )


pagina = registrar_paginas_crud(contratos_bp, PaginaEntidade(
    titulo='Contratos',
    rotulo='Contrato',
    servico=ContratoService,
    listagem=configurar_listagem,
    detalhe=configurar_detalhe,
    colunas=(
        ColunaTabela('numero', 'Número', link_detalhe=True),
        ColunaTabela('fornecedor_nome', 'Fornecedor'),
        ColunaTabela('data_inicio', 'Início', formato='data'),
        ColunaTabela('data_fim', 'Fim', formato='data'),
        ColunaTabela('quantidade_itens', 'Produtos', formato='inteiro'),
        ColunaTabela('valor_total', 'Valor total', formato='moeda'),
        ColunaTabela('status', 'Status', formato='status'),
    ),
    controles_filtro=(
        ControleFiltro('fornecedor_id', 'Fornecedor', opcoes_auxiliar('fornecedores')),
        ControleFiltro('status', 'Status', opcoes_fixas([('', 'Todos')] + [(s, s) for s in STATUS_CONTRATO])),
    ),
    campos_detalhe=(
        ColunaTabela('fornecedor_nome', 'Fornecedor'),
        ColunaTabela('data_inicio', 'Início da vigência', formato='data'),
        ColunaTabela('data_fim', 'Fim da vigência', formato='data'),
        ColunaTabela('status', 'Status', formato='status'),
    ),
    colunas_subrecursos={
        'produtos': (
            ColunaTabela('produto_nome', 'Produto'),
            ColunaTabela('unidade', 'Unidade'),
            ColunaTabela('quantidade_contratada', 'Quantidade', formato='numero'),
            ColunaTabela('preco_unitario', 'Preço unitário', formato='moeda'),
            ColunaTabela('valor_total', 'Total', formato='moeda'),
        ),
    },
    rotulos_agregados={'valor_total': ('Valor total do contrato', 'moeda')},
    placeholder_busca='Buscar por número ou fornecedor...',
))
