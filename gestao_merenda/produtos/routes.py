from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_distintas,
    opcoes_fixas,
    opcoes_status,
    registrar_paginas_crud,
)
from ..listagem import Campo, ConfigListagem, FiltroBusca, FiltroCategoria, FiltroStatus, chave_numero, chave_texto
from . import produtos_bp
from .schemas import TIPOS_PROCESSAMENTO, UNIDADES
from .services import ProdutoService

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('descricao', 'Descrição', tipo='area'),
    Campo('unidade', 'Unidade', tipo='selecao', padrao='kg', opcoes=[(u, u) for u in UNIDADES]),
    Campo('categoria', 'Categoria'),
    Campo('marca', 'Marca'),
    Campo('codigo_barras', 'Código de barras'),
    Campo('peso', 'Peso', tipo='numero'),
    Campo('validade_minima', 'Validade mínima (dias)', tipo='inteiro'),
    Campo('fator_divisao', 'Fator de divisão', tipo='numero'),
    Campo('tipo_processamento', 'Tipo de processamento', tipo='selecao',
          opcoes=[(t, t.capitalize()) for t in TIPOS_PROCESSAMENTO]),
    Campo('preco_referencia', 'Preço de referência (R$)', tipo='numero'),
    Campo('estoque_minimo', 'Estoque mínimo', tipo='numero'),
    Campo('ativo', 'Ativo', tipo='booleano', padrao=True),
)


def configurar_listagem(servico: ProdutoService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Produtos',
        rotulo_plural='produtos',
        buscar=servico.listar,
        filtros=[
            FiltroBusca(campos=('nome', 'marca', 'codigo_barras', 'descricao')),
            FiltroCategoria('categoria', 'categoria'),
            FiltroCategoria('tipo_processamento', 'tipo_processamento'),
            FiltroStatus(),
        ],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'categoria': ('Categoria', chave_texto('categoria')),
            'preco_referencia': ('Maior preço', chave_numero('preco_referencia', decrescente=True)),
        },
        opcoes_filtros={'categoria': 'categoria'},
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


pagina = registrar_paginas_crud(produtos_bp, PaginaEntidade(
    titulo='Produtos',
    rotulo='Produto',
    servico=ProdutoService,
    listagem=configurar_listagem,
    colunas=(
        ColunaTabela('nome', 'Nome'),
        ColunaTabela('categoria', 'Categoria'),
        ColunaTabela('unidade', 'Unidade'),
        ColunaTabela('tipo_processamento', 'Processamento'),
        ColunaTabela('preco_referencia', 'Preço de referência', formato='moeda'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(
        ControleFiltro('categoria', 'Categoria', opcoes_distintas('categoria')),
        ControleFiltro('tipo_processamento', 'Processamento',
                       opcoes_fixas([(t, t.capitalize()) for t in TIPOS_PROCESSAMENTO])),
        ControleFiltro('status', 'Status', opcoes_status),
    ),
    planilhas=True,
    placeholder_busca='Buscar por nome, marca ou código de barras...',
))
