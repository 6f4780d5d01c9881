from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_fixas,
    opcoes_status,
    registrar_paginas_crud,
)
from ..listagem import Campo, ConfigListagem, FiltroBusca, FiltroCategoria, FiltroStatus, chave_texto
from . import refeicoes_bp
from .schemas import ROTULOS_TIPO
from .services import RefeicaoService

OPCOES_TIPO = list(ROTULOS_TIPO.items())

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('descricao', 'Descrição', tipo='area'),
    Campo('tipo', 'Tipo', tipo='selecao', opcoes=OPCOES_TIPO),
    Campo('ativo', 'Ativa', tipo='booleano', padrao=True),
)


def configurar_listagem(servico: RefeicaoService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Refeições',
        rotulo_plural='refeições',
        buscar=servico.listar,
        filtros=[
            FiltroBusca(campos=('nome', 'descricao')),
            FiltroCategoria('tipo', 'tipo'),
            FiltroStatus(),
        ],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'tipo': ('Tipo', chave_texto('tipo_rotulo')),
        },
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


pagina = registrar_paginas_crud(refeicoes_bp, PaginaEntidade(
    titulo='Refeições',
    rotulo='Refeição',
    feminino=True,
    servico=RefeicaoService,
    listagem=configurar_listagem,
    colunas=(
        ColunaTabela('nome', 'Nome'),
        ColunaTabela('tipo_rotulo', 'Tipo'),
        ColunaTabela('descricao', 'Descrição'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(
        ControleFiltro('tipo', 'Tipo', opcoes_fixas(OPCOES_TIPO)),
        ControleFiltro('status', 'Status', opcoes_status),
    ),
    placeholder_busca='Buscar por nome ou descrição...',
))
