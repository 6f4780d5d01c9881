from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_auxiliar,
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
    chave_texto,
    opcoes_de_colecao,
    validar_periodo,
)
from ..modalidades.services import ModalidadeService
from . import cardapios_bp
from .services import CardapioService

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('modalidade_id', 'Modalidade', tipo='selecao',
          opcoes=opcoes_de_colecao('modalidades', somente_ativos=True)),
    Campo('periodo_dias', 'Período (dias)', tipo='inteiro'),
    Campo('data_inicio', 'Início', tipo='data'),
    Campo('data_fim', 'Fim', tipo='data'),
    Campo('ativo', 'Ativo', tipo='booleano', padrao=True),
)


def configurar_listagem(servico: CardapioService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Cardápios',
        rotulo_plural='cardápios',
        buscar=servico.listar,
        auxiliares={'modalidades': ModalidadeService().listar},
        juncoes=[Juncao('modalidade_nome', 'modalidades', 'modalidade_id')],
        filtros=[
            FiltroBusca(campos=('nome', 'modalidade_nome')),
            FiltroCategoria('modalidade_id', 'modalidade_id', conversor=int),
            FiltroStatus(),
        ],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'data_inicio': ('Início', chave_texto('data_inicio')),
        },
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
        validar=validar_periodo,
    )


pagina = registrar_paginas_crud(cardapios_bp, PaginaEntidade(
    titulo='Cardápios',
    rotulo='Cardápio',
    servico=CardapioService,
    listagem=configurar_listagem,
    colunas=(
        ColunaTabela('nome', 'Nome'),
        ColunaTabela('modalidade_nome', 'Modalidade'),
        ColunaTabela('periodo_dias', 'Período (dias)', formato='inteiro'),
        ColunaTabela('data_inicio', 'Início', formato='data'),
        ColunaTabela('data_fim', 'Fim', formato='data'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(
        ControleFiltro('modalidade_id', 'Modalidade', opcoes_auxiliar('modalidades')),
        ControleFiltro('status', 'Status', opcoes_status),
    ),
    placeholder_busca='Buscar por nome ou modalidade...',
))
