from ..crud.paginas import ColunaTabela, ControleFiltro, PaginaEntidade, opcoes_status, registrar_paginas_crud
from ..listagem import Campo, ConfigListagem, FiltroBusca, FiltroStatus, chave_numero, chave_texto
from . import modalidades_bp
from .services import ModalidadeService

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('codigo_financeiro', 'Código financeiro'),
    Campo('valor_repasse', 'Valor de repasse (R$)', tipo='numero'),
    Campo('ativo', 'Ativa', tipo='booleano', padrao=True),
)


def configurar_listagem(servico: ModalidadeService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Modalidades',
        rotulo_plural='modalidades',
        buscar=servico.listar,
        filtros=[FiltroBusca(campos=('nome', 'codigo_financeiro')), FiltroStatus()],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'valor_repasse': ('Maior repasse', chave_numero('valor_repasse', decrescente=True)),
        },
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


pagina = registrar_paginas_crud(modalidades_bp, PaginaEntidade(
    titulo='Modalidades',
    rotulo='Modalidade',
    feminino=True,
    servico=ModalidadeService,
    listagem=configurar_listagem,
    colunas=(
        ColunaTabela('nome', 'Nome'),
        ColunaTabela('codigo_financeiro', 'Código financeiro'),
        ColunaTabela('valor_repasse', 'Valor de repasse', formato='moeda'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(ControleFiltro('status', 'Status', opcoes_status),),
    placeholder_busca='Buscar modalidade...',
))
