from ..crud.paginas import (
    AcaoLinha,
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_status,
    registrar_paginas_crud,
)
from ..listagem import Campo, ConfigListagem, FiltroBusca, FiltroStatus, chave_texto
from . import fornecedores_bp
from .services import FornecedorService

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('cnpj', 'CNPJ', obrigatorio=True),
    Campo('email', 'E-mail', tipo='email'),
    Campo('ativo', 'Ativo', tipo='booleano', padrao=True),
)


def configurar_listagem(servico: FornecedorService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Fornecedores',
        rotulo_plural='fornecedores',
        buscar=servico.listar,
        filtros=[
            FiltroBusca(campos=('nome', 'cnpj', 'cnpj_formatado', 'email')),
            FiltroStatus(),
        ],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'cnpj': ('CNPJ', chave_texto('cnpj')),
        },
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


pagina = registrar_paginas_crud(fornecedores_bp, PaginaEntidade(
    titulo='Fornecedores',
    rotulo='Fornecedor',
    servico=FornecedorService,
    listagem=configurar_listagem,
    colunas=(
        ColunaTabela('nome', 'Nome'),
        ColunaTabela('cnpj_formatado', 'CNPJ'),
        ColunaTabela('email', 'E-mail'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(ControleFiltro('status', 'Status', opcoes_status),),
    acoes_linha=(AcaoLinha('Contratos', 'contratos.listar', 'fornecedor_id'),),
    planilhas=True,
    placeholder_busca='Buscar por nome, CNPJ ou e-mail...',
))
