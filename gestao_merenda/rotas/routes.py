from ..crud.paginas import ColunaTabela, ControleFiltro, PaginaEntidade, opcoes_status, registrar_paginas_crud
from ..escolas.services import EscolaService
from ..listagem import (
    Campo,
    ConfigDetalhe,
    ConfigListagem,
    FiltroBusca,
    FiltroStatus,
    SubRecurso,
    chave_numero,
    chave_texto,
    opcoes_de_colecao,
)
from . import rotas_bp
from .schemas import COR_PADRAO
from .services import RotaService

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('descricao', 'Descrição', tipo='area'),
    Campo('cor', 'Cor', tipo='cor', padrao=COR_PADRAO),
    Campo('ativo', 'Ativa', tipo='booleano', padrao=True),
)

CAMPOS_ESCOLA = (
    Campo('escola_id', 'Escola', tipo='selecao', obrigatorio=True,
          opcoes=opcoes_de_colecao('escolas', somente_ativos=True)),
    Campo('ordem', 'Ordem de entrega', tipo='inteiro', padrao=0),
)


def configurar_listagem(servico: RotaService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Rotas',
        rotulo_plural='rotas',
        buscar=servico.listar,
        filtros=[FiltroBusca(campos=('nome', 'descricao')), FiltroStatus()],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'quantidade_escolas': ('Mais escolas', chave_numero('quantidade_escolas', decrescente=True)),
        },
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


def configurar_detalhe(servico: RotaService) -> ConfigDetalhe:
    return ConfigDetalhe(
        rotulo='Rota',
        buscar=servico.buscar,
        editar=servico.editar,
        campos=CAMPOS,
        relacionados={'escolas': EscolaService().listar},
        subrecursos=[
            SubRecurso(
                'escolas',
                'Escola',
                listar=servico.listar_escolas,
                adicionar=servico.adicionar_escola,
                editar=servico.editar_escola,
                remover=servico.remover_escola,
                campos=CAMPOS_ESCOLA,
            ),
        ],
        agregados={'quantidade_escolas': lambda det: len(det.itens.get('escolas', []))},
        nao_encontrado='Rota não encontrada.',
        id_invalido='ID de rota inválido',
    )


pagina = registrar_paginas_crud(rotas_bp, PaginaEntidade(
    titulo='Rotas',
    rotulo='Rota',
    feminino=True,
    servico=RotaService,
    listagem=configurar_listagem,
    detalhe=configurar_detalhe,
    colunas=(
        ColunaTabela('cor', '', formato='cor'),
        ColunaTabela('nome', 'Nome', link_detalhe=True),
        ColunaTabela('descricao', 'Descrição'),
        ColunaTabela('quantidade_escolas', 'Escolas', formato='inteiro'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(ControleFiltro('status', 'Status', opcoes_status),),
    campos_detalhe=(
        ColunaTabela('descricao', 'Descrição'),
        ColunaTabela('cor', 'Cor', formato='cor'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    colunas_subrecursos={
        'escolas': (
            ColunaTabela('ordem', 'Ordem', formato='inteiro'),
            ColunaTabela('escola_nome', 'Escola'),
            ColunaTabela('municipio', 'Município'),
        ),
    },
    rotulos_agregados={'quantidade_escolas': ('Escolas na rota', 'inteiro')},
    placeholder_busca='Buscar por nome ou descrição...',
))
