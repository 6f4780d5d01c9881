from ..crud.paginas import (
    ColunaTabela,
    ControleFiltro,
    PaginaEntidade,
    opcoes_distintas,
    opcoes_fixas,
    opcoes_status,
    registrar_paginas_crud,
)
from ..listagem import (
    Campo,
    ConfigDetalhe,
    ConfigListagem,
    FiltroBusca,
    FiltroCategoria,
    FiltroMultiplo,
    FiltroStatus,
    SubRecurso,
    calcular_total_alunos,
    chave_numero,
    chave_texto,
    opcoes_de_colecao,
)
from ..modalidades.services import ModalidadeService
from . import escolas_bp
from .schemas import TIPOS_ADMINISTRACAO
from .services import EscolaService

OPCOES_ADMINISTRACAO = [(tipo, tipo.capitalize()) for tipo in TIPOS_ADMINISTRACAO]

CAMPOS = (
    Campo('nome', 'Nome', obrigatorio=True),
    Campo('codigo', 'Código INEP'),
    Campo('codigo_acesso', 'Código de acesso (6 dígitos)'),
    Campo('endereco', 'Endereço'),
    Campo('municipio', 'Município'),
    Campo('endereco_maps', 'Link do mapa'),
    Campo('telefone', 'Telefone'),
    Campo('email', 'E-mail', tipo='email'),
    Campo('nome_gestor', 'Gestor'),
    Campo('administracao', 'Administração', tipo='selecao', opcoes=OPCOES_ADMINISTRACAO),
    Campo('ativo', 'Ativa', tipo='booleano', padrao=True),
)

CAMPOS_MODALIDADE = (
    Campo('modalidade_id', 'Modalidade', tipo='selecao', obrigatorio=True,
          opcoes=opcoes_de_colecao('modalidades', somente_ativos=True)),
    Campo('quantidade_alunos', 'Quantidade de alunos', tipo='inteiro', obrigatorio=True),
)


def configurar_listagem(servico: EscolaService) -> ConfigListagem:
    return ConfigListagem(
        titulo='Escolas',
        rotulo_plural='escolas',
        buscar=servico.listar,
        filtros=[
            FiltroBusca(campos=('nome', 'codigo', 'municipio', 'nome_gestor')),
            FiltroCategoria('municipio', 'municipio'),
            FiltroCategoria('administracao', 'administracao'),
            FiltroMultiplo('modalidades', lambda escola: escola.get('modalidades_lista') or []),
            FiltroStatus(),
        ],
        ordenacoes={
            'nome': ('Nome', chave_texto('nome')),
            'municipio': ('Município', chave_texto('municipio')),
            'total_alunos': ('Mais alunos', chave_numero('total_alunos', decrescente=True)),
        },
        opcoes_filtros={'municipio': 'municipio', 'modalidades': 'modalidades_lista'},
        campos=CAMPOS,
        criar=servico.criar,
        editar=servico.editar,
        remover=servico.remover,
    )


def configurar_detalhe(servico: EscolaService) -> ConfigDetalhe:
    return ConfigDetalhe(
        rotulo='Escola',
        buscar=servico.buscar,
        editar=servico.editar,
        campos=CAMPOS,
        relacionados={'modalidades': ModalidadeService().listar},
        subrecursos=[
            SubRecurso(
                'modalidades',
                'Modalidade',
                listar=servico.listar_modalidades,
                adicionar=servico.adicionar_modalidade,
                editar=servico.editar_modalidade,
                remover=servico.remover_modalidade,
                campos=CAMPOS_MODALIDADE,
            ),
        ],
        agregados={'total_alunos': lambda det: calcular_total_alunos(det.itens.get('modalidades'))},
        nao_encontrado='Escola não encontrada.',
        id_invalido='ID de escola inválido',
    )


pagina = registrar_paginas_crud(escolas_bp, PaginaEntidade(
    titulo='Escolas',
    rotulo='Escola',
    feminino=True,
    servico=EscolaService,
    listagem=configurar_listagem,
    detalhe=configurar_detalhe,
    colunas=(
        ColunaTabela('nome', 'Nome', link_detalhe=True),
        ColunaTabela('municipio', 'Município'),
        ColunaTabela('modalidades', 'Modalidades'),
        ColunaTabela('total_alunos', 'Alunos', formato='inteiro'),
        ColunaTabela('administracao', 'Administração'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    controles_filtro=(
        ControleFiltro('municipio', 'Município', opcoes_distintas('municipio')),
        ControleFiltro('administracao', 'Administração', opcoes_fixas(OPCOES_ADMINISTRACAO)),
        ControleFiltro('modalidades', 'Modalidades', opcoes_distintas('modalidades'), multiplo=True),
        ControleFiltro('status', 'Status', opcoes_status),
    ),
    campos_detalhe=(
        ColunaTabela('codigo', 'Código INEP'),
        ColunaTabela('codigo_acesso', 'Código de acesso'),
        ColunaTabela('endereco', 'Endereço'),
        ColunaTabela('municipio', 'Município'),
        ColunaTabela('endereco_maps', 'Mapa', formato='link'),
        ColunaTabela('telefone', 'Telefone'),
        ColunaTabela('email', 'E-mail'),
        ColunaTabela('nome_gestor', 'Gestor'),
        ColunaTabela('administracao', 'Administração'),
        ColunaTabela('ativo', 'Status', formato='booleano'),
    ),
    colunas_subrecursos={
        'modalidades': (
            ColunaTabela('modalidade_nome', 'Modalidade'),
            ColunaTabela('quantidade_alunos', 'Alunos', formato='inteiro'),
        ),
    },
    rotulos_agregados={'total_alunos': ('Total de alunos', 'inteiro')},
    planilhas=True,
    placeholder_busca='Buscar por nome, código, município ou gestor...',
))
