"""
Núcleo genérico de listagens: filtros, paginação, índice de junções,
diálogos de cadastro e controladores de listagem e de detalhe.

Não depende do Flask; as telas apenas montam a configuração.
"""

from .campos import Campo, opcoes_de_colecao, validar_periodo
from .controlador import ConfigListagem, ControladorListagem, Juncao
from .detalhe import (
    ConfigDetalhe,
    ControladorDetalhe,
    SubRecurso,
    agrupar_por_fornecedor,
    calcular_total_alunos,
    calcular_valor_total_contrato,
    calcular_valor_total_pedido,
)
from .dialogo import DialogoCrud, DialogoExclusao, EstadoDialogo
from .filtros import (
    FiltroBusca,
    FiltroCategoria,
    FiltroData,
    FiltroMultiplo,
    FiltroStatus,
    chave_numero,
    chave_texto,
    separar_etiquetas,
)
from .indice import NAO_RESOLVIDO, Indice
from .paginacao import OPCOES_LINHAS_POR_PAGINA, Paginacao

__all__ = [
    'Campo',
    'ConfigDetalhe',
    'ConfigListagem',
    'ControladorDetalhe',
    'ControladorListagem',
    'DialogoCrud',
    'DialogoExclusao',
    'EstadoDialogo',
    'FiltroBusca',
    'FiltroCategoria',
    'FiltroData',
    'FiltroMultiplo',
    'FiltroStatus',
    'Indice',
    'Juncao',
    'NAO_RESOLVIDO',
    'OPCOES_LINHAS_POR_PAGINA',
    'Paginacao',
    'SubRecurso',
    'agrupar_por_fornecedor',
    'calcular_total_alunos',
    'calcular_valor_total_contrato',
    'calcular_valor_total_pedido',
    'chave_numero',
    'chave_texto',
    'opcoes_de_colecao',
    'separar_etiquetas',
    'validar_periodo',
]
