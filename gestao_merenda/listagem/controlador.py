"""
Controlador genérico de listagens
=================================

Concentra o ciclo de carga, o estado dos filtros, a visão derivada
(filtrada, ordenada e paginada) e os diálogos de cadastro de uma entidade.
Cada tela é apenas uma ``ConfigListagem``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .campos import Campo
from .dialogo import DialogoCrud, DialogoExclusao
from .filtros import (
    Extrator,
    Filtro,
    FiltroMultiplo,
    Registro,
    aplicar_filtros,
    chave_texto,
    ordenar,
    valores_distintos,
)
from .indice import NAO_RESOLVIDO, Indice
from .paginacao import OPCOES_LINHAS_POR_PAGINA, Paginacao

logger = logging.getLogger(__name__)


@dataclass
class Juncao:
    """Copia para `destino` o rótulo do registro relacionado em `colecao`."""

    destino: str
    colecao: str
    campo_id: str
    campo: str = 'nome'


@dataclass
class ConfigListagem:
    titulo: str
    rotulo_plural: str
    buscar: Callable[[], Any]
    filtros: Sequence[Filtro] = ()
    ordenacoes: Dict[str, Tuple[str, Callable[[Registro], Any]]] = field(
        default_factory=lambda: {'nome': ('Nome', chave_texto('nome'))}
    )
    ordenacao_padrao: str = 'nome'
    auxiliares: Dict[str, Callable[[], Any]] = field(default_factory=dict)
    juncoes: Sequence[Juncao] = ()
    derivar: Optional[Callable[[Registro], Dict[str, Any]]] = None
    opcoes_filtros: Dict[str, Extrator] = field(default_factory=dict)
    campos: Sequence[Campo] = ()
    criar: Optional[Callable[[Dict[str, Any]], Any]] = None
    editar: Optional[Callable[[Any, Dict[str, Any]], Any]] = None
    remover: Optional[Callable[..., Any]] = None
    validar: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None
    mensagem_erro: Optional[str] = None

    def __post_init__(self):
        if not self.mensagem_erro:
            self.mensagem_erro = f"Erro ao carregar {self.rotulo_plural}. Tente novamente."


def como_lista(valor: Any) -> List[Registro]:
    """Respostas que não são listas viram coleção vazia."""
    if isinstance(valor, (list, tuple)):
        return [item for item in valor if isinstance(item, dict)]
    return []


class ControladorListagem:

    def __init__(
        self,
        config: ConfigListagem,
        linhas_por_pagina: int = 10,
        opcoes_linhas: Sequence[int] = OPCOES_LINHAS_POR_PAGINA,
    ):
        self.config = config
        self.opcoes_linhas = tuple(opcoes_linhas)
        self.dados: List[Registro] = []
        self.auxiliares: Dict[str, List[Registro]] = {}
        self.indices: Dict[str, Indice] = {}
        self.carregando = False
        self.erro: Optional[str] = None
        self.filtros: Dict[str, Any] = self._filtros_padrao()
        self.ordenacao = config.ordenacao_padrao
        self.paginacao = Paginacao(0, linhas_por_pagina)
        self.linhas_padrao = self.paginacao.linhas_por_pagina
        self.filtros_expandidos = False
        self._indice_dados = Indice([])
        self._cache_filtrados: Optional[List[Registro]] = None

        self.dialogo: Optional[DialogoCrud] = None
        self.exclusao: Optional[DialogoExclusao] = None
        if config.campos and config.criar and config.editar:
            self.dialogo = DialogoCrud(
                config.campos,
                config.criar,
                config.editar,
                validar=config.validar,
                ao_salvar=self.recarregar,
            )
        if config.remover:
            self.exclusao = DialogoExclusao(config.remover, ao_excluir=self.recarregar)

    # ------------------------------------------------------------------ carga

    def carregar(self) -> bool:
        """Busca a coleção principal e as auxiliares; qualquer falha invalida a carga."""
        self.carregando = True
        self.erro = None
        try:
            primaria = self.config.buscar()
            auxiliares = {nome: buscar() for nome, buscar in self.config.auxiliares.items()}
        except Exception:
            logger.exception("Falha ao carregar %s", self.config.rotulo_plural)
            self.erro = self.config.mensagem_erro
            return False
        finally:
            self.carregando = False

        self.auxiliares = {nome: como_lista(valor) for nome, valor in auxiliares.items()}
        self.indices = {nome: Indice(valor) for nome, valor in self.auxiliares.items()}
        self.dados = [self._preparar(registro) for registro in como_lista(primaria)]
        self._indice_dados = Indice(self.dados)
        self._invalidar()
        return True

    # Nova tentativa é sempre uma ação explícita do usuário
    recarregar = carregar

    def _preparar(self, registro: Registro) -> Registro:
        preparado = dict(registro)
        for juncao in self.config.juncoes:
            indice = self.indices.get(juncao.colecao)
            rotulo = indice.rotulo(registro.get(juncao.campo_id), juncao.campo) if indice else None
            preparado[juncao.destino] = rotulo
        if self.config.derivar is not None:
            preparado.update(self.config.derivar(preparado))
        return preparado

    def resolver(self, colecao: str, identificador: Any):
        indice = self.indices.get(colecao)
        if indice is None:
            return NAO_RESOLVIDO
        return indice.resolver(identificador)

    def registro(self, identificador: Any) -> Optional[Registro]:
        encontrado = self._indice_dados.resolver(identificador)
        return None if encontrado is NAO_RESOLVIDO else encontrado

    # ---------------------------------------------------------------- filtros

    def _filtros_padrao(self) -> Dict[str, Any]:
        return {
            f.nome: (list(f.padrao) if isinstance(f.padrao, list) else f.padrao)
            for f in self.config.filtros
        }

    def _filtro(self, nome: str) -> Filtro:
        for filtro in self.config.filtros:
            if filtro.nome == nome:
                return filtro
        raise KeyError(nome)

    def _invalidar(self) -> None:
        self._cache_filtrados = None

    def definir_filtro(self, nome: str, valor: Any) -> None:
        self._filtro(nome)
        self.filtros[nome] = valor
        self.paginacao.reiniciar()
        self._invalidar()

    def limpar_filtros(self) -> None:
        self.filtros = self._filtros_padrao()
        self.ordenacao = self.config.ordenacao_padrao
        self.paginacao.reiniciar()
        self._invalidar()

    def definir_ordenacao(self, chave: str) -> None:
        if chave in self.config.ordenacoes:
            self.ordenacao = chave
        self.paginacao.reiniciar()
        self._invalidar()

    @property
    def tem_filtros_ativos(self) -> bool:
        return any(f.ativo(self.filtros.get(f.nome)) for f in self.config.filtros)

    def opcoes(self, nome_filtro: str) -> List[Any]:
        extrator = self.config.opcoes_filtros.get(nome_filtro)
        if extrator is None:
            return []
        return valores_distintos(self.dados, extrator)

    # -------------------------------------------------------------- paginação

    def mudar_pagina(self, pagina: int) -> None:
        self.paginacao.ir_para(pagina)

    def mudar_linhas_por_pagina(self, linhas: int) -> None:
        self.paginacao.mudar_linhas_por_pagina(linhas)

    @property
    def pagina(self) -> int:
        return self.paginacao.pagina

    # ----------------------------------------------------------- visão derivada

    @property
    def filtrados(self) -> List[Registro]:
        if self._cache_filtrados is None:
            _, chave = self.config.ordenacoes.get(self.ordenacao, (None, None))
            resultado = aplicar_filtros(self.dados, self.config.filtros, self.filtros)
            self._cache_filtrados = ordenar(resultado, chave)
        return self._cache_filtrados

    @property
    def total_filtrado(self) -> int:
        return len(self.filtrados)

    @property
    def pagina_atual(self) -> List[Registro]:
        return self.paginacao.fatiar(self.filtrados)

    @property
    def resumo(self) -> Tuple[int, int, int]:
        return self.paginacao.resumo(self.total_filtrado)

    @property
    def texto_resumo(self) -> str:
        return self.paginacao.texto_resumo(self.total_filtrado, self.config.rotulo_plural)

    @property
    def total_paginas(self) -> int:
        return self.paginacao.total_paginas(self.total_filtrado)

    # ------------------------------------------------------------ query string

    def aplicar_parametros(self, args: Mapping[str, Any]) -> None:
        """
        Restaura o estado a partir da query string.

        Filtros pré-selecionados pela URL (ex.: ``fornecedor_id``) abrem o
        painel de filtros. A página é aplicada por último, pois qualquer
        filtro volta a paginação para o início, e é limitada à última página
        existente. Tamanhos de página fora das opções são ignorados.
        """
        for filtro in self.config.filtros:
            if filtro.nome not in args:
                continue
            if isinstance(filtro, FiltroMultiplo) and hasattr(args, 'getlist'):
                bruto = args.getlist(filtro.nome)
            else:
                bruto = args.get(filtro.nome)
            valor = filtro.converter(bruto)
            self.definir_filtro(filtro.nome, valor)
            if filtro.no_painel and filtro.ativo(valor):
                self.filtros_expandidos = True

        if args.get('ordenar'):
            self.definir_ordenacao(str(args.get('ordenar')))
        if str(args.get('filtros', '')) == '1':
            self.filtros_expandidos = True

        linhas = _inteiro(args.get('linhas'))
        if linhas in self.opcoes_linhas and linhas != self.paginacao.linhas_por_pagina:
            self.mudar_linhas_por_pagina(linhas)
        pagina = _inteiro(args.get('pagina'))
        if pagina is not None:
            self.mudar_pagina(min(pagina, max(0, self.total_paginas - 1)))

    def parametros(self, **alteracoes) -> Dict[str, Any]:
        """Parâmetros de URL que reproduzem o estado atual da listagem."""
        parametros: Dict[str, Any] = {}
        for filtro in self.config.filtros:
            valor = self.filtros.get(filtro.nome)
            if filtro.ativo(valor):
                parametros[filtro.nome] = valor
        if self.ordenacao != self.config.ordenacao_padrao:
            parametros['ordenar'] = self.ordenacao
        if self.paginacao.linhas_por_pagina != self.linhas_padrao:
            parametros['linhas'] = self.paginacao.linhas_por_pagina
        if self.paginacao.pagina:
            parametros['pagina'] = self.paginacao.pagina
        if self.filtros_expandidos:
            parametros['filtros'] = 1
        for chave, valor in alteracoes.items():
            if valor is None:
                parametros.pop(chave, None)
            else:
                parametros[chave] = valor
        return parametros

    # ----------------------------------------------------------------- diálogos

    def abrir_criacao(self) -> bool:
        if self.dialogo is None:
            return False
        self.dialogo.abrir_criacao()
        return True

    def abrir_edicao(self, identificador: Any) -> bool:
        registro = self.registro(identificador)
        if self.dialogo is None or registro is None:
            return False
        self.dialogo.abrir_edicao(registro)
        return True

    def abrir_exclusao(self, identificador: Any) -> bool:
        registro = self.registro(identificador)
        if self.exclusao is None or registro is None:
            return False
        self.exclusao.abrir(registro)
        return True


def _inteiro(valor: Any) -> Optional[int]:
    if valor in (None, ''):
        return None
    try:
        return int(valor)
    except (TypeError, ValueError):
        return None
