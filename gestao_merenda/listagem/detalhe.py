"""
Controlador de páginas de detalhe
=================================

Uma entidade carregada por id, suas coleções relacionadas e os
sub-recursos editáveis (produtos do contrato, modalidades da escola, escolas
da rota). Toda alteração é seguida de recarga completa.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..erros import NaoEncontrado, mensagem_de_erro
from .campos import Campo
from .controlador import Juncao, como_lista
from .dialogo import DialogoCrud, DialogoExclusao
from .filtros import normalizar_texto
from .indice import Indice

logger = logging.getLogger(__name__)


@dataclass
class SubRecurso:
    nome: str
    rotulo: str
    listar: Callable[[int], Any]
    adicionar: Callable[[int, Dict[str, Any]], Any]
    editar: Callable[[int, int, Dict[str, Any]], Any]
    remover: Callable[[int, int], Any]
    campos: Sequence[Campo] = ()
    validar: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None


@dataclass
class ConfigDetalhe:
    rotulo: str
    buscar: Callable[[int], Any]
    editar: Optional[Callable[[int, Dict[str, Any]], Any]] = None
    campos: Sequence[Campo] = ()
    validar: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None
    relacionados: Dict[str, Callable[[], Any]] = field(default_factory=dict)
    juncoes: Sequence[Juncao] = ()
    subrecursos: Sequence[SubRecurso] = ()
    agregados: Dict[str, Callable[['ControladorDetalhe'], Any]] = field(default_factory=dict)
    nao_encontrado: Optional[str] = None
    id_invalido: Optional[str] = None
    mensagem_erro: Optional[str] = None

    def __post_init__(self):
        if not self.nao_encontrado:
            self.nao_encontrado = f"{self.rotulo} não encontrado."
        if not self.id_invalido:
            self.id_invalido = f"ID de {self.rotulo.lower()} inválido"
        if not self.mensagem_erro:
            self.mensagem_erro = f"Erro ao carregar {self.rotulo.lower()}. Tente novamente."


class ControladorDetalhe:

    def __init__(self, config: ConfigDetalhe, identificador: Any):
        self.config = config
        self.identificador = _id_valido(identificador)
        self.entidade: Optional[Dict[str, Any]] = None
        self.relacionados: Dict[str, List[Dict[str, Any]]] = {}
        self.indices: Dict[str, Indice] = {}
        self.itens: Dict[str, List[Dict[str, Any]]] = {}
        self.carregando = False
        self.erro: Optional[str] = None
        self.nao_encontrado = False

        self.edicao: Optional[DialogoCrud] = None
        if config.editar is not None and config.campos:
            self.edicao = DialogoCrud(
                config.campos,
                criar=self._salvar_entidade,
                editar=lambda _id, payload: self._salvar_entidade(payload),
                validar=config.validar,
                ao_salvar=self.recarregar,
            )

        self.dialogos: Dict[str, DialogoCrud] = {}
        self.exclusoes: Dict[str, DialogoExclusao] = {}
        for sub in config.subrecursos:
            self.dialogos[sub.nome] = DialogoCrud(
                sub.campos,
                criar=self._adicionar(sub),
                editar=self._editar(sub),
                validar=sub.validar,
                ao_salvar=self.recarregar,
            )
            self.exclusoes[sub.nome] = DialogoExclusao(
                self._remover(sub), ao_excluir=self.recarregar
            )

    # ------------------------------------------------------------------ carga

    def carregar(self) -> bool:
        self.erro = None
        self.nao_encontrado = False
        if self.identificador is None:
            self.erro = self.config.id_invalido
            return False

        self.carregando = True
        try:
            entidade = self.config.buscar(self.identificador)
            relacionados = {nome: buscar() for nome, buscar in self.config.relacionados.items()}
            itens = {sub.nome: sub.listar(self.identificador) for sub in self.config.subrecursos}
        except NaoEncontrado as exc:
            self.nao_encontrado = True
            self.erro = mensagem_de_erro(exc, self.config.mensagem_erro, self.config.nao_encontrado)
            return False
        except Exception:
            logger.exception("Falha ao carregar %s %s", self.config.rotulo, self.identificador)
            self.erro = self.config.mensagem_erro
            return False
        finally:
            self.carregando = False

        if not entidade:
            self.nao_encontrado = True
            self.erro = self.config.nao_encontrado
            return False

        self.entidade = dict(entidade)
        self.relacionados = {nome: como_lista(valor) for nome, valor in relacionados.items()}
        self.indices = {nome: Indice(valor) for nome, valor in self.relacionados.items()}
        for juncao in self.config.juncoes:
            indice = self.indices.get(juncao.colecao)
            self.entidade[juncao.destino] = (
                indice.rotulo(self.entidade.get(juncao.campo_id), juncao.campo) if indice else None
            )
        self.itens = {nome: como_lista(valor) for nome, valor in itens.items()}
        return True

    recarregar = carregar

    # ----------------------------------------------------------- edição inline

    @property
    def editando(self) -> bool:
        return self.edicao is not None and self.edicao.aberto

    def iniciar_edicao(self) -> bool:
        if self.edicao is None or self.entidade is None:
            return False
        self.edicao.abrir_edicao(self.entidade)
        return True

    def _salvar_entidade(self, payload: Dict[str, Any]):
        return self.config.editar(self.identificador, payload)

    # ------------------------------------------------------------ sub-recursos

    def _adicionar(self, sub: SubRecurso):
        return lambda payload: sub.adicionar(self.identificador, payload)

    def _editar(self, sub: SubRecurso):
        return lambda item_id, payload: sub.editar(self.identificador, item_id, payload)

    def _remover(self, sub: SubRecurso):
        # Vínculos de sub-recursos não têm dependências próprias
        return lambda item_id, forcar=False: sub.remover(self.identificador, item_id)

    def item(self, nome: str, item_id: Any) -> Optional[Dict[str, Any]]:
        encontrado = Indice(self.itens.get(nome, [])).resolver(item_id)
        return encontrado or None

    def abrir_item(self, nome: str, item_id: Any = None) -> bool:
        dialogo = self.dialogos.get(nome)
        if dialogo is None:
            return False
        if item_id in (None, ''):
            dialogo.abrir_criacao()
            return True
        registro = self.item(nome, item_id)
        if registro is None:
            return False
        dialogo.abrir_edicao(registro)
        return True

    def abrir_exclusao_item(self, nome: str, item_id: Any) -> bool:
        exclusao = self.exclusoes.get(nome)
        registro = self.item(nome, item_id)
        if exclusao is None or registro is None:
            return False
        exclusao.abrir(registro)
        return True

    # ---------------------------------------------------------------- agregados

    @property
    def agregados(self) -> Dict[str, Any]:
        if self.entidade is None:
            return {}
        return {nome: calcular(self) for nome, calcular in self.config.agregados.items()}


def _id_valido(identificador: Any) -> Optional[int]:
    try:
        valor = int(identificador)
    except (TypeError, ValueError):
        return None
    return valor if valor > 0 else None


def _numero(valor: Any) -> float:
    if valor in (None, ''):
        return 0.0
    try:
        return float(valor)
    except (TypeError, ValueError):
        return 0.0


def _valor_item(item: Dict[str, Any]) -> float:
    quantidade = item.get('quantidade_contratada', item.get('quantidade', item.get('limite')))
    preco = item.get('preco_unitario', item.get('preco'))
    return _numero(quantidade) * _numero(preco)


def calcular_valor_total_contrato(itens: Iterable[Dict[str, Any]]) -> float:
    """Σ quantidade × preço unitário dos itens do contrato."""
    return round(sum(_valor_item(item) for item in itens or ()), 2)


def calcular_valor_total_pedido(itens: Iterable[Dict[str, Any]]) -> float:
    return round(sum(_valor_item(item) for item in itens or ()), 2)


def agrupar_por_fornecedor(itens: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Itens agrupados pelo fornecedor, com quantidade de itens e subtotal.
    Grupos em ordem alfabética; itens sem fornecedor ficam em "Sem fornecedor".
    """
    grupos: Dict[str, List[Dict[str, Any]]] = {}
    for item in itens or ():
        grupos.setdefault(item.get('fornecedor_nome') or 'Sem fornecedor', []).append(item)
    return [
        {
            'fornecedor_nome': nome,
            'quantidade_itens': len(grupo),
            'valor_total': calcular_valor_total_pedido(grupo),
            'itens': grupo,
        }
        for nome, grupo in sorted(grupos.items(), key=lambda par: normalizar_texto(par[0]))
    ]


def calcular_total_alunos(itens: Iterable[Dict[str, Any]]) -> int:
    return int(sum(_numero(item.get('quantidade_alunos')) for item in itens or ()))
