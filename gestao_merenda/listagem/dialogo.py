"""
Diálogos de cadastro e de exclusão
==================================

``DialogoCrud`` segue a máquina de estados FECHADO -> ABERTO -> ENVIANDO ->
FECHADO (sucesso) ou ABERTO com erro. ``DialogoExclusao`` confirma a remoção
e, quando o serviço informa vínculos, passa ao estado de alerta em que só a
exclusão forçada pode ser confirmada.
"""

import enum
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..erros import DependenciasEncontradas, ErroServico, mensagem_de_erro
from .campos import Campo, copiar_para_formulario, ler_formulario, registro_vazio

logger = logging.getLogger(__name__)

ROTULOS_DEPENDENCIAS = {
    'produtos': 'produtos vinculados',
    'contratos': 'contratos vinculados',
    'modalidades': 'modalidades vinculadas',
    'escolas': 'escolas vinculadas',
    'cardapios': 'cardápios vinculados',
    'lotes': 'lotes de estoque vinculados',
    'rotas': 'rotas vinculadas',
    'itens': 'itens no pedido',
    'itens_pedido': 'itens de pedido vinculados',
}


class EstadoDialogo(enum.Enum):
    FECHADO = 'fechado'
    ABERTO = 'aberto'
    ENVIANDO = 'enviando'


class ModoDialogo(enum.Enum):
    CRIAR = 'criar'
    EDITAR = 'editar'


class DialogoCrud:
    """Formulário modal ligado a um registro, em modo de criação ou edição."""

    def __init__(
        self,
        campos: Sequence[Campo],
        criar: Callable[[Dict[str, Any]], Any],
        editar: Callable[[Any, Dict[str, Any]], Any],
        validar: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None,
        ao_salvar: Optional[Callable[[], Any]] = None,
        mensagem_padrao: str = 'Erro ao salvar. Tente novamente.',
    ):
        self.campos = list(campos)
        self._criar = criar
        self._editar = editar
        self._validar = validar
        self._ao_salvar = ao_salvar
        self.mensagem_padrao = mensagem_padrao
        self.estado = EstadoDialogo.FECHADO
        self.modo: Optional[ModoDialogo] = None
        self.registro_id = None
        self.formulario: Dict[str, Any] = registro_vazio(self.campos)
        self.erro: Optional[str] = None
        self.resultado = None

    @property
    def aberto(self) -> bool:
        return self.estado is not EstadoDialogo.FECHADO

    @property
    def processando(self) -> bool:
        return self.estado is EstadoDialogo.ENVIANDO

    @property
    def editando(self) -> bool:
        return self.modo is ModoDialogo.EDITAR

    def abrir_criacao(self) -> None:
        self.modo = ModoDialogo.CRIAR
        self.registro_id = None
        self.formulario = registro_vazio(self.campos)
        self.erro = None
        self.estado = EstadoDialogo.ABERTO

    def abrir_edicao(self, registro: Dict[str, Any]) -> None:
        self.modo = ModoDialogo.EDITAR
        self.registro_id = registro.get('id')
        self.formulario = copiar_para_formulario(registro, self.campos)
        self.erro = None
        self.estado = EstadoDialogo.ABERTO

    def atualizar(self, **valores) -> None:
        nomes = {campo.nome for campo in self.campos}
        for nome, valor in valores.items():
            if nome in nomes:
                self.formulario[nome] = valor

    def preencher(self, dados_formulario) -> None:
        """Copia para o diálogo os valores enviados por um formulário HTML."""
        self.formulario.update(ler_formulario(dados_formulario, self.campos))

    def fechar(self) -> None:
        self.estado = EstadoDialogo.FECHADO
        self.modo = None
        self.registro_id = None
        self.formulario = registro_vazio(self.campos)
        self.erro = None

    def campos_faltando(self) -> List[str]:
        return [
            campo.rotulo for campo in self.campos
            if campo.obrigatorio and not campo.preenchido(self.formulario.get(campo.nome))
        ]

    def payload(self) -> Dict[str, Any]:
        return {campo.nome: self.formulario.get(campo.nome) for campo in self.campos}

    def enviar(self) -> bool:
        """Valida localmente, chama o serviço e fecha o diálogo em caso de sucesso."""
        if self.estado is not EstadoDialogo.ABERTO:
            return False

        faltando = self.campos_faltando()
        if faltando:
            self.erro = f"Preencha os campos obrigatórios: {', '.join(faltando)}"
            return False
        if self._validar is not None:
            mensagem = self._validar(self.formulario)
            if mensagem:
                self.erro = mensagem
                return False

        self.estado = EstadoDialogo.ENVIANDO
        self.erro = None
        try:
            if self.modo is ModoDialogo.EDITAR:
                self.resultado = self._editar(self.registro_id, self.payload())
            else:
                self.resultado = self._criar(self.payload())
        except ErroServico as exc:
            self.erro = mensagem_de_erro(exc, self.mensagem_padrao)
            self.estado = EstadoDialogo.ABERTO
            return False
        except Exception:
            logger.exception("Falha inesperada ao salvar registro")
            self.erro = self.mensagem_padrao
            self.estado = EstadoDialogo.ABERTO
            return False

        self.fechar()
        if self._ao_salvar is not None:
            self._ao_salvar()
        return True


class DialogoExclusao:
    """Confirmação de exclusão com suporte a vínculos e exclusão forçada."""

    def __init__(
        self,
        remover: Callable[..., Any],
        ao_excluir: Optional[Callable[[], Any]] = None,
        mensagem_padrao: str = 'Erro ao remover. Tente novamente.',
    ):
        self._remover = remover
        self._ao_excluir = ao_excluir
        self.mensagem_padrao = mensagem_padrao
        self.registro: Optional[Dict[str, Any]] = None
        self.dependencias: Optional[Dict[str, int]] = None
        self.mensagem_dependencias: Optional[str] = None
        self.forcar = False
        self.erro: Optional[str] = None
        self.processando = False

    @property
    def aberto(self) -> bool:
        return self.registro is not None

    @property
    def em_alerta(self) -> bool:
        return self.dependencias is not None

    @property
    def pode_confirmar(self) -> bool:
        if not self.aberto or self.processando:
            return False
        return self.forcar if self.em_alerta else True

    def abrir(self, registro: Dict[str, Any]) -> None:
        self.registro = registro
        self.dependencias = None
        self.mensagem_dependencias = None
        self.forcar = False
        self.erro = None

    def fechar(self) -> None:
        self.registro = None
        self.dependencias = None
        self.mensagem_dependencias = None
        self.forcar = False
        self.erro = None

    def marcar_forcar(self, valor: bool) -> None:
        self.forcar = bool(valor)

    def itens_dependencias(self) -> List[Tuple[str, int]]:
        if not self.dependencias:
            return []
        return [
            (ROTULOS_DEPENDENCIAS.get(nome, nome), int(quantidade))
            for nome, quantidade in self.dependencias.items()
            if quantidade and int(quantidade) > 0
        ]

    def confirmar(self) -> bool:
        if not self.pode_confirmar:
            return False

        self.processando = True
        self.erro = None
        try:
            self._remover(self.registro.get('id'), forcar=self.forcar)
        except DependenciasEncontradas as exc:
            self.dependencias = dict(exc.dependencias or {})
            self.mensagem_dependencias = exc.mensagem
            self.forcar = False
            return False
        except ErroServico as exc:
            self.erro = mensagem_de_erro(exc, self.mensagem_padrao)
            return False
        except Exception:
            logger.exception("Falha inesperada ao remover registro")
            self.erro = self.mensagem_padrao
            return False
        finally:
            self.processando = False

        self.fechar()
        if self._ao_excluir is not None:
            self._ao_excluir()
        return True
