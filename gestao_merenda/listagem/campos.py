"""Descrição dos campos editáveis usados pelos diálogos e formulários."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

Opcao = Tuple[Any, str]
FonteOpcoes = Union[Sequence[Opcao], Callable[[Dict[str, list]], Sequence[Opcao]]]

VALORES_VERDADEIROS = {'1', 'true', 'on', 'sim', 's', 'yes'}


@dataclass
class Campo:
    nome: str
    rotulo: str
    tipo: str = 'texto'  # texto, area, numero, inteiro, data, email, booleano, selecao, cor
    obrigatorio: bool = False
    padrao: Any = ''
    opcoes: Optional[FonteOpcoes] = None

    def ler(self, formulario: Mapping[str, Any]) -> Any:
        """Lê o valor enviado por um formulário HTML."""
        if self.tipo == 'booleano':
            bruto = formulario.get(self.nome)
            if isinstance(bruto, bool):
                return bruto
            return str(bruto or '').strip().lower() in VALORES_VERDADEIROS
        bruto = formulario.get(self.nome)
        if bruto is None:
            return ''
        return str(bruto).strip()

    def preenchido(self, valor: Any) -> bool:
        if self.tipo == 'booleano':
            return True
        if valor is None:
            return False
        return str(valor).strip() != ''

    def listar_opcoes(self, auxiliares: Optional[Dict[str, list]] = None) -> List[Opcao]:
        if self.opcoes is None:
            return []
        if callable(self.opcoes):
            return list(self.opcoes(auxiliares or {}))
        return list(self.opcoes)


def registro_vazio(campos: Sequence[Campo]) -> Dict[str, Any]:
    return {campo.nome: campo.padrao for campo in campos}


def copiar_para_formulario(registro: Mapping[str, Any], campos: Sequence[Campo]) -> Dict[str, Any]:
    """Cópia rasa dos campos editáveis com None convertido em string vazia."""
    formulario = {}
    for campo in campos:
        valor = registro.get(campo.nome)
        formulario[campo.nome] = '' if valor is None else valor
    return formulario


def ler_formulario(formulario: Mapping[str, Any], campos: Sequence[Campo]) -> Dict[str, Any]:
    return {campo.nome: campo.ler(formulario) for campo in campos}


def opcoes_de_colecao(colecao: str, rotulo: str = 'nome', somente_ativos: bool = False):
    """Opções de seleção montadas a partir de uma coleção auxiliar carregada."""
    def _opcoes(auxiliares: Dict[str, list]) -> List[Opcao]:
        registros = auxiliares.get(colecao) or []
        if somente_ativos:
            registros = [r for r in registros if r.get('ativo', True)]
        return [(r.get('id'), r.get(rotulo) or '') for r in registros]
    return _opcoes


def validar_periodo(formulario: Mapping[str, Any]) -> Optional[str]:
    """Fim posterior ao início; datas de campo `date` chegam em ISO, então a comparação textual basta."""
    inicio = str(formulario.get('data_inicio') or '')
    fim = str(formulario.get('data_fim') or '')
    if inicio and fim and fim <= inicio:
        return 'Data de fim deve ser posterior à data de início'
    return None
