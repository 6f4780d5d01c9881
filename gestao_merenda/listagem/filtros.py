"""
Filtros das listagens
=====================

Cada filtro projeta um campo do registro em um predicado. Os filtros são
combinados por E lógico e um filtro sem valor selecionado aceita qualquer
registro.
"""

import unicodedata
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

Registro = Dict[str, Any]
Extrator = Union[str, Callable[[Registro], Any]]

STATUS_TODOS = ''
STATUS_ATIVO = 'ativo'
STATUS_INATIVO = 'inativo'


def normalizar_texto(valor: Any) -> str:
    """Texto sem acentos e em caixa baixa; None vira string vazia."""
    if valor is None:
        return ''
    texto = unicodedata.normalize('NFKD', str(valor))
    texto = ''.join(c for c in texto if not unicodedata.combining(c))
    return texto.casefold().strip()


def extrair(registro: Registro, extrator: Extrator) -> Any:
    if callable(extrator):
        return extrator(registro)
    return registro.get(extrator)


def valor_vazio(valor: Any) -> bool:
    if valor is None:
        return True
    if isinstance(valor, str):
        return not valor.strip()
    if isinstance(valor, (list, tuple, set, frozenset)):
        return len(valor) == 0
    return False


class Filtro:
    """Base dos filtros: `nome` é a chave no estado de filtros."""

    nome: str = ''
    padrao: Any = ''
    # Filtros de busca ficam fora do painel recolhível
    no_painel = True

    def ativo(self, valor: Any) -> bool:
        return not valor_vazio(valor)

    def aceita(self, registro: Registro, valor: Any) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def converter(self, bruto: Any) -> Any:
        """Converte o valor recebido da query string."""
        if bruto is None:
            return self.padrao
        return str(bruto).strip()


class FiltroBusca(Filtro):
    """Busca textual (substring, sem diferenciar maiúsculas) em um ou mais campos."""

    no_painel = False

    def __init__(self, campos: Sequence[Extrator] = ('nome',), nome: str = 'busca'):
        self.nome = nome
        self.campos = tuple(campos)

    def aceita(self, registro: Registro, valor: Any) -> bool:
        termo = normalizar_texto(valor)
        if not termo:
            return True
        return any(termo in normalizar_texto(extrair(registro, campo)) for campo in self.campos)

    def converter(self, bruto: Any) -> str:
        return '' if bruto is None else str(bruto)


class FiltroCategoria(Filtro):
    """Igualdade exata contra um valor selecionado (enum ou id)."""

    def __init__(self, nome: str, campo: Extrator, conversor: Optional[Callable[[Any], Any]] = None):
        self.nome = nome
        self.campo = campo
        self.conversor = conversor

    def aceita(self, registro: Registro, valor: Any) -> bool:
        if valor_vazio(valor):
            return True
        return extrair(registro, self.campo) == valor

    def converter(self, bruto: Any) -> Any:
        texto = super().converter(bruto)
        if not texto or self.conversor is None:
            return texto
        try:
            return self.conversor(texto)
        except (TypeError, ValueError):
            return ''


class FiltroStatus(Filtro):
    """
    Seletor de três estados (todos / ativo / inativo) sobre o campo `ativo`.

    Telas com status calculado (ex.: contratos) informam `extrator`, que deve
    devolver o código do status comparado diretamente com o valor escolhido.
    """

    def __init__(self, nome: str = 'status', campo: str = 'ativo', extrator: Optional[Callable[[Registro], str]] = None):
        self.nome = nome
        self.campo = campo
        self.extrator = extrator

    def aceita(self, registro: Registro, valor: Any) -> bool:
        if valor_vazio(valor):
            return True
        if self.extrator is not None:
            return self.extrator(registro) == valor
        ativo = bool(registro.get(self.campo))
        if valor == STATUS_ATIVO:
            return ativo
        if valor == STATUS_INATIVO:
            return not ativo
        return True


class FiltroMultiplo(Filtro):
    """Aceita o registro se suas etiquetas tiverem interseção com a seleção."""

    def __init__(self, nome: str, etiquetas: Callable[[Registro], Iterable[str]]):
        self.nome = nome
        self.etiquetas = etiquetas
        self.padrao = []

    def aceita(self, registro: Registro, valor: Any) -> bool:
        if valor_vazio(valor):
            return True
        return bool(set(self.etiquetas(registro) or ()) & set(valor))

    def converter(self, bruto: Any) -> List[str]:
        if bruto is None:
            return []
        if isinstance(bruto, str):
            bruto = [bruto]
        return [str(item).strip() for item in bruto if str(item).strip()]


class FiltroData(Filtro):
    """
    Limite de data sobre um campo em ISO (`AAAA-MM-DD`). `limite` indica se o
    valor escolhido é o início (registros a partir dele) ou o fim do intervalo.
    """

    def __init__(self, nome: str, campo: Extrator, limite: str = 'inicio'):
        self.nome = nome
        self.campo = campo
        self.limite = limite

    def aceita(self, registro: Registro, valor: Any) -> bool:
        if valor_vazio(valor):
            return True
        data = str(extrair(registro, self.campo) or '')[:10]
        if not data:
            return False
        return data >= valor if self.limite == 'inicio' else data <= valor

    def converter(self, bruto: Any) -> str:
        texto = super().converter(bruto)
        try:
            return date.fromisoformat(texto).isoformat() if texto else ''
        except ValueError:
            return ''


def aplicar_filtros(registros: Iterable[Registro], filtros: Sequence[Filtro], estado: Dict[str, Any]) -> List[Registro]:
    """Mantém os registros que satisfazem todos os filtros com valor."""
    ativos = [(f, estado.get(f.nome)) for f in filtros if f.ativo(estado.get(f.nome))]
    return [r for r in registros if all(f.aceita(r, valor) for f, valor in ativos)]


def chave_texto(campo: Extrator) -> Callable[[Registro], str]:
    """Chave de ordenação textual, indiferente a acentos e caixa."""
    return lambda registro: normalizar_texto(extrair(registro, campo))


def chave_numero(campo: Extrator, decrescente: bool = False) -> Callable[[Registro], float]:
    def _chave(registro: Registro) -> float:
        valor = extrair(registro, campo)
        try:
            numero = float(valor) if valor not in (None, '') else 0.0
        except (TypeError, ValueError):
            numero = 0.0
        return -numero if decrescente else numero
    return _chave


def ordenar(registros: Iterable[Registro], chave: Optional[Callable[[Registro], Any]]) -> List[Registro]:
    lista = list(registros)
    if chave is None:
        return lista
    return sorted(lista, key=chave)


def valores_distintos(registros: Iterable[Registro], extrator: Extrator) -> List[Any]:
    """Valores únicos, não vazios e ordenados presentes na coleção carregada."""
    valores = set()
    for registro in registros:
        valor = extrair(registro, extrator)
        if isinstance(valor, (list, tuple, set)):
            valores.update(v for v in valor if v)
        elif valor:
            valores.add(valor)
    return sorted(valores, key=normalizar_texto)


def separar_etiquetas(texto: Optional[str], separador: str = ',') -> List[str]:
    if not texto:
        return []
    return [parte.strip() for parte in str(texto).split(separador) if parte.strip()]
