"""Índice de leitura para resolver referências entre coleções carregadas."""

from typing import Any, Dict, Iterable, Optional


class _NaoResolvido:
    """Sentinela de referência sem registro correspondente na coleção."""

    _instancia = None

    def __new__(cls):
        if cls._instancia is None:
            cls._instancia = super().__new__(cls)
        return cls._instancia

    def __bool__(self):
        return False

    def __repr__(self):
        return 'NAO_RESOLVIDO'


NAO_RESOLVIDO = _NaoResolvido()


class Indice:
    """
    Tabela id -> registro construída uma vez por carga da coleção.

    A junção vale apenas até a próxima carga: não há integridade referencial
    entre coleções carregadas em momentos diferentes.
    """

    def __init__(self, registros: Iterable[Dict[str, Any]], chave: str = 'id'):
        self.chave = chave
        self._tabela: Dict[Any, Dict[str, Any]] = {}
        for registro in registros or ():
            identificador = registro.get(chave)
            if identificador is not None:
                self._tabela[self._normalizar(identificador)] = registro

    @staticmethod
    def _normalizar(identificador: Any) -> Any:
        try:
            return int(identificador)
        except (TypeError, ValueError):
            return identificador

    def resolver(self, identificador: Any):
        if identificador in (None, ''):
            return NAO_RESOLVIDO
        return self._tabela.get(self._normalizar(identificador), NAO_RESOLVIDO)

    def rotulo(self, identificador: Any, campo: str = 'nome', padrao: Optional[str] = None) -> Optional[str]:
        registro = self.resolver(identificador)
        if registro is NAO_RESOLVIDO:
            return padrao
        return registro.get(campo)

    def registros(self):
        return list(self._tabela.values())

    def __len__(self):
        return len(self._tabela)

    def __contains__(self, identificador):
        return self.resolver(identificador) is not NAO_RESOLVIDO
