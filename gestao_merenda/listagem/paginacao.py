"""Paginação em memória das listagens."""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar('T')

OPCOES_LINHAS_POR_PAGINA = (5, 10, 25, 50, 100)


@dataclass
class Paginacao:
    pagina: int = 0
    linhas_por_pagina: int = 10

    def __post_init__(self):
        self.pagina = max(0, int(self.pagina or 0))
        if int(self.linhas_por_pagina or 0) <= 0:
            self.linhas_por_pagina = 10
        self.linhas_por_pagina = int(self.linhas_por_pagina)

    def ir_para(self, pagina: int) -> None:
        self.pagina = max(0, int(pagina))

    def mudar_linhas_por_pagina(self, linhas: int) -> None:
        """Trocar o tamanho da página sempre volta para a primeira página."""
        linhas = int(linhas)
        if linhas <= 0:
            raise ValueError('Linhas por página deve ser maior que zero')
        self.linhas_por_pagina = linhas
        self.pagina = 0

    def reiniciar(self) -> None:
        self.pagina = 0

    @property
    def inicio(self) -> int:
        return self.pagina * self.linhas_por_pagina

    def fatiar(self, itens: Sequence[T]) -> List[T]:
        return list(itens[self.inicio:self.inicio + self.linhas_por_pagina])

    def total_paginas(self, total: int) -> int:
        if total <= 0:
            return 0
        return (total + self.linhas_por_pagina - 1) // self.linhas_por_pagina

    def resumo(self, total: int) -> Tuple[int, int, int]:
        """(primeiro, último, total) exibidos em "Mostrando a-b de total"."""
        primeiro = min(self.inicio + 1, total)
        ultimo = min((self.pagina + 1) * self.linhas_por_pagina, total)
        return primeiro, ultimo, total

    def texto_resumo(self, total: int, rotulo: str = 'registros') -> str:
        primeiro, ultimo, total = self.resumo(total)
        return f"Mostrando {primeiro}-{ultimo} de {total} {rotulo}"

    def tem_anterior(self) -> bool:
        return self.pagina > 0

    def tem_proxima(self, total: int) -> bool:
        return (self.pagina + 1) * self.linhas_por_pagina < total
