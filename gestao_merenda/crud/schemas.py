"""
Tipos reutilizados pelos schemas das entidades.

Formulários HTML enviam tudo como texto: campos vazios viram None e
números aceitam o formato brasileiro (1.234,56).
"""

from datetime import date
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

from ..utils.precos import normalizar_opcional, normalizar_preco_brl


def vazio_para_none(valor: Any) -> Any:
    if isinstance(valor, str):
        valor = valor.strip()
        return valor or None
    return valor


def texto_obrigatorio(valor: Any) -> Any:
    if isinstance(valor, str):
        valor = valor.strip()
    if valor in (None, ''):
        raise ValueError('campo obrigatório')
    return valor


def _numero(valor: Any) -> float:
    if valor is None or (isinstance(valor, str) and not valor.strip()):
        raise ValueError('campo obrigatório')
    return normalizar_preco_brl(valor)


def _booleano(valor: Any) -> Any:
    if isinstance(valor, str):
        return valor.strip().lower() in ('1', 'true', 'on', 'sim', 's', 'yes')
    return valor


Texto = Annotated[str, BeforeValidator(texto_obrigatorio)]
TextoOpcional = Annotated[Optional[str], BeforeValidator(vazio_para_none)]
Numero = Annotated[float, BeforeValidator(_numero)]
NumeroOpcional = Annotated[Optional[float], BeforeValidator(normalizar_opcional)]
InteiroOpcional = Annotated[Optional[int], BeforeValidator(vazio_para_none)]
DataOpcional = Annotated[Optional[date], BeforeValidator(vazio_para_none)]
Data = Annotated[date, BeforeValidator(texto_obrigatorio)]
Booleano = Annotated[bool, BeforeValidator(_booleano)]
