"""Formatação de valores para exibição (padrão brasileiro)."""

from datetime import date, datetime
from typing import Any


def _numero(valor: Any) -> float:
    if valor in (None, ''):
        return 0.0
    try:
        return float(valor)
    except (TypeError, ValueError):
        return 0.0


def formatar_numero(valor: Any, casas: int = 2) -> str:
    """1234.5 -> '1.234,50'"""
    texto = f"{_numero(valor):,.{casas}f}"
    return texto.replace(',', '_').replace('.', ',').replace('_', '.')


def formatar_moeda(valor: Any) -> str:
    """250.0 -> 'R$ 250,00'"""
    numero = _numero(valor)
    sinal = '-' if numero < 0 else ''
    return f"{sinal}R$ {formatar_numero(abs(numero))}"


def formatar_data(valor: Any) -> str:
    if not valor:
        return ''
    if isinstance(valor, str):
        try:
            valor = date.fromisoformat(valor[:10])
        except ValueError:
            return valor
    if isinstance(valor, (date, datetime)):
        return valor.strftime('%d/%m/%Y')
    return str(valor)
