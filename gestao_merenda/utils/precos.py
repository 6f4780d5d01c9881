import re
from decimal import Decimal
from typing import Optional, Union


class PrecoInvalidoError(ValueError):
    """Erro lançado quando o valor digitado é inválido."""


def normalizar_preco_brl(valor: Union[str, float, int, Decimal, None]) -> float:
    """
    Converte valores digitados no formato brasileiro (R$ 1.234,50) ou com
    ponto decimal (1234.50) para float.
    """
    if valor is None:
        raise PrecoInvalidoError("Informe o valor.")

    if isinstance(valor, (int, float, Decimal)) and not isinstance(valor, bool):
        return float(valor)

    valor_str = str(valor).strip()
    valor_str = valor_str.replace('R$', '').replace('\xa0', '').replace(' ', '')
    if not valor_str:
        raise PrecoInvalidoError("Informe o valor.")

    valor_permitido = re.sub(r'[^0-9,.-]', '', valor_str)
    if ',' in valor_permitido:
        # Formato brasileiro: ponto separa milhar, vírgula separa centavos
        valor_permitido = valor_permitido.replace('.', '').replace(',', '.')

    try:
        return float(valor_permitido)
    except ValueError:
        raise PrecoInvalidoError(f"Valor inválido: {valor}")


def normalizar_opcional(valor) -> Optional[float]:
    """Como `normalizar_preco_brl`, mas campo vazio vira None."""
    if valor is None or (isinstance(valor, str) and not valor.strip()):
        return None
    return normalizar_preco_brl(valor)
