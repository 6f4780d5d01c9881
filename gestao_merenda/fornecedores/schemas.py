"""
Schemas para o módulo de Fornecedores
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, Texto, TextoOpcional


def somente_digitos(valor: Optional[str]) -> str:
    return re.sub(r'\D', '', valor or '')


class FornecedorCreateSchema(BaseModel):
    nome: Texto
    cnpj: Texto
    email: TextoOpcional = None
    ativo: Booleano = True

    @field_validator('cnpj')
    @classmethod
    def validar_cnpj(cls, valor: str) -> str:
        digitos = somente_digitos(valor)
        if len(digitos) != 14:
            raise ValueError('CNPJ deve ter 14 dígitos')
        return digitos

    @field_validator('email')
    @classmethod
    def validar_email(cls, valor: Optional[str]) -> Optional[str]:
        if valor and not re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', valor):
            raise ValueError('E-mail inválido')
        return valor


class FornecedorSchema(BaseModel):
    """Schema de resposta do fornecedor"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    cnpj: str
    email: Optional[str] = None
    ativo: bool = True
