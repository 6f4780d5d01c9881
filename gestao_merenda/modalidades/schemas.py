"""
Schemas para o módulo de Modalidades
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, NumeroOpcional, Texto, TextoOpcional


class ModalidadeCreateSchema(BaseModel):
    nome: Texto
    codigo_financeiro: TextoOpcional = None
    valor_repasse: NumeroOpcional = None
    ativo: Booleano = True

    @field_validator('valor_repasse')
    @classmethod
    def validar_repasse(cls, valor: Optional[float]) -> Optional[float]:
        if valor is not None and valor < 0:
            raise ValueError('Valor de repasse não pode ser negativo')
        return valor


class ModalidadeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    codigo_financeiro: Optional[str] = None
    valor_repasse: Optional[float] = None
    ativo: bool = True
