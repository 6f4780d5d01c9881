from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, DataOpcional, Numero, Texto


class EstoqueLoteCreateSchema(BaseModel):
    produto_id: int
    lote: Texto
    quantidade: Numero
    data_validade: DataOpcional = None
    ativo: Booleano = True

    @field_validator('quantidade')
    @classmethod
    def validar_quantidade(cls, valor: float) -> float:
        if valor <= 0:
            raise ValueError('Quantidade deve ser maior que zero')
        return valor


class EstoqueLoteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    produto_id: int
    lote: str
    quantidade: float
    data_validade: Optional[date] = None
    ativo: bool = True
