from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..crud.schemas import Booleano, DataOpcional, InteiroOpcional, Texto


class CardapioCreateSchema(BaseModel):
    nome: Texto
    modalidade_id: InteiroOpcional = None
    periodo_dias: InteiroOpcional = None
    data_inicio: DataOpcional = None
    data_fim: DataOpcional = None
    ativo: Booleano = True

    @field_validator('periodo_dias')
    @classmethod
    def validar_periodo_dias(cls, valor: Optional[int]) -> Optional[int]:
        if valor is not None and valor < 1:
            raise ValueError('Período deve ter ao menos 1 dia')
        return valor

    @model_validator(mode='after')
    def validar_datas(self):
        if self.data_inicio and self.data_fim and self.data_fim <= self.data_inicio:
            raise ValueError('Data de fim deve ser posterior à data de início')
        return self


class CardapioSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    modalidade_id: Optional[int] = None
    periodo_dias: Optional[int] = None
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    ativo: bool = True
