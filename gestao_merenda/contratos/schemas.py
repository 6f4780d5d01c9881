"""
Schemas para o módulo de Contratos
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..crud.schemas import Booleano, Data, Numero, Texto


class ContratoCreateSchema(BaseModel):
    fornecedor_id: int
    numero: Texto
    data_inicio: Data
    data_fim: Data
    ativo: Booleano = True

    @model_validator(mode='after')
    def validar_periodo(self):
        if self.data_fim <= self.data_inicio:
            raise ValueError('Data de fim deve ser posterior à data de início')
        return self


class ContratoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fornecedor_id: int
    numero: str
    data_inicio: date
    data_fim: date
    ativo: bool = True


class ContratoProdutoCreateSchema(BaseModel):
    produto_id: int
    quantidade_contratada: Numero
    preco_unitario: Numero

    @field_validator('quantidade_contratada', 'preco_unitario')
    @classmethod
    def validar_nao_negativo(cls, valor: float) -> float:
        if valor < 0:
            raise ValueError('Valor não pode ser negativo')
        return valor


class ContratoProdutoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contrato_id: int
    produto_id: int
    quantidade_contratada: float
    preco_unitario: float
