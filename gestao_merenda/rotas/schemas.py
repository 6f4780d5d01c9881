import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, InteiroOpcional, Texto, TextoOpcional

COR_PADRAO = '#1976d2'
_COR_HEX = re.compile(r'^#[0-9a-fA-F]{6}$')


class RotaCreateSchema(BaseModel):
    nome: Texto
    descricao: TextoOpcional = None
    cor: TextoOpcional = COR_PADRAO
    ativo: Booleano = True

    @field_validator('cor')
    @classmethod
    def validar_cor(cls, valor: Optional[str]) -> str:
        if valor is None:
            return COR_PADRAO
        if not _COR_HEX.match(valor):
            raise ValueError('Cor deve estar no formato #RRGGBB')
        return valor.lower()


class RotaSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    descricao: Optional[str] = None
    cor: Optional[str] = None
    ativo: bool = True


class RotaEscolaCreateSchema(BaseModel):
    escola_id: int
    ordem: InteiroOpcional = 0

    @field_validator('ordem')
    @classmethod
    def validar_ordem(cls, valor: Optional[int]) -> int:
        if valor is None:
            return 0
        if valor < 0:
            raise ValueError('Ordem não pode ser negativa')
        return valor


class RotaEscolaSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rota_id: int
    escola_id: int
    ordem: int = 0
