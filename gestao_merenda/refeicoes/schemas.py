from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, Texto, TextoOpcional
from ..models import TipoRefeicao, enum_values

TIPOS_REFEICAO = enum_values(TipoRefeicao)

ROTULOS_TIPO = {
    'cafe_manha': 'Café da manhã',
    'almoco': 'Almoço',
    'lanche': 'Lanche',
    'jantar': 'Jantar',
    'ceia': 'Ceia',
}


class RefeicaoCreateSchema(BaseModel):
    nome: Texto
    descricao: TextoOpcional = None
    tipo: TextoOpcional = None
    ativo: Booleano = True

    @field_validator('tipo')
    @classmethod
    def validar_tipo(cls, valor: Optional[str]) -> Optional[str]:
        if valor is not None and valor not in TIPOS_REFEICAO:
            raise ValueError(f"Tipo deve ser um de: {', '.join(TIPOS_REFEICAO)}")
        return valor


class RefeicaoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    descricao: Optional[str] = None
    tipo: Optional[str] = None
    ativo: bool = True
