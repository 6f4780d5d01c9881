"""
Schemas para o módulo de Pedidos
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Data, Numero, Texto, TextoOpcional
from ..models import StatusPedido, enum_values

STATUS_PEDIDO = enum_values(StatusPedido)

ROTULOS_STATUS = {
    'rascunho': 'Rascunho',
    'pendente': 'Pendente',
    'aprovado': 'Aprovado',
    'em_separacao': 'Em separação',
    'enviado': 'Enviado',
    'entregue': 'Entregue',
    'cancelado': 'Cancelado',
}


class PedidoCreateSchema(BaseModel):
    numero: Texto
    data_pedido: Data
    status: str = StatusPedido.RASCUNHO.value
    observacoes: TextoOpcional = None

    @field_validator('status', mode='before')
    @classmethod
    def validar_status(cls, valor):
        if valor in (None, ''):
            return StatusPedido.RASCUNHO.value
        if valor not in STATUS_PEDIDO:
            raise ValueError(f"Status deve ser um de: {', '.join(STATUS_PEDIDO)}")
        return valor


class PedidoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    numero: str
    data_pedido: date
    status: str
    observacoes: Optional[str] = None


class PedidoItemCreateSchema(BaseModel):
    contrato_produto_id: int
    quantidade: Numero
    data_entrega_prevista: Data
    observacoes: TextoOpcional = None

    @field_validator('quantidade')
    @classmethod
    def validar_quantidade(cls, valor: float) -> float:
        if valor <= 0:
            raise ValueError('Quantidade deve ser maior que zero')
        return valor


class PedidoItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pedido_id: int
    contrato_produto_id: int
    quantidade: float
    data_entrega_prevista: date
    observacoes: Optional[str] = None
