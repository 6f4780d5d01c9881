"""
Schemas para o módulo de Produtos
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, InteiroOpcional, NumeroOpcional, Texto, TextoOpcional

UNIDADES = ('kg', 'g', 'l', 'ml', 'un', 'cx', 'pct', 'dz')
TIPOS_PROCESSAMENTO = ('in natura', 'minimamente processado', 'processado', 'ultraprocessado')


class ProdutoCreateSchema(BaseModel):
    nome: Texto
    descricao: TextoOpcional = None
    unidade: TextoOpcional = 'kg'
    categoria: TextoOpcional = None
    marca: TextoOpcional = None
    codigo_barras: TextoOpcional = None
    peso: NumeroOpcional = None
    validade_minima: InteiroOpcional = None
    fator_divisao: NumeroOpcional = None
    tipo_processamento: TextoOpcional = None
    preco_referencia: NumeroOpcional = None
    estoque_minimo: NumeroOpcional = None
    ativo: Booleano = True

    @field_validator('unidade')
    @classmethod
    def validar_unidade(cls, valor: Optional[str]) -> Optional[str]:
        if valor is None:
            return valor
        valor = valor.lower()
        if valor not in UNIDADES:
            raise ValueError(f"Unidade deve ser uma de: {', '.join(UNIDADES)}")
        return valor

    @field_validator('tipo_processamento')
    @classmethod
    def validar_tipo_processamento(cls, valor: Optional[str]) -> Optional[str]:
        if valor is None:
            return valor
        valor = valor.lower()
        if valor not in TIPOS_PROCESSAMENTO:
            raise ValueError(f"Tipo de processamento deve ser um de: {', '.join(TIPOS_PROCESSAMENTO)}")
        return valor

    @field_validator('peso', 'fator_divisao', 'preco_referencia', 'estoque_minimo', 'validade_minima')
    @classmethod
    def validar_nao_negativo(cls, valor):
        if valor is not None and valor < 0:
            raise ValueError('Valor não pode ser negativo')
        return valor


class ProdutoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    descricao: Optional[str] = None
    unidade: Optional[str] = None
    categoria: Optional[str] = None
    marca: Optional[str] = None
    codigo_barras: Optional[str] = None
    peso: Optional[float] = None
    validade_minima: Optional[int] = None
    fator_divisao: Optional[float] = None
    tipo_processamento: Optional[str] = None
    preco_referencia: Optional[float] = None
    estoque_minimo: Optional[float] = None
    ativo: bool = True
