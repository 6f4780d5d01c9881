"""
Schemas para o módulo de Escolas
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..crud.schemas import Booleano, Texto, TextoOpcional

TIPOS_ADMINISTRACAO = ('municipal', 'estadual', 'federal', 'particular')


class EscolaCreateSchema(BaseModel):
    nome: Texto
    codigo: TextoOpcional = None
    codigo_acesso: TextoOpcional = None
    endereco: TextoOpcional = None
    municipio: TextoOpcional = None
    endereco_maps: TextoOpcional = None
    telefone: TextoOpcional = None
    email: TextoOpcional = None
    nome_gestor: TextoOpcional = None
    administracao: TextoOpcional = None
    ativo: Booleano = True

    @field_validator('administracao')
    @classmethod
    def validar_administracao(cls, valor: Optional[str]) -> Optional[str]:
        if valor is None:
            return valor
        valor = valor.lower()
        if valor not in TIPOS_ADMINISTRACAO:
            raise ValueError(f"Administração deve ser uma de: {', '.join(TIPOS_ADMINISTRACAO)}")
        return valor

    @field_validator('codigo_acesso')
    @classmethod
    def validar_codigo_acesso(cls, valor: Optional[str]) -> Optional[str]:
        if valor is not None and not re.fullmatch(r'\d{6}', valor):
            raise ValueError('Código de acesso deve ter 6 dígitos')
        return valor

    @field_validator('email')
    @classmethod
    def validar_email(cls, valor: Optional[str]) -> Optional[str]:
        if valor and not re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', valor):
            raise ValueError('E-mail inválido')
        return valor


class EscolaSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    codigo: Optional[str] = None
    codigo_acesso: Optional[str] = None
    endereco: Optional[str] = None
    municipio: Optional[str] = None
    endereco_maps: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    nome_gestor: Optional[str] = None
    administracao: Optional[str] = None
    ativo: bool = True


class EscolaModalidadeCreateSchema(BaseModel):
    modalidade_id: int
    quantidade_alunos: int

    @field_validator('quantidade_alunos')
    @classmethod
    def validar_quantidade(cls, valor: int) -> int:
        if valor < 0:
            raise ValueError('Quantidade de alunos não pode ser negativa')
        return valor


class EscolaModalidadeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    escola_id: int
    modalidade_id: int
    quantidade_alunos: int = 0
