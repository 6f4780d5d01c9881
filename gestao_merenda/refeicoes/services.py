"""
Serviços para o módulo de Refeições
"""

from typing import Any, Dict

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud
from ..models import Refeicao
from .schemas import ROTULOS_TIPO, RefeicaoCreateSchema, RefeicaoSchema


class RefeicaoRepository(RepositorioBase):
    model_cls = Refeicao


class RefeicaoService(ServicoCrud):
    repositorio_cls = RefeicaoRepository
    schema_criacao = RefeicaoCreateSchema
    schema_resposta = RefeicaoSchema
    rotulo = 'Refeição'
    nao_encontrado = 'Refeição não encontrada'

    def campos_derivados(self, registro) -> Dict[str, Any]:
        return {'tipo_rotulo': ROTULOS_TIPO.get(registro.tipo, registro.tipo or '')}
