"""
Serviços para o módulo de Cardápios
"""

from typing import Any, Dict, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud
from ..erros import ErroValidacao
from ..models import Cardapio, Modalidade
from .schemas import CardapioCreateSchema, CardapioSchema


class CardapioRepository(RepositorioBase):
    model_cls = Cardapio

    def modalidade_existe(self, modalidade_id: int) -> bool:
        return self.session.get(Modalidade, modalidade_id) is not None


class CardapioService(ServicoCrud):
    repositorio_cls = CardapioRepository
    schema_criacao = CardapioCreateSchema
    schema_resposta = CardapioSchema
    rotulo = 'Cardápio'
    nao_encontrado = 'Cardápio não encontrado'

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        modalidade_id = dados.get('modalidade_id')
        if modalidade_id is not None and not self.repository.modalidade_existe(modalidade_id):
            raise ErroValidacao('Modalidade não encontrada')
