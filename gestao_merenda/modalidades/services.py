"""
Serviços para o módulo de Modalidades
"""

from typing import Any, Dict, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud
from ..erros import ErroValidacao
from ..models import Cardapio, EscolaModalidade, Modalidade
from .schemas import ModalidadeCreateSchema, ModalidadeSchema


class ModalidadeRepository(RepositorioBase):
    model_cls = Modalidade

    def vinculos_escolas(self, modalidade_id: int):
        return self.session.query(EscolaModalidade).filter_by(modalidade_id=modalidade_id).all()

    def cardapios(self, modalidade_id: int):
        return self.session.query(Cardapio).filter_by(modalidade_id=modalidade_id).all()


class ModalidadeService(ServicoCrud):
    repositorio_cls = ModalidadeRepository
    schema_criacao = ModalidadeCreateSchema
    schema_resposta = ModalidadeSchema
    rotulo = 'Modalidade'
    nao_encontrado = 'Modalidade não encontrada'
    mensagem_dependencias = (
        'Esta modalidade está vinculada a escolas ou cardápios. '
        'Marque a exclusão forçada para desvincular e remover.'
    )

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if self.repository.existe('nome', dados['nome'], excluir_id=registro_id):
            raise ErroValidacao(f"Já existe uma modalidade com o nome '{dados['nome']}'")

    def dependencias(self, registro) -> Dict[str, int]:
        return {
            'escolas': self.repository.contar(EscolaModalidade, modalidade_id=registro.id),
            'cardapios': self.repository.contar(Cardapio, modalidade_id=registro.id),
        }

    def remover_dependencias(self, registro) -> None:
        for vinculo in self.repository.vinculos_escolas(registro.id):
            self.repository.remover_pendente(vinculo)
        # Cardápios continuam cadastrados, apenas sem modalidade
        for cardapio in self.repository.cardapios(registro.id):
            cardapio.modalidade_id = None
