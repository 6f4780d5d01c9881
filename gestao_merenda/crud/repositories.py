"""
Repository genérico para as entidades de cadastro.

Separa o acesso ao banco da regra de negócio; a sessão pode ser injetada
nos testes.
"""

from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..models import db


class RepositorioBase:
    """Operações de banco compartilhadas pelos cadastros."""

    model_cls = None
    ordenacao = 'nome'

    def __init__(self, session=None, model=None):
        self._session = session
        self._model = model or self.model_cls

    @property
    def session(self):
        return self._session or db.session

    @property
    def model(self):
        return self._model

    @property
    def nome_modelo(self) -> str:
        return self._model.__name__

    def _query(self):
        return self.session.query(self._model)

    def listar_todos(self, **criterios) -> List[Any]:
        query = self._query().filter_by(**criterios)
        coluna = getattr(self._model, self.ordenacao, None)
        if coluna is not None:
            query = query.order_by(coluna)
        return query.all()

    def buscar_por_id(self, registro_id: int) -> Optional[Any]:
        return self.session.get(self._model, registro_id)

    def buscar_por(self, **criterios) -> Optional[Any]:
        return self._query().filter_by(**criterios).first()

    def existe(self, campo: str, valor: Any, excluir_id: Optional[int] = None) -> bool:
        query = self._query().filter(func.lower(getattr(self._model, campo)) == str(valor).lower())
        if excluir_id is not None:
            query = query.filter(self._model.id != excluir_id)
        return query.first() is not None

    def contar(self, model=None, **criterios) -> int:
        return self.session.query(model or self._model).filter_by(**criterios).count()

    def adicionar(self, registro: Any) -> Any:
        """Inclui na sessão sem confirmar (usado em lotes e exclusões em cascata)."""
        self.session.add(registro)
        return registro

    def remover_pendente(self, registro: Any) -> None:
        self.session.delete(registro)

    def criar(self, registro: Any) -> Any:
        try:
            self.session.add(registro)
            self.session.commit()
            return registro
        except SQLAlchemyError as e:
            self.session.rollback()
            current_app.logger.error(f"Erro ao criar {self.nome_modelo}: {str(e)}")
            raise

    def atualizar(self, registro: Any, dados: Optional[Dict[str, Any]] = None) -> Any:
        try:
            for campo, valor in (dados or {}).items():
                setattr(registro, campo, valor)
            self.session.commit()
            return registro
        except SQLAlchemyError as e:
            self.session.rollback()
            current_app.logger.error(f"Erro ao atualizar {self.nome_modelo}: {str(e)}")
            raise

    def excluir(self, registro: Any) -> None:
        try:
            self.session.delete(registro)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            current_app.logger.error(f"Erro ao excluir {self.nome_modelo}: {str(e)}")
            raise

    def confirmar(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            current_app.logger.error(f"Erro ao salvar {self.nome_modelo}: {str(e)}")
            raise
