from datetime import date, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func

from . import db
from .models import Contrato, Escola, EscolaModalidade, EstoqueLote, Fornecedor, Produto, Rota
from .sessao import obter_sessao
from .time_utils import local_today

DIAS_ALERTA_VENCIMENTO = 30


class DashboardService:
    """Responsável por montar o contexto exibido no painel principal."""

    def __init__(self, hoje: Optional[date] = None):
        self.session = db.session
        self.hoje = hoje or local_today()

    def gerar_contexto(self) -> Dict[str, Any]:
        contexto = self.contexto_vazio()
        contexto['totais'] = {
            'escolas': self._contar(Escola),
            'fornecedores': self._contar(Fornecedor),
            'produtos': self._contar(Produto),
            'rotas': self._contar(Rota),
            'contratos_vigentes': self._contratos_vigentes(),
            'alunos': self._total_alunos(),
        }
        contexto['alertas'] = {
            'contratos_vencendo': self._contratos_vencendo(),
            'lotes_vencidos': self._lotes_vencidos(),
        }
        return contexto

    @staticmethod
    def contexto_vazio() -> Dict[str, Any]:
        contexto = obter_sessao()
        return {
            'usuario': contexto.user,
            'tenant_atual': contexto.tenant_atual,
            'tenants_disponiveis': contexto.tenants_disponiveis,
            'totais': {},
            'alertas': {},
            'dias_alerta': DIAS_ALERTA_VENCIMENTO,
        }

    def _contar(self, model) -> int:
        return self.session.query(func.count(model.id)).filter(model.ativo.is_(True)).scalar() or 0

    def _contratos_vigentes(self) -> int:
        return self.session.query(func.count(Contrato.id)).filter(
            Contrato.ativo.is_(True),
            Contrato.data_inicio <= self.hoje,
            Contrato.data_fim >= self.hoje,
        ).scalar() or 0

    def _contratos_vencendo(self) -> int:
        limite = self.hoje + timedelta(days=DIAS_ALERTA_VENCIMENTO)
        return self.session.query(func.count(Contrato.id)).filter(
            Contrato.ativo.is_(True),
            Contrato.data_fim >= self.hoje,
            Contrato.data_fim <= limite,
        ).scalar() or 0

    def _lotes_vencidos(self) -> int:
        return self.session.query(func.count(EstoqueLote.id)).filter(
            EstoqueLote.ativo.is_(True),
            EstoqueLote.data_validade < self.hoje,
        ).scalar() or 0

    def _total_alunos(self) -> int:
        total = self.session.query(func.sum(EscolaModalidade.quantidade_alunos)).join(
            Escola, Escola.id == EscolaModalidade.escola_id
        ).filter(Escola.ativo.is_(True)).scalar()
        return int(total or 0)
