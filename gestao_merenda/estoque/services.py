"""
Serviços para o módulo de Estoque Central
=========================================

Lotes em estoque com a validade calculada no fuso da aplicação e o resumo
de quantidades por produto.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud
from ..erros import ErroValidacao
from ..models import EstoqueLote, Produto
from ..time_utils import dias_ate
from .schemas import EstoqueLoteCreateSchema, EstoqueLoteSchema

SITUACAO_VENCIDO = 'vencido'
SITUACAO_VALIDO = 'valido'


def situacao_lote(lote: Dict[str, Any]) -> str:
    return SITUACAO_VENCIDO if lote.get('vencido') else SITUACAO_VALIDO


def resumo_por_produto(lotes: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Posição de estoque por produto a partir dos lotes ativos.

    Returns:
        Lista ordenada por nome: produto_id, produto_nome, unidade, lotes,
        quantidade_disponivel e quantidade_vencida.
    """
    posicoes: Dict[Any, Dict[str, Any]] = {}
    for lote in lotes:
        if not lote.get('ativo', True):
            continue
        posicao = posicoes.setdefault(lote.get('produto_id'), {
            'produto_id': lote.get('produto_id'),
            'produto_nome': lote.get('produto_nome') or '',
            'unidade': lote.get('unidade') or '',
            'lotes': 0,
            'quantidade_disponivel': 0.0,
            'quantidade_vencida': 0.0,
        })
        posicao['lotes'] += 1
        quantidade = float(lote.get('quantidade') or 0)
        if lote.get('vencido'):
            posicao['quantidade_vencida'] += quantidade
        else:
            posicao['quantidade_disponivel'] += quantidade
    return sorted(posicoes.values(), key=lambda p: p['produto_nome'].lower())


class EstoqueLoteRepository(RepositorioBase):
    model_cls = EstoqueLote
    ordenacao = 'data_validade'

    def produto_existe(self, produto_id: int) -> bool:
        return self.session.get(Produto, produto_id) is not None


class EstoqueService(ServicoCrud):
    """Serviço para operações relacionadas aos lotes do estoque central"""

    repositorio_cls = EstoqueLoteRepository
    schema_criacao = EstoqueLoteCreateSchema
    schema_resposta = EstoqueLoteSchema
    rotulo = 'Lote'
    nao_encontrado = 'Lote não encontrado'

    def __init__(self, repository: Optional[EstoqueLoteRepository] = None, hoje: Optional[date] = None):
        super().__init__(repository)
        self.hoje = hoje

    def campos_derivados(self, registro) -> Dict[str, Any]:
        dias = dias_ate(registro.data_validade, self.hoje)
        return {
            'unidade': registro.produto.unidade if registro.produto else None,
            'dias_para_vencer': dias,
            'vencido': dias is not None and dias < 0,
        }

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if not self.repository.produto_existe(dados['produto_id']):
            raise ErroValidacao('Produto não encontrado')
        existente = self.repository.buscar_por(produto_id=dados['produto_id'], lote=dados['lote'])
        if existente is not None and existente.id != registro_id:
            raise ErroValidacao(f"Lote {dados['lote']} já cadastrado para este produto")

    def resumo(self) -> List[Dict[str, Any]]:
        lotes = []
        for registro in self.repository.listar_todos():
            dados = self.serializar(registro)
            dados['produto_nome'] = registro.produto.nome if registro.produto else None
            lotes.append(dados)
        return resumo_por_produto(lotes)
