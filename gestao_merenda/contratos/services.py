"""
Serviços para o módulo de Contratos
===================================

Contratos com fornecedores, status de vigência calculado e os produtos
contratados (quantidade e preço unitário).
"""

from datetime import date
from typing import Any, Dict, List, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud, ServicoVinculo
from ..erros import ErroValidacao
from ..listagem import calcular_valor_total_contrato
from ..models import Contrato, ContratoProduto, Fornecedor, PedidoItem, Produto
from ..time_utils import local_today
from .schemas import ContratoCreateSchema, ContratoProdutoCreateSchema, ContratoProdutoSchema, ContratoSchema

STATUS_ATIVO = 'Ativo'
STATUS_PENDENTE = 'Pendente'
STATUS_EXPIRADO = 'Expirado'
STATUS_INATIVO = 'Inativo'
STATUS_CONTRATO = (STATUS_ATIVO, STATUS_PENDENTE, STATUS_EXPIRADO, STATUS_INATIVO)


def status_contrato(data_inicio: Optional[date], data_fim: Optional[date], ativo: bool, hoje: Optional[date] = None) -> str:
    """Situação do contrato na data de hoje (fuso da aplicação)."""
    if not ativo:
        return STATUS_INATIVO
    hoje = hoje or local_today()
    if data_inicio and hoje < data_inicio:
        return STATUS_PENDENTE
    if data_fim and hoje > data_fim:
        return STATUS_EXPIRADO
    return STATUS_ATIVO


class ContratoRepository(RepositorioBase):
    model_cls = Contrato
    ordenacao = 'numero'

    def fornecedor_existe(self, fornecedor_id: int) -> bool:
        return self.session.get(Fornecedor, fornecedor_id) is not None

    def produto_existe(self, produto_id: int) -> bool:
        return self.session.get(Produto, produto_id) is not None

    def numero_existe(self, numero: str, excluir_id: Optional[int] = None) -> bool:
        return self.existe('numero', numero, excluir_id=excluir_id)

    def contar_itens_pedido(self, contrato_id: int, contrato_produto_id: Optional[int] = None) -> int:
        query = self.session.query(PedidoItem).join(ContratoProduto).filter(ContratoProduto.contrato_id == contrato_id)
        if contrato_produto_id is not None:
            query = query.filter(ContratoProduto.id == contrato_produto_id)
        return query.count()


def serializar_item_contrato(item: ContratoProduto) -> Dict[str, Any]:
    dados = ContratoProdutoSchema.model_validate(item).model_dump(mode='json')
    dados['produto_nome'] = item.produto.nome if item.produto else None
    dados['unidade'] = item.produto.unidade if item.produto else None
    dados['valor_total'] = round(dados['quantidade_contratada'] * dados['preco_unitario'], 2)
    return dados


class ContratoService(ServicoCrud):
    """Serviço para operações relacionadas a contratos"""

    repositorio_cls = ContratoRepository
    schema_criacao = ContratoCreateSchema
    schema_resposta = ContratoSchema
    rotulo = 'Contrato'
    nao_encontrado = 'Contrato não encontrado'
    mensagem_dependencias = (
        'Este contrato possui produtos vinculados. '
        'Marque a exclusão forçada para remover o contrato, seus produtos e os itens de pedido ligados a eles.'
    )

    def __init__(self, repository: Optional[ContratoRepository] = None, itens: Optional[ServicoVinculo] = None):
        super().__init__(repository)
        self.itens = itens or ServicoVinculo(
            ContratoProduto,
            'contrato_id',
            ContratoProdutoCreateSchema,
            serializar_item_contrato,
            rotulo='Produto do contrato',
            campo_unico='produto_id',
            mensagem_duplicado='Este produto já está no contrato',
            verificar=self._verificar_produto,
        )

    def campos_derivados(self, registro) -> Dict[str, Any]:
        itens = [
            {'quantidade_contratada': item.quantidade_contratada, 'preco_unitario': item.preco_unitario}
            for item in registro.itens
        ]
        return {
            'status': status_contrato(registro.data_inicio, registro.data_fim, registro.ativo),
            'valor_total': calcular_valor_total_contrato(itens),
            'quantidade_itens': len(itens),
        }

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if not self.repository.fornecedor_existe(dados['fornecedor_id']):
            raise ErroValidacao('Fornecedor não encontrado')
        if self.repository.numero_existe(dados['numero'], excluir_id=registro_id):
            raise ErroValidacao(f"Já existe um contrato com o número {dados['numero']}")

    def dependencias(self, registro) -> Dict[str, int]:
        return {
            'produtos': self.repository.contar(ContratoProduto, contrato_id=registro.id),
            'itens_pedido': self.repository.contar_itens_pedido(registro.id),
        }

    def remover_dependencias(self, registro) -> None:
        for item in list(registro.itens):
            self.repository.remover_pendente(item)

    # --------------------------------------------------------------- produtos

    def _verificar_produto(self, dados: Dict[str, Any]) -> None:
        if not self.repository.produto_existe(dados['produto_id']):
            raise ErroValidacao('Produto não encontrado')

    def listar_produtos(self, contrato_id: int) -> List[Dict[str, Any]]:
        return self.itens.listar(self.obter(contrato_id).id)

    def adicionar_produto(self, contrato_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.itens.adicionar(self.obter(contrato_id).id, payload)

    def editar_produto(self, contrato_id: int, item_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.itens.editar(self.obter(contrato_id).id, item_id, payload)

    def remover_produto(self, contrato_id: int, item_id: int) -> Dict[str, Any]:
        contrato = self.obter(contrato_id)
        item = self.itens.obter(contrato.id, item_id)
        if self.repository.contar_itens_pedido(contrato.id, item.id):
            raise ErroValidacao('Produto já utilizado em pedidos. Remova-o dos pedidos antes.')
        return self.itens.remover(contrato.id, item.id)
