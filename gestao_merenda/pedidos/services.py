"""
Serviços para o módulo de Pedidos
=================================

Pedidos de compra montados com produtos dos contratos vigentes. Um pedido
nasce em rascunho, recebe itens e segue o fluxo
rascunho → pendente → aprovado → em separação → enviado → entregue,
podendo ser cancelado depois de sair do rascunho.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..contratos.services import STATUS_ATIVO, status_contrato
from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud, ServicoVinculo
from ..erros import ErroValidacao
from ..listagem import calcular_valor_total_pedido
from ..models import ContratoProduto, Pedido, PedidoItem, StatusPedido
from .schemas import (
    ROTULOS_STATUS,
    STATUS_PEDIDO,
    PedidoCreateSchema,
    PedidoItemCreateSchema,
    PedidoItemSchema,
    PedidoSchema,
)

RASCUNHO = StatusPedido.RASCUNHO.value
CANCELADO = StatusPedido.CANCELADO.value

# Status de destino permitidos a partir de cada status
TRANSICOES = {
    'rascunho': {'pendente'},
    'pendente': {'aprovado', 'cancelado'},
    'aprovado': {'em_separacao', 'cancelado'},
    'em_separacao': {'enviado', 'cancelado'},
    'enviado': {'entregue', 'cancelado'},
    'entregue': set(),
    'cancelado': set(),
}


def rotulo_status(status: Optional[str]) -> str:
    return ROTULOS_STATUS.get(status, status or '')


def contar_por_status(pedidos: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Legenda da listagem: quantidade de pedidos em cada status, na ordem do fluxo."""
    contagem = {status: 0 for status in STATUS_PEDIDO}
    for pedido in pedidos:
        status = pedido.get('status') or RASCUNHO
        contagem[status] = contagem.get(status, 0) + 1
    return [
        {'status': status, 'rotulo': rotulo_status(status), 'quantidade': quantidade}
        for status, quantidade in contagem.items()
    ]


def validar_transicao(atual: str, novo: str) -> None:
    if novo == atual:
        return
    if novo not in TRANSICOES.get(atual, set()):
        raise ErroValidacao(
            f"Não é possível alterar o status de {rotulo_status(atual)} para {rotulo_status(novo)}"
        )


class PedidoRepository(RepositorioBase):
    model_cls = Pedido
    ordenacao = 'numero'

    def numero_existe(self, numero: str, excluir_id: Optional[int] = None) -> bool:
        return self.existe('numero', numero, excluir_id=excluir_id)

    def buscar_contrato_produto(self, contrato_produto_id: int) -> Optional[ContratoProduto]:
        return self.session.get(ContratoProduto, contrato_produto_id)

    def listar_contrato_produtos(self) -> List[ContratoProduto]:
        return self.session.query(ContratoProduto).order_by(ContratoProduto.id).all()


def serializar_item_pedido(item: PedidoItem) -> Dict[str, Any]:
    dados = PedidoItemSchema.model_validate(item).model_dump(mode='json')
    contrato_produto = item.contrato_produto
    contrato = contrato_produto.contrato if contrato_produto else None
    produto = contrato_produto.produto if contrato_produto else None
    fornecedor = contrato.fornecedor if contrato else None
    preco = float(contrato_produto.preco_unitario or 0) if contrato_produto else 0.0

    dados.update({
        'produto_nome': produto.nome if produto else None,
        'unidade': produto.unidade if produto else None,
        'contrato_id': contrato.id if contrato else None,
        'contrato_numero': contrato.numero if contrato else None,
        'fornecedor_id': fornecedor.id if fornecedor else None,
        'fornecedor_nome': fornecedor.nome if fornecedor else None,
        'preco_unitario': preco,
        'valor_total': round(dados['quantidade'] * preco, 2),
    })
    return dados


def serializar_produto_disponivel(contrato_produto: ContratoProduto) -> Dict[str, Any]:
    contrato = contrato_produto.contrato
    produto = contrato_produto.produto
    fornecedor = contrato.fornecedor
    preco = float(contrato_produto.preco_unitario or 0)
    return {
        'id': contrato_produto.id,
        'produto_nome': produto.nome,
        'unidade': produto.unidade,
        'fornecedor_nome': fornecedor.nome,
        'contrato_numero': contrato.numero,
        'preco_unitario': preco,
        'descricao': f"{produto.nome} - {fornecedor.nome} (Contrato {contrato.numero})",
        'ativo': status_contrato(contrato.data_inicio, contrato.data_fim, contrato.ativo) == STATUS_ATIVO,
    }


class PedidoService(ServicoCrud):
    """Serviço para operações relacionadas a pedidos de compra"""

    repositorio_cls = PedidoRepository
    schema_criacao = PedidoCreateSchema
    schema_resposta = PedidoSchema
    rotulo = 'Pedido'
    nao_encontrado = 'Pedido não encontrado'
    mensagem_dependencias = (
        'Este pedido possui itens. '
        'Marque a exclusão forçada para remover o pedido e seus itens.'
    )

    def __init__(self, repository: Optional[PedidoRepository] = None, itens: Optional[ServicoVinculo] = None):
        super().__init__(repository)
        self.itens = itens or ServicoVinculo(
            PedidoItem,
            'pedido_id',
            PedidoItemCreateSchema,
            serializar_item_pedido,
            rotulo='Item do pedido',
            campo_unico='contrato_produto_id',
            mensagem_duplicado='Este produto já está no pedido',
            verificar=self._verificar_contrato_produto,
        )

    def campos_derivados(self, registro) -> Dict[str, Any]:
        itens = [serializar_item_pedido(item) for item in registro.itens]
        fornecedores = sorted({item['fornecedor_nome'] for item in itens if item['fornecedor_nome']})
        return {
            'status_rotulo': rotulo_status(registro.status),
            'valor_total': calcular_valor_total_pedido(itens),
            'quantidade_itens': len(itens),
            'fornecedores_nomes': ', '.join(fornecedores),
            'quantidade_fornecedores': len(fornecedores),
        }

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if self.repository.numero_existe(dados['numero'], excluir_id=registro_id):
            raise ErroValidacao(f"Já existe um pedido com o número {dados['numero']}")

        atual = self.repository.buscar_por_id(registro_id) if registro_id else None
        if atual is None:
            if dados['status'] != RASCUNHO:
                raise ErroValidacao('Adicione pelo menos um item ao pedido')
            return

        validar_transicao(atual.status, dados['status'])
        if atual.status == RASCUNHO and dados['status'] != RASCUNHO and not atual.itens:
            raise ErroValidacao('Adicione pelo menos um item ao pedido')

    def remover(self, registro_id: Any, forcar: bool = False) -> Dict[str, Any]:
        pedido = self.obter(registro_id)
        if pedido.status not in (RASCUNHO, CANCELADO):
            raise ErroValidacao('Apenas pedidos em rascunho ou cancelados podem ser excluídos')
        return super().remover(registro_id, forcar=forcar)

    def dependencias(self, registro) -> Dict[str, int]:
        return {'itens': self.repository.contar(PedidoItem, pedido_id=registro.id)}

    def remover_dependencias(self, registro) -> None:
        for item in list(registro.itens):
            self.repository.remover_pendente(item)

    # ------------------------------------------------------------------ itens

    def _verificar_contrato_produto(self, dados: Dict[str, Any]) -> None:
        contrato_produto = self.repository.buscar_contrato_produto(dados['contrato_produto_id'])
        if contrato_produto is None:
            raise ErroValidacao('Produto do contrato não encontrado')
        contrato = contrato_produto.contrato
        if status_contrato(contrato.data_inicio, contrato.data_fim, contrato.ativo) != STATUS_ATIVO:
            raise ErroValidacao(f"O contrato {contrato.numero} não está vigente")

    def _pedido_editavel(self, pedido_id: Any) -> int:
        pedido = self.obter(pedido_id)
        if pedido.status != RASCUNHO:
            raise ErroValidacao('Itens só podem ser alterados em pedidos em rascunho')
        return pedido.id

    def listar_itens(self, pedido_id: int) -> List[Dict[str, Any]]:
        return self.itens.listar(self.obter(pedido_id).id)

    def adicionar_item(self, pedido_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.itens.adicionar(self._pedido_editavel(pedido_id), payload)

    def editar_item(self, pedido_id: int, item_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.itens.editar(self._pedido_editavel(pedido_id), item_id, payload)

    def remover_item(self, pedido_id: int, item_id: int) -> Dict[str, Any]:
        return self.itens.remover(self._pedido_editavel(pedido_id), item_id)

    def listar_produtos_disponiveis(self) -> List[Dict[str, Any]]:
        """Produtos de todos os contratos; `ativo` indica contrato vigente."""
        return [serializar_produto_disponivel(cp) for cp in self.repository.listar_contrato_produtos()]
