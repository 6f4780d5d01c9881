"""
Serviços para o módulo de Produtos
==================================

Cadastro de produtos, importação em lote e exportação por planilha.
"""

from typing import Any, Dict, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud
from ..erros import ErroValidacao
from ..models import ContratoProduto, EstoqueLote, Produto
from ..utils.planilhas import ColunaPlanilha, coluna_ativo, como_texto
from .schemas import TIPOS_PROCESSAMENTO, UNIDADES, ProdutoCreateSchema, ProdutoSchema


class ProdutoRepository(RepositorioBase):
    model_cls = Produto

    def itens_contrato(self, produto_id: int):
        return self.session.query(ContratoProduto).filter_by(produto_id=produto_id).all()

    def lotes(self, produto_id: int):
        return self.session.query(EstoqueLote).filter_by(produto_id=produto_id).all()


class ProdutoService(ServicoCrud):
    """Serviço para operações relacionadas a produtos"""

    repositorio_cls = ProdutoRepository
    schema_criacao = ProdutoCreateSchema
    schema_resposta = ProdutoSchema
    rotulo = 'Produto'
    nao_encontrado = 'Produto não encontrado'
    mensagem_dependencias = (
        'Este produto está em contratos ou possui lotes em estoque. '
        'Marque a exclusão forçada para remover também esses registros.'
    )
    aba_planilha = 'Produtos'
    colunas_planilha = (
        ColunaPlanilha('NOME', 'nome', obrigatoria=True, exemplo='Arroz tipo 1', largura=35),
        ColunaPlanilha('DESCRIÇÃO', 'descricao', exemplo='Arroz branco polido', largura=35),
        ColunaPlanilha('UNIDADE', 'unidade', opcoes=UNIDADES, exemplo='kg'),
        ColunaPlanilha('CATEGORIA', 'categoria', exemplo='Cereais'),
        ColunaPlanilha('MARCA', 'marca'),
        ColunaPlanilha('CÓDIGO DE BARRAS', 'codigo_barras', largura=20, importar=como_texto),
        ColunaPlanilha('PESO', 'peso', exemplo=5),
        ColunaPlanilha('VALIDADE MÍNIMA (DIAS)', 'validade_minima', exemplo=90),
        ColunaPlanilha('FATOR DE DIVISÃO', 'fator_divisao', exemplo=1),
        ColunaPlanilha('TIPO DE PROCESSAMENTO', 'tipo_processamento', opcoes=TIPOS_PROCESSAMENTO, exemplo='processado', largura=26),
        ColunaPlanilha('PREÇO DE REFERÊNCIA', 'preco_referencia', exemplo=25.9),
        ColunaPlanilha('ESTOQUE MÍNIMO', 'estoque_minimo', exemplo=10),
        coluna_ativo(),
    )

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if self.repository.existe('nome', dados['nome'], excluir_id=registro_id):
            raise ErroValidacao(f"Já existe um produto com o nome '{dados['nome']}'")
        codigo = dados.get('codigo_barras')
        if codigo and self.repository.existe('codigo_barras', codigo, excluir_id=registro_id):
            raise ErroValidacao(f"Já existe um produto com o código de barras {codigo}")

    def dependencias(self, registro) -> Dict[str, int]:
        return {
            'contratos': self.repository.contar(ContratoProduto, produto_id=registro.id),
            'lotes': self.repository.contar(EstoqueLote, produto_id=registro.id),
        }

    def remover_dependencias(self, registro) -> None:
        for item in self.repository.itens_contrato(registro.id):
            self.repository.remover_pendente(item)
        for lote in self.repository.lotes(registro.id):
            self.repository.remover_pendente(lote)
