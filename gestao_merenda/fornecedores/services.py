"""
Serviços para o módulo de Fornecedores
"""

from typing import Any, Dict, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud
from ..erros import ErroValidacao
from ..models import Contrato, Fornecedor
from ..utils.planilhas import ColunaPlanilha, coluna_ativo, como_texto
from .schemas import FornecedorCreateSchema, FornecedorSchema


class FornecedorRepository(RepositorioBase):
    model_cls = Fornecedor

    def contar_contratos(self, fornecedor_id: int) -> int:
        return self.contar(Contrato, fornecedor_id=fornecedor_id)

    def listar_contratos(self, fornecedor_id: int):
        return self.session.query(Contrato).filter_by(fornecedor_id=fornecedor_id).all()


def formatar_cnpj(cnpj: Optional[str]) -> str:
    """'12345678000190' -> '12.345.678/0001-90'"""
    if not cnpj or len(cnpj) != 14:
        return cnpj or ''
    return f"{cnpj[:2]}.{cnpj[2:5]}.{cnpj[5:8]}/{cnpj[8:12]}-{cnpj[12:]}"


class FornecedorService(ServicoCrud):
    """Serviço para operações relacionadas a fornecedores"""

    repositorio_cls = FornecedorRepository
    schema_criacao = FornecedorCreateSchema
    schema_resposta = FornecedorSchema
    rotulo = 'Fornecedor'
    nao_encontrado = 'Fornecedor não encontrado'
    mensagem_dependencias = (
        'Este fornecedor possui contratos vinculados. '
        'Marque a exclusão forçada para remover também os contratos.'
    )
    aba_planilha = 'Fornecedores'
    colunas_planilha = (
        ColunaPlanilha('NOME', 'nome', obrigatoria=True, exemplo='Distribuidora Exemplo Ltda', largura=40),
        ColunaPlanilha('CNPJ', 'cnpj', obrigatoria=True, exemplo='12.345.678/0001-90', largura=22, importar=como_texto),
        ColunaPlanilha('EMAIL', 'email', exemplo='contato@exemplo.com.br', largura=30),
        coluna_ativo(),
    )

    def campos_derivados(self, registro) -> Dict[str, Any]:
        return {'cnpj_formatado': formatar_cnpj(registro.cnpj)}

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if self.repository.existe('cnpj', dados['cnpj'], excluir_id=registro_id):
            raise ErroValidacao(f"Já existe um fornecedor com o CNPJ {formatar_cnpj(dados['cnpj'])}")

    def dependencias(self, registro) -> Dict[str, int]:
        return {'contratos': self.repository.contar_contratos(registro.id)}

    def remover_dependencias(self, registro) -> None:
        # Os itens de cada contrato saem junto (cascade)
        for contrato in self.repository.listar_contratos(registro.id):
            self.repository.remover_pendente(contrato)
