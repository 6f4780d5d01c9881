"""
Serviços para o módulo de Rotas
"""

from typing import Any, Dict, List, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud, ServicoVinculo
from ..erros import ErroValidacao
from ..models import Escola, Rota, RotaEscola
from .schemas import RotaCreateSchema, RotaEscolaCreateSchema, RotaEscolaSchema, RotaSchema


class RotaRepository(RepositorioBase):
    model_cls = Rota

    def escola_existe(self, escola_id: int) -> bool:
        return self.session.get(Escola, escola_id) is not None


def serializar_rota_escola(vinculo: RotaEscola) -> Dict[str, Any]:
    dados = RotaEscolaSchema.model_validate(vinculo).model_dump(mode='json')
    dados['escola_nome'] = vinculo.escola.nome if vinculo.escola else None
    dados['municipio'] = vinculo.escola.municipio if vinculo.escola else None
    return dados


class RotaService(ServicoCrud):
    repositorio_cls = RotaRepository
    schema_criacao = RotaCreateSchema
    schema_resposta = RotaSchema
    rotulo = 'Rota'
    nao_encontrado = 'Rota não encontrada'
    mensagem_dependencias = (
        'Esta rota possui escolas vinculadas. '
        'Marque a exclusão forçada para desvincular as escolas e remover a rota.'
    )

    def __init__(self, repository: Optional[RotaRepository] = None, vinculos: Optional[ServicoVinculo] = None):
        super().__init__(repository)
        self.vinculos = vinculos or ServicoVinculo(
            RotaEscola,
            'rota_id',
            RotaEscolaCreateSchema,
            serializar_rota_escola,
            rotulo='Escola da rota',
            campo_unico='escola_id',
            mensagem_duplicado='Esta escola já está na rota',
            ordenacao='ordem',
            verificar=self._verificar_escola,
        )

    def campos_derivados(self, registro) -> Dict[str, Any]:
        return {'quantidade_escolas': len(registro.escolas)}

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        if self.repository.existe('nome', dados['nome'], excluir_id=registro_id):
            raise ErroValidacao(f"Já existe uma rota com o nome '{dados['nome']}'")

    def dependencias(self, registro) -> Dict[str, int]:
        return {'escolas': self.repository.contar(RotaEscola, rota_id=registro.id)}

    def remover_dependencias(self, registro) -> None:
        for vinculo in list(registro.escolas):
            self.repository.remover_pendente(vinculo)

    # ----------------------------------------------------------------- escolas

    def _verificar_escola(self, dados: Dict[str, Any]) -> None:
        if not self.repository.escola_existe(dados['escola_id']):
            raise ErroValidacao('Escola não encontrada')

    def listar_escolas(self, rota_id: int) -> List[Dict[str, Any]]:
        return self.vinculos.listar(self.obter(rota_id).id)

    def adicionar_escola(self, rota_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.vinculos.adicionar(self.obter(rota_id).id, payload)

    def editar_escola(self, rota_id: int, item_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.vinculos.editar(self.obter(rota_id).id, item_id, payload)

    def remover_escola(self, rota_id: int, item_id: int) -> Dict[str, Any]:
        return self.vinculos.remover(self.obter(rota_id).id, item_id)
