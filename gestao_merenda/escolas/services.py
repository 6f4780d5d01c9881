"""
Serviços para o módulo de Escolas
=================================

Cadastro de escolas, vínculo de alunos por modalidade e importação e
exportação por planilha.
"""

from typing import Any, Dict, List, Optional

from ..crud.repositories import RepositorioBase
from ..crud.services import ServicoCrud, ServicoVinculo
from ..erros import ErroValidacao
from ..models import Escola, EscolaModalidade, Modalidade, RotaEscola
from ..utils.planilhas import ColunaPlanilha, coluna_ativo, como_texto
from .schemas import (
    TIPOS_ADMINISTRACAO,
    EscolaCreateSchema,
    EscolaModalidadeCreateSchema,
    EscolaModalidadeSchema,
    EscolaSchema,
)


class EscolaRepository(RepositorioBase):
    model_cls = Escola

    def vinculos_rotas(self, escola_id: int):
        return self.session.query(RotaEscola).filter_by(escola_id=escola_id).all()

    def modalidade_existe(self, modalidade_id: int) -> bool:
        return self.session.get(Modalidade, modalidade_id) is not None


def serializar_escola_modalidade(vinculo: EscolaModalidade) -> Dict[str, Any]:
    dados = EscolaModalidadeSchema.model_validate(vinculo).model_dump(mode='json')
    dados['modalidade_nome'] = vinculo.modalidade.nome if vinculo.modalidade else None
    return dados


class EscolaService(ServicoCrud):
    """Serviço para operações relacionadas a escolas"""

    repositorio_cls = EscolaRepository
    schema_criacao = EscolaCreateSchema
    schema_resposta = EscolaSchema
    rotulo = 'Escola'
    nao_encontrado = 'Escola não encontrada'
    mensagem_dependencias = (
        'Esta escola faz parte de rotas de entrega. '
        'Marque a exclusão forçada para retirá-la das rotas e remover.'
    )
    aba_planilha = 'Escolas'
    colunas_planilha = (
        ColunaPlanilha('NOME', 'nome', obrigatoria=True, exemplo='EMEF Exemplo', largura=40),
        ColunaPlanilha('CÓDIGO', 'codigo', exemplo='12345678', importar=como_texto),
        ColunaPlanilha('CÓDIGO DE ACESSO', 'codigo_acesso', exemplo='123456', importar=como_texto),
        ColunaPlanilha('ENDEREÇO', 'endereco', exemplo='Rua das Flores, 100', largura=40),
        ColunaPlanilha('MUNICÍPIO', 'municipio', exemplo='Belém', largura=20),
        ColunaPlanilha('TELEFONE', 'telefone', exemplo='(91) 3333-4444', importar=como_texto),
        ColunaPlanilha('EMAIL', 'email', exemplo='escola@exemplo.com.br', largura=30),
        ColunaPlanilha('GESTOR', 'nome_gestor', largura=30),
        ColunaPlanilha('ADMINISTRAÇÃO', 'administracao', opcoes=TIPOS_ADMINISTRACAO, exemplo='municipal'),
        coluna_ativo(),
    )

    def __init__(self, repository: Optional[EscolaRepository] = None, vinculos: Optional[ServicoVinculo] = None):
        super().__init__(repository)
        self.vinculos = vinculos or ServicoVinculo(
            EscolaModalidade,
            'escola_id',
            EscolaModalidadeCreateSchema,
            serializar_escola_modalidade,
            rotulo='Modalidade da escola',
            campo_unico='modalidade_id',
            mensagem_duplicado='Esta modalidade já está vinculada à escola',
            verificar=self._verificar_modalidade,
        )

    def campos_derivados(self, registro) -> Dict[str, Any]:
        nomes = sorted(v.modalidade.nome for v in registro.modalidades if v.modalidade)
        return {
            'total_alunos': sum(v.quantidade_alunos or 0 for v in registro.modalidades),
            'modalidades': ', '.join(nomes),
            'modalidades_lista': nomes,
        }

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        codigo = dados.get('codigo')
        if codigo and self.repository.existe('codigo', codigo, excluir_id=registro_id):
            raise ErroValidacao(f"Já existe uma escola com o código {codigo}")
        codigo_acesso = dados.get('codigo_acesso')
        if codigo_acesso and self.repository.existe('codigo_acesso', codigo_acesso, excluir_id=registro_id):
            raise ErroValidacao("Código de acesso já utilizado por outra escola")

    def dependencias(self, registro) -> Dict[str, int]:
        return {'rotas': self.repository.contar(RotaEscola, escola_id=registro.id)}

    def remover_dependencias(self, registro) -> None:
        for vinculo in self.repository.vinculos_rotas(registro.id):
            self.repository.remover_pendente(vinculo)

    # ------------------------------------------------------------ modalidades

    def _verificar_modalidade(self, dados: Dict[str, Any]) -> None:
        if not self.repository.modalidade_existe(dados['modalidade_id']):
            raise ErroValidacao('Modalidade não encontrada')

    def listar_modalidades(self, escola_id: int) -> List[Dict[str, Any]]:
        return self.vinculos.listar(self.obter(escola_id).id)

    def adicionar_modalidade(self, escola_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.vinculos.adicionar(self.obter(escola_id).id, payload)

    def editar_modalidade(self, escola_id: int, vinculo_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.vinculos.editar(self.obter(escola_id).id, vinculo_id, payload)

    def remover_modalidade(self, escola_id: int, vinculo_id: int) -> Dict[str, Any]:
        return self.vinculos.remover(self.obter(escola_id).id, vinculo_id)
