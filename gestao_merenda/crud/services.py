"""
Serviços genéricos de cadastro
==============================

``ServicoCrud`` implementa listar, buscar, criar, editar e remover (com
verificação de vínculos e exclusão forçada) além da importação e exportação
por planilha. ``ServicoVinculo`` cobre os sub-recursos de uma entidade
(produtos do contrato, modalidades da escola, escolas da rota).

Todos os métodos devolvem dicionários serializados pelo schema de resposta
e sinalizam rejeições com as exceções de ``gestao_merenda.erros``.
"""

from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence, Type

from flask import current_app, has_app_context
from pydantic import BaseModel, ValidationError

from ..erros import DependenciasEncontradas, ErroServico, ErroValidacao, NaoEncontrado
from ..utils.planilhas import ColunaPlanilha, gerar_modelo, gerar_planilha, ler_planilha
from .repositories import RepositorioBase


def _log(nivel: str, mensagem: str) -> None:
    if has_app_context():
        getattr(current_app.logger, nivel)(mensagem)


def formatar_erros_validacao(error: ValidationError) -> str:
    """Monta string legível das mensagens de validação"""
    mensagens = []
    for detalhe in error.errors():
        mensagem = str(detalhe.get('msg', ''))
        if mensagem.startswith('Value error, '):
            mensagem = mensagem[len('Value error, '):]
        campo = ".".join(str(parte) for parte in detalhe.get("loc", ()))
        mensagens.append(f"{campo}: {mensagem}" if campo else mensagem)
    return "; ".join(mensagens)


def validar_payload(schema: Type[BaseModel], payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return schema(**payload).model_dump()
    except ValidationError as exc:
        raise ErroValidacao(formatar_erros_validacao(exc))


class ServicoCrud:
    """Serviço base de uma entidade de cadastro."""

    repositorio_cls: Type[RepositorioBase] = RepositorioBase
    schema_criacao: Type[BaseModel] = None
    schema_resposta: Type[BaseModel] = None
    rotulo = 'Registro'
    nao_encontrado = 'Registro não encontrado'
    mensagem_dependencias = 'Registro possui vínculos. Marque a exclusão forçada para remover também os vínculos.'
    colunas_planilha: Sequence[ColunaPlanilha] = ()
    aba_planilha = 'Dados'

    def __init__(self, repository: Optional[RepositorioBase] = None):
        self.repository = repository or self.repositorio_cls()

    # ------------------------------------------------------------ serialização

    def serializar(self, registro: Any) -> Dict[str, Any]:
        dados = self.schema_resposta.model_validate(registro).model_dump(mode='json')
        dados.update(self.campos_derivados(registro))
        return dados

    def campos_derivados(self, registro: Any) -> Dict[str, Any]:
        return {}

    # ----------------------------------------------------------------- leitura

    def listar(self) -> List[Dict[str, Any]]:
        return [self.serializar(registro) for registro in self.repository.listar_todos()]

    def obter(self, registro_id: Any):
        try:
            registro_id = int(registro_id)
        except (TypeError, ValueError):
            raise ErroValidacao(f"ID de {self.rotulo.lower()} inválido")
        registro = self.repository.buscar_por_id(registro_id)
        if registro is None:
            raise NaoEncontrado(self.nao_encontrado)
        return registro

    def buscar(self, registro_id: Any) -> Dict[str, Any]:
        return self.serializar(self.obter(registro_id))

    # ----------------------------------------------------------------- escrita

    def validar(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return validar_payload(self.schema_criacao, payload)

    def verificar_regras(self, dados: Dict[str, Any], registro_id: Optional[int] = None) -> None:
        """Regras que dependem do banco (ex.: unicidade). Lança ErroValidacao."""

    def criar(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        dados = self.validar(payload)
        self.verificar_regras(dados)
        registro = self.repository.criar(self.repository.model(**dados))
        _log('info', f"{self.rotulo} criado: {dados.get('nome', registro.id)} (ID: {registro.id})")
        return self.serializar(registro)

    def editar(self, registro_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Atualiza o registro. Campos ausentes no payload mantêm o valor atual e
        o resultado é validado por inteiro, como em uma criação.
        """
        registro = self.obter(registro_id)
        campos = self.schema_criacao.model_fields
        atual = {campo: getattr(registro, campo, None) for campo in campos}
        atual.update({campo: valor for campo, valor in (payload or {}).items() if campo in campos})
        dados = self.validar(atual)
        self.verificar_regras(dados, registro.id)
        self.repository.atualizar(registro, dados)
        _log('info', f"{self.rotulo} editado (ID: {registro.id})")
        return self.serializar(registro)

    # ----------------------------------------------------------------- exclusão

    def dependencias(self, registro: Any) -> Dict[str, int]:
        """Contagem dos registros vinculados que impedem a exclusão simples."""
        return {}

    def remover_dependencias(self, registro: Any) -> None:
        """Remove (sem confirmar) os vínculos na exclusão forçada."""

    def remover(self, registro_id: Any, forcar: bool = False) -> Dict[str, Any]:
        registro = self.obter(registro_id)
        dependencias = self.dependencias(registro)
        possui_vinculos = any(quantidade > 0 for quantidade in dependencias.values())

        if possui_vinculos and not forcar:
            raise DependenciasEncontradas(self.mensagem_dependencias, dependencias)

        if possui_vinculos:
            self.remover_dependencias(registro)
            _log('warning', f"Exclusão forçada de {self.rotulo} (ID: {registro.id}): {dependencias}")

        self.repository.excluir(registro)
        _log('info', f"{self.rotulo} removido (ID: {registro_id})")
        return {
            'success': True,
            'message': 'Registro removido com sucesso',
            'dependencias_removidas': dependencias if possui_vinculos else {},
        }

    # --------------------------------------------------------------- planilhas

    def exportar_excel(self) -> BytesIO:
        return gerar_planilha(self.colunas_planilha, self.listar(), nome_aba=self.aba_planilha)

    def gerar_modelo(self) -> BytesIO:
        return gerar_modelo(self.colunas_planilha, nome_aba=self.aba_planilha)

    def importar_lote(self, arquivo) -> Dict[str, Any]:
        """
        Importa as linhas válidas da planilha e relata as inválidas.

        Returns:
            Dict: {'sucesso': n, 'erros': [{'linha': n, 'erro': str}]}
        """
        if not self.colunas_planilha:
            raise ErroValidacao(f"Importação não disponível para {self.rotulo.lower()}")

        linhas = ler_planilha(arquivo, self.colunas_planilha)
        sucesso = 0
        erros = []
        for numero, dados in linhas:
            payload = {campo: valor for campo, valor in dados.items() if valor is not None}
            try:
                validados = self.validar(payload)
                self.verificar_regras(validados)
                self.repository.adicionar(self.repository.model(**validados))
                sucesso += 1
            except ErroServico as exc:
                erros.append({'linha': numero, 'erro': exc.mensagem})

        if sucesso:
            self.repository.confirmar()
        _log('info', f"Importação de {self.rotulo}: {sucesso} criados, {len(erros)} com erro")
        return {'sucesso': sucesso, 'erros': erros}


class ServicoVinculo:
    """
    Sub-recurso ligado a uma entidade pai por `campo_pai`.

    Todas as operações conferem se o item pertence ao pai informado.
    """

    def __init__(
        self,
        model,
        campo_pai: str,
        schema_criacao: Type[BaseModel],
        serializar,
        rotulo: str,
        campo_unico: Optional[str] = None,
        mensagem_duplicado: Optional[str] = None,
        repository: Optional[RepositorioBase] = None,
        ordenacao: str = 'id',
        verificar=None,
    ):
        self.repository = repository or RepositorioBase(model=model)
        self.repository.ordenacao = ordenacao
        self.campo_pai = campo_pai
        self.schema_criacao = schema_criacao
        self._serializar = serializar
        self.rotulo = rotulo
        self.campo_unico = campo_unico
        self.mensagem_duplicado = mensagem_duplicado or f"{rotulo} já vinculado"
        # Regras extras sobre os dados validados (ex.: registro referenciado existe)
        self.verificar = verificar

    def listar(self, pai_id: int) -> List[Dict[str, Any]]:
        return [self._serializar(item) for item in self.repository.listar_todos(**{self.campo_pai: pai_id})]

    def obter(self, pai_id: int, item_id: Any):
        try:
            item = self.repository.buscar_por_id(int(item_id))
        except (TypeError, ValueError):
            item = None
        if item is None or getattr(item, self.campo_pai) != pai_id:
            raise NaoEncontrado(f"{self.rotulo} não encontrado")
        return item

    def _verificar(self, pai_id: int, dados: Dict[str, Any], item_id: Optional[int] = None) -> None:
        if self.verificar is not None:
            self.verificar(dados)
        if not self.campo_unico:
            return
        existente = self.repository.buscar_por(**{self.campo_pai: pai_id, self.campo_unico: dados.get(self.campo_unico)})
        if existente is not None and existente.id != item_id:
            raise ErroValidacao(self.mensagem_duplicado)

    def adicionar(self, pai_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        dados = validar_payload(self.schema_criacao, payload)
        self._verificar(pai_id, dados)
        item = self.repository.criar(self.repository.model(**{self.campo_pai: pai_id, **dados}))
        _log('info', f"{self.rotulo} adicionado ({self.campo_pai}={pai_id}, ID: {item.id})")
        return self._serializar(item)

    def editar(self, pai_id: int, item_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        item = self.obter(pai_id, item_id)
        campos = self.schema_criacao.model_fields
        atual = {campo: getattr(item, campo, None) for campo in campos}
        atual.update({campo: valor for campo, valor in (payload or {}).items() if campo in campos})
        dados = validar_payload(self.schema_criacao, atual)
        self._verificar(pai_id, dados, item.id)
        self.repository.atualizar(item, dados)
        _log('info', f"{self.rotulo} editado ({self.campo_pai}={pai_id}, ID: {item.id})")
        return self._serializar(item)

    def remover(self, pai_id: int, item_id: Any) -> Dict[str, Any]:
        item = self.obter(pai_id, item_id)
        self.repository.excluir(item)
        _log('info', f"{self.rotulo} removido ({self.campo_pai}={pai_id}, ID: {item_id})")
        return {'success': True, 'message': 'Item removido com sucesso'}
