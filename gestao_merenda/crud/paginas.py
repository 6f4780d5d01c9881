"""
Registro genérico das páginas de cadastro
=========================================

Cada entidade descreve sua tela com uma ``PaginaEntidade`` e chama
``registrar_paginas_crud(blueprint, pagina)``. As rotas montam um
``ControladorListagem`` (ou ``ControladorDetalhe``) por requisição; o estado
de filtros, ordenação, paginação e diálogos vem da query string e toda
escrita termina em redirecionamento, o que força a recarga da coleção.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode

from flask import (
    current_app,
    flash,
    redirect,
    render_template,
    request,
    send_file,
    session,
    url_for,
)
from werkzeug.datastructures import MultiDict

from ..decorators import login_obrigatorio, perfil_necessario
from ..erros import ErroServico
from ..listagem import (
    ConfigDetalhe,
    ConfigListagem,
    ControladorDetalhe,
    ControladorListagem,
    DialogoExclusao,
)
from ..listagem.filtros import STATUS_ATIVO, STATUS_INATIVO, STATUS_TODOS
from ..listagem.paginacao import OPCOES_LINHAS_POR_PAGINA
from ..sessao import obter_sessao
from ..utils.planilhas import MIMETYPE_XLSX

# Parâmetros que abrem diálogos e não fazem parte do estado da listagem
PARAMETROS_DIALOGO = ('novo', 'editar', 'excluir', 'sub', 'item', 'remover_item')

OPCOES_STATUS = [(STATUS_TODOS, 'Todos'), (STATUS_ATIVO, 'Ativos'), (STATUS_INATIVO, 'Inativos')]

PERFIS_ESCRITA = ('gestor',)


@dataclass
class ColunaTabela:
    campo: str
    rotulo: str
    formato: Optional[str] = None  # moeda, data, numero, inteiro, booleano, status, cor, link, vencido
    link_detalhe: bool = False


@dataclass
class AcaoLinha:
    """Link extra por linha, ex.: contratos do fornecedor."""

    rotulo: str
    endpoint: str
    parametro: str


@dataclass
class ControleFiltro:
    nome: str
    rotulo: str
    opcoes: Optional[Callable[[ControladorListagem], Sequence[Tuple[Any, str]]]] = None
    multiplo: bool = False
    tipo: str = 'selecao'  # selecao, data


def opcoes_status(_ctrl) -> List[Tuple[Any, str]]:
    return list(OPCOES_STATUS)


def opcoes_distintas(nome_filtro: str):
    """Opções montadas com os valores presentes na coleção carregada."""
    return lambda ctrl: [(valor, valor) for valor in ctrl.opcoes(nome_filtro)]


def opcoes_auxiliar(colecao: str, rotulo: str = 'nome'):
    return lambda ctrl: [(r.get('id'), r.get(rotulo) or '') for r in ctrl.auxiliares.get(colecao, [])]


def opcoes_fixas(opcoes: Sequence[Tuple[Any, str]]):
    return lambda _ctrl: list(opcoes)


@dataclass
class PaginaEntidade:
    titulo: str
    rotulo: str
    servico: Callable[[], Any]
    listagem: Callable[[Any], ConfigListagem]
    colunas: Sequence[ColunaTabela]
    controles_filtro: Sequence[ControleFiltro] = ()
    detalhe: Optional[Callable[[Any], ConfigDetalhe]] = None
    campos_detalhe: Sequence[ColunaTabela] = ()
    colunas_subrecursos: Dict[str, Sequence[ColunaTabela]] = field(default_factory=dict)
    rotulos_agregados: Dict[str, Tuple[str, Optional[str]]] = field(default_factory=dict)
    acoes_linha: Sequence[AcaoLinha] = ()
    # Tabela de totais acima da listagem (ex.: posição de estoque por produto)
    resumo: Optional[Callable[[ControladorListagem], Sequence[Dict[str, Any]]]] = None
    colunas_resumo: Sequence[ColunaTabela] = ()
    # Tabela extra na página de detalhe (ex.: itens do pedido por fornecedor)
    resumo_detalhe: Optional[Callable[[ControladorDetalhe], Sequence[Dict[str, Any]]]] = None
    colunas_resumo_detalhe: Sequence[ColunaTabela] = ()
    titulo_resumo_detalhe: str = ''
    planilhas: bool = False
    placeholder_busca: str = 'Buscar...'
    feminino: bool = False
    blueprint: str = ''

    def mensagem(self, participio: str, complemento: str = '') -> str:
        """Ex.: mensagem('removido', ' com sucesso!') -> 'Escola removida com sucesso!'"""
        if self.feminino and participio.endswith('o'):
            participio = participio[:-1] + 'a'
        return f"{self.rotulo} {participio}{complemento}"

    def endpoint(self, nome: str) -> str:
        return f"{self.blueprint}.{nome}"


def _args_retorno() -> MultiDict:
    """Estado da listagem enviado pelos formulários no campo `retorno`."""
    bruto = request.form.get('retorno', '')
    pares = [(k, v) for k, v in parse_qsl(bruto.lstrip('?'), keep_blank_values=False) if k not in PARAMETROS_DIALOGO]
    return MultiDict(pares)


def _query_atual() -> str:
    pares = [(k, v) for k, v in request.args.items(multi=True) if k not in PARAMETROS_DIALOGO]
    return urlencode(pares)


def _novo_controlador(pagina: PaginaEntidade) -> ControladorListagem:
    linhas = current_app.config.get('LISTAGEM_LINHAS_POR_PAGINA', 10)
    opcoes = current_app.config.get('LISTAGEM_OPCOES_LINHAS', OPCOES_LINHAS_POR_PAGINA)
    return ControladorListagem(pagina.listagem(pagina.servico()), linhas_por_pagina=linhas, opcoes_linhas=opcoes)


def _usuario() -> str:
    return session.get('usuario_nome', 'N/A')


def _pode_editar() -> bool:
    perfil = obter_sessao().perfil
    return perfil == 'admin' or perfil in PERFIS_ESCRITA


def _url_listagem(pagina: PaginaEntidade, args: MultiDict) -> str:
    return url_for(pagina.endpoint('listar'), **args.to_dict(flat=False))


def _renderizar_listagem(pagina: PaginaEntidade, ctrl: ControladorListagem, retorno: str, status: int = 200):
    def url_listagem(**alteracoes):
        return url_for(pagina.endpoint('listar'), **ctrl.parametros(**alteracoes))

    return render_template(
        'crud/listagem.html',
        pagina=pagina,
        ctrl=ctrl,
        retorno=retorno,
        url_listagem=url_listagem,
        opcoes_linhas=current_app.config.get('LISTAGEM_OPCOES_LINHAS', OPCOES_LINHAS_POR_PAGINA),
        pode_editar=_pode_editar(),
    ), status


def _renderizar_detalhe(pagina: PaginaEntidade, det: ControladorDetalhe, exclusao: DialogoExclusao, status: int = 200):
    if det.erro and status == 200:
        if det.nao_encontrado:
            status = 404
        elif det.identificador is None:
            status = 400
    return render_template(
        'crud/detalhe.html',
        pagina=pagina,
        det=det,
        exclusao=exclusao,
        pode_editar=_pode_editar(),
    ), status


def registrar_paginas_crud(bp, pagina: PaginaEntidade) -> PaginaEntidade:
    """Registra listagem, diálogos, planilhas e detalhe da entidade no blueprint."""
    pagina.blueprint = bp.name

    # ------------------------------------------------------------- listagem

    @login_obrigatorio
    def listar():
        ctrl = _novo_controlador(pagina)
        ctrl.carregar()
        ctrl.aplicar_parametros(request.args)

        if request.args.get('novo'):
            ctrl.abrir_criacao()
        elif request.args.get('editar'):
            if not ctrl.abrir_edicao(request.args.get('editar')) and not ctrl.erro:
                flash(pagina.mensagem('não encontrado'), 'error')
        elif request.args.get('excluir'):
            if not ctrl.abrir_exclusao(request.args.get('excluir')) and not ctrl.erro:
                flash(pagina.mensagem('não encontrado'), 'error')

        current_app.logger.info(f"Listagem de {ctrl.config.rotulo_plural} acessada por {_usuario()}")
        return _renderizar_listagem(pagina, ctrl, _query_atual())

    @perfil_necessario(*PERFIS_ESCRITA)
    def salvar(id=None):
        args = _args_retorno()
        ctrl = _novo_controlador(pagina)
        ctrl.carregar()
        ctrl.aplicar_parametros(args)

        if id is None:
            ctrl.abrir_criacao()
        elif not ctrl.abrir_edicao(id):
            flash(ctrl.erro or pagina.mensagem('não encontrado'), 'error')
            return redirect(_url_listagem(pagina, args))

        ctrl.dialogo.preencher(request.form)
        if ctrl.dialogo.enviar():
            acao = 'editado' if id else 'criado'
            current_app.logger.info(f"{pagina.rotulo} {acao} por {_usuario()}")
            flash(pagina.mensagem('salvo', ' com sucesso!'), 'success')
            return redirect(_url_listagem(pagina, args))

        return _renderizar_listagem(pagina, ctrl, urlencode(list(args.items(multi=True))), status=400)

    @perfil_necessario(*PERFIS_ESCRITA)
    def excluir(id):
        args = _args_retorno()
        origem = request.form.get('origem')
        forcar = request.form.get('forcar') in ('1', 'on', 'true')

        if origem == 'detalhe' and pagina.detalhe is not None:
            servico = pagina.servico()
            det = ControladorDetalhe(pagina.detalhe(servico), id)
            det.carregar()
            exclusao = DialogoExclusao(servico.remover)
            if det.entidade is None:
                flash(det.erro or pagina.mensagem('não encontrado'), 'error')
                return redirect(url_for(pagina.endpoint('listar')))
            exclusao.abrir(det.entidade)
        else:
            ctrl = _novo_controlador(pagina)
            ctrl.carregar()
            ctrl.aplicar_parametros(args)
            if not ctrl.abrir_exclusao(id):
                flash(ctrl.erro or pagina.mensagem('não encontrado'), 'error')
                return redirect(_url_listagem(pagina, args))
            exclusao = ctrl.exclusao

        exclusao.marcar_forcar(forcar)
        # Sem vínculos conhecidos a confirmação é sempre permitida
        if exclusao.confirmar():
            current_app.logger.info(f"{pagina.rotulo} excluído (ID: {id}) por {_usuario()}")
            flash(pagina.mensagem('removido', ' com sucesso!'), 'success')
            return redirect(_url_listagem(pagina, args))

        if exclusao.em_alerta:
            # O diálogo volta com as dependências e a opção de forçar
            if origem == 'detalhe' and pagina.detalhe is not None:
                return _renderizar_detalhe(pagina, det, exclusao, status=409)
            return _renderizar_listagem(pagina, ctrl, urlencode(list(args.items(multi=True))), status=409)

        flash(exclusao.erro or 'Erro ao remover. Tente novamente.', 'error')
        if origem == 'detalhe':
            return redirect(url_for(pagina.endpoint('detalhe'), id=id))
        return redirect(_url_listagem(pagina, args))

    bp.add_url_rule('/', 'listar', listar, methods=['GET'])
    bp.add_url_rule('/salvar', 'criar', salvar, methods=['POST'])
    bp.add_url_rule('/<int:id>/salvar', 'editar', salvar, methods=['POST'])
    bp.add_url_rule('/<int:id>/excluir', 'excluir', excluir, methods=['POST'])

    # ------------------------------------------------------------- planilhas

    if pagina.planilhas:
        _registrar_planilhas(bp, pagina)

    # --------------------------------------------------------------- detalhe

    if pagina.detalhe is not None:
        _registrar_detalhe(bp, pagina)

    return pagina


def _registrar_planilhas(bp, pagina: PaginaEntidade) -> None:
    nome_arquivo = pagina.titulo.lower().replace(' ', '_')

    @login_obrigatorio
    def exportar():
        try:
            arquivo = pagina.servico().exportar_excel()
        except Exception as e:
            current_app.logger.error(f"Erro ao exportar {pagina.titulo}: {str(e)}")
            flash(f"Erro ao exportar {pagina.titulo.lower()}.", 'error')
            return redirect(url_for(pagina.endpoint('listar')))
        current_app.logger.info(f"Exportação de {pagina.titulo} por {_usuario()}")
        return send_file(arquivo, as_attachment=True, download_name=f'{nome_arquivo}.xlsx', mimetype=MIMETYPE_XLSX)

    @login_obrigatorio
    def modelo():
        arquivo = pagina.servico().gerar_modelo()
        return send_file(arquivo, as_attachment=True, download_name=f'modelo_{nome_arquivo}.xlsx', mimetype=MIMETYPE_XLSX)

    @perfil_necessario(*PERFIS_ESCRITA)
    def importar():
        arquivo = request.files.get('arquivo')
        try:
            resultado = pagina.servico().importar_lote(arquivo)
        except ErroServico as exc:
            flash(exc.mensagem, 'error')
            return redirect(url_for(pagina.endpoint('listar')))

        current_app.logger.info(
            f"Importação de {pagina.titulo} por {_usuario()}: {resultado['sucesso']} criados, "
            f"{len(resultado['erros'])} erros"
        )
        flash(f"{resultado['sucesso']} registro(s) importado(s).", 'success')
        for erro in resultado['erros'][:10]:
            flash(f"Linha {erro['linha']}: {erro['erro']}", 'error')
        return redirect(url_for(pagina.endpoint('listar')))

    bp.add_url_rule('/exportar', 'exportar', exportar, methods=['GET'])
    bp.add_url_rule('/modelo', 'modelo', modelo, methods=['GET'])
    bp.add_url_rule('/importar', 'importar', importar, methods=['POST'])


def _registrar_detalhe(bp, pagina: PaginaEntidade) -> None:

    def _montar(id) -> Tuple[ControladorDetalhe, DialogoExclusao]:
        servico = pagina.servico()
        det = ControladorDetalhe(pagina.detalhe(servico), id)
        det.carregar()
        return det, DialogoExclusao(servico.remover)

    @login_obrigatorio
    def detalhe(id):
        det, exclusao = _montar(id)
        if det.entidade is not None:
            if request.args.get('editar'):
                det.iniciar_edicao()
            elif request.args.get('excluir'):
                exclusao.abrir(det.entidade)
            elif request.args.get('sub'):
                sub = request.args.get('sub')
                if request.args.get('remover_item'):
                    det.abrir_exclusao_item(sub, request.args.get('remover_item'))
                else:
                    item = request.args.get('item')
                    det.abrir_item(sub, None if item in (None, '', 'novo') else item)
        return _renderizar_detalhe(pagina, det, exclusao)

    @perfil_necessario(*PERFIS_ESCRITA)
    def atualizar(id):
        det, exclusao = _montar(id)
        if not det.iniciar_edicao():
            flash(det.erro or pagina.mensagem('não encontrado'), 'error')
            return redirect(url_for(pagina.endpoint('listar')))
        det.edicao.preencher(request.form)
        if det.edicao.enviar():
            current_app.logger.info(f"{pagina.rotulo} editado (ID: {id}) por {_usuario()}")
            flash(pagina.mensagem('atualizado', ' com sucesso!'), 'success')
            return redirect(url_for(pagina.endpoint('detalhe'), id=id))
        return _renderizar_detalhe(pagina, det, exclusao, status=400)

    @perfil_necessario(*PERFIS_ESCRITA)
    def salvar_item(id, sub, item_id=None):
        det, exclusao = _montar(id)
        if det.entidade is None or sub not in det.dialogos:
            flash(det.erro or 'Registro não encontrado', 'error')
            return redirect(url_for(pagina.endpoint('listar')))
        if not det.abrir_item(sub, item_id):
            flash('Item não encontrado', 'error')
            return redirect(url_for(pagina.endpoint('detalhe'), id=id))

        dialogo = det.dialogos[sub]
        dialogo.preencher(request.form)
        if dialogo.enviar():
            current_app.logger.info(f"{pagina.rotulo} {id}: item de {sub} salvo por {_usuario()}")
            flash('Item salvo com sucesso!', 'success')
            return redirect(url_for(pagina.endpoint('detalhe'), id=id))
        return _renderizar_detalhe(pagina, det, exclusao, status=400)

    @perfil_necessario(*PERFIS_ESCRITA)
    def remover_item(id, sub, item_id):
        det, _exclusao = _montar(id)
        if det.entidade is None or not det.abrir_exclusao_item(sub, item_id):
            flash(det.erro or 'Item não encontrado', 'error')
            return redirect(url_for(pagina.endpoint('detalhe'), id=id))

        exclusao_item = det.exclusoes[sub]
        if exclusao_item.confirmar():
            current_app.logger.info(f"{pagina.rotulo} {id}: item {item_id} de {sub} removido por {_usuario()}")
            flash('Item removido com sucesso!', 'success')
        else:
            flash(exclusao_item.erro or 'Erro ao remover item. Tente novamente.', 'error')
        return redirect(url_for(pagina.endpoint('detalhe'), id=id))

    bp.add_url_rule('/<int:id>', 'detalhe', detalhe, methods=['GET'])
    bp.add_url_rule('/<int:id>/atualizar', 'atualizar', atualizar, methods=['POST'])
    bp.add_url_rule('/<int:id>/<sub>/salvar', 'adicionar_item', salvar_item, methods=['POST'])
    bp.add_url_rule('/<int:id>/<sub>/<int:item_id>/salvar', 'editar_item', salvar_item, methods=['POST'])
    bp.add_url_rule('/<int:id>/<sub>/<int:item_id>/remover', 'remover_item', remover_item, methods=['POST'])

