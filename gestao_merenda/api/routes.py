from typing import Any, Callable, Dict, Tuple

from flask import current_app, jsonify, request, session
from sqlalchemy.exc import SQLAlchemyError

from ..cardapios.services import CardapioService
from ..contratos.services import ContratoService
from ..decorators import login_obrigatorio, perfil_necessario
from ..erros import ErroServico, ErroValidacao, NaoEncontrado
from ..escolas.services import EscolaService
from ..estoque.services import EstoqueService
from ..fornecedores.services import FornecedorService
from ..modalidades.services import ModalidadeService
from ..pedidos.services import PedidoService
from ..produtos.services import ProdutoService
from ..refeicoes.services import RefeicaoService
from ..rotas.services import RotaService
from ..sessao import obter_sessao, trocar_tenant
from . import api_bp

PERFIS_ESCRITA = ('gestor',)

SERVICOS: Dict[str, Callable[[], Any]] = {
    'escolas': EscolaService,
    'modalidades': ModalidadeService,
    'fornecedores': FornecedorService,
    'produtos': ProdutoService,
    'contratos': ContratoService,
    'pedidos': PedidoService,
    'cardapios': CardapioService,
    'refeicoes': RefeicaoService,
    'rotas': RotaService,
    'estoque': EstoqueService,
}

# (entidade, sub-recurso) -> métodos do serviço: listar_<plural>, adicionar_<singular>, ...
SUBRECURSOS: Dict[Tuple[str, str], Tuple[str, str]] = {
    ('contratos', 'produtos'): ('produto', 'produtos'),
    ('escolas', 'modalidades'): ('modalidade', 'modalidades'),
    ('rotas', 'escolas'): ('escola', 'escolas'),
    ('pedidos', 'itens'): ('item', 'itens'),
}


def _usuario() -> str:
    return session.get('usuario_nome', 'N/A')


def _servico(entidade: str):
    fabrica = SERVICOS.get(entidade)
    if fabrica is None:
        raise NaoEncontrado(f"Entidade '{entidade}' não encontrada")
    return fabrica()


def _metodo_subrecurso(entidade: str, sub: str, operacao: str):
    nomes = SUBRECURSOS.get((entidade, sub))
    if nomes is None:
        raise NaoEncontrado(f"Sub-recurso '{sub}' não encontrado")
    singular, plural = nomes
    operacao = f"listar_{plural}" if operacao == 'listar' else f"{operacao}_{singular}"
    return getattr(_servico(entidade), operacao)


def _payload() -> Dict[str, Any]:
    dados = request.get_json(silent=True)
    if dados is None:
        return request.form.to_dict()
    if not isinstance(dados, dict):
        raise ErroValidacao('Payload inválido')
    return dados


@api_bp.errorhandler(ErroServico)
def erro_servico(e):
    return jsonify(e.to_dict()), e.status


@api_bp.errorhandler(SQLAlchemyError)
def erro_banco(e):
    current_app.logger.error(f"Erro de banco na API ({request.path}): {str(e)}")
    return jsonify({'success': False, 'message': 'Erro ao acessar o banco de dados. Tente novamente.'}), 500


# ------------------------------------------------------------------ sessão

@api_bp.route('/sessao', methods=['GET'])
@login_obrigatorio
def sessao_atual():
    contexto = obter_sessao()
    return jsonify({
        'success': True,
        'user': contexto.user,
        'perfil': contexto.perfil,
        'tenant_atual': contexto.tenant_atual,
        'tenants_disponiveis': contexto.tenants_disponiveis,
    })


@api_bp.route('/sessao/tenant', methods=['POST'])
@login_obrigatorio
def alterar_tenant():
    contexto = trocar_tenant(_payload().get('tenant_id'))
    current_app.logger.info(f"Tenant alterado para {contexto.tenant_atual['codigo']} por {_usuario()}")
    return jsonify({'success': True, 'tenant_atual': contexto.tenant_atual})


# ---------------------------------------------------------------- estoque

@api_bp.route('/estoque/resumo', methods=['GET'])
@login_obrigatorio
def resumo_estoque():
    return jsonify(EstoqueService().resumo())


# ---------------------------------------------------------------- pedidos

@api_bp.route('/pedidos/produtos-disponiveis', methods=['GET'])
@login_obrigatorio
def produtos_disponiveis_pedido():
    return jsonify(PedidoService().listar_produtos_disponiveis())


# --------------------------------------------------------------- entidades

@api_bp.route('/<entidade>', methods=['GET'])
@login_obrigatorio
def listar(entidade):
    return jsonify(_servico(entidade).listar())


@api_bp.route('/<entidade>/<int:id>', methods=['GET'])
@login_obrigatorio
def buscar(entidade, id):
    return jsonify(_servico(entidade).buscar(id))


@api_bp.route('/<entidade>', methods=['POST'])
@perfil_necessario(*PERFIS_ESCRITA)
def criar(entidade):
    registro = _servico(entidade).criar(_payload())
    current_app.logger.info(f"API: {entidade} {registro['id']} criado por {_usuario()}")
    return jsonify(registro), 201


@api_bp.route('/<entidade>/<int:id>', methods=['PUT'])
@perfil_necessario(*PERFIS_ESCRITA)
def editar(entidade, id):
    registro = _servico(entidade).editar(id, _payload())
    current_app.logger.info(f"API: {entidade} {id} editado por {_usuario()}")
    return jsonify(registro)


@api_bp.route('/<entidade>/<int:id>', methods=['DELETE'])
@perfil_necessario(*PERFIS_ESCRITA)
def remover(entidade, id):
    forcar = request.args.get('forcar', '').lower() in ('1', 'true', 'sim')
    resultado = _servico(entidade).remover(id, forcar=forcar)
    current_app.logger.info(f"API: {entidade} {id} removido por {_usuario()} (forçado: {forcar})")
    return jsonify(resultado)


# ------------------------------------------------------------ sub-recursos

@api_bp.route('/<entidade>/<int:id>/<sub>', methods=['GET'])
@login_obrigatorio
def listar_itens(entidade, id, sub):
    return jsonify(_metodo_subrecurso(entidade, sub, 'listar')(id))


@api_bp.route('/<entidade>/<int:id>/<sub>', methods=['POST'])
@perfil_necessario(*PERFIS_ESCRITA)
def adicionar_item(entidade, id, sub):
    item = _metodo_subrecurso(entidade, sub, 'adicionar')(id, _payload())
    current_app.logger.info(f"API: item {item['id']} de {sub} adicionado em {entidade} {id} por {_usuario()}")
    return jsonify(item), 201


@api_bp.route('/<entidade>/<int:id>/<sub>/<int:item_id>', methods=['PUT'])
@perfil_necessario(*PERFIS_ESCRITA)
def editar_item(entidade, id, sub, item_id):
    return jsonify(_metodo_subrecurso(entidade, sub, 'editar')(id, item_id, _payload()))


@api_bp.route('/<entidade>/<int:id>/<sub>/<int:item_id>', methods=['DELETE'])
@perfil_necessario(*PERFIS_ESCRITA)
def remover_item(entidade, id, sub, item_id):
    resultado = _metodo_subrecurso(entidade, sub, 'remover')(id, item_id)
    current_app.logger.info(f"API: item {item_id} de {sub} removido de {entidade} {id} por {_usuario()}")
    return jsonify(resultado)
