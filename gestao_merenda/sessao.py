"""
Contexto de sessão
==================

Estado de autenticação explícito (token, perfil, nome, tenant atual e
tenants disponíveis) guardado na sessão do Flask. Telas leem o contexto por
``obter_sessao()``; apenas login, logout e troca de tenant o alteram.
"""

import secrets
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from flask import has_request_context, session

from .erros import ErroValidacao

CHAVE_SESSAO = 'contexto'


@dataclass
class SessionContext:
    token: Optional[str] = None
    perfil: Optional[str] = None
    nome: Optional[str] = None
    usuario_id: Optional[int] = None
    tenant_atual: Optional[Dict[str, Any]] = None
    tenants_disponiveis: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def autenticado(self) -> bool:
        return bool(self.token and self.usuario_id)

    @property
    def is_admin(self) -> bool:
        return self.perfil == 'admin'

    @property
    def user(self) -> Dict[str, Any]:
        return {'id': self.usuario_id, 'nome': self.nome, 'perfil': self.perfil}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, dados: Optional[Dict[str, Any]]) -> 'SessionContext':
        if not dados:
            return cls()
        campos = {nome: dados.get(nome) for nome in cls.__dataclass_fields__}
        campos['tenants_disponiveis'] = list(campos.get('tenants_disponiveis') or [])
        return cls(**campos)


def _tenant_para_dict(tenant) -> Dict[str, Any]:
    return {'id': tenant.id, 'nome': tenant.nome, 'codigo': tenant.codigo}


def obter_sessao() -> SessionContext:
    if not has_request_context():
        return SessionContext()
    return SessionContext.from_dict(session.get(CHAVE_SESSAO))


def _salvar(contexto: SessionContext) -> SessionContext:
    session[CHAVE_SESSAO] = contexto.to_dict()
    session.modified = True
    return contexto


def iniciar_sessao(usuario) -> SessionContext:
    """Cria o contexto a partir do usuário autenticado."""
    tenants = [_tenant_para_dict(t) for t in getattr(usuario, 'tenants', []) or [] if t.ativo]
    contexto = SessionContext(
        token=secrets.token_urlsafe(32),
        perfil=usuario.perfil,
        nome=usuario.nome,
        usuario_id=usuario.id,
        tenant_atual=tenants[0] if tenants else None,
        tenants_disponiveis=tenants,
    )
    session['usuario_id'] = usuario.id
    session['usuario_nome'] = usuario.nome
    session['usuario_perfil'] = usuario.perfil
    session.permanent = True
    return _salvar(contexto)


def encerrar_sessao() -> None:
    session.pop(CHAVE_SESSAO, None)
    session.pop('usuario_id', None)
    session.pop('usuario_nome', None)
    session.pop('usuario_perfil', None)


def trocar_tenant(tenant_id: Any) -> SessionContext:
    """Troca o tenant atual por um dos tenants disponíveis ao usuário."""
    contexto = obter_sessao()
    try:
        tenant_id = int(tenant_id)
    except (TypeError, ValueError):
        raise ErroValidacao("Tenant inválido")
    for tenant in contexto.tenants_disponiveis:
        if tenant.get('id') == tenant_id:
            contexto.tenant_atual = tenant
            return _salvar(contexto)
    raise ErroValidacao("Tenant não disponível para este usuário")
