from datetime import datetime, timezone
import enum

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from . import db


def utcnow():
    """Retorna datetime timezone-aware em UTC."""
    return datetime.now(timezone.utc)


class TipoAdministracao(enum.Enum):
    MUNICIPAL = 'municipal'
    ESTADUAL = 'estadual'
    FEDERAL = 'federal'
    PARTICULAR = 'particular'


class TipoRefeicao(enum.Enum):
    CAFE_MANHA = 'cafe_manha'
    ALMOCO = 'almoco'
    LANCHE = 'lanche'
    JANTAR = 'jantar'
    CEIA = 'ceia'


class StatusPedido(enum.Enum):
    RASCUNHO = 'rascunho'
    PENDENTE = 'pendente'
    APROVADO = 'aprovado'
    EM_SEPARACAO = 'em_separacao'
    ENVIADO = 'enviado'
    ENTREGUE = 'entregue'
    CANCELADO = 'cancelado'


class PerfilUsuario(enum.Enum):
    ADMIN = 'admin'
    GESTOR = 'gestor'
    OPERADOR = 'operador'


def enum_values(enum_cls):
    # Retorna apenas os valores legíveis do enum
    return [member.value for member in enum_cls]


usuario_tenant = db.Table(
    'usuario_tenant',
    db.Column('usuario_id', db.Integer, db.ForeignKey('usuario.id'), primary_key=True),
    db.Column('tenant_id', db.Integer, db.ForeignKey('tenant.id'), primary_key=True),
)


class Tenant(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    codigo = db.Column(db.String(50), unique=True, nullable=False)
    ativo = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Tenant {self.codigo}>'


class Usuario(db.Model, UserMixin):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(50), nullable=False, unique=True)
    senha_hash = db.Column(db.String(255), nullable=False)
    perfil = db.Column(db.String(20), nullable=False, default=PerfilUsuario.OPERADOR.value)
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    tenants = db.relationship('Tenant', secondary=usuario_tenant, lazy='select', order_by='Tenant.nome')

    def set_senha(self, senha):
        """
        Gera e armazena o hash da senha usando werkzeug.security
        """
        self.senha_hash = generate_password_hash(senha)

    def check_senha(self, senha):
        return check_password_hash(self.senha_hash, senha)

    @property
    def senha(self):
        raise AttributeError('Acesso direto à senha não é permitido. Use set_senha() e check_senha()')

    @property
    def is_active(self):
        return bool(self.ativo)


class Modalidade(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    codigo_financeiro = db.Column(db.String(50))
    valor_repasse = db.Column(db.Numeric(12, 2), default=0)
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)


class Escola(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    codigo = db.Column(db.String(50))
    codigo_acesso = db.Column(db.String(20))
    endereco = db.Column(db.String(255))
    municipio = db.Column(db.String(100))
    endereco_maps = db.Column(db.String(500))
    telefone = db.Column(db.String(20))
    email = db.Column(db.String(255))
    nome_gestor = db.Column(db.String(255))
    administracao = db.Column(db.String(20))  # municipal, estadual, federal, particular
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)

    modalidades = db.relationship(
        'EscolaModalidade',
        backref='escola',
        lazy='select',
        cascade='all, delete-orphan',
    )


class EscolaModalidade(db.Model):
    __tablename__ = 'escola_modalidade'
    __table_args__ = (db.UniqueConstraint('escola_id', 'modalidade_id', name='uq_escola_modalidade'),)

    id = db.Column(db.Integer, primary_key=True)
    escola_id = db.Column(db.Integer, db.ForeignKey('escola.id'), nullable=False)
    modalidade_id = db.Column(db.Integer, db.ForeignKey('modalidade.id'), nullable=False)
    quantidade_alunos = db.Column(db.Integer, nullable=False, default=0)

    modalidade = db.relationship('Modalidade')


class Fornecedor(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    cnpj = db.Column(db.String(20), nullable=False, unique=True)
    email = db.Column(db.String(255))
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)

    contratos = db.relationship('Contrato', backref='fornecedor', lazy='dynamic')


class Produto(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    descricao = db.Column(db.Text)
    unidade = db.Column(db.String(20))
    categoria = db.Column(db.String(100))
    marca = db.Column(db.String(100))
    codigo_barras = db.Column(db.String(50))
    peso = db.Column(db.Numeric(12, 3))
    validade_minima = db.Column(db.Integer)  # dias
    fator_divisao = db.Column(db.Numeric(12, 3))
    tipo_processamento = db.Column(db.String(50))
    preco_referencia = db.Column(db.Numeric(12, 2))
    estoque_minimo = db.Column(db.Numeric(12, 3))
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)


class Contrato(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    fornecedor_id = db.Column(db.Integer, db.ForeignKey('fornecedor.id'), nullable=False)
    numero = db.Column(db.String(50), nullable=False)
    data_inicio = db.Column(db.Date, nullable=False)
    data_fim = db.Column(db.Date, nullable=False)
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)

    itens = db.relationship(
        'ContratoProduto',
        backref='contrato',
        lazy='select',
        cascade='all, delete-orphan',
    )


class ContratoProduto(db.Model):
    __tablename__ = 'contrato_produto'

    id = db.Column(db.Integer, primary_key=True)
    contrato_id = db.Column(db.Integer, db.ForeignKey('contrato.id'), nullable=False)
    produto_id = db.Column(db.Integer, db.ForeignKey('produto.id'), nullable=False)
    quantidade_contratada = db.Column(db.Numeric(12, 3), nullable=False, default=0)
    preco_unitario = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    produto = db.relationship('Produto')
    itens_pedido = db.relationship(
        'PedidoItem',
        backref='contrato_produto',
        lazy='select',
        cascade='all, delete-orphan',
    )


class Cardapio(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    modalidade_id = db.Column(db.Integer, db.ForeignKey('modalidade.id'), nullable=True)
    periodo_dias = db.Column(db.Integer)
    data_inicio = db.Column(db.Date)
    data_fim = db.Column(db.Date)
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)

    modalidade = db.relationship('Modalidade')


class Refeicao(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    descricao = db.Column(db.Text)
    tipo = db.Column(db.String(20))  # cafe_manha, almoco, lanche, jantar, ceia
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)


class Rota(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    descricao = db.Column(db.Text)
    cor = db.Column(db.String(20))
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)

    escolas = db.relationship(
        'RotaEscola',
        backref='rota',
        lazy='select',
        cascade='all, delete-orphan',
        order_by='RotaEscola.ordem',
    )


class RotaEscola(db.Model):
    __tablename__ = 'rota_escola'
    __table_args__ = (db.UniqueConstraint('rota_id', 'escola_id', name='uq_rota_escola'),)

    id = db.Column(db.Integer, primary_key=True)
    rota_id = db.Column(db.Integer, db.ForeignKey('rota.id'), nullable=False)
    escola_id = db.Column(db.Integer, db.ForeignKey('escola.id'), nullable=False)
    ordem = db.Column(db.Integer, default=0)

    escola = db.relationship('Escola')


class EstoqueLote(db.Model):
    __tablename__ = 'estoque_lote'

    id = db.Column(db.Integer, primary_key=True)
    produto_id = db.Column(db.Integer, db.ForeignKey('produto.id'), nullable=False)
    lote = db.Column(db.String(100), nullable=False)
    quantidade = db.Column(db.Numeric(12, 3), nullable=False)
    data_validade = db.Column(db.Date)
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    criado_em = db.Column(db.DateTime, default=utcnow)

    produto = db.relationship('Produto')

    def __repr__(self):
        return f'<EstoqueLote {self.lote} - Qtd: {self.quantidade}>'


class Pedido(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    numero = db.Column(db.String(50), nullable=False, unique=True)
    data_pedido = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=StatusPedido.RASCUNHO.value)
    observacoes = db.Column(db.Text)
    criado_em = db.Column(db.DateTime, default=utcnow)

    itens = db.relationship(
        'PedidoItem',
        backref='pedido',
        lazy='select',
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f'<Pedido {self.numero} - {self.status}>'


class PedidoItem(db.Model):
    __tablename__ = 'pedido_item'
    __table_args__ = (
        db.UniqueConstraint('pedido_id', 'contrato_produto_id', name='uq_pedido_contrato_produto'),
    )

    id = db.Column(db.Integer, primary_key=True)
    pedido_id = db.Column(db.Integer, db.ForeignKey('pedido.id'), nullable=False, index=True)
    contrato_produto_id = db.Column(db.Integer, db.ForeignKey('contrato_produto.id'), nullable=False)
    quantidade = db.Column(db.Numeric(12, 3), nullable=False)
    data_entrega_prevista = db.Column(db.Date, nullable=False)
    observacoes = db.Column(db.Text)
