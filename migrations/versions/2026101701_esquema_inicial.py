"""esquema inicial da gestao de merenda

Revision ID: 2026101701_esquema_inicial
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "2026101701_esquema_inicial"
down_revision = None
branch_labels = None
depends_on = None


def _ativo():
    return sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.true())


def _criado_em():
    return sa.Column("criado_em", sa.DateTime(), nullable=True)


def upgrade():
    op.create_table(
        "tenant",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("codigo", sa.String(length=50), nullable=False, unique=True),
        _ativo(),
    )
    op.create_table(
        "usuario",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=50), nullable=False, unique=True),
        sa.Column("senha_hash", sa.String(length=255), nullable=False),
        sa.Column("perfil", sa.String(length=20), nullable=False, server_default="operador"),
        _ativo(),
    )
    op.create_table(
        "usuario_tenant",
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuario.id"), primary_key=True),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenant.id"), primary_key=True),
    )
    op.create_table(
        "modalidade",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("codigo_financeiro", sa.String(length=50)),
        sa.Column("valor_repasse", sa.Numeric(12, 2)),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "escola",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("codigo", sa.String(length=50)),
        sa.Column("codigo_acesso", sa.String(length=20)),
        sa.Column("endereco", sa.String(length=255)),
        sa.Column("municipio", sa.String(length=100)),
        sa.Column("endereco_maps", sa.String(length=500)),
        sa.Column("telefone", sa.String(length=20)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("nome_gestor", sa.String(length=255)),
        sa.Column("administracao", sa.String(length=20)),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "escola_modalidade",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("escola_id", sa.Integer(), sa.ForeignKey("escola.id"), nullable=False),
        sa.Column("modalidade_id", sa.Integer(), sa.ForeignKey("modalidade.id"), nullable=False),
        sa.Column("quantidade_alunos", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("escola_id", "modalidade_id", name="uq_escola_modalidade"),
    )
    op.create_table(
        "fornecedor",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("cnpj", sa.String(length=20), nullable=False, unique=True),
        sa.Column("email", sa.String(length=255)),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "produto",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("descricao", sa.Text()),
        sa.Column("unidade", sa.String(length=20)),
        sa.Column("categoria", sa.String(length=100)),
        sa.Column("marca", sa.String(length=100)),
        sa.Column("codigo_barras", sa.String(length=50)),
        sa.Column("peso", sa.Numeric(12, 3)),
        sa.Column("validade_minima", sa.Integer()),
        sa.Column("fator_divisao", sa.Numeric(12, 3)),
        sa.Column("tipo_processamento", sa.String(length=50)),
        sa.Column("preco_referencia", sa.Numeric(12, 2)),
        sa.Column("estoque_minimo", sa.Numeric(12, 3)),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "contrato",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("fornecedor_id", sa.Integer(), sa.ForeignKey("fornecedor.id"), nullable=False),
        sa.Column("numero", sa.String(length=50), nullable=False),
        sa.Column("data_inicio", sa.Date(), nullable=False),
        sa.Column("data_fim", sa.Date(), nullable=False),
        _ativo(),
        _criado_em(),
    )
    op.create_index("ix_contrato_fornecedor_id", "contrato", ["fornecedor_id"], unique=False)
    op.create_table(
        "contrato_produto",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("contrato_id", sa.Integer(), sa.ForeignKey("contrato.id"), nullable=False),
        sa.Column("produto_id", sa.Integer(), sa.ForeignKey("produto.id"), nullable=False),
        sa.Column("quantidade_contratada", sa.Numeric(12, 3), nullable=False, server_default="0"),
        sa.Column("preco_unitario", sa.Numeric(12, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "cardapio",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("modalidade_id", sa.Integer(), sa.ForeignKey("modalidade.id"), nullable=True),
        sa.Column("periodo_dias", sa.Integer()),
        sa.Column("data_inicio", sa.Date()),
        sa.Column("data_fim", sa.Date()),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "refeicao",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("descricao", sa.Text()),
        sa.Column("tipo", sa.String(length=20)),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "rota",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("descricao", sa.Text()),
        sa.Column("cor", sa.String(length=20)),
        _ativo(),
        _criado_em(),
    )
    op.create_table(
        "rota_escola",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("rota_id", sa.Integer(), sa.ForeignKey("rota.id"), nullable=False),
        sa.Column("escola_id", sa.Integer(), sa.ForeignKey("escola.id"), nullable=False),
        sa.Column("ordem", sa.Integer(), server_default="0"),
        sa.UniqueConstraint("rota_id", "escola_id", name="uq_rota_escola"),
    )
    op.create_table(
        "estoque_lote",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("produto_id", sa.Integer(), sa.ForeignKey("produto.id"), nullable=False),
        sa.Column("lote", sa.String(length=100), nullable=False),
        sa.Column("quantidade", sa.Numeric(12, 3), nullable=False),
        sa.Column("data_validade", sa.Date()),
        _ativo(),
        _criado_em(),
    )
    op.create_index("ix_estoque_lote_produto_id", "estoque_lote", ["produto_id"], unique=False)


def downgrade():
    op.drop_index("ix_estoque_lote_produto_id", table_name="estoque_lote")
    op.drop_table("estoque_lote")
    op.drop_table("rota_escola")
    op.drop_table("rota")
    op.drop_table("refeicao")
    op.drop_table("cardapio")
    op.drop_table("contrato_produto")
    op.drop_index("ix_contrato_fornecedor_id", table_name="contrato")
    op.drop_table("contrato")
    op.drop_table("produto")
    op.drop_table("fornecedor")
    op.drop_table("escola_modalidade")
    op.drop_table("escola")
    op.drop_table("modalidade")
    op.drop_table("usuario_tenant")
    op.drop_table("usuario")
    op.drop_table("tenant")
