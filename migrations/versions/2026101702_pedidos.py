"""pedidos de compra e seus itens

Revision ID: 2026101702_pedidos
Revises: 2026101701_esquema_inicial
Create Date: 2026-10-17 12:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "2026101702_pedidos"
down_revision = "2026101701_esquema_inicial"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "pedido",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("numero", sa.String(length=50), nullable=False, unique=True),
        sa.Column("data_pedido", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="rascunho"),
        sa.Column("observacoes", sa.Text()),
        sa.Column("criado_em", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "pedido_item",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("pedido_id", sa.Integer(), sa.ForeignKey("pedido.id"), nullable=False),
        sa.Column("contrato_produto_id", sa.Integer(), sa.ForeignKey("contrato_produto.id"), nullable=False),
        sa.Column("quantidade", sa.Numeric(12, 3), nullable=False),
        sa.Column("data_entrega_prevista", sa.Date(), nullable=False),
        sa.Column("observacoes", sa.Text()),
        sa.UniqueConstraint("pedido_id", "contrato_produto_id", name="uq_pedido_contrato_produto"),
    )
    op.create_index("ix_pedido_item_pedido_id", "pedido_item", ["pedido_id"], unique=False)


def downgrade():
    op.drop_index("ix_pedido_item_pedido_id", table_name="pedido_item")
    op.drop_table("pedido_item")
    op.drop_table("pedido")
