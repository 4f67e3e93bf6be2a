"""Create products, variant and inventory tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _produce_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column('id', sa.String(36),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('product_shop', sa.String(100), nullable=False),
        sa.Column('weight', sa.Numeric(10, 2), nullable=True),
        sa.Column('origin', sa.String(255), nullable=True),
        sa.Column('freshness', sa.String(100), nullable=True),
        sa.Column('package_type', sa.String(100), nullable=True),
    )


def upgrade() -> None:
    """Create catalog tables."""
    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('product_name', sa.String(255), nullable=False, index=True),
        sa.Column('product_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('product_discounted_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('product_thumb', sa.String(1000), nullable=True),
        sa.Column('product_description', sa.Text(), nullable=True),
        sa.Column('product_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('product_type', sa.String(50), nullable=False, index=True),
        sa.Column('sub_product_type', sa.String(100), nullable=True),
        sa.Column('product_videos', postgresql.JSONB(), nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.Column('product_pictures', postgresql.JSONB(), nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.Column('product_status', sa.String(50), nullable=False, server_default='active'),
        sa.Column('product_selled', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('product_shop', sa.String(100), nullable=False, index=True),
        sa.Column('is_draft', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='false', index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # A published product is never a draft
    op.create_check_constraint(
        'ck_products_published_not_draft',
        'products',
        'NOT (is_published AND is_draft)',
    )

    # Variant tables, keyed by product ID
    _produce_table('mushrooms')
    _produce_table('vegetables')
    op.create_table(
        'bonsais',
        sa.Column('id', sa.String(36),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('product_shop', sa.String(100), nullable=False),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('style', sa.String(100), nullable=True),
        sa.Column('species', sa.String(255), nullable=True),
        sa.Column('pot_type', sa.String(100), nullable=True),
    )

    # Inventory table
    op.create_table(
        'inventories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.String(36),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('shop_id', sa.String(100), nullable=False, index=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    op.create_unique_constraint(
        'uq_inventories_product_shop',
        'inventories',
        ['product_id', 'shop_id'],
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('inventories')
    op.drop_table('bonsais')
    op.drop_table('vegetables')
    op.drop_table('mushrooms')
    op.drop_table('products')
