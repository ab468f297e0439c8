"""Create products, orders, order_products and logs tables

Revision ID: 3f1c2a9d8e01
Revises:
Create Date: 2026-10-17 09:12:44.310522

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '3f1c2a9d8e01'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

record_status = sa.Enum('ACTIVE', 'DELETED', name='record_status')
order_status = sa.Enum('PENDING', 'PROCESSING', 'APPROVED', 'REJECTED', 'CANCELED', 'COMPLETED', name='order_status')


def upgrade() -> None:
    """Upgrade schema."""
    # Catalog
    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('record_status', record_status, nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.String(1000), nullable=False),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('price', sa.Numeric(18, 2), sa.CheckConstraint('price >= 0'), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), sa.CheckConstraint('stock_quantity >= 0'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_sku', 'products', ['sku'])
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_record_status', 'products', ['record_status'])

    # Orders
    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('record_status', record_status, nullable=False),
        sa.Column('number', sa.String(50), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('order_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', order_status, nullable=False),
    )
    op.create_index('ix_orders_number', 'orders', ['number'])
    op.create_index('ix_orders_order_date', 'orders', ['order_date'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_record_status', 'orders', ['record_status'])

    # Order lines; products cannot be removed while referenced
    op.create_table(
        'order_products',
        sa.Column('order_id', sa.Uuid(), sa.ForeignKey('orders.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('product_id', sa.Uuid(), sa.ForeignKey('products.id', ondelete='RESTRICT'), primary_key=True),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity >= 1'), nullable=False),
        sa.Column('unit_price', sa.Numeric(18, 2), nullable=False),
        sa.Column('discount', sa.Numeric(18, 2), sa.CheckConstraint('discount >= 0'), nullable=False),
        sa.Column('added_date', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_order_products_product_id', 'order_products', ['product_id'])

    # Audit trail
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('resource', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('ip', sa.String(64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    op.create_index('ix_logs_id', 'logs', ['id'])
    op.create_index('ix_logs_ts', 'logs', ['ts'])
    op.create_index('ix_logs_action', 'logs', ['action'])
    op.create_index('ix_logs_resource', 'logs', ['resource'])
    op.create_index('ix_logs_status', 'logs', ['status'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('logs')
    op.drop_table('order_products')
    op.drop_table('orders')
    op.drop_table('products')
    order_status.drop(op.get_bind(), checkfirst=True)
    record_status.drop(op.get_bind(), checkfirst=True)
