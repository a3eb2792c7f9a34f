"""Create catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

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


def upgrade() -> None:
    """Create collections, categories, sub_categories, brands, product_tags and products tables."""
    op.create_table(
        'collections',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
    )

    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('parent_collection_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('collections.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
    )

    # Sub-category names are only unique within their category
    op.create_table(
        'sub_categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
    )

    op.create_table(
        'brands',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('logo_url', sa.String(1000), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
    )

    op.create_table(
        'product_tags',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('sub_category_id', sa.Integer(),
                  sa.ForeignKey('sub_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('brand_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('brands.id', ondelete='SET NULL'), nullable=True),
    )

    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('sku', sa.String(100), nullable=False, unique=True),
        sa.Column('slug', sa.String(500), nullable=False, index=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('a_plus_content', sa.Text(), nullable=True),
        sa.Column('images', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('videos', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('variants', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('category_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('sub_category_id', sa.Integer(),
                  sa.ForeignKey('sub_categories.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('brand_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('brands.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('tag_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('product_tags.id', ondelete='SET NULL'), nullable=True),
        sa.Column('mrp_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('dealer_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('counter_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('recommended_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('shop_price', sa.Numeric(12, 2), nullable=False, server_default='0', index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_discontinued', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_quote_hidden', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('gst_percentage', sa.Numeric(5, 2), nullable=False, server_default='18'),
        sa.Column('hsn_code', sa.String(50), nullable=True),
        sa.Column('tax_class', sa.String(50), nullable=True),
        sa.Column('buy_url', sa.String(1000), nullable=True),
        sa.Column('unit', sa.String(50), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Substring search on name/description/sku
    op.execute('CREATE EXTENSION IF NOT EXISTS pg_trgm')
    op.create_index(
        'ix_products_name_trgm',
        'products',
        ['name'],
        postgresql_using='gin',
        postgresql_ops={'name': 'gin_trgm_ops'},
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_index('ix_products_name_trgm', table_name='products')
    op.drop_table('products')
    op.drop_table('product_tags')
    op.drop_table('brands')
    op.drop_table('sub_categories')
    op.drop_table('categories')
    op.drop_table('collections')
