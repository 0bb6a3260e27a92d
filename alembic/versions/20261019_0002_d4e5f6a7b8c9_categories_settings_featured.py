"""categories, site settings and featured directory

Revision ID: d4e5f6a7b8c9
Revises: c3d4e5f6a7b8
Create Date: 2026-10-19

  - categories (self-referencing parent_id)
  - site_settings key/value store
  - is_featured flag on agent_profiles and builder_profiles
"""
from alembic import op
import sqlalchemy as sa

revision = 'd4e5f6a7b8c9'
down_revision = 'c3d4e5f6a7b8'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(100), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)
    op.create_index('ix_categories_parent_id', 'categories', ['parent_id'])

    op.create_table(
        'site_settings',
        sa.Column('key', sa.String(100), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    for table in ('agent_profiles', 'builder_profiles'):
        op.add_column(
            table,
            sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        op.create_index(f'ix_{table}_is_featured', table, ['is_featured'])


def downgrade() -> None:
    for table in ('builder_profiles', 'agent_profiles'):
        op.drop_index(f'ix_{table}_is_featured', table_name=table)
        op.drop_column(table, 'is_featured')
    op.drop_table('site_settings')
    op.drop_index('ix_categories_parent_id', table_name='categories')
    op.drop_index('ix_categories_slug', table_name='categories')
    op.drop_table('categories')
