"""wardrobe coverage

Revision ID: 0001_wardrobe_coverage
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_wardrobe_coverage'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table('wardrobe_coverage',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('scenario_id', sa.Text(), nullable=True),
        sa.Column('scenario_name', sa.Text(), nullable=False),
        sa.Column('scenario_frequency', sa.Text(), nullable=True),
        sa.Column('season', sa.String(length=32), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('subcategory', sa.String(length=64), nullable=True),
        sa.Column('current_items', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('needed_items_min', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('needed_items_ideal', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('needed_items_max', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('coverage_percent', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('gap_count', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('gap_type', sa.String(length=16), nullable=False),
        sa.Column('priority_level', sa.Integer(), nullable=False, server_default=sa.text('3')),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('coverage_percent BETWEEN 0 AND 100', name='ck_wardrobe_coverage_percent'),
        sa.CheckConstraint('priority_level BETWEEN 1 AND 5', name='ck_wardrobe_coverage_priority'),
    )
    # NULL scenario_id / subcategory collide with NULL on upsert (Postgres 15+)
    op.create_index(
        'uq_wardrobe_coverage_key',
        'wardrobe_coverage',
        ['user_id', 'scenario_id', 'season', 'category', 'subcategory'],
        unique=True,
        postgresql_nulls_not_distinct=True,
    )
    op.create_index('ix_wardrobe_coverage_user_priority', 'wardrobe_coverage', ['user_id', 'priority_level'])

def downgrade() -> None:
    op.drop_index('ix_wardrobe_coverage_user_priority', table_name='wardrobe_coverage')
    op.drop_index('uq_wardrobe_coverage_key', table_name='wardrobe_coverage')
    op.drop_table('wardrobe_coverage')
