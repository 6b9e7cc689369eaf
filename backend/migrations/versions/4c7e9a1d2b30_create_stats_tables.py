"""create difficulty_best and completed_session tables

Revision ID: 4c7e9a1d2b30
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7e9a1d2b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())
    if 'difficulty_best' not in tables:
        op.create_table(
            'difficulty_best',
            sa.Column('difficulty', sa.String(length=16), primary_key=True),
            sa.Column('best_time_seconds', sa.Integer(), nullable=True),
            sa.Column('best_moves', sa.Integer(), nullable=True),
        )
    if 'completed_session' not in tables:
        op.create_table(
            'completed_session',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('difficulty', sa.String(length=16), nullable=False),
            sa.Column('category', sa.String(length=64), nullable=False),
            sa.Column('moves', sa.Integer(), nullable=False),
            sa.Column('time_seconds', sa.Integer(), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        )
        with op.batch_alter_table('completed_session') as batch_op:
            batch_op.create_index('ix_completed_session_difficulty', ['difficulty'])
            batch_op.create_index('ix_completed_session_score', ['score'])


def downgrade():
    op.drop_table('completed_session')
    op.drop_table('difficulty_best')
