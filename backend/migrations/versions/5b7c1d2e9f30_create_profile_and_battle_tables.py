"""create profile and battle tables

Revision ID: 5b7c1d2e9f30
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7c1d2e9f30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())
    if 'profile' not in tables:
        op.create_table(
            'profile',
            sa.Column('user_id', sa.String(length=64), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('losses', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('last_active', sa.BigInteger(), nullable=False),
            sa.Column('evolution_level', sa.Integer(), nullable=False, server_default='0'),
        )
    if 'battle' not in tables:
        op.create_table(
            'battle',
            sa.Column('id', sa.String(length=64), primary_key=True),
            sa.Column('player1', sa.String(length=64), sa.ForeignKey('profile.user_id'), nullable=False),
            sa.Column('player2', sa.String(length=64), sa.ForeignKey('profile.user_id'), nullable=False),
            sa.Column('winner', sa.String(length=64), sa.ForeignKey('profile.user_id'), nullable=True),
            sa.Column('date', sa.BigInteger(), nullable=False),
            sa.Column('moves', sa.Text(), nullable=False),
        )
        op.create_index('ix_battle_date', 'battle', ['date'])


def downgrade():
    op.drop_index('ix_battle_date', table_name='battle')
    op.drop_table('battle')
    op.drop_table('profile')
