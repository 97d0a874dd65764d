"""create_wallet_tables

Revision ID: c3a1f0e9d2b4
Revises:
Create Date: 2026-10-12 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c3a1f0e9d2b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=True),
        sa.Column('mobile_number', sa.String(30), nullable=True),
        sa.Column('balance', sa.BigInteger(), nullable=False),
        sa.Column('role', sa.String(10), server_default='user', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('balance >= 0', name='ck_users_balance_non_negative'),
    )
    op.create_index('ix_users_username', 'users', ['username'])
    op.create_index(
        'uq_users_username_lower', 'users', [sa.text('lower(username)')], unique=True,
    )

    op.create_table(
        'games',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('players_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('rating', sa.Integer(), server_default='0', nullable=False),
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('method', sa.String(50), nullable=True),
        sa.Column('status', sa.String(20), server_default='completed', nullable=False),
        sa.Column('notes', sa.String(200), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_status_created', 'transactions', ['status', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_transactions_status_created', table_name='transactions')
    op.drop_index('ix_transactions_user_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('games')
    op.drop_index('uq_users_username_lower', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
