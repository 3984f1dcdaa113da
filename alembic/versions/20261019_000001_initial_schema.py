"""Initial schema

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.DECIMAL(20, 6)
PERCENT = sa.DECIMAL(5, 2)
TIMESTAMP = sa.DateTime(timezone=True)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column(
            'email_verified', sa.Boolean(),
            nullable=False, server_default=sa.false()
        ),
        sa.Column('device_id', sa.String(length=255), nullable=True),
        sa.Column('referral_code', sa.String(length=20), nullable=False),
        sa.Column('referred_by', sa.String(length=36), nullable=True),
        sa.Column(
            'qualified_referrals', sa.Integer(),
            nullable=False, server_default='0'
        ),
        sa.Column(
            'total_yield_percent', sa.Integer(),
            nullable=False, server_default='10'
        ),
        sa.Column(
            'welcome_bonus_paid', sa.Boolean(),
            nullable=False, server_default=sa.false()
        ),
        sa.Column(
            'referral_bonus_paid', sa.Boolean(),
            nullable=False, server_default=sa.false()
        ),
        sa.Column('balance', MONEY, nullable=False, server_default='0'),
        sa.Column(
            'is_blocked', sa.Boolean(),
            nullable=False, server_default=sa.false()
        ),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        sa.CheckConstraint(
            'total_yield_percent >= 10 AND total_yield_percent <= 30',
            name='check_user_yield_range'
        ),
        sa.CheckConstraint(
            'qualified_referrals >= 0',
            name='check_user_qualified_referrals_non_negative'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('device_id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index(
        'ix_users_referral_code', 'users', ['referral_code'], unique=True
    )
    op.create_index(
        'ix_users_referred_by', 'users', ['referred_by'], unique=False
    )

    op.create_table(
        'deposits',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('txid', sa.String(length=255), nullable=False),
        sa.Column('screenshot_url', sa.Text(), nullable=False),
        sa.Column(
            'status', sa.String(length=20),
            nullable=False, server_default='pending'
        ),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('reviewed_at', TIMESTAMP, nullable=True),
        sa.CheckConstraint(
            'amount > 0', name='check_deposit_amount_positive'
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='check_deposit_status'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_deposits_user_id', 'deposits', ['user_id'], unique=False
    )
    op.create_index(
        'ix_deposits_status', 'deposits', ['status'], unique=False
    )
    op.create_index(
        'idx_deposit_user_status', 'deposits',
        ['user_id', 'status'], unique=False
    )

    op.create_table(
        'investments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('deposit_id', sa.String(length=36), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('profit_rate', PERCENT, nullable=False),
        sa.Column('started_at', TIMESTAMP, nullable=False),
        sa.Column('matures_at', TIMESTAMP, nullable=False),
        sa.Column(
            'profit_paid', sa.Boolean(),
            nullable=False, server_default=sa.false()
        ),
        sa.Column(
            'status', sa.String(length=20),
            nullable=False, server_default='active'
        ),
        sa.Column('completed_at', TIMESTAMP, nullable=True),
        sa.CheckConstraint(
            'amount > 0', name='check_investment_amount_positive'
        ),
        sa.CheckConstraint(
            'profit_rate >= 0', name='check_investment_rate_non_negative'
        ),
        sa.CheckConstraint(
            "status IN ('active', 'completed')",
            name='check_investment_status'
        ),
        sa.CheckConstraint(
            "(profit_paid AND status = 'completed') OR "
            "(NOT profit_paid AND status = 'active')",
            name='check_investment_paid_matches_status'
        ),
        sa.ForeignKeyConstraint(['deposit_id'], ['deposits.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('deposit_id'),
    )
    op.create_index(
        'ix_investments_user_id', 'investments', ['user_id'], unique=False
    )
    op.create_index(
        'idx_investment_maturity', 'investments',
        ['status', 'profit_paid', 'matures_at'], unique=False
    )

    op.create_table(
        'withdrawals',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('usdt_address', sa.String(length=255), nullable=False),
        sa.Column(
            'status', sa.String(length=20),
            nullable=False, server_default='pending'
        ),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('processed_at', TIMESTAMP, nullable=True),
        sa.CheckConstraint(
            'amount > 0', name='check_withdrawal_amount_positive'
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'processed', 'rejected')",
            name='check_withdrawal_status'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_withdrawals_user_id', 'withdrawals', ['user_id'], unique=False
    )
    op.create_index(
        'ix_withdrawals_status', 'withdrawals', ['status'], unique=False
    )

    op.create_table(
        'referral_commissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('referrer_id', sa.String(length=36), nullable=False),
        sa.Column('from_user_id', sa.String(length=36), nullable=False),
        sa.Column('investment_id', sa.String(length=36), nullable=True),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('amount', MONEY, nullable=False, server_default='0'),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.CheckConstraint(
            'amount >= 0', name='check_commission_amount_non_negative'
        ),
        sa.CheckConstraint(
            "kind IN ('qualification', 'profit_share')",
            name='check_commission_kind'
        ),
        sa.ForeignKeyConstraint(['from_user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['investment_id'], ['investments.id'], ),
        sa.ForeignKeyConstraint(['referrer_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_referral_commissions_referrer_id', 'referral_commissions',
        ['referrer_id'], unique=False
    )
    op.create_index(
        'idx_commission_referrer_from_kind', 'referral_commissions',
        ['referrer_id', 'from_user_id', 'kind'], unique=False
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('target_user_id', sa.String(length=36), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_audit_logs_action', 'audit_logs', ['action'], unique=False
    )
    op.create_index(
        'ix_audit_logs_target_user_id', 'audit_logs',
        ['target_user_id'], unique=False
    )
    op.create_index(
        'ix_audit_logs_created_at', 'audit_logs', ['created_at'], unique=False
    )


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('referral_commissions')
    op.drop_table('withdrawals')
    op.drop_table('investments')
    op.drop_table('deposits')
    op.drop_table('users')
