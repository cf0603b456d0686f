"""Create fee policy, transaction and ledger tables

Revision ID: 20261017_000001
Revises: None
Create Date: 2026-10-17

Policies, fare transactions (unique external_reference), append-only
ledger entries and the per-vehicle daily fee claims.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'fee_policies',
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('flat_fee', sa.Numeric(precision=10, scale=2), nullable=False, server_default='2.50'),
        sa.Column('savings_percent', sa.Numeric(precision=5, scale=2), nullable=False, server_default='5.00'),
        sa.Column('daily_fee', sa.Numeric(precision=10, scale=2), nullable=False, server_default='50.00'),
        sa.Column('loan_repay_percent', sa.Numeric(precision=5, scale=2), nullable=False, server_default='0.00'),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('tenant_id'),
    )

    op.create_table(
        'fare_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('external_reference', sa.String(100), nullable=False),
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('vehicle_id', sa.String(64), nullable=True),
        sa.Column('counterpart_id', sa.String(64), nullable=True),
        sa.Column('payer_reference', sa.String(32), nullable=True),
        sa.Column('fare_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'SUCCESS', 'FAILED', 'TIMEOUT', name='transaction_status'),
            nullable=False,
            server_default='PENDING'
        ),
        sa.Column('receipt', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_reference', name='uq_fare_transactions_external_reference'),
    )
    op.create_index('ix_fare_transactions_tenant_id', 'fare_transactions', ['tenant_id'])
    op.create_index('ix_fare_transactions_vehicle_id', 'fare_transactions', ['vehicle_id'])
    op.create_index('ix_fare_transactions_status', 'fare_transactions', ['status'])
    op.create_index('ix_fare_transactions_created_at', 'fare_transactions', ['created_at'])

    op.create_table(
        'ledger_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('vehicle_id', sa.String(64), nullable=True),
        sa.Column(
            'entry_type',
            sa.Enum('FARE', 'SERVICE_FEE', 'DAILY_FEE', 'SAVINGS', 'LOAN_REPAY', name='ledger_entry_type'),
            nullable=False
        ),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['transaction_id'],
            ['fare_transactions.id'],
            name='fk_ledger_entries_transaction_id',
            ondelete='RESTRICT',
        ),
        sa.UniqueConstraint('transaction_id', 'entry_type', name='uq_ledger_entries_transaction_type'),
    )
    op.create_index('ix_ledger_entries_transaction_id', 'ledger_entries', ['transaction_id'])
    op.create_index('ix_ledger_entries_tenant_id', 'ledger_entries', ['tenant_id'])
    op.create_index('ix_ledger_entries_vehicle_id', 'ledger_entries', ['vehicle_id'])
    op.create_index('ix_ledger_entries_entry_type', 'ledger_entries', ['entry_type'])
    op.create_index('ix_ledger_entries_created_at', 'ledger_entries', ['created_at'])

    op.create_table(
        'daily_fee_claims',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('vehicle_id', sa.String(64), nullable=False),
        sa.Column('service_day', sa.Date(), nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['transaction_id'],
            ['fare_transactions.id'],
            name='fk_daily_fee_claims_transaction_id',
            ondelete='RESTRICT',
        ),
        sa.UniqueConstraint('vehicle_id', 'service_day', name='uq_daily_fee_claims_vehicle_day'),
    )
    op.create_index('ix_daily_fee_claims_transaction_id', 'daily_fee_claims', ['transaction_id'])


def downgrade() -> None:
    op.drop_index('ix_daily_fee_claims_transaction_id', table_name='daily_fee_claims')
    op.drop_table('daily_fee_claims')

    for column in ('created_at', 'entry_type', 'vehicle_id', 'tenant_id', 'transaction_id'):
        op.drop_index(f'ix_ledger_entries_{column}', table_name='ledger_entries')
    op.drop_table('ledger_entries')

    for column in ('created_at', 'status', 'vehicle_id', 'tenant_id'):
        op.drop_index(f'ix_fare_transactions_{column}', table_name='fare_transactions')
    op.drop_table('fare_transactions')

    op.drop_table('fee_policies')
    sa.Enum(name='ledger_entry_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='transaction_status').drop(op.get_bind(), checkfirst=True)
