"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

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
    # Create accounts table
    op.create_table(
        'accounts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(500)),
        sa.Column('preferred_city', sa.String(100)),
        sa.Column(
            'role',
            sa.Enum('CUSTOMER', 'MERCHANT', 'RIDER', 'ADMIN', name='accountrole'),
            nullable=False,
        ),
        sa.Column('merchant_id', sa.String(64), unique=True),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('xp', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('earnings_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'])
    op.create_index('ix_accounts_name', 'accounts', ['name'])
    
    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', sa.String(20), primary_key=True),
        sa.Column('restaurant_name', sa.String(255), nullable=False),
        sa.Column('merchant_id', sa.String(64)),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('delivery_address', sa.Text(), nullable=False),
        sa.Column('items_json', postgresql.JSON(), nullable=False),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('delivery_fee_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('discount_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('voucher_code', sa.String(50)),
        sa.Column('total_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('points_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('payment_reference', sa.String(50)),
        sa.Column('status', sa.String(30), nullable=False, server_default='PENDING'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('rider_name', sa.String(255)),
        sa.Column('rider_email', sa.String(255)),
        sa.Column('tip_cents', sa.Integer()),
        sa.Column('rating', sa.Integer()),
        sa.Column('comment', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.Column('delivered_at', sa.DateTime()),
        sa.Column('cancelled_at', sa.DateTime()),
    )
    op.create_index('ix_orders_restaurant_name', 'orders', ['restaurant_name'])
    op.create_index('ix_orders_merchant_id', 'orders', ['merchant_id'])
    op.create_index('ix_orders_customer_email', 'orders', ['customer_email'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_rider_email', 'orders', ['rider_email'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    
    # Create ledger_entries table
    op.create_table(
        'ledger_entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_email', sa.String(255), nullable=False),
        sa.Column('entry_type', sa.Enum('DEBIT', 'CREDIT', name='ledgerentrytype'), nullable=False),
        sa.Column('amount_cents', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(255)),
        sa.Column('reference', sa.String(50)),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'SETTLED', name='ledgerentrystatus'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )
    op.create_index('ix_ledger_entries_account_email', 'ledger_entries', ['account_email'])
    op.create_index('ix_ledger_entries_reference', 'ledger_entries', ['reference'])
    
    # Create payment_methods table
    op.create_table(
        'payment_methods',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('account_email', sa.String(255), nullable=False),
        sa.Column('kind', sa.String(20), nullable=False),
        sa.Column('last4', sa.String(4)),
        sa.Column('expiry', sa.String(7)),
        sa.Column('balance_cents', sa.Integer()),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )
    op.create_index('ix_payment_methods_account_email', 'payment_methods', ['account_email'])
    
    # Create platform_config table
    op.create_table(
        'platform_config',
        sa.Column('key', sa.String(100), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.Column('updated_by', sa.String(255)),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    
    # Create audit_logs table
    op.create_table(
        'audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('actor_email', sa.String(255)),
        sa.Column('actor_role', sa.String(50)),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('resource_type', sa.String(50)),
        sa.Column('resource_id', sa.String(50)),
        sa.Column('data_json', postgresql.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )
    op.create_index('ix_audit_logs_resource_id', 'audit_logs', ['resource_id'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('platform_config')
    op.drop_table('payment_methods')
    op.drop_table('ledger_entries')
    op.drop_table('orders')
    op.drop_table('accounts')
    sa.Enum(name='ledgerentrystatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='ledgerentrytype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='accountrole').drop(op.get_bind(), checkfirst=True)
