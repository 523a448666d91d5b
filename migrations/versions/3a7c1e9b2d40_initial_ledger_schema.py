"""initial ledger schema

Revision ID: 3a7c1e9b2d40
Revises:
Create Date: 2026-10-19 10:12:31.118402

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = '3a7c1e9b2d40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    conn = op.get_bind()
    inspector = inspect(conn)
    existing_tables = inspector.get_table_names()

    if 'customers' not in existing_tables:
        op.create_table('customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('alternate_number', sa.String(length=32), nullable=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('customer_type', sa.String(length=16), nullable=False),
        sa.Column('can_qty', sa.Integer(), nullable=False),
        sa.Column('advance_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('customers', schema=None) as batch_op:
            batch_op.create_index('ix_customers_name', ['name'], unique=False)
            batch_op.create_index('ix_customers_phone_number', ['phone_number'], unique=False)
            batch_op.create_index('ix_customers_customer_type', ['customer_type'], unique=False)

    if 'daily_updates' not in existing_tables:
        op.create_table('daily_updates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('delivered_qty', sa.Integer(), nullable=False),
        sa.Column('collected_qty', sa.Integer(), nullable=False),
        sa.Column('holding_status', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('delivered_qty >= 0', name='ck_daily_update_delivered'),
        sa.CheckConstraint('collected_qty >= 0', name='ck_daily_update_collected'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', 'date', name='uq_daily_update_customer_date')
        )
        with op.batch_alter_table('daily_updates', schema=None) as batch_op:
            batch_op.create_index('ix_daily_updates_customer_id', ['customer_id'], unique=False)
            batch_op.create_index('ix_daily_updates_date', ['date'], unique=False)

    if 'monthly_bills' not in existing_tables:
        op.create_table('monthly_bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('bill_month', sa.String(length=7), nullable=False),
        sa.Column('total_cans', sa.Integer(), nullable=False),
        sa.Column('delivery_days', sa.Integer(), nullable=False),
        sa.Column('bill_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('paid_status', sa.Boolean(), nullable=False),
        sa.Column('sent_status', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', 'bill_month', name='uq_monthly_bill_customer_month')
        )
        with op.batch_alter_table('monthly_bills', schema=None) as batch_op:
            batch_op.create_index('ix_monthly_bills_customer_id', ['customer_id'], unique=False)
            batch_op.create_index('ix_monthly_bills_bill_month', ['bill_month'], unique=False)

    if 'prices' not in existing_tables:
        op.create_table('prices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shop_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('monthly_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('order_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('effective_from', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('prices', schema=None) as batch_op:
            batch_op.create_index('ix_prices_is_active', ['is_active'], unique=False)

    if 'orders' not in existing_tables:
        op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_date', sa.Date(), nullable=False),
        sa.Column('customer_name', sa.String(length=128), nullable=False),
        sa.Column('customer_phone', sa.String(length=32), nullable=False),
        sa.Column('customer_address', sa.Text(), nullable=False),
        sa.Column('delivery_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('can_qty', sa.Integer(), nullable=False),
        sa.Column('collected_qty', sa.Integer(), nullable=False),
        sa.Column('collection_date', sa.Date(), nullable=True),
        sa.Column('delivery_date', sa.Date(), nullable=False),
        sa.Column('delivery_time', sa.String(length=16), nullable=False),
        sa.Column('order_status', sa.String(length=16), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('orders', schema=None) as batch_op:
            batch_op.create_index('ix_orders_order_date', ['order_date'], unique=False)
            batch_op.create_index('ix_orders_order_status', ['order_status'], unique=False)

    if 'error_logs' not in existing_tables:
        op.create_table('error_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('error_type', sa.String(length=128), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=False),
        sa.Column('traceback', sa.Text(), nullable=True),
        sa.Column('request_url', sa.String(length=512), nullable=True),
        sa.Column('request_method', sa.String(length=10), nullable=True),
        sa.Column('request_data', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('status_code', sa.Integer(), nullable=True),
        sa.Column('blueprint', sa.String(length=64), nullable=True),
        sa.Column('endpoint', sa.String(length=128), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('error_logs', schema=None) as batch_op:
            batch_op.create_index('ix_error_logs_error_type', ['error_type'], unique=False)
            batch_op.create_index('ix_error_logs_status_code', ['status_code'], unique=False)
            batch_op.create_index('ix_error_logs_timestamp', ['timestamp'], unique=False)
            batch_op.create_index('ix_error_logs_type_timestamp', ['error_type', 'timestamp'], unique=False)


def downgrade():
    op.drop_table('error_logs')
    op.drop_table('orders')
    op.drop_table('prices')
    op.drop_table('monthly_bills')
    op.drop_table('daily_updates')
    op.drop_table('customers')
