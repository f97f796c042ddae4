"""Initial ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-03-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'STAFF', name='userrole'), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', name='userstatus'), nullable=False),
        sa.Column('profile_url', sa.String(500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'houses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_houses'),
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('house_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('status', sa.Enum('AVAILABLE', 'RENTED', name='roomstatus'), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['house_id'], ['houses.id'], name='fk_rooms_house_id_houses'),
        sa.PrimaryKeyConstraint('id', name='pk_rooms'),
    )
    op.create_index('ix_rooms_house_id', 'rooms', ['house_id'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('profile_url', sa.String(500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_tenants'),
    )

    op.create_table(
        'rents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('room_id', sa.Uuid(), nullable=False),
        sa.Column('guarantor_name', sa.String(255), nullable=False),
        sa.Column('guarantor_phone', sa.String(50), nullable=False),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('months', sa.Integer(), nullable=False),
        sa.Column('total_rent', sa.Float(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('contract_url', sa.String(1000), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('months >= 1 AND months <= 12', name='ck_rents_months_range'),
        sa.CheckConstraint('end_date >= start_date', name='ck_rents_period_order'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_rents_tenant_id_tenants'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], name='fk_rents_room_id_rooms'),
        sa.PrimaryKeyConstraint('id', name='pk_rents'),
    )
    op.create_index('ix_rents_tenant_id', 'rents', ['tenant_id'])
    op.create_index('ix_rents_room_id', 'rents', ['room_id'])
    op.create_index('idx_rents_room_period', 'rents', ['room_id', 'start_date', 'end_date'])

    op.create_table(
        'monthly_services',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_id', sa.Uuid(), nullable=False),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('water_previous', sa.Float(), nullable=True),
        sa.Column('water_current', sa.Float(), nullable=True),
        sa.Column('water_price_per_unit', sa.Float(), nullable=True),
        sa.Column('water_total', sa.Float(), nullable=True),
        sa.Column('electricity_previous', sa.Float(), nullable=True),
        sa.Column('electricity_current', sa.Float(), nullable=True),
        sa.Column('electricity_price_per_unit', sa.Float(), nullable=True),
        sa.Column('electricity_total', sa.Float(), nullable=True),
        sa.Column('trash_fee', sa.Float(), nullable=True),
        sa.Column('maintenance_fee', sa.Float(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], name='fk_monthly_services_room_id_rooms'),
        sa.PrimaryKeyConstraint('id', name='pk_monthly_services'),
        sa.UniqueConstraint('room_id', 'month', name='uq_monthly_services_room_month'),
    )
    op.create_index('ix_monthly_services_room_id', 'monthly_services', ['room_id'])
    op.create_index('ix_monthly_services_month', 'monthly_services', ['month'])

    op.create_table(
        'maintenance_issues',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_maintenance_issues'),
    )

    op.create_table(
        'maintenance_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=True),
        sa.Column('room_id', sa.Uuid(), nullable=True),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('Pending', 'In Progress', 'Completed', 'Cancelled', name='maintenancestatus'),
            nullable=False,
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_maintenance_requests_tenant_id_tenants'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], name='fk_maintenance_requests_room_id_rooms'),
        sa.PrimaryKeyConstraint('id', name='pk_maintenance_requests'),
    )
    op.create_index('ix_maintenance_requests_id', 'maintenance_requests', ['id'])
    op.create_index('ix_maintenance_requests_tenant_id', 'maintenance_requests', ['tenant_id'])
    op.create_index('ix_maintenance_requests_room_id', 'maintenance_requests', ['room_id'])

    op.create_table(
        'maintenance_request_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('request_id', sa.Uuid(), nullable=False),
        sa.Column('issue_id', sa.Uuid(), nullable=False),
        sa.Column('issue_name', sa.String(255), nullable=False),
        sa.Column('price_at_request', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(
            ['request_id'], ['maintenance_requests.id'],
            name='fk_maintenance_request_items_request_id_maintenance_requests',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['issue_id'], ['maintenance_issues.id'],
            name='fk_maintenance_request_items_issue_id_maintenance_issues',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_maintenance_request_items'),
    )
    op.create_index('ix_maintenance_request_items_request_id', 'maintenance_request_items', ['request_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('entry_type', sa.Enum('payment', 'adjustment', name='entrytype'), nullable=False),
        sa.Column(
            'obligation_kind',
            sa.Enum('rent', 'service', 'maintenance', name='obligationkind'),
            nullable=False,
        ),
        sa.Column('rent_id', sa.Uuid(), nullable=True),
        sa.Column('monthly_service_id', sa.Uuid(), nullable=True),
        sa.Column('maintenance_request_id', sa.Uuid(), nullable=True),
        sa.Column('adjusts_payment_id', sa.Uuid(), nullable=True),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), nullable=False),
        sa.Column('balance', sa.Float(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('Paid', 'Partial', 'Pending', 'Overdue', name='paymentstatus'),
            nullable=False,
        ),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('idempotency_key', sa.String(100), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('balance >= 0', name='ck_payments_balance_non_negative'),
        sa.CheckConstraint(
            "(CASE WHEN rent_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN monthly_service_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN maintenance_request_id IS NULL THEN 0 ELSE 1 END) <= 1",
            name='ck_payments_single_obligation_reference',
        ),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_payments_tenant_id_tenants'),
        sa.ForeignKeyConstraint(['rent_id'], ['rents.id'], name='fk_payments_rent_id_rents'),
        sa.ForeignKeyConstraint(
            ['monthly_service_id'], ['monthly_services.id'],
            name='fk_payments_monthly_service_id_monthly_services',
        ),
        sa.ForeignKeyConstraint(
            ['maintenance_request_id'], ['maintenance_requests.id'],
            name='fk_payments_maintenance_request_id_maintenance_requests',
        ),
        sa.ForeignKeyConstraint(['adjusts_payment_id'], ['payments.id'], name='fk_payments_adjusts_payment_id_payments'),
        sa.PrimaryKeyConstraint('id', name='pk_payments'),
        sa.UniqueConstraint('idempotency_key', name='uq_payments_idempotency_key'),
    )
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_obligation_kind', 'payments', ['obligation_kind'])
    op.create_index('ix_payments_rent_id', 'payments', ['rent_id'])
    op.create_index('ix_payments_monthly_service_id', 'payments', ['monthly_service_id'])
    op.create_index('ix_payments_maintenance_request_id', 'payments', ['maintenance_request_id'])
    op.create_index('idx_payments_tenant_kind', 'payments', ['tenant_id', 'obligation_kind'])


def downgrade() -> None:
    op.drop_table('payments')
    op.drop_table('maintenance_request_items')
    op.drop_table('maintenance_requests')
    op.drop_table('maintenance_issues')
    op.drop_table('monthly_services')
    op.drop_table('rents')
    op.drop_table('tenants')
    op.drop_table('rooms')
    op.drop_table('houses')
    op.drop_table('users')
