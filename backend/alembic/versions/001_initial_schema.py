"""Initial Rehaish schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Profiles, properties, applications, leases, payments, tenant favourites
and the audit log.
Money is stored as INTEGER currency units.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


PROPERTY_TYPES = (
    'HOUSE', 'UPPER_PORTION', 'LOWER_PORTION', 'APARTMENT', 'ROOM',
    'STUDIO', 'PENTHOUSE', 'FARM_HOUSE', 'COMMERCIAL_UNIT',
)
AUDIT_ACTIONS = (
    'PROFILE_SYNCED', 'PROPERTY_CREATED', 'PROPERTY_DELETED',
    'APPLICATION_SUBMITTED', 'APPLICATION_WITHDRAWN', 'APPLICATION_DECIDED',
    'LEASE_CREATED', 'LEASE_STATUS_CHANGED', 'PAYMENT_RECORDED', 'PAYMENT_UPDATED',
)


def _profile_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('phone_number', sa.String(50), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )


def upgrade() -> None:
    # === PROFILES ===
    _profile_table('tenants')
    _profile_table('managers')

    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('manager_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('managers.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('slug', sa.String(120), unique=True, nullable=False, index=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('photo_urls', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('price_per_month', sa.Integer(), nullable=False),
        sa.Column('security_deposit', sa.Integer(), nullable=False),
        sa.Column('application_fee', sa.Integer(), nullable=True),
        sa.Column('property_type', sa.Enum(*PROPERTY_TYPES, name='propertytype'), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('area', sa.Integer(), nullable=False),
        sa.Column('is_pets_allowed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_parking_included', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_furnished', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('highlights', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('amenities', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('address', sa.String(255), nullable=False),
        sa.Column('city', sa.String(100), nullable=False, index=True),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('postal_code', sa.String(20), nullable=False),
        sa.Column('country', sa.String(50), nullable=False, server_default='Pakistan'),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('posted_date', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('price_per_month >= 0', name='ck_property_price_non_negative'),
        sa.CheckConstraint('security_deposit >= 0', name='ck_property_deposit_non_negative'),
    )

    # === APPLICATIONS ===
    op.create_table(
        'applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'WITHDRAWN', name='applicationstatus'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_applications_tenant_property', 'applications', ['tenant_id', 'property_id'])

    # === LEASES ===
    op.create_table(
        'leases',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('applications.id', ondelete='SET NULL'), nullable=True, unique=True),
        sa.Column('status', sa.Enum('PENDING_SIGNATURE', 'ACTIVE', 'TERMINATED', 'COMPLETED', name='leasestatus'), nullable=False, index=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('rent_amount', sa.Integer(), nullable=False),
        sa.Column('security_deposit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('payment_due_day', sa.Integer(), nullable=False),
        sa.Column('lease_agreement_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('end_date > start_date', name='ck_lease_date_order'),
        sa.CheckConstraint('payment_due_day >= 1 AND payment_due_day <= 31', name='ck_lease_payment_due_day_range'),
    )
    # Overlap checks scan ACTIVE leases by property and dates
    op.create_index('ix_leases_property_status_dates', 'leases', ['property_id', 'status', 'start_date', 'end_date'])

    # === PAYMENTS ===
    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('lease_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('leases.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='PKR'),
        sa.Column('payment_type', sa.Enum('RENT', 'SECURITY_DEPOSIT', 'APPLICATION_FEE', 'LATE_FEE', 'MAINTENANCE_CHARGE', 'REFUND', name='paymenttype'), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'COMPLETED', 'FAILED', 'REFUNDED', name='paymentstatus'), nullable=False, index=True),
        sa.Column('method', sa.Enum('BANK_TRANSFER', 'EASYPAY', 'JAZZCASH', 'CARD', 'WALLET', 'CASH', name='paymentmethod'), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=False),
        sa.Column('reference_id', sa.String(100), nullable=True),
        sa.Column('receipt_url', sa.String(500), nullable=True),
        sa.Column('note', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount >= 0', name='ck_payment_amount_non_negative'),
        sa.CheckConstraint('lease_id IS NOT NULL OR property_id IS NOT NULL', name='ck_payment_reference_present'),
    )

    # === TENANT FAVORITES ===
    op.create_table(
        'tenant_favorites',
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), primary_key=True, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # === AUDIT LOG (append-only) ===
    op.create_table(
        'audit_log',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('actor_id', postgresql.UUID(as_uuid=True), nullable=True, index=True),
        sa.Column('actor_role', sa.String(20), nullable=True),
        sa.Column('action', sa.Enum(*AUDIT_ACTIONS, name='auditaction'), nullable=False, index=True),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column('details', postgresql.JSONB(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('audit_log')
    op.drop_table('tenant_favorites')
    op.drop_table('payments')
    op.drop_index('ix_leases_property_status_dates')
    op.drop_table('leases')
    op.drop_index('ix_applications_tenant_property')
    op.drop_table('applications')
    op.drop_table('properties')
    op.drop_table('managers')
    op.drop_table('tenants')

    # Drop enums
    op.execute('DROP TYPE IF EXISTS auditaction')
    op.execute('DROP TYPE IF EXISTS paymentmethod')
    op.execute('DROP TYPE IF EXISTS paymentstatus')
    op.execute('DROP TYPE IF EXISTS paymenttype')
    op.execute('DROP TYPE IF EXISTS leasestatus')
    op.execute('DROP TYPE IF EXISTS applicationstatus')
    op.execute('DROP TYPE IF EXISTS propertytype')
