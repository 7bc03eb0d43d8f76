"""Create booking engine schema

Revision ID: 001_booking_engine_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_booking_engine_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create tenants, resources, bookings and booking_history.

    The exclusion constraint on bookings rejects two active bookings of the
    same tenant and resource whose half-open intervals overlap. It needs the
    btree_gist extension for the equality parts.
    """
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    op.create_table(
        'tenants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('domain', sa.String(length=255), nullable=True),
        sa.Column('api_key', sa.String(length=255), nullable=False),
        sa.Column('settings', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('api_key'),
    )

    op.create_table(
        'resources',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('settings', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('capacity > 0', name='ck_resources_capacity_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_resources_tenant_id', 'resources', ['tenant_id'])
    op.create_index('ix_resources_tenant_active', 'resources', ['tenant_id', 'is_active'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('resource_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('external_reference', sa.String(length=255), nullable=True),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('start_time < end_time', name='ck_bookings_interval_order'),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name='ck_bookings_status',
        ),
        sa.ForeignKeyConstraint(['resource_id'], ['resources.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_bookings_tenant_id', 'bookings', ['tenant_id'])
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index(
        'ix_bookings_tenant_resource_window',
        'bookings',
        ['tenant_id', 'resource_id', 'start_time', 'end_time'],
    )
    op.create_index('ix_bookings_tenant_status', 'bookings', ['tenant_id', 'status'])

    op.execute("""
        ALTER TABLE bookings
        ADD CONSTRAINT bookings_no_overlap_per_resource
        EXCLUDE USING gist (
            tenant_id WITH =,
            resource_id WITH =,
            tstzrange(start_time, end_time, '[)') WITH &&
        ) WHERE (status IN ('pending', 'confirmed'));
    """)

    op.create_table(
        'booking_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('booking_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('old_values', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('new_values', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('performed_by', sa.Uuid(), nullable=True),
        sa.Column('performed_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_booking_history_tenant_booking',
        'booking_history',
        ['tenant_id', 'booking_id', 'performed_at'],
    )


def downgrade() -> None:
    op.drop_index('ix_booking_history_tenant_booking', table_name='booking_history')
    op.drop_table('booking_history')

    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap_per_resource")
    op.drop_index('ix_bookings_tenant_status', table_name='bookings')
    op.drop_index('ix_bookings_tenant_resource_window', table_name='bookings')
    op.drop_index('ix_bookings_user_id', table_name='bookings')
    op.drop_index('ix_bookings_tenant_id', table_name='bookings')
    op.drop_table('bookings')

    op.drop_index('ix_resources_tenant_active', table_name='resources')
    op.drop_index('ix_resources_tenant_id', table_name='resources')
    op.drop_table('resources')

    op.drop_table('tenants')
