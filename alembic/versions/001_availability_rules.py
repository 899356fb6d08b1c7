"""Properties and availability rules

Revision ID: 001_availability_rules
Revises:
Create Date: 2026-10-18

This migration adds:
- properties: base price and stay defaults per tenant property
- availability_rules: prioritized block / price / stay-length rules
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_availability_rules'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==================
    # properties table
    # ==================
    op.create_table(
        'properties',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('currency', sa.String(3), nullable=True),
        sa.Column('min_nights', sa.Integer, nullable=True, server_default='1'),
        sa.Column('max_nights', sa.Integer, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_properties_tenant_id', 'properties', ['tenant_id'])

    # ==================
    # availability_rules table
    # ==================
    op.create_table(
        'availability_rules',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('property_id', sa.String(36), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='WEEKLY'),
        sa.Column('day_indexes', sa.String(100), nullable=True),
        sa.Column('action', sa.String(20), nullable=False, server_default='BLOCK'),
        sa.Column('action_value', sa.Numeric(10, 2), nullable=True),
        sa.Column('valid_from', sa.Date, nullable=True),
        sa.Column('valid_until', sa.Date, nullable=True),
        sa.Column('priority', sa.Integer, nullable=False, server_default='5'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.String(120), nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_availability_rules_tenant_id', 'availability_rules', ['tenant_id'])
    op.create_index('ix_availability_rules_tenant_property', 'availability_rules', ['tenant_id', 'property_id'])


def downgrade() -> None:
    op.drop_index('ix_availability_rules_tenant_property', table_name='availability_rules')
    op.drop_index('ix_availability_rules_tenant_id', table_name='availability_rules')
    op.drop_table('availability_rules')
    op.drop_index('ix_properties_tenant_id', table_name='properties')
    op.drop_table('properties')
