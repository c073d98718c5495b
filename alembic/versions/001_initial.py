"""Initial migration - partners, leads, status history and partner performance

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'partners',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('tier', sa.String(length=64), nullable=False),
        sa.Column('specialization', sa.String(length=128), nullable=False),
        sa.Column('region', sa.String(length=128), nullable=False),
        sa.Column('contact_email', sa.String(length=128), nullable=False),
        sa.Column('country', sa.String(length=64), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('organization_id', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_partners_organization_id'), 'partners', ['organization_id'], unique=False)

    op.create_table(
        'leads',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lead_name', sa.String(length=256), nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('New', 'Contacted', 'Qualified', 'Converted', 'Lost', name='leadstatus'), nullable=False),
        sa.Column('value', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('organization_id', sa.String(length=64), nullable=True),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['partner_id'], ['partners.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_leads_partner_id'), 'leads', ['partner_id'], unique=False)
    op.create_index(op.f('ix_leads_organization_id'), 'leads', ['organization_id'], unique=False)

    # Append-only audit trail
    op.create_table(
        'lead_status_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lead_id', sa.Integer(), nullable=False),
        sa.Column('old_status', sa.String(length=32), nullable=True),
        sa.Column('new_status', sa.String(length=32), nullable=False),
        sa.Column('changed_by', sa.String(length=100), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_lead_status_history_lead', 'lead_status_history', ['lead_id', 'changed_at'], unique=False)

    op.create_table(
        'partner_performance',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leads_assigned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leads_contacted', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leads_qualified', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leads_converted', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leads_lost', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leads_stalled', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['partner_id'], ['partners.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_partner_performance_partner_id'), 'partner_performance', ['partner_id'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_partner_performance_partner_id'), table_name='partner_performance')
    op.drop_table('partner_performance')
    op.drop_index('ix_lead_status_history_lead', table_name='lead_status_history')
    op.drop_table('lead_status_history')
    op.drop_index(op.f('ix_leads_organization_id'), table_name='leads')
    op.drop_index(op.f('ix_leads_partner_id'), table_name='leads')
    op.drop_table('leads')
    op.drop_index(op.f('ix_partners_organization_id'), table_name='partners')
    op.drop_table('partners')

    op.execute('DROP TYPE IF EXISTS leadstatus')
