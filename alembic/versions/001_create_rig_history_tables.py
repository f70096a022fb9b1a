"""Create parts, connections, disposals and rig name tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create parts table with surrogate key
    op.create_table('parts',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('brand', sa.String(length=255), nullable=False),
    sa.Column('model', sa.String(length=255), nullable=False),
    sa.Column('type', sa.String(length=10), nullable=False),
    sa.Column('acquisition_date', sa.String(length=10), nullable=True),
    sa.Column('date_precision', sa.String(length=5), nullable=True),
    sa.Column('notes', sa.Text(), server_default='', nullable=False),
    sa.Column('is_deleted', sa.Boolean(), server_default='0', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_parts_type', 'parts', ['type'])
    op.create_index('ix_parts_is_deleted', 'parts', ['is_deleted'])

    # Connection log: one row per [connected_at, disconnected_at) interval
    op.create_table('connections',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('motherboard_id', sa.Integer(), nullable=False),
    sa.Column('part_id', sa.Integer(), nullable=False),
    sa.Column('connected_at', sa.String(length=10), nullable=False),
    sa.Column('connected_precision', sa.String(length=5), nullable=False),
    sa.Column('disconnected_at', sa.String(length=10), nullable=True),
    sa.Column('disconnected_precision', sa.String(length=5), nullable=True),
    sa.Column('notes', sa.Text(), server_default='', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.CheckConstraint('part_id != motherboard_id', name='ck_connections_distinct_endpoints'),
    sa.CheckConstraint(
        '(disconnected_at IS NULL) = (disconnected_precision IS NULL)',
        name='ck_connections_disconnect_precision',
    ),
    sa.ForeignKeyConstraint(['motherboard_id'], ['parts.id'], ),
    sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_connections_part_open', 'connections', ['part_id', 'disconnected_at'])
    op.create_index('ix_connections_motherboard_open', 'connections', ['motherboard_id', 'disconnected_at'])
    op.create_index(
        'uq_connections_part_one_open',
        'connections',
        ['part_id'],
        unique=True,
        sqlite_where=sa.text('disconnected_at IS NULL'),
        postgresql_where=sa.text('disconnected_at IS NULL'),
    )

    op.create_table('disposals',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('part_id', sa.Integer(), nullable=False),
    sa.Column('disposed_at', sa.String(length=10), nullable=False),
    sa.Column('disposed_precision', sa.String(length=5), nullable=False),
    sa.Column('reason', sa.String(length=50), nullable=False),
    sa.Column('recipient', sa.String(length=255), nullable=True),
    sa.Column('price', sa.String(length=50), nullable=True),
    sa.Column('notes', sa.Text(), server_default='', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_disposals_part_id', 'disposals', ['part_id'])

    # Names keyed by the start date of a computed lifecycle
    op.create_table('rig_names',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('motherboard_id', sa.Integer(), nullable=False),
    sa.Column('start_date', sa.String(length=10), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('notes', sa.Text(), server_default='', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.ForeignKeyConstraint(['motherboard_id'], ['parts.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('motherboard_id', 'start_date', name='uq_rig_names_lifecycle')
    )

    # Legacy interval based names
    op.create_table('rig_identities',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('motherboard_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('active_from', sa.String(length=10), nullable=False),
    sa.Column('active_from_precision', sa.String(length=5), nullable=False),
    sa.Column('active_until', sa.String(length=10), nullable=True),
    sa.Column('active_until_precision', sa.String(length=5), nullable=True),
    sa.Column('notes', sa.Text(), server_default='', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.ForeignKeyConstraint(['motherboard_id'], ['parts.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_rig_identities_motherboard_id', 'rig_identities', ['motherboard_id'])
    op.create_index(
        'uq_rig_identities_one_open',
        'rig_identities',
        ['motherboard_id'],
        unique=True,
        sqlite_where=sa.text('active_until IS NULL'),
        postgresql_where=sa.text('active_until IS NULL'),
    )


def downgrade() -> None:
    op.drop_index('uq_rig_identities_one_open', table_name='rig_identities')
    op.drop_index('ix_rig_identities_motherboard_id', table_name='rig_identities')
    op.drop_table('rig_identities')
    op.drop_table('rig_names')
    op.drop_index('ix_disposals_part_id', table_name='disposals')
    op.drop_table('disposals')
    op.drop_index('uq_connections_part_one_open', table_name='connections')
    op.drop_index('ix_connections_motherboard_open', table_name='connections')
    op.drop_index('ix_connections_part_open', table_name='connections')
    op.drop_table('connections')
    op.drop_index('ix_parts_is_deleted', table_name='parts')
    op.drop_index('ix_parts_type', table_name='parts')
    op.drop_table('parts')
