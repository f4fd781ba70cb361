"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ### commands auto generated ###
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'], unique=False)

    op.create_table('buses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('bus_number', sa.String(length=128), nullable=False),
        sa.Column('bus_type', sa.String(length=64), nullable=True),
        sa.Column('total_seats', sa.Integer(), nullable=False),
        sa.Column('route_from', sa.String(length=128), nullable=False),
        sa.Column('route_to', sa.String(length=128), nullable=False),
        sa.Column('departure_time', sa.String(length=32), nullable=True),
        sa.Column('arrival_time', sa.String(length=32), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('total_seats > 0', name='ck_buses_total_seats_positive'),
        sa.CheckConstraint('price >= 0', name='ck_buses_price_non_negative'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_buses_bus_number', 'buses', ['bus_number'], unique=False)
    op.create_index('ix_buses_route_from', 'buses', ['route_from'], unique=False)
    op.create_index('ix_buses_route_to', 'buses', ['route_to'], unique=False)

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('bus_id', sa.Integer(), nullable=False),
        sa.Column('seat_number', sa.String(length=8), nullable=False),
        sa.Column('travel_date', sa.String(length=10), nullable=False),
        sa.Column('booking_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='confirmed'),
        sa.Column('passenger_name', sa.String(length=255), nullable=True),
        sa.Column('passenger_age', sa.Integer(), nullable=True),
        sa.Column('passenger_gender', sa.String(length=32), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'], unique=False)
    op.create_index('ix_bookings_bus_id', 'bookings', ['bus_id'], unique=False)
    op.create_index('ix_bookings_status', 'bookings', ['status'], unique=False)
    op.create_index('ix_bookings_bus_date', 'bookings', ['bus_id', 'travel_date'], unique=False)
    # at most one confirmed booking per seat per bus per travel date
    op.create_index(
        'uq_bookings_confirmed_seat',
        'bookings',
        ['bus_id', 'travel_date', 'seat_number'],
        unique=True,
        postgresql_where=sa.text("status = 'confirmed'"),
    )

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=255), nullable=False),
        sa.Column('object_type', sa.String(length=128), nullable=True),
        sa.Column('object_id', sa.String(length=128), nullable=True),
        sa.Column('detail', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['actor_id'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'], unique=False)
    # ### end Alembic commands ###


def downgrade():
    op.drop_index('ix_audit_logs_actor_id', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('uq_bookings_confirmed_seat', table_name='bookings')
    op.drop_index('ix_bookings_bus_date', table_name='bookings')
    op.drop_index('ix_bookings_status', table_name='bookings')
    op.drop_index('ix_bookings_bus_id', table_name='bookings')
    op.drop_index('ix_bookings_user_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_index('ix_buses_route_to', table_name='buses')
    op.drop_index('ix_buses_route_from', table_name='buses')
    op.drop_index('ix_buses_bus_number', table_name='buses')
    op.drop_table('buses')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
