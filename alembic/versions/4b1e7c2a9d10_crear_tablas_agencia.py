"""Crear tablas de la agencia (usuarios, clientes, buses, viajes, pasajeros, pagos)

Revision ID: 4b1e7c2a9d10
Revises: 
Create Date: 2026-10-19 10:12:31.482915

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1e7c2a9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

rol_usuario = sa.Enum('admin', 'manager', 'operator', 'readonly', name='rolusuarioenum')
moneda = sa.Enum('ARS', 'USD', name='monedaenum')
tipo_viaje = sa.Enum('grupal', 'individual', 'crucero', 'aereo', name='tipoviajeenum')
tipo_pago = sa.Enum('payment', 'charge', name='tipopagoenum')


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('role', rol_usuario, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table('clients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('dni', sa.String(length=20), nullable=False),
        sa.Column('fecha_nacimiento', sa.Date(), nullable=False),
        sa.Column('vencimiento_dni', sa.Date(), nullable=True),
        sa.Column('numero_pasaporte', sa.String(length=30), nullable=True),
        sa.Column('vencimiento_pasaporte', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_clients_id'), 'clients', ['id'], unique=False)
    op.create_index(op.f('ix_clients_dni'), 'clients', ['dni'], unique=False)

    op.create_table('buses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patente', sa.String(length=20), nullable=False),
        sa.Column('asientos', sa.Integer(), nullable=False),
        sa.Column('tipo_servicio', sa.String(length=20), nullable=False),
        sa.Column('imagen_distribucion', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('asientos > 0', name='chk_asientos_positivo'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patente')
    )
    op.create_index(op.f('ix_buses_id'), 'buses', ['id'], unique=False)

    op.create_table('trips',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('bus_id', sa.Integer(), nullable=True),
        sa.Column('destino', sa.String(length=150), nullable=False),
        sa.Column('fecha_salida', sa.DateTime(), nullable=False),
        sa.Column('fecha_regreso', sa.DateTime(), nullable=False),
        sa.Column('importe', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('currency', moneda, nullable=False),
        sa.Column('type', tipo_viaje, nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.Column('naviera', sa.String(length=100), nullable=True),
        sa.Column('barco', sa.String(length=100), nullable=True),
        sa.Column('cabina', sa.String(length=50), nullable=True),
        sa.Column('aerolinea', sa.String(length=100), nullable=True),
        sa.Column('numero_vuelo', sa.String(length=20), nullable=True),
        sa.Column('clase', sa.String(length=30), nullable=True),
        sa.Column('escalas', sa.String(length=255), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['bus_id'], ['buses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trips_id'), 'trips', ['id'], unique=False)

    op.create_table('trip_passengers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('fecha_reserva', sa.DateTime(), nullable=False),
        sa.Column('pagado', sa.Boolean(), nullable=False),
        sa.Column('numero_asiento', sa.Integer(), nullable=True),
        sa.Column('numero_cabina', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trip_passengers_id'), 'trip_passengers', ['id'], unique=False)
    op.create_index(op.f('ix_trip_passengers_trip_id'), 'trip_passengers', ['trip_id'], unique=False)
    op.create_index(op.f('ix_trip_passengers_client_id'), 'trip_passengers', ['client_id'], unique=False)

    op.create_table('payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('trip_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('currency', moneda, nullable=False),
        sa.Column('type', tipo_pago, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('receipt_number', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
    op.create_index(op.f('ix_payments_client_id'), 'payments', ['client_id'], unique=False)
    op.create_index(op.f('ix_payments_trip_id'), 'payments', ['trip_id'], unique=False)


def downgrade() -> None:
    op.drop_table('payments')
    op.drop_table('trip_passengers')
    op.drop_table('trips')
    op.drop_table('buses')
    op.drop_table('clients')
    op.drop_table('users')
    bind = op.get_bind()
    for enum in (tipo_pago, tipo_viaje, moneda, rol_usuario):
        enum.drop(bind, checkfirst=True)
