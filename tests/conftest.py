"""
Configuración global para todas las pruebas pytest
"""
import os
import tempfile
from datetime import date, datetime
from decimal import Decimal

# Variables de entorno antes de importar la aplicación
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas")
os.environ.setdefault("STATIC_DIR", tempfile.mkdtemp(prefix="agencia-static-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

from agencia.auth import create_access_token, get_password_hash
from agencia.database import get_db
from agencia.main import app
from agencia.models.base import Base
from agencia.models.bus import Bus as DBBus
from agencia.models.cliente import Cliente as DBCliente
from agencia.models.enums import MonedaEnum, RolUsuarioEnum, TipoPagoEnum, TipoViajeEnum
from agencia.models.pago import Pago as DBPago
from agencia.models.pasajero_viaje import PasajeroViaje as DBPasajeroViaje
from agencia.models.usuario import Usuario as DBUsuario
from agencia.models.viaje import Viaje as DBViaje

# SQLite en memoria compartida por todas las conexiones del test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD_PRUEBA = "secreto123"


@pytest.fixture
def db_session():
    """
    Crea las tablas, entrega una sesión y las elimina al final.
    Cada test arranca con la base vacía.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    Cliente HTTP de pruebas con la base de datos de test.
    """
    def get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    # Limpiar overrides después del test
    app.dependency_overrides.clear()


@pytest.fixture
def mock_user():
    """
    Usuario mockeado para llamar a las rutas directamente.
    """
    user = MagicMock()
    user.id = 1
    user.username = "admin"
    user.role = RolUsuarioEnum.admin
    user.is_active = True
    return user


# --- Factories ---

@pytest.fixture
def crear_usuario(db_session):
    """
    Factory function para crear usuarios de prueba en la BD.
    """
    def _crear_usuario(username="admin", role=RolUsuarioEnum.admin, is_active=True, password=PASSWORD_PRUEBA):
        usuario = DBUsuario(
            username=username,
            password=get_password_hash(password),
            name=f"Usuario {username}",
            email=f"{username}@agencia.com.ar",
            role=role,
            is_active=is_active,
        )
        db_session.add(usuario)
        db_session.commit()
        db_session.refresh(usuario)
        return usuario

    return _crear_usuario


@pytest.fixture
def crear_cliente(db_session):
    def _crear_cliente(name="Pérez Juan", dni="30123456", **extra):
        datos = {
            "name": name,
            "email": "juan@ejemplo.com",
            "phone": "1122334455",
            "address": "Av. Siempreviva 742",
            "dni": dni,
            "fecha_nacimiento": date(1985, 3, 15),
        }
        datos.update(extra)
        cliente = DBCliente(**datos)
        db_session.add(cliente)
        db_session.commit()
        db_session.refresh(cliente)
        return cliente

    return _crear_cliente


@pytest.fixture
def crear_bus(db_session):
    def _crear_bus(patente="AB123CD", asientos=40, tipo_servicio="semicama"):
        bus = DBBus(patente=patente, asientos=asientos, tipo_servicio=tipo_servicio)
        db_session.add(bus)
        db_session.commit()
        db_session.refresh(bus)
        return bus

    return _crear_bus


@pytest.fixture
def crear_viaje(db_session):
    def _crear_viaje(destino="Bariloche", importe="1000", currency=MonedaEnum.ARS,
                     type=TipoViajeEnum.grupal, bus=None, **extra):
        datos = {
            "destino": destino,
            "fecha_salida": datetime(2030, 7, 10, 8, 0),
            "fecha_regreso": datetime(2030, 7, 17, 20, 0),
            "importe": Decimal(importe),
            "currency": currency,
            "type": type,
            "bus_id": bus.id if bus is not None else None,
        }
        datos.update(extra)
        viaje = DBViaje(**datos)
        db_session.add(viaje)
        db_session.commit()
        db_session.refresh(viaje)
        return viaje

    return _crear_viaje


@pytest.fixture
def crear_pasajero(db_session):
    def _crear_pasajero(viaje, cliente, numero_asiento=None, numero_cabina=None, **extra):
        pasajero = DBPasajeroViaje(
            trip_id=viaje.id,
            client_id=cliente.id,
            numero_asiento=numero_asiento,
            numero_cabina=numero_cabina,
            **extra,
        )
        db_session.add(pasajero)
        db_session.commit()
        db_session.refresh(pasajero)
        return pasajero

    return _crear_pasajero


@pytest.fixture
def crear_pago(db_session):
    def _crear_pago(cliente, amount="100", viaje=None, currency=MonedaEnum.ARS,
                    type=TipoPagoEnum.payment, **extra):
        pago = DBPago(
            client_id=cliente.id,
            trip_id=viaje.id if viaje is not None else None,
            amount=Decimal(amount),
            currency=currency,
            type=type,
            description=extra.pop("description", "Pago de prueba"),
            **extra,
        )
        db_session.add(pago)
        db_session.commit()
        db_session.refresh(pago)
        return pago

    return _crear_pago


@pytest.fixture
def auth_headers(crear_usuario):
    """
    Factory: crea un usuario con el rol indicado y devuelve el header Authorization.
    """
    def _auth_headers(role=RolUsuarioEnum.admin, username=None):
        usuario = crear_usuario(username=username or f"user_{role.value}", role=role)
        token = create_access_token({"sub": usuario.username, "role": usuario.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
