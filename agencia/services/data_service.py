# agencia/services/data_service.py
"""
Capa de acceso a datos: operaciones CRUD por entidad, autenticación de
usuarios e importación masiva de clientes.

Cada operación es un único round-trip a la base. Un fallo del motor hace
rollback y se traduce en HTTPException(500) con un mensaje en castellano;
un id inexistente se traduce en 404.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..models.bus import Bus as DBBus
from ..models.cliente import Cliente as DBCliente
from ..models.pago import Pago as DBPago
from ..models.pasajero_viaje import PasajeroViaje as DBPasajeroViaje
from ..models.usuario import Usuario as DBUsuario
from ..models.viaje import Viaje as DBViaje

logger = logging.getLogger(__name__)


class EntityService:
    """Operaciones list/get/create/update/delete sobre un modelo SQLAlchemy."""

    def __init__(self, model, nombre: str):
        self.model = model
        self.nombre = nombre

    def list(self, db: Session, order_by=None) -> list:
        query = db.query(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.all()

    def get(self, db: Session, obj_id: int):
        db_obj = db.query(self.model).filter(self.model.id == obj_id).first()
        if db_obj is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.nombre.capitalize()} no encontrado.",
            )
        return db_obj

    def create(self, db: Session, fields: Dict[str, Any]):
        db_obj = self.model(**fields)
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception as e:
            db.rollback()
            logger.error(f"Error al crear {self.nombre}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al crear {self.nombre}: {e}",
            )
        logger.info(f"{self.nombre.capitalize()} {db_obj.id} creado.")
        return db_obj

    def update(self, db: Session, obj_id: int, partial_fields: Dict[str, Any]):
        """Solo modifica los campos presentes; la última escritura prevalece."""
        db_obj = self.get(db, obj_id)
        for key, value in partial_fields.items():
            setattr(db_obj, key, value)
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception as e:
            db.rollback()
            logger.error(f"Error al actualizar {self.nombre} {obj_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al actualizar {self.nombre}: {e}",
            )
        return db_obj

    def delete(self, db: Session, obj_id: int) -> None:
        db_obj = self.get(db, obj_id)
        try:
            db.delete(db_obj)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error al eliminar {self.nombre} {obj_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al eliminar {self.nombre}: {e}",
            )
        logger.info(f"{self.nombre.capitalize()} {obj_id} eliminado.")


usuarios = EntityService(DBUsuario, "usuario")
clientes = EntityService(DBCliente, "cliente")
buses = EntityService(DBBus, "bus")
viajes = EntityService(DBViaje, "viaje")
pasajeros = EntityService(DBPasajeroViaje, "pasajero")
pagos = EntityService(DBPago, "pago")


def authenticate_user(db: Session, username: str, password: str) -> Optional[DBUsuario]:
    """Devuelve el usuario si existe, está activo y la contraseña coincide; si no, None."""
    user = db.query(DBUsuario).filter(
        DBUsuario.username == username,
        DBUsuario.is_active.is_(True),
    ).first()
    if user is None:
        return None
    if not auth_utils.verify_password(password, user.password):
        return None
    return user


def import_clients(db: Session, rows: Iterable[Dict[str, Any]]) -> int:
    """
    Inserta los clientes recibidos en una sola transacción.

    Siempre agrega: no detecta duplicados por DNI ni reutiliza ids.
    """
    nuevos = [DBCliente(**row) for row in rows]
    if not nuevos:
        return 0
    try:
        db.add_all(nuevos)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error al importar clientes: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al importar clientes: {e}",
        )
    logger.info(f"Importados {len(nuevos)} clientes.")
    return len(nuevos)


@dataclass
class Colecciones:
    """Instantánea de las colecciones que consumen las cuentas y los backups."""
    users: List[Any]
    clients: List[Any]
    buses: List[Any]
    trips: List[Any]
    trip_passengers: List[Any]
    payments: List[Any]


def load_all(db: Session) -> Colecciones:
    """Lee las seis colecciones dentro de la misma sesión."""
    return Colecciones(
        users=usuarios.list(db, order_by=DBUsuario.id),
        clients=clientes.list(db, order_by=DBCliente.id),
        buses=buses.list(db, order_by=DBBus.id),
        trips=viajes.list(db, order_by=DBViaje.id),
        trip_passengers=pasajeros.list(db, order_by=DBPasajeroViaje.id),
        payments=pagos.list(db, order_by=DBPago.id),
    )
