# agencia/contexto.py
"""
Contexto de aplicación por request: usuario autenticado y colecciones cargadas.

Se crea después de autenticar, se carga con `cargar(db)` y se limpia al
terminar el request. Las pantallas de cuentas, backup y dashboard leen las
colecciones desde aquí en lugar de consultar la base varias veces.
"""
import logging
from typing import Any, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from .auth import get_current_active_user
from .database import get_db
from .services.data_service import Colecciones, load_all

logger = logging.getLogger(__name__)


class ContextoAplicacion:

    def __init__(self, usuario: Any = None):
        self.usuario = usuario
        self._colecciones: Optional[Colecciones] = None

    @property
    def cargado(self) -> bool:
        return self._colecciones is not None

    def cargar(self, db: Session) -> "ContextoAplicacion":
        self._colecciones = load_all(db)
        c = self._colecciones
        logger.debug(
            f"Contexto cargado: {len(c.clients)} clientes, {len(c.trips)} viajes, "
            f"{len(c.trip_passengers)} pasajeros, {len(c.payments)} pagos."
        )
        return self

    def limpiar(self) -> None:
        self.usuario = None
        self._colecciones = None

    def _coleccion(self, nombre: str) -> List[Any]:
        if self._colecciones is None:
            raise RuntimeError("El contexto no fue cargado.")
        return getattr(self._colecciones, nombre)

    @property
    def users(self) -> List[Any]:
        return self._coleccion("users")

    @property
    def clients(self) -> List[Any]:
        return self._coleccion("clients")

    @property
    def buses(self) -> List[Any]:
        return self._coleccion("buses")

    @property
    def trips(self) -> List[Any]:
        return self._coleccion("trips")

    @property
    def trip_passengers(self) -> List[Any]:
        return self._coleccion("trip_passengers")

    @property
    def payments(self) -> List[Any]:
        return self._coleccion("payments")


def get_contexto(
    current_user=Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Dependencia: contexto cargado para el usuario actual, limpiado al terminar el request."""
    contexto = ContextoAplicacion(current_user).cargar(db)
    try:
        yield contexto
    finally:
        contexto.limpiar()
