# agencia/routes/viaje.py

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.bus import Bus as DBBus
from ..models.cliente import Cliente as DBCliente
from ..models.pasajero_viaje import PasajeroViaje as DBPasajeroViaje
from ..models.usuario import Usuario as DBUsuario
from ..models.viaje import Viaje as DBViaje
from ..models.enums import MonedaEnum, TipoViajeEnum
from ..permisos import Capacidad, require_capability
from ..schemas.cliente import Cliente
from ..schemas.pago import Pago
from ..schemas.viaje import (
    ArchivadoResultado,
    CambioAsiento,
    PagoPasajeroCreate,
    Pasajero,
    PasajeroCreate,
    PasajeroUpdate,
    Viaje,
    ViajeCreate,
    ViajeDisponibilidad,
    ViajeUpdate,
)
from ..services.data_service import clientes, pasajeros, viajes
from ..services.pagos_service import registrar_pago_pasajero
from ..utils import viajes_utils

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/viajes",
    tags=["viajes"]
)

DIAS_ARCHIVADO_DEFAULT = 365

# --- Funciones auxiliares ---

def _get_bus(db: Session, viaje: DBViaje) -> Optional[DBBus]:
    if viaje.bus_id is None:
        return None
    return db.query(DBBus).filter(DBBus.id == viaje.bus_id).first()

def _pasajeros_del_viaje(db: Session, trip_id: int) -> List[DBPasajeroViaje]:
    return db.query(DBPasajeroViaje).filter(DBPasajeroViaje.trip_id == trip_id).all()

def _get_pasajero(db: Session, trip_id: int, pasajero_id: int) -> DBPasajeroViaje:
    pasajero = pasajeros.get(db, pasajero_id)
    if pasajero.trip_id != trip_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="El pasajero no pertenece a este viaje.")
    return pasajero

def _validar_bus(db: Session, bus_id: Optional[int], tipo: TipoViajeEnum):
    if bus_id is None:
        return
    if tipo != TipoViajeEnum.grupal:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Solo los viajes grupales pueden tener un bus asignado.")
    if db.query(DBBus).filter(DBBus.id == bus_id).first() is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus no encontrado.")

def _validar_ubicacion(db: Session, viaje: DBViaje, numero_asiento, numero_cabina, exclude_passenger_id=None):
    error = viajes_utils.validar_ubicacion_pasajero(
        viaje,
        _get_bus(db, viaje),
        _pasajeros_del_viaje(db, viaje.id),
        numero_asiento,
        numero_cabina,
        exclude_passenger_id=exclude_passenger_id,
    )
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

# --- Endpoint para Listar Viajes ---
@router.get("/", response_model=List[Viaje])
def read_viajes(
    archived: Optional[bool] = Query(False, description="Viajes archivados (true), activos (false) o todos (sin valor)"),
    type: Optional[TipoViajeEnum] = Query(None, description="Filtrar por tipo de viaje"),
    currency: Optional[MonedaEnum] = Query(None, description="Filtrar por moneda"),
    search: Optional[str] = Query(None, description="Buscar por destino"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    query = db.query(DBViaje)
    if archived is not None:
        query = query.filter(DBViaje.archived == archived)
    if type:
        query = query.filter(DBViaje.type == type)
    if currency:
        query = query.filter(DBViaje.currency == currency)
    if search:
        query = query.filter(DBViaje.destino.ilike(f"%{search}%"))
    return query.order_by(DBViaje.fecha_salida.desc()).all()

# --- Endpoint para Archivar Viajes Antiguos ---
@router.post("/archivar-antiguos", response_model=ArchivadoResultado)
def archivar_viajes_antiguos(
    dias: int = Query(DIAS_ARCHIVADO_DEFAULT, gt=0, description="Antigüedad mínima de la fecha de regreso"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """
    Archiva los viajes cuya fecha de regreso es anterior a hoy menos `dias`.
    """
    fecha_corte = datetime.now() - timedelta(days=dias)
    antiguos = db.query(DBViaje).filter(
        DBViaje.fecha_regreso < fecha_corte,
        DBViaje.archived.is_(False),
    ).all()

    try:
        for viaje in antiguos:
            viaje.archived = True
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Error al archivar viajes: {e}")

    logger.info(f"Archivados {len(antiguos)} viajes con regreso anterior a {fecha_corte:%Y-%m-%d}.")
    return ArchivadoResultado(archivados=len(antiguos), fecha_corte=fecha_corte)

# --- Endpoint para Obtener un Viaje ---
@router.get("/{viaje_id}", response_model=Viaje)
def read_viaje(
    viaje_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    return viajes.get(db, viaje_id)

# --- Endpoint para Crear un Viaje ---
@router.post("/", response_model=Viaje, status_code=status.HTTP_201_CREATED)
def create_viaje(
    viaje_data: ViajeCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    _validar_bus(db, viaje_data.bus_id, viaje_data.type)
    return viajes.create(db, viaje_data.model_dump())

# --- Endpoint para Actualizar un Viaje ---
@router.put("/{viaje_id}", response_model=Viaje)
def update_viaje(
    viaje_id: int,
    viaje_update: ViajeUpdate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """
    Actualiza solo los campos enviados, validando fechas y bus contra el estado final.
    """
    db_viaje = viajes.get(db, viaje_id)
    update_data = viaje_update.model_dump(exclude_unset=True)

    tipo_final = update_data.get("type", db_viaje.type)
    bus_final = update_data.get("bus_id", db_viaje.bus_id)
    if tipo_final != TipoViajeEnum.grupal and "bus_id" not in update_data:
        # Un viaje que deja de ser grupal pierde el bus
        bus_final = None
        if db_viaje.bus_id is not None:
            update_data["bus_id"] = None
    _validar_bus(db, bus_final, tipo_final)

    if viajes_utils.cambia_tipo_de_ubicacion(db_viaje.type, tipo_final) and _pasajeros_del_viaje(db, viaje_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No se puede cambiar entre crucero y viaje con asientos si el viaje ya tiene pasajeros.",
        )

    salida = update_data.get("fecha_salida", db_viaje.fecha_salida)
    regreso = update_data.get("fecha_regreso", db_viaje.fecha_regreso)
    if regreso < salida:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="La fecha de regreso no puede ser anterior a la fecha de salida.")

    return viajes.update(db, viaje_id, update_data)

# --- Endpoints para Archivar / Desarchivar ---
@router.patch("/{viaje_id}/archivar", response_model=Viaje)
def archivar_viaje(
    viaje_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    return viajes.update(db, viaje_id, {"archived": True})

@router.patch("/{viaje_id}/desarchivar", response_model=Viaje)
def desarchivar_viaje(
    viaje_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    return viajes.update(db, viaje_id, {"archived": False})

# --- Endpoint para Eliminar un Viaje ---
@router.delete("/{viaje_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_viaje(
    viaje_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    viajes.delete(db, viaje_id)

# --- Pasajeros ---

@router.get("/{viaje_id}/pasajeros", response_model=List[Pasajero])
def read_pasajeros(
    viaje_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    viajes.get(db, viaje_id)
    return _pasajeros_del_viaje(db, viaje_id)

@router.get("/{viaje_id}/disponibilidad", response_model=ViajeDisponibilidad)
def read_disponibilidad(
    viaje_id: int,
    exclude_passenger_id: Optional[int] = Query(None, description="Pasajero que cambia de asiento"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """
    Lugares libres y números de asiento disponibles según el tipo de viaje.
    """
    db_viaje = viajes.get(db, viaje_id)
    bus = _get_bus(db, db_viaje)
    ocupantes = _pasajeros_del_viaje(db, viaje_id)
    return ViajeDisponibilidad(
        trip_id=viaje_id,
        asientos_disponibles=viajes_utils.cantidad_asientos_disponibles(db_viaje, bus, ocupantes),
        numeros_disponibles=viajes_utils.numeros_asiento_disponibles(
            db_viaje, bus, ocupantes, exclude_passenger_id=exclude_passenger_id
        ),
    )

@router.get("/{viaje_id}/clientes-disponibles", response_model=List[Cliente])
def read_clientes_disponibles(
    viaje_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """Clientes que todavía no están anotados en el viaje."""
    viajes.get(db, viaje_id)
    return viajes_utils.clientes_disponibles(
        viaje_id,
        clientes.list(db, order_by=DBCliente.name),
        _pasajeros_del_viaje(db, viaje_id),
    )

@router.post("/{viaje_id}/pasajeros", response_model=Pasajero, status_code=status.HTTP_201_CREATED)
def add_pasajero(
    viaje_id: int,
    pasajero_data: PasajeroCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """
    Agrega un cliente al viaje validando asiento o cabina según el tipo de viaje.
    """
    db_viaje = viajes.get(db, viaje_id)
    clientes.get(db, pasajero_data.client_id)

    ya_anotado = db.query(DBPasajeroViaje).filter(
        DBPasajeroViaje.trip_id == viaje_id,
        DBPasajeroViaje.client_id == pasajero_data.client_id,
    ).first()
    if ya_anotado:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El cliente ya es pasajero de este viaje.")

    numero_asiento, numero_cabina = viajes_utils.normalizar_ubicacion(
        db_viaje, pasajero_data.numero_asiento, pasajero_data.numero_cabina
    )
    _validar_ubicacion(db, db_viaje, numero_asiento, numero_cabina)

    return pasajeros.create(db, {
        "trip_id": viaje_id,
        "client_id": pasajero_data.client_id,
        "pagado": pasajero_data.pagado,
        "numero_asiento": numero_asiento,
        "numero_cabina": numero_cabina,
    })

@router.patch("/{viaje_id}/pasajeros/{pasajero_id}/asiento", response_model=Pasajero)
def change_asiento(
    viaje_id: int,
    pasajero_id: int,
    cambio: CambioAsiento,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    db_viaje = viajes.get(db, viaje_id)
    _get_pasajero(db, viaje_id, pasajero_id)
    if db_viaje.type == TipoViajeEnum.crucero:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Los cruceros se asignan por cabina, no por asiento.")
    _validar_ubicacion(db, db_viaje, cambio.numero_asiento, None, exclude_passenger_id=pasajero_id)
    return pasajeros.update(db, pasajero_id, {"numero_asiento": cambio.numero_asiento})

@router.put("/{viaje_id}/pasajeros/{pasajero_id}", response_model=Pasajero)
def update_pasajero(
    viaje_id: int,
    pasajero_id: int,
    pasajero_update: PasajeroUpdate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    db_viaje = viajes.get(db, viaje_id)
    db_pasajero = _get_pasajero(db, viaje_id, pasajero_id)
    update_data = pasajero_update.model_dump(exclude_unset=True)

    if "numero_asiento" in update_data or "numero_cabina" in update_data:
        numero_asiento, numero_cabina = viajes_utils.normalizar_ubicacion(
            db_viaje,
            update_data.get("numero_asiento", db_pasajero.numero_asiento),
            update_data.get("numero_cabina", db_pasajero.numero_cabina),
        )
        _validar_ubicacion(db, db_viaje, numero_asiento, numero_cabina, exclude_passenger_id=pasajero_id)
        update_data["numero_asiento"] = numero_asiento
        update_data["numero_cabina"] = numero_cabina
    return pasajeros.update(db, pasajero_id, update_data)

@router.delete("/{viaje_id}/pasajeros/{pasajero_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_pasajero(
    viaje_id: int,
    pasajero_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """Quita al pasajero del viaje. Sus pagos se conservan."""
    _get_pasajero(db, viaje_id, pasajero_id)
    pasajeros.delete(db, pasajero_id)

@router.post("/{viaje_id}/pasajeros/{pasajero_id}/pagos", response_model=Pago, status_code=status.HTTP_201_CREATED)
def pay_pasajero(
    viaje_id: int,
    pasajero_id: int,
    pago_data: PagoPasajeroCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.trips))
):
    """
    Registra un pago del pasajero (recibo REC-...). Si cubre el importe, lo marca como pagado.
    """
    db_viaje = viajes.get(db, viaje_id)
    db_pasajero = _get_pasajero(db, viaje_id, pasajero_id)
    return registrar_pago_pasajero(db, db_viaje, db_pasajero, pago_data.amount)
