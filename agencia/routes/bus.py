# agencia/routes/bus.py

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, File, UploadFile
from sqlalchemy.orm import Session
from sqlalchemy import or_

from ..database import get_db
from ..models.bus import Bus as DBBus
from ..models.usuario import Usuario as DBUsuario
from ..models.enums import TipoServicioEnum
from ..permisos import Capacidad, require_capability
from ..schemas.bus import Bus, BusCreate, BusUpdate
from ..services.data_service import buses
from ..utils.imagenes_utils import guardar_imagen

router = APIRouter(
    prefix="/buses",
    tags=["buses"]
)

def _validar_patente_unica(db: Session, patente: str, bus_id: Optional[int] = None):
    query = db.query(DBBus).filter(DBBus.patente.ilike(patente.strip()))
    if bus_id is not None:
        query = query.filter(DBBus.id != bus_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe un bus con la patente '{patente}'.")

# --- Endpoint para Listar Buses ---
@router.get("/", response_model=List[Bus])
def read_buses(
    search: Optional[str] = Query(None, description="Buscar por patente"),
    tipo_servicio: Optional[TipoServicioEnum] = Query(None, description="Filtrar por tipo de servicio"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.buses))
):
    query = db.query(DBBus)
    if search:
        query = query.filter(or_(DBBus.patente.ilike(f"%{search}%"), DBBus.tipo_servicio.ilike(f"%{search}%")))
    if tipo_servicio:
        query = query.filter(DBBus.tipo_servicio == tipo_servicio.value)
    return query.order_by(DBBus.patente).all()

# --- Endpoint para Obtener un Bus ---
@router.get("/{bus_id}", response_model=Bus)
def read_bus(
    bus_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.buses))
):
    return buses.get(db, bus_id)

# --- Endpoint para Crear un Bus ---
@router.post("/", response_model=Bus, status_code=status.HTTP_201_CREATED)
def create_bus(
    bus_data: BusCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.buses))
):
    _validar_patente_unica(db, bus_data.patente)
    fields = bus_data.model_dump()
    fields["patente"] = fields["patente"].strip().upper()
    fields["tipo_servicio"] = bus_data.tipo_servicio.value
    return buses.create(db, fields)

# --- Endpoint para Actualizar un Bus ---
@router.put("/{bus_id}", response_model=Bus)
def update_bus(
    bus_id: int,
    bus_update: BusUpdate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.buses))
):
    update_data = bus_update.model_dump(exclude_unset=True)
    if update_data.get("patente"):
        _validar_patente_unica(db, update_data["patente"], bus_id)
        update_data["patente"] = update_data["patente"].strip().upper()
    if update_data.get("tipo_servicio"):
        update_data["tipo_servicio"] = update_data["tipo_servicio"].value
    return buses.update(db, bus_id, update_data)

# --- Endpoint para Subir la Distribución de Asientos ---
@router.post("/{bus_id}/imagen", response_model=Bus)
async def upload_imagen_distribucion(
    bus_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.buses))
):
    """
    Sube la imagen de distribución de asientos (máx. 5 MB) y la asocia al bus.
    """
    buses.get(db, bus_id)
    contents = await file.read()
    await file.close()
    public_path = guardar_imagen(contents, file.content_type)
    return buses.update(db, bus_id, {"imagen_distribucion": public_path})

# --- Endpoint para Eliminar un Bus ---
@router.delete("/{bus_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bus(
    bus_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.buses))
):
    buses.delete(db, bus_id)
