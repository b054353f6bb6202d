# agencia/routes/pago.py

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.pago import Pago as DBPago
from ..models.usuario import Usuario as DBUsuario
from ..models.enums import MonedaEnum, TipoPagoEnum
from ..permisos import Capacidad, require_capability
from ..schemas.pago import Pago, PagoCreate, PagoUpdate
from ..services.data_service import clientes, pagos, viajes

router = APIRouter(
    prefix="/pagos",
    tags=["pagos"]
)

# --- Endpoint para Listar Pagos ---
@router.get("/", response_model=List[Pago])
def read_pagos(
    client_id: Optional[int] = Query(None, description="Filtrar por cliente"),
    trip_id: Optional[int] = Query(None, description="Filtrar por viaje"),
    currency: Optional[MonedaEnum] = Query(None, description="Filtrar por moneda"),
    type: Optional[TipoPagoEnum] = Query(None, description="Filtrar por tipo"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    query = db.query(DBPago)
    if client_id is not None:
        query = query.filter(DBPago.client_id == client_id)
    if trip_id is not None:
        query = query.filter(DBPago.trip_id == trip_id)
    if currency:
        query = query.filter(DBPago.currency == currency)
    if type:
        query = query.filter(DBPago.type == type)
    return query.order_by(DBPago.date.desc()).all()

# --- Endpoint para Obtener un Pago ---
@router.get("/{pago_id}", response_model=Pago)
def read_pago(
    pago_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    return pagos.get(db, pago_id)

# --- Endpoint para Crear un Pago ---
@router.post("/", response_model=Pago, status_code=status.HTTP_201_CREATED)
def create_pago(
    pago_data: PagoCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    clientes.get(db, pago_data.client_id)
    if pago_data.trip_id is not None:
        db_viaje = viajes.get(db, pago_data.trip_id)
        if db_viaje.currency != pago_data.currency:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La moneda del pago debe coincidir con la del viaje.",
            )
    return pagos.create(db, pago_data.model_dump())

# --- Endpoint para Actualizar un Pago ---
@router.put("/{pago_id}", response_model=Pago)
def update_pago(
    pago_id: int,
    pago_update: PagoUpdate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    db_pago = pagos.get(db, pago_id)
    update_data = pago_update.model_dump(exclude_unset=True)
    if update_data.get("client_id") is not None:
        clientes.get(db, update_data["client_id"])

    trip_final = update_data.get("trip_id", db_pago.trip_id)
    currency_final = update_data.get("currency", db_pago.currency)
    if trip_final is not None:
        db_viaje = viajes.get(db, trip_final)
        if db_viaje.currency != currency_final:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La moneda del pago debe coincidir con la del viaje.",
            )
    return pagos.update(db, pago_id, update_data)

# --- Endpoint para Eliminar un Pago ---
@router.delete("/{pago_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pago(
    pago_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    pagos.delete(db, pago_id)
