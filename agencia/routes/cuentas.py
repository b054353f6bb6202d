# agencia/routes/cuentas.py
"""
Cuentas corrientes: saldos e historial por cliente y moneda, totales,
transferencia de pagos entre viajes y recibos imprimibles.

Los saldos se recalculan en cada request a partir del contexto cargado.
"""
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ..contexto import ContextoAplicacion, get_contexto
from ..database import get_db
from ..models.usuario import Usuario as DBUsuario
from ..models.enums import MonedaEnum
from ..permisos import Capacidad, has_capability, require_capability
from ..schemas.cuenta import (
    CuentaCliente,
    EstadoCuenta,
    ResumenRecibos,
    TotalesMoneda,
    ViajeTransferible,
)
from ..schemas.pago import Pago, TransferenciaPagoCreate
from ..services import cuentas_service, recibo_service
from ..services.data_service import pagos, viajes
from ..services.pagos_service import transferir_pago

router = APIRouter(
    prefix="/cuentas",
    tags=["cuentas"]
)

def _cliente_en_contexto(ctx: ContextoAplicacion, client_id: int):
    cliente = next((c for c in ctx.clients if c.id == client_id), None)
    if cliente is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado.")
    return cliente

# --- Tabla de cuentas ---
@router.get("/", response_model=List[CuentaCliente])
def read_cuentas(
    currency: MonedaEnum = Query(MonedaEnum.ARS, description="Moneda de la cuenta"),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    return cuentas_service.compute_client_accounts(
        currency, ctx.clients, ctx.trips, ctx.trip_passengers, ctx.payments
    )

# --- Totales por moneda ---
@router.get("/totales", response_model=Union[TotalesMoneda, ResumenRecibos])
def read_totales(
    currency: MonedaEnum = Query(MonedaEnum.ARS, description="Moneda de los totales"),
    client_id: Optional[int] = Query(None, description="Limitar a un cliente"),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    """
    Totales de cargos, pagos, pendiente y recibos.
    Sin la capacidad accounts_summary (operadores) solo se informa la cantidad de recibos.
    """
    totales = cuentas_service.compute_currency_totals(
        currency, ctx.clients, ctx.trips, ctx.trip_passengers, ctx.payments, client_id=client_id
    )
    if not has_capability(current_user.role, Capacidad.accounts_summary):
        return ResumenRecibos(currency=currency, total_receipts=totales.total_receipts)
    return totales

# --- Estado de cuenta de un cliente ---
@router.get("/{client_id}", response_model=EstadoCuenta)
def read_estado_cuenta(
    client_id: int,
    currency: MonedaEnum = Query(MonedaEnum.ARS, description="Moneda de la cuenta"),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    _cliente_en_contexto(ctx, client_id)
    return EstadoCuenta(
        client_id=client_id,
        currency=currency,
        saldo=cuentas_service.compute_balance(
            client_id, currency, ctx.trips, ctx.trip_passengers, ctx.payments
        ),
        transacciones=cuentas_service.compute_transaction_history(
            client_id, currency, ctx.trips, ctx.trip_passengers, ctx.payments
        ),
    )

# --- Viajes disponibles para transferir ---
@router.get("/{client_id}/viajes-transferibles", response_model=List[ViajeTransferible])
def read_viajes_transferibles(
    client_id: int,
    currency: MonedaEnum = Query(..., description="Moneda del pago a transferir"),
    exclude_trip_id: Optional[int] = Query(None, description="Viaje actual del pago"),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    _cliente_en_contexto(ctx, client_id)
    return cuentas_service.get_available_trips_for_transfer(
        client_id, currency, ctx.trips, ctx.trip_passengers, exclude_trip_id=exclude_trip_id
    )

# --- Transferencia de pagos ---
@router.post("/pagos/{pago_id}/transferir", response_model=Pago)
def transferir(
    pago_id: int,
    transferencia: TransferenciaPagoCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    """
    Transfiere un pago (total o parcial) a otro viaje del mismo cliente y moneda.
    """
    db_pago = pagos.get(db, pago_id)
    db_viaje = viajes.get(db, transferencia.to_trip_id)
    if db_pago.trip_id == db_viaje.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El pago ya pertenece a ese viaje.")
    return transferir_pago(db, db_pago, db_viaje, transferencia.amount)

# --- Recibos ---
@router.get("/pagos/{pago_id}/recibo", response_class=HTMLResponse)
def read_recibo_html(
    pago_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    datos = recibo_service.armar_datos_recibo(db, pagos.get(db, pago_id))
    return HTMLResponse(content=recibo_service.render_recibo_html(datos))

@router.get("/pagos/{pago_id}/recibo.pdf")
def read_recibo_pdf(
    pago_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.accounts))
):
    datos = recibo_service.armar_datos_recibo(db, pagos.get(db, pago_id))
    headers = {
        'Content-Disposition': f'attachment; filename="recibo_{datos.receipt_number}.pdf"'
    }
    return Response(content=recibo_service.render_recibo_pdf(datos), media_type='application/pdf', headers=headers)
