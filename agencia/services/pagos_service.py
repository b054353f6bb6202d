# agencia/services/pagos_service.py
"""
Operaciones de pago con más de una escritura: pago de un pasajero y
transferencia de un pago a otro viaje. Cada una se confirma en un solo commit.
"""
import time
import logging
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ..models.enums import TipoPagoEnum
from ..models.pago import Pago as DBPago
from ..models.pasajero_viaje import PasajeroViaje as DBPasajeroViaje
from ..models.viaje import Viaje as DBViaje
from ..utils.viajes_utils import describe_passenger_location, etiqueta_tipo_viaje

logger = logging.getLogger(__name__)


def generar_numero_recibo(prefijo: str = "REC") -> str:
    """Número de recibo basado en la marca de tiempo en milisegundos."""
    return f"{prefijo}-{int(time.time() * 1000)}"


def registrar_pago_pasajero(db: Session, viaje: DBViaje, pasajero: DBPasajeroViaje, amount: Decimal) -> DBPago:
    """
    Registra un pago del pasajero por el viaje en la moneda del viaje.
    Si el monto cubre el importe completo, el pasajero queda marcado como pagado.
    """
    pago = DBPago(
        client_id=pasajero.client_id,
        trip_id=viaje.id,
        amount=amount,
        currency=viaje.currency,
        type=TipoPagoEnum.payment,
        description=(
            f"Pago por {etiqueta_tipo_viaje(viaje)} a {viaje.destino}"
            f"{describe_passenger_location(pasajero, viaje)}"
        ),
        receipt_number=generar_numero_recibo("REC"),
    )
    if amount >= Decimal(str(viaje.importe)):
        pasajero.pagado = True

    try:
        db.add(pago)
        db.add(pasajero)
        db.commit()
        db.refresh(pago)
    except Exception as e:
        db.rollback()
        logger.error(f"Error al registrar el pago del pasajero {pasajero.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al registrar el pago: {e}",
        )

    logger.info(f"Pago {pago.receipt_number} registrado para el cliente {pago.client_id} en el viaje {viaje.id}.")
    return pago


def transferir_pago(db: Session, pago: DBPago, viaje_destino: DBViaje, amount: Decimal) -> DBPago:
    """
    Transfiere total o parcialmente un pago a otro viaje.

    - Parcial: el pago original se reduce y se crea un pago nuevo (TRANS-...)
      en el viaje destino. Devuelve el pago nuevo.
    - Total: el pago original pasa al viaje destino. Devuelve el pago original.
    """
    monto_original = Decimal(str(pago.amount))
    if amount > monto_original:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El monto a transferir no puede ser mayor al monto del pago original",
        )
    moneda_pago = getattr(pago.currency, "value", pago.currency)
    moneda_destino = getattr(viaje_destino.currency, "value", viaje_destino.currency)
    if moneda_pago != moneda_destino:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El viaje de destino debe estar en la misma moneda que el pago.",
        )

    if amount < monto_original:
        destino_anterior = pago.viaje.destino if pago.viaje is not None else "viaje anterior"
        pago.amount = monto_original - amount
        pago.description = f"{pago.description} (Transferencia parcial realizada)"
        resultado = DBPago(
            client_id=pago.client_id,
            trip_id=viaje_destino.id,
            amount=amount,
            currency=pago.currency,
            type=TipoPagoEnum.payment,
            description=f"Transferencia desde {destino_anterior}",
            receipt_number=generar_numero_recibo("TRANS"),
        )
        db.add(resultado)
    else:
        pago.trip_id = viaje_destino.id
        pago.description = f"Pago transferido a {viaje_destino.destino}"
        resultado = pago

    try:
        db.add(pago)
        db.commit()
        db.refresh(resultado)
    except Exception as e:
        db.rollback()
        logger.error(f"Error al transferir el pago {pago.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al transferir el pago: {e}",
        )

    logger.info(f"Transferidos {amount} {moneda_pago} del pago {pago.id} al viaje {viaje_destino.id}.")
    return resultado
