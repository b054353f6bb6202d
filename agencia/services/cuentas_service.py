# agencia/services/cuentas_service.py
"""
Cálculo de cuentas corrientes de clientes.

Funciones puras sobre las colecciones en memoria (viajes, pasajeros y pagos).
No acceden a la base de datos: reciben cualquier objeto con los mismos
atributos que los modelos ORM (filas, esquemas Pydantic o SimpleNamespace).

Reglas:
- Cargos: cada registro de pasajero del cliente suma el importe del viaje
  vinculado, solo si la moneda del viaje coincide.
- Pagos: solo los registros de tipo "payment" en la misma moneda.
- saldo = cargos - pagos. Nunca se mezclan monedas.
- Un pasajero cuyo viaje no existe aporta cero (se registra un warning).
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from ..models.enums import MonedaEnum, TipoPagoEnum, TipoViajeEnum
from ..schemas.cuenta import (
    CuentaCliente,
    RegistroHuerfano,
    ReporteIntegridad,
    SaldoCuenta,
    TotalesMoneda,
    Transaccion,
)

logger = logging.getLogger(__name__)

CERO = Decimal("0")


def _valor(campo: Any) -> Any:
    """Normaliza enums (str, Enum) a su valor para comparar contra strings."""
    return getattr(campo, "value", campo)


def _decimal(monto: Any) -> Decimal:
    if monto is None:
        return CERO
    if isinstance(monto, Decimal):
        return monto
    return Decimal(str(monto))


def _indexar_viajes(trips: Iterable[Any]) -> Dict[Any, Any]:
    return {trip.id: trip for trip in trips}


def _cargos_cliente(client_id, currency, viajes_por_id: Dict[Any, Any], trip_passengers: Iterable[Any]):
    """Pares (pasajero, viaje) del cliente en la moneda pedida."""
    moneda = _valor(currency)
    for pasajero in trip_passengers:
        if pasajero.client_id != client_id:
            continue
        viaje = viajes_por_id.get(pasajero.trip_id)
        if viaje is None:
            logger.warning(
                f"Pasajero {pasajero.id} (cliente {client_id}) referencia el viaje inexistente "
                f"{pasajero.trip_id}; se excluye del saldo."
            )
            continue
        if _valor(viaje.currency) == moneda:
            yield pasajero, viaje


def _pagos_cliente(client_id, currency, payments: Iterable[Any]):
    moneda = _valor(currency)
    for pago in payments:
        if (
            pago.client_id == client_id
            and _valor(pago.type) == TipoPagoEnum.payment.value
            and _valor(pago.currency) == moneda
        ):
            yield pago


def compute_balance(client_id, currency, trips, trip_passengers, payments) -> SaldoCuenta:
    """
    Saldo de un cliente en una moneda.

    Returns:
        SaldoCuenta con total_charges, total_payments y balance
        (positivo = el cliente debe, negativo = saldo a favor).
    """
    viajes_por_id = _indexar_viajes(trips)

    total_charges = sum(
        (_decimal(viaje.importe) for _, viaje in _cargos_cliente(client_id, currency, viajes_por_id, trip_passengers)),
        CERO,
    )
    total_payments = sum(
        (_decimal(pago.amount) for pago in _pagos_cliente(client_id, currency, payments)),
        CERO,
    )

    return SaldoCuenta(
        total_charges=total_charges,
        total_payments=total_payments,
        balance=total_charges - total_payments,
    )


def _descripcion_cargo(pasajero: Any, viaje: Any) -> str:
    tipo = _valor(viaje.type)
    if tipo in (TipoViajeEnum.grupal.value, TipoViajeEnum.aereo.value, TipoViajeEnum.individual.value):
        if pasajero.numero_asiento:
            return f"Viaje a {viaje.destino} - Asiento {pasajero.numero_asiento}"
    elif tipo == TipoViajeEnum.crucero.value and pasajero.numero_cabina:
        return f"Viaje a {viaje.destino} - Cabina {pasajero.numero_cabina}"
    return f"Viaje a {viaje.destino}"


def _clave_fecha(transaccion: Transaccion):
    # Sin fecha va al final; timestamp() admite fechas naive y con zona
    if transaccion.date is None:
        return (False, 0.0)
    return (True, transaccion.date.timestamp())


def compute_transaction_history(client_id, currency, trips, trip_passengers, payments) -> List[Transaccion]:
    """
    Historial de movimientos de un cliente en una moneda, del más reciente al más antiguo.

    Se recalcula en cada llamada. El orden relativo de movimientos con la misma
    fecha no está garantizado.
    """
    viajes_por_id = _indexar_viajes(trips)
    transacciones: List[Transaccion] = []

    for pasajero, viaje in _cargos_cliente(client_id, currency, viajes_por_id, trip_passengers):
        transacciones.append(Transaccion(
            id=f"charge-{pasajero.id}",
            date=pasajero.fecha_reserva,
            type="charge",
            description=_descripcion_cargo(pasajero, viaje),
            amount=_decimal(viaje.importe),
            currency=_valor(viaje.currency),
            trip_id=viaje.id,
        ))

    for pago in _pagos_cliente(client_id, currency, payments):
        transacciones.append(Transaccion(
            id=str(pago.id),
            date=pago.date,
            type="payment",
            description=pago.description or "",
            amount=_decimal(pago.amount),
            currency=_valor(pago.currency),
            trip_id=pago.trip_id,
            receipt_number=pago.receipt_number,
            payment_id=pago.id,
        ))

    return sorted(transacciones, key=_clave_fecha, reverse=True)


def compute_currency_totals(
    currency,
    clients,
    trips,
    trip_passengers,
    payments,
    client_id: Optional[Any] = None,
) -> TotalesMoneda:
    """
    Totales de una moneda sobre un conjunto de clientes (o uno solo si se indica client_id).

    total_pending suma únicamente los saldos positivos: los saldos a favor no
    descuentan la deuda de otros clientes.
    """
    clientes = [c for c in clients if client_id is None or c.id == client_id]

    total_charges = CERO
    total_payments = CERO
    total_pending = CERO
    for cliente in clientes:
        saldo = compute_balance(cliente.id, currency, trips, trip_passengers, payments)
        total_charges += saldo.total_charges
        total_payments += saldo.total_payments
        if saldo.balance > 0:
            total_pending += saldo.balance

    moneda = _valor(currency)
    total_receipts = sum(
        1 for p in payments
        if p.receipt_number
        and _valor(p.currency) == moneda
        and (client_id is None or p.client_id == client_id)
    )

    return TotalesMoneda(
        total_charges=total_charges,
        total_payments=total_payments,
        total_pending=total_pending,
        total_receipts=total_receipts,
    )


def compute_client_accounts(currency, clients, trips, trip_passengers, payments) -> List[CuentaCliente]:
    """Filas de la tabla de cuentas: solo clientes con movimientos en la moneda."""
    cuentas = []
    for cliente in clients:
        saldo = compute_balance(cliente.id, currency, trips, trip_passengers, payments)
        if saldo.total_charges == 0 and saldo.total_payments == 0:
            continue
        if saldo.balance > 0:
            estado = "deudor"
        elif saldo.balance < 0:
            estado = "a_favor"
        else:
            estado = "al_dia"
        cuentas.append(CuentaCliente(
            client_id=cliente.id,
            name=cliente.name,
            dni=getattr(cliente, "dni", None),
            total_charges=saldo.total_charges,
            total_payments=saldo.total_payments,
            balance=saldo.balance,
            estado=estado,
        ))
    return cuentas


def get_available_trips_for_transfer(client_id, currency, trips, trip_passengers, exclude_trip_id=None) -> list:
    """Viajes del cliente, en la misma moneda y no archivados, a los que se puede transferir un pago."""
    viajes_cliente = {p.trip_id for p in trip_passengers if p.client_id == client_id}
    moneda = _valor(currency)
    return [
        viaje for viaje in trips
        if viaje.id in viajes_cliente
        and _valor(viaje.currency) == moneda
        and viaje.id != exclude_trip_id
        and not viaje.archived
    ]


def find_orphaned_records(clients, trips, trip_passengers, payments) -> ReporteIntegridad:
    """Pasajeros y pagos cuyo viaje o cliente ya no existe."""
    ids_clientes = {c.id for c in clients}
    ids_viajes = {t.id for t in trips}

    pasajeros_huerfanos = []
    for p in trip_passengers:
        motivos = []
        if p.trip_id not in ids_viajes:
            motivos.append("viaje inexistente")
        if p.client_id not in ids_clientes:
            motivos.append("cliente inexistente")
        if motivos:
            pasajeros_huerfanos.append(RegistroHuerfano(
                tabla="trip_passengers", id=p.id, trip_id=p.trip_id,
                client_id=p.client_id, motivo=", ".join(motivos),
            ))

    pagos_huerfanos = []
    for p in payments:
        motivos = []
        # Un pago sin viaje asociado es válido
        if p.trip_id is not None and p.trip_id not in ids_viajes:
            motivos.append("viaje inexistente")
        if p.client_id not in ids_clientes:
            motivos.append("cliente inexistente")
        if motivos:
            pagos_huerfanos.append(RegistroHuerfano(
                tabla="payments", id=p.id, trip_id=p.trip_id,
                client_id=p.client_id, motivo=", ".join(motivos),
            ))

    if pasajeros_huerfanos or pagos_huerfanos:
        logger.warning(
            f"Integridad: {len(pasajeros_huerfanos)} pasajero(s) y {len(pagos_huerfanos)} pago(s) huérfanos."
        )

    return ReporteIntegridad(
        is_valid=not pasajeros_huerfanos and not pagos_huerfanos,
        orphaned_trip_passengers=pasajeros_huerfanos,
        orphaned_payments=pagos_huerfanos,
    )


def compute_income_by_currency(payments) -> Dict[str, Decimal]:
    """Ingresos (pagos de tipo "payment") por moneda. Nunca suma monedas distintas."""
    ingresos = {moneda.value: CERO for moneda in MonedaEnum}
    for pago in payments:
        if _valor(pago.type) != TipoPagoEnum.payment.value:
            continue
        moneda = _valor(pago.currency)
        ingresos[moneda] = ingresos.get(moneda, CERO) + _decimal(pago.amount)
    return ingresos
