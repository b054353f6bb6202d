"""
PRUEBAS DE CAJA BLANCA - Cálculo de cuentas corrientes
Objetivo: Verificar las reglas de saldo sobre colecciones en memoria

Las funciones son puras: se prueban con SimpleNamespace en lugar de filas ORM.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from agencia.services.cuentas_service import (
    compute_balance,
    compute_client_accounts,
    compute_currency_totals,
    compute_income_by_currency,
    compute_transaction_history,
    find_orphaned_records,
    get_available_trips_for_transfer,
)


def _viaje(id, importe, currency="ARS", type="grupal", destino="Bariloche", archived=False):
    return SimpleNamespace(
        id=id, importe=Decimal(importe), currency=currency, type=type,
        destino=destino, archived=archived, fecha_salida=datetime(2030, 1, 1),
    )


def _pasajero(id, trip_id, client_id, numero_asiento=None, numero_cabina=None, fecha=None):
    return SimpleNamespace(
        id=id, trip_id=trip_id, client_id=client_id,
        numero_asiento=numero_asiento, numero_cabina=numero_cabina,
        fecha_reserva=fecha or datetime(2024, 1, 1),
    )


def _pago(id, client_id, amount, currency="ARS", type="payment", trip_id=None,
          receipt_number=None, fecha=None, description="Pago"):
    return SimpleNamespace(
        id=id, client_id=client_id, amount=Decimal(amount), currency=currency,
        type=type, trip_id=trip_id, receipt_number=receipt_number,
        date=fecha or datetime(2024, 2, 1), description=description,
    )


def _cliente(id, name="Cliente", dni="1"):
    return SimpleNamespace(id=id, name=name, dni=dni)


@pytest.fixture
def escenario_basico():
    """Cliente 1 en un viaje de 1000 ARS con un pago de 400 ARS."""
    trips = [_viaje(10, "1000")]
    trip_passengers = [_pasajero(100, 10, 1, numero_asiento=5)]
    payments = [_pago(200, 1, "400", trip_id=10, receipt_number="REC-1")]
    return trips, trip_passengers, payments


class TestComputeBalance:

    def test_saldo_cargos_menos_pagos(self, escenario_basico):
        trips, tps, payments = escenario_basico

        saldo = compute_balance(1, "ARS", trips, tps, payments)

        assert saldo.total_charges == Decimal("1000")
        assert saldo.total_payments == Decimal("400")
        assert saldo.balance == Decimal("600")

    def test_otra_moneda_da_cero(self, escenario_basico):
        trips, tps, payments = escenario_basico

        saldo = compute_balance(1, "USD", trips, tps, payments)

        assert saldo.total_charges == 0
        assert saldo.total_payments == 0
        assert saldo.balance == 0

    def test_pasajero_con_viaje_inexistente_no_suma(self, escenario_basico, caplog):
        trips, tps, payments = escenario_basico
        tps = tps + [_pasajero(101, 999, 1)]

        with caplog.at_level(logging.WARNING, logger="agencia.services.cuentas_service"):
            saldo = compute_balance(1, "ARS", trips, tps, payments)

        assert saldo.total_charges == Decimal("1000")
        assert any(
            r.levelno == logging.WARNING and "viaje inexistente 999" in r.getMessage()
            for r in caplog.records
        )

    def test_registros_charge_no_cuentan_como_pago(self, escenario_basico):
        trips, tps, payments = escenario_basico
        payments = payments + [_pago(201, 1, "300", type="charge")]

        saldo = compute_balance(1, "ARS", trips, tps, payments)

        assert saldo.total_payments == Decimal("400")

    def test_pago_sin_viaje_cuenta(self, escenario_basico):
        trips, tps, payments = escenario_basico
        payments = payments + [_pago(202, 1, "100")]

        saldo = compute_balance(1, "ARS", trips, tps, payments)

        assert saldo.balance == Decimal("500")

    def test_saldo_a_favor_es_negativo(self):
        saldo = compute_balance(1, "USD", [], [], [_pago(1, 1, "50", currency="USD")])
        assert saldo.balance == Decimal("-50")


class TestTransactionHistory:

    def test_historial_ordenado_del_mas_reciente(self):
        trips = [_viaje(10, "1000")]
        tps = [_pasajero(100, 10, 1, numero_asiento=5, fecha=datetime(2024, 1, 1))]
        payments = [
            _pago(200, 1, "400", fecha=datetime(2024, 3, 1), receipt_number="REC-1"),
            _pago(201, 1, "100", fecha=datetime(2024, 2, 1)),
        ]

        historial = compute_transaction_history(1, "ARS", trips, tps, payments)

        assert len(historial) == 3
        assert [t.id for t in historial] == ["200", "201", "charge-100"]
        cargo = historial[-1]
        assert cargo.type == "charge"
        assert cargo.description == "Viaje a Bariloche - Asiento 5"
        assert cargo.amount == Decimal("1000")
        assert historial[0].receipt_number == "REC-1"
        assert historial[0].payment_id == 200

    def test_descripcion_crucero_usa_cabina(self):
        trips = [_viaje(10, "2000", currency="USD", type="crucero", destino="Caribe")]
        tps = [_pasajero(100, 10, 1, numero_cabina="A12")]

        historial = compute_transaction_history(1, "USD", trips, tps, [])

        assert historial[0].description == "Viaje a Caribe - Cabina A12"

    def test_descripcion_sin_ubicacion(self):
        trips = [_viaje(10, "500", type="grupal", destino="Mendoza")]
        tps = [_pasajero(100, 10, 1)]

        historial = compute_transaction_history(1, "ARS", trips, tps, [])

        assert historial[0].description == "Viaje a Mendoza"

    def test_mismo_momento_sin_orden_garantizado(self):
        """Con fechas iguales solo se garantiza qué movimientos aparecen, no su orden."""
        mismo_momento = datetime(2024, 5, 1, 12, 0)
        trips = [_viaje(10, "1000")]
        tps = [_pasajero(100, 10, 1, numero_asiento=5, fecha=mismo_momento)]
        payments = [
            _pago(200, 1, "400", fecha=mismo_momento),
            _pago(201, 1, "100", fecha=mismo_momento),
        ]

        historial = compute_transaction_history(1, "ARS", trips, tps, payments)

        assert len(historial) == 3
        assert {t.id for t in historial} == {"charge-100", "200", "201"}

    def test_fecha_faltante_con_fechas_con_zona(self):
        trips = [_viaje(10, "1000")]
        sin_fecha = SimpleNamespace(
            id=100, trip_id=10, client_id=1, numero_asiento=5, numero_cabina=None, fecha_reserva=None,
        )
        payments = [_pago(200, 1, "400", fecha=datetime(2024, 1, 1, tzinfo=timezone.utc))]

        historial = compute_transaction_history(1, "ARS", trips, [sin_fecha], payments)

        assert [t.id for t in historial] == ["200", "charge-100"]
        assert historial[-1].date is None


class TestTotales:

    def test_pendiente_suma_solo_saldos_positivos(self):
        clients = [_cliente(1), _cliente(2)]
        trips = [_viaje(10, "1000")]
        tps = [_pasajero(100, 10, 1)]
        payments = [
            _pago(200, 1, "400", receipt_number="REC-1"),
            _pago(201, 2, "300", receipt_number="REC-2"),  # Cliente 2 queda a favor
            _pago(202, 2, "10", currency="USD", receipt_number="REC-3"),
        ]

        totales = compute_currency_totals("ARS", clients, trips, tps, payments)

        assert totales.total_charges == Decimal("1000")
        assert totales.total_payments == Decimal("700")
        assert totales.total_pending == Decimal("600")
        assert totales.total_receipts == 2

    def test_totales_de_un_cliente(self):
        clients = [_cliente(1), _cliente(2)]
        payments = [_pago(200, 1, "400", receipt_number="REC-1"), _pago(201, 2, "300", receipt_number="REC-2")]

        totales = compute_currency_totals("ARS", clients, [], [], payments, client_id=2)

        assert totales.total_payments == Decimal("300")
        assert totales.total_receipts == 1

    def test_cuentas_excluye_clientes_sin_movimientos(self):
        clients = [_cliente(1, "Deudor"), _cliente(2, "A favor"), _cliente(3, "Sin movimientos"), _cliente(4, "Al día")]
        trips = [_viaje(10, "1000")]
        tps = [_pasajero(100, 10, 1), _pasajero(101, 10, 4)]
        payments = [_pago(200, 2, "50"), _pago(201, 4, "1000")]

        cuentas = compute_client_accounts("ARS", clients, trips, tps, payments)

        estados = {c.client_id: c.estado for c in cuentas}
        assert estados == {1: "deudor", 2: "a_favor", 4: "al_dia"}

    def test_ingresos_separados_por_moneda(self):
        payments = [
            _pago(1, 1, "100"),
            _pago(2, 1, "50", currency="USD"),
            _pago(3, 1, "999", type="charge"),
        ]

        ingresos = compute_income_by_currency(payments)

        assert ingresos == {"ARS": Decimal("100"), "USD": Decimal("50")}


class TestTransferenciasEIntegridad:

    def test_viajes_transferibles(self):
        trips = [
            _viaje(10, "1000"),
            _viaje(11, "500", destino="Salta"),
            _viaje(12, "700", currency="USD"),
            _viaje(13, "300", archived=True),
            _viaje(14, "300", destino="Sin el cliente"),
        ]
        tps = [_pasajero(1, 10, 1), _pasajero(2, 11, 1), _pasajero(3, 12, 1), _pasajero(4, 13, 1), _pasajero(5, 14, 2)]

        disponibles = get_available_trips_for_transfer(1, "ARS", trips, tps, exclude_trip_id=10)

        assert [t.id for t in disponibles] == [11]

    def test_registros_huerfanos(self):
        clients = [_cliente(1)]
        trips = [_viaje(10, "1000")]
        tps = [_pasajero(100, 10, 1), _pasajero(101, 99, 1), _pasajero(102, 10, 7)]
        payments = [_pago(200, 1, "10"), _pago(201, 1, "10", trip_id=99), _pago(202, 8, "10", trip_id=10)]

        reporte = find_orphaned_records(clients, trips, tps, payments)

        assert reporte.is_valid is False
        assert {(r.id, r.motivo) for r in reporte.orphaned_trip_passengers} == {
            (101, "viaje inexistente"),
            (102, "cliente inexistente"),
        }
        assert {r.id for r in reporte.orphaned_payments} == {201, 202}

    def test_sin_huerfanos_es_valido(self, escenario_basico):
        trips, tps, payments = escenario_basico

        reporte = find_orphaned_records([_cliente(1)], trips, tps, payments)

        assert reporte.is_valid is True
