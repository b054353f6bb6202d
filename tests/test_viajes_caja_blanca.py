"""
PRUEBAS DE CAJA BLANCA - Módulo Viajes y Pasajeros
Objetivo: Testear asientos, cabinas, pagos de pasajeros y archivado

Cobertura objetivo:
- Validación de ubicación por tipo de viaje (grupal, individual, crucero, aéreo)
- Alta de pasajeros y duplicados
- Pago del pasajero y marca de pagado
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from agencia.models.enums import RolUsuarioEnum, TipoViajeEnum
from agencia.models.pago import Pago as DBPago
from agencia.routes.viaje import add_pasajero, archivar_viajes_antiguos, pay_pasajero, update_pasajero, update_viaje
from agencia.schemas.viaje import PagoPasajeroCreate, PasajeroCreate, PasajeroUpdate, ViajeUpdate
from agencia.utils import viajes_utils


class TestValidacionUbicacion:

    def _viaje(self, type, id=1):
        return SimpleNamespace(id=id, type=type)

    def _ocupante(self, id, asiento):
        return SimpleNamespace(id=id, trip_id=1, numero_asiento=asiento)

    def test_grupal_sin_bus(self):
        error = viajes_utils.validar_ubicacion_pasajero(self._viaje("grupal"), None, [], 1, None)
        assert error == "El viaje grupal no tiene un bus asignado."

    def test_grupal_asiento_fuera_de_rango(self):
        bus = SimpleNamespace(asientos=40)
        error = viajes_utils.validar_ubicacion_pasajero(self._viaje("grupal"), bus, [], 41, None)
        assert "no existe" in error

    def test_grupal_asiento_ocupado(self):
        bus = SimpleNamespace(asientos=40)
        error = viajes_utils.validar_ubicacion_pasajero(
            self._viaje("grupal"), bus, [self._ocupante(7, 10)], 10, None
        )
        assert "ocupado" in error

    def test_cambio_de_asiento_excluye_al_propio_pasajero(self):
        bus = SimpleNamespace(asientos=40)
        error = viajes_utils.validar_ubicacion_pasajero(
            self._viaje("grupal"), bus, [self._ocupante(7, 10)], 10, None, exclude_passenger_id=7
        )
        assert error is None

    def test_crucero_exige_cabina(self):
        assert viajes_utils.validar_ubicacion_pasajero(self._viaje("crucero"), None, [], None, " ") is not None
        assert viajes_utils.validar_ubicacion_pasajero(self._viaje("crucero"), None, [], None, "A12") is None

    def test_individual_solo_asiento_1(self):
        assert viajes_utils.validar_ubicacion_pasajero(self._viaje("individual"), None, [], 2, None) is not None
        assert viajes_utils.validar_ubicacion_pasajero(self._viaje("individual"), None, [], 1, None) is None

    def test_aereo_sin_bus_usa_capacidad_fija(self):
        assert viajes_utils.validar_ubicacion_pasajero(self._viaje("aereo"), None, [], 300, None) is None
        assert viajes_utils.validar_ubicacion_pasajero(self._viaje("aereo"), None, [], 301, None) is not None

    def test_numeros_disponibles(self):
        bus = SimpleNamespace(asientos=4)
        ocupantes = [self._ocupante(1, 2), self._ocupante(2, 4)]

        assert viajes_utils.numeros_asiento_disponibles(self._viaje("grupal"), bus, ocupantes) == [1, 3]
        assert viajes_utils.cantidad_asientos_disponibles(self._viaje("grupal"), bus, ocupantes) == 2
        assert viajes_utils.numeros_asiento_disponibles(self._viaje("individual"), None, ocupantes) == [1]
        assert viajes_utils.numeros_asiento_disponibles(self._viaje("crucero"), None, ocupantes) == []


class TestAddPasajeroCajaBlanca:

    def test_alta_en_grupal(self, db_session, mock_user, crear_bus, crear_viaje, crear_cliente):
        viaje = crear_viaje(bus=crear_bus())
        cliente = crear_cliente()

        result = add_pasajero(viaje.id, PasajeroCreate(client_id=cliente.id, numero_asiento=12), db_session, mock_user)

        assert result.numero_asiento == 12
        assert result.numero_cabina is None
        assert result.pagado is False

    def test_cliente_duplicado_409(self, db_session, mock_user, crear_bus, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(bus=crear_bus())
        cliente = crear_cliente()
        crear_pasajero(viaje, cliente, numero_asiento=1)

        with pytest.raises(HTTPException) as exc_info:
            add_pasajero(viaje.id, PasajeroCreate(client_id=cliente.id, numero_asiento=2), db_session, mock_user)

        assert exc_info.value.status_code == 409

    def test_asiento_ocupado_400(self, db_session, mock_user, crear_bus, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(bus=crear_bus())
        crear_pasajero(viaje, crear_cliente(dni="1"), numero_asiento=5)

        with pytest.raises(HTTPException) as exc_info:
            add_pasajero(viaje.id, PasajeroCreate(client_id=crear_cliente(dni="2").id, numero_asiento=5), db_session, mock_user)

        assert exc_info.value.status_code == 400

    def test_individual_fuerza_asiento_1(self, db_session, mock_user, crear_viaje, crear_cliente):
        viaje = crear_viaje(type=TipoViajeEnum.individual)

        result = add_pasajero(viaje.id, PasajeroCreate(client_id=crear_cliente().id), db_session, mock_user)

        assert result.numero_asiento == 1

    def test_crucero_guarda_cabina_y_descarta_asiento(self, db_session, mock_user, crear_viaje, crear_cliente):
        viaje = crear_viaje(type=TipoViajeEnum.crucero, naviera="MSC", barco="Seaview")
        datos = PasajeroCreate(client_id=crear_cliente().id, numero_asiento=3, numero_cabina="B204")

        result = add_pasajero(viaje.id, datos, db_session, mock_user)

        assert result.numero_asiento is None
        assert result.numero_cabina == "B204"

    def test_cliente_inexistente_404(self, db_session, mock_user, crear_viaje):
        viaje = crear_viaje(type=TipoViajeEnum.individual)

        with pytest.raises(HTTPException) as exc_info:
            add_pasajero(viaje.id, PasajeroCreate(client_id=999), db_session, mock_user)

        assert exc_info.value.status_code == 404


class TestUpdateUbicacionCajaBlanca:
    """
    Rutas de ejecución:
    1. crucero: un asiento enviado se descarta y queda la cabina
    2. grupal: una cabina enviada se descarta y queda el asiento
    3. cambio de tipo crucero ↔ asientos con pasajeros → HTTPException(400)
    4. cambio de tipo sin pasajeros → se aplica
    """

    def test_rama_1_crucero_descarta_asiento(self, db_session, mock_user, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(type=TipoViajeEnum.crucero, naviera="MSC")
        pasajero = crear_pasajero(viaje, crear_cliente(), numero_cabina="A12")

        result = update_pasajero(viaje.id, pasajero.id, PasajeroUpdate(numero_asiento=5), db_session, mock_user)

        assert result.numero_asiento is None
        assert result.numero_cabina == "A12"

    def test_rama_2_grupal_descarta_cabina(self, db_session, mock_user, crear_bus, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(bus=crear_bus(asientos=40))
        pasajero = crear_pasajero(viaje, crear_cliente(), numero_asiento=5)

        result = update_pasajero(viaje.id, pasajero.id, PasajeroUpdate(numero_cabina="X1"), db_session, mock_user)

        assert result.numero_asiento == 5
        assert result.numero_cabina is None

    def test_rama_3_cambio_de_tipo_con_pasajeros_400(self, db_session, mock_user, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(type=TipoViajeEnum.crucero)
        crear_pasajero(viaje, crear_cliente(), numero_cabina="A12")

        with pytest.raises(HTTPException) as exc_info:
            update_viaje(viaje.id, ViajeUpdate(type=TipoViajeEnum.aereo), db_session, mock_user)

        assert exc_info.value.status_code == 400

    def test_rama_4_cambio_de_tipo_sin_pasajeros(self, db_session, mock_user, crear_viaje):
        viaje = crear_viaje(type=TipoViajeEnum.crucero)

        result = update_viaje(viaje.id, ViajeUpdate(type=TipoViajeEnum.aereo), db_session, mock_user)

        assert result.type == TipoViajeEnum.aereo

    def test_normalizar_ubicacion_por_tipo(self):
        assert viajes_utils.normalizar_ubicacion(SimpleNamespace(type="individual"), 7, "A1") == (1, None)
        assert viajes_utils.normalizar_ubicacion(SimpleNamespace(type="aereo"), 7, "A1") == (7, None)
        assert viajes_utils.normalizar_ubicacion(SimpleNamespace(type="crucero"), 7, "A1") == (None, "A1")


class TestPagoPasajeroCajaBlanca:

    def test_pago_completo_marca_pagado(self, db_session, mock_user, crear_bus, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(importe="1000", bus=crear_bus())
        pasajero = crear_pasajero(viaje, crear_cliente(), numero_asiento=8)

        pago = pay_pasajero(viaje.id, pasajero.id, PagoPasajeroCreate(amount=Decimal("1000")), db_session, mock_user)

        db_session.refresh(pasajero)
        assert pasajero.pagado is True
        assert pago.receipt_number.startswith("REC-")
        assert pago.description == "Pago por viaje grupal a Bariloche - Asiento 8"
        assert pago.currency == viaje.currency

    def test_pago_parcial_no_marca_pagado(self, db_session, mock_user, crear_bus, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(importe="1000", bus=crear_bus())
        pasajero = crear_pasajero(viaje, crear_cliente(), numero_asiento=8)

        pay_pasajero(viaje.id, pasajero.id, PagoPasajeroCreate(amount=Decimal("400")), db_session, mock_user)

        db_session.refresh(pasajero)
        assert pasajero.pagado is False
        assert db_session.query(DBPago).count() == 1

    def test_pasajero_de_otro_viaje_404(self, db_session, mock_user, crear_viaje, crear_cliente, crear_pasajero):
        viaje = crear_viaje(type=TipoViajeEnum.individual)
        otro = crear_viaje(destino="Salta", type=TipoViajeEnum.individual)
        pasajero = crear_pasajero(otro, crear_cliente(), numero_asiento=1)

        with pytest.raises(HTTPException) as exc_info:
            pay_pasajero(viaje.id, pasajero.id, PagoPasajeroCreate(amount=Decimal("10")), db_session, mock_user)

        assert exc_info.value.status_code == 404


class TestArchivado:

    def test_archiva_solo_viajes_viejos(self, db_session, mock_user, crear_viaje):
        hace_dos_anios = datetime.now() - timedelta(days=730)
        viejo = crear_viaje(destino="Viejo", fecha_salida=hace_dos_anios, fecha_regreso=hace_dos_anios + timedelta(days=5))
        nuevo = crear_viaje(destino="Nuevo")

        resultado = archivar_viajes_antiguos(365, db_session, mock_user)

        assert resultado.archivados == 1
        db_session.refresh(viejo)
        db_session.refresh(nuevo)
        assert viejo.archived is True
        assert nuevo.archived is False

    def test_listado_por_api_oculta_archivados(self, client, auth_headers, crear_viaje):
        headers = auth_headers(RolUsuarioEnum.operator)
        crear_viaje(destino="Activo")
        crear_viaje(destino="Archivado", archived=True)

        activos = client.get("/viajes/", headers=headers).json()
        todos = client.get("/viajes/", params={"archived": "true"}, headers=headers).json()

        assert [v["destino"] for v in activos] == ["Activo"]
        assert [v["destino"] for v in todos] == ["Archivado"]


class TestViajesApi:

    def test_crear_viaje_grupal_con_bus_y_disponibilidad(self, client, auth_headers, crear_bus):
        headers = auth_headers(RolUsuarioEnum.manager)
        bus = crear_bus(asientos=3)

        response = client.post("/viajes/", json={
            "bus_id": bus.id,
            "destino": "Córdoba",
            "fecha_salida": "2030-05-01T08:00:00",
            "fecha_regreso": "2030-05-05T20:00:00",
            "importe": "850.00",
            "currency": "ARS",
            "type": "grupal",
        }, headers=headers)

        assert response.status_code == 201
        viaje_id = response.json()["id"]
        disponibilidad = client.get(f"/viajes/{viaje_id}/disponibilidad", headers=headers).json()
        assert disponibilidad["numeros_disponibles"] == [1, 2, 3]

    def test_regreso_anterior_a_salida_422(self, client, auth_headers):
        response = client.post("/viajes/", json={
            "destino": "Córdoba",
            "fecha_salida": "2030-05-05T08:00:00",
            "fecha_regreso": "2030-05-01T20:00:00",
            "importe": "850.00",
            "type": "individual",
        }, headers=auth_headers(RolUsuarioEnum.manager))

        assert response.status_code == 422

    def test_bus_inexistente_404(self, client, auth_headers):
        response = client.post("/viajes/", json={
            "bus_id": 999,
            "destino": "Córdoba",
            "fecha_salida": "2030-05-01T08:00:00",
            "fecha_regreso": "2030-05-05T20:00:00",
            "importe": "850.00",
        }, headers=auth_headers(RolUsuarioEnum.manager))

        assert response.status_code == 404

    def test_fechas_con_zona_horaria(self, client, auth_headers):
        response = client.post("/viajes/", json={
            "destino": "Córdoba",
            "fecha_salida": "2030-05-01T08:00:00Z",
            "fecha_regreso": "2030-05-05T20:00:00-03:00",
            "importe": "850.00",
            "type": "individual",
        }, headers=auth_headers(RolUsuarioEnum.manager))

        assert response.status_code == 201

    def test_actualizar_regreso_con_zona_horaria(self, client, auth_headers, crear_viaje):
        viaje = crear_viaje(type=TipoViajeEnum.individual)

        response = client.put(
            f"/viajes/{viaje.id}",
            json={"fecha_regreso": "2030-07-20T20:00:00Z"},
            headers=auth_headers(RolUsuarioEnum.manager),
        )

        assert response.status_code == 200
        assert response.json()["fecha_regreso"].startswith("2030-07-2")

    def test_fecha_nula_en_actualizacion_422(self, client, auth_headers, crear_viaje):
        viaje = crear_viaje(type=TipoViajeEnum.individual)

        response = client.put(
            f"/viajes/{viaje.id}",
            json={"fecha_regreso": None},
            headers=auth_headers(RolUsuarioEnum.manager),
        )

        assert response.status_code == 422

    def test_schema_quita_la_zona_horaria(self):
        cambio = ViajeUpdate(fecha_salida=datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc))

        assert cambio.fecha_salida.tzinfo is None
