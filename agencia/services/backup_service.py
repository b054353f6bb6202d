# agencia/services/backup_service.py
"""
Exportación e importación de datos.

- JSON: backup completo, solo clientes y cuentas corrientes (claves camelCase).
- CSV: clientes, cuentas corrientes y plantilla de importación.
- Importación: porción de clientes de un backup JSON o un CSV con las
  columnas de la plantilla. Siempre agrega, nunca reemplaza.
"""
import io
import csv
import json
import logging
import os
from datetime import date, datetime
from typing import Any, Dict, List

from fastapi import HTTPException, status
from pydantic import ValidationError

from ..models.enums import MonedaEnum
from ..schemas.backup import (
    ArchivoImportacion,
    BackupClientes,
    BackupCompleto,
    BackupCuentas,
    BackupMetadata,
    BusBackup,
    ClienteBackup,
    ClienteImportacion,
    ClienteCuentaBackup,
    CuentaBackup,
    PagoBackup,
    PagoCuentaBackup,
    PasajeroBackup,
    ResumenCuentasBackup,
    SaldoBackup,
    SaldosMoneda,
    ViajeBackup,
    ViajeCuentaBackup,
)
from .cuentas_service import compute_balance

logger = logging.getLogger(__name__)

MAX_IMPORT_SIZE_MB = int(os.getenv("MAX_IMPORT_SIZE_MB", 10))

BACKUP_VERSION = "1.0"

COLUMNAS_CLIENTES = [
    "Apellido y Nombre",
    "Email",
    "Teléfono",
    "Dirección",
    "DNI",
    "Fecha Nacimiento",
    "Vencimiento DNI",
    "Número Pasaporte",
    "Vencimiento Pasaporte",
]
COLUMNAS_CLIENTES_EXPORT = COLUMNAS_CLIENTES + ["Fecha Registro"]

COLUMNAS_CUENTAS = [
    "Cliente",
    "DNI",
    "Email",
    "Saldo ARS",
    "Saldo USD",
    "Total Comprado ARS",
    "Total Pagado ARS",
    "Total Comprado USD",
    "Total Pagado USD",
]

# Columna CSV -> campo del cliente
CAMPOS_POR_COLUMNA = {
    "Apellido y Nombre": "name",
    "Email": "email",
    "Teléfono": "phone",
    "Dirección": "address",
    "DNI": "dni",
    "Fecha Nacimiento": "fecha_nacimiento",
    "Vencimiento DNI": "vencimiento_dni",
    "Número Pasaporte": "numero_pasaporte",
    "Vencimiento Pasaporte": "vencimiento_pasaporte",
}


def nombre_archivo(prefijo: str, extension: str, hoy: date = None) -> str:
    """backup-completo-2024-05-01.json, clientes-2024-05-01.csv, ..."""
    hoy = hoy or date.today()
    return f"{prefijo}-{hoy.isoformat()}.{extension}"


def _fecha(valor) -> str:
    if valor is None:
        return ""
    if isinstance(valor, datetime):
        return valor.date().isoformat()
    return valor.isoformat()


def _metadata(**totales) -> BackupMetadata:
    return BackupMetadata(export_date=datetime.now(), version=BACKUP_VERSION, **totales)


def _dump(modelo) -> Dict[str, Any]:
    return modelo.model_dump(mode="json", by_alias=True)


# --- Exportación JSON ---

def backup_completo(ctx) -> Dict[str, Any]:
    backup = BackupCompleto(
        clients=[ClienteBackup.model_validate(c) for c in ctx.clients],
        trips=[ViajeBackup.model_validate(t) for t in ctx.trips],
        payments=[PagoBackup.model_validate(p) for p in ctx.payments],
        trip_passengers=[PasajeroBackup.model_validate(p) for p in ctx.trip_passengers],
        buses=[BusBackup.model_validate(b) for b in ctx.buses],
        metadata=_metadata(
            total_clients=len(ctx.clients),
            total_trips=len(ctx.trips),
            total_payments=len(ctx.payments),
        ),
    )
    return _dump(backup)


def backup_clientes(ctx) -> Dict[str, Any]:
    backup = BackupClientes(
        clients=[ClienteBackup.model_validate(c) for c in ctx.clients],
        metadata=_metadata(total_clients=len(ctx.clients), type="clients-only"),
    )
    return _dump(backup)


def _saldos_cliente(client_id, ctx) -> Dict[str, Any]:
    return {
        moneda.value: compute_balance(client_id, moneda, ctx.trips, ctx.trip_passengers, ctx.payments)
        for moneda in MonedaEnum
    }


def backup_cuentas(ctx) -> Dict[str, Any]:
    viajes_por_id = {t.id: t for t in ctx.trips}
    cuentas: List[CuentaBackup] = []

    for cliente in ctx.clients:
        saldos = _saldos_cliente(cliente.id, ctx)
        viajes = []
        for pasajero in ctx.trip_passengers:
            if pasajero.client_id != cliente.id:
                continue
            viaje = viajes_por_id.get(pasajero.trip_id)
            viajes.append(ViajeCuentaBackup(
                trip_id=viaje.id if viaje else None,
                destino=viaje.destino if viaje else None,
                fecha_salida=viaje.fecha_salida if viaje else None,
                importe=float(viaje.importe) if viaje else None,
                currency=getattr(viaje.currency, "value", viaje.currency) if viaje else None,
                numero_asiento=pasajero.numero_asiento,
                pagado=pasajero.pagado,
            ))
        pagos = [
            PagoCuentaBackup.model_validate(p)
            for p in ctx.payments if p.client_id == cliente.id
        ]
        cuentas.append(CuentaBackup(
            client=ClienteCuentaBackup.model_validate(cliente),
            balances=SaldosMoneda(**{
                moneda: SaldoBackup(
                    total_charges=float(saldo.total_charges),
                    total_payments=float(saldo.total_payments),
                    balance=float(saldo.balance),
                )
                for moneda, saldo in saldos.items()
            }),
            trips=viajes,
            payments=pagos,
        ))

    resumen = ResumenCuentasBackup(
        total_clients=len(ctx.clients),
        total_active_accounts=sum(
            1 for c in cuentas
            if c.balances.ARS.total_charges > 0 or c.balances.USD.total_charges > 0
        ),
        total_ars=sum(c.balances.ARS.balance for c in cuentas),
        total_usd=sum(c.balances.USD.balance for c in cuentas),
    )
    backup = BackupCuentas(
        accounts=cuentas,
        summary=resumen,
        metadata=_metadata(type="accounts-only"),
    )
    return _dump(backup)


# --- Exportación CSV ---

def _csv(filas: List[List[Any]]) -> str:
    si = io.StringIO()
    writer = csv.writer(si, lineterminator="\n")
    writer.writerows(filas)
    return si.getvalue()


def exportar_clientes_csv(clients) -> str:
    filas = [COLUMNAS_CLIENTES_EXPORT]
    for c in clients:
        filas.append([
            c.name,
            c.email or "",
            c.phone,
            c.address,
            c.dni,
            _fecha(c.fecha_nacimiento),
            _fecha(c.vencimiento_dni),
            c.numero_pasaporte or "",
            _fecha(c.vencimiento_pasaporte),
            _fecha(c.created_at),
        ])
    return _csv(filas)


def exportar_cuentas_csv(ctx) -> str:
    filas = [COLUMNAS_CUENTAS]
    for c in ctx.clients:
        saldos = _saldos_cliente(c.id, ctx)
        ars, usd = saldos["ARS"], saldos["USD"]
        filas.append([
            c.name,
            c.dni,
            c.email or "",
            ars.balance,
            usd.balance,
            ars.total_charges,
            ars.total_payments,
            usd.total_charges,
            usd.total_payments,
        ])
    return _csv(filas)


def plantilla_clientes_csv() -> str:
    ejemplo = [
        "Pérez Juan", "juan@ejemplo.com", "1122334455", "Av. Siempreviva 742",
        "30123456", "1985-03-15", "2030-03-15", "AAA123456", "2029-08-01",
    ]
    return _csv([COLUMNAS_CLIENTES, ejemplo])


# --- Importación ---

def _error_importacion(detalle: str) -> HTTPException:
    logger.warning(f"Importación rechazada: {detalle}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detalle)


def leer_archivo_importacion(file) -> bytes:
    """Lee el archivo subido sin pasar del tamaño máximo permitido."""
    limite = MAX_IMPORT_SIZE_MB * 1024 * 1024
    contenido = file.file.read(limite + 1)
    if len(contenido) > limite:
        raise _error_importacion(f"El archivo supera el tamaño máximo de {MAX_IMPORT_SIZE_MB} MB.")
    return contenido


def _cliente_a_campos(cliente: ClienteImportacion) -> Dict[str, Any]:
    return cliente.model_dump(exclude={"id", "created_at"})


def parsear_json(contenido: bytes) -> List[Dict[str, Any]]:
    try:
        data = json.loads(contenido.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise _error_importacion("Error al leer el archivo. Asegúrate de que sea un backup válido.")

    if not isinstance(data, dict) or "clients" not in data:
        raise _error_importacion("El archivo no contiene datos de clientes válidos.")

    try:
        archivo = ArchivoImportacion.model_validate(data)
    except ValidationError as e:
        raise _error_importacion(f"El archivo no contiene datos de clientes válidos: {e.error_count()} error(es).")

    return [_cliente_a_campos(c) for c in archivo.clients]


def parsear_csv(contenido: bytes) -> List[Dict[str, Any]]:
    try:
        texto = contenido.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise _error_importacion("El archivo CSV debe estar codificado en UTF-8.")

    reader = csv.DictReader(io.StringIO(texto))
    faltantes = [col for col in ("Apellido y Nombre", "DNI", "Fecha Nacimiento") if col not in (reader.fieldnames or [])]
    if faltantes:
        raise _error_importacion(f"Faltan columnas obligatorias: {', '.join(faltantes)}")

    filas = []
    for numero, fila in enumerate(reader, start=2):
        datos = {
            campo: (fila.get(columna) or "").strip() or None
            for columna, campo in CAMPOS_POR_COLUMNA.items()
        }
        datos["phone"] = datos["phone"] or ""
        datos["address"] = datos["address"] or ""
        try:
            filas.append(_cliente_a_campos(ClienteImportacion.model_validate(datos)))
        except ValidationError as e:
            raise _error_importacion(f"Fila {numero} inválida: {e.error_count()} error(es).")
    return filas


def parsear_importacion(contenido: bytes, filename: str) -> List[Dict[str, Any]]:
    """Devuelve los campos de cada cliente a importar según la extensión del archivo."""
    nombre = (filename or "").lower()
    if nombre.endswith(".csv"):
        return parsear_csv(contenido)
    if nombre.endswith(".json"):
        return parsear_json(contenido)
    raise _error_importacion("Formato no soportado. Use un backup .json o un .csv con la plantilla de clientes.")
