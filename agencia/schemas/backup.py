# agencia/schemas/backup.py
"""
Formatos de los archivos de backup (JSON con claves camelCase).

Los montos se exportan como float para que el archivo sea legible por
planillas y por el front-end sin conversión adicional.
"""
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.enums import MonedaEnum, TipoPagoEnum, TipoViajeEnum
from .cliente import ClienteBase


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Entidades ---

class ClienteBackup(CamelModel):
    id: Optional[Union[int, str]] = None
    name: str
    email: Optional[str] = None
    phone: str = ""
    address: str = ""
    dni: str
    fecha_nacimiento: date
    vencimiento_dni: Optional[date] = None
    numero_pasaporte: Optional[str] = None
    vencimiento_pasaporte: Optional[date] = None
    created_at: Optional[datetime] = None


class ClienteImportacion(ClienteBase):
    """Fila de importación: mismas reglas que el alta de clientes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[Union[int, str]] = None  # Se ignora: el servidor asigna ids nuevos
    phone: str = Field("", max_length=30)
    address: str = ""
    created_at: Optional[datetime] = None


class ViajeBackup(CamelModel):
    id: int
    bus_id: Optional[int] = None
    destino: str
    fecha_salida: datetime
    fecha_regreso: datetime
    importe: float
    currency: MonedaEnum
    type: TipoViajeEnum
    descripcion: str = ""
    archived: bool = False
    naviera: Optional[str] = None
    barco: Optional[str] = None
    cabina: Optional[str] = None
    aerolinea: Optional[str] = None
    numero_vuelo: Optional[str] = None
    clase: Optional[str] = None
    escalas: Optional[str] = None
    created_at: Optional[datetime] = None


class PagoBackup(CamelModel):
    id: int
    client_id: int
    trip_id: Optional[int] = None
    amount: float
    currency: MonedaEnum
    type: TipoPagoEnum
    description: str = ""
    date: datetime
    receipt_number: Optional[str] = None


class PasajeroBackup(CamelModel):
    id: int
    trip_id: int
    client_id: int
    fecha_reserva: datetime
    pagado: bool
    numero_asiento: Optional[int] = None
    numero_cabina: Optional[str] = None


class BusBackup(CamelModel):
    id: int
    patente: str
    asientos: int
    tipo_servicio: str
    imagen_distribucion: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Metadatos ---

class BackupMetadata(CamelModel):
    export_date: datetime
    version: str = "1.0"
    total_clients: Optional[int] = None
    total_trips: Optional[int] = None
    total_payments: Optional[int] = None
    type: Optional[str] = None


# --- Archivos ---

class BackupCompleto(CamelModel):
    clients: List[ClienteBackup]
    trips: List[ViajeBackup]
    payments: List[PagoBackup]
    trip_passengers: List[PasajeroBackup]
    buses: List[BusBackup]
    metadata: BackupMetadata


class BackupClientes(CamelModel):
    clients: List[ClienteBackup]
    metadata: BackupMetadata


class SaldoBackup(CamelModel):
    total_charges: float
    total_payments: float
    balance: float


class ClienteCuentaBackup(CamelModel):
    id: int
    name: str
    dni: str
    email: Optional[str] = None


class ViajeCuentaBackup(CamelModel):
    trip_id: Optional[int] = None
    destino: Optional[str] = None
    fecha_salida: Optional[datetime] = None
    importe: Optional[float] = None
    currency: Optional[str] = None
    numero_asiento: Optional[int] = None
    pagado: bool = False


class PagoCuentaBackup(CamelModel):
    id: int
    amount: float
    currency: MonedaEnum
    date: datetime
    description: str = ""
    receipt_number: Optional[str] = None


class SaldosMoneda(BaseModel):
    # Las claves son los códigos de moneda tal cual
    ARS: SaldoBackup
    USD: SaldoBackup


class CuentaBackup(CamelModel):
    client: ClienteCuentaBackup
    balances: SaldosMoneda
    trips: List[ViajeCuentaBackup]
    payments: List[PagoCuentaBackup]


class ResumenCuentasBackup(CamelModel):
    total_clients: int
    total_active_accounts: int
    total_ars: float = Field(..., alias="totalARS")
    total_usd: float = Field(..., alias="totalUSD")


class BackupCuentas(CamelModel):
    accounts: List[CuentaBackup]
    summary: ResumenCuentasBackup
    metadata: BackupMetadata


# --- Importación ---

class ArchivoImportacion(BaseModel):
    """Solo se usa la porción de clientes de cualquier backup."""
    model_config = ConfigDict(extra="ignore")

    clients: List[ClienteImportacion]
