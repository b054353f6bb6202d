# agencia/schemas/viaje.py
from decimal import Decimal
from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.enums import MonedaEnum, TipoViajeEnum


def fecha_sin_zona(v: Optional[datetime]) -> Optional[datetime]:
    # Las columnas son naive: un "...Z" del front-end se pasa a hora local
    if v is not None and v.tzinfo is not None:
        return v.astimezone().replace(tzinfo=None)
    return v


# --- Viajes ---

class ViajeBase(BaseModel):
    bus_id: Optional[int] = Field(None, description="Bus asignado (solo viajes grupales)")
    destino: str = Field(..., min_length=1, max_length=150)
    fecha_salida: datetime
    fecha_regreso: datetime
    importe: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    currency: MonedaEnum = MonedaEnum.ARS
    type: TipoViajeEnum = TipoViajeEnum.grupal
    descripcion: str = ""

    naviera: Optional[str] = Field(None, max_length=100)
    barco: Optional[str] = Field(None, max_length=100)
    cabina: Optional[str] = Field(None, max_length=50)

    aerolinea: Optional[str] = Field(None, max_length=100)
    numero_vuelo: Optional[str] = Field(None, max_length=20)
    clase: Optional[str] = Field(None, max_length=30)
    escalas: Optional[str] = Field(None, max_length=255)

    archived: bool = False

    @field_validator('fecha_salida', 'fecha_regreso')
    @classmethod
    def normalizar_fechas(cls, v):
        return fecha_sin_zona(v)


class ViajeCreate(ViajeBase):

    @model_validator(mode="after")
    def validar_viaje(self):
        if self.fecha_regreso < self.fecha_salida:
            raise ValueError("La fecha de regreso no puede ser anterior a la fecha de salida.")
        if self.bus_id is not None and self.type != TipoViajeEnum.grupal:
            raise ValueError("Solo los viajes grupales pueden tener un bus asignado.")
        return self


class ViajeUpdate(BaseModel):
    # La validación cruzada (fechas, bus) se hace contra el estado final en la ruta
    bus_id: Optional[int] = None
    destino: Optional[str] = Field(None, min_length=1, max_length=150)
    fecha_salida: Optional[datetime] = None
    fecha_regreso: Optional[datetime] = None
    importe: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    currency: Optional[MonedaEnum] = None
    type: Optional[TipoViajeEnum] = None
    descripcion: Optional[str] = None
    naviera: Optional[str] = Field(None, max_length=100)
    barco: Optional[str] = Field(None, max_length=100)
    cabina: Optional[str] = Field(None, max_length=50)
    aerolinea: Optional[str] = Field(None, max_length=100)
    numero_vuelo: Optional[str] = Field(None, max_length=20)
    clase: Optional[str] = Field(None, max_length=30)
    escalas: Optional[str] = Field(None, max_length=255)
    archived: Optional[bool] = None

    @field_validator('destino', 'fecha_salida', 'fecha_regreso', 'importe', 'currency', 'type', 'descripcion', 'archived')
    @classmethod
    def rechazar_nulos(cls, v):
        # Omitir el campo lo deja igual; null explícito no se admite
        if v is None:
            raise ValueError("El campo no puede ser nulo.")
        return v

    @field_validator('fecha_salida', 'fecha_regreso')
    @classmethod
    def normalizar_fechas(cls, v):
        return fecha_sin_zona(v)


class Viaje(ViajeBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ViajeDisponibilidad(BaseModel):
    trip_id: int
    asientos_disponibles: int
    numeros_disponibles: List[int]


class ArchivadoResultado(BaseModel):
    archivados: int
    fecha_corte: datetime


# --- Pasajeros ---

class PasajeroCreate(BaseModel):
    client_id: int
    numero_asiento: Optional[int] = Field(None, ge=1, description="Grupales, individuales y aéreos")
    numero_cabina: Optional[str] = Field(None, max_length=20, description="Cruceros")
    pagado: bool = False


class PasajeroUpdate(BaseModel):
    numero_asiento: Optional[int] = Field(None, ge=1)
    numero_cabina: Optional[str] = Field(None, max_length=20)
    pagado: Optional[bool] = None


class CambioAsiento(BaseModel):
    numero_asiento: int = Field(..., ge=1)


class Pasajero(BaseModel):
    id: int
    trip_id: int
    client_id: int
    fecha_reserva: datetime
    pagado: bool
    numero_asiento: Optional[int] = None
    numero_cabina: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PagoPasajeroCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
