# agencia/schemas/bus.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from ..models.enums import TipoServicioEnum

class BusBase(BaseModel):
    patente: str = Field(..., min_length=1, max_length=20, description="Patente del bus")
    asientos: int = Field(..., gt=0, description="Cantidad de asientos")
    tipo_servicio: TipoServicioEnum
    imagen_distribucion: Optional[str] = Field(None, max_length=255, description="Ruta de la imagen de distribución")

class BusCreate(BusBase):
    pass

class BusUpdate(BaseModel):
    patente: Optional[str] = Field(None, min_length=1, max_length=20)
    asientos: Optional[int] = Field(None, gt=0)
    tipo_servicio: Optional[TipoServicioEnum] = None
    imagen_distribucion: Optional[str] = Field(None, max_length=255)

class Bus(BusBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
