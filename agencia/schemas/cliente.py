# agencia/schemas/cliente.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date, datetime


class ClienteBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, description="Apellido y nombre")
    email: Optional[str] = Field(None, max_length=100)
    phone: str = Field(..., max_length=30)
    address: str = Field(..., description="Dirección")
    dni: str = Field(..., min_length=1, max_length=20)
    fecha_nacimiento: date
    vencimiento_dni: Optional[date] = None
    numero_pasaporte: Optional[str] = Field(None, max_length=30)
    vencimiento_pasaporte: Optional[date] = None

    @field_validator('name', 'dni')
    @classmethod
    def validate_string_fields(cls, v):
        if not v.strip():
            raise ValueError("El campo no puede estar vacío.")
        return v.strip()

    @field_validator('email', 'numero_pasaporte')
    @classmethod
    def empty_as_none(cls, v):
        # Los formularios envían "" para campos opcionales vacíos
        if v is not None and not v.strip():
            return None
        return v


class ClienteCreate(ClienteBase):
    pass


class ClienteUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    dni: Optional[str] = Field(None, min_length=1, max_length=20)
    fecha_nacimiento: Optional[date] = None
    vencimiento_dni: Optional[date] = None
    numero_pasaporte: Optional[str] = Field(None, max_length=30)
    vencimiento_pasaporte: Optional[date] = None


class Cliente(ClienteBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ClienteDocumentos(BaseModel):
    """Cliente con el estado de sus documentos de viaje."""
    id: int
    name: str
    dni: str
    vencimiento_dni: Optional[date] = None
    vencimiento_pasaporte: Optional[date] = None
    dni_vencido: bool = False
    pasaporte_vencido: bool = False

    model_config = ConfigDict(from_attributes=True)


class ImportacionResultado(BaseModel):
    importados: int
    message: str
