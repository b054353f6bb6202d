# agencia/schemas/pago.py
from decimal import Decimal
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.enums import MonedaEnum, TipoPagoEnum


class PagoBase(BaseModel):
    client_id: int
    trip_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: MonedaEnum = MonedaEnum.ARS
    type: TipoPagoEnum = TipoPagoEnum.payment
    description: str = ""
    receipt_number: Optional[str] = Field(None, max_length=50)


class PagoCreate(PagoBase):
    pass


class PagoUpdate(BaseModel):
    client_id: Optional[int] = None
    trip_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    currency: Optional[MonedaEnum] = None
    type: Optional[TipoPagoEnum] = None
    description: Optional[str] = None
    receipt_number: Optional[str] = Field(None, max_length=50)

    @field_validator('client_id', 'amount', 'currency', 'type', 'description')
    @classmethod
    def rechazar_nulos(cls, v):
        if v is None:
            raise ValueError("El campo no puede ser nulo.")
        return v


class Pago(PagoBase):
    id: int
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class TransferenciaPagoCreate(BaseModel):
    to_trip_id: int = Field(..., description="Viaje de destino")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
