# agencia/schemas/cuenta.py
from decimal import Decimal
from typing import List, Literal, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from ..models.enums import MonedaEnum


class SaldoCuenta(BaseModel):
    total_charges: Decimal
    total_payments: Decimal
    balance: Decimal


class Transaccion(BaseModel):
    id: str
    date: Optional[datetime] = None
    type: Literal["charge", "payment"]
    description: str
    amount: Decimal
    currency: MonedaEnum
    trip_id: Optional[int] = None
    receipt_number: Optional[str] = None
    payment_id: Optional[int] = None


class TotalesMoneda(BaseModel):
    total_charges: Decimal
    total_payments: Decimal
    total_pending: Decimal
    total_receipts: int


class ResumenRecibos(BaseModel):
    """Versión reducida de los totales para operadores."""
    currency: MonedaEnum
    total_receipts: int


class CuentaCliente(BaseModel):
    client_id: int
    name: str
    dni: Optional[str] = None
    total_charges: Decimal
    total_payments: Decimal
    balance: Decimal
    estado: Literal["deudor", "al_dia", "a_favor"]


class EstadoCuenta(BaseModel):
    client_id: int
    currency: MonedaEnum
    saldo: SaldoCuenta
    transacciones: List[Transaccion]


class ViajeTransferible(BaseModel):
    id: int
    destino: str
    fecha_salida: datetime
    importe: Decimal
    currency: MonedaEnum

    model_config = ConfigDict(from_attributes=True)


class RegistroHuerfano(BaseModel):
    tabla: Literal["trip_passengers", "payments"]
    id: int
    trip_id: Optional[int] = None
    client_id: Optional[int] = None
    motivo: str


class ReporteIntegridad(BaseModel):
    is_valid: bool
    orphaned_trip_passengers: List[RegistroHuerfano]
    orphaned_payments: List[RegistroHuerfano]
