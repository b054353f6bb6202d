# agencia/models/pago.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey, Enum, func
from sqlalchemy.orm import relationship

from .base import Base
from .enums import MonedaEnum, TipoPagoEnum


class Pago(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(Enum(MonedaEnum), default=MonedaEnum.ARS, nullable=False)
    type = Column(Enum(TipoPagoEnum), default=TipoPagoEnum.payment, nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime, default=datetime.now, nullable=False)
    receipt_number = Column(String(50), nullable=True)

    created_at = Column(DateTime, default=func.now(), nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=True)

    cliente = relationship("Cliente")
    viaje = relationship("Viaje")

    def __repr__(self):
        return f"<Pago(id={self.id}, client_id={self.client_id}, amount={self.amount}, type='{self.type}')>"
