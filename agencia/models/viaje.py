# agencia/models/viaje.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey, Enum, func
from sqlalchemy.orm import relationship

from .base import Base
from .enums import MonedaEnum, TipoViajeEnum


class Viaje(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    bus_id = Column(Integer, ForeignKey("buses.id"), nullable=True) # Solo para viajes grupales
    destino = Column(String(150), nullable=False)
    fecha_salida = Column(DateTime, nullable=False)
    fecha_regreso = Column(DateTime, nullable=False)
    importe = Column(Numeric(12, 2), nullable=False)
    currency = Column(Enum(MonedaEnum), default=MonedaEnum.ARS, nullable=False)
    type = Column(Enum(TipoViajeEnum), default=TipoViajeEnum.grupal, nullable=False)
    descripcion = Column(Text, nullable=False, default="")

    # Campos específicos para cruceros
    naviera = Column(String(100), nullable=True)
    barco = Column(String(100), nullable=True)
    cabina = Column(String(50), nullable=True) # Tipo de cabina

    # Campos específicos para aéreos
    aerolinea = Column(String(100), nullable=True)
    numero_vuelo = Column(String(20), nullable=True)
    clase = Column(String(30), nullable=True)
    escalas = Column(String(255), nullable=True)

    archived = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=func.now(), nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=True)

    bus = relationship("Bus")

    def __repr__(self):
        return f"<Viaje(id={self.id}, destino='{self.destino}', importe={self.importe} {self.currency})>"
