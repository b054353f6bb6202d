# agencia/models/pasajero_viaje.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from .base import Base


class PasajeroViaje(Base):
    """Vincula un cliente con un viaje (asiento o cabina según el tipo de viaje)."""
    __tablename__ = "trip_passengers"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    fecha_reserva = Column(DateTime, default=datetime.now, nullable=False)
    pagado = Column(Boolean, default=False, nullable=False)
    numero_asiento = Column(Integer, nullable=True) # Grupales, individuales y aéreos
    numero_cabina = Column(String(20), nullable=True) # Cruceros

    created_at = Column(DateTime, default=func.now(), nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=True)

    # Solo relaciones hijo -> padre
    viaje = relationship("Viaje")
    cliente = relationship("Cliente")

    def __repr__(self):
        return f"<PasajeroViaje(id={self.id}, trip_id={self.trip_id}, client_id={self.client_id})>"
